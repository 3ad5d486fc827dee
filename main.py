"""
xferbench – Main entry point.

Loads the benchmark configuration from the environment and prints the run
summary (or the usage text). An invalid configuration prints one
`[ERROR] <VARIABLE> <rule>` line to stderr and exits with status 1.

Usage:
    python main.py                  # print run configuration
    python main.py --usage          # list recognised environment variables
    python main.py --env-file .env  # merge a .env file first
"""

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import Mapping, Optional, Sequence

from xferbench.config.env_vars import load_env_file, load_settings
from xferbench.errors import ConfigurationError
from xferbench.reporting.summary import format_run_summary, format_usage


logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Show the transfer benchmark configuration read from the environment.",
    )
    parser.add_argument(
        "--usage",
        action="store_true",
        help="Print the recognised environment variables and exit.",
    )
    parser.add_argument(
        "--env-file",
        type=Path,
        default=None,
        help="Merge variables from this .env file (existing variables win).",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: WARNING).",
    )
    return parser


def main(
    argv: Optional[Sequence[str]] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> int:
    """
    Run the configuration front end and return a process exit status.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:]).
        environ: Environment mapping (defaults to os.environ). A .env file is
                 only merged when reading the real process environment.

    Returns:
        0 on success, 1 on an invalid configuration.
    """
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.StreamHandler(),
        ]
    )

    if args.usage:
        print(format_usage())
        return 0

    if environ is None:
        if args.env_file is not None:
            load_env_file(args.env_file)
        environ = os.environ
    elif args.env_file is not None:
        logger.warning("Ignoring --env-file: an explicit environment was supplied")

    try:
        settings = load_settings(environ)
    except ConfigurationError as e:
        print(e.format_fatal(), file=sys.stderr)
        return 1

    summary = format_run_summary(settings, environ)
    if summary:
        print(summary)
    return 0


if __name__ == "__main__":
    sys.exit(main())
