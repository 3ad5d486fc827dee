"""
Environment-variable configuration for transfer benchmark runs.

**Conceptual**: Every knob of a benchmark run (how many warmups, how many timed
iterations, whether to use HIP calls or custom kernels, what to fill source
buffers with) comes from an environment variable. This module reads those
variables once at startup, applies defaults, decodes the fill pattern, and
validates ranges. The result is a single immutable TransferSettings record
passed to every consumer (transfer engine, run summary). There is no module
level singleton: the entry point builds the record and hands it on.

**Fail-fast**: Any invalid value raises a ConfigurationError subclass naming
the variable and the violated rule. Only the first violation is reported.
Turning the error into a diagnostic and an exit status is the entry point's
job, never this module's.

**Lenient integers**: Integer variables follow C `atoi` semantics on purpose
(see parse_int_lenient). "12x" reads as 12 and "abc" as 0. Malformed text is
never an error by itself; it only fails if the resulting integer breaks a
range rule.

This module uses python-dotenv (load_env_file) to merge an optional .env file
and dataclasses for the immutable record.
"""

import logging
import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from dotenv import load_dotenv

from xferbench.errors import ConfigErrorKind, RangeValidationError
from xferbench.patterns.fill_pattern import ELEMENT_SIZE, decode_fill_pattern


logger = logging.getLogger(__name__)

# Default configuration values
DEFAULT_BYTE_OFFSET = 0
DEFAULT_NUM_WARMUPS = 3
DEFAULT_NUM_ITERATIONS = 10
DEFAULT_SAMPLING_FACTOR = 1
DEFAULT_NUM_CPU_PER_LINK = 4

# Mode flags, all defaulting to 0: (field name, environment variable)
MODE_FLAG_VARIABLES = (
    ("use_hip_call", "USE_HIP_CALL"),
    ("use_memset", "USE_MEMSET"),
    ("use_single_sync", "USE_SINGLE_SYNC"),
    ("use_interactive", "USE_INTERACTIVE"),
    ("combine_timing", "COMBINE_TIMING"),
    ("show_addr", "SHOW_ADDR"),
    ("output_to_csv", "OUTPUT_TO_CSV"),
)

# Bounded integers: (field name, environment variable, default)
BOUNDED_INT_VARIABLES = (
    ("byte_offset", "BYTE_OFFSET", DEFAULT_BYTE_OFFSET),
    ("num_warmups", "NUM_WARMUPS", DEFAULT_NUM_WARMUPS),
    ("num_iterations", "NUM_ITERATIONS", DEFAULT_NUM_ITERATIONS),
    ("sampling_factor", "SAMPLING_FACTOR", DEFAULT_SAMPLING_FACTOR),
    ("num_cpu_per_link", "NUM_CPU_PER_LINK", DEFAULT_NUM_CPU_PER_LINK),
)

FILL_PATTERN_VARIABLE = "FILL_PATTERN"

# Characters C isspace() accepts before a number
_ATOI_WHITESPACE = " \t\n\v\f\r"

# A clean integer may only be padded with _ATOI_WHITESPACE characters
_PLAIN_INT_RE = re.compile(r"[ \t\n\v\f\r]*[+-]?[0-9]+[ \t\n\v\f\r]*")


def parse_int_lenient(text: str) -> int:
    """
    Convert text to an integer the way C `atoi` does. Never raises.

    **Functionally**:
      - Leading ASCII whitespace is skipped.
      - One optional '+' or '-' sign is accepted.
      - Decimal digits are consumed up to the first non-digit; the rest of the
        text is ignored.
      - No digits at all gives 0.

    **Examples**:
      - "12"   -> 12
      - "12x"  -> 12
      - " -8"  -> -8
      - "abc"  -> 0
      - "0x10" -> 0
      - ""     -> 0

    **Edge cases**:
      - No 32-bit wrap-around: "99999999999" stays 99999999999.
      - Only ASCII digits count; "１２" (full-width) gives 0.
    """
    stripped = text.lstrip(_ATOI_WHITESPACE)
    sign = 1
    if stripped[:1] in ("+", "-"):
        if stripped[0] == "-":
            sign = -1
        stripped = stripped[1:]

    digits = 0
    value = 0
    for char in stripped:
        if not ("0" <= char <= "9"):
            break
        value = value * 10 + (ord(char) - ord("0"))
        digits += 1

    return sign * value if digits else 0


def get_env_int(environ: Mapping[str, str], name: str, default: int) -> int:
    """
    Read an integer variable, falling back to `default` when it is unset.

    A variable that is present (even as an empty string) is always parsed with
    parse_int_lenient; no range check happens here.
    """
    raw = environ.get(name)
    if raw is None:
        logger.debug("%s = %d (default)", name, default)
        return default

    value = parse_int_lenient(raw)
    if not _PLAIN_INT_RE.fullmatch(raw):
        logger.warning(
            "%s=%r is not a plain integer; using best-effort value %d",
            name, raw, value,
        )
    logger.debug("%s = %d (from environment)", name, value)
    return value


def load_env_file(path: Optional[Path] = None) -> bool:
    """
    Merge a .env file into os.environ without overriding variables already set.

    Args:
        path: .env file to read. None lets python-dotenv search for ".env"
              starting from the current working directory.

    Returns:
        True if at least one variable was read from the file.
    """
    if path is None:
        loaded = load_dotenv(override=False)
    else:
        loaded = load_dotenv(dotenv_path=path, override=False)
    logger.debug("Loaded .env file %s: %s", path or "(search)", loaded)
    return loaded


@dataclass(frozen=True)
class TransferSettings:
    """
    Validated, read-only configuration of a transfer benchmark run.

    **Conceptual**: One record per process, built at startup from the
    environment and passed to every consumer. Frozen, so no consumer can
    mutate it and a concurrent engine can share it without locks.

    **Validation**: __post_init__ enforces every range rule, in this order,
    raising RangeValidationError on the first violation:
      1. byte_offset % 4 == 0
      2. num_warmups >= 0
      3. num_iterations > 0
      4. sampling_factor >= 1
      5. num_cpu_per_link >= 1
      6. len(fill_pattern) % 4 == 0

    Attributes:
        use_hip_call: Use hipMemcpy/hipMemset instead of custom kernels for
                      GPU-executed copies.
        use_memset: Perform a memset instead of a copy (source is ignored).
        use_single_sync: Synchronize once after all iterations instead of
                         after each iteration.
        use_interactive: Pause for user input before the transfer loop.
        combine_timing: Combine timing with kernel launch.
        show_addr: Print src/dst memory addresses for each link.
        output_to_csv: Emit results as CSV (also suppresses the run summary).
        byte_offset: Initial byte offset for memory allocations.
        num_warmups: Untimed warmup iterations per test.
        num_iterations: Timed iterations per test.
        sampling_factor: Extra samples between powers of 2 when data sizes
                         are auto-generated.
        num_cpu_per_link: CPU threads per link for CPU-executed copies.
        fill_pattern: Decoded FILL_PATTERN bytes; b"" means default fill.
        fill_pattern_text: Raw FILL_PATTERN value, None if unset.
    """
    use_hip_call: int = 0
    use_memset: int = 0
    use_single_sync: int = 0
    use_interactive: int = 0
    combine_timing: int = 0
    show_addr: int = 0
    output_to_csv: int = 0
    byte_offset: int = DEFAULT_BYTE_OFFSET
    num_warmups: int = DEFAULT_NUM_WARMUPS
    num_iterations: int = DEFAULT_NUM_ITERATIONS
    sampling_factor: int = DEFAULT_SAMPLING_FACTOR
    num_cpu_per_link: int = DEFAULT_NUM_CPU_PER_LINK
    fill_pattern: bytes = b""
    fill_pattern_text: Optional[str] = None

    def __post_init__(self):
        """Validate settings after initialization."""
        if self.byte_offset % ELEMENT_SIZE:
            raise RangeValidationError(
                "BYTE_OFFSET",
                f"must be set to multiple of {ELEMENT_SIZE}",
                ConfigErrorKind.INVALID_BYTE_OFFSET,
                self.byte_offset,
            )
        if self.num_warmups < 0:
            raise RangeValidationError(
                "NUM_WARMUPS",
                "must be set to a non-negative number",
                ConfigErrorKind.INVALID_WARMUP_COUNT,
                self.num_warmups,
            )
        if self.num_iterations <= 0:
            raise RangeValidationError(
                "NUM_ITERATIONS",
                "must be set to a positive number",
                ConfigErrorKind.INVALID_ITERATION_COUNT,
                self.num_iterations,
            )
        if self.sampling_factor < 1:
            raise RangeValidationError(
                "SAMPLING_FACTOR",
                "must be greater or equal to 1",
                ConfigErrorKind.INVALID_SAMPLING_FACTOR,
                self.sampling_factor,
            )
        if self.num_cpu_per_link < 1:
            raise RangeValidationError(
                "NUM_CPU_PER_LINK",
                "must be greater or equal to 1",
                ConfigErrorKind.INVALID_CPU_THREAD_COUNT,
                self.num_cpu_per_link,
            )
        if len(self.fill_pattern) % ELEMENT_SIZE:
            raise RangeValidationError(
                FILL_PATTERN_VARIABLE,
                f"must decode to a multiple of {ELEMENT_SIZE} bytes",
                ConfigErrorKind.INVALID_PATTERN_LENGTH,
                len(self.fill_pattern),
            )

    @property
    def uses_default_fill(self) -> bool:
        """True when source buffers get the pseudo-random default fill."""
        return not self.fill_pattern

    @property
    def uses_hip_copy(self) -> bool:
        """True when GPU copies go through hipMemcpy (HIP call, not memset)."""
        return bool(self.use_hip_call) and not self.use_memset

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "TransferSettings":
        """
        Load transfer settings from environment variables.

        **Steps**:
          1. Read each mode flag and bounded integer, defaulting when unset.
          2. Decode FILL_PATTERN. A FillPatternError propagates as-is, so
             pattern problems are reported before any range problem.
          3. Construct the record, which runs the range checks.

        **Environment variables**: USE_HIP_CALL, USE_MEMSET, USE_SINGLE_SYNC,
        USE_INTERACTIVE, COMBINE_TIMING, SHOW_ADDR, OUTPUT_TO_CSV (flags,
        default 0), BYTE_OFFSET (0), NUM_WARMUPS (3), NUM_ITERATIONS (10),
        SAMPLING_FACTOR (1), NUM_CPU_PER_LINK (4), FILL_PATTERN (unset).

        Args:
            environ: Mapping to read from. Defaults to os.environ.

        Returns:
            Validated TransferSettings.

        Raises:
            FillPatternError: If FILL_PATTERN is malformed.
            RangeValidationError: If an integer option breaks its range rule.

        Usage example:
            >>> settings = TransferSettings.from_env({"NUM_ITERATIONS": "20"})
            >>> settings.num_iterations
            20
        """
        if environ is None:
            environ = os.environ

        values = {}
        for field_name, variable in MODE_FLAG_VARIABLES:
            values[field_name] = get_env_int(environ, variable, 0)
        for field_name, variable, default in BOUNDED_INT_VARIABLES:
            values[field_name] = get_env_int(environ, variable, default)

        pattern_text = environ.get(FILL_PATTERN_VARIABLE)
        fill_pattern = decode_fill_pattern(pattern_text)

        return cls(
            fill_pattern=fill_pattern,
            fill_pattern_text=pattern_text,
            **values,
        )


def load_settings(environ: Optional[Mapping[str, str]] = None) -> TransferSettings:
    """
    Build the process's TransferSettings from the environment.

    Thin wrapper over TransferSettings.from_env, logging the outcome. Call it
    once at program entry and pass the result to whatever needs it.

    Raises:
        ConfigurationError: (FillPatternError or RangeValidationError) if the
                            environment describes an invalid configuration.
    """
    settings = TransferSettings.from_env(environ)
    logger.info(
        "Loaded transfer settings: %d warmup(s), %d iteration(s), %s fill",
        settings.num_warmups,
        settings.num_iterations,
        "default" if settings.uses_default_fill else "pattern",
    )
    return settings
