#!/usr/bin/env python3
"""
Decode a fill pattern and show what a transfer's source buffer would hold.

**Purpose**: Check a FILL_PATTERN value before starting a long benchmark run:
  1. Decode the hex string (same rules the benchmark applies).
  2. Print the decoded bytes and the replication factor used.
  3. Print the first N float32 source elements the run would write.

**Usage**:
    From project root:
    ```bash
    python actions/show_fill_pattern.py --pattern CAFE
    python actions/show_fill_pattern.py --elements 8            # default fill
    FILL_PATTERN=DEADBEEF python actions/show_fill_pattern.py   # from environment
    ```

Exit status is 0 on success and 2 on an invalid pattern.
"""

import argparse
import os
import sys
from pathlib import Path
from typing import Optional

# Ensure project root is on path for imports
repo_root = Path(__file__).parent.parent
if str(repo_root) not in sys.path:
    sys.path.insert(0, str(repo_root))

from xferbench.errors import FillPatternError
from xferbench.patterns.fill_pattern import (
    ELEMENT_SIZE,
    compute_pattern_copies,
    decode_fill_pattern,
    generate_source_fill,
)


def format_fill_preview(pattern: Optional[str], num_elements: int) -> str:
    """
    Build the preview text for a FILL_PATTERN value.

    Args:
        pattern: Hex digits, or None for the default fill.
        num_elements: Number of float32 source elements to list.

    Returns:
        Multi-line preview: banner, decoded bytes and copies (when a pattern
        is given), then one line per source element.

    Raises:
        FillPatternError: If the pattern is malformed.
    """
    pattern_bytes = decode_fill_pattern(pattern)

    lines = ["=" * 60, "Fill pattern preview", "=" * 60]
    if pattern is None:
        lines.append("Pattern: (unspecified) -> pseudo-random default fill")
    else:
        lines.append(f"Pattern: {pattern!r} ({len(pattern)} hex digits)")
        lines.append(f"Copies: {compute_pattern_copies(len(pattern))}")
        lines.append(f"Bytes ({len(pattern_bytes)}): {pattern_bytes.hex(' ').upper()}")
        lines.append(f"Float32 elements in pattern: {len(pattern_bytes) // ELEMENT_SIZE}")
    lines.append("")

    values = generate_source_fill(num_elements, pattern_bytes)
    for i, value in enumerate(values):
        lines.append(f"  [{i:4d}] {float(value)!r}")
    lines.append("=" * 60)
    return "\n".join(lines)


def main():
    parser = argparse.ArgumentParser(
        description="Decode a FILL_PATTERN hex string and preview source buffer values.",
    )
    parser.add_argument(
        "--pattern",
        default=None,
        help="Hex digits to decode. Default: the FILL_PATTERN environment variable.",
    )
    parser.add_argument(
        "--elements",
        type=int,
        default=8,
        help="Number of float32 source elements to preview (default: 8).",
    )
    args = parser.parse_args()

    if args.elements < 0:
        print(f"ERROR: --elements must be non-negative, got: {args.elements}", file=sys.stderr)
        sys.exit(2)

    pattern = args.pattern if args.pattern is not None else os.environ.get("FILL_PATTERN")

    try:
        preview = format_fill_preview(pattern, args.elements)
    except FillPatternError as e:
        print(e.format_fatal(), file=sys.stderr)
        sys.exit(2)

    print(preview)


if __name__ == "__main__":
    main()
