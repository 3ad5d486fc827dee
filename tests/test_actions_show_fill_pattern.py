"""
Tests for the fill-pattern preview action.

**Purpose**: Verify the preview text built by format_fill_preview without
going through argparse or the process environment.
"""

import sys
from pathlib import Path

import pytest

# Add project root to path so we can import actions module
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

# Import the preview function directly from the actions script
from actions.show_fill_pattern import format_fill_preview
from xferbench.errors import ConfigErrorKind, FillPatternError


def test_format_fill_preview_default_fill():
    """No pattern: default-fill note and (i % 383) + 31 values."""
    preview = format_fill_preview(None, 3)

    assert "Pattern: (unspecified) -> pseudo-random default fill" in preview
    assert "Copies:" not in preview
    assert "  [   0] 31.0" in preview
    assert "  [   1] 32.0" in preview
    assert "  [   2] 33.0" in preview
    assert "  [   3]" not in preview


def test_format_fill_preview_pattern_bytes_and_copies():
    """'CAFE' shows two copies and the replicated bytes."""
    preview = format_fill_preview("CAFE", 2)

    assert "Pattern: 'CAFE' (4 hex digits)" in preview
    assert "Copies: 2" in preview
    assert "Bytes (4): CA FE CA FE" in preview
    assert "Float32 elements in pattern: 1" in preview
    assert "  [   1]" in preview


def test_format_fill_preview_single_byte_pattern():
    """'AB' is repeated four times to fill one element."""
    preview = format_fill_preview("ab", 0)

    assert "Copies: 4" in preview
    assert "Bytes (4): AB AB AB AB" in preview
    assert "  [   0]" not in preview


def test_format_fill_preview_rejects_bad_pattern():
    """A malformed pattern raises instead of printing a preview."""
    with pytest.raises(FillPatternError) as exc_info:
        format_fill_preview("1g", 4)

    assert exc_info.value.kind == ConfigErrorKind.INVALID_HEX_DIGIT
