"""
Fill-pattern decoding and source-buffer fill generation.

**Conceptual**: Before a transfer is timed, its source buffer is initialised so
the destination can be checked afterwards. By default every float32 element
gets a pseudo-random-looking value `(i mod 383) + 31`. A user can instead ask
for a deterministic byte pattern through FILL_PATTERN, written as hex digits
("DEADBEEF", "CAFE", "AB"...). This module turns that hex string into a byte
buffer and turns either source into float32 elements.

**Alignment**: The data element is a 4-byte float32, so the decoded buffer
must tile 4 bytes. A hex string of L digits decodes to L/2 bytes; replicating
it `copies` times, with copies chosen from L mod 8, always gives a multiple
of 4 bytes:

    L mod 8 == 0  ->  copies = 1   (L/2 is already a multiple of 4)
    L mod 8 == 4  ->  copies = 2   (L/2 is even, doubling reaches 4)
    otherwise     ->  copies = 4   (L/2 is odd when L is even and L mod 4 == 2)

**Output type**: decode_fill_pattern returns plain `bytes`. Reinterpreting the
bytes as float32 is a separate, explicit step (pattern_to_elements) performed
on a copy, so the decoder never aliases a numeric buffer.
"""

import logging
from typing import Optional

import numpy as np

from xferbench.errors import ConfigErrorKind, FillPatternError


logger = logging.getLogger(__name__)

# Size in bytes of one data element (float32)
ELEMENT_SIZE = 4

# Default fill: element i = (i % DEFAULT_FILL_MODULUS) + DEFAULT_FILL_OFFSET
DEFAULT_FILL_MODULUS = 383
DEFAULT_FILL_OFFSET = 31


def compute_pattern_copies(length: int) -> int:
    """
    Number of times a hex string of `length` digits is repeated so that the
    decoded byte count is a multiple of ELEMENT_SIZE.

    For every even length L >= 2, copies * L is divisible by 8, i.e. the
    decoded byte count copies * L / 2 is a multiple of 4.

    Args:
        length: Number of hex digits (expected even).

    Returns:
        1, 2 or 4.
    """
    remainder = length % 8
    if remainder == 0:
        return 1
    if remainder == 4:
        return 2
    return 4


def decode_hex_digit(char: str) -> int:
    """
    Convert one hex digit (0-9, A-F, a-f) to its value 0..15.

    Raises:
        FillPatternError: If `char` is not a hex digit.
    """
    if "0" <= char <= "9":
        return ord(char) - ord("0")
    if "A" <= char <= "F":
        return ord(char) - ord("A") + 10
    if "a" <= char <= "f":
        return ord(char) - ord("a") + 10
    raise FillPatternError(
        f"must contain only hex digits (0-9/a-f/A-F), not {char!r}",
        ConfigErrorKind.INVALID_HEX_DIGIT,
        character=char,
    )


def decode_fill_pattern(pattern: Optional[str]) -> bytes:
    """
    Decode a FILL_PATTERN hex string into an element-aligned byte buffer.

    **Functionally**:
      - None -> b"" (caller falls back to the default fill).
      - Odd length -> FillPatternError (checked before any digit is looked at).
      - Non-hex character -> FillPatternError naming the first bad character.
      - Otherwise -> `copies * L / 2` bytes made of `copies` back-to-back
        repetitions of the decoded string. Within a pair of digits the first
        is the high nibble and the second the low nibble.

    **Examples**:
      - "AB"       -> AB AB AB AB   (L=2, copies=4)
      - "CAFE"     -> CA FE CA FE   (L=4, copies=2)
      - "DEADBEEF" -> DE AD BE EF   (L=8, copies=1)

    **Edge cases**:
      - "" decodes to b"" (L=0 is even and 0 bytes tile trivially).
      - Digits are case-insensitive: "cafe" == "CAFE".
      - L counts characters, not UTF-8 bytes: "\u00e90" is one non-hex
        character plus a digit, so it fails as odd length rather than as an
        invalid digit. Either way the pattern is rejected.

    Args:
        pattern: Raw FILL_PATTERN value, or None if the variable is unset.

    Returns:
        Decoded bytes; length is always a multiple of ELEMENT_SIZE.

    Raises:
        FillPatternError: On odd length or a non-hex character.
    """
    if pattern is None:
        return b""

    length = len(pattern)
    if length % 2:
        raise FillPatternError(
            "must contain an even-number of hex digits",
            ConfigErrorKind.ODD_LENGTH_PATTERN,
        )

    copies = compute_pattern_copies(length)
    buffer = bytearray(copies * length // 2)

    for c in range(copies):
        value = 0
        for i, char in enumerate(pattern):
            value = (value << 4) | decode_hex_digit(char)
            # Second digit of a pair completes one byte
            if i % 2:
                buffer[(c * length + i) // 2] = value
                value = 0

    logger.debug(
        "Decoded FILL_PATTERN of %d hex digits into %d bytes (%d copies)",
        length, len(buffer), copies,
    )
    return bytes(buffer)


def pattern_to_elements(pattern_bytes: bytes) -> np.ndarray:
    """
    Reinterpret a decoded fill pattern as native-endian float32 elements.

    The returned array owns its memory (np.frombuffer result is copied), so it
    is writable and independent of the input bytes.

    Raises:
        ValueError: If the byte count is not a multiple of ELEMENT_SIZE.
    """
    if len(pattern_bytes) % ELEMENT_SIZE:
        raise ValueError(
            f"Fill pattern length must be a multiple of {ELEMENT_SIZE} bytes, "
            f"got: {len(pattern_bytes)}"
        )
    return np.frombuffer(pattern_bytes, dtype=np.float32).copy()


def generate_default_fill(num_elements: int) -> np.ndarray:
    """Default source data: element i = float32((i % 383) + 31)."""
    indices = np.arange(num_elements, dtype=np.int64)
    return ((indices % DEFAULT_FILL_MODULUS) + DEFAULT_FILL_OFFSET).astype(np.float32)


def generate_source_fill(num_elements: int, pattern_bytes: bytes = b"") -> np.ndarray:
    """
    Build the float32 values a transfer's source buffer is initialised with.

    **Functionally**:
      - Empty pattern -> generate_default_fill(num_elements).
      - Otherwise the pattern elements are cycled: element i = pattern[i % n],
        where n is the number of float32 elements in the pattern.

    Args:
        num_elements: Number of float32 elements in the source buffer (>= 0).
        pattern_bytes: Output of decode_fill_pattern (b"" for the default).

    Returns:
        numpy float32 array of length num_elements.
    """
    if num_elements < 0:
        raise ValueError(f"num_elements must be non-negative, got: {num_elements}")

    if not pattern_bytes:
        return generate_default_fill(num_elements)

    elements = pattern_to_elements(pattern_bytes)
    repeats = -(-num_elements // len(elements))  # ceil division
    return np.tile(elements, repeats)[:num_elements]
