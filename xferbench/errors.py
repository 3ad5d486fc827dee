"""
Configuration error types shared by the loader and the pattern decoder.

**Conceptual**: Every configuration problem is fatal for a benchmark run: the
numbers a run produces are meaningless if the warmup count is negative or the
fill pattern is garbage. Rather than exiting from deep inside the loader, each
problem is raised as a typed exception carrying the offending variable and the
rule it broke. Only the entry point turns it into a one-line diagnostic and a
non-zero exit status, which keeps the loader testable.

**Error taxonomy**:
  - Format errors (FillPatternError): odd-length hex string, non-hex character.
  - Range errors (RangeValidationError): misaligned byte offset, negative warmup
    count, non-positive iteration count, sampling factor or CPU thread count
    below 1.

Malformed numeric text is NOT an error at all: it degrades to a best-effort
integer (see parse_int_lenient) and then meets the normal range checks.
"""

from enum import Enum
from typing import Optional


class ConfigErrorKind(Enum):
    """Which rule a configuration value violated."""
    ODD_LENGTH_PATTERN = "odd-length pattern"
    INVALID_HEX_DIGIT = "invalid hex digit"
    INVALID_BYTE_OFFSET = "invalid byte offset"
    INVALID_WARMUP_COUNT = "invalid warmup count"
    INVALID_ITERATION_COUNT = "invalid iteration count"
    INVALID_SAMPLING_FACTOR = "invalid sampling factor"
    INVALID_CPU_THREAD_COUNT = "invalid worker-thread count"
    INVALID_PATTERN_LENGTH = "invalid pattern length"


class ConfigurationError(ValueError):
    """
    Base exception for an invalid benchmark configuration.

    **Usage**: Catch this at the entry point, print format_fatal() to stderr
    and exit non-zero. Catch a subclass for finer handling.

    Attributes:
        variable: Environment variable at fault (e.g., "NUM_ITERATIONS").
        rule: Human-readable rule text (e.g., "must be set to a positive number").
        kind: ConfigErrorKind identifying the violated rule.
    """

    def __init__(self, variable: str, rule: str, kind: ConfigErrorKind):
        self.variable = variable
        self.rule = rule
        self.kind = kind
        super().__init__(f"{variable} {rule}")

    def format_fatal(self) -> str:
        """Return the one-line diagnostic printed before the process exits."""
        return f"[ERROR] {self}"


class FillPatternError(ConfigurationError):
    """
    Raised when FILL_PATTERN is not an even-length string of hex digits.

    Attributes:
        character: The first offending character for INVALID_HEX_DIGIT, else None.
    """

    def __init__(self, rule: str, kind: ConfigErrorKind, character: Optional[str] = None):
        self.character = character
        super().__init__("FILL_PATTERN", rule, kind)


class RangeValidationError(ConfigurationError):
    """
    Raised when an integer option falls outside its allowed range.

    Attributes:
        value: The integer that failed the check.
    """

    def __init__(self, variable: str, rule: str, kind: ConfigErrorKind, value: int):
        self.value = value
        super().__init__(variable, rule, kind)
