"""
Tests for the main.py entry point.

The environment is injected as a dict, so the tests never depend on (or
change) the real process environment.
"""

from main import main


def test_main_prints_summary_and_succeeds(capsys):
    """A valid configuration prints the summary and returns 0."""
    status = main([], environ={"NUM_ITERATIONS": "5"})

    captured = capsys.readouterr()
    assert status == 0
    assert "Run configuration" in captured.out
    assert "Running 5 timed iteration(s) per topology" in captured.out
    assert captured.err == ""


def test_main_usage(capsys):
    """--usage prints the variable list without loading anything."""
    status = main(["--usage"], environ={"NUM_ITERATIONS": "0"})

    captured = capsys.readouterr()
    assert status == 0
    assert "Environment variables:" in captured.out


def test_main_zero_iterations_is_fatal(capsys):
    """NUM_ITERATIONS=0 prints one [ERROR] line on stderr and returns 1."""
    status = main([], environ={"NUM_ITERATIONS": "0"})

    captured = capsys.readouterr()
    assert status == 1
    assert captured.err.strip() == "[ERROR] NUM_ITERATIONS must be set to a positive number"
    assert captured.out == ""


def test_main_misaligned_byte_offset_is_fatal(capsys):
    """BYTE_OFFSET=6 names BYTE_OFFSET in the diagnostic."""
    status = main([], environ={"BYTE_OFFSET": "6"})

    captured = capsys.readouterr()
    assert status == 1
    assert captured.err.startswith("[ERROR] BYTE_OFFSET ")


def test_main_bad_pattern_is_fatal(capsys):
    """A non-hex FILL_PATTERN is reported as a FILL_PATTERN error."""
    status = main([], environ={"FILL_PATTERN": "1g"})

    captured = capsys.readouterr()
    assert status == 1
    assert captured.err.startswith("[ERROR] FILL_PATTERN ")


def test_main_csv_mode_prints_nothing(capsys):
    """OUTPUT_TO_CSV suppresses the summary."""
    status = main([], environ={"OUTPUT_TO_CSV": "1"})

    captured = capsys.readouterr()
    assert status == 0
    assert captured.out == ""
