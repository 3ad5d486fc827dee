"""
Tests for xferbench/reporting/summary.py
"""

import pytest

from xferbench.config.env_vars import TransferSettings
from xferbench.reporting.summary import USAGE_LINES, format_run_summary, format_usage


@pytest.fixture
def default_settings():
    return TransferSettings.from_env({})


def test_format_usage_lists_every_variable():
    """Each recognised variable appears once in the usage text."""
    usage = format_usage()

    assert usage.startswith("Environment variables:")
    for name in (
        "USE_HIP_CALL", "USE_MEMSET", "USE_SINGLE_SYNC", "USE_INTERACTIVE",
        "COMBINE_TIMING", "SHOW_ADDR", "OUTPUT_TO_CSV", "BYTE_OFFSET",
        "NUM_WARMUPS", "NUM_ITERATIONS", "SAMPLING_FACTOR", "NUM_CPU_PER_LINK",
        "FILL_PATTERN",
    ):
        assert f" {name}" in usage
    assert len(usage.splitlines()) == 2 + len(USAGE_LINES)


def test_format_run_summary_defaults(default_settings):
    """Test the summary for an all-default configuration."""
    summary = format_run_summary(default_settings, environ={})

    assert summary.startswith("Run configuration")
    assert "Using custom kernels for GPU-executed copies" in summary
    assert "Performing memcopy" in summary
    assert "Running 3 warmup iteration(s) per topology" in summary
    assert "Running 10 timed iteration(s) per topology" in summary
    assert "Using 4 CPU thread(s) per CPU-based-copy Link" in summary
    assert "(unspecified)" in summary
    assert "Pseudo-random: (Element i = i modulo 383 + 31)" in summary
    assert "HSA_ENABLE_SDMA" not in summary


def test_format_run_summary_row_layout(default_settings):
    """Rows are 'NAME<pad to 20> = <value right-aligned to 12> : text'."""
    summary = format_run_summary(default_settings, environ={})

    row = next(line for line in summary.splitlines() if line.startswith("NUM_WARMUPS"))
    assert row == f"{'NUM_WARMUPS':<20} = {'3':>12} : Running 3 warmup iteration(s) per topology"


def test_format_run_summary_empty_in_csv_mode():
    """CSV output suppresses the summary entirely."""
    settings = TransferSettings.from_env({"OUTPUT_TO_CSV": "1"})

    assert format_run_summary(settings, environ={}) == ""


def test_format_run_summary_shows_pattern():
    """A specified pattern is echoed back instead of the default formula."""
    settings = TransferSettings.from_env({"FILL_PATTERN": "CAFE"})

    summary = format_run_summary(settings, environ={})

    assert "(specified)" in summary
    assert "Pattern: CAFE" in summary
    assert "Pseudo-random" not in summary


def test_format_run_summary_empty_pattern_is_specified_but_default():
    """FILL_PATTERN='' is set, yet decodes to nothing: default fill."""
    settings = TransferSettings.from_env({"FILL_PATTERN": ""})

    summary = format_run_summary(settings, environ={})

    assert "(specified)" in summary
    assert "Pseudo-random" in summary


def test_format_run_summary_sdma_row_for_hip_copies():
    """HIP copies report whether blit kernels or DMA engines are used."""
    settings = TransferSettings.from_env({"USE_HIP_CALL": "1"})

    blit = format_run_summary(settings, environ={"HSA_ENABLE_SDMA": "0"})
    dma = format_run_summary(settings, environ={})

    assert "Using blit kernels for hipMemcpy" in blit
    assert "Using DMA copy engines" in dma
    assert "(unset)" in dma


def test_format_run_summary_no_sdma_row_for_hip_memset():
    """hipMemset does not copy, so no SDMA row."""
    settings = TransferSettings.from_env({"USE_HIP_CALL": "1", "USE_MEMSET": "1"})

    summary = format_run_summary(settings, environ={"HSA_ENABLE_SDMA": "0"})

    assert "HSA_ENABLE_SDMA" not in summary
    assert "Performing memset" in summary
