"""
Usage text and run-configuration summary.

Pure formatting: both functions return strings and make no decisions beyond
choosing which explanation to show for a value. Printing is left to the caller.
"""

import os
from typing import Mapping, Optional

from xferbench.config.env_vars import TransferSettings
from xferbench.patterns.fill_pattern import DEFAULT_FILL_MODULUS, DEFAULT_FILL_OFFSET


USAGE_LINES = [
    ("USE_HIP_CALL", "Use hipMemcpy/hipMemset instead of custom shader kernels for GPU-executed copies"),
    ("USE_MEMSET", "Perform a memset instead of a copy (ignores source memory)"),
    ("USE_SINGLE_SYNC", "Perform synchronization only once after all iterations instead of per iteration"),
    ("USE_INTERACTIVE", "Pause for user-input before starting transfer loop"),
    ("COMBINE_TIMING", "Combines timing with launch (potentially lower timing overhead)"),
    ("SHOW_ADDR", "Print out memory addresses for each Link"),
    ("OUTPUT_TO_CSV", "Outputs to CSV format if set"),
    ("BYTE_OFFSET", "Initial byte-offset for memory allocations.  Must be multiple of 4. Defaults to 0"),
    ("NUM_WARMUPS=W", "Perform W untimed warmup iteration(s) per test"),
    ("NUM_ITERATIONS=I", "Perform I timed iteration(s) per test"),
    ("SAMPLING_FACTOR=F", "Add F samples (when possible) between powers of 2 when auto-generating data sizes"),
    ("NUM_CPU_PER_LINK=C", "Use C threads per Link for CPU-executed copies"),
    ("FILL_PATTERN=STR", "Fill input buffer with pattern specified in hex digits (0-9,a-f,A-F).  Must be even number of digits"),
]


def format_usage() -> str:
    """Describe every environment variable the benchmark recognises."""
    lines = ["Environment variables:", "=" * 22]
    for name, description in USAGE_LINES:
        lines.append(f" {name:<18} - {description}")
    return "\n".join(lines)


def _row(name: str, value, explanation: str) -> str:
    return f"{name:<20} = {str(value):>12} : {explanation}"


def format_run_summary(
    settings: TransferSettings,
    environ: Optional[Mapping[str, str]] = None,
) -> str:
    """
    Format the settings a run will use, one row per variable.

    **Functionally**:
      - Returns "" when CSV output is requested (the CSV stream stays clean).
      - Each row reads `NAME = value : explanation`.
      - When GPU copies go through hipMemcpy, an extra HSA_ENABLE_SDMA row says
        whether the runtime uses blit kernels ("0") or DMA engines.
      - The FILL_PATTERN row shows the pattern text, or the default-fill formula.

    Args:
        settings: Loaded TransferSettings.
        environ: Mapping to read HSA_ENABLE_SDMA from. Defaults to os.environ.

    Returns:
        Multi-line summary text (no trailing newline), or "" in CSV mode.
    """
    if settings.output_to_csv:
        return ""
    if environ is None:
        environ = os.environ

    s = settings
    lines = ["Run configuration", "=" * 53]
    lines.append(_row(
        "USE_HIP_CALL", s.use_hip_call,
        f"Using {'HIP functions' if s.use_hip_call else 'custom kernels'} for GPU-executed copies",
    ))
    lines.append(_row(
        "USE_MEMSET", s.use_memset,
        f"Performing {'memset' if s.use_memset else 'memcopy'}",
    ))
    if s.uses_hip_copy:
        sdma = environ.get("HSA_ENABLE_SDMA")
        lines.append(_row(
            "HSA_ENABLE_SDMA", sdma if sdma is not None else "(unset)",
            "Using blit kernels for hipMemcpy" if sdma == "0" else "Using DMA copy engines",
        ))
    lines.append(_row(
        "USE_SINGLE_SYNC", s.use_single_sync,
        "Synchronizing only once, after all iterations" if s.use_single_sync
        else "Synchronizing per iteration",
    ))
    lines.append(_row(
        "USE_INTERACTIVE", s.use_interactive,
        f"Running in {'interactive' if s.use_interactive else 'non-interactive'} mode",
    ))
    lines.append(_row(
        "COMBINE_TIMING", s.combine_timing,
        "Using combined timing+launch" if s.combine_timing else "Using separate timing / launch",
    ))
    lines.append(_row(
        "SHOW_ADDR", s.show_addr,
        "Displaying src/dst mem addresses" if s.show_addr else "Not displaying src/dst mem addresses",
    ))
    lines.append(_row("OUTPUT_TO_CSV", s.output_to_csv, "Output to console"))
    lines.append(_row("BYTE_OFFSET", s.byte_offset, f"Using byte offset of {s.byte_offset}"))
    lines.append(_row(
        "NUM_WARMUPS", s.num_warmups,
        f"Running {s.num_warmups} warmup iteration(s) per topology",
    ))
    lines.append(_row(
        "NUM_ITERATIONS", s.num_iterations,
        f"Running {s.num_iterations} timed iteration(s) per topology",
    ))
    lines.append(_row(
        "SAMPLING_FACTOR", s.sampling_factor,
        f"Adding {s.sampling_factor} sample(s) between powers of 2",
    ))
    lines.append(_row(
        "NUM_CPU_PER_LINK", s.num_cpu_per_link,
        f"Using {s.num_cpu_per_link} CPU thread(s) per CPU-based-copy Link",
    ))

    specified = "(specified)" if s.fill_pattern_text is not None else "(unspecified)"
    if s.fill_pattern:
        fill_text = f"Pattern: {s.fill_pattern_text}"
    else:
        fill_text = (
            f"Pseudo-random: (Element i = i modulo {DEFAULT_FILL_MODULUS} "
            f"+ {DEFAULT_FILL_OFFSET})"
        )
    lines.append(_row("FILL_PATTERN", specified, fill_text))

    return "\n".join(lines)
