"""
Configuration loading and validation for transfer benchmark runs.

Reads the benchmark's environment variables into an immutable, validated
TransferSettings record with upfront (fail-fast) range checks.
"""
