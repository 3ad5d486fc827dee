"""
xferbench – environment-driven configuration for memory-transfer benchmarks.
"""
