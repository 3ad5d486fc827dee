"""
Human-readable reports: the environment-variable usage text and the
run-configuration summary printed before a benchmark starts.
"""
