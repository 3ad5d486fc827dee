"""
Fill-pattern decoding and source-data generation.

Turns the FILL_PATTERN hex string into an element-aligned byte buffer and
produces the float32 values a transfer's source buffer starts with.
"""
