"""Benchmark definition and execution engine for benchotron.

Describes a comparison between candidate implementations, runs each
candidate against generated inputs of increasing size, and pivots the
measurements into per-candidate time series.
"""
