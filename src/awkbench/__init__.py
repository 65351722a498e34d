"""awkbench: comparative benchmarks for AWK implementations."""

__version__ = "0.1.0"
