"""Benchmarking engine for awkbench.

Provides candidate discovery, timed subprocess execution, the
warmup/measurement protocol, statistical aggregation of timings and
the geometric-mean ranking across programs.
"""
