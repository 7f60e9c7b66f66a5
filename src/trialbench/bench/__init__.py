"""Benchmarking subsystem for trialbench.

Provides tools for generating reproducible workloads, timing a subject
(an external executable or an in-process callable) across a matrix of
workloads and configurations, and comparing the results.
"""
