"""Cleaning utilities for the pipeline.

Provides the partition-level normalization of raw sales rows (column names,
text trimming, numeric coercion) and validation into `SalesRecord` models.
"""
