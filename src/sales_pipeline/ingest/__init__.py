"""Ingestion of the warehouse & retail sales CSV.

Reads the raw file with Dask (every column as text), checks the header, and
hands the frame to the cleaning step.
"""
