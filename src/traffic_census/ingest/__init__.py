"""
Ingest Module
=============

Reads the traffic log from disk.
"""

from traffic_census.ingest.reader import InputFileError, load_lines

__all__ = ["InputFileError", "load_lines"]
