"""
Parsing Module
==============

Turns raw log lines into typed observations.
"""

from traffic_census.parsing.record_parser import ParseError, RecordParser, RecordSchema

__all__ = ["ParseError", "RecordParser", "RecordSchema"]
