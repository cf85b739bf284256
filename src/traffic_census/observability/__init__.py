"""
Observability Module
====================

Console rendering of aggregation results.
"""

from traffic_census.observability.formatter import format_json, format_text, render

__all__ = ["format_json", "format_text", "render"]
