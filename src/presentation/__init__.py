"""Presentation helpers: CSV export, statistics and viewer links."""

from src.presentation.export import csv_filename, fields_to_csv
from src.presentation.links import generate_bookmarklet, record_viewer_url, viewer_endpoint
from src.presentation.stats import RecordStats, build_stats

__all__ = [
    "RecordStats",
    "build_stats",
    "csv_filename",
    "fields_to_csv",
    "generate_bookmarklet",
    "record_viewer_url",
    "viewer_endpoint",
]
