"""
Data Files Layer.

This package downloads round archives, extracts them and reads the
statistical files they contain into DataFrames.
"""

from .downloader import Downloader
from .extractor import extract_archive
from .reader import READERS, read_format_data, read_round_data

__all__ = [
    "Downloader",
    "READERS",
    "extract_archive",
    "read_format_data",
    "read_round_data",
]
