"""
Spreadsheet export
"""

from .tsv_exporter import HEADERS, to_tsv, write_tsv

__all__ = ["HEADERS", "to_tsv", "write_tsv"]
