"""
File to text extraction
"""

from .text_extractor import TextExtractor, extract_text, extract_file

__all__ = ["TextExtractor", "extract_text", "extract_file"]
