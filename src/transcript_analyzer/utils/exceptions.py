# ============================================================================
# src/transcript_analyzer/utils/exceptions.py
# ============================================================================
"""
Custom exceptions for the transcript analyzer.
"""

from typing import Optional


class TranscriptAnalyzerError(Exception):
    """Base exception for all transcript analyzer errors."""
    pass


class InputError(TranscriptAnalyzerError):
    """Missing or empty input (transcript text, API key)."""
    pass


class ConfigurationError(TranscriptAnalyzerError):
    """Invalid configuration."""
    pass


class DocumentReadError(TranscriptAnalyzerError):
    """Error turning an uploaded file into text."""
    pass


class UnsupportedFormatError(DocumentReadError):
    """File container cannot be converted to text."""
    def __init__(self, message: str, file_name: str = ""):
        super().__init__(message)
        self.file_name = file_name


class TextExtractionError(DocumentReadError):
    """Generic failure reading or decoding a supported file."""
    pass


class AnalysisError(TranscriptAnalyzerError):
    """
    The analysis capability failed.

    The whole reconciliation is aborted; `cause` carries the underlying
    exception when there is one.
    """
    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.cause = cause


class MalformedResponseError(AnalysisError):
    """Upstream content did not parse as a list of finding objects."""
    def __init__(self, message: str, response_text: str = "", cause: Optional[BaseException] = None):
        super().__init__(message, cause)
        self.response_text = response_text
