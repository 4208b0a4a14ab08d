# ============================================================================
# src/transcript_analyzer/utils/__init__.py
# ============================================================================
"""
Utility modules for the transcript analyzer.
"""

from .exceptions import (
    TranscriptAnalyzerError,
    InputError,
    ConfigurationError,
    DocumentReadError,
    UnsupportedFormatError,
    TextExtractionError,
    AnalysisError,
    MalformedResponseError,
)

from .logging import (
    setup_logging,
    JsonFormatter,
    log_performance,
)

__all__ = [
    # Exceptions
    'TranscriptAnalyzerError',
    'InputError',
    'ConfigurationError',
    'DocumentReadError',
    'UnsupportedFormatError',
    'TextExtractionError',
    'AnalysisError',
    'MalformedResponseError',
    # Logging
    'setup_logging',
    'JsonFormatter',
    'log_performance',
]
