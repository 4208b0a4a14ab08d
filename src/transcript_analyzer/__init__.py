# ============================================================================
# src/transcript_analyzer/__init__.py
# ============================================================================
"""
Clinical Transcript Analyzer

Finds notable conversation patterns (rallies and patient monologues) in
clinical transcripts with an LLM, reconciles repeated analysis runs into one
deduplicated, date-normalized result set and exports it as TSV.
"""

from .core import (
    RawFinding,
    Finding,
    normalize_date,
    finding_signature,
    deduplicate_findings,
    ResultReconciler,
    fan_out,
)
from .export import to_tsv, write_tsv
from .service import TranscriptAnalysisService

__version__ = "1.0.0"

__all__ = [
    "RawFinding",
    "Finding",
    "normalize_date",
    "finding_signature",
    "deduplicate_findings",
    "ResultReconciler",
    "fan_out",
    "to_tsv",
    "write_tsv",
    "TranscriptAnalysisService",
]
