# ============================================================================
# src/transcript_analyzer/core/__init__.py
# ============================================================================
"""
Core reconciliation pipeline.
"""

from .findings import RawFinding, Finding, WIRE_FIELDS
from .date_normalizer import normalize_date
from .deduplicator import finding_signature, deduplicate_findings
from .reconciler import ResultReconciler, fan_out

__all__ = [
    "RawFinding",
    "Finding",
    "WIRE_FIELDS",
    "normalize_date",
    "finding_signature",
    "deduplicate_findings",
    "ResultReconciler",
    "fan_out",
]
