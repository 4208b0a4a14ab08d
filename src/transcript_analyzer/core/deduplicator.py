# ============================================================================
# src/transcript_analyzer/core/deduplicator.py
# ============================================================================
"""
Excerpt-based deduplication of findings.

Repeated analysis runs over the same transcript quote the same passage even
when the summary or type wording drifts, so the quoted excerpt is the
identity of a finding: whitespace removed, first 50 characters.

Whitespace is Python's Unicode whitespace class: it covers U+3000 but not U+FEFF,
and it also matches the separators U+001C to U+001F.
"""

import re
from typing import Iterable, List, Optional, TypeVar

from ..config import reconciliation_settings
from .findings import RawFinding

WHITESPACE = re.compile(r"\s")

F = TypeVar("F", bound=RawFinding)


def finding_signature(item: RawFinding, length: Optional[int] = None) -> str:
    """Whitespace-free excerpt prefix. Empty when the excerpt is missing or blank."""
    length = length or reconciliation_settings.SIGNATURE_LENGTH
    excerpt = item.excerpt or ""
    return WHITESPACE.sub("", excerpt)[:length]


def deduplicate_findings(items: Iterable[F], length: Optional[int] = None) -> List[F]:
    """
    Drop findings whose signature was already seen, keeping the first.

    Findings without an excerpt (empty signature) are never treated as
    duplicates of each other and are all kept.
    """
    unique: List[F] = []
    seen = set()

    for item in items:
        signature = finding_signature(item, length)
        if signature:
            if signature in seen:
                continue
            seen.add(signature)
        unique.append(item)

    return unique
