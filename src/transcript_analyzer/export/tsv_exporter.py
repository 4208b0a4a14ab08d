# ============================================================================
# src/transcript_analyzer/export/tsv_exporter.py
# ============================================================================
"""
TSV export for pasting into spreadsheets.

One header line, then one line per finding. Fields are tab-separated and
every data field is double-quoted with embedded quotes doubled, so excerpts
containing tabs, newlines or quotes survive a paste into Google Sheets or
Excel. Column order: date, receptionNumber, type, excerpt, summary.
"""

import logging
from pathlib import Path
from typing import Any, Optional, Sequence

from ..core.findings import RawFinding

logger = logging.getLogger(__name__)

HEADERS = ("日付", "受付番号", "種別", "実際の会話（抜粋）", "内容の要約")


def _as_cell(value: Any) -> str:
    if value is None:
        return ""
    # JSON 1024.0 is the number 1024: write it the way a spreadsheet shows it
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _quote(value: Any) -> str:
    text = _as_cell(value)
    return '"' + text.replace('"', '""') + '"'


def _row(finding: RawFinding) -> str:
    return "\t".join([
        _quote(finding.date),
        _quote(finding.reception_number),
        _quote(finding.type),
        _quote(finding.excerpt),
        _quote(finding.summary),
    ])


def to_tsv(results: Optional[Sequence[RawFinding]]) -> Optional[str]:
    """
    Serialize findings as a TSV payload.

    Returns:
        The payload, or None when there is nothing to export. None is not an
        empty table: callers must not paste or save it.
    """
    if not results:
        return None

    lines = ["\t".join(HEADERS)]
    lines.extend(_row(finding) for finding in results)
    return "\n".join(lines)


def write_tsv(results: Optional[Sequence[RawFinding]], path: Path) -> bool:
    """
    Write the TSV payload to a UTF-8 file.

    Returns:
        True if written, False when there was nothing to export
    """
    payload = to_tsv(results)
    if payload is None:
        logger.warning("No findings to export")
        return False

    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(payload, encoding="utf-8")
    logger.info(f"Exported {len(results)} findings to {path}")
    return True
