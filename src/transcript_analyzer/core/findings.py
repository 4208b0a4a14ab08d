# ============================================================================
# src/transcript_analyzer/core/findings.py
# ============================================================================
"""
Finding records
- RawFinding: one conversation pattern as reported by the model (unvalidated)
- Finding: the reconciled record with a resolved date string
"""

from dataclasses import dataclass, asdict
from typing import Any, Dict, Union

ReceptionNumber = Union[str, int, float]

# Wire keys used by the model's JSON and by API consumers
WIRE_FIELDS = ("date", "receptionNumber", "type", "excerpt", "summary")


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


@dataclass(frozen=True)
class RawFinding:
    date: str = ""
    reception_number: ReceptionNumber = ""
    type: str = ""  # "ラリー", "モノローグ", ... passed through as-is
    excerpt: str = ""
    summary: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RawFinding":
        """
        Build from one element of the model's JSON array.

        Missing keys and nulls become empty strings. Numeric reception
        numbers are kept as numbers until export.
        """
        reception_number = data.get("receptionNumber")
        if reception_number is None:
            reception_number = ""
        elif isinstance(reception_number, bool) or not isinstance(reception_number, (str, int, float)):
            reception_number = str(reception_number)

        return cls(
            date=_as_text(data.get("date")),
            reception_number=reception_number,
            type=_as_text(data.get("type")),
            excerpt=_as_text(data.get("excerpt")),
            summary=_as_text(data.get("summary")),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "date": self.date,
            "receptionNumber": self.reception_number,
            "type": self.type,
            "excerpt": self.excerpt,
            "summary": self.summary,
        }

    def with_date(self, date: str) -> "Finding":
        values = asdict(self)
        values["date"] = date
        return Finding(**values)


@dataclass(frozen=True)
class Finding(RawFinding):
    """Reconciled finding. `date` is canonical YYYY/MM/DD or the placeholder."""
    pass
