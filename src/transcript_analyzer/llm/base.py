# ============================================================================
# src/transcript_analyzer/llm/base.py
# ============================================================================
"""
Base Analysis Client Interface

Defines the interface every analysis backend implements and the shared
parsing of the model's JSON output into RawFinding records.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional
import json
import logging

from ..core.findings import RawFinding
from ..utils.exceptions import MalformedResponseError

# Some models wrap the array in an object despite the instruction
WRAPPER_KEYS = ("findings", "results", "items")


def _strip_code_fence(text: str) -> str:
    stripped = text.strip()
    if stripped.startswith("```"):
        stripped = stripped.split("\n", 1)[1] if "\n" in stripped else ""
        if stripped.rstrip().endswith("```"):
            stripped = stripped.rstrip()[:-3]
    return stripped.strip()


def _load_json(text: str) -> Any:
    # Truncated or otherwise broken output is rejected whole, never repaired
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise MalformedResponseError(
            f"Response is not valid JSON: {e}",
            response_text=text,
            cause=e,
        ) from e


def parse_findings(response_text: Optional[str]) -> List[RawFinding]:
    """
    Parse the model's response text into RawFinding records.

    Args:
        response_text: Text part of the model response

    Returns:
        Findings in response order; [] when the response is empty or the
        model reported no findings

    Raises:
        MalformedResponseError: Response is not a JSON array of objects
    """
    if not response_text or not response_text.strip():
        return []

    data = _load_json(_strip_code_fence(response_text))

    if isinstance(data, dict):
        for key in WRAPPER_KEYS:
            if isinstance(data.get(key), list):
                data = data[key]
                break
        else:
            raise MalformedResponseError(
                "Response is a JSON object without a findings array",
                response_text=response_text,
            )

    if not isinstance(data, list):
        raise MalformedResponseError(
            f"Response is JSON {type(data).__name__}, expected an array",
            response_text=response_text,
        )

    findings = []
    for index, item in enumerate(data):
        if not isinstance(item, dict):
            raise MalformedResponseError(
                f"Element {index} of the response is {type(item).__name__}, expected an object",
                response_text=response_text,
            )
        findings.append(RawFinding.from_dict(item))

    return findings


class BaseAnalysisClient(ABC):
    """
    Abstract base class for transcript analysis clients.

    All backends must implement:
    - analyze(): Async analysis of one transcript
    - health_check(): Verify backend is reachable
    """

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        self.config = config or {}
        self.logger = logging.getLogger(self.__class__.__name__)

        self._request_count = 0
        self._failure_count = 0
        self._total_request_time = 0.0

    @property
    @abstractmethod
    def model_name(self) -> str:
        """Return the model identifier."""
        pass

    @abstractmethod
    async def analyze(self, file_name: str, text: str) -> List[RawFinding]:
        """
        Analyze one transcript.

        Returns:
            Findings reported by the model ([] when there are none)

        Raises:
            AnalysisError: The request failed or the response was unusable
        """
        pass

    @abstractmethod
    async def health_check(self) -> Dict[str, Any]:
        """
        Check if the backend is available.

        Returns:
            {"healthy": bool, "model": str, "details": str}
        """
        pass

    async def close(self):
        """Release network resources."""
        pass

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    def get_statistics(self) -> Dict[str, Any]:
        """Get request statistics."""
        avg_time = (
            self._total_request_time / self._request_count
            if self._request_count > 0
            else 0.0
        )

        return {
            "model": self.model_name,
            "request_count": self._request_count,
            "failure_count": self._failure_count,
            "total_request_time": self._total_request_time,
            "average_request_time": avg_time,
        }
