# ============================================================================
# src/transcript_analyzer/service.py
# ============================================================================
"""
Transcript Analysis Service

Entry point used by the API: validates input, runs the reconciliation
against an analysis client and hands findings to the exporter.

Usage:
    async with TranscriptAnalysisService(api_key="...") as service:
        findings = await service.analyze_text(text, "2025-03-07_patient.txt")
        payload = service.export_tsv(findings)
"""

import logging
from typing import Any, Dict, List, Optional, Sequence

from .core.findings import Finding, RawFinding
from .core.reconciler import AnalyzeFn, ResultReconciler
from .export.tsv_exporter import to_tsv
from .extractors.text_extractor import TextExtractor
from .llm.base import BaseAnalysisClient
from .llm.gemini_client import GeminiAnalysisClient
from .utils.exceptions import InputError
from .utils.logging import log_performance

logger = logging.getLogger(__name__)


class TranscriptAnalysisService:
    """
    Args:
        api_key: Gemini API key (default: GEMINI_API_KEY setting)
        client: Analysis client to use instead of building a Gemini client
        analyze: Bare analysis capability, analyze(file_name, text);
            takes precedence over client
        config: Reconciler config (run_count, default_year, date_placeholder)
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        client: Optional[BaseAnalysisClient] = None,
        analyze: Optional[AnalyzeFn] = None,
        config: Optional[Dict[str, Any]] = None
    ):
        self.api_key = api_key
        self._client = client
        self._analyze = analyze
        self.reconciler = ResultReconciler(config)
        self.extractor = TextExtractor()

    def _get_analyze(self) -> AnalyzeFn:
        if self._analyze is not None:
            return self._analyze
        if self._client is None:
            # Raises InputError when no API key is configured
            self._client = GeminiAnalysisClient(api_key=self.api_key)
        return self._client.analyze

    @log_performance(logger, "Transcript analysis")
    async def analyze_text(self, text: str, file_name: str = "") -> List[Finding]:
        """
        Analyze transcript text.

        Raises:
            InputError: Text is empty or no API key is configured
            AnalysisError: Any analysis run failed
        """
        if not text or not text.strip():
            raise InputError("文字起こしテキストを入力してください。 (transcript text is empty)")

        analyze = self._get_analyze()
        return await self.reconciler.reconcile(file_name, text, analyze)

    async def analyze_file(self, file_name: str, content: bytes) -> List[Finding]:
        """Extract text from an uploaded file, then analyze it."""
        text = await self.extractor.extract(file_name, content)
        return await self.analyze_text(text, file_name)

    def export_tsv(self, findings: Optional[Sequence[RawFinding]]) -> Optional[str]:
        """TSV payload, or None when there is nothing to export."""
        return to_tsv(findings)

    async def close(self):
        if self._client is not None:
            await self._client.close()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
