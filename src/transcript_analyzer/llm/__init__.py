# ============================================================================
# src/transcript_analyzer/llm/__init__.py
# ============================================================================
"""
LLM analysis clients
"""

from .base import BaseAnalysisClient, parse_findings
from .gemini_client import GeminiAnalysisClient
from .prompts import ANALYSIS_SYSTEM_PROMPT, FINDING_TYPES, build_user_prompt

__all__ = [
    "BaseAnalysisClient",
    "parse_findings",
    "GeminiAnalysisClient",
    "ANALYSIS_SYSTEM_PROMPT",
    "FINDING_TYPES",
    "build_user_prompt",
]
