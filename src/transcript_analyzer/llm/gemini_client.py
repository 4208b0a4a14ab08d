# ============================================================================
# src/transcript_analyzer/llm/gemini_client.py
# ============================================================================
"""
Gemini Analysis Client

Calls the Generative Language REST API (generateContent) with the analysis
system instruction and JSON response mode, and parses the returned text into
RawFinding records.

Setup:
    1. Create an API key in Google AI Studio
    2. Put it in .env: GEMINI_API_KEY=...
"""

import aiohttp
import asyncio
import json
from typing import Any, Dict, List, Optional, Tuple
from datetime import datetime

from ..config import analysis_settings
from ..core.findings import RawFinding
from ..utils.exceptions import AnalysisError, InputError, MalformedResponseError
from .base import BaseAnalysisClient, parse_findings
from .prompts import ANALYSIS_SYSTEM_PROMPT, build_user_prompt


def _decode_body(body: str) -> Optional[Any]:
    try:
        return json.loads(body) if body else None
    except json.JSONDecodeError:
        return None


def _error_message(data: Any) -> str:
    """Upstream error message, e.g. {"error": {"message": "API key not valid"}}."""
    if isinstance(data, dict):
        error = data.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
    return "API Error"


def _response_text(data: Dict[str, Any]) -> Optional[str]:
    """candidates[0].content.parts[0].text, or None if any step is missing."""
    try:
        return data["candidates"][0]["content"]["parts"][0]["text"]
    except (KeyError, IndexError, TypeError):
        return None


class GeminiAnalysisClient(BaseAnalysisClient):
    """
    Gemini-based transcript analysis client.

    The API key is passed in explicitly (or read once from settings); the
    client never stores it anywhere else.

    Config options:
        model: Model name (default: GEMINI_MODEL)
        api_base: REST base URL (default: GEMINI_API_BASE)
        temperature: Sampling temperature (default: ANALYSIS_TEMPERATURE)
        timeout: Per-request timeout in seconds (default: ANALYSIS_TIMEOUT)
        system_prompt: Override the analysis system instruction
    """

    def __init__(self, api_key: Optional[str] = None, config: Optional[Dict[str, Any]] = None):
        super().__init__(config)

        self.api_key = api_key if api_key is not None else analysis_settings.GEMINI_API_KEY
        if not self.api_key:
            raise InputError("APIキーが設定されていません。 (GEMINI_API_KEY is not set)")

        self._model_name = self.config.get('model', analysis_settings.GEMINI_MODEL)
        self.api_base = self.config.get('api_base', analysis_settings.GEMINI_API_BASE).rstrip('/')
        self.temperature = self.config.get('temperature', analysis_settings.ANALYSIS_TEMPERATURE)
        self.timeout = self.config.get('timeout', analysis_settings.ANALYSIS_TIMEOUT)
        self.system_prompt = self.config.get('system_prompt', ANALYSIS_SYSTEM_PROMPT)

        # HTTP session (created lazily, tied to event loop)
        self._session: Optional[aiohttp.ClientSession] = None
        self._session_loop: Optional[asyncio.AbstractEventLoop] = None

        self.logger.info(f"Initialized Gemini client: {self._model_name}")

    @property
    def model_name(self) -> str:
        return self._model_name

    @property
    def endpoint(self) -> str:
        return f"{self.api_base}/models/{self._model_name}:generateContent"

    def build_payload(self, file_name: str, text: str) -> Dict[str, Any]:
        return {
            "contents": [{"parts": [{"text": build_user_prompt(file_name, text)}]}],
            "systemInstruction": {"parts": [{"text": self.system_prompt}]},
            "generationConfig": {
                "responseMimeType": "application/json",
                "temperature": self.temperature,
            },
        }

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create HTTP session for current event loop."""
        current_loop = asyncio.get_running_loop()

        needs_new_session = (
            self._session is None
            or self._session.closed
            or self._session_loop is not current_loop
        )

        if needs_new_session:
            if self._session is not None and not self._session.closed and not self._session_loop.is_closed():
                await self._session.close()

            timeout = aiohttp.ClientTimeout(total=None, sock_connect=30)
            self._session = aiohttp.ClientSession(timeout=timeout)
            self._session_loop = current_loop

        return self._session

    async def close(self):
        """Close HTTP session."""
        if self._session and not self._session.closed:
            await self._session.close()
        self._session = None
        self._session_loop = None

    async def _post(self, payload: Dict[str, Any]) -> Tuple[int, str]:
        """POST to generateContent, returning (status, body text)."""
        session = await self._get_session()
        async with session.post(self.endpoint, params={"key": self.api_key}, json=payload) as response:
            return response.status, await response.text()

    async def analyze(self, file_name: str, text: str) -> List[RawFinding]:
        """
        Analyze one transcript with Gemini.

        Args:
            file_name: Source file name (sent to the model, may hold the date)
            text: Transcript text

        Returns:
            Findings in response order ([] when the model found none)

        Raises:
            AnalysisError: Transport failure, timeout or non-200 status
            MalformedResponseError: Response text is not a findings array
        """
        start_time = datetime.now()
        payload = self.build_payload(file_name, text)

        try:
            status, body = await asyncio.wait_for(self._post(payload), timeout=self.timeout)
        except asyncio.TimeoutError as e:
            self._failure_count += 1
            self.logger.error(f"Gemini request timed out after {self.timeout}s (model={self._model_name})")
            raise AnalysisError(f"Analysis request timed out after {self.timeout}s", cause=e) from e
        except aiohttp.ClientError as e:
            self._failure_count += 1
            self.logger.error(f"Gemini request failed: {e}")
            raise AnalysisError(f"Cannot reach Gemini API: {e}", cause=e) from e

        data = _decode_body(body)

        if status != 200:
            self._failure_count += 1
            message = _error_message(data)
            self.logger.error(f"Gemini error ({status}): {message}")
            raise AnalysisError(message)

        if not isinstance(data, dict):
            self._failure_count += 1
            raise MalformedResponseError("Gemini returned a non-JSON body", response_text=body[:500])

        try:
            findings = parse_findings(_response_text(data))
        except MalformedResponseError:
            self._failure_count += 1
            raise

        request_time = (datetime.now() - start_time).total_seconds()
        self._request_count += 1
        self._total_request_time += request_time

        self.logger.info(f"Gemini returned {len(findings)} findings in {request_time:.2f}s")
        return findings

    async def health_check(self) -> Dict[str, Any]:
        """
        Check that the API key is accepted and the model exists.
        """
        try:
            session = await self._get_session()
            url = f"{self.api_base}/models/{self._model_name}"
            async with session.get(url, params={"key": self.api_key}) as response:
                if response.status != 200:
                    data = _decode_body(await response.text())
                    return {
                        "healthy": False,
                        "model": self._model_name,
                        "details": f"Gemini returned status {response.status}: {_error_message(data)}"
                    }

                return {
                    "healthy": True,
                    "model": self._model_name,
                    "details": "Gemini API reachable and model available"
                }

        except aiohttp.ClientError as e:
            return {
                "healthy": False,
                "model": self._model_name,
                "details": f"Cannot connect to Gemini API: {e}"
            }
