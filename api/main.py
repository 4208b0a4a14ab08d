# ============================================================================
# api/main.py
# ============================================================================
"""
FastAPI Backend for the Clinical Transcript Analyzer

Provides REST API for transcript analysis and TSV export.
Results are not stored: every request returns a fresh result set.
"""

import sys
import logging
from pathlib import Path
from typing import List, Union

logger = logging.getLogger(__name__)

from fastapi import Depends, FastAPI, File, HTTPException, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import Response
from pydantic import BaseModel, Field

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from contextlib import asynccontextmanager

from transcript_analyzer.config import logging_settings
from transcript_analyzer.core.findings import Finding, RawFinding
from transcript_analyzer.service import TranscriptAnalysisService
from transcript_analyzer.utils.exceptions import (
    AnalysisError,
    DocumentReadError,
    InputError,
)
from transcript_analyzer.utils.logging import setup_logging


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging(
        level=logging_settings.LOG_LEVEL,
        log_file=logging_settings.LOG_FILE,
        format_json=logging_settings.LOG_JSON,
    )
    logger.info("Transcript analyzer API started")
    yield


app = FastAPI(
    title="Clinical Transcript Analyzer API",
    description="Conversation pattern analysis of clinical transcripts",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ============================================================================
# Models
# ============================================================================

class FindingModel(BaseModel):
    date: str = ""
    receptionNumber: Union[int, float, str] = ""
    type: str = ""
    excerpt: str = ""
    summary: str = ""


class AnalyzeRequest(BaseModel):
    text: str
    file_name: str = ""


class AnalyzeResponse(BaseModel):
    file_name: str
    count: int
    findings: List[FindingModel]


class ExportRequest(BaseModel):
    findings: List[FindingModel] = Field(default_factory=list)


# ============================================================================
# Dependencies
# ============================================================================

async def get_service():
    """One service per request; the API key comes from settings."""
    service = TranscriptAnalysisService()
    try:
        yield service
    finally:
        await service.close()


def _response(file_name: str, findings: List[Finding]) -> AnalyzeResponse:
    return AnalyzeResponse(
        file_name=file_name,
        count=len(findings),
        findings=[FindingModel(**finding.to_dict()) for finding in findings],
    )


# ============================================================================
# Endpoints
# ============================================================================

@app.get("/api/health")
async def health():
    """Health check for monitoring."""
    return {"status": "healthy"}


@app.post("/api/analyze", response_model=AnalyzeResponse)
async def analyze(
    request: AnalyzeRequest,
    service: TranscriptAnalysisService = Depends(get_service),
):
    """
    Analyze pasted transcript text.

    Raises:
        HTTPException 400: Empty text or API key not configured
        HTTPException 502: Analysis failed (no partial results are returned)
    """
    try:
        findings = await service.analyze_text(request.text, request.file_name)
    except InputError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except AnalysisError as e:
        raise HTTPException(status_code=502, detail=f"エラーが発生しました: {e}")

    return _response(request.file_name, findings)


@app.post("/api/analyze-file", response_model=AnalyzeResponse)
async def analyze_file(
    file: UploadFile = File(...),
    service: TranscriptAnalysisService = Depends(get_service),
):
    """
    Upload a transcript (.txt or .docx) and analyze it.

    The file name is used as the date fallback, e.g. 2025-03-07_patient.txt.
    """
    content = await file.read()
    file_name = file.filename or ""

    try:
        findings = await service.analyze_file(file_name, content)
    except (InputError, DocumentReadError) as e:
        raise HTTPException(status_code=400, detail=str(e))
    except AnalysisError as e:
        raise HTTPException(status_code=502, detail=f"エラーが発生しました: {e}")

    return _response(file_name, findings)


@app.post("/api/export/tsv")
async def export_tsv(
    request: ExportRequest,
    service: TranscriptAnalysisService = Depends(get_service),
):
    """
    Serialize findings as TSV for pasting into a spreadsheet.

    Raises:
        HTTPException 400: No findings to export
    """
    findings = [RawFinding.from_dict(item.model_dump()) for item in request.findings]
    payload = service.export_tsv(findings)
    if payload is None:
        raise HTTPException(status_code=400, detail="No findings to export")

    return Response(
        content=payload,
        media_type="text/tab-separated-values; charset=utf-8",
    )
