# ============================================================================
# src/transcript_analyzer/extractors/text_extractor.py
# ============================================================================
"""
Transcript text extraction from uploaded files.

Handles:
- Plain text (.txt, .md, .csv, anything else): UTF-8, BOM tolerated
- Word documents (.docx): paragraph text via python-docx
- Google Docs shortcuts (.gdoc): rejected; the file is only a link and has
  to be downloaded as Word first
"""

import asyncio
import io
import logging
import zipfile
from pathlib import Path
from typing import Union

from docx import Document
from docx.opc.exceptions import PackageNotFoundError

from ..utils.exceptions import TextExtractionError, UnsupportedFormatError

logger = logging.getLogger(__name__)

UNSUPPORTED_EXTENSIONS = {
    '.gdoc': "Googleドキュメント(.gdoc)は直接読み込めません。Word形式でダウンロードしてからアップロードしてください。",
}

WORD_EXTENSIONS = {'.docx'}


class TextExtractor:
    """
    Turns an uploaded file into transcript text.

    Usage:
        extractor = TextExtractor()
        text = await extractor.extract("2025-03-07_patient.docx", content)
    """

    def extract_sync(self, file_name: str, content: bytes) -> str:
        """
        Synchronous extraction.

        Raises:
            UnsupportedFormatError: Container format cannot be read as text
            TextExtractionError: File could not be read or decoded
        """
        suffix = Path(file_name or "").suffix.lower()

        if suffix in UNSUPPORTED_EXTENSIONS:
            raise UnsupportedFormatError(UNSUPPORTED_EXTENSIONS[suffix], file_name=file_name)

        if suffix in WORD_EXTENSIONS:
            text = self._extract_docx(file_name, content)
        else:
            text = self._decode_text(file_name, content)

        logger.debug(f"Extracted {len(text)} chars from {file_name}")
        return text

    async def extract(self, file_name: str, content: bytes) -> str:
        """Extract text without blocking the event loop (python-docx is sync)."""
        return await asyncio.to_thread(self.extract_sync, file_name, content)

    def _extract_docx(self, file_name: str, content: bytes) -> str:
        try:
            document = Document(io.BytesIO(content))
        except (PackageNotFoundError, zipfile.BadZipFile, ValueError, KeyError) as e:
            logger.warning(f"Could not open Word document {file_name}: {e}")
            raise TextExtractionError(f"ファイルの読み込みに失敗しました。 ({file_name}: {e})") from e

        return "\n".join(paragraph.text for paragraph in document.paragraphs)

    def _decode_text(self, file_name: str, content: bytes) -> str:
        try:
            return content.decode("utf-8-sig")
        except UnicodeDecodeError as e:
            logger.warning(f"{file_name} is not valid UTF-8: {e}")
            raise TextExtractionError(f"ファイルの読み込みに失敗しました。 ({file_name} is not UTF-8 text)") from e


async def extract_text(file_name: str, content: bytes) -> str:
    """Convenience wrapper around TextExtractor.extract."""
    return await TextExtractor().extract(file_name, content)


async def extract_file(path: Union[str, Path]) -> str:
    """Read a file from disk and extract its text."""
    path = Path(path)
    try:
        content = await asyncio.to_thread(path.read_bytes)
    except OSError as e:
        raise TextExtractionError(f"ファイルの読み込みに失敗しました。 ({path}: {e})") from e
    return await extract_text(path.name, content)
