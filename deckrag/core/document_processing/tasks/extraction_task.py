"""
Text extraction task.

Turns a document URL plus its declared file type into plain text. The
file type is matched by substring, so both MIME types and loose labels
("Word document", "plain") work.

Dependencies: pypdf, python-docx, deckrag.core.document_processing.tasks.download_task
System role: Text extraction stage of document ingestion pipeline
"""

import io
import logging
from enum import Enum

import docx
from pypdf import PdfReader

from deckrag.core.document_processing.tasks.download_task import DownloadTask
from deckrag.core.exceptions import TextExtractionError, UnsupportedFileTypeError

logger = logging.getLogger(__name__)


class SourceFormat(str, Enum):
    PDF = "pdf"
    WORD = "word"
    TEXT = "text"


def resolve_format(file_type: str) -> SourceFormat:
    """
    Pick an extractor for a declared file type.

    Checked in order: pdf, then word/document, then text/plain.

    Raises:
        UnsupportedFileTypeError: Nothing matches
    """
    lowered = (file_type or "").lower()
    if "pdf" in lowered:
        return SourceFormat.PDF
    if "word" in lowered or "document" in lowered:
        return SourceFormat.WORD
    if "text" in lowered or "plain" in lowered:
        return SourceFormat.TEXT
    raise UnsupportedFileTypeError(file_type)


def _pdf_text(content: bytes) -> str:
    reader = PdfReader(io.BytesIO(content))
    return "\n".join(page.extract_text() or "" for page in reader.pages)


def _word_text(content: bytes) -> str:
    document = docx.Document(io.BytesIO(content))
    lines = [paragraph.text for paragraph in document.paragraphs]
    for table in document.tables:
        for row in table.rows:
            lines.append("\t".join(cell.text for cell in row.cells))
    return "\n".join(lines)


def _plain_text(content: bytes) -> str:
    return content.decode("utf-8-sig", errors="replace")


_EXTRACTORS = {
    SourceFormat.PDF: _pdf_text,
    SourceFormat.WORD: _word_text,
    SourceFormat.TEXT: _plain_text,
}


class ExtractionTask:
    """Fetch documents and extract their plain text."""

    def __init__(self, downloader: DownloadTask | None = None) -> None:
        self._downloader = downloader or DownloadTask()

    async def extract(self, file_url: str, file_type: str) -> str:
        """
        Fetch and extract a document.

        The file type is checked before any network call.

        Args:
            file_url: Where to fetch the bytes from
            file_type: Declared content type

        Returns:
            str: Extracted text (may be empty)

        Raises:
            UnsupportedFileTypeError: No extractor for file_type
            DocumentFetchError: Download failed
            TextExtractionError: Bytes could not be parsed in the declared format
        """
        source_format = resolve_format(file_type)
        content = await self._downloader.download(file_url)
        return self.extract_bytes(content, file_type, source_format)

    def extract_bytes(
        self,
        content: bytes,
        file_type: str,
        source_format: SourceFormat | None = None,
    ) -> str:
        """
        Extract text from already-fetched bytes.

        Args:
            content: Raw document bytes
            file_type: Declared content type
            source_format: Pre-resolved format (resolved from file_type if None)

        Returns:
            str: Extracted text
        """
        source_format = source_format or resolve_format(file_type)
        try:
            text = _EXTRACTORS[source_format](content)
        except Exception as e:
            raise TextExtractionError(
                f"Failed to extract {source_format.value} text: {e}",
                file_type=file_type,
            ) from e

        logger.info(
            f"{__name__}:extract_bytes - Extracted text",
            extra={"source_format": source_format.value, "text_length": len(text)},
        )
        return text
