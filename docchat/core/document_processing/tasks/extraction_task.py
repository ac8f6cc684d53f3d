"""
Text extraction task.

Converts a document payload into plain text: UTF-8 passthrough for
text/plain, LangChain PyPDFLoader for PDF, python-docx for DOCX.

Dependencies: langchain_community.document_loaders, docx
System role: First stage of document ingestion pipeline
"""

import io
import logging
import shutil
import tempfile
from pathlib import Path

import docx
from langchain_community.document_loaders import PyPDFLoader

from docchat.configs.uploads import DOCX_MEDIA_TYPE, PDF_MEDIA_TYPE, TEXT_MEDIA_TYPE
from docchat.core.exceptions import ExtractionError, UnsupportedMediaTypeError

logger = logging.getLogger(__name__)


class ExtractionTask:
    """Extract plain text from supported document formats."""

    SUPPORTED_MEDIA_TYPES = (TEXT_MEDIA_TYPE, PDF_MEDIA_TYPE, DOCX_MEDIA_TYPE)

    def extract(self, data: bytes, media_type: str) -> str:
        """
        Extract text from a document payload.

        Args:
            data: Raw document bytes
            media_type: Declared media type

        Returns:
            str: Extracted text (may be empty)

        Raises:
            UnsupportedMediaTypeError: When media_type is not supported
            ExtractionError: When the payload cannot be parsed
        """
        if media_type == TEXT_MEDIA_TYPE:
            return data.decode("utf-8", errors="replace")
        if media_type == PDF_MEDIA_TYPE:
            return self._extract_pdf(data)
        if media_type == DOCX_MEDIA_TYPE:
            return self._extract_docx(data)
        raise UnsupportedMediaTypeError(media_type)

    def _extract_pdf(self, data: bytes) -> str:
        temp_dir = tempfile.mkdtemp(prefix="docchat_extract_")
        try:
            path = Path(temp_dir) / "document.pdf"
            path.write_bytes(data)
            pages = PyPDFLoader(str(path)).load()
            return "\n\n".join(page.page_content for page in pages)
        except Exception as e:
            raise ExtractionError(f"Failed to parse PDF: {e}", PDF_MEDIA_TYPE) from e
        finally:
            shutil.rmtree(temp_dir, ignore_errors=True)

    def _extract_docx(self, data: bytes) -> str:
        try:
            document = docx.Document(io.BytesIO(data))
        except Exception as e:
            raise ExtractionError(f"Failed to parse DOCX: {e}", DOCX_MEDIA_TYPE) from e
        return "\n".join(paragraph.text for paragraph in document.paragraphs)
