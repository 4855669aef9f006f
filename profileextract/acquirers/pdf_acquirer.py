"""
PDF document acquirer.

Turns an uploaded PDF (for example a LinkedIn "Save to PDF" export) into
plain text. The uploaded file is always removed once extraction finishes.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from pypdf import PdfReader

from ..errors import ExtractionFailed, InvalidInput, PayloadTooLarge, UnsupportedMediaType
from ..logging_utils import LOG
from ..settings import MAX_UPLOAD_BYTES
from ..shared import DocumentText, normalize_text_for_processing
from .base import SourceAcquirer

PDF_MEDIA_TYPE = "application/pdf"


class PdfAcquirer(SourceAcquirer):
    """Extract plain text from an uploaded PDF file."""

    def __init__(self, max_bytes: int = MAX_UPLOAD_BYTES, **kwargs):
        self.max_bytes = int(max_bytes)

    def acquire(self, source: Path, media_type: Optional[str] = PDF_MEDIA_TYPE) -> DocumentText:
        """
        Extract text from the PDF at `source`, then delete it.

        Args:
            source: Path of the uploaded (temporary) file.
            media_type: Declared media type of the upload.

        Returns:
            DocumentText with the extracted text and page count.

        Raises:
            InvalidInput: No file was given.
            UnsupportedMediaType: The declared media type is not application/pdf.
            PayloadTooLarge: The file exceeds the size ceiling.
            ExtractionFailed: The PDF is unreadable or holds no text.
        """
        if source is None:
            raise InvalidInput("No file uploaded")

        source = Path(source)
        try:
            if media_type != PDF_MEDIA_TYPE:
                raise UnsupportedMediaType(detail=f"got {media_type!r}")

            size = source.stat().st_size
            if size > self.max_bytes:
                raise PayloadTooLarge(
                    f"File too large. Maximum size is {self.max_bytes // (1024 * 1024)}MB.",
                    detail=f"{size} bytes",
                )

            text, pages = self._extract_text(source)
        finally:
            source.unlink(missing_ok=True)

        if not text.strip():
            raise ExtractionFailed()

        LOG.info("Extracted %d characters from %d PDF page(s)", len(text), pages)
        return DocumentText(text=text, pages=pages)

    def _extract_text(self, source: Path) -> tuple[str, int]:
        try:
            reader = PdfReader(str(source))
            parts = [page.extract_text() or "" for page in reader.pages]
        except Exception as e:
            # pypdf reports malformed object graphs as arbitrary built-in errors, not only PdfReadError.
            raise ExtractionFailed(
                "Invalid PDF file. Please upload a valid PDF.", detail=str(e)
            ) from e
        return normalize_text_for_processing("\n".join(parts)), len(parts)
