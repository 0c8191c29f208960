"""
Interface for reading the text layer of a PDF.

Infrastructure adapters (PyMuPDF, pdfplumber + OCR) implement this interface.
"""

from abc import ABC, abstractmethod
from typing import Optional

from features.articles.domain.entities import ExtractedDocument


class ILineExtractor(ABC):
    """Port for PDF text-layer extraction."""

    @abstractmethod
    def extract(self, pdf_path: str, max_pages: Optional[int] = None) -> ExtractedDocument:
        """
        Extract concatenated text and per-line metadata from a PDF.

        Raises:
            PdfExtractionError: if the file cannot be opened or parsed
        """
        raise NotImplementedError
