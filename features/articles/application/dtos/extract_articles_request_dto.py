"""
DTO for PDF article extraction request.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional


@dataclass
class ExtractArticlesRequestDTO:
    """
    Input for the full pipeline: PDF text layer extraction + segmentation.
    """

    pdf_path: str
    max_pages: int | None = None  # Limit processing to first N pages
    section_hints: Optional[List[str]] = None
    default_author: Optional[str] = None
    date: Optional[str] = None
