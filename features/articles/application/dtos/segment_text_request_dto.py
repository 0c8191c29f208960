"""
DTO for segmenting already-extracted text.
"""

from dataclasses import dataclass
from typing import List, Optional

from .page_line_dto import PageLineDTO


@dataclass
class SegmentTextRequestDTO:
    """
    Input for segmenting a text layer into articles.

    Without lines, only the text-based detectors (byline, date, sections) run.
    """
    full_text: str
    lines: Optional[List[PageLineDTO]] = None
    section_hints: Optional[List[str]] = None  # Overrides configured recurring sections
    default_author: Optional[str] = None  # Overrides configured fallback author
    date: Optional[str] = None  # ISO date stamped on every article (default: today)
