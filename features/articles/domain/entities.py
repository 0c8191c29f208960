"""
Domain entities for the article extraction feature.

All entities are immutable values owned by a single extraction call.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Literal, Optional


Category = Literal["community", "sports", "business", "government", "education", "events"]

CATEGORIES = ("community", "sports", "business", "government", "education", "events")


@dataclass(frozen=True)
class PageLine:
    """A single line of text as it appeared on one page of the source PDF."""

    text: str
    is_bold: bool = False
    page: int = 1
    y: float = 0.0


@dataclass(frozen=True)
class ExtractedDocument:
    """Text layer of a PDF: concatenated page text plus per-line metadata."""

    full_text: str
    lines: List[PageLine] = field(default_factory=list)
    pages: int = 0


@dataclass(frozen=True)
class HeadlineCandidate:
    """A span of the document hypothesized to be an article title."""

    title: str
    start: int
    end: int
    confidence: float
    author: Optional[str] = None
    page: Optional[int] = None
    source: str = ""

    def __post_init__(self):
        if self.start >= self.end:
            raise ValueError(f"Candidate span must be non-empty: start={self.start}, end={self.end}")
        if self.confidence < 0:
            raise ValueError(f"Candidate confidence must be >= 0, got {self.confidence}")


@dataclass(frozen=True)
class Article:
    """Article draft produced by the segmenter."""

    title: str
    author: str
    body: str
    category: Category
    word_count: int
    description: str
    featured: bool = False
    slug: str = ""
    date: str = ""
    tags: List[str] = field(default_factory=list)
    paragraphs: List[str] = field(default_factory=list)
    image: Optional[str] = None


@dataclass
class SegmentationReport:
    """Articles plus how they were obtained."""

    articles: List[Article] = field(default_factory=list)
    raw_candidates: int = 0
    accepted_candidates: int = 0
    used_fallback: bool = False
