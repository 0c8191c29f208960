"""
Interface for segmenting a PDF text layer into article drafts.

Infrastructure adapters (e.g., ArticleSegmenter) implement this interface.
"""

from abc import ABC, abstractmethod
from typing import List, Optional, Sequence

from features.articles.domain.entities import Article, PageLine, SegmentationReport


class IArticleSegmenter(ABC):
    """Port for turning document text into articles."""

    @abstractmethod
    def segment_with_report(
        self,
        full_text: str,
        lines: Optional[Sequence[PageLine]] = None,
    ) -> SegmentationReport:
        """
        Segment the document text into articles.

        Args:
            full_text: Concatenated page text, pages separated by blank lines
            lines: Optional per-line metadata; without it only text-based
                detectors run

        Returns:
            Report whose articles are in document order. Articles are empty
            only when the text is empty.
        """
        raise NotImplementedError

    def segment(
        self,
        full_text: str,
        lines: Optional[Sequence[PageLine]] = None,
    ) -> List[Article]:
        return self.segment_with_report(full_text, lines).articles
