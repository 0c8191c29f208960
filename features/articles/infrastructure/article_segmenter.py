"""
Article segmentation pipeline.

Following clean architecture:
- Implements IArticleSegmenter interface from domain layer
- Infrastructure adapter wiring the heuristic stages together

Pipeline:
  1. Headline candidate detection (independent detectors)
  2. Candidate filter / dedup / overlap resolution / adjacent merge
  3. Article assembly with minimum-body gate
  4. Fallback chunking when too few articles survive

Input: full document text (+ optional page lines)
Output: articles in document order, first one featured
"""

from __future__ import annotations

import logging
from typing import Optional, Sequence

from features.articles.domain.entities import PageLine, SegmentationReport
from features.articles.domain.errors import InsufficientStructureError
from features.articles.domain.interfaces import IArticleSegmenter
from features.articles.infrastructure.article_assembler import assemble_articles
from features.articles.infrastructure.candidate_merger import select_candidates
from features.articles.infrastructure.fallback_chunker import chunk_text
from features.articles.infrastructure.headline_detectors import detect_candidates
from features.articles.infrastructure.segmenter_config import DEFAULT_CONFIG, SegmenterConfig

# Setup logger for this module
logger = logging.getLogger(__name__)


class ArticleSegmenter(IArticleSegmenter):
    """Heuristic headline/byline segmenter with fixed-size chunking fallback."""

    def __init__(self, config: Optional[SegmenterConfig] = None):
        self.config = config or DEFAULT_CONFIG

    def segment_with_report(
        self,
        full_text: str,
        lines: Optional[Sequence[PageLine]] = None,
    ) -> SegmentationReport:
        if not isinstance(full_text, str):
            raise TypeError(f"full_text must be str, got {type(full_text).__name__}")

        if not full_text.strip():
            logger.info("segment: empty text, no articles")
            return SegmentationReport()

        config = self.config
        raw = detect_candidates(full_text, lines, config)
        accepted = select_candidates(full_text, raw, config)

        report = SegmentationReport(raw_candidates=len(raw), accepted_candidates=len(accepted))

        if not accepted:
            logger.info("segment: no headline candidates cleared the confidence bar, using fallback chunker")
            report.articles = chunk_text(full_text, config)
            report.used_fallback = True
            return report

        try:
            report.articles = assemble_articles(full_text, accepted, config)
        except InsufficientStructureError as e:
            logger.info(f"segment: insufficient structure ({e}), using fallback chunker")
            report.articles = chunk_text(full_text, config)
            report.used_fallback = True
            return report

        logger.info(
            f"segment: {len(report.articles)} article(s) from "
            f"{len(accepted)}/{len(raw)} accepted/raw candidate(s)"
        )
        return report
