"""
Application use cases for the article extraction feature.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, List, Optional

from features.articles.domain.entities import Article, PageLine, SegmentationReport
from features.articles.domain.interfaces import IArticleSegmenter, IArticleStore, ILineExtractor
from .dtos import (
    ArticleDTO,
    ExtractArticlesRequestDTO,
    ExtractArticlesResponseDTO,
    PageLineDTO,
    PublishArticlesRequestDTO,
    PublishArticlesResponseDTO,
    SegmentTextRequestDTO,
    UpdateArticleRequestDTO,
)

logger = logging.getLogger(__name__)


def to_article_dto(article: Article, article_date: Optional[str] = None) -> ArticleDTO:
    """Map a domain Article to the admin tool's article draft shape."""
    return ArticleDTO(
        id=article.slug,
        title=article.title,
        description=article.description,
        date=article_date or article.date or date.today().isoformat(),
        author=article.author,
        category=article.category,
        featured=article.featured,
        wordCount=article.word_count,
        tags=list(article.tags),
        content=[{"type": "paragraph", "text": p} for p in article.paragraphs],
        image=article.image,
    )


def to_page_lines(lines: Optional[List[PageLineDTO]]) -> Optional[List[PageLine]]:
    if lines is None:
        return None
    return [PageLine(text=ln.text, is_bold=bool(ln.isBold), page=int(ln.page), y=float(ln.y)) for ln in lines]


def to_response(report: SegmentationReport, article_date: Optional[str], pages: int = 0) -> ExtractArticlesResponseDTO:
    articles = [to_article_dto(a, article_date) for a in report.articles]
    return ExtractArticlesResponseDTO(
        articles=articles,
        total_articles=len(articles),
        used_fallback=report.used_fallback,
        pages=pages,
    )


@dataclass
class SegmentTextUseCase:
    """
    Segment an already-extracted text layer into article drafts.

    Follows clean architecture: depends on IArticleSegmenter interface, not concrete implementation.
    """

    segmenter: IArticleSegmenter

    def execute(self, request: SegmentTextRequestDTO) -> ExtractArticlesResponseDTO:
        report = self.segmenter.segment_with_report(request.full_text, to_page_lines(request.lines))
        return to_response(report, request.date)


@dataclass
class ExtractArticlesUseCase:
    """
    Full pipeline for an uploaded newspaper PDF.

    Step 1: Text-layer extraction (full text + bold/page/y per line)
    Step 2: Segmentation into article drafts (fallback chunking included)

    Nothing is persisted; drafts are published separately.
    """

    line_extractor: ILineExtractor
    segmenter: IArticleSegmenter

    def execute(self, request: ExtractArticlesRequestDTO) -> ExtractArticlesResponseDTO:
        document = self.line_extractor.extract(request.pdf_path, max_pages=request.max_pages)
        report = self.segmenter.segment_with_report(document.full_text, document.lines)

        logger.info(
            f"ExtractArticlesUseCase: {request.pdf_path}: {document.pages} page(s) → "
            f"{len(report.articles)} article(s) (fallback={report.used_fallback})"
        )
        return to_response(report, request.date, pages=document.pages)


@dataclass
class PublishArticlesUseCase:
    """Write article drafts to the site's articles collection."""

    store: IArticleStore

    def execute(self, request: PublishArticlesRequestDTO) -> PublishArticlesResponseDTO:
        published, errors = self.store.publish(request.articles)
        logger.info(f"PublishArticlesUseCase: {len(published)} published, {len(errors)} failed")
        return PublishArticlesResponseDTO(published=published, errors=errors)


@dataclass
class ListArticlesUseCase:
    store: IArticleStore

    def execute(self) -> List[Dict[str, Any]]:
        return self.store.list()


@dataclass
class DeleteArticleUseCase:
    store: IArticleStore

    def execute(self, filename: str) -> None:
        self.store.delete(filename)


@dataclass
class UpdateArticleUseCase:
    """Edit one published article in place."""

    store: IArticleStore

    def execute(self, request: UpdateArticleRequestDTO) -> Dict[str, Any]:
        return self.store.update(request.filename, request.article)
