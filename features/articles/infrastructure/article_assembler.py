"""
Article assembly from accepted headline candidates.

For each candidate C[i] the content span runs from the end of C[i] (past
an immediately following byline) to the start of C[i+1], or to the end of
the document for the last candidate. Spans shorter than min_body_chars are
treated as false positives (captions, pull quotes) and dropped.
"""

from __future__ import annotations

import logging
import re
from dataclasses import replace
from typing import List, Optional, Sequence, Tuple

from features.articles.domain.entities import Article, HeadlineCandidate
from features.articles.domain.errors import InsufficientStructureError
from features.articles.infrastructure.category_inferrer import infer_category
from features.articles.infrastructure.segmenter_config import SegmenterConfig
from features.articles.infrastructure.text_metrics import (
    find_byline,
    normalize_whitespace,
    slugify,
    standalone_byline_end,
)

logger = logging.getLogger(__name__)


# Jump references such as "See COUNCIL, Page 4" or "(Continued on Page A6)"
SEE_PAGE_RE = re.compile(
    r"\(?\b(?:See|SEE|Continued|CONTINUED|Cont'd|CONT'D)\b(?i:[^.\n()]{0,60}?\bpage[ \t]+[A-Z]?\d{1,3}[A-Z]?)\)?"
)

PARAGRAPH_BREAK_RE = re.compile(r"\n[ \t]*\n")

# Candidate positions for a byline standing on its own line
LINE_START_RE = re.compile(r"(?m)^[ \t]*(?=By[ \t])")


def clean_paragraphs(span: str) -> List[str]:
    """Split a content span into paragraphs with jump references removed."""
    paragraphs: List[str] = []
    for block in PARAGRAPH_BREAK_RE.split(span):
        block = SEE_PAGE_RE.sub(" ", block)
        block = normalize_whitespace(block)
        if block:
            paragraphs.append(block)
    return paragraphs


def make_description(body: str, max_words: int) -> str:
    """First max_words words of the body, with an ellipsis when truncated."""
    tokens = body.split()
    if len(tokens) <= max_words:
        return " ".join(tokens)
    return " ".join(tokens[:max_words]) + "..."


def make_article(
    title: str,
    author: str,
    paragraphs: Sequence[str],
    config: SegmenterConfig,
    featured: bool = False,
) -> Article:
    """Build an Article value, deriving body, category and metadata."""
    body = " ".join(paragraphs)
    category = infer_category(f"{title} {body}")
    return Article(
        title=title,
        author=author,
        body=body,
        category=category,
        word_count=len(body.split()),
        description=make_description(body, config.description_words),
        featured=featured,
        slug=slugify(title),
        tags=[category],
        paragraphs=list(paragraphs),
    )


def content_bounds(
    text: str,
    candidates: Sequence[HeadlineCandidate],
    index: int,
) -> Tuple[int, int]:
    """(start, end) of the content span belonging to candidates[index]."""
    start = candidates[index].end
    byline_end = standalone_byline_end(text[start:start + 200])
    if byline_end is not None:
        start += byline_end
    end = candidates[index + 1].start if index + 1 < len(candidates) else len(text)
    return start, max(start, end)


def find_byline_line(span: str, limit: int) -> Optional[Tuple[str, int, int]]:
    """
    First byline standing on its own line within the first `limit` chars.

    Returns:
        (name, line_start, line_end) or None
    """
    for match in LINE_START_RE.finditer(span):
        if match.start() >= limit:
            break
        offset = match.start()
        byline_end = standalone_byline_end(span[offset:])
        if byline_end is None:
            continue
        found = find_byline(span[offset:offset + byline_end])
        if found:
            return found[0], offset, offset + byline_end
    return None


def _resolve_author(
    candidate: HeadlineCandidate,
    leading_byline: str,
    span: str,
    config: SegmenterConfig,
) -> Tuple[str, str]:
    """
    Return (author, span with a standalone byline line removed).

    Author precedence: candidate author, the byline right after the
    headline, a byline line in the first byline_search_chars of the span,
    the configured default. The span is left alone once a byline right
    after the headline was consumed.
    """
    if leading_byline.strip():
        leading = find_byline(leading_byline)
        author = candidate.author or (leading[0] if leading else None)
        return author or config.default_author, span

    found = find_byline_line(span, config.byline_search_chars)
    if found:
        _, line_start, line_end = found
        span = span[:line_start] + span[line_end:]

    author: Optional[str] = candidate.author or (found[0] if found else None)
    return author or config.default_author, span


def assemble_articles(
    text: str,
    candidates: Sequence[HeadlineCandidate],
    config: SegmenterConfig,
) -> List[Article]:
    """
    Turn ordered, deduplicated candidates into articles.

    Raises:
        InsufficientStructureError: fewer than config.min_articles articles
            survive the minimum-body gate
    """
    articles: List[Article] = []

    for i, candidate in enumerate(candidates):
        start, end = content_bounds(text, candidates, i)
        author, span = _resolve_author(candidate, text[candidate.end:start], text[start:end], config)
        paragraphs = clean_paragraphs(span)
        body = " ".join(paragraphs)

        if len(body) < config.min_body_chars:
            logger.debug(
                f"assemble_articles: dropped {candidate.title!r} "
                f"(body {len(body)} < {config.min_body_chars} chars)"
            )
            continue

        articles.append(make_article(candidate.title, author, paragraphs, config))

    if len(articles) < config.min_articles:
        raise InsufficientStructureError(found=len(articles), required=config.min_articles)

    articles = [replace(a, featured=(i == 0)) for i, a in enumerate(articles)]
    logger.debug(f"assemble_articles: {len(articles)} article(s) from {len(candidates)} candidate(s)")
    return articles
