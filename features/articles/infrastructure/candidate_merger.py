"""
Candidate filtering, deduplication and adjacent-headline merging.

Input: raw candidates from all detectors (any order, duplicates allowed).
Output: accepted candidates sorted by document offset, non-overlapping,
with unique normalized titles. An empty output means the document shows no
recoverable headline structure.
"""

from __future__ import annotations

import logging
import re
from dataclasses import replace
from typing import Dict, List

from features.articles.domain.entities import HeadlineCandidate
from features.articles.infrastructure.segmenter_config import SegmenterConfig
from features.articles.infrastructure.text_metrics import (
    clean_title,
    is_disallowed_title,
    looks_like_headline,
    normalize_title_key,
    word_count,
)

logger = logging.getLogger(__name__)

SENTENCE_PUNCT_RE = re.compile(r"[.!?]")


def filter_candidates(
    candidates: List[HeadlineCandidate],
    config: SegmenterConfig,
) -> List[HeadlineCandidate]:
    """Drop low-confidence and malformed candidates (captions, credits, empty titles)."""
    kept: List[HeadlineCandidate] = []
    for candidate in candidates:
        title = clean_title(candidate.title)
        if candidate.confidence < config.min_confidence:
            continue
        if not title or is_disallowed_title(title):
            logger.debug(f"filter_candidates: dropped malformed title {candidate.title!r}")
            continue
        kept.append(candidate if title == candidate.title else replace(candidate, title=title))
    return kept


def deduplicate_candidates(candidates: List[HeadlineCandidate]) -> List[HeadlineCandidate]:
    """
    Keep one candidate per normalized title, the one with the highest confidence.

    Ties go to the earliest occurrence. An author found by a losing duplicate
    is carried over when the winner has none.
    """
    best: Dict[str, HeadlineCandidate] = {}
    authors: Dict[str, str] = {}

    for candidate in candidates:
        key = normalize_title_key(candidate.title)
        if not key:
            continue
        if candidate.author and key not in authors:
            authors[key] = candidate.author
        current = best.get(key)
        if (
            current is None
            or candidate.confidence > current.confidence
            or (candidate.confidence == current.confidence and candidate.start < current.start)
        ):
            best[key] = candidate

    result: List[HeadlineCandidate] = []
    for key, candidate in best.items():
        if not candidate.author and key in authors:
            candidate = replace(candidate, author=authors[key])
        result.append(candidate)
    return result


def resolve_overlaps(candidates: List[HeadlineCandidate]) -> List[HeadlineCandidate]:
    """Sort by offset; of two overlapping spans keep the more confident one."""
    ordered = sorted(candidates, key=lambda c: (c.start, -c.confidence, c.end))
    result: List[HeadlineCandidate] = []
    for candidate in ordered:
        if result and candidate.start < result[-1].end:
            if candidate.confidence > result[-1].confidence:
                result[-1] = candidate
            continue
        result.append(candidate)
    return result


def merge_adjacent(
    text: str,
    candidates: List[HeadlineCandidate],
    config: SegmenterConfig,
) -> List[HeadlineCandidate]:
    """
    Merge headlines split across two close, visually distinct lines.

    Two neighbours merge when the gap between them is small and holds no
    sentence end, the first has no byline of its own, and the combined
    title stays short and headline-like.
    """
    if not candidates:
        return []

    merged: List[HeadlineCandidate] = [candidates[0]]
    for candidate in candidates[1:]:
        previous = merged[-1]
        gap = candidate.start - previous.end
        gap_text = text[previous.end:candidate.start]
        combined_title = f"{previous.title} {candidate.title}"
        if (
            gap <= config.merge_max_gap_chars
            and not SENTENCE_PUNCT_RE.search(gap_text)
            and not previous.author
            and word_count(combined_title) <= config.merge_max_words
            and looks_like_headline(combined_title, config)
        ):
            logger.debug(f"merge_adjacent: {previous.title!r} + {candidate.title!r}")
            merged[-1] = HeadlineCandidate(
                title=combined_title,
                start=previous.start,
                end=candidate.end,
                confidence=max(previous.confidence, candidate.confidence),
                author=candidate.author,
                page=previous.page if previous.page is not None else candidate.page,
                source=f"{previous.source}+{candidate.source}",
            )
            continue
        merged.append(candidate)
    return merged


def select_candidates(
    text: str,
    candidates: List[HeadlineCandidate],
    config: SegmenterConfig,
) -> List[HeadlineCandidate]:
    """Full filter → dedup → order → merge stage."""
    filtered = filter_candidates(candidates, config)
    unique = deduplicate_candidates(filtered)
    ordered = resolve_overlaps(unique)
    merged = merge_adjacent(text, ordered, config)
    # A merge can make two titles equal again
    final = resolve_overlaps(deduplicate_candidates(merged))

    logger.debug(
        f"select_candidates: raw={len(candidates)} filtered={len(filtered)} "
        f"unique={len(unique)} final={len(final)} (text_len={len(text)})"
    )
    return final
