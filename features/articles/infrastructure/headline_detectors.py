"""
Headline candidate detection.

Each detector is an independent pure function over the same immutable input
(full text, page lines, config) and returns zero or more scored
HeadlineCandidate objects with offsets into the full text. Detectors never
share scan state; the merge stage (candidate_merger) combines their output.

Detectors:
  - byline-anchored:   clause right before a "By <Name>" byline
  - date-anchored:     capitalized phrase following a month-day-year date
  - bold clusters:     consecutive bold / headline-cased lines
  - line-metric scan:  ratio-scored lines, used when bold metadata is sparse
  - section hints:     configured recurring section titles
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from features.articles.domain.entities import HeadlineCandidate, PageLine
from features.articles.infrastructure.segmenter_config import SegmenterConfig
from features.articles.infrastructure.text_metrics import (
    BYLINE_RE,
    LEADING_BYLINE_RE,
    all_caps_word_ratio,
    clean_author,
    clean_title,
    ends_with_terminal_punctuation,
    is_byline_line,
    is_soft_headline,
    is_strong_headline,
    join_lines,
    looks_like_headline,
    normalize_whitespace,
    standalone_byline_end,
    title_case_ratio,
    uppercase_ratio,
    word_count,
)

logger = logging.getLogger(__name__)


MONTHS = (
    r"(?:Jan(?:uary)?|Feb(?:ruary)?|Mar(?:ch)?|Apr(?:il)?|May|June?|July?|"
    r"Aug(?:ust)?|Sept?(?:ember)?|Oct(?:ober)?|Nov(?:ember)?|Dec(?:ember)?)\.?"
)

# Date, then the rest of the same line or the whole next line.
# Every repetition is bounded so long lines cannot backtrack pathologically.
DATE_HEADLINE_RE = re.compile(
    r"\b" + MONTHS + r"[ \t]+\d{1,2},?[ \t]+\d{4}\b[ \t,\-–—|]*(?:\r?\n[ \t]*)?"
    r"([A-Z][^\n]{0,160})"
)

# Clause boundaries when scanning backward from a byline
SENTENCE_END_RE = re.compile(r"[.!?]['\"”’)]*\s+|\n\s*\n")


# ==================== Line helpers ====================


def sort_lines(lines: Sequence[PageLine]) -> List[PageLine]:
    """Order lines by page, then top-to-bottom."""
    return sorted(lines, key=lambda ln: (ln.page, ln.y))


def locate_lines(text: str, lines: Sequence[PageLine]) -> List[Optional[Tuple[int, int]]]:
    """
    Map each line to a (start, end) span in the full text.

    Lines are searched in order from the end of the previous hit, with a
    retry from the start of the text; whitespace differences are tolerated.
    Lines that cannot be found map to None.
    """
    spans: List[Optional[Tuple[int, int]]] = []
    cursor = 0
    for line in lines:
        tokens = line.text.split()
        if not tokens:
            spans.append(None)
            continue
        # The full text has line-end hyphens rejoined ("re-" + "opened")
        last = tokens[-1]
        if len(last) > 2 and last.endswith("-") and last[-2].islower():
            tokens[-1] = last[:-1]
        pattern = re.compile(r"\s+".join(re.escape(t) for t in tokens))
        match = pattern.search(text, cursor) or pattern.search(text)
        if match:
            spans.append((match.start(), match.end()))
            cursor = match.end()
        else:
            spans.append(None)
    return spans


def _line_byline_author(text: str) -> Optional[str]:
    match = BYLINE_RE.match(text.strip())
    return clean_author(match.group(1)) if match else None


@dataclass
class _LineGroup:
    """Working state for a run of lines being grouped into one headline."""

    lines: List[PageLine]
    spans: List[Tuple[int, int]]

    @property
    def text(self) -> str:
        return join_lines(ln.text for ln in self.lines)

    @property
    def words(self) -> int:
        return word_count(self.text)

    @property
    def page(self) -> int:
        return self.lines[0].page


# ==================== Text detectors ====================


def detect_byline_headlines(text: str, config: SegmenterConfig) -> List[HeadlineCandidate]:
    """
    Headlines anchored on a following "By <Name>" byline line.

    The text before the byline is scanned backward for the clause ending
    right before it: the text after the last sentence terminator, or the
    last line when that clause is longer than a headline can be.
    """
    candidates: List[HeadlineCandidate] = []

    for match in BYLINE_RE.finditer(text):
        # Only a byline standing on its own line anchors a headline
        line_start = text.rfind("\n", 0, match.start()) + 1
        if text[line_start:match.start()].strip():
            continue
        if standalone_byline_end(text[match.start():match.start() + 300]) is None:
            continue

        author = clean_author(match.group(1))
        window_start = max(0, match.start() - config.byline_lookback_chars)
        window = text[window_start:match.start()]
        stripped = window.rstrip()
        if not stripped.strip():
            continue

        clause_offset = 0
        for boundary in SENTENCE_END_RE.finditer(stripped):
            clause_offset = boundary.end()
        clause = stripped[clause_offset:]

        if len(normalize_whitespace(clause)) > config.max_title_chars:
            last_newline = stripped.rfind("\n")
            clause_offset = last_newline + 1 if last_newline >= 0 else clause_offset
            clause = stripped[clause_offset:]

        lead = len(clause) - len(clause.lstrip())
        title = clean_title(clause)
        if not (config.min_title_chars <= len(title) <= config.max_title_chars):
            continue
        if not title[0].isupper():
            continue

        start = window_start + clause_offset + lead
        end = window_start + len(stripped)
        if start >= end:
            continue

        candidates.append(
            HeadlineCandidate(
                title=title,
                start=start,
                end=end,
                confidence=config.byline_confidence,
                author=author or None,
                source="byline",
            )
        )

    logger.debug(f"detect_byline_headlines: {len(candidates)} candidate(s)")
    return candidates


def detect_date_headlines(text: str, config: SegmenterConfig) -> List[HeadlineCandidate]:
    """Front-page headlines following a month-day-year dateline."""
    candidates: List[HeadlineCandidate] = []

    for match in DATE_HEADLINE_RE.finditer(text):
        raw = match.group(1)
        title = clean_title(raw)
        if not (config.min_date_phrase_chars <= len(title) <= config.max_title_chars):
            continue
        if LEADING_BYLINE_RE.match(title) or not looks_like_headline(title, config):
            continue

        start = match.start(1)
        end = start + len(raw.rstrip())
        candidates.append(
            HeadlineCandidate(
                title=title,
                start=start,
                end=end,
                confidence=config.date_confidence,
                source="date",
            )
        )

    logger.debug(f"detect_date_headlines: {len(candidates)} candidate(s)")
    return candidates


def detect_section_headlines(text: str, config: SegmenterConfig) -> List[HeadlineCandidate]:
    """Configured recurring section titles, first occurrence of each."""
    candidates: List[HeadlineCandidate] = []

    for hint in config.section_hints:
        hint = normalize_whitespace(hint)
        if not hint:
            continue
        pattern = re.compile(
            r"(?<!\w)" + r"\s+".join(re.escape(t) for t in hint.split()) + r"(?!\w)",
            re.IGNORECASE,
        )
        match = pattern.search(text)
        if not match:
            continue
        candidates.append(
            HeadlineCandidate(
                title=hint,
                start=match.start(),
                end=match.end(),
                confidence=config.section_confidence,
                source="section",
            )
        )

    logger.debug(f"detect_section_headlines: {len(candidates)} candidate(s)")
    return candidates


# ==================== Line detectors ====================


def _cluster_seed(line: PageLine, config: SegmenterConfig) -> bool:
    return line.is_bold or is_strong_headline(line.text, config)


def _cluster_extends(line: PageLine, config: SegmenterConfig) -> bool:
    return _cluster_seed(line, config) or looks_like_headline(line.text, config)


def _finish_cluster(
    group: _LineGroup,
    author: Optional[str],
    config: SegmenterConfig,
) -> Optional[HeadlineCandidate]:
    title = clean_title(group.text)
    n_words = word_count(title)
    if not (config.min_cluster_words <= n_words <= config.max_cluster_words):
        return None
    if len(title) < config.min_title_chars:
        return None

    bold_fraction = sum(1 for ln in group.lines if ln.is_bold) / len(group.lines)
    avg_upper = sum(uppercase_ratio(ln.text) for ln in group.lines) / len(group.lines)
    avg_title = sum(title_case_ratio(ln.text) for ln in group.lines) / len(group.lines)

    ratios_pass = avg_upper >= config.strong_upper_ratio or avg_title >= config.strong_title_ratio
    if not (bold_fraction > 0 or ratios_pass):
        return None

    upper_bonus = min(config.ratio_bonus_cap, max(0.0, avg_upper - 0.5) * 2 * config.ratio_bonus_cap)
    title_bonus = min(config.ratio_bonus_cap, max(0.0, avg_title - 0.5) * 2 * config.ratio_bonus_cap)
    confidence = (
        config.cluster_base_confidence
        + config.bold_bonus * bold_fraction
        + upper_bonus
        + title_bonus
    )

    return HeadlineCandidate(
        title=title,
        start=group.spans[0][0],
        end=group.spans[-1][1],
        confidence=round(confidence, 4),
        author=author,
        page=group.page,
        source="bold_cluster",
    )


def detect_bold_clusters(
    text: str,
    lines: Sequence[PageLine],
    config: SegmenterConfig,
) -> List[HeadlineCandidate]:
    """
    Greedily group consecutive bold / headline-cased lines into headlines.

    A cluster starts on a bold or strongly headline-cased line and extends
    over lines passing the milder ratio test. It ends at a page break, a
    byline (whose name becomes the candidate author), a non-qualifying line,
    or before growing past max_cluster_words.
    """
    ordered = sort_lines(lines)
    spans = locate_lines(text, ordered)
    candidates: List[HeadlineCandidate] = []
    group: Optional[_LineGroup] = None

    def flush(author: Optional[str] = None) -> None:
        nonlocal group
        if group is not None:
            candidate = _finish_cluster(group, author, config)
            if candidate is not None:
                candidates.append(candidate)
        group = None

    for line, span in zip(ordered, spans):
        if span is None:
            flush()
            continue

        if is_byline_line(line.text):
            flush(_line_byline_author(line.text))
            continue

        if group is not None:
            same_page = line.page == group.page
            fits = group.words + word_count(line.text) <= config.max_cluster_words
            if same_page and fits and _cluster_extends(line, config):
                group.lines.append(line)
                group.spans.append(span)
                continue
            flush()

        if _cluster_seed(line, config):
            group = _LineGroup(lines=[line], spans=[span])

    flush()
    logger.debug(f"detect_bold_clusters: {len(candidates)} candidate(s) from {len(ordered)} line(s)")
    return candidates


def line_metric_score(line: PageLine, config: SegmenterConfig) -> float:
    """Headline-likeness score of a single line (seed when >= seed_threshold)."""
    text = line.text
    score = 0.0
    if line.is_bold:
        score += config.bold_weight
    if is_strong_headline(text, config):
        score += config.strong_weight
    elif is_soft_headline(text, config):
        score += config.soft_weight
    if word_count(text) <= config.max_cluster_words and not ends_with_terminal_punctuation(text):
        score += config.shape_weight
    score += config.all_caps_weight * all_caps_word_ratio(text)
    return score


def _absorbs(line: PageLine, config: SegmenterConfig) -> bool:
    return (
        word_count(line.text) <= config.max_cluster_words
        and not ends_with_terminal_punctuation(line.text)
        and looks_like_headline(line.text, config)
    )


def detect_line_metric_headlines(
    text: str,
    lines: Sequence[PageLine],
    config: SegmenterConfig,
) -> List[HeadlineCandidate]:
    """
    Score every line by capitalization metrics; seeds absorb short follow-up lines.

    Only used when bold metadata is sparse; with plenty of bold lines the
    cluster detector already covers this signal.
    """
    ordered = sort_lines(lines)
    if not ordered:
        return []
    bold_fraction = sum(1 for ln in ordered if ln.is_bold) / len(ordered)
    if bold_fraction >= config.sparse_bold_fraction:
        logger.debug(f"detect_line_metric_headlines: skipped, bold fraction {bold_fraction:.2f}")
        return []

    spans = locate_lines(text, ordered)
    candidates: List[HeadlineCandidate] = []
    i = 0

    while i < len(ordered):
        line, span = ordered[i], spans[i]
        i += 1
        if span is None or is_byline_line(line.text):
            continue
        if ends_with_terminal_punctuation(line.text):
            continue
        score = line_metric_score(line, config)
        if score < config.seed_threshold:
            continue

        group = _LineGroup(lines=[line], spans=[span])
        while i < len(ordered):
            nxt, nxt_span = ordered[i], spans[i]
            if nxt_span is None or nxt.page != line.page or is_byline_line(nxt.text):
                break
            if group.words + word_count(nxt.text) > config.max_cluster_words:
                break
            if not _absorbs(nxt, config):
                break
            group.lines.append(nxt)
            group.spans.append(nxt_span)
            i += 1

        author = None
        if i < len(ordered) and is_byline_line(ordered[i].text):
            author = _line_byline_author(ordered[i].text)

        title = clean_title(group.text)
        if len(title) < config.min_title_chars or word_count(title) < config.min_cluster_words:
            continue
        candidates.append(
            HeadlineCandidate(
                title=title,
                start=group.spans[0][0],
                end=group.spans[-1][1],
                confidence=round(config.metric_base_confidence + score, 4),
                author=author,
                page=group.page,
                source="line_metric",
            )
        )

    logger.debug(f"detect_line_metric_headlines: {len(candidates)} candidate(s)")
    return candidates


# ==================== Entry point ====================


def detect_candidates(
    text: str,
    lines: Optional[Sequence[PageLine]],
    config: SegmenterConfig,
) -> List[HeadlineCandidate]:
    """
    Run every detector and concatenate their candidates.

    Without page lines only the text detectors (byline, date, sections) run.
    """
    candidates: List[HeadlineCandidate] = []
    candidates.extend(detect_byline_headlines(text, config))
    candidates.extend(detect_date_headlines(text, config))
    if lines:
        candidates.extend(detect_bold_clusters(text, lines, config))
        candidates.extend(detect_line_metric_headlines(text, lines, config))
    candidates.extend(detect_section_headlines(text, config))

    logger.debug(f"detect_candidates: {len(candidates)} raw candidate(s)")
    return candidates
