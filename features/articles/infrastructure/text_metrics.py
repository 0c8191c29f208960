"""
Text metrics and cleaning helpers shared by the headline detectors.

Every function here is pure and works on a single string.
"""

from __future__ import annotations

import re
from typing import Optional, Tuple

from features.articles.infrastructure.segmenter_config import SegmenterConfig


LETTER_RE = re.compile(r"[A-Za-z]")
UPPER_RE = re.compile(r"[A-Z]")
WORD_RE = re.compile(r"[A-Za-z0-9][A-Za-z0-9'’&.\-]*")
WHITESPACE_RE = re.compile(r"\s+")

# Short words that stay lowercase inside a title-cased headline
CONNECTOR_WORDS = frozenset({
    "a", "an", "and", "as", "at", "but", "by", "for", "from", "in", "into",
    "of", "on", "or", "over", "the", "to", "up", "with", "vs", "via",
})

# Byline: "By" followed by 2-4 capitalized words on the same line.
# Separators are spaces/tabs only so the name never runs into the next line.
BYLINE_RE = re.compile(
    r"(?<![A-Za-z])By[ \t]+([A-Z][A-Za-z'’.\-]*(?:[ \t]+[A-Z][A-Za-z'’.\-]*){1,3})"
)

ROLE_WORDS = (
    r"(?:Staff|Special|Contributing|Senior|Sports|News)?[ \t]*"
    r"(?:Writer|Reporter|Correspondent|Editor|Contributor)"
)

ROLE_SUFFIX_RE = re.compile(r"(?:[ \t,]+" + ROLE_WORDS + r")+$")

# "By Name[, Role]" sitting at the very start of a span (after optional whitespace)
LEADING_BYLINE_RE = re.compile(
    r"\A\s*By[ \t]+[A-Z][A-Za-z'’.\-]*(?:[ \t]+[A-Z][A-Za-z'’.\-]*){1,3}"
    r"(?:[ \t]*,[ \t]*" + ROLE_WORDS + r")?[ \t]*"
)

TERMINAL_PUNCT_RE = re.compile(r"[.!?;:,]['\"”’)]*\s*$")

DISALLOWED_TITLE_PATTERNS = [
    re.compile(r"^(photo|photos|photograph|pictured|courtesy|credit|caption)\b", re.IGNORECASE),
    re.compile(r"(copyright|©|all rights reserved)", re.IGNORECASE),
    re.compile(r"^(see|continued|cont'd|from)\b.*\bpage\s+\d+", re.IGNORECASE),
    re.compile(r"^page\s+\d+$", re.IGNORECASE),
    re.compile(r"^(vol\.?|volume|issue|no\.)\s*\d+", re.IGNORECASE),
    re.compile(r"(www\.|https?://|@[a-z0-9-]+\.)", re.IGNORECASE),
    re.compile(r"^[\d\s\W]+$"),
]


def normalize_whitespace(text: str) -> str:
    """Collapse all runs of whitespace into single spaces."""
    return WHITESPACE_RE.sub(" ", text or "").strip()


def words(text: str) -> list:
    return WORD_RE.findall(text or "")


def word_count(text: str) -> int:
    return len((text or "").split())


def uppercase_ratio(text: str) -> float:
    """Share of letters that are uppercase (0.0 when there are no letters)."""
    letters = LETTER_RE.findall(text or "")
    if not letters:
        return 0.0
    return len(UPPER_RE.findall(text)) / len(letters)


def title_case_ratio(text: str) -> float:
    """
    Share of words starting with a capital letter.

    Connector words ("of", "the", ...) are ignored unless the line has
    nothing else, so "Council Votes on the Budget" scores 1.0.
    """
    tokens = [w for w in words(text) if w[0].isalpha()]
    if not tokens:
        return 0.0
    significant = [w for w in tokens if w.lower() not in CONNECTOR_WORDS] or tokens
    capitalized = sum(1 for w in significant if w[0].isupper())
    return capitalized / len(significant)


def all_caps_word_ratio(text: str) -> float:
    """Share of alphabetic words (2+ letters) written entirely in capitals."""
    tokens = [w for w in words(text) if sum(c.isalpha() for c in w) >= 2]
    if not tokens:
        return 0.0
    return sum(1 for w in tokens if w.upper() == w) / len(tokens)


def ends_with_terminal_punctuation(text: str) -> bool:
    return bool(TERMINAL_PUNCT_RE.search(text or ""))


def clean_title(text: str) -> str:
    """Collapse whitespace and strip bullets, quotes and trailing separators."""
    title = normalize_whitespace(text)
    title = re.sub(r"^[\s\-–—•*·|:\"“”'‘’]+", "", title)
    title = re.sub(r"[\s\-–—•*·|:,;\"“”'‘’]+$", "", title)
    return title.strip()


def normalize_title_key(title: str) -> str:
    """Dedup key: lowercase alphanumerics separated by single spaces."""
    return " ".join(re.findall(r"[a-z0-9]+", (title or "").lower()))


def is_disallowed_title(title: str) -> bool:
    """True for captions, credits, copyright lines and page furniture."""
    if not title:
        return True
    return any(p.search(title) for p in DISALLOWED_TITLE_PATTERNS)


def is_strong_headline(text: str, config: SegmenterConfig) -> bool:
    return (
        uppercase_ratio(text) >= config.strong_upper_ratio
        or title_case_ratio(text) >= config.strong_title_ratio
    )


def is_soft_headline(text: str, config: SegmenterConfig) -> bool:
    return (
        uppercase_ratio(text) >= config.soft_upper_ratio
        or title_case_ratio(text) >= config.soft_title_ratio
    )


def looks_like_headline(text: str, config: SegmenterConfig) -> bool:
    """Milder ratio test used when extending or merging headlines."""
    return (
        uppercase_ratio(text) >= config.extend_upper_ratio
        or title_case_ratio(text) >= config.extend_title_ratio
    )


def find_byline(text: str, limit: Optional[int] = None) -> Optional[Tuple[str, int, int]]:
    """
    Find the first "By Name" byline.

    Returns:
        (name, match_start, match_end) or None
    """
    haystack = text if limit is None else text[:limit]
    match = BYLINE_RE.search(haystack)
    if not match:
        return None
    name = clean_author(match.group(1))
    if not name:
        return None
    return name, match.start(), match.end()


def clean_author(name: str) -> str:
    """Drop role words ("Staff Writer", ...) trailing a byline name."""
    name = ROLE_SUFFIX_RE.sub("", normalize_whitespace(name))
    return name.strip(" .,")


def is_byline_line(text: str) -> bool:
    """True when a short line starts with a byline."""
    return bool(LEADING_BYLINE_RE.match(text or "")) and word_count(text) <= 8


def standalone_byline_end(text: str) -> Optional[int]:
    """
    Offset where a byline opening the text ends, when it fills its own line.

    "By Dana Lee\\nThe pool..." → 11. Returns None for sentences that merely
    start with "By" ("By Labor Day Weekend crowds had returned") and for a
    short wrapped line continued in lowercase on the next line.
    """
    match = LEADING_BYLINE_RE.match(text or "")
    if not match:
        return None
    rest = text[match.end():]
    if rest and rest[0] not in "\r\n":
        return None
    following = rest.lstrip()
    if following and following[0].islower():
        return None
    return match.end()


def join_lines(texts) -> str:
    """Join visual lines into one string, rejoining words hyphenated at a line end."""
    joined = ""
    for text in texts:
        text = normalize_whitespace(text)
        if not text:
            continue
        if joined.endswith("-") and len(joined) > 1 and joined[-2].islower() and text[0].islower():
            joined = joined[:-1] + text
        else:
            joined = f"{joined} {text}" if joined else text
    return joined


def slugify(text: str) -> str:
    """Convert a title to a URL-safe slug for article ids and filenames."""
    return re.sub(r"[^a-z0-9]+", "-", (text or "").lower()).strip("-")
