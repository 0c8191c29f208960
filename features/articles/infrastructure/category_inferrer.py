"""
Keyword-based category inference.

Categories are checked in a fixed order and the first match wins, so the
order of CATEGORY_KEYWORDS is part of the behaviour: overlapping keywords
(e.g. a school sports story) resolve to the earlier category.
"""

from __future__ import annotations

import re
from typing import List, Tuple

from features.articles.domain.entities import Category


DEFAULT_CATEGORY: Category = "community"

CATEGORY_KEYWORDS: List[Tuple[Category, Tuple[str, ...]]] = [
    ("sports", (
        "sport", "basketball", "football", "soccer", "baseball", "softball",
        "hockey", "lacrosse", "wrestling", "tennis", "athlet*", "tournament",
        "championship", "playoff", "coach", "league", "varsity", "game",
        "team", "score",
    )),
    ("business", (
        "business", "company", "companies", "econom*", "restaurant",
        "store", "retail", "shop", "jobs", "employment", "market", "sales",
        "chamber of commerce", "entrepreneur*", "grand opening",
    )),
    ("government", (
        "council", "mayor", "government", "ordinance", "election", "budget",
        "tax", "legislat*", "municipal", "township committee", "freeholder",
        "commissioner", "zoning", "policy", "vote",
    )),
    ("education", (
        "school", "student", "teacher", "education", "college", "university",
        "classroom", "principal", "superintendent", "board of education",
        "graduat*", "library",
    )),
    ("events", (
        "event", "festival", "concert", "celebration", "parade", "county fair", "street fair",
        "ceremony", "fundraiser", "gala", "holiday", "exhibit*",
    )),
]


def _keyword_pattern(keyword: str) -> str:
    # "stem*" matches any continuation, plain keywords allow a plural suffix
    if keyword.endswith("*"):
        return re.escape(keyword[:-1]) + r"\w*"
    return re.escape(keyword) + r"(?:s|es)?\b"


_CATEGORY_PATTERNS: List[Tuple[Category, re.Pattern]] = [
    (
        category,
        re.compile(r"\b(?:" + "|".join(_keyword_pattern(k) for k in keywords) + r")", re.IGNORECASE),
    )
    for category, keywords in CATEGORY_KEYWORDS
]


def infer_category(text: str) -> Category:
    """Return the first category with a keyword in the text, else community."""
    for category, pattern in _CATEGORY_PATTERNS:
        if pattern.search(text or ""):
            return category
    return DEFAULT_CATEGORY
