"""
Tunable parameters for the article segmenter.

The confidence weights and ratio thresholds were tuned against a single
sample newspaper; they are defaults, not proven constants. Re-tune them per
publication rather than assuming they generalize.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from typing import Optional, Tuple


@dataclass(frozen=True)
class SegmenterConfig:
    """All segmenter knobs with their default values."""

    # Candidate acceptance
    min_confidence: float = 2.0

    # Byline / date / section detectors
    byline_confidence: float = 3.0
    date_confidence: float = 3.5
    section_confidence: float = 3.5
    byline_lookback_chars: int = 260
    min_title_chars: int = 8
    max_title_chars: int = 120
    min_date_phrase_chars: int = 10

    # Bold-line clustering
    cluster_base_confidence: float = 2.1
    bold_bonus: float = 1.1
    ratio_bonus_cap: float = 0.7
    strong_upper_ratio: float = 0.65
    strong_title_ratio: float = 0.75
    soft_upper_ratio: float = 0.55
    soft_title_ratio: float = 0.65
    extend_upper_ratio: float = 0.5
    extend_title_ratio: float = 0.6
    min_cluster_words: int = 2
    max_cluster_words: int = 14

    # Line-metric scan (used when bold metadata is sparse)
    bold_weight: float = 1.8
    strong_weight: float = 1.2
    soft_weight: float = 0.8
    shape_weight: float = 0.3
    all_caps_weight: float = 0.5
    seed_threshold: float = 1.3
    metric_base_confidence: float = 0.8
    sparse_bold_fraction: float = 0.1

    # Adjacent-candidate merging
    merge_max_gap_chars: int = 80
    merge_max_words: int = 18

    # Article assembly
    min_body_chars: int = 120
    byline_search_chars: int = 200
    min_articles: int = 1
    description_words: int = 30
    default_author: str = "Staff Reporter"

    # Fallback chunking
    chunk_words: int = 500
    max_chunks: int = 10
    sentence_cut_ratio: float = 0.7

    # Newspaper-specific recurring section titles (e.g. standing columns)
    section_hints: Tuple[str, ...] = ()

    def with_overrides(
        self,
        default_author: Optional[str] = None,
        section_hints: Optional[Tuple[str, ...]] = None,
    ) -> "SegmenterConfig":
        """Return a copy with per-request overrides applied."""
        changes = {}
        if default_author:
            changes["default_author"] = default_author
        if section_hints is not None:
            changes["section_hints"] = tuple(h.strip() for h in section_hints if h and h.strip())
        return replace(self, **changes) if changes else self

    @classmethod
    def from_env(cls) -> "SegmenterConfig":
        """
        Build config from environment variables.

        ARTICLES_DEFAULT_AUTHOR: author used when no byline is found
        ARTICLES_SECTION_HINTS: "|"-separated recurring section titles
        """
        hints_raw = os.getenv("ARTICLES_SECTION_HINTS", "")
        hints = tuple(h.strip() for h in hints_raw.split("|") if h.strip())
        return cls().with_overrides(
            default_author=os.getenv("ARTICLES_DEFAULT_AUTHOR"),
            section_hints=hints,
        )


DEFAULT_CONFIG = SegmenterConfig()
