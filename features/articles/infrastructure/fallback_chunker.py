"""
Fallback chunking for documents without recoverable headline structure.

Splits the raw text into fixed-size word chunks and trims each chunk at its
last sentence boundary when that boundary lies late enough in the chunk.
Pure function of the input text: empty text gives no chunks, any other
text gives at least one.
"""

from __future__ import annotations

import logging
import math
import re
from dataclasses import replace
from typing import List

from features.articles.domain.entities import Article
from features.articles.infrastructure.article_assembler import make_article
from features.articles.infrastructure.segmenter_config import SegmenterConfig

logger = logging.getLogger(__name__)


SENTENCE_END_RE = re.compile(r"[.!?]['\"”’)]*(?=\s|$)")


def trim_at_sentence(chunk: str, cut_ratio: float) -> str:
    """
    Cut the chunk after its last sentence terminator if that terminator
    lies past cut_ratio of the chunk's length; otherwise keep it whole.
    """
    last_end = None
    for match in SENTENCE_END_RE.finditer(chunk):
        last_end = match.end()
    if last_end is not None and last_end > len(chunk) * cut_ratio:
        return chunk[:last_end]
    return chunk


def split_into_chunks(text: str, config: SegmenterConfig) -> List[str]:
    """Word chunks of config.chunk_words, at most config.max_chunks of them."""
    tokens = (text or "").split()
    if not tokens:
        return []

    n_chunks = min(config.max_chunks, math.ceil(len(tokens) / config.chunk_words))
    chunks: List[str] = []
    for i in range(n_chunks):
        chunk = " ".join(tokens[i * config.chunk_words:(i + 1) * config.chunk_words])
        chunks.append(trim_at_sentence(chunk, config.sentence_cut_ratio))
    return chunks


def chunk_text(text: str, config: SegmenterConfig) -> List[Article]:
    """Turn raw text into placeholder-titled articles ("Article N from PDF")."""
    chunks = split_into_chunks(text, config)
    articles = [
        make_article(
            title=f"Article {i} from PDF",
            author=config.default_author,
            paragraphs=[chunk],
            config=config,
        )
        for i, chunk in enumerate(chunks, start=1)
    ]
    if articles:
        articles[0] = replace(articles[0], featured=True)

    logger.debug(f"chunk_text: {len(articles)} fallback chunk(s) from {len((text or '').split())} word(s)")
    return articles
