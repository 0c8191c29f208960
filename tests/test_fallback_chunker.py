import math
from dataclasses import replace

import pytest

from features.articles.infrastructure.fallback_chunker import chunk_text, split_into_chunks, trim_at_sentence
from features.articles.infrastructure.segmenter_config import DEFAULT_CONFIG


def _words(n):
    return " ".join(f"word{i}" for i in range(n))


def test_empty_text_gives_no_chunks():
    assert chunk_text("", DEFAULT_CONFIG) == []
    assert chunk_text("   \n ", DEFAULT_CONFIG) == []


@pytest.mark.parametrize("n_words", [1, 499, 500, 501, 2600, 6000])
def test_chunk_count_and_size(n_words):
    chunks = split_into_chunks(_words(n_words), DEFAULT_CONFIG)

    assert len(chunks) == min(DEFAULT_CONFIG.max_chunks, math.ceil(n_words / DEFAULT_CONFIG.chunk_words))
    assert all(len(c.split()) <= DEFAULT_CONFIG.chunk_words for c in chunks)


def test_chunk_articles_have_placeholder_titles():
    articles = chunk_text(_words(1200), DEFAULT_CONFIG)

    assert [a.title for a in articles] == ["Article 1 from PDF", "Article 2 from PDF", "Article 3 from PDF"]
    assert [a.featured for a in articles] == [True, False, False]
    assert all(a.author == DEFAULT_CONFIG.default_author for a in articles)
    assert articles[0].word_count == 500


def test_trim_at_late_sentence_end():
    chunk = "one two three four five six seven eight. nine ten"
    assert trim_at_sentence(chunk, 0.7) == "one two three four five six seven eight."


def test_keep_chunk_when_sentence_end_is_early():
    chunk = "One. two three four five six seven eight nine ten"
    assert trim_at_sentence(chunk, 0.7) == chunk


def test_chunks_trimmed_with_small_chunk_size():
    config = replace(DEFAULT_CONFIG, chunk_words=10)
    text = "one two three four five six seven eight. nine ten eleven twelve"
    chunks = split_into_chunks(text, config)
    assert chunks == ["one two three four five six seven eight.", "eleven twelve"]
