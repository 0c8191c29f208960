import pytest

from features.articles.domain.entities import HeadlineCandidate
from features.articles.domain.errors import InsufficientStructureError
from features.articles.infrastructure.article_assembler import (
    assemble_articles,
    clean_paragraphs,
    content_bounds,
    make_description,
)
from features.articles.infrastructure.segmenter_config import DEFAULT_CONFIG

from conftest import BASKETBALL_BODY, LABOR_DAY_BODY, POOL_BODY, POOL_TITLE


def test_assemble_single_article(pool_text):
    candidates = [HeadlineCandidate("Local Pool Reopens After Repairs", 0, 32, 3.0, author="Dana Lee")]
    articles = assemble_articles(pool_text, candidates, DEFAULT_CONFIG)

    assert len(articles) == 1
    article = articles[0]
    assert article.body == POOL_BODY
    assert article.author == "Dana Lee"
    assert article.category == "community"
    assert article.featured is True
    assert article.word_count == len(POOL_BODY.split())
    assert article.slug == "local-pool-reopens-after-repairs"
    assert article.tags == ["community"]
    assert article.description.endswith("...")


def test_content_bounds_skip_leading_byline(pool_text):
    candidates = [HeadlineCandidate("Local Pool Reopens After Repairs", 0, 32, 3.0)]
    start, end = content_bounds(pool_text, candidates, 0)
    assert pool_text[start:end].strip() == POOL_BODY
    assert end == len(pool_text)


def test_author_taken_from_byline_when_candidate_has_none(pool_text):
    candidates = [HeadlineCandidate("Local Pool Reopens After Repairs", 0, 32, 2.5)]
    article = assemble_articles(pool_text, candidates, DEFAULT_CONFIG)[0]
    assert article.author == "Dana Lee"
    assert "By Dana Lee" not in article.body


def test_default_author_without_byline():
    text = "Local Pool Reopens After Repairs\n" + POOL_BODY
    candidates = [HeadlineCandidate("Local Pool Reopens After Repairs", 0, 32, 2.5)]
    article = assemble_articles(text, candidates, DEFAULT_CONFIG)[0]
    assert article.author == DEFAULT_CONFIG.default_author


def test_short_bodies_are_dropped():
    first = "Short Item Headline\nToo short body.\n\n"
    second_title = "Varsity Basketball Team Wins Title"
    text = f"{first}{second_title}\nBy Sam Ortiz\n{BASKETBALL_BODY}"
    start = text.index(second_title)
    candidates = [
        HeadlineCandidate("Short Item Headline", 0, 19, 3.0),
        HeadlineCandidate(second_title, start, start + len(second_title), 3.0, author="Sam Ortiz"),
    ]
    articles = assemble_articles(text, candidates, DEFAULT_CONFIG)

    assert [a.title for a in articles] == [second_title]
    assert articles[0].featured is True
    assert articles[0].category == "sports"
    assert all(len(a.body) >= DEFAULT_CONFIG.min_body_chars for a in articles)


def test_insufficient_structure_raises():
    text = "Short Item Headline\nToo short body."
    candidates = [HeadlineCandidate("Short Item Headline", 0, 19, 3.0)]
    with pytest.raises(InsufficientStructureError):
        assemble_articles(text, candidates, DEFAULT_CONFIG)


def test_clean_paragraphs_removes_jump_references():
    span = "First part. See COUNCIL, Page 4\n\nSecond para (Continued on Page A6) end.\n\n  \n"
    assert clean_paragraphs(span) == ["First part.", "Second para end."]


def test_make_description():
    body = " ".join(f"w{i}" for i in range(40))
    description = make_description(body, 30)
    assert description == " ".join(f"w{i}" for i in range(30)) + "..."
    assert make_description("short body", 30) == "short body"


def test_sentence_starting_with_by_stays_in_body():
    text = f"{POOL_TITLE}\nBy Dana Lee\n{LABOR_DAY_BODY}"
    candidates = [HeadlineCandidate(POOL_TITLE, 0, 32, 3.0, author="Dana Lee")]
    article = assemble_articles(text, candidates, DEFAULT_CONFIG)[0]

    assert article.author == "Dana Lee"
    assert article.body == LABOR_DAY_BODY


def test_sentence_starting_with_by_is_not_an_author():
    text = f"{POOL_TITLE}\n{LABOR_DAY_BODY}"
    candidates = [HeadlineCandidate(POOL_TITLE, 0, 32, 3.9)]
    article = assemble_articles(text, candidates, DEFAULT_CONFIG)[0]

    assert article.author == DEFAULT_CONFIG.default_author
    assert "By Labor Day Weekend crowds" in article.body


def test_byline_line_below_kicker_is_author():
    text = f"{POOL_TITLE}\nSpecial to the Gazette\nBy Ann Fox\n{POOL_BODY}"
    candidates = [HeadlineCandidate(POOL_TITLE, 0, 32, 3.0)]
    article = assemble_articles(text, candidates, DEFAULT_CONFIG)[0]

    assert article.author == "Ann Fox"
    assert "By Ann Fox" not in article.body
    assert article.paragraphs == ["Special to the Gazette", POOL_BODY]
