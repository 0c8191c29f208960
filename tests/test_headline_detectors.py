from dataclasses import replace

import pytest

from features.articles.domain.entities import PageLine
from features.articles.infrastructure.headline_detectors import (
    detect_bold_clusters,
    detect_byline_headlines,
    detect_candidates,
    detect_date_headlines,
    detect_line_metric_headlines,
    detect_section_headlines,
    line_metric_score,
    locate_lines,
)
from features.articles.infrastructure.segmenter_config import DEFAULT_CONFIG

from conftest import LABOR_DAY_BODY, POOL_TITLE


def test_byline_headline_at_document_start(pool_text):
    candidates = detect_byline_headlines(pool_text, DEFAULT_CONFIG)

    assert len(candidates) == 1
    c = candidates[0]
    assert c.title == "Local Pool Reopens After Repairs"
    assert c.author == "Dana Lee"
    assert (c.start, c.end) == (0, 32)
    assert c.confidence == DEFAULT_CONFIG.byline_confidence
    assert c.source == "byline"


def test_byline_headline_after_previous_story():
    text = (
        "Previous story ends here.\n"
        "Council Approves New Budget\n"
        "By Jane Roe\n"
        "The council met on Monday."
    )
    candidates = detect_byline_headlines(text, DEFAULT_CONFIG)

    assert [c.title for c in candidates] == ["Council Approves New Budget"]
    assert candidates[0].start == text.index("Council")


def test_byline_after_lowercase_clause_is_ignored():
    text = "and the meeting ran late\nBy Jane Roe\nMore text follows."
    assert detect_byline_headlines(text, DEFAULT_CONFIG) == []


def test_date_headline():
    text = "October 5, 2025\nTownship Council Approves Budget\nThe council voted 4-1 on Tuesday."
    candidates = detect_date_headlines(text, DEFAULT_CONFIG)

    assert len(candidates) == 1
    assert candidates[0].title == "Township Council Approves Budget"
    assert candidates[0].confidence == DEFAULT_CONFIG.date_confidence
    assert text[candidates[0].start:candidates[0].end] == "Township Council Approves Budget"


def test_date_followed_by_sentence_is_not_a_headline():
    text = "October 5, 2025\nResidents gathered at the park to discuss the new trail plans."
    assert detect_date_headlines(text, DEFAULT_CONFIG) == []


def test_section_hint_matches_case_insensitively():
    config = replace(DEFAULT_CONFIG, section_hints=("Mayor's Corner",))
    text = "Front page news.\nMAYOR'S CORNER\nThis month the township celebrates..."
    candidates = detect_section_headlines(text, config)

    assert len(candidates) == 1
    assert candidates[0].title == "Mayor's Corner"
    assert candidates[0].confidence == DEFAULT_CONFIG.section_confidence
    assert text[candidates[0].start:candidates[0].end] == "MAYOR'S CORNER"


def test_locate_lines_tolerates_whitespace():
    text = "Alpha  Beta\nGamma"
    lines = [PageLine("Alpha Beta"), PageLine("Gamma"), PageLine("Missing Line")]
    assert locate_lines(text, lines) == [(0, 11), (12, 17), None]


BOLD_TEXT = "Local Pool Reopens\nAfter Repairs\nBy Dana Lee\nThe township pool reopened Saturday after a six-week"

BOLD_LINES = [
    PageLine("Local Pool Reopens", is_bold=True, page=1, y=100),
    PageLine("After Repairs", is_bold=True, page=1, y=120),
    PageLine("By Dana Lee", is_bold=False, page=1, y=140),
    PageLine("The township pool reopened Saturday after a six-week", is_bold=False, page=1, y=160),
]


def test_bold_cluster_spans_lines_and_takes_byline_author():
    candidates = detect_bold_clusters(BOLD_TEXT, BOLD_LINES, DEFAULT_CONFIG)

    assert len(candidates) == 1
    c = candidates[0]
    assert c.title == "Local Pool Reopens After Repairs"
    assert c.author == "Dana Lee"
    assert (c.start, c.end) == (0, 32)
    assert c.page == 1
    # base + full bold bonus + full title-case bonus
    assert c.confidence == pytest.approx(2.1 + 1.1 + 0.7)


def test_bold_cluster_orders_lines_by_position():
    shuffled = [BOLD_LINES[2], BOLD_LINES[0], BOLD_LINES[3], BOLD_LINES[1]]
    assert detect_bold_clusters(BOLD_TEXT, shuffled, DEFAULT_CONFIG) == \
        detect_bold_clusters(BOLD_TEXT, BOLD_LINES, DEFAULT_CONFIG)


def test_bold_cluster_stops_at_page_break():
    text = "Budget Talks Continue\n\nLibrary Hours Extended"
    lines = [
        PageLine("Budget Talks Continue", is_bold=True, page=1, y=700),
        PageLine("Library Hours Extended", is_bold=True, page=2, y=50),
    ]
    candidates = detect_bold_clusters(text, lines, DEFAULT_CONFIG)
    assert [c.title for c in candidates] == ["Budget Talks Continue", "Library Hours Extended"]
    assert [c.page for c in candidates] == [1, 2]


def test_line_metric_scan_without_bold():
    text = (
        "SCHOOL BOARD NAMES NEW PRINCIPAL\n"
        "The board voted unanimously on Monday to appoint a new leader.\n"
        "She starts in September and replaces a retiring principal."
    )
    lines = [PageLine(ln, page=1, y=float(i)) for i, ln in enumerate(text.split("\n"))]

    assert line_metric_score(lines[0], DEFAULT_CONFIG) == pytest.approx(2.0)
    candidates = detect_line_metric_headlines(text, lines, DEFAULT_CONFIG)

    assert len(candidates) == 1
    assert candidates[0].title == "SCHOOL BOARD NAMES NEW PRINCIPAL"
    assert candidates[0].confidence == pytest.approx(2.8)
    assert candidates[0].source == "line_metric"


def test_line_metric_scan_skipped_when_bold_is_common():
    assert detect_line_metric_headlines(BOLD_TEXT, BOLD_LINES, DEFAULT_CONFIG) == []


def test_detect_candidates_without_lines_runs_text_detectors_only():
    text = "SCHOOL BOARD NAMES NEW PRINCIPAL\nThe board voted unanimously on Monday."
    assert detect_candidates(text, None, DEFAULT_CONFIG) == []


def test_detectors_do_not_mutate_input():
    lines = list(BOLD_LINES)
    detect_candidates(BOLD_TEXT, lines, DEFAULT_CONFIG)
    assert lines == BOLD_LINES


def test_sentence_starting_with_by_does_not_anchor_a_headline():
    text = f"{POOL_TITLE}\n{LABOR_DAY_BODY}"
    assert detect_byline_headlines(text, DEFAULT_CONFIG) == []


def test_locate_lines_across_rejoined_hyphen():
    text = "the pool reopened Saturday"
    lines = [PageLine("the pool re-"), PageLine("opened Saturday")]
    assert locate_lines(text, lines) == [(0, 11), (11, 26)]


def test_bold_cluster_with_hyphenated_line_break():
    text = "Township Pool Reopens After Repairs\nBy Dana Lee\nThe pool reopened Saturday."
    lines = [
        PageLine("Township Pool Re-", is_bold=True, page=1, y=10),
        PageLine("opens After Repairs", is_bold=True, page=1, y=30),
        PageLine("By Dana Lee", page=1, y=50),
        PageLine("The pool reopened Saturday.", page=1, y=70),
    ]
    candidates = detect_bold_clusters(text, lines, DEFAULT_CONFIG)

    assert len(candidates) == 1
    assert candidates[0].title == "Township Pool Reopens After Repairs"
    assert (candidates[0].start, candidates[0].end) == (0, 35)
    assert candidates[0].author == "Dana Lee"
