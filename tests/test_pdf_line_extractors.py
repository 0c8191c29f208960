import pytest
from PIL import Image

from features.articles.domain.errors import PdfExtractionError
from features.articles.infrastructure.article_segmenter import ArticleSegmenter
from features.articles.infrastructure.pdf_line_extractor_pdfplumber import (
    PdfPlumberLineExtractor,
    group_words_into_lines,
)
from features.articles.infrastructure.pdf_line_extractor_pymupdf import (
    PyMuPdfLineExtractor,
    dehyphenate,
    is_bold_span,
)
from features.articles.infrastructure.utils.ocr_utils import (
    normalize_ocr_text,
    preprocess_for_ocr,
    validate_ocr_quality,
)

from conftest import POOL_TITLE


def test_dehyphenate_only_joins_wrapped_words():
    assert dehyphenate("the pool re-\nopened") == "the pool reopened"
    assert dehyphenate("six-week repair") == "six-week repair"


def test_is_bold_span():
    assert is_bold_span({"flags": 16, "font": "Times"})
    assert is_bold_span({"flags": 0, "font": "Helvetica-Bold"})
    assert not is_bold_span({"flags": 0, "font": "Helvetica"})


def test_pymupdf_extracts_bold_lines(newspaper_pdf):
    document = PyMuPdfLineExtractor().extract(str(newspaper_pdf))

    assert document.pages == 1
    assert POOL_TITLE in document.full_text
    by_text = {ln.text: ln for ln in document.lines}
    assert by_text[POOL_TITLE].is_bold
    assert not by_text["By Dana Lee"].is_bold
    assert all(ln.page == 1 for ln in document.lines)


def test_pymupdf_extraction_feeds_segmenter(newspaper_pdf):
    document = PyMuPdfLineExtractor().extract(str(newspaper_pdf))
    articles = ArticleSegmenter().segment(document.full_text, document.lines)

    assert len(articles) == 1
    assert articles[0].title == POOL_TITLE
    assert articles[0].author == "Dana Lee"
    assert articles[0].body.startswith("The township pool reopened")


def test_pymupdf_rejects_non_pdf(tmp_path):
    path = tmp_path / "broken.pdf"
    path.write_bytes(b"this is not a pdf")
    with pytest.raises(PdfExtractionError):
        PyMuPdfLineExtractor().extract(str(path))


def test_pdfplumber_uses_embedded_text(newspaper_pdf):
    document = PdfPlumberLineExtractor().extract(str(newspaper_pdf))

    assert document.pages == 1
    assert "Dana Lee" in document.full_text
    title_lines = [ln for ln in document.lines if ln.text == POOL_TITLE]
    assert title_lines and title_lines[0].is_bold


def test_group_words_into_lines():
    words = [
        {"text": "Reopens", "x0": 120, "top": 101.0, "fontname": "Helvetica-Bold"},
        {"text": "Pool", "x0": 60, "top": 100.0, "fontname": "Helvetica-Bold"},
        {"text": "By", "x0": 10, "top": 130.0, "fontname": "Helvetica"},
        {"text": "Dana", "x0": 30, "top": 130.5, "fontname": "Helvetica"},
    ]
    lines = group_words_into_lines(words, page_number=2)

    assert [ln.text for ln in lines] == ["Pool Reopens", "By Dana"]
    assert [ln.is_bold for ln in lines] == [True, False]
    assert all(ln.page == 2 for ln in lines)


def test_normalize_ocr_text():
    raw = "The ﬁre  station\x0c\n\n\n\n“reopens”  today"
    assert normalize_ocr_text(raw) == 'The fire station\n\n"reopens" today'


def test_validate_ocr_quality():
    assert validate_ocr_quality("")[0] is False
    assert validate_ocr_quality("12")[0] is False
    assert validate_ocr_quality("|||| 1234 ---- 5678 ||||")[0] is False
    assert validate_ocr_quality("The township pool reopened Saturday.") == (True, "OK")


def test_preprocess_for_ocr_returns_binary_image():
    processed = preprocess_for_ocr(Image.new("RGB", (60, 40), "white"))
    assert processed.size == (60, 40)
    assert processed.mode == "L"
