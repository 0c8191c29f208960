"""
Text-layer extraction with pdfplumber + Tesseract OCR.

Alternative to the PyMuPDF extractor for scanned newspapers:
  1. Try the embedded text layer first (fast, keeps font names for bold)
  2. If a page has fewer than ocr_threshold characters, render and OCR it
  3. Return the same ExtractedDocument shape as the PyMuPDF extractor

OCR'd pages carry no font information, so their lines are never bold; the
segmenter's line-metric scan covers that case.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Tuple

import pdfplumber

from features.articles.domain.entities import ExtractedDocument, PageLine
from features.articles.domain.errors import PdfExtractionError
from features.articles.domain.interfaces import ILineExtractor
from features.articles.infrastructure.pdf_line_extractor_pymupdf import BOLD_FONT_RE, dehyphenate
from features.articles.infrastructure.text_metrics import normalize_whitespace
from features.articles.infrastructure.utils.ocr_utils import (
    normalize_ocr_text,
    ocr_image,
    validate_ocr_quality,
)

logger = logging.getLogger(__name__)


def group_words_into_lines(
    words: List[Dict[str, Any]],
    page_number: int,
    y_tolerance: float = 3.0,
) -> List[PageLine]:
    """
    Group pdfplumber words into visual lines by their top coordinate.

    Words whose tops are within y_tolerance belong to the same line; a line
    is bold when most of its characters use a bold font.
    """
    rows: List[Tuple[float, List[Dict[str, Any]]]] = []
    for word in sorted(words, key=lambda w: (float(w["top"]), float(w["x0"]))):
        top = float(word["top"])
        if rows and abs(rows[-1][0] - top) <= y_tolerance:
            rows[-1][1].append(word)
        else:
            rows.append((top, [word]))

    lines: List[PageLine] = []
    for top, row in rows:
        row.sort(key=lambda w: float(w["x0"]))
        text = normalize_whitespace(" ".join(str(w["text"]) for w in row))
        if not text:
            continue
        total = sum(len(str(w["text"])) for w in row)
        bold = sum(len(str(w["text"])) for w in row if BOLD_FONT_RE.search(str(w.get("fontname", ""))))
        lines.append(PageLine(text=text, is_bold=total > 0 and bold * 2 >= total, page=page_number, y=top))
    return lines


def extract_page_text_or_ocr(
    page: "pdfplumber.page.Page",
    ocr_dpi: int = 300,
    ocr_threshold: int = 50,
) -> Tuple[str, List[PageLine], str]:
    """
    Try embedded text first. If too little, render and OCR.

    Returns:
        (page text, page lines, source) where source is "embedded" or "ocr"
    """
    embedded = (page.extract_text(x_tolerance=2, y_tolerance=2) or "").strip()

    if len(embedded) >= ocr_threshold:
        words = page.extract_words(x_tolerance=2, y_tolerance=2, extra_attrs=["fontname"]) or []
        return embedded, group_words_into_lines(words, page.page_number), "embedded"

    pil_img = page.to_image(resolution=ocr_dpi).original
    raw = normalize_ocr_text(ocr_image(pil_img))
    ok, reason = validate_ocr_quality(raw)
    if not ok:
        logger.warning(f"extract_page_text_or_ocr: page {page.page_number}: low OCR quality ({reason})")

    lines = [
        PageLine(text=normalize_whitespace(ln), is_bold=False, page=page.page_number, y=float(idx))
        for idx, ln in enumerate(raw.splitlines())
        if ln.strip()
    ]
    return raw, lines, "ocr"


class PdfPlumberLineExtractor(ILineExtractor):
    """ILineExtractor adapter backed by pdfplumber with Tesseract fallback."""

    def __init__(self, ocr_dpi: int = 300, ocr_threshold: int = 50):
        self.ocr_dpi = ocr_dpi
        self.ocr_threshold = ocr_threshold

    def extract(self, pdf_path: str, max_pages: Optional[int] = None) -> ExtractedDocument:
        try:
            pdf = pdfplumber.open(pdf_path)
        except Exception as e:
            raise PdfExtractionError(f"Cannot open PDF {pdf_path}: {e}") from e

        with pdf:
            page_texts: List[str] = []
            all_lines: List[PageLine] = []
            ocr_pages = 0

            pages = pdf.pages[:max_pages] if max_pages is not None else pdf.pages
            for page in pages:
                text, lines, source = extract_page_text_or_ocr(
                    page, ocr_dpi=self.ocr_dpi, ocr_threshold=self.ocr_threshold
                )
                if source == "ocr":
                    ocr_pages += 1
                logger.debug(f"PdfPlumberLineExtractor: page {page.page_number} ({source}): {len(lines)} line(s)")
                page_texts.append(text)
                all_lines.extend(lines)

        full_text = dehyphenate("\n\n".join(t for t in page_texts if t.strip()))
        logger.info(f"PdfPlumberLineExtractor: {len(page_texts)} page(s) ({ocr_pages} OCR), "
                    f"{len(all_lines)} line(s) from {pdf_path}")
        return ExtractedDocument(full_text=full_text, lines=all_lines, pages=len(page_texts))
