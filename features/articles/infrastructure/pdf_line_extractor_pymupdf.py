"""
Text-layer extraction with PyMuPDF.

Produces the segmenter input for a newspaper PDF:
  - full text: page texts joined by blank lines, hyphenated line-wrap
    breaks removed, blocks separated by blank lines
  - page lines: one PageLine per visual line with bold / page / y metadata

Bold detection uses the span font flags (bold bit) and the font name
(Bold, Black, Heavy, Semibold, ...). A line counts as bold when most of its
characters are set in a bold font.

Text is NOT otherwise modified; no segmentation happens here.
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import asdict
from typing import Any, Dict, List, Optional, Tuple

import fitz  # PyMuPDF

from features.articles.domain.entities import ExtractedDocument, PageLine
from features.articles.domain.errors import PdfExtractionError
from features.articles.domain.interfaces import ILineExtractor
from features.articles.infrastructure.text_metrics import normalize_whitespace

logger = logging.getLogger(__name__)


# PyMuPDF span flag bit for bold text
FONT_FLAG_BOLD = 16

BOLD_FONT_RE = re.compile(r"(bold|black|heavy|semibold|demi|extrabold|ultra)", re.IGNORECASE)

# "reopen-\ned" → "reopened" (only between lowercase letters to keep real dashes)
HYPHEN_BREAK_RE = re.compile(r"([a-z])-\n[ \t]*([a-z])")


def dehyphenate(text: str) -> str:
    """Remove hyphenated line-wrap breaks."""
    return HYPHEN_BREAK_RE.sub(r"\1\2", text)


def is_bold_span(span: Dict[str, Any]) -> bool:
    """Bold when the bold flag is set or the font name says so."""
    flags = int(span.get("flags", 0) or 0)
    font = str(span.get("font", "") or "")
    return bool(flags & FONT_FLAG_BOLD) or bool(BOLD_FONT_RE.search(font))


def _line_from_spans(spans: List[Dict[str, Any]]) -> Tuple[str, bool]:
    """Join span texts and decide boldness by character majority."""
    text = "".join(str(s.get("text", "")) for s in spans)
    bold_chars = sum(len(str(s.get("text", "")).strip()) for s in spans if is_bold_span(s))
    total_chars = sum(len(str(s.get("text", "")).strip()) for s in spans)
    return text, total_chars > 0 and bold_chars * 2 >= total_chars


def _extract_page(page: "fitz.Page", page_number: int) -> Tuple[str, List[PageLine]]:
    """Return (page text, page lines) for one page."""
    data = page.get_text("dict", sort=True) or {}
    block_texts: List[str] = []
    lines: List[PageLine] = []

    for block in data.get("blocks", []):
        # 0 = text block according to PyMuPDF
        if block.get("type", 0) != 0:
            continue

        block_lines: List[str] = []
        for line in block.get("lines", []):
            raw_text, bold = _line_from_spans(line.get("spans", []))
            if not raw_text.strip():
                continue
            block_lines.append(raw_text.rstrip())

            bbox = line.get("bbox") or block.get("bbox") or (0, 0, 0, 0)
            lines.append(
                PageLine(
                    text=normalize_whitespace(raw_text),
                    is_bold=bold,
                    page=page_number,
                    y=float(bbox[1]),
                )
            )

        if block_lines:
            block_texts.append("\n".join(block_lines))

    return "\n\n".join(block_texts), lines


class PyMuPdfLineExtractor(ILineExtractor):
    """ILineExtractor adapter backed by PyMuPDF."""

    def extract(self, pdf_path: str, max_pages: Optional[int] = None) -> ExtractedDocument:
        try:
            doc = fitz.open(pdf_path)
        except Exception as e:
            raise PdfExtractionError(f"Cannot open PDF {pdf_path}: {e}") from e

        try:
            page_texts: List[str] = []
            all_lines: List[PageLine] = []

            for i, page in enumerate(doc, start=1):
                if max_pages is not None and i > max_pages:
                    break
                page_text, page_lines = _extract_page(page, i)
                logger.debug(f"PyMuPdfLineExtractor: page {i}: {len(page_lines)} line(s), "
                             f"{sum(1 for ln in page_lines if ln.is_bold)} bold")
                page_texts.append(page_text)
                all_lines.extend(page_lines)

            full_text = dehyphenate("\n\n".join(t for t in page_texts if t.strip()))
            logger.info(f"PyMuPdfLineExtractor: {len(page_texts)} page(s), {len(all_lines)} line(s), "
                        f"{len(full_text)} chars from {pdf_path}")
            return ExtractedDocument(full_text=full_text, lines=all_lines, pages=len(page_texts))
        finally:
            doc.close()


def save_extracted_document(
    pdf_path: str,
    output_json_path: str,
    ensure_ascii: bool = False,
    indent: Optional[int] = 2,
) -> None:
    """
    Convenience helper: run extraction and save result to a JSON file.
    """
    document = PyMuPdfLineExtractor().extract(pdf_path)
    with open(output_json_path, "w", encoding="utf-8") as f:
        json.dump(asdict(document), f, ensure_ascii=ensure_ascii, indent=indent)


if __name__ == "__main__":
    # Minimal CLI entry point for ad-hoc runs:
    #   python -m features.articles.infrastructure.pdf_line_extractor_pymupdf \
    #       newspaper.pdf extracted_lines.json
    import argparse
    import os

    parser = argparse.ArgumentParser(
        description="Extract PDF text layer (full text + bold line metadata) with PyMuPDF."
    )
    parser.add_argument("pdf_path", type=str, help="Path to the newspaper PDF.")
    parser.add_argument(
        "output_json",
        type=str,
        nargs="?",
        default="extracted_lines.json",
        help="Path to write the extracted JSON output.",
    )

    args = parser.parse_args()

    if not os.path.exists(args.pdf_path):
        raise SystemExit(f"PDF not found: {args.pdf_path}")

    save_extracted_document(args.pdf_path, args.output_json)
    print(f"Extraction saved to: {args.output_json}")
