"""
OCR Utilities Module

Helpers for scanned newspaper pages without a usable text layer:
- Image preprocessing for newsprint (grey paper, bleed-through, thin serifs)
- Tesseract OCR wrapper
- OCR output cleanup and quality validation
"""

from __future__ import annotations

import re
import unicodedata
from typing import Tuple

import cv2
import numpy as np
import pytesseract
from PIL import Image


LETTER_RE = re.compile(r"[A-Za-z]")

# Typographic ligatures Tesseract and PDF text layers tend to emit
LIGATURES = {
    "ﬀ": "ff",
    "ﬁ": "fi",
    "ﬂ": "fl",
    "ﬃ": "ffi",
    "ﬄ": "ffl",
}


def normalize_ocr_text(text: str) -> str:
    """
    Minimal cleanup of OCR output.

    - Expand ligatures
    - Straighten curly quotes
    - Remove control characters (keeping newlines)
    - Collapse spaces, keep at most one blank line between paragraphs
    """
    if not text:
        return ""

    for lig, repl in LIGATURES.items():
        text = text.replace(lig, repl)
    text = text.replace("“", '"').replace("”", '"').replace("‘", "'").replace("’", "'")
    text = "".join(ch for ch in text if ch == "\n" or unicodedata.category(ch) not in ("Cc", "Cf"))

    text = re.sub(r"[ \t]+", " ", text)
    text = re.sub(r" *\n *", "\n", text)
    text = re.sub(r"\n{3,}", "\n\n", text)

    return text.strip()


def preprocess_for_ocr(pil_img: Image.Image) -> Image.Image:
    """
    OCR pre-processing tuned for scanned newsprint.

    Processing steps:
    1. Convert to grayscale
    2. Median blur to remove paper speckle
    3. Adaptive threshold (uneven scans, shaded photo captions)
    4. Light closing to reconnect broken serif strokes

    Args:
        pil_img: PIL Image to preprocess

    Returns:
        Preprocessed PIL Image ready for OCR
    """
    img = np.array(pil_img.convert("RGB"))
    gray = cv2.cvtColor(img, cv2.COLOR_RGB2GRAY)

    gray = cv2.medianBlur(gray, 3)

    thr = cv2.adaptiveThreshold(
        gray, 255,
        cv2.ADAPTIVE_THRESH_GAUSSIAN_C,
        cv2.THRESH_BINARY,
        31, 15
    )

    kernel = cv2.getStructuringElement(cv2.MORPH_RECT, (2, 2))
    thr = cv2.morphologyEx(thr, cv2.MORPH_CLOSE, kernel, iterations=1)

    return Image.fromarray(thr)


def ocr_image(pil_img: Image.Image, lang: str = "eng", psm: int = 4) -> str:
    """
    Tesseract OCR with preprocessing.

    Args:
        pil_img: PIL Image to OCR
        lang: Tesseract language(s)
        psm: Page segmentation mode (4 = single column of variable-size text,
            which keeps headline lines separate from body lines)

    Returns:
        Extracted text from image
    """
    proc = preprocess_for_ocr(pil_img)

    # OEM 1 = LSTM neural net mode
    config = f"--oem 1 --psm {psm}"

    try:
        return pytesseract.image_to_string(proc, lang=lang, config=config)
    except Exception as e:
        try:
            return pytesseract.image_to_string(pil_img, lang=lang, config=config)
        except Exception as fallback_e:
            raise RuntimeError(
                f"OCR failed with preprocessing: {e}, "
                f"and without preprocessing: {fallback_e}"
            ) from fallback_e


def validate_ocr_quality(text: str, min_chars: int = 10) -> Tuple[bool, str]:
    """
    Validate OCR output quality.

    Returns:
        Tuple of (is_valid, reason)
    """
    if not text or not text.strip():
        return False, "No text extracted"

    clean_text = text.strip()

    if len(clean_text) < min_chars:
        return False, f"Text too short ({len(clean_text)} chars)"

    letters = LETTER_RE.findall(clean_text)
    if len(letters) < len(clean_text) * 0.3:
        return False, "Text appears to be mostly non-letters"

    return True, "OK"
