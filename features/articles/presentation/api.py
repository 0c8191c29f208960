"""
FastAPI routes for the article extraction feature.

Feature: turn an uploaded newspaper PDF into article drafts, then publish,
list and delete the site's article JSON files.
"""

from __future__ import annotations

import logging
import os
import shutil
import tempfile
from typing import Any

from fastapi import APIRouter, File, Form, HTTPException, UploadFile
from pydantic import BaseModel

from features.articles.application.dtos import (
    ArticleDTO,
    ExtractArticlesRequestDTO,
    ExtractArticlesResponseDTO,
    PageLineDTO,
    PublishArticlesRequestDTO,
    PublishArticlesResponseDTO,
    SegmentTextRequestDTO,
    UpdateArticleRequestDTO,
)
from features.articles.application.use_cases import (
    DeleteArticleUseCase,
    ExtractArticlesUseCase,
    ListArticlesUseCase,
    PublishArticlesUseCase,
    SegmentTextUseCase,
    UpdateArticleUseCase,
)
from features.articles.domain.errors import (
    ArticleNotFoundError,
    InvalidArticleFilenameError,
    PdfExtractionError,
)
from features.articles.domain.interfaces import ILineExtractor
from features.articles.infrastructure.article_segmenter import ArticleSegmenter
from features.articles.infrastructure.article_store_json import JsonArticleStore
from features.articles.infrastructure.pdf_line_extractor_pdfplumber import PdfPlumberLineExtractor
from features.articles.infrastructure.pdf_line_extractor_pymupdf import PyMuPdfLineExtractor
from features.articles.infrastructure.segmenter_config import SegmenterConfig

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/articles", tags=["articles"])


INVALID_PDF_MESSAGE = "Please upload a valid PDF file."


class ContentBlock(BaseModel):
    type: str = "paragraph"
    text: str


class Article(BaseModel):
    """Article draft as edited in the admin tool."""
    id: str
    title: str
    description: str
    date: str
    author: str
    category: str
    tags: list[str]
    image: str | None = None
    featured: bool
    content: list[ContentBlock]
    wordCount: int


class ExtractArticlesResponse(BaseModel):
    success: bool = True
    articles: list[Article]
    total_articles: int
    used_fallback: bool
    message: str


class PageLine(BaseModel):
    """Single line of the PDF text layer."""
    text: str
    isBold: bool = False
    page: int = 1
    y: float = 0.0


class SegmentTextRequest(BaseModel):
    """Request for segmenting an already-extracted text layer."""
    full_text: str
    lines: list[PageLine] | None = None
    section_hints: list[str] | None = None
    default_author: str | None = None
    date: str | None = None


class PublishArticlesRequest(BaseModel):
    articles: list[dict[str, Any]]


class PublishArticlesResponse(BaseModel):
    success: bool
    published: list[dict[str, Any]]
    errors: list[dict[str, Any]]


class ListArticlesResponse(BaseModel):
    success: bool = True
    articles: list[dict[str, Any]]
    count: int


class DeleteArticleResponse(BaseModel):
    success: bool = True
    message: str


class UpdateArticleRequest(BaseModel):
    """Fields to merge over one stored article file."""
    filename: str | None = None
    article: dict[str, Any] | None = None


class UpdateArticleResponse(BaseModel):
    success: bool = True
    message: str
    article: dict[str, Any]


# ==================== Builders ====================


def build_segmenter(
    default_author: str | None = None,
    section_hints: list[str] | None = None,
) -> ArticleSegmenter:
    """Segmenter from environment config plus per-request overrides."""
    config = SegmenterConfig.from_env().with_overrides(
        default_author=default_author,
        section_hints=tuple(section_hints) if section_hints is not None else None,
    )
    return ArticleSegmenter(config)


def build_line_extractor() -> ILineExtractor:
    """PDF backend selected by ARTICLES_PDF_BACKEND (pymupdf | pdfplumber)."""
    backend = os.getenv("ARTICLES_PDF_BACKEND", "pymupdf").lower()
    if backend == "pdfplumber":
        return PdfPlumberLineExtractor()
    return PyMuPdfLineExtractor()


def build_article_store() -> JsonArticleStore:
    """Article JSON files in ARTICLES_DIR, pasted images in ARTICLES_IMAGES_DIR."""
    return JsonArticleStore(
        os.getenv("ARTICLES_DIR", os.path.join("src", "data", "articles")),
        images_dir=os.getenv("ARTICLES_IMAGES_DIR", os.path.join("public", "images", "extracted")),
    )


def _to_article_model(dto: ArticleDTO) -> Article:
    return Article(
        id=dto.id,
        title=dto.title,
        description=dto.description,
        date=dto.date,
        author=dto.author,
        category=dto.category,
        tags=dto.tags,
        image=dto.image,
        featured=dto.featured,
        content=[ContentBlock(**block) for block in dto.content],
        wordCount=dto.wordCount,
    )


def _to_extract_response(dto_out: ExtractArticlesResponseDTO) -> ExtractArticlesResponse:
    if dto_out.total_articles == 0:
        message = "No text found in the document; no articles were extracted."
    elif dto_out.used_fallback:
        message = (
            f"No headline structure found; split the text into {dto_out.total_articles} "
            f"draft article(s) for manual editing."
        )
    else:
        message = f"Successfully extracted {dto_out.total_articles} articles from the PDF."
    return ExtractArticlesResponse(
        articles=[_to_article_model(a) for a in dto_out.articles],
        total_articles=dto_out.total_articles,
        used_fallback=dto_out.used_fallback,
        message=message,
    )


def _split_hints(raw: str | None) -> list[str] | None:
    if raw is None:
        return None
    return [h.strip() for h in raw.split("|") if h.strip()]


def _is_pdf_upload(upload: UploadFile) -> bool:
    filename = (upload.filename or "").lower()
    return upload.content_type == "application/pdf" or filename.endswith(".pdf")


# ==================== Extraction ====================


@router.post("/extract", response_model=ExtractArticlesResponse)
def extract_articles(
    pdfFile: UploadFile | None = File(None),
    default_author: str | None = Form(None),
    section_hints: str | None = Form(None),
    max_pages: int | None = Form(None),
) -> ExtractArticlesResponse:
    """
    Extract article drafts from an uploaded newspaper PDF.

    Runs:
      - Text-layer extraction (full text + per-line bold metadata)
      - Headline/byline segmentation, fixed-size chunking as fallback

    Form fields:
      - pdfFile: the PDF upload
      - default_author: author for articles without a byline
      - section_hints: "|"-separated recurring section titles
      - max_pages: limit processing to the first N pages
    """
    if pdfFile is None or not _is_pdf_upload(pdfFile):
        logger.info("extract_articles: rejected upload (missing or not a PDF)")
        raise HTTPException(status_code=400, detail=INVALID_PDF_MESSAGE)

    logger.info(f"extract_articles: received {pdfFile.filename!r} ({pdfFile.content_type})")

    tmp = tempfile.NamedTemporaryFile(suffix=".pdf", delete=False)
    try:
        with tmp:
            shutil.copyfileobj(pdfFile.file, tmp)

        use_case = ExtractArticlesUseCase(
            line_extractor=build_line_extractor(),
            segmenter=build_segmenter(default_author, _split_hints(section_hints)),
        )
        dto_in = ExtractArticlesRequestDTO(pdf_path=tmp.name, max_pages=max_pages)

        try:
            dto_out = use_case.execute(dto_in)
        except PdfExtractionError as e:
            raise HTTPException(status_code=400, detail=f"{INVALID_PDF_MESSAGE} {e}") from e
        except Exception as e:
            logger.exception("extract_articles: extraction failed")
            raise HTTPException(status_code=500, detail=f"PDF extraction failed: {e}") from e
    finally:
        os.remove(tmp.name)

    return _to_extract_response(dto_out)


@router.post("/segment", response_model=ExtractArticlesResponse)
def segment_text(request: SegmentTextRequest) -> ExtractArticlesResponse:
    """
    Segment an already-extracted text layer.

    Without `lines` only the text-based detectors run (byline, date, sections).
    """
    use_case = SegmentTextUseCase(segmenter=build_segmenter(request.default_author, request.section_hints))
    dto_in = SegmentTextRequestDTO(
        full_text=request.full_text,
        lines=(
            [PageLineDTO(text=ln.text, isBold=ln.isBold, page=ln.page, y=ln.y) for ln in request.lines]
            if request.lines is not None
            else None
        ),
        date=request.date,
    )

    try:
        dto_out = use_case.execute(dto_in)
    except Exception as e:
        logger.exception("segment_text: segmentation failed")
        raise HTTPException(status_code=500, detail=f"Segmentation failed: {e}") from e

    return _to_extract_response(dto_out)


# ==================== Article files ====================


@router.post("/publish", response_model=PublishArticlesResponse)
def publish_articles(request: PublishArticlesRequest) -> PublishArticlesResponse:
    """Write article drafts as JSON files into the site's articles directory."""
    if not request.articles:
        raise HTTPException(status_code=400, detail="No articles provided")

    use_case = PublishArticlesUseCase(store=build_article_store())
    dto_out: PublishArticlesResponseDTO = use_case.execute(PublishArticlesRequestDTO(articles=request.articles))

    if dto_out.errors and not dto_out.published:
        raise HTTPException(
            status_code=500,
            detail={"error": "Failed to publish articles", "details": dto_out.errors},
        )

    return PublishArticlesResponse(success=True, published=dto_out.published, errors=dto_out.errors)


@router.get("", response_model=ListArticlesResponse)
def list_articles() -> ListArticlesResponse:
    """List published articles, newest first."""
    articles = ListArticlesUseCase(store=build_article_store()).execute()
    return ListArticlesResponse(articles=articles, count=len(articles))


@router.delete("/{filename}", response_model=DeleteArticleResponse)
def delete_article(filename: str) -> DeleteArticleResponse:
    """Delete one published article file."""
    try:
        DeleteArticleUseCase(store=build_article_store()).execute(filename)
    except InvalidArticleFilenameError as e:
        raise HTTPException(status_code=403, detail="Invalid filename") from e
    except ArticleNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e

    return DeleteArticleResponse(message=f"Article {filename} deleted successfully")


@router.post("/update", response_model=UpdateArticleResponse)
def update_article(request: UpdateArticleRequest) -> UpdateArticleResponse:
    """Merge edited fields over one published article file."""
    if not request.filename or request.article is None:
        raise HTTPException(status_code=400, detail="Missing filename or article data")

    dto_in = UpdateArticleRequestDTO(filename=request.filename, article=request.article)
    try:
        article = UpdateArticleUseCase(store=build_article_store()).execute(dto_in)
    except InvalidArticleFilenameError as e:
        raise HTTPException(status_code=403, detail="Invalid filename") from e
    except (OSError, ValueError) as e:
        logger.exception("update_article: write failed")
        raise HTTPException(status_code=500, detail=f"Failed to update article: {e}") from e

    return UpdateArticleResponse(message=f"Article {request.filename} updated successfully", article=article)
