import fitz  # PyMuPDF
import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from features.articles.presentation.api import router as articles_router


POOL_TITLE = "Local Pool Reopens After Repairs"

POOL_BODY = (
    "The township pool reopened Saturday after a six-week repair to its filtration system. "
    "Officials said attendance exceeded expectations on opening day and many residents "
    "expressed relief at the timely fix before the end of summer."
)

POOL_TEXT = f"{POOL_TITLE}\nBy Dana Lee\n{POOL_BODY}"

BASKETBALL_TITLE = "Varsity Basketball Team Wins Title"

BASKETBALL_BODY = (
    "The varsity basketball team won the county championship on Friday night with a "
    "last-second shot. Coach Rivera praised the players for their defense and thanked "
    "the fans who filled the gym all season."
)

LABOR_DAY_BODY = (
    "The township pool reopened Saturday after a six-week repair. By Labor Day Weekend crowds "
    "had returned to the deep end and lifeguards reported a busy week for families across town."
)

TWO_ARTICLE_TEXT = (
    f"{POOL_TEXT}\n\n"
    f"{BASKETBALL_TITLE}\nBy Sam Ortiz\n{BASKETBALL_BODY}"
)


@pytest.fixture
def pool_text():
    return POOL_TEXT


@pytest.fixture
def two_article_text():
    return TWO_ARTICLE_TEXT


@pytest.fixture
def newspaper_pdf(tmp_path):
    """One-page PDF: bold headline, byline, three body lines."""
    path = tmp_path / "gazette.pdf"
    doc = fitz.open()
    page = doc.new_page()
    page.insert_text((72, 72), POOL_TITLE, fontname="hebo", fontsize=18)
    page.insert_text((72, 100), "By Dana Lee", fontname="helv", fontsize=11)
    body_lines = [
        "The township pool reopened Saturday after a six-week repair to its",
        "filtration system. Officials said attendance exceeded expectations on",
        "opening day and many residents expressed relief at the timely fix.",
    ]
    for i, line in enumerate(body_lines):
        page.insert_text((72, 130 + i * 14), line, fontname="helv", fontsize=11)
    doc.save(str(path))
    doc.close()
    return path


@pytest.fixture
def client(tmp_path, monkeypatch):
    monkeypatch.setenv("ARTICLES_DIR", str(tmp_path / "articles"))
    monkeypatch.setenv("ARTICLES_IMAGES_DIR", str(tmp_path / "images"))
    monkeypatch.delenv("ARTICLES_DEFAULT_AUTHOR", raising=False)
    monkeypatch.delenv("ARTICLES_SECTION_HINTS", raising=False)
    monkeypatch.delenv("ARTICLES_PDF_BACKEND", raising=False)

    app = FastAPI()
    app.include_router(articles_router)
    return TestClient(app)
