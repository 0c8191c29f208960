"""
Entry point for the FastAPI application.

Run with (from project root):

    uvicorn main:app --reload

Currently exposes the \"articles\" feature via:

    POST   /api/v1/articles/extract
    POST   /api/v1/articles/segment
    POST   /api/v1/articles/publish
    POST   /api/v1/articles/update
    GET    /api/v1/articles
    DELETE /api/v1/articles/{filename}
"""

import logging
import sys

from fastapi import FastAPI

from features.articles.presentation.api import router as articles_router

# Configure logging
logging.basicConfig(
    level=logging.INFO,  # Set to DEBUG for more verbose output
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[
        logging.StreamHandler(sys.stdout),
        logging.FileHandler('article_extraction.log', encoding='utf-8')
    ]
)

# Set specific log levels for modules
logging.getLogger("features.articles.infrastructure.headline_detectors").setLevel(logging.DEBUG)
logging.getLogger("features.articles.infrastructure.candidate_merger").setLevel(logging.DEBUG)
logging.getLogger("features.articles.infrastructure.article_assembler").setLevel(logging.DEBUG)
logging.getLogger("features.articles.infrastructure.pdf_line_extractor_pymupdf").setLevel(logging.DEBUG)

logger = logging.getLogger(__name__)
logger.info("Starting Newspaper Article Extraction API")

app = FastAPI(title="Newspaper Article Extraction API", version="0.1.0")

app.include_router(articles_router)


@app.get("/health")
def health_check() -> dict:
    return {"status": "ok"}
