"""
DTOs (Data Transfer Objects) used by the article extraction use cases and API.

Following clean architecture principles:
- DTOs are organized by feature/domain
- Each DTO is in its own file for better organization
- Easy to find and maintain specific DTOs
"""

# Segmentation DTOs
from .page_line_dto import PageLineDTO
from .segment_text_request_dto import SegmentTextRequestDTO
from .extract_articles_request_dto import ExtractArticlesRequestDTO
from .article_dto import ArticleDTO
from .extract_articles_response_dto import ExtractArticlesResponseDTO

# Publishing DTOs
from .publish_articles_request_dto import PublishArticlesRequestDTO
from .publish_articles_response_dto import PublishArticlesResponseDTO
from .update_article_request_dto import UpdateArticleRequestDTO

__all__ = [
    # Segmentation
    "PageLineDTO",
    "SegmentTextRequestDTO",
    "ExtractArticlesRequestDTO",
    "ArticleDTO",
    "ExtractArticlesResponseDTO",
    # Publishing
    "PublishArticlesRequestDTO",
    "PublishArticlesResponseDTO",
    "UpdateArticleRequestDTO",
]
