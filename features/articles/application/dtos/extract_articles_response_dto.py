"""
DTO for article extraction response.
"""

from dataclasses import dataclass
from typing import List

from .article_dto import ArticleDTO


@dataclass
class ExtractArticlesResponseDTO:
    """Output of segmentation: article drafts in document order."""
    articles: List[ArticleDTO]
    total_articles: int
    used_fallback: bool  # True when headline structure could not be recovered
    pages: int = 0
