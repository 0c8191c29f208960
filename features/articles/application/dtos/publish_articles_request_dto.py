"""
DTO for publishing article drafts.
"""

from dataclasses import dataclass
from typing import Any, Dict, List


@dataclass
class PublishArticlesRequestDTO:
    """Article drafts (as edited in the admin tool) to write to the site."""
    articles: List[Dict[str, Any]]
