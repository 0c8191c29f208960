"""
DTO for a single extracted article draft.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional


@dataclass
class ArticleDTO:
    """Article draft in the shape the admin tool edits and publishes."""
    id: str
    title: str
    description: str
    date: str
    author: str
    category: str  # "community" | "sports" | "business" | "government" | "education" | "events"
    featured: bool
    wordCount: int
    tags: List[str] = field(default_factory=list)
    content: List[Dict[str, str]] = field(default_factory=list)  # [{"type": "paragraph", "text": "..."}]
    image: Optional[str] = None
