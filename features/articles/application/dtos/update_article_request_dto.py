"""
DTO for editing one published article.
"""

from dataclasses import dataclass
from typing import Any, Dict


@dataclass
class UpdateArticleRequestDTO:
    """Fields to merge over the stored article file `filename`."""
    filename: str
    article: Dict[str, Any]
