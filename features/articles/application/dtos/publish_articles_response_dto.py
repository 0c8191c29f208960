"""
DTO for publishing result.
"""

from dataclasses import dataclass
from typing import Any, Dict, List


@dataclass
class PublishArticlesResponseDTO:
    """Per-article publish results and failures."""
    published: List[Dict[str, Any]]
    errors: List[Dict[str, Any]]
