"""
Interface for persisting published articles.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Tuple


class IArticleStore(ABC):
    """Port for the published articles collection."""

    @abstractmethod
    def publish(self, articles: List[Dict[str, Any]]) -> Tuple[List[Dict[str, Any]], List[Dict[str, Any]]]:
        """Persist articles; returns (results, errors), one entry per article."""
        raise NotImplementedError

    @abstractmethod
    def list(self) -> List[Dict[str, Any]]:
        """Return every stored article, newest first."""
        raise NotImplementedError

    @abstractmethod
    def delete(self, filename: str) -> None:
        """Delete one stored article by filename."""
        raise NotImplementedError

    @abstractmethod
    def update(self, filename: str, article: Dict[str, Any]) -> Dict[str, Any]:
        """Merge article fields over one stored article; returns the stored result."""
        raise NotImplementedError
