"""
Domain interfaces (ports) for the article extraction feature.

Following clean architecture principles:
- Domain defines interfaces (ports)
- Infrastructure implements interfaces (adapters)
- Application orchestrates via interfaces

Each interface is defined in its own file for better organization.
"""

from .iarticle_segmenter import IArticleSegmenter
from .iarticle_store import IArticleStore
from .iline_extractor import ILineExtractor

__all__ = ["IArticleSegmenter", "IArticleStore", "ILineExtractor"]
