"""
Domain errors for the article extraction feature.
"""


class ArticleExtractionError(Exception):
    """Base class for all article extraction errors."""


class InsufficientStructureError(ArticleExtractionError):
    """Too few articles survived headline detection and gating."""

    def __init__(self, found: int, required: int):
        super().__init__(f"Found {found} article(s), at least {required} required")
        self.found = found
        self.required = required


class PdfExtractionError(ArticleExtractionError):
    """The PDF text layer could not be read."""


class InvalidArticleFilenameError(ArticleExtractionError):
    """An article filename tried to escape the articles directory."""


class ArticleNotFoundError(ArticleExtractionError):
    """No stored article exists under the given filename."""
