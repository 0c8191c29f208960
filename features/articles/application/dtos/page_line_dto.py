"""
DTO for a single text line of the PDF text layer.
"""

from dataclasses import dataclass


@dataclass
class PageLineDTO:
    """One visual line with its font/position metadata."""
    text: str
    isBold: bool = False
    page: int = 1
    y: float = 0.0
