"""Custom exceptions for Typequill."""

from typing import Optional


class TypequillError(Exception):
    """Base exception for Typequill errors."""

    def __init__(self, message: str, details: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def __str__(self) -> str:
        if self.details:
            return f"{self.message}: {self.details}"
        return self.message


class ParsingError(TypequillError):
    """Exception raised when the manuscript markup cannot be read."""

    pass


class GrammarError(TypequillError):
    """Exception raised for an element or attribute the grammar does not allow."""

    pass


class DanglingReferenceError(TypequillError):
    """Exception raised for a note reference without a footnote, or the reverse."""

    def __init__(self, message: str, label: str, details: Optional[str] = None):
        super().__init__(message, details if details is not None else f"label {label!r}")
        self.label = label


class LayoutError(TypequillError):
    """Exception raised when a block cannot be placed on a page."""

    pass


class RenderingError(TypequillError):
    """Exception raised while writing the page-description output."""

    pass
