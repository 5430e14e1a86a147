"""Import error taxonomy."""

from __future__ import annotations


class DocumentParseError(ValueError):
    """The export is not well-formed XML; the whole conversion is aborted."""


class ImportItemError(Exception):
    """A single item could not be converted; the batch continues."""

    def __init__(self, message: str, *, item_ident: str = "", qtype: str = "") -> None:
        super().__init__(message)
        self.message = message
        self.item_ident = item_ident
        self.qtype = qtype


class UnsupportedQuestionTypeError(ImportItemError):
    """Declared type is unknown or explicitly unsupported (calculated)."""


class QuestionRejectedError(ImportItemError):
    """Item parsed but fails a structural minimum for its type."""
