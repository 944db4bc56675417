from __future__ import annotations


class PapermarkError(Exception):
    """Base class for errors raised by papermark."""


class MarkupParseError(PapermarkError):
    """
    Raised when the grammar hits a hard failure,
    as opposed to markup that merely produced diagnostics.
    """

    def __init__(self, index: int, error: BaseException | str) -> None:
        self.index = index
        self.error = error
        PapermarkError.__init__(self, f"Markup parsing failed at offset {index}: {error}")


class RegistryError(PapermarkError):
    """Raised for malformed tag registry data."""

    def __init__(self, message: str, row: object = None) -> None:
        self.row = row
        if row is not None:
            PapermarkError.__init__(self, f"{message}\nOffending row: {row!r}")
        else:
            PapermarkError.__init__(self, message)
