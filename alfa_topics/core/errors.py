# alfa_topics/core/errors.py
from __future__ import annotations
from pathlib import Path

class TopicFormatError(ValueError):
    """The topic file does not follow the header + rows layout."""

    def __init__(self, message: str, path: Path | None = None):
        super().__init__(message)
        self.path = path

class MissingHeaderError(TopicFormatError):
    pass

class RowOverflowError(TopicFormatError):
    def __init__(self, path: Path | None, line_number: int, n_tokens: int, n_columns: int):
        super().__init__(
            f"line #{line_number} of '{path}' has {n_tokens} fields, header has {n_columns}",
            path,
        )
        self.line_number = line_number
        self.n_tokens = n_tokens
        self.n_columns = n_columns
