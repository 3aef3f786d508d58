"""Exception types shared across the checker."""

from typing import Optional


class PsStyleError(Exception):
    """Base class for all psstyle errors."""
    pass


class SourceError(PsStyleError):
    """An error tied to a location in a script."""

    def __init__(self, message: str, line: int, column: int, path: Optional[str] = None) -> None:
        self.message = message
        self.line = line
        self.column = column
        self.path = path
        location = f"{path}:" if path else ""
        super().__init__(f"{location}{line}:{column}: {message}")


class TokenizeError(SourceError):
    """Raised when script text cannot be split into tokens."""
    pass


class ParseError(SourceError):
    """Raised when the token stream has an unbalanced structure."""
    pass


class ConfigError(PsStyleError):
    """Raised when a configuration file or value is invalid."""
    pass
