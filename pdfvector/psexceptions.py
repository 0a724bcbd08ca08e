__all__ = [
    "PSException",
    "PSEOF",
]


class PSException(Exception):
    """Base class for content-stream lexing exceptions."""


class PSEOF(PSException):
    """Raised when the lexer runs past the end of its buffer."""
