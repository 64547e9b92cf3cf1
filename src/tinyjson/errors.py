"""
Error taxonomy for tinyjson.

Three tiers, one per pipeline stage, all under DecodeError so callers can
catch a single type:

    TokenizerError   - the text is malformed at character level
    TreeBuilderError - the tokens do not form a valid object
    UnexpectedTypeError / ParseError - the tree is well formed but does not
                       fit the requested type
"""

from typing import Optional

from .tokens import Token


class DecodeError(Exception):
    """Base class for every failure raised while decoding text."""
    pass


class TokenizerError(DecodeError):
    """Raised when raw text cannot be split into tokens."""
    pass


class InvalidTokenError(TokenizerError):
    """Raised for a character that is not valid at the current position."""

    def __init__(self, char: str, line: int):
        self.char = char
        self.line = line
        super().__init__(f"invalid character {char!r} on line {line}")


class OutOfRangeError(TokenizerError):
    """Raised when input ends while a token is still being read."""

    def __init__(self, line: int, partial: str = ""):
        self.line = line
        self.partial = partial
        super().__init__(f"input ended inside token {partial!r} on line {line}")


class TreeBuilderError(DecodeError):
    """Raised when the token sequence does not match the grammar."""
    pass


class UnexpectedTokenError(TreeBuilderError):
    """Raised for a token that does not fit the expected grammar position."""

    def __init__(self, token: Token, expected: Optional[str] = None):
        self.token = token
        self.expected = expected
        message = f"unexpected token {token.kind.name} '{token}'"
        if expected:
            message += f" - expected {expected}"
        super().__init__(message)


class DepthLimitError(UnexpectedTokenError):
    """Raised when objects/arrays nest deeper than the configured limit."""

    def __init__(self, token: Token, max_depth: int):
        self.max_depth = max_depth
        super().__init__(token, expected=f"nesting depth <= {max_depth}")


class UnexpectedTypeError(DecodeError):
    """Raised when a tree node has the wrong shape for the requested type."""
    pass


class ParseError(DecodeError):
    """Raised when a scalar literal cannot be parsed, or a record field fails."""
    pass


__all__ = [
    "DecodeError",
    "TokenizerError",
    "InvalidTokenError",
    "OutOfRangeError",
    "TreeBuilderError",
    "UnexpectedTokenError",
    "DepthLimitError",
    "UnexpectedTypeError",
    "ParseError",
]
