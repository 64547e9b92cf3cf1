"""
Token Vocabulary for tinyjson

Every lexical unit the tokenizer emits is a Token: a kind tag plus the
literal text it was built from.

ARCHITECTURAL RULE:
    Tokens are structure only.
    They do not know how to convert themselves into Python values;
    that belongs in the codec bridge.
"""

from dataclasses import dataclass
from enum import Enum


class TokenKind(Enum):
    """
    Kinds of tokens produced by the tokenizer.

    NONE doubles as the "no token in progress" register value inside the
    tokenizer and as the end-of-input marker in tree builder errors.
    """

    NONE = "none"

    # Structural tokens
    LBRACE = "{"
    RBRACE = "}"
    LBRACKET = "["
    RBRACKET = "]"
    COLON = ":"
    COMMA = ","

    # Scalar tokens
    INTEGER = "integer"
    FLOAT = "float"
    SIMPLE_STRING = "simple_string"
    COMPLEX_STRING = "complex_string"
    RESERVED_WORD = "reserved_word"

    @property
    def is_structural(self) -> bool:
        return self in _STRUCTURAL

    @property
    def is_string(self) -> bool:
        return self in (TokenKind.SIMPLE_STRING, TokenKind.COMPLEX_STRING)

    @property
    def is_scalar(self) -> bool:
        return self in _SCALAR


_STRUCTURAL = frozenset({
    TokenKind.LBRACE,
    TokenKind.RBRACE,
    TokenKind.LBRACKET,
    TokenKind.RBRACKET,
    TokenKind.COLON,
    TokenKind.COMMA,
})

_SCALAR = frozenset({
    TokenKind.INTEGER,
    TokenKind.FLOAT,
    TokenKind.SIMPLE_STRING,
    TokenKind.COMPLEX_STRING,
    TokenKind.RESERVED_WORD,
})

# Structural characters map straight onto their kind
STRUCTURAL_CHARS = {kind.value: kind for kind in _STRUCTURAL}


@dataclass(frozen=True)
class Token:
    """
    A minimal lexical unit.

    Properties:
        kind: TokenKind tag
        literal: Source text of the token. String tokens leave the
            tokenizer with their surrounding quotes; the tree builder
            strips them.

    IMPORTANT:
        This object is immutable (frozen=True).
    """

    kind: TokenKind
    literal: str = ""

    def __str__(self) -> str:
        if self.kind is TokenKind.NONE:
            return "<end of input>"
        return self.literal


END_OF_INPUT = Token(TokenKind.NONE, "")
