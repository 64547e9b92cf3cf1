"""
tinyjson Package

A small textual data-interchange codec for a restricted JSON subset.

Pipeline:
    text → Tokenizer (lexer) → tokens → Tree Builder (mapper) → tree
         → Codec Bridge → typed record

and the reverse for encoding.

KNOWN LIMITATIONS:
------------------
    - Strings have no escape sequences; a string cannot contain a quote
    - Object keys are re-emitted in sorted order, not source order
    - Only space and newline count as whitespace
"""

from .bridge import Readable, Writable, json_field, read_tree, record, register_scalar, write_tree
from .errors import (
    DecodeError,
    DepthLimitError,
    InvalidTokenError,
    OutOfRangeError,
    ParseError,
    TokenizerError,
    TreeBuilderError,
    UnexpectedTokenError,
    UnexpectedTypeError,
)
from .facade import decode, decode_tree, encode

__version__ = "0.1.0"

__all__ = [
    "decode",
    "decode_tree",
    "encode",
    "record",
    "json_field",
    "register_scalar",
    "read_tree",
    "write_tree",
    "Readable",
    "Writable",
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
