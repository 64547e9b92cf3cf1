"""
Tree Builder for tinyjson (Stage 2: Tokens → Tree Value).

Recursive descent with one token of lookahead:

    Object := '{' (Pair (',' Pair)*)? '}'
    Pair   := SimpleString ':' Value
    Value  := Scalar | Object | Array
    Array  := '[' (Value (',' Value)*)? ']'

Every parse function takes the token list and a position and returns
(node, next_position).

Syntax Notes:
    - Keys must be simple strings (letters, digits, underscore)
    - Quotes are stripped from keys and string scalars
    - Trailing commas are rejected
    - Duplicate keys overwrite the earlier value
    - Tokens after the root object are rejected
"""

import logging
from typing import List, Tuple

from .errors import DepthLimitError, UnexpectedTokenError
from .tokens import END_OF_INPUT, Token, TokenKind
from .tree import Scalar, TreeArray, TreeObject, TreeValue

logger = logging.getLogger(__name__)

DEPTH_LIMIT_DEFAULT = 64


def _token_at(tokens: List[Token], pos: int) -> Token:
    """Token at pos, or the end-of-input token past the end."""
    if pos < len(tokens):
        return tokens[pos]
    return END_OF_INPUT


def _expect(tokens: List[Token], pos: int, kind: TokenKind) -> Tuple[Token, int]:
    token = _token_at(tokens, pos)
    if token.kind is not kind:
        raise UnexpectedTokenError(token, expected=kind.name)
    return token, pos + 1


def _strip_quotes(literal: str) -> str:
    return literal[1:-1]


def _parse_scalar(token: Token) -> Scalar:
    if token.kind.is_string:
        return Scalar(Token(token.kind, _strip_quotes(token.literal)))
    return Scalar(token)


def _parse_value(tokens: List[Token], pos: int, depth: int, max_depth: int) -> Tuple[TreeValue, int]:
    """Parse a scalar, object or array starting at pos."""
    token = _token_at(tokens, pos)

    if token.kind is TokenKind.LBRACE:
        return _parse_object(tokens, pos, depth + 1, max_depth)
    if token.kind is TokenKind.LBRACKET:
        return _parse_array(tokens, pos, depth + 1, max_depth)
    if token.kind.is_scalar:
        return _parse_scalar(token), pos + 1

    raise UnexpectedTokenError(token, expected="value")


def _parse_array(tokens: List[Token], pos: int, depth: int, max_depth: int) -> Tuple[TreeArray, int]:
    """Parse '[' (Value (',' Value)*)? ']'."""
    opening, pos = _expect(tokens, pos, TokenKind.LBRACKET)
    if depth > max_depth:
        raise DepthLimitError(opening, max_depth)

    array = TreeArray()
    if _token_at(tokens, pos).kind is TokenKind.RBRACKET:
        return array, pos + 1

    while True:
        value, pos = _parse_value(tokens, pos, depth, max_depth)
        array.elements.append(value)

        token = _token_at(tokens, pos)
        pos += 1
        if token.kind is TokenKind.COMMA:
            continue
        if token.kind is TokenKind.RBRACKET:
            return array, pos
        raise UnexpectedTokenError(token, expected="',' or ']'")


def _parse_object(tokens: List[Token], pos: int, depth: int, max_depth: int) -> Tuple[TreeObject, int]:
    """Parse '{' (Pair (',' Pair)*)? '}'."""
    opening, pos = _expect(tokens, pos, TokenKind.LBRACE)
    if depth > max_depth:
        raise DepthLimitError(opening, max_depth)

    obj = TreeObject()
    if _token_at(tokens, pos).kind is TokenKind.RBRACE:
        return obj, pos + 1

    while True:
        key_token, pos = _expect(tokens, pos, TokenKind.SIMPLE_STRING)
        _, pos = _expect(tokens, pos, TokenKind.COLON)
        value, pos = _parse_value(tokens, pos, depth, max_depth)

        key = _strip_quotes(key_token.literal)
        if key in obj:
            logger.debug("duplicate key %r overwrites earlier value", key)
        obj.insert(key, value)

        token = _token_at(tokens, pos)
        pos += 1
        if token.kind is TokenKind.COMMA:
            continue
        if token.kind is TokenKind.RBRACE:
            return obj, pos
        raise UnexpectedTokenError(token, expected="',' or '}'")


def parse_object(tokens: List[Token], *, max_depth: int = DEPTH_LIMIT_DEFAULT) -> TreeObject:
    """
    Build a tree from a token list whose root is an object.

    Args:
        tokens: Output of the tokenizer
        max_depth: Maximum nesting of objects and arrays (root counts as 1)

    Returns:
        The root TreeObject

    Raises:
        UnexpectedTokenError: If the tokens do not match the grammar
        DepthLimitError: If nesting exceeds max_depth
    """
    obj, pos = _parse_object(tokens, 0, 1, max_depth)
    if pos < len(tokens):
        raise UnexpectedTokenError(tokens[pos], expected="end of input")
    logger.debug("built object with %d top-level keys", len(obj))
    return obj


__all__ = ["parse_object", "DEPTH_LIMIT_DEFAULT"]
