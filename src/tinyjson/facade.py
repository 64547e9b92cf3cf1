"""
Facade: the two entry points composing the whole pipeline.

    decode: text → tokens → tree → typed value
    encode: typed value → tree → text
"""

import logging
from typing import Any, Type, TypeVar

from .bridge import read_tree, write_tree
from .lexer import tokenize
from .mapper import DEPTH_LIMIT_DEFAULT, parse_object
from .render import encode_json
from .tree import TreeObject

logger = logging.getLogger(__name__)

T = TypeVar("T")


def decode_tree(text: str, *, max_depth: int = DEPTH_LIMIT_DEFAULT) -> TreeObject:
    """
    Tokenize text and build its tree.

    Raises:
        TokenizerError: If the text is malformed at character level
        TreeBuilderError: If the tokens do not form an object
    """
    tokens = tokenize(text)
    return parse_object(tokens, max_depth=max_depth)


def decode(text: str, target: Type[T], *, max_depth: int = DEPTH_LIMIT_DEFAULT) -> T:
    """
    Decode text into a value of type target.

    Args:
        text: Input whose root is an object
        target: Record type (or Dict[str, T], or a Readable type)
        max_depth: Maximum nesting depth of objects and arrays

    Returns:
        The decoded value. Nothing partial is ever returned.

    Raises:
        DecodeError: Any tokenizer, tree builder or bridge failure
    """
    tree = decode_tree(text, max_depth=max_depth)
    value = read_tree(target, tree)
    logger.debug("decoded %d characters into %r", len(text), target)
    return value


def encode(value: Any) -> str:
    """
    Encode a value as compact text with sorted object keys.

    Raises:
        TypeError: If the value's type is not supported
    """
    return encode_json(write_tree(value))


__all__ = ["decode", "decode_tree", "encode"]
