"""
Text rendering for tree values.

encode_json produces the compact wire format. tree_to_builtins and
tree_to_yaml give a plain-Python / YAML view of a tree for inspection.
"""
from __future__ import annotations

from typing import Any

import yaml

from tinyjson.tokens import TokenKind
from tinyjson.tree import Scalar, TreeArray, TreeObject, TreeValue

_RESERVED_VALUES = {"true": True, "false": False, "null": None}


def encode_json(value: TreeValue) -> str:
    """
    Render a tree as compact text.

    Objects render with keys in sorted order. String scalars are wrapped
    in quotes verbatim; nothing is escaped.
    """
    if isinstance(value, TreeObject):
        members = ",".join(f'"{key}":{encode_json(child)}' for key, child in value.items())
        return "{" + members + "}"
    if isinstance(value, TreeArray):
        return "[" + ",".join(encode_json(child) for child in value) + "]"
    if value.kind.is_string:
        return f'"{value.literal}"'
    return value.literal


def _scalar_to_builtin(node: Scalar) -> Any:
    kind = node.kind
    if kind in (TokenKind.INTEGER, TokenKind.FLOAT):
        number = int if kind is TokenKind.INTEGER else float
        try:
            return number(node.literal)
        except ValueError:
            # lone "-" or "-." survive tokenizing
            return node.literal
    if kind is TokenKind.RESERVED_WORD and node.literal in _RESERVED_VALUES:
        return _RESERVED_VALUES[node.literal]
    return node.literal


def tree_to_builtins(value: TreeValue) -> Any:
    if isinstance(value, TreeObject):
        return {key: tree_to_builtins(child) for key, child in value.items()}
    if isinstance(value, TreeArray):
        return [tree_to_builtins(child) for child in value]
    return _scalar_to_builtin(value)


def tree_to_yaml(value: TreeValue) -> str:
    return yaml.safe_dump(tree_to_builtins(value), sort_keys=True)


__all__ = ["encode_json", "tree_to_builtins", "tree_to_yaml"]
