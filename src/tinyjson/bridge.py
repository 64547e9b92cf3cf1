"""
Codec Bridge for tinyjson (Stage 3: Tree Value ⇄ Typed Python Values).

Two capabilities drive everything:

    read_tree(target_type, node)  - build a typed value from a tree node
    write_tree(value)             - build a tree node from a typed value

Supported shapes:
    - Scalars: int, float, str, bool (plus anything added via register_scalar)
    - Optional[T]
    - List[T], Tuple[T, ...]
    - Dict[str, T]
    - Records: any dataclass, field by field
    - User types defining from_tree()/to_tree() (the Readable/Writable protocols)

ARCHITECTURAL RULE:
    Decoding a record is all-or-nothing.
    The first field that fails aborts the record with ParseError,
    chained to the error that caused it.

Using a type the bridge does not understand is a programming error and
raises TypeError, never DecodeError.
"""
from __future__ import annotations

import dataclasses
import logging
import math
import re
import types
import typing
import warnings
from dataclasses import dataclass
from decimal import Decimal
from functools import lru_cache
from typing import Any, Callable, Dict, List, Optional, Protocol, Tuple, runtime_checkable

from tinyjson.errors import DecodeError, ParseError, UnexpectedTypeError
from tinyjson.tokens import TokenKind
from tinyjson.tree import NULL, Scalar, TreeArray, TreeObject, TreeValue, is_null, scalar

logger = logging.getLogger(__name__)

# Field metadata key holding a rename directive
RENAME = "tinyjson.rename"

# Keys must survive the tokenizer as simple strings
_SIMPLE_KEY_RE = re.compile(r"[A-Za-z0-9_]*")


@runtime_checkable
class Readable(Protocol):
    """A type that knows how to build itself from a tree node."""

    @classmethod
    def from_tree(cls, node: Optional[TreeValue]) -> Any:
        ...


@runtime_checkable
class Writable(Protocol):
    """A value that knows how to turn itself into a tree node."""

    def to_tree(self) -> TreeValue:
        ...


# ---------------------------------------------------------------------------
# Scalars
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ScalarCodec:
    """
    How one scalar Python type maps onto a token.

    Properties:
        kind: Token kind written on encode
        parse: Text → value, raising ValueError (or similar) on bad input
        format: Value → literal text
    """

    kind: TokenKind
    parse: Callable[[str], Any]
    format: Callable[[Any], str]


def _parse_bool(text: str) -> bool:
    if text == "true":
        return True
    if text == "false":
        return False
    raise ValueError(f"not a boolean literal: {text!r}")


def _format_bool(value: bool) -> str:
    return "true" if value else "false"


def _format_float(value: float) -> str:
    """Positional notation only; the tokenizer has no exponent syntax."""
    if not math.isfinite(value):
        return repr(value)
    text = format(Decimal(repr(value)), "f")
    if text.lstrip("-").isdigit():
        text += ".0"
    return text


_SCALARS: Dict[type, ScalarCodec] = {
    bool: ScalarCodec(TokenKind.RESERVED_WORD, _parse_bool, _format_bool),
    int: ScalarCodec(TokenKind.INTEGER, int, str),
    float: ScalarCodec(TokenKind.FLOAT, float, _format_float),
    str: ScalarCodec(TokenKind.COMPLEX_STRING, str, str),
}


def register_scalar(
    py_type: type,
    kind: TokenKind,
    parse: Optional[Callable[[str], Any]] = None,
    format: Callable[[Any], str] = str,
) -> None:
    """
    Teach the bridge a new scalar type.

    Args:
        py_type: The Python type (e.g. decimal.Decimal)
        kind: Token kind to write it as
        parse: Text → value; defaults to calling py_type
        format: Value → literal text; defaults to str

    Raises:
        ValueError: If kind is not a scalar token kind
    """
    if not kind.is_scalar:
        raise ValueError(f"{kind.name} is not a scalar token kind")
    _SCALARS[py_type] = ScalarCodec(kind, parse or py_type, format)


def _read_scalar(target: type, codec: ScalarCodec, node: Optional[TreeValue]) -> Any:
    # A missing node parses as the empty string
    if node is None:
        text = ""
    elif isinstance(node, Scalar):
        text = node.literal
    else:
        raise UnexpectedTypeError(f"expected a scalar for {target.__name__}, got {_shape(node)}")
    try:
        return codec.parse(text)
    except (ValueError, TypeError, ArithmeticError) as exc:
        raise ParseError(f"cannot parse {text!r} as {target.__name__}") from exc


def _write_scalar(value: Any, codec: ScalarCodec) -> Scalar:
    literal = codec.format(value)
    kind = codec.kind
    # Non-finite floats have no number literal; float() reads the string back
    if isinstance(value, float) and not math.isfinite(value):
        kind = TokenKind.COMPLEX_STRING
    if kind.is_string and '"' in literal:
        warnings.warn(
            f"string {literal!r} contains a quote and cannot be decoded again",
            UserWarning,
        )
    return scalar(kind, literal)


# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class FieldPlan:
    """One record field: attribute name, text key, declared type."""
    name: str
    key: str
    type: Any
    has_default: bool


def json_field(*, rename: Optional[str] = None, **kwargs: Any) -> Any:
    """
    dataclasses.field() with an optional rename directive.

    Example:
        a: int = json_field(rename="aJson")
    """
    metadata = dict(kwargs.pop("metadata", None) or {})
    if rename is not None:
        metadata[RENAME] = rename
    return dataclasses.field(metadata=metadata, **kwargs)


def _record_fields(cls: type) -> List[dataclasses.Field]:
    """Validate the record shape and return its init fields."""
    if not dataclasses.is_dataclass(cls):
        raise TypeError(f"{cls.__name__} is not a record (dataclass)")

    fields = [f for f in dataclasses.fields(cls) if f.init]
    if not fields:
        raise TypeError(f"record {cls.__name__} declares no fields")

    keys = []
    for f in fields:
        key = f.metadata.get(RENAME, f.name)
        if not isinstance(key, str) or not _SIMPLE_KEY_RE.fullmatch(key):
            raise TypeError(
                f"{cls.__name__}.{f.name}: key {key!r} must contain only letters, digits and '_'"
            )
        keys.append(key)

    duplicates = sorted({key for key in keys if keys.count(key) > 1})
    if duplicates:
        raise TypeError(f"record {cls.__name__} maps several fields to keys {duplicates}")
    return fields


@lru_cache(maxsize=None)
def record_plan(cls: type) -> Tuple[FieldPlan, ...]:
    """
    Resolve the per-field read/write plan of a record type.

    Type hints are resolved here rather than at class creation so records
    may refer to records declared later in the same module.
    """
    fields = _record_fields(cls)
    hints = typing.get_type_hints(cls)
    return tuple(
        FieldPlan(
            name=f.name,
            key=f.metadata.get(RENAME, f.name),
            type=hints[f.name],
            has_default=(
                f.default is not dataclasses.MISSING
                or f.default_factory is not dataclasses.MISSING
            ),
        )
        for f in fields
    )


def record(cls: Optional[type] = None, **dataclass_kwargs: Any) -> Any:
    """
    Class decorator: make cls a dataclass and check it is a valid record.

    Rejects records with no fields, duplicate keys and keys that are not
    simple strings, at class creation time.

    Usage:
        @record
        class Car:
            name: str
            plate: str = json_field(rename="licensePlate")
    """
    def wrap(target: type) -> type:
        if "__dataclass_fields__" not in target.__dict__:
            target = dataclass(target, **dataclass_kwargs)
        _record_fields(target)
        return target

    if cls is None:
        return wrap
    return wrap(cls)


def _read_record(cls: type, node: Optional[TreeValue]) -> Any:
    if node is None:
        raise ParseError(f"missing value for record {cls.__name__}")
    if not isinstance(node, TreeObject):
        raise UnexpectedTypeError(f"expected an object for {cls.__name__}, got {_shape(node)}")

    values: Dict[str, Any] = {}
    for plan in record_plan(cls):
        child = node.get(plan.key)
        if child is None and plan.has_default:
            continue
        try:
            values[plan.name] = read_tree(plan.type, child)
        except DecodeError as exc:
            raise ParseError(f"{cls.__name__}.{plan.name} (key '{plan.key}'): {exc}") from exc

    logger.debug("decoded record %s", cls.__name__)
    return cls(**values)


def _write_record(value: Any) -> TreeObject:
    obj = TreeObject()
    for plan in record_plan(type(value)):
        obj.insert(plan.key, write_tree(getattr(value, plan.name)))
    return obj


# ---------------------------------------------------------------------------
# Containers
# ---------------------------------------------------------------------------

def _read_optional(target: Any, node: Optional[TreeValue]) -> Any:
    args = typing.get_args(target)
    inner = [arg for arg in args if arg is not type(None)]
    if len(inner) != 1 or len(args) != 2:
        raise TypeError(f"only Optional[...] unions are supported, got {target}")
    if node is None or is_null(node):
        return None
    return read_tree(inner[0], node)


def _read_sequence(target: Any, node: Optional[TreeValue]) -> Any:
    origin = typing.get_origin(target)
    args = typing.get_args(target)
    if origin is tuple:
        if len(args) != 2 or args[1] is not Ellipsis:
            raise TypeError(f"only Tuple[T, ...] is supported, got {target}")
    elif len(args) != 1:
        raise TypeError(f"sequence type needs an element type, got {target}")
    item_type = args[0]

    if node is None:
        items = []
    elif isinstance(node, TreeArray):
        items = [read_tree(item_type, child) for child in node]
    else:
        raise UnexpectedTypeError(f"expected an array for {target}, got {_shape(node)}")
    return tuple(items) if origin is tuple else items


def _read_mapping(target: Any, node: Optional[TreeValue]) -> Dict[str, Any]:
    args = typing.get_args(target)
    if len(args) != 2 or args[0] is not str:
        raise TypeError(f"only Dict[str, T] is supported, got {target}")

    if node is None:
        return {}
    if not isinstance(node, TreeObject):
        raise UnexpectedTypeError(f"expected an object for {target}, got {_shape(node)}")
    return {key: read_tree(args[1], child) for key, child in node.items()}


# ---------------------------------------------------------------------------
# Dispatch
# ---------------------------------------------------------------------------

_TREE_TYPES = (Scalar, TreeObject, TreeArray)


def _shape(node: TreeValue) -> str:
    if isinstance(node, TreeObject):
        return "object"
    if isinstance(node, TreeArray):
        return "array"
    return f"{node.kind.name} '{node.literal}'"


def read_tree(target: Any, node: Optional[TreeValue]) -> Any:
    """
    Build a value of type target from a tree node.

    Args:
        target: Type to produce (type hint form, e.g. List[int])
        node: Tree node, or None if the value is absent

    Returns:
        Value of the requested type

    Raises:
        UnexpectedTypeError: If the node has the wrong shape
        ParseError: If a scalar cannot be parsed or a record field fails
        TypeError: If target is not a supported type
    """
    origin = typing.get_origin(target)
    if origin is typing.Union or origin is types.UnionType:
        return _read_optional(target, node)
    if origin in (list, tuple):
        return _read_sequence(target, node)
    if origin is dict:
        return _read_mapping(target, node)

    if isinstance(target, type):
        # Raw tree nodes pass through untouched
        if target in _TREE_TYPES:
            if not isinstance(node, target):
                shape = "nothing" if node is None else _shape(node)
                raise UnexpectedTypeError(f"expected {target.__name__}, got {shape}")
            return node
        if callable(getattr(target, "from_tree", None)):
            return target.from_tree(node)
        if dataclasses.is_dataclass(target):
            return _read_record(target, node)
        codec = _SCALARS.get(target)
        if codec is not None:
            return _read_scalar(target, codec, node)

    raise TypeError(f"{target!r} is not readable")


def write_tree(value: Any) -> TreeValue:
    """
    Build a tree node from a value. Never raises DecodeError.

    Raises:
        TypeError: If the value's type is not supported
    """
    if value is None:
        return NULL
    if isinstance(value, _TREE_TYPES):
        return value
    if isinstance(value, Writable):
        return value.to_tree()
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return _write_record(value)

    for base in type(value).__mro__:
        codec = _SCALARS.get(base)
        if codec is not None:
            return _write_scalar(value, codec)

    if isinstance(value, (list, tuple)):
        return TreeArray([write_tree(item) for item in value])
    if isinstance(value, dict):
        obj = TreeObject()
        for key, item in value.items():
            if not isinstance(key, str):
                raise TypeError(f"object keys must be str, got {type(key).__name__}")
            if not _SIMPLE_KEY_RE.fullmatch(key):
                warnings.warn(
                    f"object key {key!r} is not a simple string and cannot be decoded again",
                    UserWarning,
                )
            obj.insert(key, write_tree(item))
        return obj

    raise TypeError(f"{type(value).__name__} is not writable")


__all__ = [
    "Readable",
    "Writable",
    "ScalarCodec",
    "FieldPlan",
    "json_field",
    "record",
    "record_plan",
    "register_scalar",
    "read_tree",
    "write_tree",
    "RENAME",
]
