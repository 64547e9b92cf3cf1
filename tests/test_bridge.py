"""
Tests for the codec bridge (Stage 3: Tree Value ⇄ Typed Values).

These tests verify:
    - Scalar reading/writing and the "missing parses as empty" rule
    - Optional, List, Tuple and Dict containers
    - Record reading/writing, renaming and defaults
    - All-or-nothing record decoding
    - Definition-time rejection of invalid records
    - The from_tree/to_tree extension point and register_scalar
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Dict, List, Optional, Tuple, Union

import pytest

from tinyjson import bridge
from tinyjson.bridge import json_field, read_tree, record, record_plan, register_scalar, write_tree
from tinyjson.errors import ParseError, UnexpectedTypeError
from tinyjson.tokens import TokenKind
from tinyjson.tree import NULL, Scalar, TreeArray, TreeObject, scalar


def integer(text):
    return scalar(TokenKind.INTEGER, text)


@record
class Renamed:
    a: int = json_field(rename="aJson")
    b: str = ""


@record
class Item:
    x: int


@record
class Basket:
    owner: str
    items: List[Item]


@record
class WithDefaults:
    name: str
    tags: List[str] = field(default_factory=list)
    count: int = 7


@dataclass
class PlainDataclass:
    value: int


@record
class Outer:
    inner: "Inner"


@record
class Inner:
    flag: bool


class Point:
    """A user type taking part through from_tree/to_tree."""

    def __init__(self, x: int, y: int):
        self.x = x
        self.y = y

    def __eq__(self, other):
        return isinstance(other, Point) and (self.x, self.y) == (other.x, other.y)

    @classmethod
    def from_tree(cls, node):
        if not isinstance(node, Scalar):
            raise UnexpectedTypeError("Point expects a scalar")
        try:
            x, y = node.literal.split(";")
            return cls(int(x), int(y))
        except ValueError as exc:
            raise ParseError(f"bad point {node.literal!r}") from exc

    def to_tree(self):
        return scalar(TokenKind.COMPLEX_STRING, f"{self.x};{self.y}")


@record
class Shape:
    origin: Point


class TestScalars:
    """Test primitive reading and writing."""

    def test_read_int(self):
        assert read_tree(int, integer("5")) == 5

    def test_read_negative_int(self):
        assert read_tree(int, integer("-8")) == -8

    def test_read_float_from_integer_literal(self):
        assert read_tree(float, integer("3")) == 3.0

    def test_read_bool(self):
        assert read_tree(bool, scalar(TokenKind.RESERVED_WORD, "true")) is True
        assert read_tree(bool, scalar(TokenKind.RESERVED_WORD, "false")) is False

    def test_bool_only_lowercase(self):
        with pytest.raises(ParseError):
            read_tree(bool, scalar(TokenKind.RESERVED_WORD, "True"))

    def test_read_str_from_number(self):
        """Scalars are parsed from their literal whatever their kind."""
        assert read_tree(str, integer("12")) == "12"

    def test_missing_int_fails(self):
        """A missing node parses as the empty string."""
        with pytest.raises(ParseError):
            read_tree(int, None)

    def test_missing_str_is_empty(self):
        assert read_tree(str, None) == ""

    def test_unparsable_literal(self):
        with pytest.raises(ParseError) as exc_info:
            read_tree(int, scalar(TokenKind.COMPLEX_STRING, "abc"))
        assert isinstance(exc_info.value.__cause__, ValueError)

    def test_object_is_not_scalar(self):
        with pytest.raises(UnexpectedTypeError):
            read_tree(int, TreeObject())

    def test_write_int(self):
        assert write_tree(5) == integer("5")

    def test_write_bool_is_reserved_word(self):
        """bool is written as a word, not as the int it subclasses."""
        assert write_tree(True) == scalar(TokenKind.RESERVED_WORD, "true")

    def test_write_float(self):
        assert write_tree(2.5) == scalar(TokenKind.FLOAT, "2.5")

    def test_write_float_never_uses_exponent(self):
        assert write_tree(1e-05).literal == "0.00001"
        assert write_tree(1e16).literal == "10000000000000000.0"

    def test_write_str(self):
        assert write_tree("Ford") == scalar(TokenKind.COMPLEX_STRING, "Ford")

    def test_write_none_is_null(self):
        assert write_tree(None) == NULL

    def test_write_quote_warns(self):
        """A quote cannot be represented; encoding warns but succeeds."""
        with pytest.warns(UserWarning):
            node = write_tree('say "hi"')
        assert node.literal == 'say "hi"'

    @pytest.mark.parametrize("value, literal", [
        (float("inf"), "inf"),
        (float("-inf"), "-inf"),
        (float("nan"), "nan"),
    ])
    def test_write_non_finite_float_as_string(self, value, literal):
        """Non-finite floats have no number literal and are written as strings."""
        assert write_tree(value) == scalar(TokenKind.COMPLEX_STRING, literal)

    def test_read_non_finite_float_from_string(self):
        assert read_tree(float, scalar(TokenKind.COMPLEX_STRING, "-inf")) == float("-inf")


class TestContainers:
    """Test Optional, List, Tuple and Dict."""

    def test_optional_missing(self):
        assert read_tree(Optional[int], None) is None

    def test_optional_null(self):
        assert read_tree(Optional[str], NULL) is None

    def test_optional_present(self):
        assert read_tree(Optional[int], integer("4")) == 4

    def test_optional_pipe_syntax(self):
        assert read_tree(int | None, integer("4")) == 4

    def test_list(self):
        node = TreeArray([integer("1"), integer("2")])
        assert read_tree(List[int], node) == [1, 2]

    def test_builtin_list_generic(self):
        assert read_tree(list[int], TreeArray([integer("3")])) == [3]

    def test_list_missing_is_empty(self):
        assert read_tree(List[int], None) == []

    def test_list_from_scalar_rejected(self):
        with pytest.raises(UnexpectedTypeError):
            read_tree(List[int], integer("1"))

    def test_list_element_failure(self):
        node = TreeArray([integer("1"), scalar(TokenKind.RESERVED_WORD, "x")])
        with pytest.raises(ParseError):
            read_tree(List[int], node)

    def test_nested_lists(self):
        node = TreeArray([TreeArray([integer("1")]), TreeArray([])])
        assert read_tree(List[List[int]], node) == [[1], []]

    def test_tuple(self):
        node = TreeArray([integer("1"), integer("2")])
        assert read_tree(Tuple[int, ...], node) == (1, 2)

    def test_dict(self):
        node = TreeObject({"b": integer("2"), "a": integer("1")})
        assert read_tree(Dict[str, int], node) == {"a": 1, "b": 2}

    def test_dict_from_array_rejected(self):
        with pytest.raises(UnexpectedTypeError):
            read_tree(Dict[str, int], TreeArray())

    def test_write_list_and_dict(self):
        tree = write_tree({"k": [1, None]})
        assert tree == TreeObject({"k": TreeArray([integer("1"), NULL])})

    def test_write_tuple(self):
        assert write_tree((1,)) == TreeArray([integer("1")])

    def test_write_dict_non_simple_key_warns(self):
        """Keys that would tokenize as complex strings cannot be decoded again."""
        with pytest.warns(UserWarning, match="a b"):
            tree = write_tree({"a b": 1})
        assert tree == TreeObject({"a b": integer("1")})


class TestRecords:
    """Test record reading and writing."""

    def test_read_renamed_field(self):
        node = TreeObject({"aJson": integer("5"), "b": scalar(TokenKind.SIMPLE_STRING, "x")})
        assert read_tree(Renamed, node) == Renamed(a=5, b="x")

    def test_declared_name_not_used_when_renamed(self):
        """Only the renamed key is looked up."""
        with pytest.raises(ParseError):
            read_tree(Renamed, TreeObject({"a": integer("5")}))

    def test_write_renamed_field(self):
        tree = write_tree(Renamed(a=1, b="Hello"))
        assert tree.keys() == ["aJson", "b"]
        assert tree["aJson"] == integer("1")

    def test_list_of_records(self):
        node = TreeObject({
            "owner": scalar(TokenKind.SIMPLE_STRING, "Ann"),
            "items": TreeArray([
                TreeObject({"x": integer("1")}),
                TreeObject({"x": integer("2")}),
            ]),
        })
        basket = read_tree(Basket, node)
        assert basket.owner == "Ann"
        assert basket.items == [Item(1), Item(2)]

    def test_defaults_used_when_key_absent(self):
        node = TreeObject({"name": scalar(TokenKind.SIMPLE_STRING, "n")})
        assert read_tree(WithDefaults, node) == WithDefaults(name="n", tags=[], count=7)

    def test_default_not_used_when_key_present(self):
        node = TreeObject({"name": scalar(TokenKind.SIMPLE_STRING, "n"), "count": integer("1")})
        assert read_tree(WithDefaults, node).count == 1

    def test_plain_dataclass_is_a_record(self):
        assert read_tree(PlainDataclass, TreeObject({"value": integer("9")})) == PlainDataclass(9)
        assert write_tree(PlainDataclass(9)) == TreeObject({"value": integer("9")})

    def test_forward_reference(self):
        """Records may refer to records declared later."""
        node = TreeObject({"inner": TreeObject({"flag": scalar(TokenKind.RESERVED_WORD, "true")})})
        assert read_tree(Outer, node) == Outer(Inner(True))

    def test_missing_record(self):
        with pytest.raises(ParseError):
            read_tree(Item, None)

    def test_record_from_array(self):
        with pytest.raises(UnexpectedTypeError):
            read_tree(Item, TreeArray())

    def test_one_bad_field_fails_whole_record(self):
        """The field failure becomes ParseError chained to its cause."""
        node = TreeObject({"x": scalar(TokenKind.COMPLEX_STRING, "abc")})
        with pytest.raises(ParseError) as exc_info:
            read_tree(Item, node)
        assert "Item.x" in str(exc_info.value)
        assert isinstance(exc_info.value.__cause__, ParseError)

    def test_shape_error_in_field_becomes_parse_error(self):
        node = TreeObject({"owner": scalar(TokenKind.SIMPLE_STRING, "Ann"), "items": integer("1")})
        with pytest.raises(ParseError) as exc_info:
            read_tree(Basket, node)
        assert isinstance(exc_info.value.__cause__, UnexpectedTypeError)

    def test_record_plan(self):
        plan = record_plan(Renamed)
        assert [(p.name, p.key) for p in plan] == [("a", "aJson"), ("b", "b")]
        assert plan[0].type is int
        assert plan[1].has_default


class TestRecordDefinition:
    """Test rejection of invalid record shapes."""

    def test_no_fields_rejected(self):
        with pytest.raises(TypeError):
            @record
            class Empty:
                pass

    def test_non_simple_key_rejected(self):
        with pytest.raises(TypeError):
            @record
            class BadKey:
                a: int = json_field(rename="a-b")

    def test_duplicate_keys_rejected(self):
        with pytest.raises(TypeError):
            @record
            class Clash:
                x: int = json_field(rename="y")
                y: int = 0

    def test_record_with_dataclass_options(self):
        @record(frozen=True)
        class Frozen:
            a: int

        with pytest.raises(AttributeError):
            Frozen(1).a = 2

    def test_unknown_type_not_readable(self):
        with pytest.raises(TypeError):
            read_tree(object, integer("1"))

    def test_unknown_value_not_writable(self):
        with pytest.raises(TypeError):
            write_tree(object())

    def test_general_union_rejected(self):
        with pytest.raises(TypeError):
            read_tree(Union[int, str], integer("1"))

    def test_non_str_dict_keys_rejected(self):
        with pytest.raises(TypeError):
            write_tree({1: 2})


class TestExtensionPoints:
    """Test user-defined codecs."""

    def test_from_tree_and_to_tree(self):
        shape = read_tree(Shape, TreeObject({"origin": scalar(TokenKind.COMPLEX_STRING, "1;2")}))
        assert shape.origin == Point(1, 2)
        assert write_tree(shape)["origin"].literal == "1;2"

    def test_user_type_errors_propagate_as_record_failure(self):
        with pytest.raises(ParseError):
            read_tree(Shape, TreeObject({"origin": scalar(TokenKind.COMPLEX_STRING, "oops")}))

    def test_register_scalar(self, monkeypatch):
        monkeypatch.setattr(bridge, "_SCALARS", dict(bridge._SCALARS))
        register_scalar(Decimal, TokenKind.FLOAT)
        assert read_tree(Decimal, scalar(TokenKind.FLOAT, "1.10")) == Decimal("1.10")
        assert write_tree(Decimal("1.10")) == scalar(TokenKind.FLOAT, "1.10")

    def test_register_non_scalar_kind_rejected(self):
        with pytest.raises(ValueError):
            register_scalar(Decimal, TokenKind.COMMA)


@record
class Envelope:
    kind: str
    payload: TreeObject


def test_raw_tree_field_passes_through():
    """A field typed as a tree node keeps the node as-is."""
    payload = TreeObject({"x": integer("1")})
    node = TreeObject({"kind": scalar(TokenKind.SIMPLE_STRING, "k"), "payload": payload})
    envelope = read_tree(Envelope, node)
    assert envelope.payload is payload
    assert write_tree(envelope)["payload"] is payload


def test_raw_tree_field_wrong_shape():
    node = TreeObject({"kind": scalar(TokenKind.SIMPLE_STRING, "k"), "payload": integer("1")})
    with pytest.raises(ParseError) as exc_info:
        read_tree(Envelope, node)
    assert isinstance(exc_info.value.__cause__, UnexpectedTypeError)
