"""
Tree Values

The generic in-memory structure sitting between text and typed records:
    - Scalar (a single token)
    - TreeObject (string keys → tree values)
    - TreeArray (ordered tree values)

ARCHITECTURAL RULE:
    TreeObject iterates in key-sorted order, not insertion order.
    Re-encoding an object therefore does NOT preserve the key order of
    the source text.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Tuple, Union

from .tokens import Token, TokenKind


@dataclass(frozen=True)
class Scalar:
    """
    A leaf node wrapping one scalar token.

    String scalars built by the tree builder no longer carry their quotes.
    """

    token: Token

    @property
    def kind(self) -> TokenKind:
        return self.token.kind

    @property
    def literal(self) -> str:
        return self.token.literal

    def __str__(self) -> str:
        return self.token.literal


@dataclass
class TreeObject:
    """
    A key → value mapping with unique keys.

    Properties:
        members: Underlying storage. Use keys()/items() for ordered access.
    """

    members: Dict[str, "TreeValue"] = field(default_factory=dict)

    def get(self, key: str) -> Optional["TreeValue"]:
        return self.members.get(key)

    def insert(self, key: str, value: "TreeValue") -> None:
        """Insert or overwrite the value stored under key."""
        self.members[key] = value

    def keys(self) -> List[str]:
        return sorted(self.members)

    def items(self) -> List[Tuple[str, "TreeValue"]]:
        return [(key, self.members[key]) for key in self.keys()]

    def __contains__(self, key: object) -> bool:
        return key in self.members

    def __getitem__(self, key: str) -> "TreeValue":
        return self.members[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self.keys())

    def __len__(self) -> int:
        return len(self.members)


@dataclass
class TreeArray:
    """An ordered sequence of tree values."""

    elements: List["TreeValue"] = field(default_factory=list)

    def __getitem__(self, index: int) -> "TreeValue":
        return self.elements[index]

    def __iter__(self) -> Iterator["TreeValue"]:
        return iter(self.elements)

    def __len__(self) -> int:
        return len(self.elements)


TreeValue = Union[Scalar, TreeObject, TreeArray]


def scalar(kind: TokenKind, literal: str) -> Scalar:
    """Build a Scalar node from a kind and literal text."""
    return Scalar(Token(kind, literal))


NULL = scalar(TokenKind.RESERVED_WORD, "null")


def is_null(node: Optional[TreeValue]) -> bool:
    """True for the reserved word null."""
    return isinstance(node, Scalar) and node.kind is TokenKind.RESERVED_WORD and node.literal == "null"
