#!/usr/bin/env python3
"""
Complete Pipeline Demo: Text → Tokens → Tree → Record → Text

Shows the full workflow:
1. Tokenize a document
2. Build the tree
3. Decode into typed records
4. Encode back (keys come out sorted)
"""

from typing import List, Optional

from tinyjson import decode, encode, json_field, record
from tinyjson.lexer import tokenize
from tinyjson.mapper import parse_object
from tinyjson.render import tree_to_yaml


@record
class Car:
    name: str
    plate: str = json_field(rename="licensePlate")


@record
class Person:
    name: str
    age: int
    is_active: bool = json_field(rename="isActive")
    cars: List[Car]
    nickname: Optional[str] = None


DOCUMENT = """
{
    "name": "John",
    "age": 30,
    "isActive": true,
    "cars": [
        {"name": "Ford", "licensePlate": "20-13f"},
        {"name": "Fiat", "licensePlate": "41-07k"}
    ]
}
"""


def main():
    print("=" * 80)
    print("PIPELINE DEMO: Text → Tokens → Tree → Record → Text")
    print("=" * 80)

    print("\n1. TOKENIZING...")
    tokens = tokenize(DOCUMENT)
    print(f"   ✓ {len(tokens)} tokens")
    for token in tokens[:8]:
        print(f"      {token.kind.name:<14} {token.literal}")
    print(f"      ... and {len(tokens) - 8} more")

    print("\n2. BUILDING TREE...")
    tree = parse_object(tokens)
    print(f"   ✓ Top-level keys (sorted): {tree.keys()}")
    for line in tree_to_yaml(tree).splitlines():
        print(f"      {line}")

    print("\n3. DECODING RECORD...")
    person = decode(DOCUMENT, Person)
    print(f"   ✓ {person}")

    print("\n4. ENCODING RECORD...")
    print(f"   ✓ {encode(person)}")

    print("\n" + "=" * 80)


if __name__ == "__main__":
    main()
