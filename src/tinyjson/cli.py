"""
Command-line interface for checking and inspecting tinyjson files.

Exit codes:
    0 - the file decoded cleanly
    1 - DecodeError (malformed text or structure)
    2 - the file could not be read
"""

import argparse
import logging
import sys
from typing import List, Optional

from tinyjson.errors import DecodeError
from tinyjson.facade import decode_tree
from tinyjson.lexer import tokenize
from tinyjson.mapper import DEPTH_LIMIT_DEFAULT
from tinyjson.render import encode_json, tree_to_yaml

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="tinyjson",
        description="Validate a tinyjson file and print its canonical form",
    )
    ap.add_argument("file", help="file to decode")
    view = ap.add_mutually_exclusive_group()
    view.add_argument("--tokens", action="store_true", help="dump the token stream and exit")
    view.add_argument("--yaml", action="store_true", help="print the decoded tree as YAML")
    ap.add_argument("--max-depth", type=int, default=DEPTH_LIMIT_DEFAULT)
    ap.add_argument("-v", "--verbose", action="store_true", help="enable debug logging")
    return ap


def main(argv: Optional[List[str]] = None) -> int:
    args = _build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        with open(args.file, "r", encoding="utf-8") as fh:
            text = fh.read()
    except (OSError, UnicodeDecodeError) as exc:
        print(f"error: cannot read {args.file}: {exc}", file=sys.stderr)
        return 2

    try:
        if args.tokens:
            for token in tokenize(text):
                print(f"{token.kind.name}\t{token.literal}")
            return 0
        tree = decode_tree(text, max_depth=args.max_depth)
    except DecodeError as exc:
        logger.debug("decode failed", exc_info=True)
        print(f"{type(exc).__name__}: {exc}", file=sys.stderr)
        return 1

    if args.yaml:
        sys.stdout.write(tree_to_yaml(tree))
    else:
        print(encode_json(tree))
    return 0


if __name__ == "__main__":
    sys.exit(main())
