"""
Tokenizer for tinyjson (Stage 1: Raw Text → Tokens).

A table-driven finite-state machine keyed by the kind of the token in
progress. Each state handler looks at exactly one character and answers
with a Step:

    CONSUME - the character was used; move on
    RESCAN  - the token in progress is finished; feed the same character
              again under the "no token in progress" state

This gives one character of lookahead with no buffering and no position
rewinding outside the cursor.

Syntax Notes:
    - Only ASCII space and newline are whitespace (tabs are invalid)
    - Strings have no escapes; a quote always ends the string
    - Reserved words (true, false, null, ...) are accepted as opaque text
"""

import logging
import string
from enum import Enum
from typing import Callable, Dict, List

from .errors import InvalidTokenError, OutOfRangeError
from .tokens import STRUCTURAL_CHARS, Token, TokenKind

logger = logging.getLogger(__name__)

DIGITS = frozenset(string.digits)
WORD_START = frozenset(string.ascii_letters + "_")
WORD_CHARS = WORD_START | DIGITS

QUOTE = '"'
NEWLINE = "\n"
SPACE = " "
MINUS = "-"
DOT = "."

# Characters that end a number or reserved word without being part of it
DELIMITERS = frozenset(STRUCTURAL_CHARS) | {QUOTE, NEWLINE, SPACE, MINUS}


class Step(Enum):
    """Outcome of feeding one character to a state handler."""
    CONSUME = "consume"
    RESCAN = "rescan"


class CharCursor:
    """Pull-based cursor over the input text with one character of lookahead."""

    def __init__(self, text: str):
        self._text = text
        self._pos = 0

    def at_end(self) -> bool:
        return self._pos >= len(self._text)

    def peek(self) -> str:
        return self._text[self._pos]

    def advance(self) -> None:
        self._pos += 1


class Tokenizer:
    """
    Single-use tokenizer over one input string.

    Properties:
        line: Current line number (1-based, diagnostics only)
        tokens: Tokens emitted so far
    """

    def __init__(self, text: str):
        self._cursor = CharCursor(text)
        self._kind = TokenKind.NONE
        self._literal: List[str] = []
        self.line = 1
        self.tokens: List[Token] = []
        self._handlers: Dict[TokenKind, Callable[[str], Step]] = {
            TokenKind.NONE: self._scan_start,
            TokenKind.INTEGER: self._scan_integer,
            TokenKind.FLOAT: self._scan_float,
            TokenKind.RESERVED_WORD: self._scan_reserved_word,
            TokenKind.SIMPLE_STRING: self._scan_string,
            TokenKind.COMPLEX_STRING: self._scan_string,
        }

    def tokenize(self) -> List[Token]:
        """
        Run the state machine over the whole input.

        Returns:
            List of tokens in source order

        Raises:
            InvalidTokenError: On a character with no valid meaning here
            OutOfRangeError: If the input ends inside a string
        """
        cursor = self._cursor
        while not cursor.at_end():
            ch = cursor.peek()
            if self._handlers[self._kind](ch) is Step.CONSUME:
                cursor.advance()
        self._finish()
        logger.debug("tokenized %d tokens over %d lines", len(self.tokens), self.line)
        return self.tokens

    # ------------------------------------------------------------------
    # Token register
    # ------------------------------------------------------------------

    def _begin(self, kind: TokenKind, ch: str) -> Step:
        self._kind = kind
        self._literal = [ch]
        return Step.CONSUME

    def _emit(self) -> None:
        self.tokens.append(Token(self._kind, "".join(self._literal)))
        self._kind = TokenKind.NONE
        self._literal = []

    def _finish(self) -> None:
        if self._kind is TokenKind.NONE:
            return
        if self._kind.is_string:
            raise OutOfRangeError(self.line, "".join(self._literal))
        self._emit()

    # ------------------------------------------------------------------
    # State handlers
    # ------------------------------------------------------------------

    def _scan_start(self, ch: str) -> Step:
        kind = STRUCTURAL_CHARS.get(ch)
        if kind is not None:
            self.tokens.append(Token(kind, ch))
            return Step.CONSUME
        if ch == QUOTE:
            return self._begin(TokenKind.SIMPLE_STRING, ch)
        if ch == NEWLINE:
            self.line += 1
            return Step.CONSUME
        if ch == SPACE:
            return Step.CONSUME
        if ch == MINUS or ch in DIGITS:
            return self._begin(TokenKind.INTEGER, ch)
        if ch in WORD_START:
            return self._begin(TokenKind.RESERVED_WORD, ch)
        raise InvalidTokenError(ch, self.line)

    def _scan_integer(self, ch: str) -> Step:
        if ch in DIGITS:
            self._literal.append(ch)
            return Step.CONSUME
        if ch == DOT:
            self._kind = TokenKind.FLOAT
            self._literal.append(ch)
            return Step.CONSUME
        return self._terminate(ch)

    def _scan_float(self, ch: str) -> Step:
        if ch in DIGITS:
            self._literal.append(ch)
            return Step.CONSUME
        if ch == DOT:
            self._emit()
            return Step.RESCAN
        return self._terminate(ch)

    def _scan_reserved_word(self, ch: str) -> Step:
        if ch in WORD_CHARS:
            self._literal.append(ch)
            return Step.CONSUME
        if ch == DOT:
            self._emit()
            return Step.RESCAN
        return self._terminate(ch)

    def _scan_string(self, ch: str) -> Step:
        self._literal.append(ch)
        if ch == NEWLINE:
            self.line += 1
        if ch == QUOTE:
            self._emit()
        elif ch not in WORD_CHARS:
            self._kind = TokenKind.COMPLEX_STRING
        return Step.CONSUME

    def _terminate(self, ch: str) -> Step:
        """Finish a number or reserved word on a delimiter, reject anything else."""
        if ch not in DELIMITERS:
            raise InvalidTokenError(ch, self.line)
        self._emit()
        return Step.RESCAN


def tokenize(text: str) -> List[Token]:
    """
    Split text into tokens.

    Args:
        text: Input in the tinyjson text format

    Returns:
        List of Token objects

    Raises:
        TokenizerError: If the text is malformed at character level
    """
    return Tokenizer(text).tokenize()


__all__ = ["Tokenizer", "CharCursor", "Step", "tokenize"]
