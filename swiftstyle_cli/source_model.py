"""Randomly-accessible view of one tokenized source file."""

from __future__ import annotations

import bisect
import logging
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Sequence, Tuple, Union

from .errors import ParseFailure
from .models import Token, TokenKind
from .parser import CLOSERS, OPENERS, Parser

logger = logging.getLogger(__name__)

# Keywords that own the brace block following them.
BLOCK_OWNERS = frozenset({
    "class", "struct", "enum", "protocol", "extension", "actor",
    "func", "init", "deinit", "subscript", "var", "let",
    "if", "guard", "while", "for", "switch", "do", "repeat", "else", "catch", "defer",
})


class SourceModel:
    """Token stream of one file revision plus navigation helpers.

    A model is never mutated. Applying edits yields new text, which is turned
    into a fresh model via :meth:`rebuild` with ``revision + 1``.
    """

    def __init__(self, path: Union[str, Path], text: str, tokens: Sequence[Token], revision: int = 0):
        self.path = str(path)
        self.text = text
        self.tokens: Tuple[Token, ...] = tuple(tokens)
        self.revision = revision
        self._validate_coverage()
        self._starts = [t.start for t in self.tokens]
        self._line_starts = self._compute_line_starts(text)
        self._pairs: Dict[int, int] = {}
        self._parents: List[int] = []
        self._link_brackets()

    @classmethod
    def build(cls, path: Union[str, Path], text: str, parser: Parser, revision: int = 0) -> "SourceModel":
        """Tokenize *text* with *parser*. Raises ParseFailure."""
        return cls(path, text, parser.tokenize(text), revision=revision)

    def rebuild(self, text: str, parser: Parser) -> "SourceModel":
        return SourceModel.build(self.path, text, parser, revision=self.revision + 1)

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    def _validate_coverage(self) -> None:
        expected = 0
        for token in self.tokens:
            if token.start != expected or self.text[token.start:token.end] != token.text:
                raise ParseFailure("Token stream does not match source text", offset=expected)
            expected = token.end
        if expected != len(self.text):
            raise ParseFailure("Token stream does not cover source text", offset=expected)

    @staticmethod
    def _compute_line_starts(text: str) -> List[int]:
        starts = [0]
        i = 0
        length = len(text)
        while i < length:
            ch = text[i]
            if ch == "\r" and i + 1 < length and text[i + 1] == "\n":
                i += 1
            if ch in "\r\n":
                starts.append(i + 1)
            i += 1
        return starts

    def _link_brackets(self) -> None:
        stack: List[int] = []
        for index, token in enumerate(self.tokens):
            self._parents.append(stack[-1] if stack else -1)
            if token.kind not in (TokenKind.PAREN, TokenKind.BRACKET, TokenKind.BRACE):
                continue
            if token.text in OPENERS:
                stack.append(index)
            elif token.text in CLOSERS:
                if not stack or self.tokens[stack[-1]].text != CLOSERS[token.text]:
                    raise ParseFailure(
                        f"Unbalanced '{token.text}'", offset=token.start, line=token.line, column=token.column
                    )
                opener = stack.pop()
                self._pairs[opener] = index
                self._pairs[index] = opener
                # a closer belongs to the same parent as its opener
                self._parents[index] = self._parents[opener]
        if stack:
            token = self.tokens[stack[-1]]
            raise ParseFailure(f"Unclosed '{token.text}'", offset=token.start, line=token.line, column=token.column)

    # ------------------------------------------------------------------
    # Token access
    # ------------------------------------------------------------------

    def __len__(self) -> int:
        return len(self.tokens)

    def token(self, index: int) -> Optional[Token]:
        if 0 <= index < len(self.tokens):
            return self.tokens[index]
        return None

    def index_at(self, offset: int) -> Optional[int]:
        """Index of the token containing *offset*."""
        if not self.tokens or offset < 0 or offset >= len(self.text):
            return None
        return bisect.bisect_right(self._starts, offset) - 1

    def indices_of(self, *kinds: TokenKind) -> Iterator[int]:
        for index, token in enumerate(self.tokens):
            if token.kind in kinds:
                yield index

    def next_index(self, index: int, skip: Sequence[TokenKind] = (TokenKind.WHITESPACE,)) -> Optional[int]:
        i = index + 1
        while i < len(self.tokens) and self.tokens[i].kind in skip:
            i += 1
        return i if i < len(self.tokens) else None

    def prev_index(self, index: int, skip: Sequence[TokenKind] = (TokenKind.WHITESPACE,)) -> Optional[int]:
        i = index - 1
        while i >= 0 and self.tokens[i].kind in skip:
            i -= 1
        return i if i >= 0 else None

    def next_significant(self, index: int) -> Optional[int]:
        return self.next_index(index, skip=(TokenKind.WHITESPACE, TokenKind.NEWLINE, TokenKind.COMMENT))

    def prev_significant(self, index: int) -> Optional[int]:
        return self.prev_index(index, skip=(TokenKind.WHITESPACE, TokenKind.NEWLINE, TokenKind.COMMENT))

    def is_line_start(self, index: int) -> bool:
        """True when nothing but a line break precedes the token on its line."""
        return index == 0 or self.tokens[index - 1].kind is TokenKind.NEWLINE

    def is_line_end(self, index: int) -> bool:
        """True when the token is followed by a line break or end of file."""
        nxt = self.token(index + 1)
        return nxt is None or nxt.kind is TokenKind.NEWLINE

    def has_newline_between(self, left: int, right: int) -> bool:
        return any(t.kind is TokenKind.NEWLINE for t in self.tokens[left + 1:right])

    # ------------------------------------------------------------------
    # Structure
    # ------------------------------------------------------------------

    def matching(self, index: int) -> Optional[int]:
        """Index of the bracket paired with the bracket at *index*."""
        return self._pairs.get(index)

    def parent(self, index: int) -> Optional[int]:
        """Index of the innermost opening bracket enclosing *index*."""
        parent = self._parents[index]
        return parent if parent >= 0 else None

    def ancestors(self, index: int) -> Iterator[int]:
        parent = self.parent(index)
        while parent is not None:
            yield parent
            parent = self.parent(parent)

    def children(self, opener: int) -> Iterator[int]:
        """Direct children of a bracket block (nested blocks appear as their opener)."""
        closer = self._pairs[opener]
        i = opener + 1
        while i < closer:
            yield i
            i = self._pairs[i] + 1 if i in self._pairs and i < self._pairs[i] else i + 1

    def owner_keyword(self, opener: int) -> Optional[int]:
        """Index of the keyword introducing the ``{`` block at *opener*.

        Walks back through the header at the same nesting level, hopping over
        bracketed groups, and stops at the previous statement boundary.
        ``let``/``var`` only win when no other owner shares their line, so
        ``if let x = y {`` belongs to ``if``.
        """
        binding: Optional[int] = None
        i = opener - 1
        while i >= 0:
            token = self.tokens[i]
            if token.kind is TokenKind.NEWLINE and binding is not None:
                return binding
            if token.kind.is_trivia:
                i -= 1
                continue
            if token.text in (")", "]") and i in self._pairs:
                i = self._pairs[i] - 1
                continue
            if token.text in ("{", "}", ";", "(", "["):
                break
            if token.text in BLOCK_OWNERS and (token.kind is TokenKind.KEYWORD or token.text == "actor"):
                if token.text not in ("let", "var"):
                    return i
                binding = i
            i -= 1
        return binding

    # ------------------------------------------------------------------
    # Positions
    # ------------------------------------------------------------------

    @property
    def line_count(self) -> int:
        return len(self._line_starts)

    def position(self, offset: int) -> Tuple[int, int]:
        """Translate an offset into a 1-based ``(line, column)`` pair."""
        offset = max(0, min(offset, len(self.text)))
        line_index = bisect.bisect_right(self._line_starts, offset) - 1
        return line_index + 1, offset - self._line_starts[line_index] + 1

    def offset(self, line: int, column: int = 1) -> int:
        return self._line_starts[line - 1] + column - 1

    def line_span(self, line: int) -> Tuple[int, int]:
        """``[start, end)`` of *line*, excluding its line break."""
        start = self._line_starts[line - 1]
        end = self._line_starts[line] if line < len(self._line_starts) else len(self.text)
        while end > start and self.text[end - 1] in "\r\n":
            end -= 1
        return start, end

    def lines(self) -> Iterator[Tuple[int, str]]:
        for line in range(1, self.line_count + 1):
            start, end = self.line_span(line)
            yield line, self.text[start:end]
