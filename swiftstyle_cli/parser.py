"""Tokenizers that turn Swift source text into a lossless token stream.

The engine only depends on the :class:`Parser` interface: ``tokenize(text)``
either returns tokens that tile the text exactly (every character belongs to
exactly one token, in order) or raises :class:`ParseFailure`.

:class:`SwiftTokenizer` is the built-in implementation. It is a lexer, not a
full grammar: it understands comments (including nested block comments),
string literals (single-line, multi-line, raw and interpolated), numbers,
identifiers, operators and bracket balancing, which is everything the style
rules need.
"""

from __future__ import annotations

import logging
import re
from abc import ABC, abstractmethod
from typing import List, Optional, Set, Tuple

from .errors import ParseFailure
from .models import Token, TokenKind

logger = logging.getLogger(__name__)

SKIP_DIRS: Set[str] = {
    ".git", ".hg", ".svn", ".build", ".swiftpm", "build", "Pods", "Carthage",
    "DerivedData", "node_modules", ".venv", "venv", "__pycache__",
}

KEYWORDS = frozenset({
    # declarations
    "associatedtype", "class", "deinit", "enum", "extension", "fileprivate", "func",
    "import", "init", "inout", "internal", "let", "operator", "private",
    "precedencegroup", "protocol", "public", "rethrows", "static", "struct",
    "subscript", "typealias", "var",
    # statements
    "break", "case", "catch", "continue", "default", "defer", "do", "else",
    "fallthrough", "for", "guard", "if", "in", "repeat", "return", "throw",
    "switch", "where", "while",
    # expressions and types
    "Any", "as", "await", "false", "is", "nil", "self", "Self", "super", "throws",
    "true", "try",
})

OPERATOR_CHARS = frozenset("/=-+!*%<>&|^~?")
OPENERS = {"(": ")", "[": "]", "{": "}"}
CLOSERS = {")": "(", "]": "[", "}": "{"}
BRACKET_KINDS = {
    "(": TokenKind.PAREN, ")": TokenKind.PAREN,
    "[": TokenKind.BRACKET, "]": TokenKind.BRACKET,
    "{": TokenKind.BRACE, "}": TokenKind.BRACE,
}

NUMBER_RE = re.compile(
    r"0[xX][0-9a-fA-F_]+(?:\.[0-9a-fA-F][0-9a-fA-F_]*)?(?:[pP][+-]?[0-9][0-9_]*)?"
    r"|0[bB][01_]+"
    r"|0[oO][0-7_]+"
    r"|[0-9][0-9_]*(?:\.[0-9][0-9_]*)?(?:[eE][+-]?[0-9][0-9_]*)?"
)
RAW_STRING_START_RE = re.compile(r'(#+)("""|")')


# ===================================================================
# Abstract Parser Interface
# ===================================================================

class Parser(ABC):
    """Abstract base class for tokenizers consumed by the engine."""

    @abstractmethod
    def tokenize(self, text: str) -> List[Token]:
        """Return a token stream tiling *text*, or raise ParseFailure."""
        ...


# ===================================================================
# Swift tokenizer
# ===================================================================

class SwiftTokenizer(Parser):
    """Lossless tokenizer for Swift source files."""

    def tokenize(self, text: str) -> List[Token]:
        tokens = _SwiftLexer(text).run()
        logger.debug("Tokenized %d characters into %d tokens", len(text), len(tokens))
        return tokens


class _SwiftLexer:
    """Single-use scanner over one source text."""

    def __init__(self, source: str):
        self.source = source
        self.length = len(source)
        self.pos = 0
        self.line = 1
        self.column = 1
        self.tokens: List[Token] = []
        self.brackets: List[Tuple[str, int]] = []

    # ------------------------------------------------------------------
    # Character helpers
    # ------------------------------------------------------------------

    def _current(self) -> Optional[str]:
        if self.pos >= self.length:
            return None
        return self.source[self.pos]

    def _peek(self, offset: int = 1) -> Optional[str]:
        pos = self.pos + offset
        if pos >= self.length:
            return None
        return self.source[pos]

    def _fail(self, message: str, offset: int) -> ParseFailure:
        line = self.source.count("\n", 0, offset) + 1
        line_start = self.source.rfind("\n", 0, offset) + 1
        return ParseFailure(message, offset=offset, line=line, column=offset - line_start + 1)

    def _emit(self, kind: TokenKind, end: int) -> Token:
        """Emit the token spanning ``[self.pos, end)`` and advance past it."""
        start = self.pos
        token = Token(kind, self.source[start:end], start, end, self.line, self.column)
        self.tokens.append(token)
        i = start
        while i < end:
            ch = self.source[i]
            if ch == "\n":
                self.line += 1
                self.column = 1
            elif ch == "\r":
                if i + 1 < self.length and self.source[i + 1] == "\n":
                    i += 1
                self.line += 1
                self.column = 1
            else:
                self.column += 1
            i += 1
        self.pos = end
        return token

    # ------------------------------------------------------------------
    # Main loop
    # ------------------------------------------------------------------

    def run(self) -> List[Token]:
        while self.pos < self.length:
            ch = self.source[self.pos]
            if ch in " \t\f\v":
                self._emit(TokenKind.WHITESPACE, self._scan_while(" \t\f\v"))
            elif ch == "\n":
                self._emit(TokenKind.NEWLINE, self.pos + 1)
            elif ch == "\r":
                self._emit(TokenKind.NEWLINE, self.pos + (2 if self._peek() == "\n" else 1))
            elif self.source.startswith("//", self.pos):
                self._read_line_comment()
            elif self.source.startswith("/*", self.pos):
                self._emit(TokenKind.COMMENT, self._scan_block_comment(self.pos))
            elif ch == '"' or (ch == "#" and RAW_STRING_START_RE.match(self.source, self.pos)):
                self._emit(TokenKind.STRING, self._scan_string(self.pos))
            elif ch.isdigit():
                match = NUMBER_RE.match(self.source, self.pos)
                self._emit(TokenKind.NUMBER, match.end())
            elif ch == "`":
                close = self.source.find("`", self.pos + 1)
                if close == -1 or "\n" in self.source[self.pos:close]:
                    raise self._fail("Unterminated backtick identifier", self.pos)
                self._emit(TokenKind.IDENTIFIER, close + 1)
            elif ch == "$":
                end = self._scan_identifier(self.pos + 1)
                if end == self.pos + 1:
                    raise self._fail("Expected identifier after '$'", self.pos)
                self._emit(TokenKind.IDENTIFIER, end)
            elif ch == "_" or ch.isalpha():
                end = self._scan_identifier(self.pos)
                word = self.source[self.pos:end]
                self._emit(TokenKind.KEYWORD if word in KEYWORDS else TokenKind.IDENTIFIER, end)
            elif ch == "@":
                end = self._scan_identifier(self.pos + 1)
                if end == self.pos + 1:
                    raise self._fail("Expected attribute name after '@'", self.pos)
                self._emit(TokenKind.ATTRIBUTE, end)
            elif ch == "#":
                end = self._scan_identifier(self.pos + 1)
                if end == self.pos + 1:
                    raise self._fail("Unexpected character '#'", self.pos)
                self._emit(TokenKind.DIRECTIVE, end)
            elif ch in OPENERS:
                self.brackets.append((ch, self.pos))
                self._emit(BRACKET_KINDS[ch], self.pos + 1)
            elif ch in CLOSERS:
                self._close_bracket(ch)
                self._emit(BRACKET_KINDS[ch], self.pos + 1)
            elif ch in ",:;":
                self._emit(TokenKind.PUNCTUATION, self.pos + 1)
            elif ch == ".":
                if self.source.startswith("...", self.pos) or self.source.startswith("..<", self.pos):
                    self._emit(TokenKind.OPERATOR, self.pos + 3)
                else:
                    self._emit(TokenKind.PUNCTUATION, self.pos + 1)
            elif ch in OPERATOR_CHARS:
                self._emit(TokenKind.OPERATOR, self._scan_operator())
            elif ch == "\\":
                self._emit(TokenKind.OPERATOR, self.pos + 1)
            else:
                raise self._fail(f"Unexpected character {ch!r}", self.pos)

        if self.brackets:
            opener, offset = self.brackets[-1]
            raise self._fail(f"Unclosed '{opener}'", offset)
        return self.tokens

    # ------------------------------------------------------------------
    # Scanners (return the end offset, do not emit)
    # ------------------------------------------------------------------

    def _scan_while(self, chars: str) -> int:
        end = self.pos
        while end < self.length and self.source[end] in chars:
            end += 1
        return end

    def _scan_identifier(self, start: int) -> int:
        end = start
        while end < self.length and (self.source[end] == "_" or self.source[end].isalnum()):
            end += 1
        return end

    def _scan_operator(self) -> int:
        end = self.pos
        while end < self.length and self.source[end] in OPERATOR_CHARS:
            # a comment opener ends the operator
            if end > self.pos and self.source.startswith(("//", "/*"), end):
                break
            end += 1
        return end

    def _read_line_comment(self) -> None:
        end = self.pos
        while end < self.length and self.source[end] not in "\r\n":
            end += 1
        body_end = end
        while body_end > self.pos and self.source[body_end - 1] in " \t\f\v":
            body_end -= 1
        self._emit(TokenKind.COMMENT, body_end)
        if body_end < end:
            self._emit(TokenKind.WHITESPACE, end)

    def _scan_block_comment(self, start: int) -> int:
        depth = 0
        i = start
        while i < self.length:
            if self.source.startswith("/*", i):
                depth += 1
                i += 2
            elif self.source.startswith("*/", i):
                depth -= 1
                i += 2
                if depth == 0:
                    return i
            else:
                i += 1
        raise self._fail("Unterminated block comment", start)

    def _scan_string(self, start: int) -> int:
        """Scan a string literal starting at *start*; return its end offset."""
        hashes = 0
        i = start
        while self.source[i] == "#":
            hashes += 1
            i += 1
        multiline = self.source.startswith('"""', i)
        delimiter = ('"""' if multiline else '"') + "#" * hashes
        i += 3 if multiline else 1
        escape = "\\" + "#" * hashes

        while i < self.length:
            ch = self.source[i]
            if self.source.startswith(delimiter, i):
                return i + len(delimiter)
            if ch in "\r\n" and not multiline:
                break
            if self.source.startswith(escape, i):
                i += len(escape)
                if i < self.length and self.source[i] == "(":
                    i = self._scan_interpolation(i)
                else:
                    i += 1
                continue
            i += 1
        raise self._fail("Unterminated string literal", start)

    def _scan_interpolation(self, open_paren: int) -> int:
        depth = 0
        i = open_paren
        while i < self.length:
            ch = self.source[i]
            if ch == '"' or (ch == "#" and RAW_STRING_START_RE.match(self.source, i)):
                i = self._scan_string(i)
                continue
            if ch == "(":
                depth += 1
            elif ch == ")":
                depth -= 1
                if depth == 0:
                    return i + 1
            i += 1
        raise self._fail("Unterminated string interpolation", open_paren)

    def _close_bracket(self, closer: str) -> None:
        if not self.brackets:
            raise self._fail(f"Unmatched '{closer}'", self.pos)
        opener, offset = self.brackets.pop()
        if opener != CLOSERS[closer]:
            raise self._fail(f"Mismatched '{closer}' for '{opener}'", self.pos)
