"""Built-in Swift style rules.

Each rule is a plain checker function registered in :data:`BUILTIN_RULES`.
Checkers receive a :class:`~swiftstyle_cli.rules.RuleContext` and a token
index (``None`` for file-level rules) and yield matches; fixable rules attach
``(start, end, replacement)`` edits computed against the checked text.

Fixes must be stable: re-checking fixed output must not produce the same
violation again, otherwise ``--fix`` cannot converge.
"""

from __future__ import annotations

import re
from typing import Iterator, List, Optional, Tuple

from .models import Match, TokenKind
from .rules import Rule, RuleContext
from .source_model import SourceModel

WS = TokenKind.WHITESPACE
NL = TokenKind.NEWLINE
COMMENT = TokenKind.COMMENT
BRACKET_KINDS = (TokenKind.PAREN, TokenKind.BRACKET, TokenKind.BRACE)

EditTuple = Tuple[int, int, str]

UPPER_CAMEL_RE = re.compile(r"^_?[A-Z][A-Za-z0-9]*$")
LOWER_CAMEL_RE = re.compile(r"^_*[a-z][A-Za-z0-9]*$")

# operators whose spacing depends on context (generics, optionals, inout, key paths)
UNSPACED_OPERATORS = {"<", ">", "?", "!", "&", "\\", "...", "..<"}
# reserved operators that are always binary in Swift
ALWAYS_BINARY = {"=", "->"}
RANGE_OPERATORS = {"...", "..<"}
# runs of `>` (with optional markers) that may close `Array<Array<Int>>` or `Array<Int>?`
GENERIC_CLOSER_RE = re.compile(r"^[?!]*>[>?!]*$")
GENERIC_INNER_OPERATORS = {"?", "!", "&", "->", "==", "..."}
NAME_KINDS = (TokenKind.IDENTIFIER, TokenKind.KEYWORD)

TYPE_KEYWORDS = {"class", "struct", "enum", "protocol", "typealias", "associatedtype", "actor"}
ACCESS_MODIFIERS = {"private", "fileprivate", "internal", "public", "open"}
DECLARATION_MODIFIERS = ACCESS_MODIFIERS | {
    "static", "class", "final", "override", "mutating", "nonmutating", "lazy", "weak",
    "unowned", "required", "convenience", "dynamic", "optional", "indirect", "nonisolated",
    "prefix", "postfix", "infix",
}
DECLARATION_KEYWORDS = {
    "func", "var", "let", "class", "struct", "enum", "protocol", "init", "deinit",
    "subscript", "typealias", "extension", "associatedtype",
}
CONTROL_KEYWORDS = {"if", "guard", "while", "for", "switch", "catch", "where", "repeat",
                    "func", "init", "subscript"}


# ---------------------------------------------------------------------------
# Spacing helpers
# ---------------------------------------------------------------------------

def _is_opener(model: SourceModel, index: int) -> bool:
    token = model.tokens[index]
    return token.kind in BRACKET_KINDS and token.text in "([{"


def _is_closer(model: SourceModel, index: int) -> bool:
    token = model.tokens[index]
    return token.kind in BRACKET_KINDS and token.text in ")]}"


def _single_space_before(model: SourceModel, index: int) -> Optional[EditTuple]:
    """Edit making exactly one space precede token *index*; None when already fine."""
    token = model.tokens[index]
    prev = model.token(index - 1)
    if prev is None or prev.kind in (NL, COMMENT):
        return None
    if prev.kind is WS:
        if prev.text == " " or model.is_line_start(index - 1):
            return None
        return (prev.start, prev.end, " ")
    return (token.start, token.start, " ")


def _single_space_after(model: SourceModel, index: int) -> Optional[EditTuple]:
    token = model.tokens[index]
    nxt = model.token(index + 1)
    if nxt is None or nxt.kind in (NL, COMMENT):
        return None
    if nxt.kind is WS:
        # trailing whitespace belongs to spacing.trailing-whitespace
        if nxt.text == " " or model.is_line_end(index + 1):
            return None
        return (nxt.start, nxt.end, " ")
    return (token.end, token.end, " ")


def _no_space_before(model: SourceModel, index: int) -> Optional[EditTuple]:
    prev = model.token(index - 1)
    if prev is None or prev.kind is not WS or model.is_line_start(index - 1):
        return None
    before = model.token(index - 2)
    if before is not None and before.kind is COMMENT:
        return None
    return (prev.start, prev.end, "")


def _no_space_after(model: SourceModel, index: int) -> Optional[EditTuple]:
    nxt = model.token(index + 1)
    if nxt is None or nxt.kind is not WS or model.is_line_end(index + 1):
        return None
    after = model.token(index + 2)
    if after is not None and after.kind is COMMENT:
        return None
    return (nxt.start, nxt.end, "")


def _gap_edit(model: SourceModel, left: int, right: int) -> Optional[EditTuple]:
    """Edit collapsing whatever separates two same-line tokens into one space."""
    gap_start = model.tokens[left].end
    gap_end = model.tokens[right].start
    if model.text[gap_start:gap_end] == " ":
        return None
    return (gap_start, gap_end, " ")


def _compact(edits: List[Optional[EditTuple]]) -> List[EditTuple]:
    return [edit for edit in edits if edit is not None]


# ---------------------------------------------------------------------------
# spacing.*
# ---------------------------------------------------------------------------

def _closes_generic(model: SourceModel, index: int) -> bool:
    """True when operator *index* (`>>`, `>?`, `?>`...) closes generic argument lists."""
    token = model.tokens[index]
    if not GENERIC_CLOSER_RE.match(token.text):
        return False
    pending = token.text.count(">")
    i = index - 1
    while i >= 0:
        prev = model.tokens[i]
        if prev.kind in BRACKET_KINDS:
            partner = model.matching(i)
            if prev.text in ")]" and partner is not None:
                i = partner - 1
                continue
            return False
        if prev.kind is TokenKind.OPERATOR:
            if prev.text == "<" and i > 0 and model.tokens[i - 1].kind in NAME_KINDS:
                pending -= 1
                if pending == 0:
                    return True
            elif GENERIC_CLOSER_RE.match(prev.text):
                pending += prev.text.count(">")
            elif prev.text not in GENERIC_INNER_OPERATORS:
                return False
        elif prev.kind not in NAME_KINDS and prev.kind is not WS and not (
                prev.kind is TokenKind.PUNCTUATION and prev.text in ".,:"):
            return False
        i -= 1
    return False


def check_operator_spacing(ctx: RuleContext, index: Optional[int]) -> Iterator[Match]:
    model = ctx.model
    token = model.tokens[index]
    if token.text in UNSPACED_OPERATORS or _closes_generic(model, index):
        return
    prev = model.token(index - 1)
    nxt = model.token(index + 1)
    if prev is None or nxt is None:
        return
    # next to an opening bracket or a separator the operator is prefix/postfix
    if _is_opener(model, index - 1) or (prev.kind is TokenKind.PUNCTUATION and prev.text != "."):
        return
    if _is_closer(model, index + 1) or (nxt.kind is TokenKind.PUNCTUATION and nxt.text != "."):
        return
    if token.text not in ALWAYS_BINARY and prev.kind.is_trivia != nxt.kind.is_trivia:
        return

    edits = _compact([_single_space_before(model, index), _single_space_after(model, index)])
    if edits:
        yield ctx.match_token(index, f"Operator '{token.text}' should be surrounded by single spaces", edits)


def check_range_operator(ctx: RuleContext, index: Optional[int]) -> Iterator[Match]:
    model = ctx.model
    token = model.tokens[index]
    if token.text not in RANGE_OPERATORS:
        return
    prev = model.token(index - 1)
    nxt = model.token(index + 1)
    # one-sided ranges (`xs[2...]`) legitimately touch whitespace on one side
    if prev is None or nxt is None or prev.kind is not WS or nxt.kind is not WS:
        return
    edits = _compact([_no_space_before(model, index), _no_space_after(model, index)])
    if edits:
        yield ctx.match_token(index, f"Range operator '{token.text}' should not be surrounded by spaces", edits)


def _in_ternary(model: SourceModel, index: int) -> bool:
    i = index - 1
    while i >= 0:
        token = model.tokens[i]
        if token.kind in BRACKET_KINDS:
            partner = model.matching(i)
            if token.text in ")]" and partner is not None:
                i = partner - 1
                continue
            return False
        if token.kind is TokenKind.PUNCTUATION and token.text in ",;:":
            return False
        if token.kind is TokenKind.KEYWORD and token.text in ("case", "default"):
            return False
        if token.is_(TokenKind.OPERATOR, "?") and i > 0 and model.tokens[i - 1].kind.is_trivia:
            return True
        i -= 1
    return False


def _in_selector(model: SourceModel, index: int) -> bool:
    for opener in model.ancestors(index):
        before = model.prev_significant(opener)
        if before is not None and model.tokens[before].is_(TokenKind.DIRECTIVE, "#selector", "#keyPath"):
            return True
    return False


def _in_compound_name(model: SourceModel, index: int) -> bool:
    """True for the colons of a function reference such as `update(_:with:)`."""
    opener = model.parent(index)
    if opener is None or model.tokens[opener].text != "(":
        return False
    inner = model.tokens[opener + 1:model.matching(opener)]
    if not inner or len(inner) % 2:
        return False
    return all(
        label.kind in NAME_KINDS and colon.is_(TokenKind.PUNCTUATION, ":")
        for label, colon in zip(inner[::2], inner[1::2])
    )


def check_colon_spacing(ctx: RuleContext, index: Optional[int]) -> Iterator[Match]:
    model = ctx.model
    token = model.tokens[index]
    if token.text != ":":
        return
    prev_sig = model.prev_significant(index)
    next_sig = model.next_significant(index)
    if (prev_sig is not None and next_sig is not None
            and model.tokens[prev_sig].text == "[" and model.tokens[next_sig].text == "]"):
        return
    if _in_ternary(model, index) or _in_selector(model, index) or _in_compound_name(model, index):
        return

    after = None
    nxt = model.token(index + 1)
    if nxt is not None and not _is_closer(model, index + 1):
        after = _single_space_after(model, index)
    edits = _compact([_no_space_before(model, index), after])
    if edits:
        yield ctx.match_token(index, "Colon should have no space before it and a single space after it", edits)


def check_comma_spacing(ctx: RuleContext, index: Optional[int]) -> Iterator[Match]:
    model = ctx.model
    token = model.tokens[index]
    if token.text != ",":
        return
    after = None
    nxt = model.token(index + 1)
    if nxt is not None and not _is_closer(model, index + 1):
        after = _single_space_after(model, index)
    edits = _compact([_no_space_before(model, index), after])
    if edits:
        yield ctx.match_token(index, "Comma should have no space before it and a single space after it", edits)


def check_bracket_padding(ctx: RuleContext, index: Optional[int]) -> Iterator[Match]:
    model = ctx.model
    token = model.tokens[index]
    if token.text in "([":
        edit = _no_space_after(model, index)
        if edit is not None:
            yield ctx.match(edit[0], edit[1], f"No space after '{token.text}'", [edit])
    elif token.text in ")]":
        if model.matching(index) == index - 2:
            # `( )` is reported once, from the opening side
            return
        edit = _no_space_before(model, index)
        if edit is not None:
            yield ctx.match(edit[0], edit[1], f"No space before '{token.text}'", [edit])


def check_trailing_whitespace(ctx: RuleContext, index: Optional[int]) -> Iterator[Match]:
    token = ctx.model.tokens[index]
    if ctx.model.is_line_end(index):
        yield ctx.match_token(index, "Trailing whitespace", [(token.start, token.end, "")])


# ---------------------------------------------------------------------------
# braces.*
# ---------------------------------------------------------------------------

def check_opening_brace(ctx: RuleContext, index: Optional[int]) -> Iterator[Match]:
    model = ctx.model
    token = model.tokens[index]
    if token.text != "{":
        return
    j = model.prev_index(index, skip=(WS, NL))
    if j is None:
        return
    prev = model.tokens[j]
    if prev.kind is COMMENT or _is_opener(model, j) or prev.text == "}":
        return
    if prev.kind is TokenKind.PUNCTUATION:
        return

    if model.has_newline_between(j, index):
        yield ctx.match_token(
            index,
            "Opening brace should be on the same line as the statement it opens",
            [(prev.end, token.start, " ")],
        )
        return
    edit = _gap_edit(model, j, index)
    if edit is not None:
        yield ctx.match_token(index, "Opening brace should be preceded by a single space", [edit])


def check_else_placement(ctx: RuleContext, index: Optional[int]) -> Iterator[Match]:
    model = ctx.model
    token = model.tokens[index]
    if token.text not in ("else", "catch"):
        return
    j = model.prev_index(index, skip=(WS, NL))
    if j is None or not model.tokens[j].is_(TokenKind.BRACE, "}"):
        return
    closing = model.tokens[j]
    if model.has_newline_between(j, index):
        yield ctx.match_token(
            index,
            f"'{token.text}' should be on the same line as the preceding '}}'",
            [(closing.end, token.start, " ")],
        )
        return
    edit = _gap_edit(model, j, index)
    if edit is not None:
        yield ctx.match_token(index, f"'{token.text}' should be separated from '}}' by a single space", [edit])


# ---------------------------------------------------------------------------
# naming.*
# ---------------------------------------------------------------------------

def check_type_name(ctx: RuleContext, index: Optional[int]) -> Iterator[Match]:
    model = ctx.model
    token = model.tokens[index]
    if token.text not in TYPE_KEYWORDS:
        return
    if token.kind is TokenKind.IDENTIFIER and token.text != "actor":
        return
    j = model.next_significant(index)
    if j is None or model.tokens[j].kind is not TokenKind.IDENTIFIER:
        return
    if token.text == "actor":
        before = model.prev_significant(index)
        after = model.next_significant(j)
        if before is not None and model.tokens[before].text == ".":
            return
        if after is None or model.tokens[after].text not in ("{", ":", "<", "where"):
            return
    name = model.tokens[j].text.strip("`")
    if not UPPER_CAMEL_RE.match(name):
        yield ctx.match_token(j, f"Type name '{name}' should be UpperCamelCase")


def _lower_camel(ctx: RuleContext, index: int, label: str) -> Iterator[Match]:
    name = ctx.model.tokens[index].text.strip("`")
    if name.startswith("$") or not name.strip("_"):
        return
    if not LOWER_CAMEL_RE.match(name):
        yield ctx.match_token(index, f"{label} name '{name}' should be lowerCamelCase")


def _enum_case_names(model: SourceModel, case_index: int) -> Iterator[int]:
    expect_name = True
    i = case_index + 1
    while i < len(model):
        token = model.tokens[i]
        if token.kind is NL or token.text == ";" or token.is_(TokenKind.BRACE, "}"):
            break
        if token.kind in (WS, COMMENT):
            i += 1
            continue
        if _is_opener(model, i) and model.matching(i) is not None:
            i = model.matching(i) + 1
            expect_name = False
            continue
        if token.is_(TokenKind.PUNCTUATION, ","):
            expect_name = True
        elif expect_name and token.kind is TokenKind.IDENTIFIER:
            yield i
            expect_name = False
        else:
            expect_name = False
        i += 1


def check_member_name(ctx: RuleContext, index: Optional[int]) -> Iterator[Match]:
    model = ctx.model
    token = model.tokens[index]
    labels = {"func": "Function", "let": "Constant", "var": "Variable"}
    if token.text in labels:
        j = model.next_significant(index)
        if j is not None and model.tokens[j].kind is TokenKind.IDENTIFIER:
            yield from _lower_camel(ctx, j, labels[token.text])
    elif token.text == "case":
        block = model.parent(index)
        if block is None or model.tokens[block].text != "{":
            return
        owner = model.owner_keyword(block)
        if owner is None or model.tokens[owner].text != "enum":
            return
        for j in _enum_case_names(model, index):
            yield from _lower_camel(ctx, j, "Enum case")


# ---------------------------------------------------------------------------
# structure.*
# ---------------------------------------------------------------------------

def check_semicolon(ctx: RuleContext, index: Optional[int]) -> Iterator[Match]:
    model = ctx.model
    token = model.tokens[index]
    if token.text != ";":
        return
    j = model.next_index(index)
    if j is not None:
        nxt = model.tokens[j]
        if nxt.kind is not NL and not (nxt.kind is COMMENT and nxt.text.startswith("//")):
            return
    yield ctx.match_token(index, "Statements should not end with a semicolon", [(token.start, token.end, "")])


def check_line_length(ctx: RuleContext, index: Optional[int]) -> Iterator[Match]:
    limit = ctx.params.get("max_length") or ctx.options.line_length
    for line, text in ctx.model.lines():
        if len(text) > limit:
            start, end = ctx.model.line_span(line)
            yield ctx.match(start + limit, end, f"Line is {len(text)} characters long; the limit is {limit}")


def check_indentation(ctx: RuleContext, index: Optional[int]) -> Iterator[Match]:
    model = ctx.model
    token = model.tokens[index]
    if "\t" not in token.text or not model.is_line_start(index) or model.is_line_end(index):
        return
    spaces = token.text.replace("\t", " " * ctx.options.indent_width)
    yield ctx.match_token(index, "Indent with spaces, not tabs", [(token.start, token.end, spaces)])


def check_vertical_whitespace(ctx: RuleContext, index: Optional[int]) -> Iterator[Match]:
    model = ctx.model
    max_blank = ctx.params["max_blank_lines"]
    run: List[int] = []
    seen_content = False
    for i, token in enumerate(model.tokens):
        if token.kind is NL:
            run.append(i)
            continue
        if token.kind is WS:
            continue
        blank_lines = len(run) - 1
        if seen_content and blank_lines > max_blank:
            start = model.tokens[run[max_blank]].end
            end = model.tokens[run[-1]].end
            yield ctx.match(
                start, end,
                f"Too many blank lines ({blank_lines}); at most {max_blank} allowed",
                [(start, end, "")],
            )
        run = []
        seen_content = True


def check_trailing_newline(ctx: RuleContext, index: Optional[int]) -> Iterator[Match]:
    model = ctx.model
    tokens = model.tokens
    i = len(tokens) - 1
    while i >= 0 and tokens[i].kind in (WS, NL):
        i -= 1
    if i < 0:
        return
    newlines = [j for j in range(i + 1, len(tokens)) if tokens[j].kind is NL]
    end = len(model.text)
    if not newlines:
        style = next((t.text for t in tokens if t.kind is NL), "\n")
        yield ctx.match(end, end, "File should end with a newline", [(end, end, style)])
        return
    first_end = tokens[newlines[0]].end
    if first_end < end:
        yield ctx.match(first_end, end, "File should end with a single newline", [(first_end, end, "")])


# ---------------------------------------------------------------------------
# closures.*
# ---------------------------------------------------------------------------

def _in_control_header(model: SourceModel, index: int) -> bool:
    i = model.prev_significant(index)
    while i is not None:
        token = model.tokens[i]
        partner = model.matching(i)
        if token.text in ")]" and partner is not None and token.kind in BRACKET_KINDS:
            i = model.prev_significant(partner)
            continue
        if token.kind in BRACKET_KINDS or token.text == ";":
            return False
        if token.kind is TokenKind.KEYWORD and token.text in CONTROL_KEYWORDS:
            return True
        i = model.prev_significant(i)
    return False


def check_empty_parens(ctx: RuleContext, index: Optional[int]) -> Iterator[Match]:
    model = ctx.model
    token = model.tokens[index]
    if token.text != "(" or model.matching(index) != index + 1:
        return
    callee = model.token(index - 1)
    if callee is None or callee.kind is not TokenKind.IDENTIFIER:
        return
    j = model.next_index(index + 1)
    if j is None or not model.tokens[j].is_(TokenKind.BRACE, "{"):
        return
    if _in_control_header(model, index):
        return
    end = model.tokens[index + 1].end
    yield ctx.match(token.start, end, "Omit empty parentheses before a trailing closure", [(token.start, end, "")])


def check_void_return(ctx: RuleContext, index: Optional[int]) -> Iterator[Match]:
    model = ctx.model
    if model.tokens[index].text != "->":
        return
    j = model.next_index(index)
    if j is None or not model.tokens[j].is_(TokenKind.PAREN, "(") or model.matching(j) != j + 1:
        return
    start, end = model.tokens[j].start, model.tokens[j + 1].end
    yield ctx.match(start, end, "Use 'Void' rather than '()' as a return type", [(start, end, "Void")])


# ---------------------------------------------------------------------------
# optionals.*
# ---------------------------------------------------------------------------

def check_force_unwrap(ctx: RuleContext, index: Optional[int]) -> Iterator[Match]:
    model = ctx.model
    if model.tokens[index].text != "!":
        return
    prev = model.token(index - 1)
    if prev is None or prev.kind.is_trivia:
        return
    # `try!`, `as!` and prefix `!` are not unwraps
    if not (prev.kind is TokenKind.IDENTIFIER or prev.is_(TokenKind.KEYWORD, "self") or _is_closer(model, index - 1)):
        return
    nxt = model.token(index + 1)
    if nxt is not None and not (nxt.kind.is_trivia or nxt.kind in BRACKET_KINDS or nxt.kind is TokenKind.PUNCTUATION):
        return
    yield ctx.match_token(index, "Avoid force unwrapping; use optional binding or '??'")


# ---------------------------------------------------------------------------
# access-control.*
# ---------------------------------------------------------------------------

def _modifier_units(model: SourceModel, decl_index: int) -> List[Tuple[int, int]]:
    """``(first, last)`` token indices of the modifiers preceding a declaration keyword."""
    units: List[Tuple[int, int]] = []
    i = decl_index - 1
    while i >= 0:
        token = model.tokens[i]
        if token.kind is WS:
            i -= 1
            continue
        if token.is_(TokenKind.PAREN, ")"):
            opener = model.matching(i)
            word = model.token(opener - 1) if opener is not None else None
            inner = [t.text for t in model.tokens[opener + 1:i]] if opener is not None else []
            if word is not None and word.text in ACCESS_MODIFIERS and inner == ["set"]:
                units.insert(0, (opener - 1, i))
                i = opener - 2
                continue
            break
        if token.kind in (TokenKind.KEYWORD, TokenKind.IDENTIFIER) and token.text in DECLARATION_MODIFIERS:
            before = model.prev_significant(i)
            if before is not None and model.tokens[before].text == ".":
                break
            units.insert(0, (i, i))
            i -= 1
            continue
        break
    return units


def _modifier_rank(text: str) -> int:
    if text in ACCESS_MODIFIERS:
        return 0
    if text.endswith("(set)"):
        return 1
    return 2


def check_modifier_order(ctx: RuleContext, index: Optional[int]) -> Iterator[Match]:
    model = ctx.model
    token = model.tokens[index]
    if token.text not in DECLARATION_KEYWORDS:
        return
    if token.text == "class":
        j = model.next_significant(index)
        if j is not None and model.tokens[j].text in DECLARATION_KEYWORDS | DECLARATION_MODIFIERS:
            return
    units = _modifier_units(model, index)
    if len(units) < 2:
        return
    texts = [model.text[model.tokens[a].start:model.tokens[b].end] for a, b in units]
    order = sorted(range(len(units)), key=lambda k: (_modifier_rank(texts[k]), k))
    if order == list(range(len(units))):
        return
    start = model.tokens[units[0][0]].start
    end = model.tokens[units[-1][1]].end
    replacement = " ".join(texts[k] for k in order)
    yield ctx.match(
        start, end,
        f"Access modifier '{texts[order[0]]}' should come before other modifiers",
        [(start, end, replacement)],
    )


def check_redundant_internal(ctx: RuleContext, index: Optional[int]) -> Iterator[Match]:
    model = ctx.model
    token = model.tokens[index]
    if token.text != "internal":
        return
    nxt = model.token(index + 1)
    if nxt is not None and nxt.text == "(":
        return
    j = model.next_significant(index)
    if j is None or model.tokens[j].text not in DECLARATION_KEYWORDS | DECLARATION_MODIFIERS:
        return
    edits = []
    if nxt is not None and nxt.kind is WS and j == index + 2:
        edits.append((token.start, nxt.end, ""))
    yield ctx.match_token(index, "'internal' is the default access level and can be omitted", edits)


# ---------------------------------------------------------------------------
# Registry of built-ins
# ---------------------------------------------------------------------------

K = TokenKind

BUILTIN_RULES: Tuple[Rule, ...] = (
    Rule("spacing.operator", "Spaces around binary operators", "spacing", "error",
         check_operator_spacing, frozenset({K.OPERATOR}), fixable=True),
    Rule("spacing.range-operator", "No spaces around range operators", "spacing", "warning",
         check_range_operator, frozenset({K.OPERATOR}), fixable=True),
    Rule("spacing.colon", "Colon spacing", "spacing", "error",
         check_colon_spacing, frozenset({K.PUNCTUATION}), fixable=True),
    Rule("spacing.comma", "Comma spacing", "spacing", "error",
         check_comma_spacing, frozenset({K.PUNCTUATION}), fixable=True),
    Rule("spacing.bracket-padding", "No padding inside parentheses and brackets", "spacing", "warning",
         check_bracket_padding, frozenset({K.PAREN, K.BRACKET}), fixable=True),
    Rule("spacing.trailing-whitespace", "No trailing whitespace", "spacing", "warning",
         check_trailing_whitespace, frozenset({K.WHITESPACE}), fixable=True),
    Rule("braces.opening-same-line", "Opening braces on the same line", "braces", "error",
         check_opening_brace, frozenset({K.BRACE}), fixable=True),
    Rule("braces.else-same-line", "'else' and 'catch' follow the closing brace", "braces", "error",
         check_else_placement, frozenset({K.KEYWORD}), fixable=True),
    Rule("naming.type-name", "Types are UpperCamelCase", "naming", "error",
         check_type_name, frozenset({K.KEYWORD, K.IDENTIFIER})),
    Rule("naming.member-name", "Functions, properties and cases are lowerCamelCase", "naming", "error",
         check_member_name, frozenset({K.KEYWORD})),
    Rule("structure.semicolon", "No trailing semicolons", "structure", "warning",
         check_semicolon, frozenset({K.PUNCTUATION}), fixable=True),
    Rule("structure.line-length", "Line length limit", "structure", "warning",
         check_line_length, parameters={"max_length": 0}),
    Rule("structure.indentation", "Indent with spaces", "structure", "warning",
         check_indentation, frozenset({K.WHITESPACE}), fixable=True),
    Rule("structure.vertical-whitespace", "Limit consecutive blank lines", "structure", "warning",
         check_vertical_whitespace, fixable=True, parameters={"max_blank_lines": 1}),
    Rule("structure.trailing-newline", "Files end with a single newline", "structure", "warning",
         check_trailing_newline, fixable=True),
    Rule("closures.empty-parens", "No empty parentheses before trailing closures", "closures", "warning",
         check_empty_parens, frozenset({K.PAREN}), fixable=True),
    Rule("closures.void-return", "Write 'Void' for empty return types", "closures", "warning",
         check_void_return, frozenset({K.OPERATOR}), fixable=True),
    Rule("optionals.force-unwrap", "Avoid force unwrapping", "optionals", "warning",
         check_force_unwrap, frozenset({K.OPERATOR}), enabled_by_default=False),
    Rule("access-control.modifier-order", "Access modifier first", "access-control", "warning",
         check_modifier_order, frozenset({K.KEYWORD}), fixable=True),
    Rule("access-control.redundant-internal", "Omit 'internal'", "access-control", "info",
         check_redundant_internal, frozenset({K.KEYWORD}), fixable=True),
)
