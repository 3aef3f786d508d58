"""
Brace Style rules (One True Brace Style).

    PS201 open-brace-same-line   { belongs at the end of the line it opens
    PS202 close-brace-own-line   } of a multi-line block starts its own line
    PS203 cuddled-else           } else {, } catch {, } finally {
"""

from typing import Iterator, Optional

from psstyle.model import Finding, Fix
from psstyle.parser import Script
from psstyle.rules.base import RuleContext, rule
from psstyle.tokenizer import ASSIGNMENT_OPERATORS, Token, TokenKind

SECTION = "Brace Style"

_CONTINUED_KINDS = (
    TokenKind.LBRACE, TokenKind.LPAREN, TokenKind.LBRACKET,
    TokenKind.COMMA, TokenKind.PIPE, TokenKind.SEMICOLON,
)
_CUDDLED_KEYWORDS = ("else", "elseif", "catch", "finally")


def _join_fix(script: Script, left: Token, right: Token) -> Optional[Fix]:
    """Fix that pulls ``right`` up onto ``left``'s line, if only whitespace separates them."""
    between = script.tokens[script.index_of(left) + 1:script.index_of(right)]
    if any(t.kind is not TokenKind.NEWLINE for t in between):
        return None
    return Fix(left.end, right.start, " ")


def _opens_previous_statement(previous: Token) -> bool:
    if previous.kind in _CONTINUED_KINDS:
        return False
    if previous.kind is TokenKind.OPERATOR and (
        previous.text in ASSIGNMENT_OPERATORS or previous.text in ("&&", "||")
    ):
        return False
    return True


@rule("PS201", "open-brace-same-line", SECTION, "Put the opening brace at the end of the line", fixable=True)
def check_open_brace_same_line(script: Script, context: RuleContext) -> Iterator[Finding]:
    for pair in script.brace_pairs:
        if pair.open.kind is not TokenKind.LBRACE:
            continue
        index = script.index_of(pair.open)
        if not script.starts_line(index):
            continue
        previous = script.previous_significant(index)
        if previous is None or previous.end_line >= pair.open.line:
            continue
        if not _opens_previous_statement(previous):
            continue
        yield Finding(
            line=pair.open.line,
            column=pair.open.column,
            message=f"Opening brace belongs on the same line as '{previous.text}'",
            fix=_join_fix(script, previous, pair.open),
        )


@rule(
    "PS202", "close-brace-own-line", SECTION, "Put the closing brace of a multi-line block on its own line",
    fixable=True,
)
def check_close_brace_own_line(script: Script, context: RuleContext) -> Iterator[Finding]:
    for pair in script.brace_pairs:
        if pair.open.kind is not TokenKind.LBRACE or not pair.is_multiline:
            continue
        index = script.index_of(pair.close)
        if script.starts_line(index):
            continue
        open_line = script.lines[pair.open.line - 1]
        indent = open_line[: len(open_line) - len(open_line.lstrip(" \t"))]
        previous = script.tokens[index - 1]
        yield Finding(
            line=pair.close.line,
            column=pair.close.column,
            message="Closing brace of a multi-line block should start its own line",
            fix=Fix(previous.end, pair.close.start, script.newline + indent),
        )


@rule(
    "PS203", "cuddled-else", SECTION, "Put else, elseif, catch and finally on the closing brace's line",
    fixable=True,
)
def check_cuddled_else(script: Script, context: RuleContext) -> Iterator[Finding]:
    for index, token in enumerate(script.tokens):
        if not token.is_keyword(*_CUDDLED_KEYWORDS) or not script.starts_line(index):
            continue
        previous = script.previous_significant(index)
        if previous is None or previous.kind is not TokenKind.RBRACE:
            continue
        yield Finding(
            line=token.line,
            column=token.column,
            message=f"'{token.text}' should follow the closing brace on the same line",
            fix=_join_fix(script, previous, token),
        )
