"""
Punctuation Style rules.

    PS401 single-quotes          'constant' rather than "constant"
    PS402 trailing-semicolon     no ; at the end of a line
    PS403 backtick-continuation  prefer splatting over ` line continuation
    PS404 assignment-spacing     $a = 1 rather than $a=1
"""

from typing import Iterator, List, Optional, Tuple

from psstyle.model import Finding, Fix, Severity
from psstyle.parser import PairContext, Script
from psstyle.rules.base import RuleContext, rule
from psstyle.tokenizer import ASSIGNMENT_OPERATORS, TokenKind

SECTION = "Punctuation Style"

_KEY_CONTEXTS = (PairContext.HASHTABLE, PairContext.DECLARATION)


@rule(
    "PS401", "single-quotes", SECTION, "Use single quotes unless the string expands variables",
    severity=Severity.INFORMATION, fixable=True,
)
def check_single_quotes(script: Script, context: RuleContext) -> Iterator[Finding]:
    for token in script.tokens:
        if token.quote != '"' or token.is_here_string:
            continue
        content = token.text[1:-1]
        if "$" in content or "`" in content or "'" in content:
            continue
        yield Finding(
            line=token.line,
            column=token.column,
            message=f"Use single quotes for the constant string {token.text}",
            fix=Fix(token.start, token.end, "'" + content.replace('""', '"') + "'"),
        )


@rule("PS402", "trailing-semicolon", SECTION, "Do not end lines with semicolons", fixable=True)
def check_trailing_semicolon(script: Script, context: RuleContext) -> Iterator[Finding]:
    for index, token in enumerate(script.tokens):
        if token.kind is not TokenKind.SEMICOLON or not script.ends_line(index):
            continue
        start = token.start
        previous = script.tokens[index - 1] if index else None
        if previous is not None and previous.end_line == token.line and previous.kind is not TokenKind.NEWLINE:
            start = previous.end
        yield Finding(
            line=token.line,
            column=token.column,
            message="Unnecessary semicolon at the end of the line",
            fix=Fix(start, token.end, ""),
        )


@rule("PS403", "backtick-continuation", SECTION, "Avoid backtick line continuation; use splatting")
def check_backtick_continuation(script: Script, context: RuleContext) -> Iterator[Finding]:
    for token in script.tokens:
        if token.kind is TokenKind.CONTINUATION:
            yield Finding(
                line=token.line,
                column=token.column,
                message="Avoid backtick line continuation; use splatting or break after '|', ',' or '('",
            )


def _bracket_spans(script: Script) -> List[Tuple[int, int]]:
    return [
        (pair.open.start, pair.close.end)
        for pair in script.brace_pairs
        if pair.context is PairContext.BRACKET
    ]


def _innermost_context(script: Script, offset: int) -> Optional[PairContext]:
    enclosing = [p for p in script.brace_pairs if p.open.start < offset < p.close.start]
    if not enclosing:
        return None
    return max(enclosing, key=lambda p: p.open.start).context


def _is_assignment(script: Script, index: int) -> bool:
    """True if the '=' at tokens[index] assigns to a variable, member, element or key."""
    left = script.previous_significant(index)
    if left is None:
        return False
    if left.kind in (TokenKind.VARIABLE, TokenKind.RBRACKET):
        return True
    if left.kind is TokenKind.WORD:
        # $obj.Name = ... and [Type]::Name = ...
        before = script.previous_significant(script.index_of(left))
        if before is not None and before.text in (".", "::") and before.end == left.start:
            return True
    # Hashtable keys and enum members; a bare command argument (KEY=1) is none of these
    return _innermost_context(script, script.tokens[index].start) in _KEY_CONTEXTS


@rule(
    "PS404", "assignment-spacing", SECTION, "Surround assignment operators with spaces",
    severity=Severity.INFORMATION, fixable=True,
)
def check_assignment_spacing(script: Script, context: RuleContext) -> Iterator[Finding]:
    source = script.source
    spans = _bracket_spans(script)
    for index, token in enumerate(script.tokens):
        if token.kind is not TokenKind.OPERATOR or token.text not in ASSIGNMENT_OPERATORS:
            continue
        if not _is_assignment(script, index):
            continue
        # [Parameter(Mandatory=$true)] and other attribute arguments
        if any(start < token.start < end for start, end in spans):
            continue
        before = source[token.start - 1] if token.start else " "
        after = source[token.end] if token.end < len(source) else " "
        missing_before = before not in " \t\n"
        missing_after = after not in " \t\r\n"
        if not (missing_before or missing_after):
            continue
        replacement = (" " if missing_before else "") + token.text + (" " if missing_after else "")
        yield Finding(
            line=token.line,
            column=token.column,
            message=f"Surround '{token.text}' with spaces",
            fix=Fix(token.start, token.end, replacement),
        )
