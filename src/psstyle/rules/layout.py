"""
Indent Style rules.

    PS101 indent-spaces        tabs in indentation
    PS102 indent-width         indentation not a multiple of the indent size
    PS103 trailing-whitespace
    PS104 line-length
    PS105 blank-lines          too many consecutive blank lines
    PS106 final-newline

These rules work on physical lines. Lines inside multi-line strings are
never touched: their whitespace is data, not layout.
"""

from typing import Iterator, Set

from psstyle.model import Finding, Fix, Severity
from psstyle.parser import PairContext, Script
from psstyle.rules.base import RuleContext, rule
from psstyle.tokenizer import TokenKind

SECTION = "Indent Style"

_NO_CONTINUATION_OPERATORS = ("++", "--")


def _indentation(line: str) -> str:
    return line[: len(line) - len(line.lstrip(" \t"))]


@rule("PS101", "indent-spaces", SECTION, "Indent with spaces, not tabs", fixable=True)
def check_indent_spaces(script: Script, context: RuleContext) -> Iterator[Finding]:
    for number, line in script.numbered_lines():
        if number in script.string_lines:
            continue
        leading = _indentation(line)
        if "\t" not in leading:
            continue
        start = script.line_offset(number)
        yield Finding(
            line=number,
            column=leading.index("\t") + 1,
            message="Indentation contains a tab; indent with spaces",
            fix=Fix(start, start + len(leading), leading.replace("\t", " " * context.indent_size)),
        )


def _continuation_lines(script: Script) -> Set[int]:
    """Lines whose indentation belongs to the statement started above them."""
    lines: Set[int] = set()
    for pair in script.brace_pairs:
        if pair.context in (PairContext.PAREN, PairContext.BRACKET) and pair.is_multiline:
            lines.update(range(pair.open.line + 1, pair.close.line))
    for index, token in enumerate(script.tokens):
        if token.kind is TokenKind.CONTINUATION:
            lines.add(token.line + 1)
        elif token.kind in (TokenKind.PIPE, TokenKind.COMMA) or (
            token.kind is TokenKind.OPERATOR and token.text not in _NO_CONTINUATION_OPERATORS
        ):
            if script.ends_line(index):
                lines.add(token.end_line + 1)
    return lines


@rule("PS102", "indent-width", SECTION, "Indent in multiples of the indent size (4 spaces)")
def check_indent_width(script: Script, context: RuleContext) -> Iterator[Finding]:
    exempt = _continuation_lines(script) | script.string_lines | script.comment_lines
    for number, line in script.numbered_lines():
        if number in exempt or not line.strip():
            continue
        leading = _indentation(line)
        if "\t" in leading:
            continue
        if len(leading) % context.indent_size:
            yield Finding(
                line=number,
                column=1,
                message=(
                    f"Indentation of {len(leading)} spaces is not a multiple of "
                    f"{context.indent_size}"
                ),
            )


@rule("PS103", "trailing-whitespace", SECTION, "No whitespace at the end of a line", fixable=True)
def check_trailing_whitespace(script: Script, context: RuleContext) -> Iterator[Finding]:
    for number, line in script.numbered_lines():
        # The line ends inside a string, or is a here-string body line
        if number in script.string_lines or number + 1 in script.string_lines:
            continue
        stripped = line.rstrip(" \t")
        if len(stripped) == len(line):
            continue
        start = script.line_offset(number)
        yield Finding(
            line=number,
            column=len(stripped) + 1,
            message="Trailing whitespace",
            fix=Fix(start + len(stripped), start + len(line), ""),
        )


@rule("PS104", "line-length", SECTION, "Keep lines within the maximum length (115)")
def check_line_length(script: Script, context: RuleContext) -> Iterator[Finding]:
    limit = context.max_line_length
    for number, line in script.numbered_lines():
        if number in script.string_lines:
            continue
        if len(line) > limit:
            yield Finding(
                line=number,
                column=limit + 1,
                message=f"Line is {len(line)} characters long (maximum {limit})",
            )


@rule(
    "PS105", "blank-lines", SECTION, "No more than two consecutive blank lines",
    severity=Severity.INFORMATION, fixable=True,
)
def check_blank_lines(script: Script, context: RuleContext) -> Iterator[Finding]:
    limit = context.max_blank_lines
    run_start = None
    numbered = list(script.numbered_lines())
    for number, line in numbered + [(len(numbered) + 1, "<end>")]:
        if not line.strip() and number not in script.string_lines:
            if run_start is None:
                run_start = number
            continue
        if run_start is not None and number - run_start > limit:
            first_extra = run_start + limit
            yield Finding(
                line=first_extra,
                column=1,
                message=f"{number - run_start} consecutive blank lines (maximum {limit})",
                fix=Fix(
                    script.line_offset(first_extra),
                    _offset_of_line_or_end(script, number),
                    "",
                ),
            )
        run_start = None


def _offset_of_line_or_end(script: Script, number: int) -> int:
    if number - 1 < len(script.line_starts):
        return script.line_offset(number)
    return len(script.source)


@rule(
    "PS106", "final-newline", SECTION, "End the file with a newline",
    severity=Severity.INFORMATION, fixable=True,
)
def check_final_newline(script: Script, context: RuleContext) -> Iterator[Finding]:
    if not script.source or script.source.endswith("\n"):
        return
    last = len(script.lines)
    yield Finding(
        line=last,
        column=len(script.lines[-1]) + 1,
        message="File does not end with a newline",
        fix=Fix(len(script.source), len(script.source), script.newline),
    )
