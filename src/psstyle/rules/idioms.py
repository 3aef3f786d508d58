"""
Idioms.

    PS801 null-comparison   $null -eq $value, never $value -eq $null

With a collection on the left, -eq filters the collection instead of
testing it, so $null belongs on the left side.
"""

from typing import Iterator, Optional

from psstyle.model import Finding, Fix
from psstyle.parser import Script
from psstyle.rules.base import RuleContext, rule
from psstyle.tokenizer import ASSIGNMENT_OPERATORS, Token, TokenKind

SECTION = "Idioms"

_EQUALITY_OPERATORS = ("-eq", "-ne", "-ceq", "-cne", "-ieq", "-ine")
_OPERAND_BOUNDARIES = (
    TokenKind.LPAREN, TokenKind.LBRACE, TokenKind.SEMICOLON, TokenKind.COMMA,
    TokenKind.PIPE, TokenKind.NEWLINE,
)


def _is_null(token: Optional[Token]) -> bool:
    return token is not None and token.kind is TokenKind.VARIABLE and token.text.lower() == "$null"


def _starts_operand(token: Optional[Token]) -> bool:
    """True if an expression operand can start right after ``token``."""
    if token is None or token.kind in _OPERAND_BOUNDARIES:
        return True
    if token.kind is TokenKind.KEYWORD:
        return True
    return token.kind is TokenKind.OPERATOR and (
        token.text in ASSIGNMENT_OPERATORS or token.text.lower() in ("-and", "-or", "-xor")
    )


@rule("PS801", "null-comparison", SECTION, "Put $null on the left side of equality comparisons", fixable=True)
def check_null_comparison(script: Script, context: RuleContext) -> Iterator[Finding]:
    tokens = script.tokens
    for index, token in enumerate(tokens):
        if not token.is_operator(*_EQUALITY_OPERATORS):
            continue
        right = script.next_significant(index)
        left = script.previous_significant(index)
        if not _is_null(right) or left is None or _is_null(left):
            continue

        fix = None
        left_index = script.index_of(left)
        before = tokens[left_index - 1] if left_index else None
        if left.kind is TokenKind.VARIABLE and _starts_operand(before):
            middle = script.source[left.end:right.start]
            fix = Fix(left.start, right.end, right.text + middle + left.text)
        yield Finding(
            line=right.line,
            column=right.column,
            message=f"$null should be on the left side of '{token.text}'",
            fix=fix,
        )
