"""Documentation Style rules."""

from typing import Iterator

from psstyle.model import Finding, Severity
from psstyle.parser import Script
from psstyle.rules.base import RuleContext, rule

SECTION = "Documentation Style"


@rule(
    "PS701", "comment-help", SECTION, "Document functions with comment-based help",
    severity=Severity.INFORMATION,
)
def check_comment_help(script: Script, context: RuleContext) -> Iterator[Finding]:
    for function in script.functions:
        if function.body is None or function.has_help:
            continue
        yield Finding(
            line=function.keyword.line,
            column=function.keyword.column,
            message=f"Function '{function.name}' has no comment-based help (.SYNOPSIS)",
        )
