"""
Call Style rules.

    PS601 no-alias           Get-ChildItem, not gci / ls / dir
    PS602 avoid-write-host   (disabled by default)
"""

from typing import Iterator

from psstyle.model import Finding, Fix, Severity
from psstyle.parser import Script
from psstyle.rules.base import RuleContext, rule
from psstyle.vocabulary import resolve_alias

SECTION = "Call Style"


@rule("PS601", "no-alias", SECTION, "Call commands by their full name, not an alias", fixable=True)
def check_no_alias(script: Script, context: RuleContext) -> Iterator[Finding]:
    # A function defined in the script shadows the alias
    defined = {function.name.lower() for function in script.functions}
    for call in script.commands:
        command = resolve_alias(call.name)
        if not command or call.name.lower() in defined:
            continue
        yield Finding(
            line=call.token.line,
            column=call.token.column,
            message=f"'{call.name}' is an alias of '{command}'; use the full command name",
            fix=Fix(call.token.start, call.token.end, command),
        )


@rule(
    "PS602", "avoid-write-host", SECTION, "Prefer Write-Output, Write-Verbose or Write-Information over Write-Host",
    severity=Severity.INFORMATION, enabled=False,
)
def check_avoid_write_host(script: Script, context: RuleContext) -> Iterator[Finding]:
    for call in script.commands:
        if call.name.lower() == "write-host":
            yield Finding(
                line=call.token.line,
                column=call.token.column,
                message="Write-Host output cannot be captured or redirected; "
                        "use Write-Output, Write-Verbose or Write-Information",
            )
