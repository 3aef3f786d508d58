"""
Definition Style rules.

    PS501 cmdlet-binding   param() blocks come with [CmdletBinding()]
    PS502 param-block      declare parameters in param(), not after the name
"""

from typing import Iterator

from psstyle.model import Finding
from psstyle.parser import Script
from psstyle.rules.base import RuleContext, rule

SECTION = "Definition Style"


@rule("PS501", "cmdlet-binding", SECTION, "Make functions with a param() block advanced with [CmdletBinding()]")
def check_cmdlet_binding(script: Script, context: RuleContext) -> Iterator[Finding]:
    for function in script.functions:
        if function.param_block is None or function.has_attribute("CmdletBinding"):
            continue
        yield Finding(
            line=function.param_block.keyword.line,
            column=function.param_block.keyword.column,
            message=f"Function '{function.name}' declares parameters without [CmdletBinding()]",
        )


@rule("PS502", "param-block", SECTION, "Declare parameters in a param() block")
def check_param_block(script: Script, context: RuleContext) -> Iterator[Finding]:
    for function in script.functions:
        if not function.inline_parameters:
            continue
        first = function.inline_parameters[0].token
        yield Finding(
            line=first.line,
            column=first.column,
            message=f"Function '{function.name}' declares parameters inline; use a param() block",
        )
