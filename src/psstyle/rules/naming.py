"""
Name Style rules.

    PS301 function-name    Verb-Noun, PascalCase
    PS302 approved-verb    verb from Get-Verb
    PS303 parameter-name   PascalCase parameters
    PS304 keyword-case     lower case language keywords
    PS305 operator-case    lower case dash operators (-eq, -match)
"""

import re
from typing import Iterator, List

from psstyle.model import Finding, Fix
from psstyle.parser import ParameterDeclaration, Script
from psstyle.rules.base import RuleContext, rule
from psstyle.tokenizer import TokenKind
from psstyle.vocabulary import APPROVED_VERBS, split_command_name

SECTION = "Name Style"

_FUNCTION_NAME_RE = re.compile(r"^[A-Z][A-Za-z0-9]*-[A-Z][A-Za-z0-9]*$")
_PASCAL_CASE_RE = re.compile(r"^[A-Z][A-Za-z0-9]*$")
_IDENTIFIER_RE = re.compile(r"^\w+$")


@rule("PS301", "function-name", SECTION, "Name functions Verb-Noun in PascalCase")
def check_function_name(script: Script, context: RuleContext) -> Iterator[Finding]:
    for function in script.functions:
        if _FUNCTION_NAME_RE.match(function.name):
            continue
        yield Finding(
            line=function.name_token.line,
            column=function.name_token.column,
            message=f"Function name '{function.name}' should be Verb-Noun in PascalCase",
        )


@rule("PS302", "approved-verb", SECTION, "Use an approved verb in function names")
def check_approved_verb(script: Script, context: RuleContext) -> Iterator[Finding]:
    approved = {verb.lower() for verb in APPROVED_VERBS | context.extra_verbs}
    for function in script.functions:
        verb, noun = split_command_name(function.name)
        if not noun or verb.lower() in approved:
            continue
        yield Finding(
            line=function.name_token.line,
            column=function.name_token.column,
            message=f"'{verb}' is not an approved verb (see Get-Verb)",
        )


def _declared_parameters(script: Script) -> List[ParameterDeclaration]:
    parameters: List[ParameterDeclaration] = []
    if script.param_block is not None:
        parameters.extend(script.param_block.parameters)
    for function in script.functions:
        parameters.extend(function.inline_parameters)
        if function.param_block is not None:
            parameters.extend(function.param_block.parameters)
    return parameters


@rule("PS303", "parameter-name", SECTION, "Name parameters in PascalCase")
def check_parameter_name(script: Script, context: RuleContext) -> Iterator[Finding]:
    for parameter in _declared_parameters(script):
        if not _IDENTIFIER_RE.match(parameter.name) or _PASCAL_CASE_RE.match(parameter.name):
            continue
        yield Finding(
            line=parameter.token.line,
            column=parameter.token.column,
            message=f"Parameter '${parameter.name}' should be PascalCase",
        )


@rule("PS304", "keyword-case", SECTION, "Write language keywords in lower case", fixable=True)
def check_keyword_case(script: Script, context: RuleContext) -> Iterator[Finding]:
    for token in script.tokens:
        if token.kind is TokenKind.KEYWORD and token.text != token.text.lower():
            yield Finding(
                line=token.line,
                column=token.column,
                message=f"Keyword '{token.text}' should be lower case",
                fix=Fix(token.start, token.end, token.text.lower()),
            )


@rule("PS305", "operator-case", SECTION, "Write operators such as -eq and -match in lower case", fixable=True)
def check_operator_case(script: Script, context: RuleContext) -> Iterator[Finding]:
    for token in script.tokens:
        if token.kind is not TokenKind.OPERATOR or not token.text.startswith("-"):
            continue
        if token.text != token.text.lower():
            yield Finding(
                line=token.line,
                column=token.column,
                message=f"Operator '{token.text}' should be lower case",
                fix=Fix(token.start, token.end, token.text.lower()),
            )
