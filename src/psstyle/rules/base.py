"""
Rule registry.

A rule is a plain function ``check(script, context) -> Iterable[Finding]``
registered with the ``@rule(...)`` decorator. Rules:
    - never mutate the Script
    - never raise for style problems (they yield Findings)
    - do not depend on each other or on the order they run in
"""

from dataclasses import dataclass
from typing import Callable, Dict, FrozenSet, Iterable, List

from psstyle.model import Finding, Severity
from psstyle.parser import Script


@dataclass(frozen=True)
class RuleContext:
    """Settings a rule may consult."""

    indent_size: int = 4
    max_line_length: int = 115
    max_blank_lines: int = 2
    extra_verbs: FrozenSet[str] = frozenset()


CheckFunction = Callable[[Script, RuleContext], Iterable[Finding]]


@dataclass(frozen=True)
class Rule:
    """
    A registered style rule.

    Properties:
        id: Stable identifier, PS<section><number> (e.g. "PS201")
        name: Kebab-case name usable anywhere an id is accepted
        section: Style guide section the rule enforces
        description: One line summary for --list-rules
        severity: Default severity
        enabled: Whether the rule runs without being selected explicitly
        fixable: Whether the rule's findings carry fixes
        check: The rule function
    """

    id: str
    name: str
    section: str
    description: str
    severity: Severity
    enabled: bool
    fixable: bool
    check: CheckFunction

    def matches(self, selector: str) -> bool:
        """True if ``selector`` is this rule's id, an id prefix, or its name."""
        selector = selector.strip()
        if not selector:
            return False
        return self.id.startswith(selector.upper()) or self.name == selector.lower()


REGISTRY: Dict[str, Rule] = {}


def rule(
    id: str,
    name: str,
    section: str,
    description: str,
    severity: Severity = Severity.WARNING,
    enabled: bool = True,
    fixable: bool = False,
) -> Callable[[CheckFunction], CheckFunction]:
    """Register the decorated function as a rule."""

    def decorator(check: CheckFunction) -> CheckFunction:
        if id in REGISTRY:
            raise ValueError(f"duplicate rule id {id}")
        REGISTRY[id] = Rule(id, name, section, description, severity, enabled, fixable, check)
        return check

    return decorator


def all_rules() -> List[Rule]:
    return [REGISTRY[key] for key in sorted(REGISTRY)]


def find_rule(key: str):
    """Look a rule up by exact id or name; None if unknown."""
    key = key.strip()
    if key.upper() in REGISTRY:
        return REGISTRY[key.upper()]
    for candidate in REGISTRY.values():
        if candidate.name == key.lower():
            return candidate
    return None
