"""
Rule catalogue.

Importing this package registers every rule. Rules are grouped by the
style guide section they enforce; ids encode the section:

    PS1xx  Indent Style          PS5xx  Definition Style
    PS2xx  Brace Style           PS6xx  Call Style
    PS3xx  Name Style            PS7xx  Documentation Style
    PS4xx  Punctuation Style     PS8xx  Idioms
"""

from psstyle.rules import braces, calls, definitions, documentation, idioms, layout, naming, punctuation
from psstyle.rules.base import REGISTRY, Rule, RuleContext, all_rules, find_rule, rule

__all__ = ["REGISTRY", "Rule", "RuleContext", "all_rules", "find_rule", "rule"]
