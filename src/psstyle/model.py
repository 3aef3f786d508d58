"""
Core Report Model Objects

Defines the data structures produced by a lint run:
    - Severity (how serious a finding is)
    - Fix (a text edit that resolves a finding)
    - Finding (what a rule yields)
    - Violation (a finding bound to a rule and a file)
    - FileReport / LintReport (results per file and per run)

ARCHITECTURAL RULE:
    These objects:
        - Know nothing about tokens, rules or output formats
        - Are created once per run and never mutated after reporting
        - Are fully serializable (see psstyle.serialization)
"""

from collections import Counter
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional


class Severity(Enum):
    """
    Severity of a violation.

    Ordered from most to least serious. The names follow the
    diagnostic levels PowerShell authors already know from
    script analyzers.
    """

    ERROR = "error"
    WARNING = "warning"
    INFORMATION = "information"

    @property
    def rank(self) -> int:
        return _SEVERITY_RANK[self]

    @classmethod
    def parse(cls, value: str) -> "Severity":
        """Parse a severity name, case-insensitively. Raises ValueError."""
        try:
            return cls(value.strip().lower())
        except ValueError:
            names = ", ".join(s.value for s in cls)
            raise ValueError(f"unknown severity '{value}' (expected one of: {names})") from None


_SEVERITY_RANK = {Severity.ERROR: 0, Severity.WARNING: 1, Severity.INFORMATION: 2}


@dataclass(frozen=True)
class Fix:
    """
    A single text replacement.

    Properties:
        start: Absolute offset of the first replaced character
        end: Absolute offset after the last replaced character
        replacement: Text inserted in place of source[start:end]
    """

    start: int
    end: int
    replacement: str


@dataclass(frozen=True)
class Finding:
    """
    What a rule reports: a location, a message and an optional fix.

    Rules yield findings; the engine turns them into Violations by
    attaching the rule identity, the severity and the file path.
    """

    line: int
    column: int
    message: str
    fix: Optional[Fix] = None


@dataclass(frozen=True)
class Violation:
    """
    A style violation found in a script.

    Properties:
        rule_id: Stable rule identifier (e.g. "PS101")
        rule_name: Human readable rule name (e.g. "indent-spaces")
        severity: Severity after configuration overrides
        message: Description of the problem at this location
        path: Script path as given on the command line
        line / column: 1-based location
        fix: Optional automatic fix
    """

    rule_id: str
    rule_name: str
    severity: Severity
    message: str
    path: str
    line: int
    column: int
    fix: Optional[Fix] = None

    @property
    def sort_key(self):
        return (self.path, self.line, self.column, self.rule_id)

    @property
    def fixable(self) -> bool:
        return self.fix is not None


@dataclass
class FileReport:
    """Violations found in one file."""

    path: str
    violations: List[Violation] = field(default_factory=list)
    parse_error: Optional[str] = None


@dataclass
class LintReport:
    """
    Result of one lint run over any number of files.

    The exit code contract:
        0 - no violations
        1 - at least one violation was reported
    """

    files: List[FileReport] = field(default_factory=list)

    @property
    def violations(self) -> List[Violation]:
        return [v for report in self.files for v in report.violations]

    @property
    def files_checked(self) -> int:
        return len(self.files)

    def count_by_severity(self) -> Dict[Severity, int]:
        counts = Counter(v.severity for v in self.violations)
        return {severity: counts.get(severity, 0) for severity in Severity}

    @property
    def has_errors(self) -> bool:
        return any(v.severity is Severity.ERROR for v in self.violations)

    @property
    def exit_code(self) -> int:
        return 1 if self.violations else 0
