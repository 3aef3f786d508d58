"""
Rule Engine: runs the rule catalogue over scripts.

For each file:
    1. Parse (a tokenize/parse failure becomes a single PS000 violation)
    2. Run every enabled rule once over the Script
    3. Bind findings to rule id, severity and path
    4. Drop findings silenced by suppression comments
    5. Sort by location

Files are processed one at a time, synchronously. Nothing is shared
between files except the immutable Config and the rule list.

Suppression comments:
    $x = gci  # psstyle: disable=PS601          this line, these rules
    $x = gci  # psstyle: disable                this line, all rules
    # psstyle: disable-file=PS701,line-length   whole file, these rules
    # psstyle: disable-file                     whole file, all rules

Anything after the rule list is a free-form reason:
    Write-Host $x  # psstyle: disable=PS602 interactive prompt
"""

import fnmatch
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Optional, Sequence

from psstyle.config import Config, RuleSettings
from psstyle.errors import ConfigError, ParseError, TokenizeError
from psstyle.logging import get_logger
from psstyle.model import FileReport, LintReport, Severity, Violation
from psstyle.parser import Script, parse
from psstyle.rules import Rule, RuleContext, all_rules, find_rule
from psstyle.tokenizer import TokenKind

logger = get_logger(__name__)

SCRIPT_SUFFIXES = (".ps1", ".psm1")
PARSE_ERROR_ID = "PS000"
PARSE_ERROR_NAME = "parse-error"

_SUPPRESSION_RE = re.compile(
    r"#\s*psstyle:\s*(disable-file|disable)\b(?:\s*=\s*([\w\-]+(?:\s*,\s*[\w\-]+)*))?",
    re.IGNORECASE,
)


# =============================================================================
# RULE SELECTION
# =============================================================================

@dataclass(frozen=True)
class ActiveRule:
    """A rule selected for a run, with its effective severity."""

    rule: Rule
    severity: Severity


def _rule_settings(config: Config) -> Dict[str, RuleSettings]:
    """Configured settings keyed by rule id; keys may be ids or names in any case."""
    settings: Dict[str, RuleSettings] = {}
    for key, value in config.rules.items():
        found = find_rule(key)
        if found is None:
            raise ConfigError(f"unknown rule '{key}' in configuration")
        if found.id in settings:
            raise ConfigError(f"rule {found.id} is configured more than once")
        settings[found.id] = value
    return settings


def select_rules(config: Config) -> List[ActiveRule]:
    """
    Resolve which rules run and at what severity.

    Precedence: --ignore beats --select, which beats the configuration
    file's `enabled`, which beats the rule default.

    Raises:
        ConfigError: If the configuration or a selector names an unknown rule
    """
    rules = all_rules()
    configured = _rule_settings(config)
    for selector in (*config.select, *config.ignore):
        if not any(r.matches(selector) for r in rules):
            raise ConfigError(f"'{selector}' does not match any rule")

    active: List[ActiveRule] = []
    for candidate in rules:
        settings = configured.get(candidate.id, RuleSettings())
        enabled = candidate.enabled if settings.enabled is None else settings.enabled
        if config.select:
            enabled = any(candidate.matches(s) for s in config.select)
        if any(candidate.matches(s) for s in config.ignore):
            enabled = False
        if enabled:
            active.append(ActiveRule(candidate, settings.severity or candidate.severity))
    return active


def rule_context(config: Config) -> RuleContext:
    return RuleContext(
        indent_size=config.indent_size,
        max_line_length=config.max_line_length,
        max_blank_lines=config.max_blank_lines,
        extra_verbs=frozenset(config.extra_verbs),
    )


# =============================================================================
# SUPPRESSIONS
# =============================================================================

@dataclass
class Suppressions:
    """
    Rules silenced by comments in one script.

    `lines` maps a line number to the selectors silenced there;
    an empty list means every rule. `whole_file` is set by a bare
    disable-file comment.
    """

    lines: Dict[int, List[str]] = field(default_factory=dict)
    file: List[str] = field(default_factory=list)
    whole_file: bool = False

    def suppresses(self, rule: Rule, line: int) -> bool:
        if self.whole_file or any(rule.matches(s) for s in self.file):
            return True
        if line not in self.lines:
            return False
        selectors = self.lines[line]
        return not selectors or any(rule.matches(s) for s in selectors)


def find_suppressions(script: Script) -> Suppressions:
    suppressions = Suppressions()
    for token in script.tokens:
        if token.kind is not TokenKind.COMMENT:
            continue
        match = _SUPPRESSION_RE.search(token.text)
        if match is None:
            continue
        selectors = [s.strip() for s in (match.group(2) or "").split(",") if s.strip()]
        if match.group(1).lower() == "disable-file":
            suppressions.file.extend(selectors)
            suppressions.whole_file = suppressions.whole_file or not selectors
        else:
            suppressions.lines.setdefault(token.line, []).extend(selectors)
            if not selectors:
                suppressions.lines[token.line] = []
    return suppressions


# =============================================================================
# LINTING
# =============================================================================

def lint_script(script: Script, config: Config, rules: Optional[Sequence[ActiveRule]] = None) -> FileReport:
    """Run the active rules over an already parsed script."""
    if rules is None:
        rules = select_rules(config)
    context = rule_context(config)
    suppressions = find_suppressions(script)

    violations: List[Violation] = []
    for active in rules:
        for finding in active.rule.check(script, context):
            if suppressions.suppresses(active.rule, finding.line):
                continue
            violations.append(Violation(
                rule_id=active.rule.id,
                rule_name=active.rule.name,
                severity=active.severity,
                message=finding.message,
                path=script.path,
                line=finding.line,
                column=finding.column,
                fix=finding.fix if active.rule.fixable else None,
            ))
    violations.sort(key=lambda v: v.sort_key)
    return FileReport(path=script.path, violations=violations)


def _parse_error_report(path: str, message: str, line: int = 1, column: int = 1) -> FileReport:
    violation = Violation(
        rule_id=PARSE_ERROR_ID,
        rule_name=PARSE_ERROR_NAME,
        severity=Severity.ERROR,
        message=message,
        path=path,
        line=line,
        column=column,
    )
    return FileReport(path=path, violations=[violation], parse_error=message)


def lint_source(
    source: str,
    path: str = "<string>",
    config: Optional[Config] = None,
    rules: Optional[Sequence[ActiveRule]] = None,
) -> FileReport:
    """
    Lint script text.

    Returns:
        FileReport; a script that cannot be parsed yields a report
        holding a single PS000 parse-error violation
    """
    config = config or Config()
    try:
        script = parse(source, path=path)
    except (TokenizeError, ParseError) as e:
        logger.warning("%s: cannot parse: %s", path, e, extra={"path": path})
        return _parse_error_report(path, e.message, e.line, e.column)
    return lint_script(script, config, rules)


def read_script(path: str) -> str:
    """Read a script as UTF-8 (BOM tolerated), keeping its line endings."""
    with open(path, "r", encoding="utf-8-sig", newline="") as f:
        return f.read()


def lint_file(path: str, config: Optional[Config] = None,
              rules: Optional[Sequence[ActiveRule]] = None) -> FileReport:
    logger.debug("linting %s", path, extra={"path": path})
    try:
        source = read_script(path)
    except UnicodeDecodeError as e:
        logger.warning("%s: not valid UTF-8", path, extra={"path": path})
        return _parse_error_report(path, f"file is not valid UTF-8: {e.reason}")
    return lint_source(source, path=path, config=config, rules=rules)


def is_excluded(path: str, patterns: Iterable[str]) -> bool:
    """
    True if a glob pattern matches the path or any trailing part of it,
    so "build/*" excludes both build/a.ps1 and /src/project/build/a.ps1.
    """
    parts = Path(os.path.normpath(path)).as_posix().split("/")
    tails = ["/".join(parts[i:]) for i in range(len(parts))]
    return any(fnmatch.fnmatch(tail, pattern) for pattern in patterns for tail in tails)


def iter_script_files(paths: Iterable[str], exclude: Iterable[str] = ()) -> Iterator[str]:
    """
    Expand paths into script files.

    Directories are searched recursively for *.ps1 and *.psm1 files in
    sorted order; files given explicitly are always included unless
    excluded.

    Raises:
        FileNotFoundError: If a path does not exist
    """
    exclude = tuple(exclude)
    for root in paths:
        base = Path(root)
        if base.is_dir():
            for candidate in sorted(base.rglob("*")):
                if not candidate.is_file() or candidate.suffix.lower() not in SCRIPT_SUFFIXES:
                    continue
                if is_excluded(str(candidate), exclude):
                    logger.debug("excluded %s", candidate)
                    continue
                yield str(candidate)
        elif base.is_file():
            if not is_excluded(root, exclude):
                yield root
        else:
            raise FileNotFoundError(f"no such file or directory: {root}")


def lint_paths(paths: Iterable[str], config: Optional[Config] = None) -> LintReport:
    """Lint every script under ``paths``, one file at a time."""
    config = config or Config()
    rules = select_rules(config)
    report = LintReport()
    for path in iter_script_files(paths, config.exclude):
        report.files.append(lint_file(path, config, rules))
    logger.info("checked %d file(s), %d violation(s)", report.files_checked, len(report.violations))
    return report
