"""
Human readable report.

One line per violation, compiler style, so editors can jump to it:

    build.ps1:12:5: PS601 [warning] 'gci' is an alias for 'Get-ChildItem' (no-alias)

followed by a one line summary.
"""

from typing import List

from psstyle.model import LintReport, Severity, Violation


def format_violation(v: Violation) -> str:
    return f"{v.path}:{v.line}:{v.column}: {v.rule_id} [{v.severity.value}] {v.message} ({v.rule_name})"


def _plural(count: int, word: str) -> str:
    return f"{count} {word}" if count == 1 else f"{count} {word}s"


def format_summary(report: LintReport) -> str:
    files = _plural(report.files_checked, "file")
    violations = report.violations
    if not violations:
        return f"{files} checked, no violations"

    counts = report.count_by_severity()
    parts = [
        f"{counts[Severity.ERROR]} error(s)",
        f"{counts[Severity.WARNING]} warning(s)",
        f"{counts[Severity.INFORMATION]} information",
    ]
    summary = f"{files} checked, {_plural(len(violations), 'violation')} ({', '.join(parts)})"
    fixable = sum(1 for v in violations if v.fixable)
    if fixable:
        summary += f"; {fixable} fixable with --fix"
    return summary


def render_text(report: LintReport) -> str:
    lines: List[str] = [format_violation(v) for v in report.violations]
    lines.append(format_summary(report))
    return "\n".join(lines) + "\n"
