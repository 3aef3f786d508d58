"""
GitHub Actions workflow commands.

Each violation becomes an annotation on the pull request diff:

    ::warning file=build.ps1,line=12,col=5,title=PS601 no-alias::'gci' is an alias ...
"""

from psstyle.model import LintReport, Severity, Violation

_LEVELS = {
    Severity.ERROR: "error",
    Severity.WARNING: "warning",
    Severity.INFORMATION: "notice",
}


def _escape_data(value: str) -> str:
    return value.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


def _escape_property(value: str) -> str:
    return _escape_data(value).replace(":", "%3A").replace(",", "%2C")


def format_annotation(v: Violation) -> str:
    properties = ",".join([
        f"file={_escape_property(v.path)}",
        f"line={v.line}",
        f"col={v.column}",
        f"title={_escape_property(f'{v.rule_id} {v.rule_name}')}",
    ])
    return f"::{_LEVELS[v.severity]} {properties}::{_escape_data(v.message)}"


def render_github(report: LintReport) -> str:
    return "".join(format_annotation(v) + "\n" for v in report.violations)
