"""Reporters: render a LintReport as text, JSON, YAML or GitHub annotations."""

from enum import Enum
from typing import Callable, Dict

from psstyle.model import LintReport

from .github import render_github
from .structured import render_json, render_yaml
from .text import render_text

Reporter = Callable[[LintReport], str]


class ReportFormat(Enum):
    """Output formats accepted by --format."""
    TEXT = "text"        # One line per violation plus a summary
    JSON = "json"        # serialization.report_to_dict as JSON
    YAML = "yaml"        # the same dict as YAML
    GITHUB = "github"    # GitHub Actions workflow commands


_REPORTERS: Dict[ReportFormat, Reporter] = {
    ReportFormat.TEXT: render_text,
    ReportFormat.JSON: render_json,
    ReportFormat.YAML: render_yaml,
    ReportFormat.GITHUB: render_github,
}


def get_reporter(name: str) -> Reporter:
    """Return the reporter for a format name. Raises ValueError for unknown names."""
    try:
        fmt = ReportFormat(name.strip().lower())
    except ValueError:
        names = ", ".join(f.value for f in ReportFormat)
        raise ValueError(f"unknown report format '{name}' (expected one of: {names})") from None
    return _REPORTERS[fmt]


__all__ = ["ReportFormat", "Reporter", "get_reporter", "render_github", "render_json", "render_text", "render_yaml"]
