"""Machine readable reports."""

from psstyle.model import LintReport
from psstyle.serialization import report_to_json, report_to_yaml


def render_json(report: LintReport) -> str:
    return report_to_json(report) + "\n"


def render_yaml(report: LintReport) -> str:
    return report_to_yaml(report)
