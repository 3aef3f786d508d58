"""
Tests for the reporters.
"""

import json

import pytest
import yaml

from psstyle.engine import lint_source
from psstyle.model import LintReport, Severity, Violation
from psstyle.reporters import ReportFormat, get_reporter
from psstyle.reporters.github import format_annotation
from psstyle.reporters.text import format_summary, format_violation


def sample_report():
    return LintReport(files=[lint_source("gci\n", "build.ps1"), lint_source("Get-Item\n", "ok.ps1")])


class TestGetReporter:
    @pytest.mark.parametrize("name", [f.value for f in ReportFormat])
    def test_known_formats(self, name):
        assert callable(get_reporter(name))

    def test_names_are_case_insensitive(self):
        assert get_reporter("JSON") is get_reporter("json")

    def test_unknown_format(self):
        with pytest.raises(ValueError, match="unknown report format 'xml'"):
            get_reporter("xml")


class TestTextReporter:
    def test_violation_line(self):
        violation = lint_source("gci\n", "build.ps1").violations[0]
        assert format_violation(violation) == (
            "build.ps1:1:1: PS601 [warning] 'gci' is an alias of 'Get-ChildItem'; "
            "use the full command name (no-alias)"
        )

    def test_report(self):
        output = get_reporter("text")(sample_report())
        lines = output.splitlines()
        assert lines[0].startswith("build.ps1:1:1: PS601")
        assert lines[-1] == (
            "2 files checked, 1 violation (0 error(s), 1 warning(s), 0 information); 1 fixable with --fix"
        )

    def test_clean_summary(self):
        report = LintReport(files=[lint_source("Get-Item\n", "ok.ps1")])
        assert format_summary(report) == "1 file checked, no violations"
        assert get_reporter("text")(report) == "1 file checked, no violations\n"


class TestStructuredReporters:
    def test_json(self):
        data = json.loads(get_reporter("json")(sample_report()))
        assert data["summary"]["violations"] == 1
        assert data["files"][0]["violations"][0]["rule_name"] == "no-alias"

    def test_yaml(self):
        data = yaml.safe_load(get_reporter("yaml")(sample_report()))
        assert data["summary"]["files_checked"] == 2


class TestGithubReporter:
    def test_annotation(self):
        output = get_reporter("github")(sample_report())
        assert output == (
            "::warning file=build.ps1,line=1,col=1,title=PS601 no-alias::"
            "'gci' is an alias of 'Get-ChildItem'; use the full command name\n"
        )

    def test_levels_and_escaping(self):
        violation = Violation("PS000", "parse-error", Severity.ERROR, "50% done\nnext", "a,b:c.ps1", 2, 3)
        assert format_annotation(violation) == (
            "::error file=a%2Cb%3Ac.ps1,line=2,col=3,title=PS000 parse-error::50%25 done%0Anext"
        )

    def test_information_is_a_notice(self):
        violation = Violation("PS401", "single-quotes", Severity.INFORMATION, "m", "a.ps1", 1, 1)
        assert format_annotation(violation).startswith("::notice ")

    def test_clean_report_is_empty(self):
        assert get_reporter("github")(LintReport()) == ""
