"""
Tests for serialization of lint reports.

These tests ensure lossless JSON/YAML round-trip using the explicit
serialization functions in `psstyle.serialization`.
"""

import json

import yaml

from psstyle.engine import lint_source
from psstyle.model import Fix, LintReport, Severity, Violation
from psstyle.serialization import (
    report_from_dict,
    report_from_json,
    report_from_yaml,
    report_to_dict,
    report_to_json,
    report_to_yaml,
    violation_to_dict,
)


def build_sample_report() -> LintReport:
    return LintReport(files=[
        lint_source("gci;\n$a = \"x\"\n", "a.ps1"),
        lint_source("if ($a) {\n", "b.ps1"),
        lint_source("Get-ChildItem\n", "c.ps1"),
    ])


def test_violation_to_dict():
    violation = Violation("PS601", "no-alias", Severity.WARNING, "msg", "a.ps1", 1, 2, Fix(0, 3, "Get-ChildItem"))
    assert violation_to_dict(violation) == {
        "rule_id": "PS601",
        "rule_name": "no-alias",
        "severity": "warning",
        "message": "msg",
        "path": "a.ps1",
        "line": 1,
        "column": 2,
        "fix": {"start": 0, "end": 3, "replacement": "Get-ChildItem"},
    }


def test_report_summary():
    d = report_to_dict(build_sample_report())
    assert d["summary"] == {
        "files_checked": 3,
        "violations": 4,
        "by_severity": {"error": 1, "warning": 2, "information": 1},
    }
    assert [f["path"] for f in d["files"]] == ["a.ps1", "b.ps1", "c.ps1"]
    assert d["files"][1]["parse_error"] == "'{' is never closed"


def test_dict_round_trip():
    report = build_sample_report()
    assert report_from_dict(report_to_dict(report)) == report


def test_json_round_trip():
    report = build_sample_report()
    text = report_to_json(report)
    assert json.loads(text)["summary"]["violations"] == 4
    assert report_from_json(text) == report


def test_yaml_round_trip():
    report = build_sample_report()
    text = report_to_yaml(report)
    assert yaml.safe_load(text)["files"][0]["violations"][0]["rule_id"] == "PS601"
    assert report_from_yaml(text) == report
