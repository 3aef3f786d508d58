"""
Tests for psstyle Core Model Objects

These tests verify:
    - Severity parsing and ordering
    - Violation ordering and fixability
    - Report aggregation and the exit code contract
"""

import pytest

from psstyle.model import FileReport, Fix, LintReport, Severity, Violation


def make_violation(path="a.ps1", line=1, column=1, rule_id="PS101", severity=Severity.WARNING, fix=None):
    return Violation(rule_id, "rule", severity, "message", path, line, column, fix)


# ===== Severity =====

class TestSeverity:
    @pytest.mark.parametrize("text, expected", [
        ("error", Severity.ERROR),
        ("Warning", Severity.WARNING),
        ("  INFORMATION ", Severity.INFORMATION),
    ])
    def test_parse(self, text, expected):
        assert Severity.parse(text) is expected

    def test_parse_unknown(self):
        with pytest.raises(ValueError, match="unknown severity 'fatal'"):
            Severity.parse("fatal")

    def test_rank_orders_most_serious_first(self):
        ordered = sorted(Severity, key=lambda s: s.rank, reverse=True)
        assert ordered == [Severity.INFORMATION, Severity.WARNING, Severity.ERROR]


# ===== Violation =====

class TestViolation:
    def test_sort_key(self):
        violations = [
            make_violation("b.ps1", 1, 1),
            make_violation("a.ps1", 2, 1),
            make_violation("a.ps1", 1, 5, "PS601"),
            make_violation("a.ps1", 1, 5, "PS402"),
        ]
        ordered = sorted(violations, key=lambda v: v.sort_key)
        assert [(v.path, v.line, v.column, v.rule_id) for v in ordered] == [
            ("a.ps1", 1, 5, "PS402"),
            ("a.ps1", 1, 5, "PS601"),
            ("a.ps1", 2, 1, "PS101"),
            ("b.ps1", 1, 1, "PS101"),
        ]

    def test_fixable(self):
        assert not make_violation().fixable
        assert make_violation(fix=Fix(0, 1, "")).fixable

    def test_immutable(self):
        with pytest.raises(AttributeError):
            make_violation().line = 3


# ===== Reports =====

class TestLintReport:
    def test_empty_report(self):
        report = LintReport()
        assert report.files_checked == 0
        assert report.violations == []
        assert report.exit_code == 0
        assert not report.has_errors

    def test_aggregates_files(self):
        report = LintReport(files=[
            FileReport("a.ps1", [make_violation(), make_violation(severity=Severity.ERROR)]),
            FileReport("b.ps1"),
            FileReport("c.ps1", [make_violation(severity=Severity.INFORMATION)]),
        ])
        assert report.files_checked == 3
        assert len(report.violations) == 3
        assert report.count_by_severity() == {
            Severity.ERROR: 1,
            Severity.WARNING: 1,
            Severity.INFORMATION: 1,
        }
        assert report.has_errors
        assert report.exit_code == 1

    def test_information_only_still_fails(self):
        report = LintReport(files=[FileReport("a.ps1", [make_violation(severity=Severity.INFORMATION)])])
        assert not report.has_errors
        assert report.exit_code == 1
