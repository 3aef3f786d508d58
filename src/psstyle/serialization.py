"""
Serialization helpers for lint results (Violation, FileReport, LintReport).

Provides lossless JSON/YAML round-trip via intermediate dict representation.
This module intentionally keeps serialization structure stable and explicit:
the json and yaml reporters emit exactly these dicts.
"""
from __future__ import annotations

import json
from typing import Any, Dict

import yaml

from psstyle.model import FileReport, Fix, LintReport, Severity, Violation


def fix_to_dict(f: Fix | None) -> Dict[str, Any] | None:
    if f is None:
        return None
    return {"start": f.start, "end": f.end, "replacement": f.replacement}


def fix_from_dict(d: Dict[str, Any] | None) -> Fix | None:
    if d is None:
        return None
    return Fix(start=d["start"], end=d["end"], replacement=d["replacement"])


def violation_to_dict(v: Violation) -> Dict[str, Any]:
    return {
        "rule_id": v.rule_id,
        "rule_name": v.rule_name,
        "severity": v.severity.value,
        "message": v.message,
        "path": v.path,
        "line": v.line,
        "column": v.column,
        "fix": fix_to_dict(v.fix),
    }


def violation_from_dict(d: Dict[str, Any]) -> Violation:
    return Violation(
        rule_id=d["rule_id"],
        rule_name=d.get("rule_name", ""),
        severity=Severity(d["severity"]),
        message=d.get("message", ""),
        path=d["path"],
        line=d["line"],
        column=d["column"],
        fix=fix_from_dict(d.get("fix")),
    )


def file_report_to_dict(r: FileReport) -> Dict[str, Any]:
    return {
        "path": r.path,
        "parse_error": r.parse_error,
        "violations": [violation_to_dict(v) for v in r.violations],
    }


def file_report_from_dict(d: Dict[str, Any]) -> FileReport:
    return FileReport(
        path=d["path"],
        violations=[violation_from_dict(v) for v in d.get("violations", [])],
        parse_error=d.get("parse_error"),
    )


def report_to_dict(r: LintReport) -> Dict[str, Any]:
    counts = r.count_by_severity()
    return {
        "files": [file_report_to_dict(f) for f in r.files],
        "summary": {
            "files_checked": r.files_checked,
            "violations": len(r.violations),
            "by_severity": {severity.value: count for severity, count in counts.items()},
        },
    }


def report_from_dict(d: Dict[str, Any]) -> LintReport:
    # The summary is derived data; it is recomputed from the files
    return LintReport(files=[file_report_from_dict(f) for f in d.get("files", [])])


def report_to_json(r: LintReport) -> str:
    return json.dumps(report_to_dict(r), sort_keys=True, indent=2)


def report_from_json(s: str) -> LintReport:
    d = json.loads(s)
    return report_from_dict(d)


def report_to_yaml(r: LintReport) -> str:
    return yaml.safe_dump(report_to_dict(r), sort_keys=False)


def report_from_yaml(s: str) -> LintReport:
    d = yaml.safe_load(s)
    return report_from_dict(d)
