#!/usr/bin/env python3
"""
Demo: Lint and fix the guide's examples, and print the reports.
"""

from psstyle.engine import lint_source
from psstyle.examples import CLEAN_SCRIPT, EXAMPLES
from psstyle.fixer import fix_source
from psstyle.reporters import get_reporter
from psstyle.model import LintReport

MESSY_SCRIPT = """\
Function getData($path)
{
\tgci -Path $path | % { $_.Name };
    if ($path -eq $null) { Write-Host "no path" }
}
"""


def main():
    print("=" * 80)
    print("PSSTYLE DEMO")
    print("=" * 80)

    print("\nGUIDE EXAMPLES (Bad snippets)")
    print("-" * 80)
    for example in EXAMPLES:
        report = lint_source(example.bad[0], path=f"{example.rule_id}.ps1")
        hits = [v for v in report.violations if v.rule_id == example.rule_id]
        print(f"  {example.rule_id}  {example.title:<50} {len(hits)} violation(s)")

    print("\nMESSY SCRIPT (text report)")
    print("-" * 80)
    report = LintReport(files=[lint_source(MESSY_SCRIPT, path="messy.ps1")])
    print(get_reporter("text")(report))

    print("MESSY SCRIPT AFTER --fix")
    print("-" * 80)
    result = fix_source(MESSY_SCRIPT, path="messy.ps1")
    print(result.text)
    print(f"Applied {result.applied} fix(es); {len(result.remaining)} violation(s) left to fix by hand")

    print("\nCLEAN SCRIPT (json report)")
    print("-" * 80)
    report = LintReport(files=[lint_source(CLEAN_SCRIPT, path="archive-logs.ps1")])
    print(get_reporter("json")(report))
    print("=" * 80)


if __name__ == "__main__":
    main()
