"""
Automatic fixes.

Fixable rules attach a Fix (start, end, replacement) to their findings.
This module applies those edits:

    apply_fixes()  one pass: non-overlapping fixes, left to right
    fix_source()   lint + apply until nothing more applies

Fixes from one pass are computed against the same text, so a fix that
overlaps an earlier one is skipped and picked up again (recomputed) on
the next pass.
"""

from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

from psstyle.config import Config
from psstyle.engine import lint_source, select_rules
from psstyle.logging import get_logger
from psstyle.model import FileReport, Fix, Violation

logger = get_logger(__name__)

MAX_PASSES = 10


def apply_fixes(source: str, violations: Iterable[Violation]) -> Tuple[str, int]:
    """
    Apply the fixes carried by ``violations`` to ``source``.

    Returns:
        (new text, number of fixes applied)
    """
    fixes: List[Fix] = sorted(
        {v.fix for v in violations if v.fix is not None},
        key=lambda f: (f.start, f.end),
    )
    pieces: List[str] = []
    position = 0
    applied = 0
    for fix in fixes:
        if fix.start < position:
            continue
        pieces.append(source[position:fix.start])
        pieces.append(fix.replacement)
        position = fix.end
        applied += 1
    pieces.append(source[position:])
    return "".join(pieces), applied


@dataclass
class FixResult:
    """
    Outcome of fixing one script.

    Properties:
        path: Script path
        original: Text before fixing
        text: Text after fixing
        applied: Number of fixes applied over all passes
        report: Lint report of the fixed text (what is left to do by hand)
    """

    path: str
    original: str
    text: str
    applied: int
    report: FileReport

    @property
    def changed(self) -> bool:
        return self.text != self.original

    @property
    def remaining(self) -> List[Violation]:
        return self.report.violations


def fix_source(source: str, path: str = "<string>", config: Optional[Config] = None) -> FixResult:
    """Fix ``source`` in bounded passes and lint the result."""
    config = config or Config()
    rules = select_rules(config)
    text = source
    total = 0
    report = lint_source(text, path, config, rules)
    for _ in range(MAX_PASSES):
        if report.parse_error is not None:
            break
        text, applied = apply_fixes(text, report.violations)
        if not applied:
            break
        total += applied
        report = lint_source(text, path, config, rules)
    else:
        logger.warning("%s: fixes still pending after %d passes", path, MAX_PASSES, extra={"path": path})
    if total:
        logger.debug("%s: applied %d fix(es)", path, total, extra={"path": path})
    return FixResult(path=path, original=source, text=text, applied=total, report=report)
