"""
Command line interface.

    psstyle [options] [paths...]

Exit codes:
    0 - no violations
    1 - violations reported
    2 - usage, configuration or I/O error
"""

import argparse
import codecs
import sys
from typing import List, Optional, Sequence, TextIO

from psstyle import __version__
from psstyle.config import Config, resolve_config
from psstyle.engine import ActiveRule, iter_script_files, lint_file, lint_source, read_script, select_rules
from psstyle.errors import PsStyleError
from psstyle.fixer import fix_source
from psstyle.logging import get_logger, setup_logging
from psstyle.model import FileReport, LintReport
from psstyle.reporters import ReportFormat, get_reporter
from psstyle.rules import all_rules

logger = get_logger(__name__)

EXIT_OK = 0
EXIT_VIOLATIONS = 1
EXIT_ERROR = 2

STDIN_PATH = "<stdin>"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="psstyle",
        description="Check PowerShell scripts against the PowerShell style guide.",
    )
    parser.add_argument(
        "paths", nargs="*", default=["."],
        help="Files or directories to check (default: current directory); '-' reads stdin",
    )
    parser.add_argument(
        "--format", choices=[f.value for f in ReportFormat], default=ReportFormat.TEXT.value,
        help="Report format (default: text)",
    )
    parser.add_argument("--config", metavar="PATH", help="YAML configuration file")
    parser.add_argument(
        "--select", action="append", metavar="RULES",
        help="Run only these rules (ids, id prefixes or names; comma separated, repeatable)",
    )
    parser.add_argument(
        "--ignore", action="append", metavar="RULES",
        help="Skip these rules (ids, id prefixes or names; comma separated, repeatable)",
    )
    parser.add_argument("--fix", action="store_true", help="Apply automatic fixes in place")
    parser.add_argument("--list-rules", action="store_true", help="List the available rules and exit")
    parser.add_argument("--max-line-length", type=int, metavar="N", help="Maximum line length (default: 115)")
    parser.add_argument("--indent-size", type=int, metavar="N", help="Indent size in spaces (default: 4)")
    parser.add_argument(
        "--log-level", default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"], type=str.upper,
        help="Diagnostic log level on stderr (default: WARNING)",
    )
    parser.add_argument("--log-json", action="store_true", help="Write diagnostics as JSON lines")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def _split_selectors(values: Optional[List[str]]) -> Optional[tuple]:
    if not values:
        return None
    return tuple(s.strip() for value in values for s in value.split(",") if s.strip())


def _positive(parser: argparse.ArgumentParser, name: str, value: Optional[int]) -> None:
    if value is not None and value < 1:
        parser.error(f"{name} must be a positive integer")


def format_rule_list() -> str:
    lines = []
    for r in all_rules():
        flags = "fix" if r.fixable else ""
        line = f"{r.id}  {r.name:<24} {r.severity.value:<12} {flags:<4} {r.description}"
        if not r.enabled:
            line += " (disabled by default)"
        lines.append(line.rstrip())
    return "\n".join(lines) + "\n"


def _has_bom(path: str) -> bool:
    with open(path, "rb") as f:
        return f.read(len(codecs.BOM_UTF8)) == codecs.BOM_UTF8


def _fix_file(path: str, config: Config, rules: Sequence[ActiveRule]) -> FileReport:
    try:
        source = read_script(path)
    except UnicodeDecodeError:
        return lint_file(path, config, rules)
    result = fix_source(source, path, config)
    if result.changed:
        encoding = "utf-8-sig" if _has_bom(path) else "utf-8"
        with open(path, "w", encoding=encoding, newline="") as f:
            f.write(result.text)
        logger.info("%s: fixed %d issue(s)", path, result.applied, extra={"path": path})
    return result.report


def _run_stdin(config: Config, fix: bool, stdin: TextIO, stdout: TextIO) -> Optional[LintReport]:
    source = stdin.read()
    if fix:
        result = fix_source(source, STDIN_PATH, config)
        stdout.write(result.text)
        return None
    return LintReport(files=[lint_source(source, STDIN_PATH, config)])


def run(args: argparse.Namespace, stdin: TextIO, stdout: TextIO) -> int:
    config = resolve_config(args.config).with_overrides(
        indent_size=args.indent_size,
        max_line_length=args.max_line_length,
        select=_split_selectors(args.select),
        ignore=_split_selectors(args.ignore),
    )
    rules = select_rules(config)
    logger.debug("%d rule(s) enabled", len(rules))

    if args.paths == ["-"]:
        report = _run_stdin(config, args.fix, stdin, stdout)
        if report is None:
            return EXIT_OK
    else:
        report = LintReport()
        for path in iter_script_files(args.paths, config.exclude):
            if args.fix:
                report.files.append(_fix_file(path, config, rules))
            else:
                report.files.append(lint_file(path, config, rules))

    stdout.write(get_reporter(args.format)(report))
    return report.exit_code


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    _positive(parser, "--indent-size", args.indent_size)
    _positive(parser, "--max-line-length", args.max_line_length)
    if "-" in args.paths and len(args.paths) > 1:
        parser.error("'-' cannot be combined with other paths")

    setup_logging(args.log_level, structured=args.log_json)

    if args.list_rules:
        sys.stdout.write(format_rule_list())
        return EXIT_OK

    try:
        return run(args, sys.stdin, sys.stdout)
    except (PsStyleError, OSError) as e:
        logger.debug("aborting", exc_info=True)
        print(f"psstyle: error: {e}", file=sys.stderr)
        return EXIT_ERROR
