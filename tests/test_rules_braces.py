"""
Tests for the Brace Style rules (PS201-PS203).
"""

from psstyle.config import Config
from psstyle.engine import lint_source
from psstyle.fixer import apply_fixes, fix_source
from psstyle.rules import find_rule


def check(source, rule_id):
    return lint_source(source, "test.ps1", Config(select=(rule_id,))).violations


def fixed(source, rule_id):
    text, _ = apply_fixes(source, check(source, rule_id))
    return text


class TestOpenBraceSameLine:
    def test_brace_on_own_line(self):
        source = "if ($a)\n{\n    Start-Job\n}\n"
        violations = check(source, "PS201")
        assert [(v.line, v.column) for v in violations] == [(2, 1)]
        assert "')'" in violations[0].message
        assert fixed(source, "PS201") == "if ($a) {\n    Start-Job\n}\n"

    def test_function_body(self):
        assert fixed("function Get-A\n{\n}\n", "PS201") == "function Get-A {\n}\n"

    def test_comment_in_between_prevents_fix(self):
        violations = check("if ($a) # check\n{\n}\n", "PS201")
        assert len(violations) == 1
        assert violations[0].fix is None

    def test_brace_at_end_of_line(self):
        assert check("if ($a) {\n    Start-Job\n}\n", "PS201") == []

    def test_value_after_assignment_is_not_a_body(self):
        assert check("$h =\n@{\n    A = 1\n}\n", "PS201") == []

    def test_brace_at_start_of_file(self):
        assert check("{\n}\n", "PS201") == []


class TestCloseBraceOwnLine:
    def test_brace_after_statement(self):
        source = "if ($a) {\n    Start-Job }\n"
        violations = check(source, "PS202")
        assert [(v.line, v.column) for v in violations] == [(2, 15)]
        assert fixed(source, "PS202") == "if ($a) {\n    Start-Job\n}\n"

    def test_fix_uses_indent_of_opening_line(self):
        source = "function Get-A {\n    if ($a) {\n        Start-Job }\n}\n"
        assert fixed(source, "PS202") == "function Get-A {\n    if ($a) {\n        Start-Job\n    }\n}\n"

    def test_multiline_hashtable(self):
        assert len(check("$h = @{\n    A = 1 }\n", "PS202")) == 1

    def test_single_line_block(self):
        assert check("$action = { Start-Job }\n", "PS202") == []


class TestCuddledElse:
    def test_else_on_next_line(self):
        source = "if ($a) {\n    1\n}\nelse {\n    2\n}\n"
        violations = check(source, "PS203")
        assert [(v.line, v.column) for v in violations] == [(4, 1)]
        assert fixed(source, "PS203") == "if ($a) {\n    1\n} else {\n    2\n}\n"

    def test_catch_and_finally(self):
        source = "try {\n    1\n}\ncatch {\n    2\n}\nfinally {\n    3\n}\n"
        assert [v.line for v in check(source, "PS203")] == [4, 7]

    def test_cuddled_forms(self):
        source = "if ($a) {\n    1\n} elseif ($b) {\n    2\n} else {\n    3\n}\n"
        assert check(source, "PS203") == []

    def test_comment_in_between_prevents_fix(self):
        violations = check("if ($a) {\n}\n# otherwise\nelse {\n}\n", "PS203")
        assert len(violations) == 1
        assert violations[0].fix is None


class TestBraceFixes:
    def test_brace_rules_are_fixable(self):
        assert all(find_rule(rule_id).fixable for rule_id in ("PS201", "PS202", "PS203"))

    def test_fix_all_brace_rules(self):
        source = "if ($ready)\n{\n    Start-Job\n}\nelse {\n    Stop-Job }\n"
        result = fix_source(source, config=Config(select=("PS2",)))
        assert result.text == "if ($ready) {\n    Start-Job\n} else {\n    Stop-Job\n}\n"
        assert result.remaining == []

    def test_crlf_line_endings_are_kept(self):
        source = "if ($ready) {\r\n    Start-Job }\r\n"
        assert fixed(source, "PS202") == "if ($ready) {\r\n    Start-Job\r\n}\r\n"
