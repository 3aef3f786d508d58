"""
Tests for the Punctuation Style rules (PS401-PS404).
"""

import pytest

from psstyle.config import Config
from psstyle.engine import lint_source
from psstyle.fixer import apply_fixes, fix_source


def check(source, rule_id):
    return lint_source(source, "test.ps1", Config(select=(rule_id,))).violations


def fixed(source, rule_id):
    text, _ = apply_fixes(source, check(source, rule_id))
    return text


class TestSingleQuotes:
    def test_constant_string(self):
        violations = check('$a = "text"\n', "PS401")
        assert [(v.line, v.column) for v in violations] == [(1, 6)]
        assert fixed('$a = "text"\n', "PS401") == "$a = 'text'\n"

    def test_doubled_quotes_are_unescaped(self):
        assert fixed('$a = "say ""hi"""\n', "PS401") == "$a = 'say \"hi\"'\n"

    def test_empty_string(self):
        assert fixed('$a = ""\n', "PS401") == "$a = ''\n"

    @pytest.mark.parametrize("source", [
        '$a = "$name"\n',
        '$a = "line`n"\n',
        '$a = "it\'s"\n',
        '$a = "$($b.Count) items"\n',
        '$a = @"\nconstant\n"@\n',
        "$a = 'already'\n",
    ])
    def test_strings_left_alone(self, source):
        assert check(source, "PS401") == []


class TestTrailingSemicolon:
    def test_semicolon_at_end_of_line(self):
        violations = check("$a = 1;\n", "PS402")
        assert [(v.line, v.column) for v in violations] == [(1, 7)]
        assert fixed("$a = 1;\n", "PS402") == "$a = 1\n"

    def test_semicolon_before_comment(self):
        assert fixed("$a = 1 ;  # note\n", "PS402") == "$a = 1  # note\n"

    def test_semicolon_at_end_of_file(self):
        assert fixed("$a = 1;", "PS402") == "$a = 1"

    @pytest.mark.parametrize("source", [
        "$a = 1; $b = 2\n",
        "for ($i = 0; $i -lt 3; $i++) { }\n",
        "$a = 'x;'\n",
    ])
    def test_separating_semicolons(self, source):
        assert check(source, "PS402") == []


class TestBacktickContinuation:
    def test_continuation(self):
        violations = check("Get-Item `\n  -Path x\n", "PS403")
        assert [(v.line, v.column) for v in violations] == [(1, 10)]
        assert violations[0].fix is None

    def test_escapes_are_not_continuations(self):
        assert check("Write-Output a`tb\n$s = \"Tab`t\"\n", "PS403") == []


class TestAssignmentSpacing:
    @pytest.mark.parametrize("source, expected", [
        ("$a=1\n", "$a = 1\n"),
        ("$a= 1\n", "$a = 1\n"),
        ("$a =1\n", "$a = 1\n"),
        ("$a+=1\n", "$a += 1\n"),
        ("$h = @{A=1}\n", "$h = @{A = 1}\n"),
    ])
    def test_fix(self, source, expected):
        violations = check(source, "PS404")
        assert len(violations) == 1
        assert fixed(source, "PS404") == expected

    def test_attribute_arguments_are_exempt(self):
        assert check("[Parameter(Mandatory=$true)]\n[string]$Path = 'x'\n", "PS404") == []

    def test_spaced_assignment(self):
        assert check("$a = 1\n$a += 2\n$a = -1\n", "PS404") == []

    @pytest.mark.parametrize("source", [
        "msiexec /i app.msi ALLUSERS=1\n",
        "setup.exe INSTALLDIR=C:\\Tools /quiet\n",
    ])
    def test_equals_inside_command_arguments(self, source):
        assert check(source, "PS404") == []
        assert fix_source(source).text == source

    @pytest.mark.parametrize("source, expected", [
        ("$obj.Name='x'\n", "$obj.Name = 'x'\n"),
        ("$items[0]=1\n", "$items[0] = 1\n"),
        ("[Console]::Title='x'\n", "[Console]::Title = 'x'\n"),
        ("enum Color {\n    Red=1\n}\n", "enum Color {\n    Red = 1\n}\n"),
    ])
    def test_assignable_targets(self, source, expected):
        assert fixed(source, "PS404") == expected
