"""
Tests for the Name Style rules (PS301-PS305).
"""

import pytest

from psstyle.config import Config
from psstyle.engine import lint_source
from psstyle.fixer import apply_fixes, fix_source


def check(source, rule_id, **settings):
    return lint_source(source, "test.ps1", Config(select=(rule_id,), **settings)).violations


def fixed(source, rule_id):
    text, _ = apply_fixes(source, check(source, rule_id))
    return text


class TestFunctionName:
    @pytest.mark.parametrize("name", ["getData", "Get-data", "get-Data", "GetData", "Get-Data-Now", "Get_Data"])
    def test_bad_names(self, name):
        violations = check(f"function {name} {{ }}\n", "PS301")
        assert len(violations) == 1
        assert violations[0].column == 10

    @pytest.mark.parametrize("name", ["Get-Data", "ConvertTo-Json2", "Get-ADUser"])
    def test_good_names(self, name):
        assert check(f"function {name} {{ }}\n", "PS301") == []


class TestApprovedVerb:
    def test_unapproved_verb(self):
        violations = check("function Grab-Data { }\n", "PS302")
        assert "'Grab' is not an approved verb" in violations[0].message

    def test_verbs_are_case_insensitive(self):
        assert check("function get-data { }\n", "PS302") == []

    def test_extra_verbs_from_configuration(self):
        assert check("function Grab-Data { }\n", "PS302", extra_verbs=("Grab",)) == []

    def test_name_without_verb_is_left_to_function_name_rule(self):
        assert check("function Helper { }\n", "PS302") == []


class TestParameterName:
    def test_param_block(self):
        source = "function Get-A {\n    param([string]$path, $MaxCount)\n}\n"
        violations = check(source, "PS303")
        assert [v.message for v in violations] == ["Parameter '$path' should be PascalCase"]

    def test_inline_and_script_parameters(self):
        source = "param($first_name)\nfunction Get-A($second) { }\n"
        assert [v.line for v in check(source, "PS303")] == [1, 2]

    def test_braced_variable_names_are_skipped(self):
        assert check("function Get-A {\n    param(${my-arg})\n}\n", "PS303") == []


class TestKeywordCase:
    def test_upper_case_keywords(self):
        source = "If ($a) { Return } Else { Throw 'x' }\n"
        assert [v.message for v in check(source, "PS304")] == [
            "Keyword 'If' should be lower case",
            "Keyword 'Return' should be lower case",
            "Keyword 'Else' should be lower case",
            "Keyword 'Throw' should be lower case",
        ]
        assert fixed(source, "PS304") == "if ($a) { return } else { throw 'x' }\n"

    def test_keyword_shaped_members_are_ignored(self):
        assert check("$list.ForEach({ $_ })\n$items | ForEach { $_ }\n", "PS304") == []

    def test_command_arguments_are_not_keywords(self):
        source = "Write-Output End\nGet-Item -Path In\n"
        assert check(source, "PS304") == []
        assert fix_source(source).text == source

    def test_hashtable_keys_are_not_keywords(self):
        source = "$obj = [pscustomobject]@{ Process = 1; End = 2 }\n"
        assert check(source, "PS304") == []
        assert fix_source(source).text == source

    def test_hashtable_value_statement_is_checked(self):
        assert len(check("$map = @{\n    Size = If ($big) { 2 } Else { 1 }\n}\n", "PS304")) == 2

    def test_keyword_slots(self):
        source = (
            "ForEach ($item In $items) {\n"
            "    $item\n"
            "}\n"
            "$kind = Switch ($x) { default { 1 } }\n"
            "Test-Path x || Throw 'missing'\n"
        )
        assert [v.message for v in check(source, "PS304")] == [
            "Keyword 'ForEach' should be lower case",
            "Keyword 'In' should be lower case",
            "Keyword 'Switch' should be lower case",
            "Keyword 'Throw' should be lower case",
        ]


class TestOperatorCase:
    def test_upper_case_operators(self):
        source = "if ($a -EQ 1 -And $b -NotMatch 'x') { }\n"
        assert len(check(source, "PS305")) == 3
        assert fixed(source, "PS305") == "if ($a -eq 1 -and $b -notmatch 'x') { }\n"

    def test_parameters_are_not_operators(self):
        assert check("Get-Item -Path x -Force\n", "PS305") == []
