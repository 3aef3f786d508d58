"""
Tests for the structural parser.

Tests verify that the parser correctly:
    - Matches bracket pairs and classifies what braces open
    - Finds function definitions, their parameters, attributes and help
    - Finds commands in statement position only
    - Rejects unbalanced brackets
"""

import pytest

from psstyle.errors import ParseError
from psstyle.parser import PairContext, parse, parse_file


def contexts(source):
    return [(p.open.text, p.context) for p in parse(source).brace_pairs]


def command_names(source):
    return [c.name for c in parse(source).commands]


class TestBracePairs:
    def test_pairs_in_source_order(self):
        script = parse("if ($a) { @(1) }\n")
        assert [p.open.text for p in script.brace_pairs] == ["(", "{", "@("]

    def test_contexts(self):
        source = "$h = @{ A = 1 }\nswitch ($x) { 1 { 'one' } }\n[int]$n = 1\n"
        assert contexts(source) == [
            ("@{", PairContext.HASHTABLE),
            ("(", PairContext.PAREN),
            ("{", PairContext.DECLARATION),
            ("{", PairContext.BLOCK),
            ("[", PairContext.BRACKET),
        ]

    def test_class_body_on_next_line_is_a_declaration(self):
        assert contexts("class Point\n{\n    [int]$X\n}\n")[0] == ("{", PairContext.DECLARATION)

    def test_multiline_flag(self):
        script = parse("if ($a) {\n    1\n}\n")
        block = [p for p in script.brace_pairs if p.open.text == "{"][0]
        assert block.is_multiline

    def test_pair_for_either_end(self):
        script = parse("{ 1 }\n")
        pair = script.brace_pairs[0]
        assert script.pair_for(pair.open) is pair
        assert script.pair_for(pair.close) is pair

    @pytest.mark.parametrize("source, message", [
        ("}\n", "unmatched"),
        ("{ )\n", "does not close"),
        ("if ($a) {\n", "never closed"),
    ])
    def test_unbalanced(self, source, message):
        with pytest.raises(ParseError, match=message):
            parse(source)

    def test_parse_error_carries_path_and_location(self):
        with pytest.raises(ParseError) as info:
            parse("$a = 1\n)\n", path="bad.ps1")
        assert info.value.line == 2
        assert str(info.value).startswith("bad.ps1:2:1:")


class TestFunctions:
    def test_advanced_function(self):
        script = parse(
            "function Get-Data {\n"
            "    [CmdletBinding()]\n"
            "    [OutputType([string])]\n"
            "    param(\n"
            "        [Parameter(Mandatory)]\n"
            "        [string]$Path,\n"
            "        [int]$Depth = 2\n"
            "    )\n"
            "    $Path\n"
            "}\n"
        )
        function = script.functions[0]
        assert function.name == "Get-Data"
        assert function.attributes == ["CmdletBinding", "OutputType"]
        assert function.has_attribute("cmdletbinding")
        assert [p.name for p in function.param_block.parameters] == ["Path", "Depth"]
        assert function.param_block.parameters[0].attributes == ["Parameter", "string"]
        assert function.inline_parameters == []

    def test_inline_parameters(self):
        function = parse("function Add-One($Value, [int]$By = 1) { $Value + $By }\n").functions[0]
        assert [p.name for p in function.inline_parameters] == ["Value", "By"]
        assert function.param_block is None
        assert function.body is not None

    def test_default_value_is_not_a_parameter(self):
        function = parse("function F {\n    param($A = $B, $C = @($D))\n}\n").functions[0]
        assert [p.name for p in function.param_block.parameters] == ["A", "C"]

    def test_scope_prefix_is_stripped(self):
        assert parse("function global:Get-Thing { }\n").functions[0].name == "Get-Thing"

    def test_filter_is_a_function(self):
        assert parse("filter Select-Even { $_ }\n").functions[0].name == "Select-Even"

    def test_script_param_block(self):
        script = parse("[CmdletBinding()]\nparam([string]$Name)\nGet-Item $Name\n")
        assert [p.name for p in script.param_block.parameters] == ["Name"]
        assert script.functions == []


class TestCommentHelp:
    def test_help_before_function(self):
        script = parse("<#\n.SYNOPSIS\n    Gets data.\n#>\nfunction Get-Data { }\n")
        assert script.functions[0].has_help

    def test_help_at_start_of_body(self):
        script = parse("function Get-Data {\n    <#\n    .DESCRIPTION\n    Gets.\n    #>\n}\n")
        assert script.functions[0].has_help

    def test_help_at_end_of_body(self):
        script = parse("function Get-Data {\n    'x'\n    # .SYNOPSIS\n    # Gets.\n}\n")
        assert script.functions[0].has_help

    def test_plain_comment_is_not_help(self):
        script = parse("# Gets data\nfunction Get-Data { }\n")
        assert not script.functions[0].has_help

    def test_help_of_previous_function_is_not_reused(self):
        script = parse(
            "function Get-A {\n    # .SYNOPSIS A\n    'a'\n}\n"
            "function Get-B {\n    'b'\n}\n"
        )
        assert [f.has_help for f in script.functions] == [True, False]


class TestCommands:
    def test_statement_positions(self):
        source = "gci; ls | sort\n$x = Get-Item\nif (Test-Path $p) { Remove-Item $p }\n"
        assert command_names(source) == ["gci", "ls", "sort", "Get-Item", "Test-Path", "Remove-Item"]

    def test_arguments_are_not_commands(self):
        assert command_names("Get-Item Path Other\n") == ["Get-Item"]

    def test_foreach_object_shorthand(self):
        assert command_names("$items | % { $_ } | ? { $_ }\n") == ["%", "?"]

    def test_modulo_is_not_a_command(self):
        assert command_names("$a = 5 % 2\n") == []

    def test_hashtable_keys_are_not_commands(self):
        assert command_names("$h = @{\n    Name = 1\n    Path = 2\n}\n") == []

    def test_switch_and_class_bodies(self):
        assert command_names("switch ($x) {\n    default { Get-Item }\n}\n") == ["Get-Item"]

    def test_type_names_are_not_commands(self):
        assert command_names("[string]\n[System.IO.Path]::GetFileName($p)\n") == []


class TestScriptHelpers:
    def test_lines_and_offsets(self):
        script = parse("a\r\nbc\n")
        assert script.lines == ["a", "bc", ""]
        assert script.line_offset(2) == 3
        assert list(script.numbered_lines()) == [(1, "a"), (2, "bc")]

    def test_string_and_comment_lines(self):
        script = parse("$t = @'\none\n'@\n<#\nnote\n#>\n")
        assert script.string_lines == {2, 3}
        assert script.comment_lines == {5, 6}

    def test_starts_and_ends_line(self):
        script = parse("$a = 1 # note\n")
        assert script.starts_line(0)
        assert script.ends_line(2)
        assert not script.ends_line(0)

    def test_parse_file(self, tmp_path):
        path = tmp_path / "script.ps1"
        path.write_bytes(b"\xef\xbb\xbfGet-Item\r\n")
        script = parse_file(str(path))
        assert script.path == str(path)
        assert script.source == "Get-Item\r\n"
        assert command_names(script.source) == ["Get-Item"]
