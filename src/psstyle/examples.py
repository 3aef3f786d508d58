"""
The style guide's annotated examples.

Every rule carries at least one "Bad - avoid this" and one "Good" snippet.
They document the rules (psstyle --list-rules points here) and drive the
guide example tests: each Bad snippet must trigger its rule, each Good
snippet must not.

CLEAN_SCRIPT is a complete script that follows the whole guide.
"""

from dataclasses import dataclass
from typing import Dict, List, Tuple


@dataclass(frozen=True)
class GuideExample:
    """Bad and Good snippets for one rule."""

    rule_id: str
    title: str
    bad: Tuple[str, ...]
    good: Tuple[str, ...]


def _example(rule_id: str, title: str, bad: List[str], good: List[str]) -> GuideExample:
    return GuideExample(rule_id, title, tuple(bad), tuple(good))


_LONG_LINE = "Write-Output '" + "x" * 120 + "'\n"

_SPLATTED_CALL = """\
$params = @{
    Path    = $root
    Filter  = '*.log'
    Recurse = $true
}
Get-ChildItem @params
"""

_ADVANCED_FUNCTION = """\
function Get-Data {
    [CmdletBinding()]
    param(
        [Parameter(Mandatory=$true)]
        [string]$Path
    )
    $Path
}
"""


EXAMPLES: List[GuideExample] = [
    # ===== Indent Style =====
    _example(
        "PS101", "Indent with four spaces, never tabs",
        bad=["if ($ready) {\n\tStart-Job\n}\n"],
        good=["if ($ready) {\n    Start-Job\n}\n"],
    ),
    _example(
        "PS102", "Indent one level per block",
        bad=[
            "if ($ready) {\n  Start-Job\n}\n",
            "function Get-Data {\n    if ($ready) {\n         'ready'\n    }\n}\n",
        ],
        good=[
            "if ($ready) {\n    Start-Job\n}\n",
            "Get-ChildItem -Path $root |\n  Sort-Object Length\n",
            "function Get-Greeting {\n    $text = @\"\n  Hello\n   World\n\"@\n    $text\n}\n",
        ],
    ),
    _example(
        "PS103", "No trailing whitespace",
        bad=["$name = 'value'   \n", "if ($ready) {\t\n    Start-Job\n}\n"],
        good=["$name = 'value'\n", "$text = @'\nkept as is   \n'@\n"],
    ),
    _example(
        "PS104", "Keep lines within 115 characters",
        bad=[_LONG_LINE],
        good=[_SPLATTED_CALL],
    ),
    _example(
        "PS105", "At most two blank lines in a row",
        bad=["Start-Job\n\n\n\nStop-Job\n"],
        good=["Start-Job\n\n\nStop-Job\n"],
    ),
    _example(
        "PS106", "End files with a newline",
        bad=["Start-Job"],
        good=["Start-Job\n"],
    ),

    # ===== Brace Style =====
    _example(
        "PS201", "Opening braces go at the end of the line",
        bad=[
            "if ($ready)\n{\n    Start-Job\n}\n",
            "function Get-Data\n{\n    'data'\n}\n",
        ],
        good=[
            "if ($ready) {\n    Start-Job\n}\n",
            "$settings = @{\n    Name = 'psstyle'\n}\n",
        ],
    ),
    _example(
        "PS202", "Closing braces go on their own line",
        bad=["if ($ready) {\n    Start-Job }\n"],
        good=["if ($ready) {\n    Start-Job\n}\n", "$action = { Start-Job }\n"],
    ),
    _example(
        "PS203", "Cuddle else, catch and finally",
        bad=[
            "if ($ready) {\n    Start-Job\n}\nelse {\n    Stop-Job\n}\n",
            "try {\n    Start-Job\n}\ncatch {\n    Stop-Job\n}\n",
        ],
        good=[
            "if ($ready) {\n    Start-Job\n} else {\n    Stop-Job\n}\n",
            "try {\n    Start-Job\n} catch {\n    Stop-Job\n} finally {\n    Remove-Job\n}\n",
        ],
    ),

    # ===== Name Style =====
    _example(
        "PS301", "Name functions Verb-Noun in PascalCase",
        bad=["function getData {\n    'data'\n}\n", "function Get-data {\n    'data'\n}\n"],
        good=["function Get-Data {\n    'data'\n}\n"],
    ),
    _example(
        "PS302", "Use approved verbs",
        bad=["function Grab-Data {\n    'data'\n}\n", "function Fetch-Report {\n    'report'\n}\n"],
        good=["function Get-Data {\n    'data'\n}\n", "function ConvertTo-Report {\n    'report'\n}\n"],
    ),
    _example(
        "PS303", "Name parameters in PascalCase",
        bad=[
            "function Get-Data {\n    [CmdletBinding()]\n    param(\n        [string]$path\n    )\n}\n",
            "param(\n    [int]$max_count\n)\n",
        ],
        good=[
            "function Get-Data {\n    [CmdletBinding()]\n    param(\n        [string]$Path\n    )\n}\n",
            "param(\n    [int]$MaxCount\n)\n",
        ],
    ),
    _example(
        "PS304", "Write keywords in lower case",
        bad=["If ($ready) {\n    Start-Job\n}\n", "ForEach ($item In $items) {\n    $item\n}\n"],
        good=["if ($ready) {\n    Start-Job\n}\n", "foreach ($item in $items) {\n    $item\n}\n"],
    ),
    _example(
        "PS305", "Write operators in lower case",
        bad=["if ($count -GT 10) {\n    Start-Job\n}\n", "$name -Match '^a'\n"],
        good=["if ($count -gt 10) {\n    Start-Job\n}\n", "$name -match '^a'\n"],
    ),

    # ===== Punctuation Style =====
    _example(
        "PS401", "Use single quotes for constant strings",
        bad=['$name = "constant"\n'],
        good=[
            "$name = 'constant'\n",
            '$greeting = "Hello $name"\n',
            '$line = "Tab`there"\n',
            '$quote = "It\'s"\n',
        ],
    ),
    _example(
        "PS402", "Do not end lines with semicolons",
        bad=["$count = 1;\n", "Start-Job;  # started\n"],
        good=["$count = 1\n", "$count = 1; $total = 2\n"],
    ),
    _example(
        "PS403", "Splat instead of using backtick continuation",
        bad=["Get-ChildItem -Path $root `\n    -Recurse\n"],
        good=[_SPLATTED_CALL],
    ),
    _example(
        "PS404", "Surround assignment operators with spaces",
        bad=["$count=1\n", "$total+=$count\n"],
        good=["$count = 1\n$count += 1\n", _ADVANCED_FUNCTION],
    ),

    # ===== Definition Style =====
    _example(
        "PS501", "Make functions with parameters advanced functions",
        bad=["function Get-Data {\n    param(\n        [string]$Path\n    )\n    $Path\n}\n"],
        good=[_ADVANCED_FUNCTION, "function Get-Data {\n    'data'\n}\n"],
    ),
    _example(
        "PS502", "Declare parameters in a param() block",
        bad=["function Get-Data($Path) {\n    $Path\n}\n"],
        good=[_ADVANCED_FUNCTION],
    ),

    # ===== Call Style =====
    _example(
        "PS601", "Use full command names, not aliases",
        bad=[
            "gci -Path $root | % { $_.Name }\n",
            "$files = ls\n",
            "Get-Process | where { $_.CPU -gt 10 }\n",
        ],
        good=[
            "Get-ChildItem -Path $root | ForEach-Object { $_.Name }\n",
            "$files = Get-ChildItem\n",
            "function ls {\n    Get-ChildItem -Force\n}\nls\n",
        ],
    ),
    _example(
        "PS602", "Write to the output stream, not the host",
        bad=["Write-Host 'Done'\n"],
        good=["Write-Output 'Done'\nWrite-Verbose 'Done'\n"],
    ),

    # ===== Documentation Style =====
    _example(
        "PS701", "Document functions with comment-based help",
        bad=["function Get-Data {\n    'data'\n}\n"],
        good=[
            "function Get-Data {\n    <#\n    .SYNOPSIS\n        Returns the data.\n    #>\n    'data'\n}\n",
            "# .SYNOPSIS\n# Returns the data.\nfunction Get-Data {\n    'data'\n}\n",
        ],
    ),

    # ===== Idioms =====
    _example(
        "PS801", "Put $null on the left of comparisons",
        bad=["if ($value -eq $null) {\n    Start-Job\n}\n", "$missing = $items -ne $null\n"],
        good=["if ($null -eq $value) {\n    Start-Job\n}\n", "$missing = $null -ne $items\n"],
    ),
]


CLEAN_SCRIPT = """\
<#
.SYNOPSIS
    Archives old log files.
#>
[CmdletBinding()]
param(
    [Parameter(Mandatory = $true)]
    [string]$Path,

    [int]$Days = 30
)

function Get-StaleLog {
    <#
    .SYNOPSIS
        Returns log files older than the given number of days.
    #>
    [CmdletBinding()]
    param(
        [Parameter(Mandatory = $true)]
        [string]$Root,

        [int]$Age
    )

    $cutoff = (Get-Date).AddDays(-$Age)
    Get-ChildItem -Path $Root -Filter '*.log' |
        Where-Object { $_.LastWriteTime -lt $cutoff }
}

$logs = Get-StaleLog -Root $Path -Age $Days
if ($null -eq $logs) {
    Write-Verbose 'Nothing to archive'
} else {
    $params = @{
        Path            = $logs.FullName
        DestinationPath = Join-Path -Path $Path -ChildPath 'archive.zip'
    }
    Compress-Archive @params
}
"""


def examples_by_rule() -> Dict[str, GuideExample]:
    return {example.rule_id: example for example in EXAMPLES}
