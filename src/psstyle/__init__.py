"""
psstyle: a style checker for PowerShell scripts

Enforces the naming, formatting and idiom conventions of the PowerShell
practice and style guide.

PIPELINE:
---------
    source text
        -> tokenizer   (flat token list)
        -> parser      (Script: braces, functions, params, commands)
        -> engine      (runs every enabled rule once per file)
        -> reporters   (text / json / yaml / github)

The engine never executes scripts and never resolves commands.
Every check is a pure function of the parsed Script.
"""

__version__ = "0.1.0"
