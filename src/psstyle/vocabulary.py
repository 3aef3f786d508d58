"""
Command vocabulary used by the naming and call style rules.

APPROVED_VERBS mirrors the output of Get-Verb on PowerShell 7.
BUILTIN_ALIASES maps the default aliases that ship with PowerShell to the
command they resolve to. Only aliases that are present on every platform
are listed, plus the Windows compatibility aliases most often found in
scripts (ls, cat, curl, ...).
"""

from typing import Dict, FrozenSet


APPROVED_VERBS: FrozenSet[str] = frozenset({
    # Common
    "Add", "Clear", "Close", "Copy", "Enter", "Exit", "Find", "Format", "Get",
    "Hide", "Join", "Lock", "Move", "New", "Open", "Optimize", "Pop", "Push",
    "Redo", "Remove", "Rename", "Reset", "Resize", "Search", "Select", "Set",
    "Show", "Skip", "Split", "Step", "Switch", "Undo", "Unlock", "Watch",
    # Communications
    "Connect", "Disconnect", "Read", "Receive", "Send", "Write",
    # Data
    "Backup", "Checkpoint", "Compare", "Compress", "Convert", "ConvertFrom",
    "ConvertTo", "Dismount", "Edit", "Expand", "Export", "Group", "Import",
    "Initialize", "Limit", "Merge", "Mount", "Out", "Publish", "Restore",
    "Save", "Sync", "Unpublish", "Update",
    # Diagnostic
    "Debug", "Measure", "Ping", "Repair", "Resolve", "Test", "Trace",
    # Lifecycle
    "Approve", "Assert", "Build", "Complete", "Confirm", "Deny", "Deploy",
    "Disable", "Enable", "Install", "Invoke", "Register", "Request", "Restart",
    "Resume", "Start", "Stop", "Submit", "Suspend", "Uninstall", "Unregister",
    "Wait",
    # Security
    "Block", "Grant", "Protect", "Revoke", "Unblock", "Unprotect",
    # Other
    "Use",
})


BUILTIN_ALIASES: Dict[str, str] = {
    "%": "ForEach-Object",
    "?": "Where-Object",
    "ac": "Add-Content",
    "cat": "Get-Content",
    "cd": "Set-Location",
    "chdir": "Set-Location",
    "clc": "Clear-Content",
    "clear": "Clear-Host",
    "cls": "Clear-Host",
    "clv": "Clear-Variable",
    "copy": "Copy-Item",
    "cp": "Copy-Item",
    "cpi": "Copy-Item",
    "curl": "Invoke-WebRequest",
    "del": "Remove-Item",
    "diff": "Compare-Object",
    "dir": "Get-ChildItem",
    "echo": "Write-Output",
    "epal": "Export-Alias",
    "epcsv": "Export-Csv",
    "erase": "Remove-Item",
    "fc": "Format-Custom",
    "fl": "Format-List",
    "foreach": "ForEach-Object",
    "ft": "Format-Table",
    "fw": "Format-Wide",
    "gal": "Get-Alias",
    "gc": "Get-Content",
    "gci": "Get-ChildItem",
    "gcm": "Get-Command",
    "gdr": "Get-PSDrive",
    "ghy": "Get-History",
    "gi": "Get-Item",
    "gl": "Get-Location",
    "gm": "Get-Member",
    "gmo": "Get-Module",
    "gp": "Get-ItemProperty",
    "gps": "Get-Process",
    "group": "Group-Object",
    "gsv": "Get-Service",
    "gu": "Get-Unique",
    "gv": "Get-Variable",
    "h": "Get-History",
    "history": "Get-History",
    "icm": "Invoke-Command",
    "iex": "Invoke-Expression",
    "ihy": "Invoke-History",
    "ii": "Invoke-Item",
    "ipcsv": "Import-Csv",
    "ipmo": "Import-Module",
    "irm": "Invoke-RestMethod",
    "iwr": "Invoke-WebRequest",
    "kill": "Stop-Process",
    "ls": "Get-ChildItem",
    "measure": "Measure-Object",
    "mi": "Move-Item",
    "mount": "New-PSDrive",
    "move": "Move-Item",
    "mv": "Move-Item",
    "ni": "New-Item",
    "nv": "New-Variable",
    "oh": "Out-Host",
    "popd": "Pop-Location",
    "ps": "Get-Process",
    "pushd": "Push-Location",
    "pwd": "Get-Location",
    "r": "Invoke-History",
    "rd": "Remove-Item",
    "ren": "Rename-Item",
    "ri": "Remove-Item",
    "rm": "Remove-Item",
    "rmdir": "Remove-Item",
    "rni": "Rename-Item",
    "rp": "Remove-ItemProperty",
    "rv": "Remove-Variable",
    "sal": "Set-Alias",
    "saps": "Start-Process",
    "sasv": "Start-Service",
    "select": "Select-Object",
    "set": "Set-Variable",
    "si": "Set-Item",
    "sl": "Set-Location",
    "sleep": "Start-Sleep",
    "sls": "Select-String",
    "sort": "Sort-Object",
    "sp": "Set-ItemProperty",
    "spps": "Stop-Process",
    "spsv": "Stop-Service",
    "start": "Start-Process",
    "sv": "Set-Variable",
    "tee": "Tee-Object",
    "type": "Get-Content",
    "wget": "Invoke-WebRequest",
    "where": "Where-Object",
    "write": "Write-Output",
}


def resolve_alias(name: str) -> str:
    """Return the command an alias stands for, or an empty string."""
    return BUILTIN_ALIASES.get(name.lower(), "")


def split_command_name(name: str):
    """Split ``Verb-Noun`` into its two parts; ``(name, "")`` when there is no dash."""
    verb, _, noun = name.partition("-")
    return verb, noun
