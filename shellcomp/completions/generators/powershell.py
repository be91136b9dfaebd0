"""PowerShell completion script generator."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .context import build_context
from .escaping import powershell_quote

if TYPE_CHECKING:
    from ...commands.models import Command

__all__ = ["generate_powershell"]


def generate_powershell(root: Command, include_descriptions: bool = True) -> str:
    """Generate the PowerShell completion script.

    Candidates become `CompletionResult` objects, the description is the tooltip.

    Args:
        root: The root of the command tree
        include_descriptions: Ask the program for descriptions

    Returns:
        The PowerShell completion script content
    """
    ctx = build_context(root, include_descriptions)
    ident = ctx.ident
    return f"""# powershell completion for {ctx.name} -*- shell-script -*-
# Generated by: {ctx.name} completion powershell

function __{ident}_debug {{
    if ($env:{ctx.debug_env}) {{
        "$args" | Out-File -Append -FilePath "$env:{ctx.debug_env}"
    }}
}}

filter __{ident}_escapeStringWithSpecialChars {{
    $_ -replace '\\s|#|@|\\$|;|,|''|\\{{|\\}}|\\(|\\)|"|`|\\||<|>|&','`$&'
}}

[scriptblock]$__{ident}CompleterBlock = {{
    param(
            $WordToComplete,
            $CommandAst,
            $CursorPosition
        )

    $Command = $CommandAst.CommandElements
    $Command = "$Command"

    __{ident}_debug ""
    __{ident}_debug "========= starting completion logic =========="
    __{ident}_debug "WordToComplete: $WordToComplete Command: $Command CursorPosition: $CursorPosition"

    # the cursor may have been moved backwards: only complete what precedes it
    if ($Command.Length -gt $CursorPosition) {{
        $Command = $Command.Substring(0, $CursorPosition)
    }}
    __{ident}_debug "Truncated command: $Command"

    $Program, $Arguments = $Command.Split(" ", 2)
    $RequestComp = "$Program {ctx.request_cmd} $Arguments"

    if ($WordToComplete -ne "") {{
        $WordToComplete = $Arguments.Split(" ")[-1]
    }}
    __{ident}_debug "New WordToComplete: $WordToComplete"

    $IsEqualFlag = ($WordToComplete -Like "--*=*")
    if ($IsEqualFlag) {{
        __{ident}_debug "Completing equal sign flag"
        $Flag, $WordToComplete = $WordToComplete.Split("=", 2)
    }}

    if ($WordToComplete -eq "" -And (-Not $IsEqualFlag)) {{
        # the cursor follows a space, the partial token is empty
        __{ident}_debug "Adding extra empty parameter"
        $RequestComp = "$RequestComp" + ' ""'
    }}

    __{ident}_debug "Calling $RequestComp"
    $Out = Invoke-Expression -Command "$RequestComp" 2>$null

    [int]$Directive = 0
    $DirectiveLine = $Out | Select-Object -Last 1
    if ($DirectiveLine -match '^:[0-9]+$') {{
        $Directive = $DirectiveLine.Substring(1)
        $Out = $Out | Select-Object -SkipLast 1
    }}
    __{ident}_debug "The completion directive is: $Directive"
    __{ident}_debug "The completions are: $Out"

    if (($Directive -band {ctx.error}) -ne 0) {{
        __{ident}_debug "Received error from custom completion"
        ""
        return
    }}

    [Array]$Values = $Out | Where-Object {{ $_ -ne "" }} | ForEach-Object {{
        $Name, $Description = $_.Split("`t", 2)
        __{ident}_debug "Name: $Name Description: $Description"
        # CompletionResult refuses an empty tooltip
        if (-Not $Description) {{
            $Description = " "
        }}
        [PSCustomObject]@{{Name = "$Name"; Description = "$Description"}}
    }}

    if (($Directive -band {ctx.filter_file_ext}) -ne 0) {{
        $Extensions = $Values | ForEach-Object {{ $_.Name.TrimStart(".") }}
        $Parent = Split-Path -Parent $WordToComplete
        Get-ChildItem -Path "$WordToComplete*" -ErrorAction SilentlyContinue | Where-Object {{
            $_.PSIsContainer -or ($Extensions -contains $_.Extension.TrimStart("."))
        }} | ForEach-Object {{
            $Path = if ($Parent) {{ Join-Path $Parent $_.Name }} else {{ $_.Name }}
            [System.Management.Automation.CompletionResult]::new(($Path | __{ident}_escapeStringWithSpecialChars), "$Path", 'ProviderItem', "$Path")
        }}
        return
    }}

    if (($Directive -band {ctx.filter_dirs}) -ne 0) {{
        $Root = ""
        if ($Values) {{
            $Root = $Values[0].Name
        }}
        $Parent = Split-Path -Parent $WordToComplete
        $Search = if ($Root) {{ Join-Path $Root "$WordToComplete*" }} else {{ "$WordToComplete*" }}
        Get-ChildItem -Path $Search -Directory -ErrorAction SilentlyContinue | ForEach-Object {{
            $Path = if ($Parent) {{ Join-Path $Parent $_.Name }} else {{ $_.Name }}
            [System.Management.Automation.CompletionResult]::new(($Path | __{ident}_escapeStringWithSpecialChars), "$Path", 'ProviderContainer', "$Path")
        }}
        return
    }}

    $Space = " "
    if (($Directive -band {ctx.no_space}) -ne 0) {{
        __{ident}_debug "NoSpace directive"
        $Space = ""
    }}

    if ($Values.Length -eq 0) {{
        if (($Directive -band {ctx.no_file_comp}) -ne 0) {{
            __{ident}_debug "NoFileComp directive"
            # an empty string prevents the path completion, CompletionResult can't be empty
            ""
        }}
        return
    }}

    if (($Directive -band {ctx.keep_order}) -eq 0) {{
        $Values = $Values | Sort-Object -Property Name
    }}

    $Values | ForEach-Object {{
        $comp = $_
        $Text = $comp.Name | __{ident}_escapeStringWithSpecialChars
        if ($IsEqualFlag) {{
            $Text = "$Flag=$Text"
        }}
        [System.Management.Automation.CompletionResult]::new("$Text$Space", "$($comp.Name)", 'ParameterValue', "$($comp.Description)")
    }}
}}

Register-ArgumentCompleter -CommandName {powershell_quote(ctx.name)} -ScriptBlock $__{ident}CompleterBlock
"""
