"""Fish completion script generator (fish >= 3.1)."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .context import build_context
from .escaping import fish_quote

if TYPE_CHECKING:
    from ...commands.models import Command

__all__ = ["generate_fish"]


def generate_fish(root: Command, include_descriptions: bool = True) -> str:
    """Generate the fish completion script.

    "value<TAB>description" is what fish expects from `complete -a`, the
    candidates are passed through as they are.

    Args:
        root: The root of the command tree
        include_descriptions: Ask the program for descriptions

    Returns:
        The fish completion script content
    """
    ctx = build_context(root, include_descriptions)
    ident = ctx.ident
    return f"""# fish completion for {ctx.name} -*- shell-script -*-
# Generated by: {ctx.name} completion fish

function __{ident}_debug
    set -l file "${ctx.debug_env}"
    if test -n "$file"
        echo "$argv" >> $file
    end
end

function __{ident}_perform_completion
    __{ident}_debug "Starting __{ident}_perform_completion"

    # tokens before the cursor, the partial token is passed separately
    set -l args (commandline -opc)
    set -l lastArg (string escape -- (commandline -ct))
    set -l requestComp "$args[1] {ctx.request_cmd} $args[2..-1] $lastArg"

    __{ident}_debug "args: $args"
    __{ident}_debug "last arg: $lastArg"
    __{ident}_debug "Calling $requestComp"

    set -l results (eval $requestComp 2> /dev/null)

    # drop trailing empty lines after the directive
    for line in $results[-1..1]
        if test (string trim -- $line) = ""
            set results $results[1..-2]
        else
            break
        end
    end

    set -l comps $results[1..-2]
    set -l directiveLine $results[-1]

    # completing "--flag=<TAB>": fish replaces the whole token, the flag must be kept
    set -l flagPrefix (string match -r -- '-.*=' "$lastArg")

    __{ident}_debug "Comps: $comps"
    __{ident}_debug "DirectiveLine: $directiveLine"
    __{ident}_debug "flagPrefix: $flagPrefix"

    for comp in $comps
        printf "%s%s\\n" "$flagPrefix" "$comp"
    end

    printf "%s\\n" "$directiveLine"
end

function __{ident}_prepare_completions
    __{ident}_debug ""
    __{ident}_debug "========= starting completion logic =========="

    set --global __{ident}_comp_results

    set -l results (__{ident}_perform_completion)
    __{ident}_debug "Completion results: $results"

    if test -z "$results"
        __{ident}_debug "No completion, probably due to a failure"
        return 1
    end

    set -l directive 0
    if string match -qr -- '^:[0-9]+$' "$results[-1]"
        set directive (string sub --start 2 -- $results[-1])
        set results $results[1..-2]
    end
    set --global __{ident}_comp_results $results

    __{ident}_debug "Completions are: $__{ident}_comp_results"
    __{ident}_debug "Directive is: $directive"

    if test (math "bitand($directive, {ctx.error})") -ne 0
        __{ident}_debug "Received error from custom completion"
        set --global __{ident}_comp_results
        return 0
    end

    set -l token (commandline -ct)
    if test (math "bitand($directive, {ctx.filter_file_ext})") -ne 0
        set -l exts (string join '|' -- (string escape --style=regex -- (string replace -r -- '^\\.' '' $__{ident}_comp_results)))
        __{ident}_debug "Filtering files on: $exts"
        set --global __{ident}_comp_results (__fish_complete_path "$token" | string match -r -- "^[^\\t]*(/|\\.($exts))(\\t.*)?\\$")
        return 0
    end

    if test (math "bitand($directive, {ctx.filter_dirs})") -ne 0
        __{ident}_debug "Completing directories"
        set --global __{ident}_comp_results (__fish_complete_directories "$token" "")
        return 0
    end

    set -l nospace (math "bitand($directive, {ctx.no_space})")
    set -l nofiles (math "bitand($directive, {ctx.no_file_comp})")

    set -l numComps (count $__{ident}_comp_results)
    if test $numComps -eq 0; and test $nofiles -eq 0
        __{ident}_debug "No completions, requesting file completion"
        return 1
    end

    if test $numComps -eq 1; and test $nospace -ne 0
        # fish has no nospace option: a second, longer candidate prevents the space
        set -l value (string split -m 1 -- \\t $__{ident}_comp_results[1])[1]
        set --global __{ident}_comp_results $value $value.
    end

    return 0
end

# Remove any pre-existing completions for the program
complete -c {fish_quote(ctx.name)} -e

# File completion happens when __{ident}_prepare_completions fails
complete -c {fish_quote(ctx.name)} -n '__{ident}_prepare_completions' -f -a '$__{ident}_comp_results'
"""
