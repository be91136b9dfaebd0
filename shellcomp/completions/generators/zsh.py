"""Zsh completion script generators.

- v2 (`zsh`): descriptions shown through `_describe`
- v1 (`zsh-v1`): plain `compadd`, never asks for descriptions
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from .context import build_context
from .escaping import bash_quote

if TYPE_CHECKING:
    from ...commands.models import Command
    from .context import ScriptContext

__all__ = ["generate_zsh", "generate_zsh_v1"]


def _generate_header(ctx: ScriptContext, shell: str) -> str:
    """Shared preamble: the debug helper and the request to the program."""
    return f"""#compdef {ctx.name}
# zsh completion for {ctx.name} -*- shell-script -*-
# Generated by: {ctx.name} completion {shell}

__{ctx.ident}_debug()
{{
    local file="${{{ctx.debug_env}}}"
    if [[ -n ${{file}} ]]; then
        echo "$*" >> "${{file}}"
    fi
}}

# Sets `out` (one candidate per line) and `directive`
__{ctx.ident}_request()
{{
    local lastParam lastChar requestComp lastLine

    lastParam=${{words[-1]}}
    lastChar=${{lastParam[-1]}}
    __{ctx.ident}_debug "CURRENT: ${{CURRENT}}, words[*]: ${{words[*]}}, lastParam: ${{lastParam}}"

    requestComp="${{words[1]}} {ctx.request_cmd} ${{words[2,-1]}}"
    if [ "${{lastChar}}" = "" ]; then
        # the cursor follows a space, the partial token is empty
        __{ctx.ident}_debug "Adding extra empty parameter"
        requestComp="${{requestComp}} \\"\\""
    fi
    __{ctx.ident}_debug "About to call: eval ${{requestComp}}"

    out=$(eval ${{requestComp}} 2>/dev/null)
    __{ctx.ident}_debug "completion output: ${{out}}"

    lastLine=${{out##*$'\\n'}}
    if [[ ${{lastLine}} == :<-> ]]; then
        directive=${{lastLine#:}}
        out=${{out%${{lastLine}}}}
        out=${{out%$'\\n'}}
    else
        __{ctx.ident}_debug "No directive found. Setting to default"
        directive=0
    fi
    __{ctx.ident}_debug "directive: ${{directive}}"
}}"""


def _generate_footer(ctx: ScriptContext) -> str:
    """Run directly when autoloaded from fpath, register otherwise."""
    return f"""if [ "$funcstack[1]" = "_{ctx.ident}" ]; then
    _{ctx.ident} "$@"
else
    compdef _{ctx.ident} {bash_quote(ctx.name)}
fi
"""


def _generate_filters(ctx: ScriptContext, values: str) -> str:
    """Extension and directory filtering, `values` names the array of raw candidates."""
    return f"""    if [ $((directive & {ctx.filter_file_ext})) -ne 0 ]; then
        local filteringCmd='_files' filter
        for filter in ${{{values}[@]}}; do
            if [ "${{filter[1]}}" != '*' ]; then
                filter="\\*.${{filter#.}}"
            fi
            filteringCmd+=" -g $filter"
        done
        __{ctx.ident}_debug "File filtering command: $filteringCmd"
        _arguments '*:filename:'"$filteringCmd"
        return
    fi

    if [ $((directive & {ctx.filter_dirs})) -ne 0 ]; then
        local subdir="${{{values}[1]}}"
        if [ -n "$subdir" ]; then
            __{ctx.ident}_debug "Listing directories in $subdir"
            pushd "${{subdir}}" >/dev/null 2>&1
        fi
        _arguments '*:dirname:_files -/'
        if [ -n "$subdir" ]; then
            popd >/dev/null 2>&1
        fi
        return
    fi"""


def generate_zsh(root: Command, include_descriptions: bool = True) -> str:
    """Generate the zsh completion script.

    Descriptions come after a tab in the protocol; `_describe` wants a colon,
    so colons in the values are escaped first.

    Args:
        root: The root of the command tree
        include_descriptions: Ask the program for descriptions

    Returns:
        The zsh completion script content
    """
    ctx = build_context(root, include_descriptions)
    return f"""{_generate_header(ctx, "zsh")}

_{ctx.ident}()
{{
    local out directive flagPrefix comp keepOrder
    local -a completions raw values

    __{ctx.ident}_debug "\\n========= starting completion logic =========="

    # when completing "--flag=<TAB>", the candidates must be prefixed with the flag
    setopt local_options BASH_REMATCH
    if [[ "${{words[-1]}}" =~ '-.*=' ]]; then
        flagPrefix=${{BASH_REMATCH}}
    fi

    __{ctx.ident}_request

    if [ $((directive & {ctx.error})) -ne 0 ]; then
        __{ctx.ident}_debug "Completion received error. Ignoring completions."
        return
    fi

    while IFS='\\n' read -r comp; do
        if [ -n "$comp" ]; then
            raw+=${{comp}}
        fi
    done < <(printf "%s\\n" "${{out[@]}}")

{_generate_filters(ctx, "raw")}

    if [ $((directive & {ctx.keep_order})) -ne 0 ]; then
        keepOrder=-V
    fi

    for comp in ${{raw[@]}}; do
        values+=("${{comp%%$'\\t'*}}")
        # _describe uses a colon between value and description
        comp=${{comp//:/\\\\:}}
        local tab=$(printf '\\t')
        comp=${{comp//$tab/:}}
        __{ctx.ident}_debug "Adding completion: ${{comp}}"
        completions+=${{comp}}
    done

    if [ ${{#values[@]}} -eq 0 ]; then
        if [ $((directive & {ctx.no_file_comp})) -ne 0 ]; then
            __{ctx.ident}_debug "deactivating file completion"
        else
            __{ctx.ident}_debug "activating file completion"
            _arguments '*:filename:_files'
        fi
    elif [ $((directive & {ctx.no_space})) -ne 0 ] && [ ${{#values[@]}} -eq 1 ]; then
        __{ctx.ident}_debug "Activating nospace."
        # a single completion is inserted without its description
        compadd -S '' -p "${{flagPrefix}}" "${{values[1]}}"
    elif [ -n "$flagPrefix" ]; then
        # compadd hides the flag prefix from the list, descriptions are dropped
        __{ctx.ident}_debug "Calling: compadd -p ${{flagPrefix}}"
        compadd $keepOrder -p "${{flagPrefix}}" -a values
    else
        _describe $keepOrder "completions" completions
    fi
}}

{_generate_footer(ctx)}"""


def generate_zsh_v1(root: Command, include_descriptions: bool = True) -> str:  # noqa: ARG001  # pylint: disable=unused-argument
    """Generate the legacy zsh completion script.

    Args:
        root: The root of the command tree
        include_descriptions: Ignored, this script never shows descriptions

    Returns:
        The zsh completion script content
    """
    ctx = build_context(root, include_descriptions=False)
    return f"""{_generate_header(ctx, "zsh-v1")}

_{ctx.ident}()
{{
    local out directive comp
    local -a completions
    local -a compaddOpts

    __{ctx.ident}_request

    if [ $((directive & {ctx.error})) -ne 0 ]; then
        __{ctx.ident}_debug "Completion received error. Ignoring completions."
        return
    fi

    while IFS='\\n' read -r comp; do
        if [ -n "$comp" ]; then
            completions+=${{comp}}
        fi
    done < <(printf "%s\\n" "${{out[@]}}")

{_generate_filters(ctx, "completions")}

    if [ ${{#completions[@]}} -eq 0 ]; then
        if [ $((directive & {ctx.no_file_comp})) -eq 0 ]; then
            __{ctx.ident}_debug "activating file completion"
            _files
        fi
        return
    fi

    if [ $((directive & {ctx.no_space})) -ne 0 ] && [ ${{#completions[@]}} -eq 1 ]; then
        compaddOpts+=(-S '')
    fi
    if [ $((directive & {ctx.keep_order})) -ne 0 ]; then
        compaddOpts+=(-V unsorted)
    fi
    compadd "${{compaddOpts[@]}}" -a completions
}}

{_generate_footer(ctx)}"""
