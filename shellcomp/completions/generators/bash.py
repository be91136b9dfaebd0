"""Bash completion script generator.

The script asks the program for completions only when the tree registers
completion functions. Otherwise everything is known at generation time and the
tree is embedded as associative arrays (bash >= 4).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from .context import build_context
from .escaping import bash_quote

if TYPE_CHECKING:
    from ...commands.models import Command
    from .context import ScriptContext

__all__ = ["generate_bash"]


def _assoc(name: str, table: dict[str, list[str]]) -> str:
    """Render a `local -A` declaration."""
    lines = [f"    local -A {name}=("]
    lines.extend(f"        [{bash_quote(key)}]={bash_quote(' '.join(values))}" for key, values in table.items())
    lines.append("    )")
    return "\n".join(lines)


def _generate_tables(ctx: ScriptContext) -> str:
    tables = ctx.tables
    children = {key: [path] for key, path in tables.children.items()}
    return "\n".join(
        [
            _assoc("children", children),
            _assoc("subcommands", tables.subcommands),
            _assoc("flags", tables.flags),
            _assoc("value_flags", tables.value_flags),
            _assoc("choices", tables.choices),
            _assoc("valid_args", tables.valid_args),
        ]
    )


def _generate_dynamic(ctx: ScriptContext) -> str:
    """Function asking the program for completions."""
    return f"""__{ctx.ident}_get_completions()
{{
    local requestComp out directive comp tab=$'\\t'
    local -a completions=()

    requestComp="${{words[0]}} {ctx.request_cmd} ${{words[*]:1:cword}}"
    if [[ -z ${{cur}} ]]; then
        # the cursor follows a space, the partial token is empty
        requestComp="${{requestComp}} ''"
    fi
    __{ctx.ident}_debug "About to call: eval ${{requestComp}}"

    out=$(eval "${{requestComp}}" 2>/dev/null)
    if [[ ${{out##*:}} =~ ^[0-9]+$ ]]; then
        directive=${{out##*:}}
        out=${{out%:*}}
    else
        __{ctx.ident}_debug "No directive found, using 0"
        directive=0
    fi
    __{ctx.ident}_debug "directive: ${{directive}}, completions: ${{out}}"

    if (( (directive & {ctx.error}) != 0 )); then
        __{ctx.ident}_debug "Completion received error, ignoring completions"
        compopt +o default 2>/dev/null
        return
    fi

    while IFS='' read -r comp; do
        if [[ -n ${{comp}} ]]; then
            completions+=("${{comp%%$tab*}}")
        fi
    done <<< "${{out}}"

    if (( (directive & {ctx.filter_file_ext}) != 0 )); then
        local ext file
        compopt -o filenames 2>/dev/null
        compopt +o default 2>/dev/null
        while IFS='' read -r file; do
            if [[ -d ${{file}} ]]; then
                COMPREPLY+=("${{file}}")
                continue
            fi
            for ext in "${{completions[@]}}"; do
                if [[ ${{file}} == *."${{ext#.}}" ]]; then
                    COMPREPLY+=("${{file}}")
                    break
                fi
            done
        done < <(compgen -f -- "${{cur}}")
        return
    fi

    if (( (directive & {ctx.filter_dirs}) != 0 )); then
        local subdir=${{completions[0]-}}
        compopt -o filenames 2>/dev/null
        compopt +o default 2>/dev/null
        if [[ -n ${{subdir}} ]]; then
            __{ctx.ident}_debug "Listing directories in ${{subdir}}"
            mapfile -t COMPREPLY < <(cd -- "${{subdir}}" 2>/dev/null && compgen -d -- "${{cur}}")
        else
            mapfile -t COMPREPLY < <(compgen -d -- "${{cur}}")
        fi
        return
    fi

    if (( ${{#completions[@]}} == 0 )); then
        if (( (directive & {ctx.no_file_comp}) != 0 )); then
            __{ctx.ident}_debug "Deactivating file completion"
            compopt +o default 2>/dev/null
        fi
        return
    fi

    COMPREPLY=("${{completions[@]}}")
    if (( (directive & {ctx.no_space}) != 0 && ${{#COMPREPLY[@]}} == 1 )); then
        __{ctx.ident}_debug "Activating nospace"
        compopt -o nospace 2>/dev/null
    fi
    if (( (directive & {ctx.keep_order}) != 0 )); then
        compopt -o nosort 2>/dev/null
    fi
    if declare -F __ltrim_colon_completions >/dev/null 2>&1; then
        __ltrim_colon_completions "${{cur}}"
    fi
}}"""


def _generate_static(ctx: ScriptContext) -> str:
    """Function completing from the embedded tables."""
    return f"""__{ctx.ident}_static_completions()
{{
{_generate_tables(ctx)}
    local path={bash_quote(ctx.name)} word i skip=0 nargs=0 dashdash=0 flag candidates

    for (( i=1; i < cword; i++ )); do
        word=${{words[i]}}
        if (( skip )); then
            skip=0
            continue
        fi
        if (( ! dashdash )); then
            if [[ ${{word}} == -- ]]; then
                dashdash=1
                continue
            fi
            if [[ ${{word}} == -* ]]; then
                if [[ ${{word}} != *=* && " ${{value_flags[$path]-}} " == *" ${{word}} "* ]]; then
                    skip=1
                fi
                continue
            fi
            if (( nargs == 0 )) && [[ -n ${{children["$path $word"]-}} ]]; then
                path=${{children["$path $word"]}}
                continue
            fi
        fi
        nargs=$((nargs + 1))
    done
    __{ctx.ident}_debug "command: ${{path}}, args: ${{nargs}}"

    if (( ! dashdash )); then
        if [[ ${{cur}} == -*=* ]]; then
            flag=${{cur%%=*}}
            if [[ -n ${{choices["$path $flag"]-}} ]]; then
                compopt +o default 2>/dev/null
                mapfile -t COMPREPLY < <(compgen -W "${{choices["$path $flag"]}}" -- "${{cur#*=}}")
            fi
            return
        fi
        if (( skip )); then
            if [[ -n ${{choices["$path $prev"]-}} ]]; then
                compopt +o default 2>/dev/null
                mapfile -t COMPREPLY < <(compgen -W "${{choices["$path $prev"]}}" -- "${{cur}}")
            fi
            return
        fi
        if [[ ${{cur}} == -* ]]; then
            compopt +o default 2>/dev/null
            mapfile -t COMPREPLY < <(compgen -W "${{flags[$path]-}}" -- "${{cur}}")
            return
        fi
    fi

    candidates=${{valid_args[$path]-}}
    if (( nargs == 0 && ! dashdash )); then
        candidates="${{subcommands[$path]-}} ${{candidates}}"
    fi
    if [[ -n ${{candidates// /}} ]]; then
        compopt +o default 2>/dev/null
        mapfile -t COMPREPLY < <(compgen -W "${{candidates}}" -- "${{cur}}")
    fi
}}"""


def generate_bash(root: Command, include_descriptions: bool = True) -> str:  # noqa: ARG001  # pylint: disable=unused-argument
    """Generate the bash completion script.

    Bash can't show descriptions: the no-description request is always used.

    Args:
        root: The root of the command tree
        include_descriptions: Ignored

    Returns:
        The bash completion script content
    """
    ctx = build_context(root, include_descriptions=False)
    marker = "    local has_completion_function=1" if ctx.has_completion_function else '    local has_completion_function=""'

    return f"""# bash completion for {ctx.name} -*- shell-script -*-
# Generated by: {ctx.name} completion bash

__{ctx.ident}_debug()
{{
    if [[ -n ${{{ctx.debug_env}:-}} ]]; then
        echo "$*" >> "${{{ctx.debug_env}}}"
    fi
}}

# Used when the bash-completion package is not installed
__{ctx.ident}_init_completion()
{{
    COMPREPLY=()
    cur="${{COMP_WORDS[COMP_CWORD]}}"
    prev="${{COMP_WORDS[COMP_CWORD-1]}}"
    words=("${{COMP_WORDS[@]}}")
    cword=${{COMP_CWORD}}
}}

{_generate_dynamic(ctx)}

{_generate_static(ctx)}

__start_{ctx.ident}()
{{
    local cur prev words cword
    COMPREPLY=()
    if declare -F _get_comp_words_by_ref >/dev/null 2>&1; then
        _get_comp_words_by_ref -n =: cur prev words cword
    else
        __{ctx.ident}_init_completion
    fi
    __{ctx.ident}_debug "========= starting completion logic =========="
    __{ctx.ident}_debug "cur: ${{cur}}, cword: ${{cword}}, words: ${{words[*]}}"

{marker}
    if [[ -n ${{has_completion_function}} ]]; then
        __{ctx.ident}_get_completions
    else
        __{ctx.ident}_static_completions
    fi
}}

complete -o default -F __start_{ctx.ident} {bash_quote(ctx.name)}
"""
