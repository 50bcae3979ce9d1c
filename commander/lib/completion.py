"""
Shell completion script generation for the sc CLI.

The scripts are rendered from the argparse parser, so every subcommand and
flag the parser knows is completed without editing the templates.
"""

import argparse

SHELLS = ('bash', 'zsh', 'fish')

BASH_COMPLETION = '''
_sc_completions() {
    local cur="${COMP_WORDS[COMP_CWORD]}"
    local cmd_path="sc"
    local word i

    # Walk the words typed so far to find the deepest known command
    for ((i = 1; i < COMP_CWORD; i++)); do
        word="${COMP_WORDS[i]}"
        [[ "$word" == -* ]] && continue
        case "$cmd_path $word" in
            %(paths)s) cmd_path="$cmd_path $word" ;;
        esac
    done

    local candidates=""
    case "$cmd_path" in
%(cases)s
    esac
    COMPREPLY=($(compgen -W "$candidates" -- "$cur"))
}

complete -F _sc_completions sc
'''

ZSH_COMPLETION = '''
#compdef sc

_sc() {
    local cmd_path="sc"
    local word

    for word in ${words[2,CURRENT-1]}; do
        [[ "$word" == -* ]] && continue
        case "$cmd_path $word" in
            %(paths)s) cmd_path="$cmd_path $word" ;;
        esac
    done

    local -a candidates
    case "$cmd_path" in
%(cases)s
    esac
    compadd -a candidates
}

_sc "$@"
'''

FISH_COMPLETION = '''
# sc fish completion
function __sc_path
    set -l cmd_path sc
    set -l typed (commandline -opc)
    set -e typed[1]
    for word in $typed
        string match -q -- '-*' $word; and continue
        if contains -- "$cmd_path $word" %(paths)s
            set cmd_path "$cmd_path $word"
        end
    end
    echo $cmd_path
end

function __sc_path_is
    test (__sc_path) = "$argv[1]"
end

complete -c sc -f
%(lines)s
'''


def command_tree(parser: argparse.ArgumentParser, path: str = 'sc') -> dict[str, list[str]]:
    """
    Map each command path to the words that may follow it.

    Returns:
        {'sc': ['--verbose', ..., 'git', 'env'], 'sc git': [...], ...}
        Subcommand aliases get their own entry.
    """
    words: list[str] = []
    tree = {path: words}
    for action in parser._actions:
        if isinstance(action, argparse._SubParsersAction):
            for name, subparser in action.choices.items():
                words.append(name)
                tree.update(command_tree(subparser, f'{path} {name}'))
        elif action.option_strings:
            words.extend(action.option_strings)
        elif action.choices:
            words.extend(action.choices)
    return tree


def _subcommand_paths(tree: dict[str, list[str]]) -> list[str]:
    return [p for p in tree if p != 'sc']


def _bash(tree: dict[str, list[str]]) -> str:
    paths = '|'.join(f'"{p}"' for p in _subcommand_paths(tree))
    cases = '\n'.join(
        f'        "{p}") candidates="{" ".join(words)}" ;;' for p, words in tree.items()
    )
    return BASH_COMPLETION % {'paths': paths, 'cases': cases}


def _zsh(tree: dict[str, list[str]]) -> str:
    paths = '|'.join(f'"{p}"' for p in _subcommand_paths(tree))
    cases = '\n'.join(
        f'        "{p}") candidates=({" ".join(words)}) ;;' for p, words in tree.items()
    )
    return ZSH_COMPLETION % {'paths': paths, 'cases': cases}


def _fish(tree: dict[str, list[str]]) -> str:
    paths = ' '.join(f"'{p}'" for p in _subcommand_paths(tree))
    lines = []
    for p, words in tree.items():
        condition = f'-n \'__sc_path_is "{p}"\''
        for word in words:
            if word.startswith('--'):
                lines.append(f'complete -c sc {condition} -l {word[2:]}')
            elif word.startswith('-'):
                lines.append(f'complete -c sc {condition} -s {word[1:]}')
        names = [w for w in words if not w.startswith('-')]
        if names:
            lines.append(f"complete -c sc {condition} -a '{' '.join(names)}'")
    return FISH_COMPLETION % {'paths': paths, 'lines': '\n'.join(lines)}


def generate_completion(shell: str, parser: argparse.ArgumentParser) -> str:
    """
    Generate shell completion script.

    Args:
        shell: 'bash', 'zsh', or 'fish'
        parser: The sc argument parser

    Returns:
        Completion script content
    """
    tree = command_tree(parser)
    if shell == 'bash':
        return _bash(tree).strip()
    elif shell == 'zsh':
        return _zsh(tree).strip()
    elif shell == 'fish':
        return _fish(tree).strip()
    else:
        raise ValueError(f"Unknown shell: {shell}")
