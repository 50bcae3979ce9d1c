#!/usr/bin/env python3
"""sc CLI entrypoint."""

import sys
import argparse
import logging
from pathlib import Path

from commander.lib import validate
from commander.lib.config import build_context, get_app_dir, load_settings
from commander.commands import completions as cmd_completions_module
from commander.commands import env as cmd_env_module
from commander.commands import git as cmd_git_module
from commander.commands import welcome as cmd_welcome_module
from commander.lib.completion import SHELLS


def setup_logging(verbose: bool) -> None:
    """Log to stderr so progress lines on stdout stay intact."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def get_settings_and_context(args):
    """Load settings and build the RepositoryContext for this invocation."""
    try:
        settings = load_settings(get_app_dir())
    except (ValueError, validate.ValidationError) as e:
        print(f"ERROR: Invalid settings file: {e}")
        print("Fix it with 'sc env set' or 'sc env reset'.")
        sys.exit(2)
    return settings, build_context(settings, Path.cwd())


def git_command(handler):
    """Adapt a git command handler to the argparse func signature."""
    def run(args):
        settings, context = get_settings_and_context(args)
        return handler(args, settings, context)
    run.__doc__ = handler.__doc__
    return run


def env_command(handler):
    """Adapt an env command handler to the argparse func signature."""
    def run(args):
        return handler(args, get_app_dir())
    run.__doc__ = handler.__doc__
    return run


cmd_status = git_command(cmd_git_module.cmd_status)
cmd_update = git_command(cmd_git_module.cmd_update)
cmd_clone = git_command(cmd_git_module.cmd_clone)
cmd_list = git_command(cmd_git_module.cmd_list)
cmd_new = git_command(cmd_git_module.cmd_new)
cmd_ignore_list = git_command(cmd_git_module.cmd_ignore_list)
cmd_ignore_fetch = git_command(cmd_git_module.cmd_ignore_fetch)
cmd_welcome = git_command(cmd_welcome_module.cmd_welcome)

cmd_env_show = env_command(cmd_env_module.cmd_env_show)
cmd_env_set = env_command(cmd_env_module.cmd_env_set)
cmd_env_reset = env_command(cmd_env_module.cmd_env_reset)
cmd_env_files = env_command(cmd_env_module.cmd_env_files)


def cmd_completions(args):
    """Print the completion script for a shell."""
    return cmd_completions_module.cmd_completions(args, build_parser())


def _add_setting_flags(parser, help_prefix: str) -> None:
    parser.add_argument('--git-name', action='store_true', help=f'{help_prefix} the commit author name')
    parser.add_argument('--git-email', action='store_true', help=f'{help_prefix} the commit author email')
    parser.add_argument('--git-dir', action='store_true', help=f'{help_prefix} the clone directory')
    parser.add_argument('--git-ignore-url', action='store_true', help=f'{help_prefix} the .gitignore API URL')


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog='sc', description='Shell commander: personal productivity CLI')
    parser.add_argument('--verbose', '-v', action='store_true', help='Enable debug logging on stderr')
    parser.add_argument('--no-color', action='store_true', help='Disable colored output')
    subparsers = parser.add_subparsers(dest='command', required=True)

    # sc git
    p_git = subparsers.add_parser('git', help='Git utilities')
    git_sub = p_git.add_subparsers(dest='git_cmd', required=True)

    # sc git status
    p_status = git_sub.add_parser('status', help='Show working tree status')
    p_status.add_argument('paths', nargs='*', help='Limit to these path specs')
    p_status.add_argument('--long', '-l', action='store_true', help='Long format with section headers')
    p_status.add_argument('--branch', '-b', action='store_true', help='Show the branch header')
    p_status.add_argument('--ignored', action='store_true', help='Show ignored files too')
    p_status.set_defaults(func=cmd_status)

    # sc git update
    p_update = git_sub.add_parser(
        'update',
        aliases=['add-commit'],
        help='Stage changes and commit them',
        description=(
            "Stage the given paths ('.' if none) and commit them. The first change note "
            "becomes the commit headline; without notes a timestamp headline is used."
        ),
    )
    p_update.add_argument('--paths', '-p', nargs='+', help='Path specs to stage (default: .)')
    p_update.add_argument('--changes', '-c', nargs='*', help='Change notes (comma separated values are split)')
    p_update.add_argument('--update-only', '-u', action='store_true',
                          help='Only stage tracked files that are modified (like git add --update)')
    p_update.add_argument('--dry-run', action='store_true', help='Stage and print the message, do not commit')
    p_update.set_defaults(func=cmd_update)

    # sc git clone
    p_clone = git_sub.add_parser('clone', help='Clone a repository')
    p_clone.add_argument('repo', help='Repository URL (https or ssh) or owner/repo shorthand')
    p_clone.add_argument('dir', nargs='?', help='Parent directory (default: <git_dir>/<owner>)')
    p_clone.set_defaults(func=cmd_clone)

    # sc git list
    p_list = git_sub.add_parser('list', help='List cloned repositories')
    p_list.add_argument('--json', action='store_true', help='Print as JSON')
    p_list.set_defaults(func=cmd_list)

    # sc git new
    p_new = git_sub.add_parser('new', help='Create a new repository')
    p_new.add_argument('name', help='Repository name')
    p_new.add_argument('ignores', nargs='*', help='.gitignore templates to include')
    p_new.set_defaults(func=cmd_new)

    # sc git ignore
    p_ignore = git_sub.add_parser('ignore', help='.gitignore templates')
    ignore_sub = p_ignore.add_subparsers(dest='ignore_cmd', required=True)

    # sc git ignore list
    p_ignore_list = ignore_sub.add_parser('list', help='List available templates')
    p_ignore_list.add_argument('name', nargs='?', help='Only show templates containing this text')
    p_ignore_list.set_defaults(func=cmd_ignore_list)

    # sc git ignore fetch
    p_ignore_fetch = ignore_sub.add_parser('fetch', help='Build a .gitignore from templates')
    p_ignore_fetch.add_argument('templates', nargs='*', help='Template names')
    p_ignore_fetch.add_argument('--create-file', action='store_true', help='Write ./.gitignore instead of printing')
    p_ignore_fetch.set_defaults(func=cmd_ignore_fetch)

    # sc env
    p_env = subparsers.add_parser('env', help='Show and change settings')
    p_env.set_defaults(func=cmd_env_show, git_name=False, git_email=False, git_dir=False, git_ignore_url=False)
    env_sub = p_env.add_subparsers(dest='env_cmd')

    # sc env show
    p_env_show = env_sub.add_parser('show', help='Show settings')
    _add_setting_flags(p_env_show, 'Show')
    p_env_show.set_defaults(func=cmd_env_show)

    # sc env set
    p_env_set = env_sub.add_parser('set', help='Change settings')
    p_env_set.add_argument('--git-name', help='Commit author name')
    p_env_set.add_argument('--git-email', help='Commit author email')
    p_env_set.add_argument('--git-dir', help='Directory repositories are cloned into')
    p_env_set.add_argument('--git-ignore-url', help='Base URL of the .gitignore API')
    p_env_set.set_defaults(func=cmd_env_set)

    # sc env reset
    p_env_reset = env_sub.add_parser('reset', help='Reset settings to defaults (all if none selected)')
    _add_setting_flags(p_env_reset, 'Reset')
    p_env_reset.set_defaults(func=cmd_env_reset)

    # sc env files
    p_env_files = env_sub.add_parser('files', help="Show commander's file locations")
    p_env_files.set_defaults(func=cmd_env_files)

    # sc welcome
    p_welcome = subparsers.add_parser('welcome', help='Greet the configured author')
    p_welcome.set_defaults(func=cmd_welcome)

    # sc completions
    p_completions = subparsers.add_parser('completions', help='Print a shell completion script')
    p_completions.add_argument('shell', choices=SHELLS, help='Target shell')
    p_completions.set_defaults(func=cmd_completions)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.verbose)
    return args.func(args)


if __name__ == '__main__':
    sys.exit(main())
