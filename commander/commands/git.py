"""
sc git - Repository status, staging/committing, cloning and .gitignore helpers.
"""

import json
import logging
from datetime import datetime
from pathlib import Path

from rich.console import Console
from rich.markup import escape

from commander.git import (
    GitError,
    CloneProgress,
    StagingMode,
    branch_header,
    classify_all,
    clone_repository,
    compose_from_entries,
    create_commit,
    expand_clone_url,
    get_current_branch,
    get_status_records,
    init_repository,
    long_status,
    open_repository,
    resolve_clone_target,
    short_status,
    stage_paths,
)
from commander.lib.config import RepositoryContext, Settings
from commander.lib.ignore import IgnoreFetchError, fetch_ignores, list_templates
from commander.lib.repos import list_repositories

logger = logging.getLogger(__name__)

CODE_STYLES = {
    "?": "red",
    "!": "dim",
}


def make_console(no_color: bool = False) -> Console:
    return Console(highlight=False, no_color=no_color, soft_wrap=True)


def printable(text: str) -> str:
    """Replace undecodable file name bytes so the text can be written to a terminal."""
    return text.encode("utf-8", "surrogateescape").decode("utf-8", "replace")


def colorize_status_line(line: str) -> str:
    """Rich markup for a short status line: index column green, worktree column red."""
    index_code, worktree_code, rest = line[0], line[1], escape(printable(line[2:]))
    index_style = CODE_STYLES.get(index_code, "green")
    worktree_style = CODE_STYLES.get(worktree_code, "red")
    index_text = f"[{index_style}]{index_code}[/{index_style}]" if index_code != " " else " "
    worktree_text = f"[{worktree_style}]{worktree_code}[/{worktree_style}]" if worktree_code != " " else " "
    return f"{index_text}{worktree_text}{rest}"


def split_changes(raw: list[str] | None) -> list[str]:
    """Flatten -c values, splitting each on commas. Empty items are kept."""
    changes = []
    for value in raw or []:
        changes.extend(part.strip() for part in value.split(","))
    return changes


def cmd_status(args, settings: Settings, context: RepositoryContext) -> int:
    """Show working tree status in short or long form."""
    try:
        worktree = open_repository(context.workdir)
        records = get_status_records(worktree, args.paths or None, include_ignored=args.ignored)
    except GitError as e:
        print(f"ERROR: {e}")
        return 1

    console = make_console(args.no_color)
    if args.branch or args.long:
        console.print(escape(branch_header(get_current_branch(worktree), args.long)))

    if args.long:
        for line in long_status(records):
            console.print(escape(printable(line)))
    else:
        for line in short_status(records):
            console.print(colorize_status_line(line))
    return 0


def cmd_update(args, settings: Settings, context: RepositoryContext) -> int:
    """Stage paths and commit them with a generated message."""
    mode = StagingMode.UPDATE_ONLY if args.update_only else StagingMode.ADD_ALL

    try:
        worktree = open_repository(context.workdir)
    except GitError as e:
        print(f"ERROR: {e}")
        return 1

    try:
        staged = stage_paths(worktree, args.paths, mode, cwd=context.workdir)
    except GitError as e:
        print(f"ERROR: Staging failed: {e}")
        return 1
    logger.debug(f"Matched {len(staged.attempted_paths)} path(s), staged: {staged.staged_paths}")
    print(f"Staged {len(staged.staged_paths)} file(s); {staged.affected_count} with changes.")

    try:
        entries = classify_all(get_status_records(worktree))
    except GitError as e:
        print(f"ERROR: {e}")
        return 1

    message = compose_from_entries(split_changes(args.changes), datetime.now(), entries)
    text = message.text()
    print(f"Commit Message Generated: \n\n{printable(text)}")

    if args.dry_run:
        print("Dry run: no commit created (changes remain staged).")
        return 0

    try:
        commit_oid = create_commit(worktree, text, context)
    except GitError as e:
        print(f"ERROR: {e}")
        print("Changes remain staged; fix the problem and commit again.")
        return 1

    print(f"Commit was successful. [{commit_oid[:7]}]")
    return 0


def cmd_clone(args, settings: Settings, context: RepositoryContext) -> int:
    """Clone a repository into the git directory with a live progress line."""
    url = expand_clone_url(args.repo)
    dest_dir = Path(args.dir) if args.dir else None
    try:
        dest = resolve_clone_target(url, context.git_dir, dest_dir)
    except ValueError as e:
        print(f"ERROR: {e}")
        return 2

    print(f"Cloning into: {dest}")
    progress = CloneProgress()
    try:
        clone_repository(url, dest, progress)
    except GitError as e:
        progress.finish()
        print(f"ERROR: {e}")
        return 1
    progress.finish()

    print(f"Cloned {url}")
    return 0


def cmd_list(args, settings: Settings, context: RepositoryContext) -> int:
    """List repositories in the git directory."""
    try:
        repos = list_repositories(context.git_dir)
    except FileNotFoundError as e:
        print(f"ERROR: {e}")
        return 1

    if args.json:
        print(json.dumps([str(r) for r in repos], indent=2))
        return 0

    print(f"Listing repos in: {context.git_dir}")
    print("Directories:")
    for repo in repos:
        print(f"  {repo}")
    return 0


def cmd_new(args, settings: Settings, context: RepositoryContext) -> int:
    """Create a repository at <git_dir>/<author>/<name>, optionally with a .gitignore."""
    path = context.git_dir / context.author_name / args.name
    print(f"Creating new repo: {path}")

    ignore_text = ""
    if args.ignores:
        try:
            ignore_text = fetch_ignores(args.ignores, settings.git_ignore_url)
        except IgnoreFetchError as e:
            print(f"ERROR: {e}")
            return 1

    try:
        worktree = init_repository(path)
    except GitError as e:
        print(f"ERROR: Failed to create the repo: {e}")
        return 1

    if ignore_text:
        (worktree / ".gitignore").write_text(ignore_text)
        print(f"Wrote .gitignore ({', '.join(args.ignores)})")

    print(f"Repo created at: {worktree}")
    return 0


def cmd_ignore_list(args, settings: Settings, context: RepositoryContext) -> int:
    """List available .gitignore templates."""
    try:
        names = list_templates(settings.git_ignore_url, args.name)
    except IgnoreFetchError as e:
        print(f"ERROR: {e}")
        return 1

    for name in names:
        print(name)
    return 0


def cmd_ignore_fetch(args, settings: Settings, context: RepositoryContext) -> int:
    """Print a .gitignore built from templates, or write it with --create-file."""
    if not args.templates:
        print("ERROR: No ignore templates provided.")
        return 2

    try:
        text = fetch_ignores(args.templates, settings.git_ignore_url)
    except IgnoreFetchError as e:
        print(f"ERROR: {e}")
        return 1

    if args.create_file:
        target = context.workdir / ".gitignore"
        target.write_text(text)
        print(f"Wrote {target}")
    else:
        print(text)
    return 0
