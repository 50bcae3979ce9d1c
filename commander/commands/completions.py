"""
sc completions - Print a shell completion script.
"""

import argparse

from commander.lib.completion import generate_completion


def cmd_completions(args, parser: argparse.ArgumentParser) -> int:
    """Print the completion script for a shell."""
    try:
        script = generate_completion(args.shell, parser)
    except ValueError as e:
        print(f"ERROR: {e}")
        return 2

    print(script)
    return 0
