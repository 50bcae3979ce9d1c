"""
Safe .env file parser and writer.

Parses KEY=value files without shell execution.
Rejects dangerous patterns that could enable injection.
"""

import re
from pathlib import Path

FORBIDDEN_PATTERNS = [
    r'`',           # backticks
    r'\$\(',        # command substitution
    r'\$\{',        # variable expansion
    r';',           # command chaining
    r'&&',          # AND chaining
    r'\|\|',        # OR chaining
    r'\|',          # pipe
]

KEY_PATTERN = re.compile(r'^[A-Z][A-Z0-9_]*$')


def check_value(value: str) -> None:
    """Raise ValueError if value contains a forbidden pattern."""
    for pattern in FORBIDDEN_PATTERNS:
        if re.search(pattern, value):
            raise ValueError(f"Forbidden pattern in value: {value!r}")
    if '"' in value or "\n" in value:
        raise ValueError(f"Quotes and newlines are not allowed in values: {value!r}")


def load_env(filepath: str) -> dict:
    """
    Parse env file safely, return dict.

    Raises:
        FileNotFoundError: if file doesn't exist
        ValueError: if syntax invalid or forbidden pattern found
    """
    result = {}
    path = Path(filepath)

    if not path.exists():
        raise FileNotFoundError(f"Env file not found: {filepath}")

    for lineno, line in enumerate(path.read_text().splitlines(), 1):
        line = line.strip()

        # Skip empty and comments
        if not line or line.startswith('#'):
            continue

        # Must have =
        if '=' not in line:
            raise ValueError(f"Line {lineno}: Invalid syntax (no '=')")

        key, _, value = line.partition('=')
        key = key.strip()
        value = value.strip()

        # Validate key
        if not KEY_PATTERN.match(key):
            raise ValueError(f"Line {lineno}: Invalid key '{key}'")

        # Strip quotes if present
        if len(value) >= 2:
            if (value.startswith('"') and value.endswith('"')) or \
               (value.startswith("'") and value.endswith("'")):
                value = value[1:-1]

        # Check for forbidden patterns
        for pattern in FORBIDDEN_PATTERNS:
            if re.search(pattern, value):
                raise ValueError(f"Line {lineno}: Forbidden pattern in value")

        result[key] = value

    return result


def set_key(filepath: str, key: str, value: str) -> None:
    """Set KEY="value" in an env file, replacing an existing line or appending.

    Creates the file (and parent directories) if needed.
    """
    if not KEY_PATTERN.match(key):
        raise ValueError(f"Invalid key '{key}'")
    check_value(value)

    path = Path(filepath)
    lines = path.read_text().splitlines() if path.exists() else []
    new_line = f'{key}="{value}"'

    for i, line in enumerate(lines):
        if line.strip().startswith(f"{key}="):
            lines[i] = new_line
            break
    else:
        lines.append(new_line)

    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("\n".join(lines) + "\n")


def unset_key(filepath: str, key: str) -> bool:
    """Remove KEY from an env file. Returns True if a line was removed."""
    path = Path(filepath)
    if not path.exists():
        return False

    lines = path.read_text().splitlines()
    kept = [line for line in lines if not line.strip().startswith(f"{key}=")]
    if len(kept) == len(lines):
        return False

    path.write_text("\n".join(kept) + "\n" if kept else "")
    return True
