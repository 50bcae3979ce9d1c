"""
sc env - Show and change persisted settings.
"""

from pathlib import Path

from commander.lib import validate
from commander.lib.config import (
    DEFAULTS,
    SETTING_ATTRS,
    get_settings_path,
    load_settings,
    reset_setting,
    save_setting,
)

# argparse dest -> setting key
OPTION_KEYS = {
    "git_name": "GIT_NAME",
    "git_email": "GIT_EMAIL",
    "git_dir": "GIT_DIR",
    "git_ignore_url": "GIT_IGNORE_URL",
}


def _selected_keys(args) -> list[str]:
    return [key for dest, key in OPTION_KEYS.items() if getattr(args, dest, None)]


def cmd_env_show(args, app_dir: Path) -> int:
    """Print settings; all of them unless specific ones are selected."""
    try:
        settings = load_settings(app_dir)
    except (ValueError, validate.ValidationError) as e:
        print(f"ERROR: Invalid settings file: {e}")
        return 2

    keys = _selected_keys(args) or list(SETTING_ATTRS)
    for key in keys:
        print(f"{key}={getattr(settings, SETTING_ATTRS[key])}")
    return 0


def cmd_env_set(args, app_dir: Path) -> int:
    """Persist the settings given as options."""
    updates = {key: getattr(args, dest) for dest, key in OPTION_KEYS.items() if getattr(args, dest) is not None}
    if not updates:
        print("Nothing to set. Use --git-name, --git-email, --git-dir or --git-ignore-url.")
        return 2

    for key, value in updates.items():
        try:
            save_setting(key, value, app_dir)
        except (ValueError, validate.ValidationError) as e:
            print(f"ERROR: Cannot set {key}: {e}")
            return 2
        print(f"{key} set to: {value}")
    return 0


def cmd_env_reset(args, app_dir: Path) -> int:
    """Reset selected settings (all when none selected) to their defaults."""
    keys = _selected_keys(args) or list(DEFAULTS)
    for key in keys:
        reset_setting(key, app_dir)
        print(f"{key} reset to: {DEFAULTS[key]}")
    return 0


def cmd_env_files(args, app_dir: Path) -> int:
    """Print where commander keeps its files."""
    print(f"App directory:  {app_dir}")
    print(f"Settings file:  {get_settings_path(app_dir)}")
    return 0
