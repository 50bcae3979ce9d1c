"""
Configuration loaders for commander.

Settings are stored as KEY="value" lines in settings.env inside the
application directory ($COMMANDER_HOME, default ~/.config/commander).
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from . import envparse
from . import validate

logger = logging.getLogger(__name__)

APP_DIR_ENV = "COMMANDER_HOME"
SETTINGS_FILE = "settings.env"

DEFAULTS = {
    "GIT_NAME": "Author",
    "GIT_EMAIL": "user.name@email.com",
    "GIT_DIR": "~/Code",
    "GIT_IGNORE_URL": "https://www.toptal.com/developers/gitignore/api/",
}

# Setting key -> attribute name on Settings, in display order
SETTING_ATTRS = {
    "GIT_NAME": "git_name",
    "GIT_EMAIL": "git_email",
    "GIT_DIR": "git_dir",
    "GIT_IGNORE_URL": "git_ignore_url",
}


@dataclass
class Settings:
    """User settings from settings.env"""
    git_name: str  # Author and committer name for commits
    git_email: str
    git_dir: Path  # Root that clones go into, as <git_dir>/<owner>/<repo>
    git_ignore_url: str  # Base URL of the .gitignore template API


@dataclass
class RepositoryContext:
    """Identity and locations for one CLI invocation, passed to git operations."""
    author_name: str
    author_email: str
    workdir: Path
    git_dir: Path


def get_app_dir() -> Path:
    """Get the application directory."""
    override = os.environ.get(APP_DIR_ENV)
    if override:
        return Path(override).expanduser()
    return Path.home() / ".config" / "commander"


def get_settings_path(app_dir: Path | None = None) -> Path:
    return (app_dir or get_app_dir()) / SETTINGS_FILE


def load_settings(app_dir: Path | None = None) -> Settings:
    """Load settings.env and return Settings, defaults filling missing keys.

    Raises:
        ValueError: settings.env has invalid syntax
        validate.ValidationError: a value does not match the settings schema
    """
    path = get_settings_path(app_dir)
    env = {}
    if path.exists():
        env = envparse.load_env(str(path))
        validate.validate(env, "settings")
    else:
        logger.debug(f"No settings file at {path}, using defaults")

    values = {**DEFAULTS, **env}
    return Settings(
        git_name=values["GIT_NAME"],
        git_email=values["GIT_EMAIL"],
        git_dir=Path(values["GIT_DIR"]).expanduser(),
        git_ignore_url=values["GIT_IGNORE_URL"],
    )


def save_setting(key: str, value: str, app_dir: Path | None = None) -> None:
    """Validate and persist one setting.

    Raises:
        ValueError: unknown key or unsafe value
        validate.ValidationError: value does not match the settings schema
    """
    if key not in DEFAULTS:
        raise ValueError(f"Unknown setting '{key}'")
    validate.validate({key: value}, "settings")
    envparse.set_key(str(get_settings_path(app_dir)), key, value)
    logger.info(f"Setting {key} updated")


def reset_setting(key: str, app_dir: Path | None = None) -> bool:
    """Drop a setting back to its default. Returns True if it was set."""
    if key not in DEFAULTS:
        raise ValueError(f"Unknown setting '{key}'")
    return envparse.unset_key(str(get_settings_path(app_dir)), key)


def build_context(settings: Settings, workdir: Path) -> RepositoryContext:
    """Create the RepositoryContext for this invocation."""
    return RepositoryContext(
        author_name=settings.git_name,
        author_email=settings.git_email,
        workdir=workdir,
        git_dir=settings.git_dir,
    )
