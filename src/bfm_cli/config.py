"""Configuration management for bfm.

Settings are stored as JSON in ``~/.bfm/config.json``. Each path setting
can be overridden with an environment variable.
"""

import json
import os
from typing import Any, Dict


CONFIG_DIR = os.path.expanduser("~/.bfm")
CONFIG_FILE = os.path.join(CONFIG_DIR, "config.json")

DEFAULT_QUERY_COMMAND = "brew info --json=v1 --installed"

# setting name -> environment variable that overrides it
ENV_OVERRIDES = {
    "brewfile": "BFM_BREWFILE",
    "db": "BFM_DB",
    "snapshot": "BFM_SNAPSHOT",
    "query_command": "BFM_QUERY_COMMAND",
}


def _defaults() -> Dict[str, Any]:
    return {
        "brewfile": os.path.expanduser("~/Brewfile"),
        "db": os.path.join(CONFIG_DIR, "bfm.db"),
        "snapshot": os.path.join(CONFIG_DIR, "info.json"),
        "query_command": DEFAULT_QUERY_COMMAND,
    }


def ensure_config_exists():
    """Create the config directory and an empty config file if missing."""
    if not os.path.exists(CONFIG_DIR):
        os.makedirs(CONFIG_DIR)

    if not os.path.exists(CONFIG_FILE):
        with open(CONFIG_FILE, "w") as f:
            json.dump({}, f)


def get_config() -> Dict[str, Any]:
    """Return the stored settings merged over the defaults."""
    ensure_config_exists()
    config = _defaults()
    with open(CONFIG_FILE, "r") as f:
        stored = json.load(f)
    if isinstance(stored, dict):
        config.update(stored)
    return config


def update_config(updates: Dict[str, Any]) -> None:
    """Persist ``updates`` into the config file."""
    ensure_config_exists()
    with open(CONFIG_FILE, "r") as f:
        stored = json.load(f)
    stored.update(updates)
    with open(CONFIG_FILE, "w") as f:
        json.dump(stored, f, indent=2)


def get_setting(name: str) -> Any:
    """Return one setting; an environment override takes precedence."""
    env_var = ENV_OVERRIDES.get(name)
    if env_var and os.environ.get(env_var):
        return os.environ[env_var]
    return get_config().get(name)


def get_brewfile_path() -> str:
    return get_setting("brewfile")


def get_db_path() -> str:
    return get_setting("db")


def get_snapshot_path() -> str:
    return get_setting("snapshot")


def get_query_command() -> str:
    return get_setting("query_command")
