"""TOML config loader: packaged defaults + optional user override."""

import tomllib
from pathlib import Path

import tomli_w

DEFAULTS_PATH = Path(__file__).parent / "defaults.toml"


def load_defaults() -> dict:
    """Load the packaged defaults.toml."""
    with open(DEFAULTS_PATH, "rb") as f:
        return tomllib.load(f)


def save_defaults(config: dict, path: Path | None = None) -> None:
    """Write a config dict as TOML (to defaults.toml unless a path is given)."""
    with open(path or DEFAULTS_PATH, "wb") as f:
        tomli_w.dump(config, f)


def load_config(config_toml: Path | None = None) -> dict:
    """Load a user config.toml, merged over defaults."""
    defaults = load_defaults()
    if config_toml is not None and config_toml.exists():
        with open(config_toml, "rb") as f:
            overrides = tomllib.load(f)
        _deep_merge(defaults, overrides)
    return defaults


def job_config(config: dict, job_name: str) -> dict:
    """Return the ``[jobs.<name>]`` section (empty if absent)."""
    section = config.get("jobs", {}).get(job_name, {})
    return dict(section) if isinstance(section, dict) else {}


def _deep_merge(base: dict, override: dict) -> None:
    """Merge override into base in-place, recursing into dicts."""
    for key, value in override.items():
        if key in base and isinstance(base[key], dict) and isinstance(value, dict):
            _deep_merge(base[key], value)
        else:
            base[key] = value
