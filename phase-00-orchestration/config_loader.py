"""
config_loader.py — Phase 00: Orchestration
--------------------------------------------
Loads and validates the pipeline configuration from
phase-00-orchestration/config/engine_config.yaml, and the lexicon asset
it points to (config/lexicon_ko.yaml by default).

Raises clear, descriptive errors if required keys are missing,
so misconfiguration is caught at startup rather than mid-run.
"""

import os
from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml

try:
    from phase_00_orchestration.engine_settings import (
        Lexicon, WeatherSettings, REQUIRED_RECOMMENDATIONS, REQUIRED_THEMES,
    )
except ImportError:
    from engine_settings import (
        Lexicon, WeatherSettings, REQUIRED_RECOMMENDATIONS, REQUIRED_THEMES,
    )


# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

CONFIG_DIR   = Path(__file__).parent / "config"
CONFIG_PATH  = CONFIG_DIR / "engine_config.yaml"
LEXICON_PATH = CONFIG_DIR / "lexicon_ko.yaml"

DATA_ROOT_ENV_VAR = "MIND_WEATHER_DATA_ROOT"


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def load_config(path: Path | None = None) -> dict[str, Any]:
    """
    Load and validate engine_config.yaml.

    The data root may be overridden with the MIND_WEATHER_DATA_ROOT
    environment variable (the CLI loads .env first).

    Returns:
        dict: Fully validated configuration dictionary.

    Raises:
        FileNotFoundError: If the config file does not exist.
        ValueError:        If required keys are absent or values are invalid.
    """
    config_path = Path(path) if path is not None else CONFIG_PATH
    config = _read_yaml_mapping(config_path)

    _validate(config, config_path)

    env_root = os.environ.get(DATA_ROOT_ENV_VAR)
    if env_root:
        config["data_root"] = env_root

    # Fail fast on bad tuning values instead of inside a phase
    WeatherSettings.from_dict(config.get("weather"))
    return config


def load_lexicon(path: Path | None = None) -> Lexicon:
    """
    Load a lexicon YAML asset into an immutable Lexicon.

    Raises:
        FileNotFoundError: If the lexicon file does not exist.
        ValueError:        If required sections, themes or messages are absent.
    """
    lexicon_path = Path(path) if path is not None else LEXICON_PATH
    raw = _read_yaml_mapping(lexicon_path)

    missing = [key for key in _REQUIRED_LEXICON_KEYS if not _has_key(raw, key)]
    if missing:
        raise ValueError(
            "Lexicon is missing required sections:\n  - "
            + "\n  - ".join(missing)
            + f"\n\nCheck: {lexicon_path}"
        )

    lexicon = Lexicon.from_dict(raw)

    missing_themes = [
        t for t in (*REQUIRED_THEMES, *lexicon.high_risk_themes) if t not in lexicon.themes
    ]
    if missing_themes:
        raise ValueError(
            f"Lexicon {lexicon_path.name} does not define theme(s): {', '.join(missing_themes)}"
        )

    missing_messages = [m for m in REQUIRED_RECOMMENDATIONS if m not in lexicon.recommendations]
    if missing_messages:
        raise ValueError(
            f"Lexicon {lexicon_path.name} is missing recommendation message(s): "
            + ", ".join(missing_messages)
        )

    return lexicon


def lexicon_path_for(config: dict[str, Any]) -> Path:
    """Resolve the lexicon file named in config (relative to the config dir)."""
    name = config.get("lexicon_file")
    return CONFIG_DIR / name if name else LEXICON_PATH


def settings_from_config(config: dict[str, Any]) -> WeatherSettings:
    return WeatherSettings.from_dict(config.get("weather"))


@lru_cache(maxsize=None)
def default_lexicon() -> Lexicon:
    """The shipped Korean lexicon, parsed once per process."""
    return load_lexicon(LEXICON_PATH)


@lru_cache(maxsize=None)
def default_settings() -> WeatherSettings:
    return WeatherSettings()


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------

# Keys that must be present (dot-notation for nested paths)
_REQUIRED_KEYS = [
    "data_root",
    "lookback_days",
    "lexicon_file",
]

_REQUIRED_LEXICON_KEYS = [
    "negative_keywords",
    "positive_keywords",
    "stop_words",
    "strip_pattern",
    "themes",
    "high_risk_themes",
    "behavior_patterns.triggers",
    "behavior_patterns.responses",
    "recommendations",
]


def _read_yaml_mapping(path: Path) -> dict:
    if not path.exists():
        raise FileNotFoundError(
            f"Config file not found at: {path}\n"
            "Restore it from version control or point to a valid file."
        )

    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)

    if not isinstance(data, dict):
        raise ValueError(f"{path.name} must be a YAML mapping (key: value pairs).")
    return data


def _validate(config: dict, config_path: Path) -> None:
    """Validate that all required keys exist in the config."""
    missing = []
    for key_path in _REQUIRED_KEYS:
        if not _has_key(config, key_path):
            missing.append(key_path)

    if missing:
        raise ValueError(
            "Engine config is missing required keys:\n  - "
            + "\n  - ".join(missing)
            + f"\n\nCheck: {config_path}"
        )

    lookback = config["lookback_days"]
    if not isinstance(lookback, int) or lookback < 1:
        raise ValueError(f"lookback_days must be a positive integer, got {lookback!r}.")


def _has_key(config: dict, key_path: str) -> bool:
    """Traverse a dot-separated key path in a nested dict."""
    parts = key_path.split(".")
    node = config
    for part in parts:
        if not isinstance(node, dict) or part not in node:
            return False
        node = node[part]
    return True
