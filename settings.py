"""Persistent settings for Yatzy.

Stores game and AI preferences in ~/.yatzy_settings.json.
Command-line flags override whatever is loaded here.
"""

import json
import logging
from pathlib import Path

logger = logging.getLogger(__name__)

DEFAULTS = {
    "dice_count": 6,
    "max_rolls": 3,
    "ai_threshold": 0.8,
    "speed": "normal",
    "log_level": "INFO",
}

SPEEDS = ("slow", "normal", "fast", "instant")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


def _default_path():
    """Return the default path for the settings file."""
    return Path.home() / ".yatzy_settings.json"


def _is_number(value):
    return isinstance(value, (int, float)) and not isinstance(value, bool)


_VALIDATORS = {
    "dice_count": lambda v: isinstance(v, int) and not isinstance(v, bool) and v in (5, 6, 12),
    "max_rolls": lambda v: isinstance(v, int) and not isinstance(v, bool) and v >= 1,
    "ai_threshold": lambda v: _is_number(v) and 0 < v <= 1,
    "speed": lambda v: v in SPEEDS,
    "log_level": lambda v: isinstance(v, str) and v.upper() in LOG_LEVELS,
}


def validate_settings(settings):
    """Return a copy of settings with invalid values replaced by their defaults."""
    result = dict(settings)
    for key, is_valid in _VALIDATORS.items():
        if key in result and not is_valid(result[key]):
            logger.warning("Ignoring invalid setting %s=%r, using %r",
                           key, result[key], DEFAULTS[key])
            result[key] = DEFAULTS[key]
    return result


def load_settings(path=None):
    """Load settings from JSON file. Returns DEFAULTS on missing/corrupt.

    Merges with DEFAULTS so missing keys get default values.
    Unknown keys are ignored, invalid values fall back to their default.
    """
    if path is None:
        path = _default_path()
    path = Path(path)
    try:
        data = json.loads(path.read_text())
    except FileNotFoundError:
        return dict(DEFAULTS)
    except (json.JSONDecodeError, OSError) as exc:
        logger.warning("Could not read settings from %s: %s", path, exc)
        return dict(DEFAULTS)
    if not isinstance(data, dict):
        logger.warning("Settings file %s does not hold an object, using defaults", path)
        return dict(DEFAULTS)
    # Merge: only keep known keys, fill missing from defaults
    result = dict(DEFAULTS)
    for key in DEFAULTS:
        if key in data:
            result[key] = data[key]
    return validate_settings(result)


def save_settings(settings, path=None):
    """Write settings dict to JSON. Silently ignores write errors."""
    if path is None:
        path = _default_path()
    path = Path(path)
    try:
        path.write_text(json.dumps(settings, indent=2))
    except OSError:
        logger.debug("Could not write settings to %s", path, exc_info=True)
