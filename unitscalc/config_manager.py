# config_manager.py
import json
import logging
import sys
from pathlib import Path

logger = logging.getLogger(__name__)

config_json = Path(__file__).resolve().parent / "config.json"
ui_strings = Path(__file__).resolve().parent / "ui_strings.json"

# Used for every key the config file does not (yet) contain
DEFAULT_SETTINGS = {
    "decimal_places": 3,
    "default_units": "mm",
    "history_size": 100,
    "darkmode": False,
    "shift_to_copy": True,
}

# Accepted range (inclusive) for each integer setting
SETTING_LIMITS = {
    "decimal_places": (0, 20),
    "history_size": (1, 1000),
}


def setting_limits(key_value):
    return SETTING_LIMITS.get(key_value, (0, sys.maxsize))


def check_setting(key_value, value):
    """Return value if it lies within the limits of key_value, else raise ValueError."""
    minimum, maximum = setting_limits(key_value)
    if value < minimum:
        raise ValueError(f"'{value}' is too small. Minimum is {minimum}.")
    if value > maximum:
        raise ValueError(f"'{value}' is too large. Maximum is {maximum}.")
    return value


def _read_json(path):
    try:
        with open(path, 'r', encoding='utf-8') as f:
            return json.load(f)

    except (FileNotFoundError, json.JSONDecodeError) as e:
        logger.warning("Could not read %s: %s", path, e)
        return {}


def load_setting_value(key_value):
    settings_dict = dict(DEFAULT_SETTINGS)
    settings_dict.update(_read_json(config_json))

    # A hand-edited or stale file must not take the UI down on the next start
    for limited_key in SETTING_LIMITS:
        try:
            check_setting(limited_key, settings_dict[limited_key])
        except (TypeError, ValueError) as e:
            logger.warning("Ignoring %s from %s: %s", limited_key, config_json, e)
            settings_dict[limited_key] = DEFAULT_SETTINGS[limited_key]

    if key_value == "all":
        return settings_dict

    else:
        return settings_dict.get(key_value, 0)


def load_setting_description(key_value):
    settings_dict = _read_json(ui_strings)

    if key_value == "all":
        return settings_dict

    else:
        return settings_dict.get(key_value, key_value)


def save_setting(settings_dict):
    try:
        with open(config_json, 'w', encoding='utf-8') as f:
            json.dump(settings_dict, f, indent=4)
            return settings_dict

    except (OSError, TypeError) as e:
        logger.warning("Could not save settings to %s: %s", config_json, e)
        return {}


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    print(load_setting_value("all"))
    print(load_setting_description("all"))
