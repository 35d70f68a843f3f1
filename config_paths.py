import json
import logging
import os

HOME = os.path.expanduser("~")
XDG_CONFIG_HOME = os.environ.get("XDG_CONFIG_HOME")
CONFIG_HOME = XDG_CONFIG_HOME if XDG_CONFIG_HOME else os.path.join(HOME, ".config")
CONFIG_DIR = os.path.join(CONFIG_HOME, "jeek")
CONFIG_JSON = os.path.join(CONFIG_DIR, "config.json")
LOG_PATH = os.path.join(CONFIG_DIR, "jeek.log")

# default settings
TODO_FILE_PATH_DEFAULT = os.path.join("md", "TODO.md")
CYBER_FILE_PATH_DEFAULT = os.path.join("md", "CYBER.md")
BILL_DIR_DEFAULT = "bill"
EDITOR_COMMAND_DEFAULT = None
WEATHER_LOCATION_DEFAULT = ""
WEATHER_TIMEOUT_DEFAULT = 5.0

logger = logging.getLogger(__name__)


def ensure_config_dirs():
    os.makedirs(CONFIG_DIR, exist_ok=True)


def load_config():
    cfg = {
        "TODO_FILE_PATH": TODO_FILE_PATH_DEFAULT,
        "CYBER_FILE_PATH": CYBER_FILE_PATH_DEFAULT,
        "BILL_DIR": BILL_DIR_DEFAULT,
        "EDITOR_COMMAND": EDITOR_COMMAND_DEFAULT,
        "WEATHER_LOCATION": WEATHER_LOCATION_DEFAULT,
        "WEATHER_TIMEOUT_SECONDS": WEATHER_TIMEOUT_DEFAULT,
    }

    if not os.path.exists(CONFIG_JSON):
        return cfg

    try:
        with open(CONFIG_JSON, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as exc:
        logger.warning("Ignoring unreadable config %s: %s", CONFIG_JSON, exc)
        return cfg

    if not isinstance(data, dict):
        logger.warning("Ignoring config %s: top level is not an object", CONFIG_JSON)
        return cfg

    for key, name in (
        ("todo_file_path", "TODO_FILE_PATH"),
        ("cyber_file_path", "CYBER_FILE_PATH"),
        ("bill_dir", "BILL_DIR"),
    ):
        value = data.get(key)
        if isinstance(value, str) and value.strip():
            cfg[name] = os.path.expanduser(value.strip())

    editor_cmd = data.get("editor_command")
    if (
        isinstance(editor_cmd, list)
        and editor_cmd
        and all(isinstance(item, str) for item in editor_cmd)
    ):
        cfg["EDITOR_COMMAND"] = editor_cmd

    weather = data.get("weather")
    if isinstance(weather, dict):
        location = weather.get("location")
        if isinstance(location, str):
            cfg["WEATHER_LOCATION"] = location.strip()
        timeout = weather.get("timeout_seconds")
        if isinstance(timeout, (int, float)) and not isinstance(timeout, bool) and timeout > 0:
            cfg["WEATHER_TIMEOUT_SECONDS"] = float(timeout)

    return cfg


def default_config_data():
    return {
        "todo_file_path": TODO_FILE_PATH_DEFAULT,
        "cyber_file_path": CYBER_FILE_PATH_DEFAULT,
        "bill_dir": BILL_DIR_DEFAULT,
        "editor_command": EDITOR_COMMAND_DEFAULT,
        "weather": {
            "location": WEATHER_LOCATION_DEFAULT,
            "timeout_seconds": WEATHER_TIMEOUT_DEFAULT,
        },
    }


def write_default_config():
    """Write config.json with the defaults unless one exists. Returns the path written, or None."""
    if os.path.exists(CONFIG_JSON):
        return None
    ensure_config_dirs()
    with open(CONFIG_JSON, "w", encoding="utf-8") as f:
        json.dump(default_config_data(), f, indent=2, ensure_ascii=False)
        f.write("\n")
    logger.info("Wrote default config %s", CONFIG_JSON)
    return CONFIG_JSON
