"""shinelauncher file path constants and utilities."""

import os


# shinelauncher data directory
SHINELAUNCHER_DATA_DIR = os.path.expanduser("~/.local/share/shinelauncher")

SETTINGS_PATH = os.path.join(SHINELAUNCHER_DATA_DIR, "settings.json")
LOG_DIR = os.path.join(SHINELAUNCHER_DATA_DIR, "logs")
LOG_PATH = os.path.join(LOG_DIR, "launcher.log")


def ensure_data_dir() -> None:
    """Ensure the shinelauncher data directory exists."""
    os.makedirs(SHINELAUNCHER_DATA_DIR, exist_ok=True)
