# Utility modules for shinelauncher

from .paths import SHINELAUNCHER_DATA_DIR, SETTINGS_PATH, LOG_PATH, ensure_data_dir
from .settings import LauncherSettings, UpdateStatusCodes
from .log import configure_logging, read_log_tail
