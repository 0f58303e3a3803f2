# Transport and typed API for the native launcher backend

from .client import BackendClient
from .api import LauncherBackend
