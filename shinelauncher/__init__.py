# shinelauncher package
# Update, network and account-session orchestration for the launcher UI.

from .context import SessionContext
from .errors import (
    ShineLauncherError,
    BackendCallError,
    PreconditionError,
    UpdateNotCancellableError,
    UnknownProfileError,
    ConfigError,
)
