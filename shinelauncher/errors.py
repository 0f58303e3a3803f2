"""Exceptions raised by the shinelauncher orchestration layer."""


class ShineLauncherError(Exception):
    """Base exception for all shinelauncher errors."""


class BackendCallError(ShineLauncherError):
    """A call into the native backend failed or could not be delivered."""

    def __init__(self, method: str, message: str):
        super().__init__(f"{method}: {message}")
        self.method = method


class PreconditionError(ShineLauncherError):
    """An operation was invoked in a state that does not allow it."""


class UpdateNotCancellableError(PreconditionError):
    """Cancellation requested while no cancellable update is running."""


class UnknownProfileError(PreconditionError):
    """Profile selection for a uuid that is not in the current profile list."""


class ConfigError(ShineLauncherError):
    """Configuration error."""
