"""Structured status messages shown by the update UI.

Each message kind is its own frozen dataclass that carries only the fields
its translation needs. The UI receives them as ``{"label", "values"}`` dicts,
the same shape the i18n layer substitutes into.
"""

import logging
from dataclasses import dataclass, fields
from typing import Dict, Any, Optional, Type, ClassVar

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StatusMessage:
    message_id: ClassVar[str] = ""

    def values(self) -> Dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}

    def to_dict(self) -> Dict[str, Any]:
        return {"label": self.message_id, "values": self.values()}


@dataclass(frozen=True)
class Empty(StatusMessage):
    message_id: ClassVar[str] = ""


@dataclass(frozen=True)
class CheckingForUpdates(StatusMessage):
    message_id: ClassVar[str] = "update_status.checking_for_updates"


@dataclass(frozen=True)
class DownloadingFiles(StatusMessage):
    message_id: ClassVar[str] = "update_status.downloading_files"
    file_name: str = ""


@dataclass(frozen=True)
class VerifyingFiles(StatusMessage):
    message_id: ClassVar[str] = "update_status.verifying_files"


@dataclass(frozen=True)
class InstallingVersion(StatusMessage):
    message_id: ClassVar[str] = "update_status.installing_version"
    version: str = ""


@dataclass(frozen=True)
class UpdateCompleted(StatusMessage):
    message_id: ClassVar[str] = "update_status.update_completed"


@dataclass(frozen=True)
class CancellingUpdates(StatusMessage):
    message_id: ClassVar[str] = "update_status.cancelling_updates"


@dataclass(frozen=True)
class UpdatesCancelled(StatusMessage):
    message_id: ClassVar[str] = "update_status.updates_cancelled"


@dataclass(frozen=True)
class CancellationFailed(StatusMessage):
    message_id: ClassVar[str] = "update_status.cancellation_failed"
    reason: str = ""


@dataclass(frozen=True)
class UpdateFailed(StatusMessage):
    message_id: ClassVar[str] = "update_status.update_failed"
    reason: str = ""


@dataclass(frozen=True)
class UnknownMessage(StatusMessage):
    """A message id this client has no translation fields for."""
    raw_id: str = ""

    def values(self) -> Dict[str, Any]:
        return {}

    def to_dict(self) -> Dict[str, Any]:
        return {"label": self.raw_id, "values": {}}


MESSAGE_KINDS: Dict[str, Type[StatusMessage]] = {
    kind.message_id: kind
    for kind in (
        Empty,
        CheckingForUpdates,
        DownloadingFiles,
        VerifyingFiles,
        InstallingVersion,
        UpdateCompleted,
        CancellingUpdates,
        UpdatesCancelled,
        CancellationFailed,
        UpdateFailed,
    )
}


def decode_message(data: Optional[Dict[str, Any]]) -> StatusMessage:
    """Build a message from its wire form ``{"id": ..., "params": {...}}``.

    Params that the message kind does not declare are dropped. Declared
    params are coerced to ``str``.
    """
    if not data:
        return Empty()

    message_id = str(data.get("id") or "")
    params = data.get("params") or {}
    if not isinstance(params, dict):
        params = {}

    kind = MESSAGE_KINDS.get(message_id)
    if kind is None:
        if params:
            logger.debug(f"[Messages] Dropping params for unknown message {message_id}: {sorted(params)}")
        return UnknownMessage(raw_id=message_id)

    declared = {f.name for f in fields(kind)}
    extra = set(params) - declared
    if extra:
        logger.debug(f"[Messages] Ignoring undeclared params for {message_id}: {sorted(extra)}")
    return kind(**{k: str(v) for k, v in params.items() if k in declared})
