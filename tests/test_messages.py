from __future__ import annotations

from shinelauncher.models.messages import (
    CancellingUpdates,
    DownloadingFiles,
    Empty,
    UpdateFailed,
    decode_message,
)


def test_decode_known_message_with_params() -> None:
    message = decode_message({'id': 'update_status.downloading_files', 'params': {'file_name': 'assets.zip'}})

    assert message == DownloadingFiles(file_name='assets.zip')
    assert message.to_dict() == {
        'label': 'update_status.downloading_files',
        'values': {'file_name': 'assets.zip'},
    }


def test_decode_drops_undeclared_params() -> None:
    message = decode_message({'id': 'update_status.cancelling_updates', 'params': {'eta': 3}})

    assert message == CancellingUpdates()
    assert message.to_dict()['values'] == {}


def test_decode_coerces_params_to_str() -> None:
    assert decode_message({'id': 'update_status.update_failed', 'params': {'reason': 28}}) == UpdateFailed(reason='28')


def test_decode_empty() -> None:
    assert decode_message(None) == Empty()
    assert decode_message({}) == Empty()
    assert decode_message({'id': ''}) == Empty()
