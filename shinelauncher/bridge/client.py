"""Websocket transport to the native launcher backend.

Requests are JSON objects ``{"id", "method", "params"}``; the backend answers
with ``{"id", "result"}`` or ``{"id", "error"}``. Messages without an ``id``
that carry a ``type`` are pushed events and go to the registered event
handler instead of a pending call.
"""

import json
import asyncio
import logging
from typing import Dict, Any, Optional, Callable, Tuple

import aiohttp

from ..errors import BackendCallError

logger = logging.getLogger(__name__)

EventHandler = Callable[[Dict[str, Any]], None]


class BackendClient:
    """Request/response channel plus push-event stream over one websocket."""

    def __init__(self, url: str, call_timeout: float = 30.0,
                 on_event: Optional[EventHandler] = None):
        self.url = url
        self.call_timeout = call_timeout
        self.websocket: Optional[aiohttp.ClientWebSocketResponse] = None
        self.client: Optional[aiohttp.ClientSession] = None
        self.msg_id = 0
        self.connected = False
        self._on_event = on_event
        self._pending: Dict[int, Tuple[str, asyncio.Future]] = {}
        self._reader: Optional[asyncio.Task] = None

    def set_event_handler(self, handler: Optional[EventHandler]) -> None:
        self._on_event = handler

    async def connect(self):
        """Open the websocket and start the reader task"""
        if self.connected:
            return
        self.client = aiohttp.ClientSession()
        try:
            self.websocket = await self.client.ws_connect(self.url, heartbeat=30.0)
        except (aiohttp.ClientError, OSError) as e:
            await self.client.close()
            self.client = None
            logger.error(f"[Bridge] Failed to connect to {self.url}: {e}")
            raise BackendCallError("connect", str(e)) from e

        self.connected = True
        self._reader = asyncio.create_task(self._read_loop())
        logger.info(f"[Bridge] Connected to backend at {self.url}")

    async def disconnect(self):
        """Close the connection; pending calls fail with BackendCallError"""
        self.connected = False
        if self._reader:
            self._reader.cancel()
            try:
                await self._reader
            except asyncio.CancelledError:
                pass
            self._reader = None
        if self.websocket:
            await self.websocket.close()
        if self.client:
            await self.client.close()
        self.websocket = None
        self.client = None
        self._fail_pending("connection closed")
        logger.info("[Bridge] Disconnected from backend")

    async def call(self, method: str, **params) -> Any:
        """Invoke a backend method and wait for its result.

        Raises:
            BackendCallError: not connected, send failure, timeout, or an
                error reply from the backend.
        """
        if not self.connected or not self.websocket:
            raise BackendCallError(method, "backend not connected")

        self.msg_id += 1
        msg_id = self.msg_id
        future = asyncio.get_running_loop().create_future()
        self._pending[msg_id] = (method, future)

        try:
            try:
                await self.websocket.send_json({"id": msg_id, "method": method, "params": params})
            except (aiohttp.ClientError, ConnectionError, RuntimeError) as e:
                raise BackendCallError(method, f"send failed: {e}") from e

            try:
                return await asyncio.wait_for(future, timeout=self.call_timeout)
            except asyncio.TimeoutError:
                raise BackendCallError(method, f"timed out after {self.call_timeout}s")
        finally:
            self._pending.pop(msg_id, None)

    async def _read_loop(self):
        try:
            async for msg in self.websocket:
                if msg.type == aiohttp.WSMsgType.TEXT:
                    self.dispatch(msg.data)
                elif msg.type == aiohttp.WSMsgType.ERROR:
                    logger.error(f"[Bridge] Websocket error: {self.websocket.exception()}")
                    break
        finally:
            self.connected = False
            self._fail_pending("connection closed")

    def dispatch(self, raw: str) -> None:
        """Route one incoming frame to its pending call or to the event handler"""
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            logger.warning(f"[Bridge] Discarding malformed frame: {e}")
            return
        if not isinstance(data, dict):
            logger.warning("[Bridge] Discarding non-object frame")
            return

        msg_id = data.get("id")
        if msg_id is not None:
            if not isinstance(msg_id, int) or isinstance(msg_id, bool):
                logger.warning(f"[Bridge] Discarding frame with invalid id {msg_id!r}")
                return
            entry = self._pending.get(msg_id)
            if entry is None:
                logger.debug(f"[Bridge] Reply for unknown or expired call {msg_id}")
                return
            method, future = entry
            if future.done():
                return
            if data.get("error"):
                future.set_exception(BackendCallError(method, str(data["error"])))
            else:
                future.set_result(data.get("result"))
            return

        if "type" in data:
            if self._on_event is None:
                logger.debug(f"[Bridge] No event handler, dropping {data.get('type')}")
                return
            try:
                self._on_event(data)
            except Exception as e:
                logger.error(f"[Bridge] Event handler failed for {data.get('type')}: {e}")
            return

        logger.debug("[Bridge] Frame has neither id nor type, ignoring")

    def _fail_pending(self, reason: str) -> None:
        for method, future in list(self._pending.values()):
            if not future.done():
                future.set_exception(BackendCallError(method, reason))
        self._pending.clear()
