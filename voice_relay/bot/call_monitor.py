"""
Call monitor for accepted SIP calls.

After a call is accepted the relay opens one realtime WebSocket scoped to the
call id, pushes a scripted greeting, and logs every event the provider sends
until the remote end closes. There is no reconnect: when the socket ends, the
monitor ends.
"""

import asyncio
import json
import logging
import traceback
from typing import Dict, List, Optional
from urllib.parse import quote

import websockets
from websockets.exceptions import ConnectionClosedError, ConnectionClosedOK

from voice_relay.config.constants import LOGGER_NAME
from voice_relay.config.settings import RelaySettings
from voice_relay.models.openai_schemas import ResponseCreateMessage

logger = logging.getLogger(LOGGER_NAME)

WS_MAX_SIZE = 16 * 1024 * 1024  # 16MB


class CallMonitor:
    """
    Realtime WebSocket connection that watches a single call.
    """

    def __init__(self, call_id: str, settings: RelaySettings):
        self.call_id = call_id
        self.settings = settings
        self.ws = None
        self.frames_received = 0

    @property
    def url(self) -> str:
        return f"{self.settings.realtime_url}?call_id={quote(self.call_id, safe='')}"

    def greeting_message(self) -> str:
        return ResponseCreateMessage.with_instructions(self.settings.agent_greeting).model_dump_json()

    async def run(self) -> None:
        """
        Connect, send the greeting, and log frames until the connection ends.

        Connection and protocol errors are logged, never raised. Cancellation
        propagates so the registry can stop the monitor.
        """
        headers = {"Authorization": f"Bearer {self.settings.openai_api_key}"}

        try:
            logger.info(f"[{self.call_id}] Opening call monitor")
            self.ws = await websockets.connect(
                self.url,
                additional_headers=headers,
                max_size=WS_MAX_SIZE,
            )
            logger.info(f"[{self.call_id}] Call monitor connected")

            await self.ws.send(self.greeting_message())
            logger.info(f"[{self.call_id}] Greeting sent")

            async for message in self.ws:
                self.handle_frame(message)

            logger.info(f"[{self.call_id}] Call monitor connection closed")
        except ConnectionClosedOK:
            logger.info(f"[{self.call_id}] Call monitor connection closed normally")
        except ConnectionClosedError as e:
            logger.warning(f"[{self.call_id}] Call monitor connection closed unexpectedly: {e}")
        except asyncio.CancelledError:
            logger.info(f"[{self.call_id}] Call monitor cancelled")
            raise
        except Exception as e:
            logger.error(f"[{self.call_id}] Call monitor error: {e}")
            logger.debug(f"Call monitor error details: {traceback.format_exc()}")
        finally:
            await self.close()

    def handle_frame(self, message) -> Optional[dict]:
        """
        Log one inbound frame.

        Returns:
            The parsed event, or None when the frame is not valid JSON
        """
        self.frames_received += 1

        if isinstance(message, bytes):
            try:
                message = message.decode("utf-8")
            except UnicodeDecodeError:
                logger.info(f"[{self.call_id}] Received binary frame of {len(message)} bytes")
                return None

        try:
            event = json.loads(message)
        except json.JSONDecodeError:
            logger.info(f"[{self.call_id}] Received raw frame: {message[:200]}")
            return None

        if isinstance(event, dict):
            event_type = event.get("type", "unknown")
            if event_type == "error":
                logger.error(f"[{self.call_id}] Provider error event: {event}")
            else:
                logger.info(f"[{self.call_id}] Received event: {event_type}")
        else:
            logger.info(f"[{self.call_id}] Received frame: {event}")
        logger.debug(f"[{self.call_id}] Frame payload: {message[:1000]}")
        return event

    async def close(self) -> None:
        if self.ws is None:
            return
        try:
            await self.ws.close()
        except Exception as e:
            logger.debug(f"[{self.call_id}] Error closing call monitor socket: {e}")
        self.ws = None


class CallMonitorRegistry:
    """
    Tracks running call monitors as detached tasks keyed by call id.

    Webhook responses do not wait for a monitor, but the registry lets the
    application shutdown and tests cancel or await any of them.
    """

    def __init__(self, settings: RelaySettings):
        self.settings = settings
        self.tasks: Dict[str, asyncio.Task] = {}

    def create_monitor(self, call_id: str) -> CallMonitor:
        return CallMonitor(call_id, self.settings)

    def start(self, call_id: str) -> asyncio.Task:
        """
        Start monitoring a call in the background.

        Args:
            call_id: The accepted call's id

        Returns:
            The monitor task; an already-running task for the same call is reused
        """
        existing = self.tasks.get(call_id)
        if existing is not None and not existing.done():
            logger.debug(f"[{call_id}] Call monitor already running")
            return existing

        monitor = self.create_monitor(call_id)
        task = asyncio.create_task(monitor.run(), name=f"call-monitor-{call_id}")
        self.tasks[call_id] = task
        task.add_done_callback(lambda t: self._discard(call_id, t))
        return task

    def _discard(self, call_id: str, task: asyncio.Task) -> None:
        if self.tasks.get(call_id) is task:
            del self.tasks[call_id]

    def active_calls(self) -> List[str]:
        return [call_id for call_id, task in self.tasks.items() if not task.done()]

    async def wait(self, call_id: str, timeout: Optional[float] = None) -> bool:
        """Wait for a call's monitor to finish. Returns False if it is still running."""
        task = self.tasks.get(call_id)
        if task is None:
            return True
        done, _ = await asyncio.wait({task}, timeout=timeout)
        return task in done

    async def cancel(self, call_id: str) -> bool:
        """Cancel a call's monitor. Returns True if one was running."""
        task = self.tasks.get(call_id)
        if task is None or task.done():
            return False
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            logger.debug(f"[{call_id}] Call monitor task cancelled")
        return True

    async def shutdown(self) -> None:
        """Cancel every running monitor."""
        call_ids = self.active_calls()
        if call_ids:
            logger.info(f"Stopping {len(call_ids)} call monitor(s)")
        for call_id in call_ids:
            await self.cancel(call_id)
