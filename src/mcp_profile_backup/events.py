"""
Event Routing

Maps configured auto-backup events to handlers. A handler starts the backup
in the background and hands the event's response straight back, so a backup
never changes or delays what the caller sees.
"""

from __future__ import annotations

import asyncio
import logging
import re
from dataclasses import dataclass
from typing import Awaitable, Callable

from .backup_writer import BackupWriter
from .config import AutoBackupEvent, BackupSettings, ConfigError
from .utils.session_utils import validate_session_id

logger = logging.getLogger(__name__)

EventHandler = Callable[..., Awaitable[str]]


def route_to_tool_name(route: str) -> str:
    """Turn a route like "/client/match/end" into a tool name "client_match_end"."""
    name = re.sub(r"[^0-9A-Za-z_-]+", "_", route).strip("_")
    if not name:
        raise ValueError(f"Route {route!r} has no usable characters")
    return name


@dataclass(frozen=True)
class EventRoute:
    """A registered route and the handler bound to it."""

    event: AutoBackupEvent
    handler: EventHandler


class EventRouter:
    """Dispatches lifecycle events to fire-and-forget backups."""

    def __init__(self, writer: BackupWriter, settings: BackupSettings) -> None:
        self._writer = writer
        self._settings = settings
        self._pending: set[asyncio.Task] = set()

    def get_routes(self) -> list[EventRoute]:
        """Build one route per configured event; none when the service is disabled.

        Raises:
            ConfigError: If two routes map to the same tool name
        """
        if not self._settings.enabled:
            # The disabled warning is logged once at startup
            return []

        routes = []
        tool_routes: dict[str, str] = {}
        for event in self._settings.auto_backup_events:
            tool_name = route_to_tool_name(event.route)
            if tool_name in tool_routes:
                raise ConfigError(
                    f"Routes {tool_routes[tool_name]!r} and {event.route!r} "
                    f"both map to tool {tool_name!r}"
                )
            tool_routes[tool_name] = event.route
            routes.append(EventRoute(event=event, handler=self._make_handler(event)))
            logger.info(f"Registered AutoBackupEvent: {event.name} on route: {event.route}")
        return routes

    def _make_handler(self, event: AutoBackupEvent) -> EventHandler:
        async def handler(session_id: str, output: str | None = None) -> str:
            return self.on_event(event.name, session_id, output)

        return handler

    def on_event(self, event_name: str, session_id: str, output: str | None) -> str:
        """Start a backup for session_id and return output unchanged ("" for None).

        Must be called from a running event loop.
        """
        logger.info(f"Event triggered: {event_name} for session: {session_id}")
        response = output if output is not None else ""

        try:
            session_id = validate_session_id(session_id)
        except ValueError as e:
            logger.warning(f"Ignoring {event_name} event with invalid session id {session_id!r}: {e}")
            return response

        task = asyncio.get_running_loop().create_task(
            self._writer.backup(event_name, session_id), name=f"backup:{event_name}:{session_id}"
        )
        self._pending.add(task)
        task.add_done_callback(self._on_backup_done)

        return response

    def _on_backup_done(self, task: asyncio.Task) -> None:
        self._pending.discard(task)
        if task.cancelled():
            logger.warning(f"Backup task {task.get_name()} was cancelled before it finished")
            return
        exc = task.exception()
        if exc is not None:
            logger.error(f"Backup task failed: {exc!r}")

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    async def wait_idle(self) -> None:
        """Wait for all background backups started so far."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)
