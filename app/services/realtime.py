"""Push delivery: one logical room per user ("user_<id>").

Websocket connections join a room after sending {"event": "join", "data": <userId>}.
Request handlers run in the threadpool, so they publish through publish(), which
hands the send over to the event loop the sockets live on.
"""
import asyncio
import logging
from collections import defaultdict
from typing import Any

from fastapi import WebSocket

log = logging.getLogger("uvicorn.error")


def room_for(user_id: int | str) -> str:
    return f"user_{user_id}"


class NotificationHub:
    def __init__(self) -> None:
        self._rooms: dict[str, set[WebSocket]] = defaultdict(set)
        self._loop: asyncio.AbstractEventLoop | None = None

    async def join(self, websocket: WebSocket, user_id: int | str) -> str:
        self._loop = asyncio.get_running_loop()
        room = room_for(user_id)
        self._rooms[room].add(websocket)
        log.info("[Realtime] User %s joined room %s", user_id, room)
        return room

    def leave(self, websocket: WebSocket) -> None:
        for room in list(self._rooms):
            members = self._rooms[room]
            members.discard(websocket)
            if not members:
                del self._rooms[room]

    def room_size(self, room: str) -> int:
        return len(self._rooms.get(room, ()))

    async def emit(self, user_id: int | str, event: str, data: Any) -> int:
        """Send to every connection in the user's room. Returns how many got it."""
        room = room_for(user_id)
        delivered = 0
        for websocket in list(self._rooms.get(room, ())):
            try:
                await websocket.send_json({"event": event, "data": data})
                delivered += 1
            except (RuntimeError, OSError) as e:
                # closed under us; drop it
                log.info("[Realtime] Dropping dead connection in %s: %s", room, e)
                self.leave(websocket)
        return delivered

    def publish(self, user_id: int | str, event: str, data: Any) -> int:
        """Thread-safe fire-and-forget emit. Returns the number of connections targeted."""
        targets = self.room_size(room_for(user_id))
        if not targets or self._loop is None or self._loop.is_closed():
            return 0
        asyncio.run_coroutine_threadsafe(self.emit(user_id, event, data), self._loop)
        return targets


hub = NotificationHub()
