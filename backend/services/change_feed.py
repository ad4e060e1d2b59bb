"""
Visitas CRM - Notificaciones de cambios en tiempo real

Señal "algo cambió" sin diff: cada suscriptor recibe {"event": "changed",
"table": ...} y vuelve a pedir todo. Una cola por suscriptor, en el mismo
event loop del servidor.
"""

import asyncio
import logging
from typing import Dict, Set

from config import now_iso

logger = logging.getLogger("change_feed")

# Cola acotada: si un cliente no lee, se descartan señales viejas
# (cualquier señal pendiente ya dispara el refetch completo).
MAX_PENDING = 16


class ChangeFeed:
    def __init__(self):
        self._subscribers: Set[asyncio.Queue] = set()

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def subscribe(self) -> asyncio.Queue:
        queue = asyncio.Queue(maxsize=MAX_PENDING)
        self._subscribers.add(queue)
        logger.debug(f"Nuevo suscriptor ({len(self._subscribers)} activos)")
        return queue

    def unsubscribe(self, queue: asyncio.Queue) -> None:
        self._subscribers.discard(queue)

    def publish(self, table: str, action: str = "*") -> Dict:
        event = {"event": "changed", "table": table, "action": action, "at": now_iso()}
        for queue in list(self._subscribers):
            if queue.full():
                queue.get_nowait()
            queue.put_nowait(event)
        return event


feed = ChangeFeed()
