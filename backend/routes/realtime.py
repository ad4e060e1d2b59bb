"""
Canal de cambios en tiempo real (WebSocket)

El cliente se conecta y recibe {"event": "changed", ...} cada vez que se
modifica una visita, un ciclo o un usuario. La única reacción esperada es
volver a pedir todo.
"""

import asyncio
import logging
from contextlib import suppress
from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from services.change_feed import feed

logger = logging.getLogger("realtime")

router = APIRouter(tags=["Realtime"])


async def _forward(websocket: WebSocket, queue: asyncio.Queue):
    while True:
        event = await queue.get()
        await websocket.send_json(event)


@router.websocket("/realtime")
async def realtime_changes(websocket: WebSocket):
    await websocket.accept()
    queue = feed.subscribe()
    await websocket.send_json({"event": "subscribed", "channel": "sales_changes"})

    sender = asyncio.create_task(_forward(websocket, queue))
    try:
        # Lo que mande el cliente se ignora; solo interesa detectar el cierre
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        logger.debug("Suscriptor desconectado")
    finally:
        sender.cancel()
        with suppress(asyncio.CancelledError, WebSocketDisconnect):
            await sender
        feed.unsubscribe(queue)
