"""
Обработка сообщений WebSocket: move, ready.
Подключение сразу сажает клиента за стол или в зрители.
"""
import json
import logging

from fastapi import WebSocket
from starlette.websockets import WebSocketDisconnect

from .constants import MSG_READY, MSG_SUBMIT_MOVE
from .game import GameSession
from .ws_manager import WSManager, new_connection_id

logger = logging.getLogger(__name__)


async def handle_ws_message(session: GameSession, raw: str, connection_id: str) -> bool:
    """
    Обрабатывает одно сообщение клиента.
    Возвращает False если соединение нужно закрыть.
    """
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        logger.warning("WS: invalid JSON from %s: %s", connection_id, e)
        return True
    if not isinstance(data, dict):
        logger.warning("WS: expected object from %s, got %s", connection_id, type(data).__name__)
        return True
    t = data.get("type")
    logger.debug("WS: msg from %s type=%s", connection_id, t)
    if t == MSG_SUBMIT_MOVE:
        await session.submit_move(connection_id, data.get("move"))
        return True
    if t == MSG_READY:
        await session.ready(connection_id)
        return True
    logger.info("WS: unknown message type=%s from %s", t, connection_id)
    return True


async def ws_loop(ws: WebSocket, session: GameSession, manager: WSManager) -> None:
    """Принять соединение, посадить за стол и крутить цикл приёма сообщений."""
    connection_id = None
    try:
        await ws.accept()
        connection_id = new_connection_id()
        logger.info("WS: accepted connection_id=%s", connection_id)
        await session.connect(connection_id, on_join=lambda: manager.connect(ws, connection_id))
        while True:
            msg = await ws.receive_text()
            if not await handle_ws_message(session, msg, connection_id):
                break
    except WebSocketDisconnect as e:
        logger.info("WS: client disconnected code=%s reason=%s connection_id=%s", e.code, e.reason or "", connection_id)
    except Exception as e:
        logger.exception("WS: error connection_id=%s: %s", connection_id, e)
    finally:
        if connection_id:
            manager.disconnect(connection_id)
            await session.disconnect(connection_id)
            logger.info("WS: disconnected connection_id=%s", connection_id)
