"""
Менеджер WebSocket: живые подключения по connection_id и доставка уведомлений.
У каждого подключения своя очередь и своя задача-писатель: медленный клиент
не держит ни стол, ни остальных.
"""
import asyncio
import logging
import uuid
from typing import Any

from fastapi import WebSocket

from .fanout import Notification

logger = logging.getLogger(__name__)


def new_connection_id() -> str:
    return uuid.uuid4().hex


class Connection:
    def __init__(self, ws: WebSocket, connection_id: str):
        self.ws = ws
        self.connection_id = connection_id
        self.outbox: asyncio.Queue[dict[str, Any]] = asyncio.Queue()
        self.alive = True
        self._writer = asyncio.get_running_loop().create_task(self._write_loop())

    def push(self, payload: dict[str, Any]) -> None:
        self.outbox.put_nowait(payload)

    async def flush(self) -> None:
        """Дождаться, пока всё поставленное в очередь уйдёт в сокет."""
        await self.outbox.join()

    def close(self) -> None:
        self._writer.cancel()

    async def _write_loop(self) -> None:
        while True:
            payload = await self.outbox.get()
            try:
                if self.alive:
                    await self.ws.send_json(payload)
            except Exception as e:
                # соединение само закроется в своём цикле приёма и освободит место
                logger.warning("send_to %s: %s", self.connection_id, e)
                self.alive = False
            finally:
                self.outbox.task_done()


class WSManager:
    def __init__(self):
        self._by_id: dict[str, Connection] = {}

    def connect(self, ws: WebSocket, connection_id: str) -> Connection:
        conn = Connection(ws, connection_id)
        self._by_id[connection_id] = conn
        return conn

    def disconnect(self, connection_id: str) -> None:
        conn = self._by_id.pop(connection_id, None)
        if conn:
            conn.close()

    def get(self, connection_id: str) -> Connection | None:
        return self._by_id.get(connection_id)

    def __len__(self) -> int:
        return len(self._by_id)

    def send_to(self, connection_id: str, payload: dict[str, Any]) -> bool:
        conn = self._by_id.get(connection_id)
        if not conn:
            return False
        conn.push(payload)
        return True

    async def deliver(self, notifications: list[Notification]) -> None:
        """
        Разложить уведомления по очередям подключений в порядке списка.
        Ничего не ждёт: сокеты пишут свои задачи.
        """
        for notification in notifications:
            for connection_id in list(self._by_id):
                if notification.reaches(connection_id):
                    self.send_to(connection_id, notification.payload)
