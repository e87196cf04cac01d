"""
Жизненный цикл соединений: посадка, уход, готовность и отложенный сброс доски
после конца партии.
"""
import asyncio
import logging
from collections.abc import Awaitable, Callable

from .constants import Seat
from .fanout import (
    Notification,
    board_state_payload,
    player_count_payload,
    role_payload,
    to_all,
    to_only,
)
from .registry import SeatRegistry
from .table import Table

logger = logging.getLogger(__name__)

Deliver = Callable[[list[Notification]], Awaitable[None]]


class LifecycleManager:
    def __init__(
        self,
        table: Table,
        registry: SeatRegistry,
        deliver: Deliver,
        lock: asyncio.Lock,
        reset_delay_seconds: float = 1.0,
    ):
        self.table = table
        self.registry = registry
        self.reset_delay_seconds = reset_delay_seconds
        self._deliver = deliver
        self._lock = lock
        self._pending_reset: asyncio.Task | None = None

    def on_connect(self, connection_id: str) -> list[Notification]:
        role = self.registry.bind_seat(connection_id)
        return [
            to_only(connection_id, role_payload(role)),
            to_all(player_count_payload(self.registry.occupancy)),
            # опоздавшие и зрители видят текущую партию, а не начальную позицию
            to_only(connection_id, board_state_payload(self.table.snapshot)),
        ]

    def on_disconnect(self, connection_id: str) -> list[Notification]:
        freed = self.registry.release_seat(connection_id)
        if freed is None:
            return []
        return [to_all(player_count_payload(self.registry.occupancy))]

    def on_ready(self, connection_id: str) -> list[Notification]:
        """
        Клиент закончил отсчёт в лобби и просит свежую позицию.
        Игрок за столом начинает партию заново, зритель получает только снимок.
        """
        if not isinstance(self.registry.seat_of(connection_id), Seat):
            return [to_only(connection_id, board_state_payload(self.table.snapshot))]
        self.reset_table()
        return [to_all(board_state_payload(self.table.snapshot))]

    def reset_table(self) -> int:
        self.cancel_pending_reset()
        generation = self.table.reset()
        logger.info("Table: reset, generation=%s", generation)
        return generation

    def schedule_reset(self) -> None:
        """Сбросить доску через reset_delay_seconds, если партия к тому времени не сменилась."""
        self.cancel_pending_reset()
        generation = self.table.generation
        self._pending_reset = asyncio.get_running_loop().create_task(self._reset_later(generation))
        logger.info("Table: reset scheduled in %ss for generation=%s", self.reset_delay_seconds, generation)

    def cancel_pending_reset(self) -> None:
        task = self._pending_reset
        self._pending_reset = None
        if task is not None and not task.done():
            task.cancel()

    async def _reset_later(self, generation: int) -> None:
        await asyncio.sleep(self.reset_delay_seconds)
        async with self._lock:
            if self.table.generation != generation:
                logger.info("Table: stale reset for generation=%s skipped", generation)
                return
            # себя не отменяем: задача уже выполняется
            self._pending_reset = None
            self.reset_table()
            notifications = [to_all(board_state_payload(self.table.snapshot))]
            await self._deliver(notifications)
