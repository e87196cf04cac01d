"""
Сессия стола: владеет столом, реестром мест, арбитром и менеджером соединений.
Все события обрабатываются строго по очереди под одним asyncio.Lock.
"""
import asyncio
import logging
from collections.abc import Callable
from typing import Any

from .arbiter import Dropped, Outcome, Rejected, TurnArbiter
from .fanout import move_notifications, rejection_notifications
from .lifecycle import Deliver, LifecycleManager
from .oracle import ChessOracle, MoveOracle
from .registry import SeatRegistry
from .table import Table

logger = logging.getLogger(__name__)


class GameSession:
    def __init__(
        self,
        deliver: Deliver,
        oracle: MoveOracle | None = None,
        reset_delay_seconds: float = 1.0,
        allow_solo_moves: bool = True,
    ):
        self.oracle = ChessOracle() if oracle is None else oracle
        self.table = Table(self.oracle)
        self.registry = SeatRegistry()
        self.arbiter = TurnArbiter(self.table, self.registry, self.oracle, allow_solo_moves)
        self._lock = asyncio.Lock()
        self._deliver = deliver
        self.lifecycle = LifecycleManager(
            self.table, self.registry, deliver, self._lock, reset_delay_seconds
        )

    async def connect(self, connection_id: str, on_join: Callable[[], None] | None = None) -> None:
        """
        Посадить соединение. on_join вызывается под тем же замком, до рассылки:
        транспорт регистрирует в нём сокет, чтобы клиент не получил чужие
        события раньше своей роли.
        """
        async with self._lock:
            if on_join is not None:
                on_join()
            await self._deliver(self.lifecycle.on_connect(connection_id))

    async def disconnect(self, connection_id: str) -> None:
        async with self._lock:
            await self._deliver(self.lifecycle.on_disconnect(connection_id))

    async def ready(self, connection_id: str) -> None:
        async with self._lock:
            await self._deliver(self.lifecycle.on_ready(connection_id))

    async def submit_move(self, connection_id: str, move_input: Any) -> Outcome:
        async with self._lock:
            outcome = self.arbiter.submit_move(connection_id, move_input)
            if isinstance(outcome, Dropped):
                return outcome
            if isinstance(outcome, Rejected):
                await self._deliver(rejection_notifications(connection_id, outcome.move_input))
                return outcome
            record = outcome.record
            if record.is_terminal:
                # таймер заводим до рассылки, чтобы отсчёт шёл от самого хода
                logger.info("Table: game over result=%s reason=%s", record.result, record.reason)
                self.lifecycle.schedule_reset()
            await self._deliver(move_notifications(record))
            return outcome

    def snapshot(self) -> dict:
        return {
            "fen": self.table.snapshot,
            "state": self.table.state.value,
            "generation": self.table.generation,
            "occupancy": self.registry.occupancy,
        }

    def close(self) -> None:
        self.lifecycle.cancel_pending_reset()

