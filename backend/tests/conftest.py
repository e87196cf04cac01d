"""
Общие фикстуры: фейковый WebSocket, предсказуемый оракул, сессия стола.
"""
import asyncio
from typing import Any

import pytest

from chesstable.constants import Seat
from chesstable.game import GameSession
from chesstable.oracle import REJECTED, Verdict
from chesstable.ws_manager import WSManager, new_connection_id


class FakeWebSocket:
    """Копит всё, что ему отправили. stuck=True — сокет, который никогда не дописывает."""

    def __init__(self, fail: bool = False, stuck: bool = False) -> None:
        self.sent: list[dict[str, Any]] = []
        self.fail = fail
        self.stuck = stuck

    async def send_json(self, payload: dict[str, Any]) -> None:
        if self.fail:
            raise RuntimeError("socket is closed")
        if self.stuck:
            await asyncio.Event().wait()
        self.sent.append(payload)

    def types(self) -> list[str]:
        return [p["type"] for p in self.sent]

    def of_type(self, msg_type: str) -> list[dict[str, Any]]:
        return [p for p in self.sent if p["type"] == msg_type]


class ScriptedOracle:
    """
    Позиция — номер полухода строкой. Чётный — ход первого места.
    Ходы: "bad" — нелегален, "boom" — оракул падает, "mate" — конец партии,
    "take" — взятие, всё остальное — тихий ход.
    """

    def initial_position(self) -> str:
        return "0"

    def turn(self, position: str) -> Seat:
        return Seat.FIRST_MOVER if int(position) % 2 == 0 else Seat.SECOND_MOVER

    def snapshot(self, position: str) -> str:
        return position

    def evaluate(self, position: str, move_input: Any) -> Verdict:
        if move_input == "boom":
            raise ValueError("malformed move")
        if move_input == "bad":
            return REJECTED
        terminal = move_input == "mate"
        return Verdict(
            accepted=True,
            resulting_position=str(int(position) + 1),
            captured=move_input == "take",
            is_terminal=terminal,
            annotation={"san": str(move_input)},
            result="1-0" if terminal else None,
            reason="checkmate" if terminal else None,
        )


class Client:
    def __init__(self, connection_id: str, ws: FakeWebSocket) -> None:
        self.id = connection_id
        self.ws = ws


class TableHarness:
    """Сессия + менеджер соединений, как их связывает приложение."""

    def __init__(self, session_factory) -> None:
        self.manager = WSManager()
        self.session: GameSession = session_factory(self.manager.deliver)
        self.clients: list[Client] = []

    async def settle(self) -> None:
        """Дождаться, пока очереди живых (не зависших) сокетов опустеют."""
        for client in self.clients:
            conn = self.manager.get(client.id)
            if conn is not None and not client.ws.stuck:
                await conn.flush()

    async def join(self, fail: bool = False, stuck: bool = False) -> Client:
        ws = FakeWebSocket(fail=fail, stuck=stuck)
        connection_id = new_connection_id()
        await self.session.connect(connection_id, on_join=lambda: self.manager.connect(ws, connection_id))
        client = Client(connection_id, ws)
        self.clients.append(client)
        await self.settle()
        return client

    async def leave(self, client: Client) -> None:
        self.manager.disconnect(client.id)
        await self.session.disconnect(client.id)
        self.clients.remove(client)
        await self.settle()

    async def move(self, client: Client, move_input: Any):
        outcome = await self.session.submit_move(client.id, move_input)
        await self.settle()
        return outcome

    async def ready(self, client: Client) -> None:
        await self.session.ready(client.id)
        await self.settle()


@pytest.fixture
def scripted_oracle() -> ScriptedOracle:
    return ScriptedOracle()


@pytest.fixture
def chess_table():
    """Стол с настоящим оракулом python-chess и коротким сбросом."""
    t = TableHarness(lambda deliver: GameSession(deliver, reset_delay_seconds=0.05))
    yield t
    t.session.close()


@pytest.fixture
def scripted_table(scripted_oracle):
    t = TableHarness(lambda deliver: GameSession(deliver, oracle=scripted_oracle, reset_delay_seconds=0.05))
    yield t
    t.session.close()
