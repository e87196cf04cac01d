"""
Стол: единственная авторитетная позиция партии.
Меняет её только арбитр ходов, сбрасывает — менеджер соединений.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .constants import Seat
from .oracle import MoveOracle


class TableState(Enum):
    AWAITING_FIRST_MOVER = "awaiting_first_mover_move"
    AWAITING_SECOND_MOVER = "awaiting_second_mover_move"
    GAME_OVER = "game_over"


@dataclass
class MoveRecord:
    """Принятый ход. Живёт ровно до рассылки."""
    mover_id: str
    move_input: Any
    resulting_position: str
    snapshot: str  # FEN для клиентов
    captured: bool
    is_terminal: bool
    annotation: dict[str, Any] = field(default_factory=dict)
    result: str | None = None
    reason: str | None = None


class Table:
    def __init__(self, oracle: MoveOracle):
        self._oracle = oracle
        self.position: str = oracle.initial_position()
        self.game_over: bool = False
        # растёт при каждом сбросе; отложенный сброс от прошлой партии сверяется с ним
        self.generation: int = 0

    @property
    def turn(self) -> Seat:
        return self._oracle.turn(self.position)

    @property
    def snapshot(self) -> str:
        return self._oracle.snapshot(self.position)

    @property
    def state(self) -> TableState:
        if self.game_over:
            return TableState.GAME_OVER
        if self.turn is Seat.FIRST_MOVER:
            return TableState.AWAITING_FIRST_MOVER
        return TableState.AWAITING_SECOND_MOVER

    def apply(self, record: MoveRecord) -> None:
        self.position = record.resulting_position
        if record.is_terminal:
            self.game_over = True

    def reset(self) -> int:
        self.position = self._oracle.initial_position()
        self.game_over = False
        self.generation += 1
        return self.generation
