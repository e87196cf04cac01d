"""
Арбитр ходов: чей ход, кто его прислал, что сказал оракул.
"""
import logging
from dataclasses import dataclass
from typing import Any

from .oracle import MoveOracle
from .registry import SeatRegistry
from .table import MoveRecord, Table, TableState

logger = logging.getLogger(__name__)


@dataclass
class Dropped:
    """Ход не от того места (или партия уже кончилась). Никому ничего не шлём."""
    reason: str


@dataclass
class Rejected:
    move_input: Any


@dataclass
class Accepted:
    record: MoveRecord


Outcome = Dropped | Rejected | Accepted


class TurnArbiter:
    def __init__(
        self,
        table: Table,
        registry: SeatRegistry,
        oracle: MoveOracle,
        allow_solo_moves: bool = True,
    ):
        self.table = table
        self.registry = registry
        self.oracle = oracle
        self.allow_solo_moves = allow_solo_moves

    def submit_move(self, connection_id: str, move_input: Any) -> Outcome:
        if self.table.state is TableState.GAME_OVER:
            logger.debug("Arbiter: drop move from %s, game is over", connection_id)
            return Dropped("game_over")
        seat = self.registry.seat_of(connection_id)
        to_move = self.table.turn
        if seat is not to_move:
            logger.debug("Arbiter: drop move from %s (seat=%s, to move=%s)", connection_id, seat, to_move.value)
            return Dropped("not_your_turn")
        if not self.allow_solo_moves and self.registry.holder(to_move.opponent) is None:
            logger.debug("Arbiter: drop move from %s, opponent seat is empty", connection_id)
            return Dropped("no_opponent")

        try:
            verdict = self.oracle.evaluate(self.table.position, move_input)
        except Exception:
            logger.exception("Arbiter: oracle failed on move %r from %s", move_input, connection_id)
            return Rejected(move_input)
        if not verdict.accepted or verdict.resulting_position is None:
            logger.info("Arbiter: invalid move %r from %s", move_input, connection_id)
            return Rejected(move_input)

        record = MoveRecord(
            mover_id=connection_id,
            move_input=move_input,
            resulting_position=verdict.resulting_position,
            snapshot=self.oracle.snapshot(verdict.resulting_position),
            captured=verdict.captured,
            is_terminal=verdict.is_terminal,
            annotation=verdict.annotation,
            result=verdict.result,
            reason=verdict.reason,
        )
        self.table.apply(record)
        logger.info(
            "Arbiter: %s played %s (terminal=%s)",
            to_move.value, verdict.annotation.get("san", move_input), verdict.is_terminal,
        )
        return Accepted(record)
