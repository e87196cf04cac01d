"""Тесты арбитра ходов."""
import pytest

from chesstable.arbiter import Accepted, Dropped, Rejected, TurnArbiter
from chesstable.constants import Seat
from chesstable.registry import SeatRegistry
from chesstable.table import Table, TableState


@pytest.fixture
def arbiter(scripted_oracle) -> TurnArbiter:
    registry = SeatRegistry()
    registry.bind_seat("white")
    registry.bind_seat("black")
    registry.bind_seat("watcher")
    return TurnArbiter(Table(scripted_oracle), registry, scripted_oracle)


def test_mover_on_turn_is_accepted(arbiter):
    outcome = arbiter.submit_move("white", "e4")
    assert isinstance(outcome, Accepted)
    assert outcome.record.mover_id == "white"
    assert arbiter.table.position == "1"
    assert arbiter.table.state is TableState.AWAITING_SECOND_MOVER


@pytest.mark.parametrize("who", ["black", "watcher", "stranger"])
def test_out_of_turn_submissions_are_dropped(arbiter, who):
    outcome = arbiter.submit_move(who, "e4")
    assert isinstance(outcome, Dropped)
    assert arbiter.table.position == "0"


def test_turn_alternates(arbiter):
    arbiter.submit_move("white", "e4")
    assert isinstance(arbiter.submit_move("white", "d4"), Dropped)
    assert isinstance(arbiter.submit_move("black", "e5"), Accepted)
    assert arbiter.table.turn is Seat.FIRST_MOVER


def test_illegal_move_leaves_table_untouched(arbiter):
    outcome = arbiter.submit_move("white", "bad")
    assert outcome == Rejected("bad")
    assert arbiter.table.position == "0"


def test_oracle_exception_is_a_rejection(arbiter):
    outcome = arbiter.submit_move("white", "boom")
    assert outcome == Rejected("boom")
    assert arbiter.table.position == "0"


def test_terminal_move_ends_the_game(arbiter):
    outcome = arbiter.submit_move("white", "mate")
    assert outcome.record.is_terminal
    assert arbiter.table.state is TableState.GAME_OVER
    # после мата ходить нельзя никому
    assert isinstance(arbiter.submit_move("black", "e5"), Dropped)
    assert arbiter.table.position == "1"


def test_solo_moves_allowed_by_default(scripted_oracle):
    registry = SeatRegistry()
    registry.bind_seat("white")
    arbiter = TurnArbiter(Table(scripted_oracle), registry, scripted_oracle)
    assert isinstance(arbiter.submit_move("white", "e4"), Accepted)


def test_solo_moves_can_be_disabled(scripted_oracle):
    registry = SeatRegistry()
    registry.bind_seat("white")
    arbiter = TurnArbiter(Table(scripted_oracle), registry, scripted_oracle, allow_solo_moves=False)
    assert arbiter.submit_move("white", "e4") == Dropped("no_opponent")
    registry.bind_seat("black")
    assert isinstance(arbiter.submit_move("white", "e4"), Accepted)
