"""
Рассылка: какие сообщения, кому и в каком порядке.
Сами ничего не отправляем — только собираем список уведомлений для транспорта.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Any

from .constants import (
    MSG_BOARD_STATE,
    MSG_GAME_OVER,
    MSG_INVALID_MOVE,
    MSG_MOVE,
    MSG_MOVE_LIST,
    MSG_PLAYER_COUNT,
    MSG_PLAYER_ROLE,
    MSG_SOUND,
    MSG_SPECTATOR_ROLE,
    SOUND_CAPTURE,
    SOUND_GAME_OVER,
    SOUND_MOVE,
    Role,
    Seat,
)
from .table import MoveRecord


class Audience(Enum):
    ALL = "all"
    ONLY = "only"
    ALL_EXCEPT = "all_except"


@dataclass(frozen=True)
class Notification:
    audience: Audience
    payload: dict[str, Any]
    connection_id: str | None = None  # для ONLY и ALL_EXCEPT

    def reaches(self, connection_id: str) -> bool:
        if self.audience is Audience.ALL:
            return True
        if self.audience is Audience.ONLY:
            return connection_id == self.connection_id
        return connection_id != self.connection_id


def to_all(payload: dict[str, Any]) -> Notification:
    return Notification(Audience.ALL, payload)


def to_only(connection_id: str, payload: dict[str, Any]) -> Notification:
    return Notification(Audience.ONLY, payload, connection_id)


def to_all_except(connection_id: str, payload: dict[str, Any]) -> Notification:
    return Notification(Audience.ALL_EXCEPT, payload, connection_id)


def board_state_payload(position: str) -> dict:
    return {"type": MSG_BOARD_STATE, "fen": position}


def player_count_payload(occupancy: int) -> dict:
    return {"type": MSG_PLAYER_COUNT, "count": occupancy}


def role_payload(role: Role) -> dict:
    if isinstance(role, Seat):
        return {"type": MSG_PLAYER_ROLE, "role": role.value}
    return {"type": MSG_SPECTATOR_ROLE}


def move_notifications(record: MoveRecord) -> list[Notification]:
    """
    Принятый ход. Порядок важен для клиента:
    звук → запись в список ходов → сам ход (всем, кроме сделавшего) → позиция.
    Позиция последней: по ней любой клиент может пересинхронизироваться.
    """
    notifications = [
        to_all({"type": MSG_SOUND, "category": SOUND_CAPTURE if record.captured else SOUND_MOVE}),
        to_all({"type": MSG_MOVE_LIST, "move": record.move_input, "entry": record.annotation}),
        to_all_except(record.mover_id, {"type": MSG_MOVE, "move": record.move_input}),
        to_all(board_state_payload(record.snapshot)),
    ]
    if record.is_terminal:
        notifications.extend(termination_notifications(record))
    return notifications


def termination_notifications(record: MoveRecord) -> list[Notification]:
    return [
        to_all({"type": MSG_SOUND, "category": SOUND_GAME_OVER}),
        to_all({"type": MSG_GAME_OVER, "result": record.result, "reason": record.reason}),
    ]


def rejection_notifications(connection_id: str, move_input: Any) -> list[Notification]:
    return [to_only(connection_id, {"type": MSG_INVALID_MOVE, "move": move_input})]
