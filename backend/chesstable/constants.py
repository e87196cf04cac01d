"""Константы стола: места, типы сообщений, категории звуков."""
from enum import Enum

import chess

INITIAL_FEN = chess.STARTING_FEN


class Seat(str, Enum):
    """Место за столом. Значение — то, что уходит клиенту в player_role."""
    FIRST_MOVER = "w"
    SECOND_MOVER = "b"

    @property
    def opponent(self) -> "Seat":
        return Seat.SECOND_MOVER if self is Seat.FIRST_MOVER else Seat.FIRST_MOVER


class Spectator(str, Enum):
    SPECTATOR = "spectator"


SPECTATOR = Spectator.SPECTATOR

Role = Seat | Spectator

SEATS: tuple[Seat, ...] = (Seat.FIRST_MOVER, Seat.SECOND_MOVER)


# Исходящие сообщения
MSG_PLAYER_ROLE = "player_role"
MSG_SPECTATOR_ROLE = "spectator_role"
MSG_PLAYER_COUNT = "player_count"
MSG_BOARD_STATE = "board_state"
MSG_MOVE = "move"
MSG_MOVE_LIST = "move_list"
MSG_SOUND = "sound"
MSG_INVALID_MOVE = "invalid_move"
MSG_GAME_OVER = "game_over"

# Входящие сообщения
MSG_SUBMIT_MOVE = "move"
MSG_READY = "ready"

SOUND_MOVE = "move"
SOUND_CAPTURE = "capture"
SOUND_GAME_OVER = "game_over"
