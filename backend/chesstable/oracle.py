"""
Оракул ходов: легальность, итоговая позиция, конец партии.
Ядро стола правил шахмат не знает и спрашивает всё у оракула.
"""
from dataclasses import dataclass, field
from typing import Any, Protocol

import chess
from chess import Board

from .constants import INITIAL_FEN, Seat

MOVES_SEPARATOR = " moves "

RESULT_REASONS = {
    chess.Termination.CHECKMATE: "checkmate",
    chess.Termination.STALEMATE: "stalemate",
    chess.Termination.INSUFFICIENT_MATERIAL: "insufficient_material",
    chess.Termination.SEVENTYFIVE_MOVES: "seventyfive_moves",
    chess.Termination.FIVEFOLD_REPETITION: "fivefold_repetition",
    chess.Termination.FIFTY_MOVES: "fifty_moves",
    chess.Termination.THREEFOLD_REPETITION: "threefold_repetition",
}


@dataclass
class Verdict:
    accepted: bool
    resulting_position: str | None = None
    captured: bool = False
    is_terminal: bool = False
    annotation: dict[str, Any] = field(default_factory=dict)
    result: str | None = None  # None | "1-0" | "0-1" | "1/2-1/2"
    reason: str | None = None


REJECTED = Verdict(accepted=False)


class MoveOracle(Protocol):
    def initial_position(self) -> str: ...

    def turn(self, position: str) -> Seat: ...

    def snapshot(self, position: str) -> str: ...

    def evaluate(self, position: str, move_input: Any) -> Verdict: ...


def build_uci(from_sq: str, to_sq: str, promotion: str | None = None) -> str:
    return from_sq + to_sq + (promotion or "")


def load_position(position: str) -> Board:
    """Позиция — начальный FEN и, если были ходы, "moves e2e4 e7e5 ..."."""
    fen, _, moves = position.partition(MOVES_SEPARATOR)
    board = Board(fen)
    for uci in moves.split():
        board.push_uci(uci)
    return board


def dump_position(board: Board) -> str:
    # история нужна для троекратного повторения
    ucis = [move.uci() for move in board.move_stack]
    root = board.root().fen()
    if not ucis:
        return root
    return root + MOVES_SEPARATOR + " ".join(ucis)


def parse_move(board: Board, move_input: Any) -> chess.Move:
    """
    Разобрать ход клиента: {"from", "to", "promotion"?}, {"uci"} или {"san"}.
    Бросает ValueError на мусорный ввод.
    """
    if not isinstance(move_input, dict):
        raise ValueError(f"move must be an object, got {type(move_input).__name__}")
    if move_input.get("san"):
        return board.parse_san(str(move_input["san"]))
    if move_input.get("uci"):
        move = chess.Move.from_uci(str(move_input["uci"]))
    else:
        from_sq = move_input.get("from")
        to_sq = move_input.get("to")
        if not from_sq or not to_sq:
            raise ValueError("move needs 'from' and 'to'")
        promotion = move_input.get("promotion")
        move = chess.Move.from_uci(build_uci(str(from_sq), str(to_sq), str(promotion) if promotion else None))
    if move.promotion is None and move not in board.legal_moves:
        # клиент не прислал фигуру превращения — превращаем в ферзя
        queened = chess.Move(move.from_square, move.to_square, promotion=chess.QUEEN)
        if queened in board.legal_moves:
            return queened
    return move


def game_end(board: Board) -> tuple[str, str] | None:
    """Результат и причина, если партия окончена после последнего хода."""
    outcome = board.outcome()
    if outcome is not None:
        return outcome.result(), RESULT_REASONS.get(outcome.termination, outcome.termination.name.lower())
    # ничьи по требованию считаем наступившими, как только они случились
    if board.is_repetition(3):
        return "1/2-1/2", "threefold_repetition"
    if board.halfmove_clock >= 100:
        return "1/2-1/2", "fifty_moves"
    return None


class ChessOracle:
    """Оракул на python-chess."""

    def initial_position(self) -> str:
        return INITIAL_FEN

    def turn(self, position: str) -> Seat:
        board = load_position(position)
        return Seat.FIRST_MOVER if board.turn == chess.WHITE else Seat.SECOND_MOVER

    def snapshot(self, position: str) -> str:
        return load_position(position).fen()

    def evaluate(self, position: str, move_input: Any) -> Verdict:
        board = load_position(position)
        move = parse_move(board, move_input)
        if move not in board.legal_moves:
            return REJECTED
        color = "w" if board.turn == chess.WHITE else "b"
        piece = board.piece_at(move.from_square)
        captured_piece = _captured_piece(board, move)
        flags = []
        if board.is_castling(move):
            flags.append("castling")
        if board.is_en_passant(move):
            flags.append("en_passant")
        if move.promotion:
            flags.append("promotion")
        san = board.san(move)
        board.push(move)
        end = game_end(board)
        uci = move.uci()
        annotation = {
            "san": san,
            "from": uci[:2],
            "to": uci[2:4],
            "color": color,
            "piece": piece.symbol().lower() if piece else None,
            "captured": captured_piece,
            "promotion": chess.piece_symbol(move.promotion) if move.promotion else None,
            "flags": flags,
        }
        return Verdict(
            accepted=True,
            resulting_position=dump_position(board),
            captured=captured_piece is not None,
            is_terminal=end is not None,
            annotation=annotation,
            result=end[0] if end else None,
            reason=end[1] if end else None,
        )


def _captured_piece(board: Board, move: chess.Move) -> str | None:
    if board.is_en_passant(move):
        return "p"
    if board.is_castling(move):
        return None
    target = board.piece_at(move.to_square)
    return target.symbol().lower() if target else None
