"""
Реестр мест: два слота (белые/чёрные) и зрители. Только память, без I/O.
"""
import logging

from .constants import SEATS, SPECTATOR, Role, Seat

logger = logging.getLogger(__name__)


class SeatRegistry:
    def __init__(self):
        self._seats: dict[Seat, str | None] = {seat: None for seat in SEATS}
        self._roles: dict[str, Role] = {}

    @property
    def occupancy(self) -> int:
        """Число занятых мест. Всегда считается заново, отдельно не хранится."""
        return sum(1 for holder in self._seats.values() if holder is not None)

    @property
    def is_full(self) -> bool:
        return self.occupancy == len(SEATS)

    def holder(self, seat: Seat) -> str | None:
        return self._seats[seat]

    def seat_of(self, connection_id: str) -> Role | None:
        return self._roles.get(connection_id)

    def bind_seat(self, connection_id: str) -> Role:
        """
        Посадить соединение: первое свободное место, иначе зритель.
        Повторный вызов для того же соединения возвращает прежнюю роль.
        """
        if connection_id in self._roles:
            return self._roles[connection_id]
        role: Role = SPECTATOR
        for seat in SEATS:
            if self._seats[seat] is None:
                self._seats[seat] = connection_id
                role = seat
                break
        self._roles[connection_id] = role
        logger.info("Registry: %s -> %s (occupancy=%s)", connection_id, role.value, self.occupancy)
        return role

    def release_seat(self, connection_id: str) -> Seat | None:
        """Освободить место соединения. Возвращает освобождённое место или None."""
        role = self._roles.pop(connection_id, None)
        if isinstance(role, Seat) and self._seats[role] == connection_id:
            self._seats[role] = None
            logger.info("Registry: %s released %s (occupancy=%s)", connection_id, role.value, self.occupancy)
            return role
        return None
