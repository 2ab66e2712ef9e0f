from __future__ import annotations

from typing import Iterable, Optional, Protocol, Sequence

from .model import Staff


class StaffRepository(Protocol):
    """Repository interface for Staff.

    Services depend on this interface, never on a concrete database.
    """

    def get_by_id(self, staff_id: int) -> Optional[Staff]:
        raise NotImplementedError

    def get_by_code(self, staff_code: str) -> Optional[Staff]:
        raise NotImplementedError

    def get_many(self, staff_ids: Iterable[int]) -> dict[int, Staff]:
        raise NotImplementedError

    def list_all(self, *, shift: Optional[str] = None) -> Sequence[Staff]:
        raise NotImplementedError

    def max_code_for_prefix(self, prefix: str) -> Optional[str]:
        """Highest `prefix + digits` code, ordered numerically (D1000 > D999)."""

        raise NotImplementedError

    def create(self, *, staff_code: str, name: str, role: str, shift: str, email: Optional[str] = None) -> int:
        """Insert a staff row. Raises ConflictError if the code is taken."""

        raise NotImplementedError

    def update(self, *, staff_id: int, name: str, role: str, shift: str, email: Optional[str]) -> bool:
        raise NotImplementedError

    def delete(self, staff_id: int) -> bool:
        raise NotImplementedError
