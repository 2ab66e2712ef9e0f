from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import User


class UserRepository(Protocol):
    def get_by_id(self, user_id: int) -> Optional[User]:
        raise NotImplementedError

    def get_by_username(self, username: str) -> Optional[User]:
        raise NotImplementedError

    def get_by_email(self, email: str) -> Optional[User]:
        raise NotImplementedError

    def create_user(
        self,
        *,
        name: str,
        username: str,
        email: Optional[str],
        password_hash: str,
    ) -> int:
        raise NotImplementedError

    def list_all(self) -> Sequence[User]:
        raise NotImplementedError

    def update_user(
        self,
        *,
        user_id: int,
        name: str,
        username: str,
        email: Optional[str],
        password_hash: str,
    ) -> bool:
        raise NotImplementedError

    def delete(self, user_id: int) -> bool:
        raise NotImplementedError
