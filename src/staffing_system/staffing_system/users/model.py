from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class User:
    """An account that marks attendance and decides leave.

    The password hash never leaves this object through `as_dict`.
    """

    user_id: int
    name: str
    username: str
    password_hash: str
    email: Optional[str] = None
    is_active: bool = True
    created_at: Optional[datetime] = None

    def as_dict(self) -> dict:
        return {
            "id": self.user_id,
            "name": self.name,
            "username": self.username,
            "email": self.email,
            "is_active": self.is_active,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
