"""Dashboard user model."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from shop_ledger.models._fields import _pick
from shop_ledger.utils.date_utils import normalize_datetime


class UserRole(Enum):
    """Access level of a dashboard user."""

    ADMIN = "admin"
    USER = "user"


@dataclass
class User:
    """A person with access to the dashboard.

    Attributes:
        id: Document identifier in the store.
        name: Display name.
        email: Login email, unique across users.
        role: Access level.
        created_at: Store creation timestamp.
        updated_at: Store last-update timestamp.
    """

    id: str
    name: str
    email: str
    role: UserRole = UserRole.USER
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def is_admin(self) -> bool:
        return self.role is UserRole.ADMIN

    @classmethod
    def from_dict(cls, data: dict[str, object]) -> "User":
        """Create a User from a store document."""
        role_value = str(_pick(data, "role", default="user"))
        try:
            role = UserRole(role_value)
        except ValueError:
            raise ValueError(f"Unknown user role: {role_value!r}") from None

        return cls(
            id=str(data["id"]),
            name=str(_pick(data, "name", default="")),
            email=str(data["email"]).strip(),
            role=role,
            created_at=normalize_datetime(_pick(data, "createdAt", "created_at")),
            updated_at=normalize_datetime(_pick(data, "updatedAt", "updated_at")),
        )

    def __repr__(self) -> str:
        return f"User(id={self.id!r}, name={self.name!r}, role={self.role.value})"
