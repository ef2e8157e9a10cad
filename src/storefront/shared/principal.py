"""The authenticated principal acting on an operation.

Authentication happens upstream. By the time a request reaches the domain the
caller is reduced to a user id, a role and an active flag.
"""

from dataclasses import dataclass
from enum import Enum

from storefront.shared.errors import ForbiddenError, InvalidRequestError


class Role(Enum):
    CUSTOMER = "customer"
    ADMIN = "admin"

    @classmethod
    def parse(cls, value) -> "Role":
        """Normalize loosely-cased role names (``admin``, ``ADMIN``, ``Admin``)."""
        if isinstance(value, Role):
            return value
        if not value:
            return cls.CUSTOMER
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise InvalidRequestError(f"Unknown role: {value}", {"role": str(value)}) from None


@dataclass(frozen=True)
class Principal:
    user_id: str
    role: Role = Role.CUSTOMER
    is_active: bool = True

    @classmethod
    def of(cls, user_id, role=None, is_active=True) -> "Principal":
        if not user_id:
            raise InvalidRequestError("An acting user is required", {"actor_id": "missing"})
        return cls(user_id=str(user_id), role=Role.parse(role), is_active=bool(is_active))

    @property
    def is_admin(self) -> bool:
        return self.role is Role.ADMIN

    def owns(self, owner_id) -> bool:
        return str(owner_id) == self.user_id

    def require_active(self) -> None:
        if not self.is_active:
            raise ForbiddenError("Account is deactivated", {"user_id": self.user_id})

    def require_admin(self) -> None:
        self.require_active()
        if not self.is_admin:
            raise ForbiddenError("Administrator role required", {"user_id": self.user_id})

    def require_owner_or_admin(self, owner_id, resource: str = "resource") -> None:
        self.require_active()
        if not (self.is_admin or self.owns(owner_id)):
            raise ForbiddenError(f"Not authorized to access this {resource}", {"user_id": self.user_id})


def principal_from(command) -> Principal:
    """Build the acting principal from the ``actor_*`` fields every command carries."""
    is_active = command.actor_active if command.actor_active is not None else True
    return Principal.of(command.actor_id, command.actor_role, is_active)
