"""User aggregate: the local directory entry for an authenticated principal."""

import re
from datetime import UTC, datetime

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, String

from storefront.domain import storefront
from storefront.shared.principal import Principal, Role
from storefront.user.events import UserDeactivated, UserProfileUpdated, UserRegistered, UserRoleChanged

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


@storefront.aggregate
class User:
    external_id = String(required=True, max_length=255)
    email = String(required=True, max_length=254)
    first_name = String(max_length=100)
    last_name = String(max_length=100)
    role = String(choices=Role, default=Role.CUSTOMER.value)
    is_active = Boolean(default=True)
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def email_must_be_well_formed(self):
        if self.email and not _EMAIL_RE.match(self.email):
            raise ValidationError({"email": [f"Invalid email address: {self.email}"]})

    @property
    def full_name(self) -> str:
        return " ".join(part for part in (self.first_name, self.last_name) if part)

    def as_principal(self) -> Principal:
        return Principal(user_id=str(self.id), role=Role(self.role), is_active=self.is_active)

    @classmethod
    def register(cls, external_id, email, first_name=None, last_name=None, role=Role.CUSTOMER):
        now = datetime.now(UTC)
        user = cls(
            external_id=external_id,
            email=email.strip().lower(),
            first_name=first_name,
            last_name=last_name,
            role=Role.parse(role).value,
            created_at=now,
            updated_at=now,
        )
        user.raise_(
            UserRegistered(
                user_id=user.id,
                external_id=external_id,
                email=user.email,
                role=user.role,
                registered_at=now,
            )
        )
        return user

    def update_profile(self, email, first_name=None, last_name=None):
        self.email = email.strip().lower()
        self.first_name = first_name
        self.last_name = last_name
        self.updated_at = datetime.now(UTC)
        self.raise_(
            UserProfileUpdated(
                user_id=self.id,
                email=self.email,
                first_name=first_name,
                last_name=last_name,
            )
        )

    def change_role(self, role, changed_by):
        new_role = Role.parse(role)
        previous = self.role
        if new_role.value == previous:
            return
        self.role = new_role.value
        self.updated_at = datetime.now(UTC)
        self.raise_(
            UserRoleChanged(
                user_id=self.id,
                previous_role=previous,
                new_role=new_role.value,
                changed_by=changed_by,
            )
        )

    def deactivate(self, deactivated_by):
        if not self.is_active:
            return
        now = datetime.now(UTC)
        self.is_active = False
        self.updated_at = now
        self.raise_(UserDeactivated(user_id=self.id, deactivated_by=deactivated_by, deactivated_at=now))
