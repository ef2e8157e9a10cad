"""Domain events for the User aggregate."""

from protean.fields import DateTime, Identifier, String

from storefront.domain import storefront


@storefront.event(part_of="User")
class UserRegistered:
    """A principal from the identity provider was recorded in the directory."""

    __version__ = 1

    user_id = Identifier(required=True)
    external_id = String(required=True)
    email = String(required=True)
    role = String(required=True)
    registered_at = DateTime(required=True)


@storefront.event(part_of="User")
class UserProfileUpdated:
    __version__ = 1

    user_id = Identifier(required=True)
    email = String(required=True)
    first_name = String()
    last_name = String()


@storefront.event(part_of="User")
class UserRoleChanged:
    __version__ = 1

    user_id = Identifier(required=True)
    previous_role = String(required=True)
    new_role = String(required=True)
    changed_by = Identifier(required=True)


@storefront.event(part_of="User")
class UserDeactivated:
    __version__ = 1

    user_id = Identifier(required=True)
    deactivated_by = Identifier(required=True)
    deactivated_at = DateTime(required=True)
