"""Administrator actions on user accounts."""

from protean import handle
from protean.fields import Boolean, Identifier, String
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.shared.errors import InvalidRequestError
from storefront.shared.principal import principal_from
from storefront.user.repository import load_user
from storefront.user.user import User
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


@storefront.command(part_of="User")
class ChangeUserRole:
    actor_id = Identifier(required=True)
    actor_role = String(max_length=20, default="customer")
    actor_active = Boolean(default=True)
    user_id = Identifier(required=True)
    role = String(required=True, max_length=20)


@storefront.command(part_of="User")
class DeactivateUser:
    actor_id = Identifier(required=True)
    actor_role = String(max_length=20, default="customer")
    actor_active = Boolean(default=True)
    user_id = Identifier(required=True)


@storefront.command_handler(part_of=User)
class UserAdministrationHandler:
    @handle(ChangeUserRole)
    def change_role(self, command):
        actor = principal_from(command)
        actor.require_admin()

        user = load_user(command.user_id)
        user.change_role(command.role, changed_by=actor.user_id)
        current_domain.repository_for(User).add(user)

        logger.info("user_role_changed", user_id=str(user.id), role=user.role, changed_by=actor.user_id)
        return str(user.id)

    @handle(DeactivateUser)
    def deactivate(self, command):
        actor = principal_from(command)
        actor.require_admin()
        if actor.owns(command.user_id):
            raise InvalidRequestError("Administrators cannot deactivate themselves", {"user_id": command.user_id})

        user = load_user(command.user_id)
        user.deactivate(deactivated_by=actor.user_id)
        current_domain.repository_for(User).add(user)

        logger.info("user_deactivated", user_id=str(user.id), deactivated_by=actor.user_id)
        return str(user.id)
