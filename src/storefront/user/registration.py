"""Register or refresh a principal in the user directory.

Called when the identity provider reports a new or changed account.
Re-registering the same ``external_id`` updates the profile in place.
"""

from protean import handle
from protean.fields import String
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.shared.errors import InvalidRequestError
from storefront.user.user import User
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


@storefront.command(part_of="User")
class RegisterUser:
    external_id = String(required=True, max_length=255)
    email = String(required=True, max_length=254)
    first_name = String(max_length=100)
    last_name = String(max_length=100)


@storefront.command_handler(part_of=User)
class RegisterUserHandler:
    @handle(RegisterUser)
    def register_user(self, command):
        repo = current_domain.repository_for(User)

        owner = repo.find_by_email(command.email)
        user = repo.find_by_external_id(command.external_id)
        if owner is not None and (user is None or owner.id != user.id):
            raise InvalidRequestError("Email is already registered", {"email": command.email})

        if user is None:
            user = User.register(
                external_id=command.external_id,
                email=command.email,
                first_name=command.first_name,
                last_name=command.last_name,
            )
            logger.info("user_registered", user_id=str(user.id), external_id=command.external_id)
        else:
            user.update_profile(command.email, command.first_name, command.last_name)
            logger.info("user_profile_synced", user_id=str(user.id), external_id=command.external_id)

        repo.add(user)
        return str(user.id)
