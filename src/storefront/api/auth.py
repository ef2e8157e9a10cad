"""Principal resolution.

Credentials are verified by the gateway in front of this service, which
forwards the caller's directory id as ``X-User-Id``. Role and active flag are
always read from the user directory, never from the request.
"""

from fastapi import Header
from protean.utils.globals import current_domain

from storefront.shared.errors import ForbiddenError, StorefrontError
from storefront.shared.principal import Principal
from storefront.user.user import User
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class UnauthenticatedError(StorefrontError):
    error = "Unauthenticated"
    status_code = 401


def resolve_principal(user_id: str) -> Principal:
    user = current_domain.repository_for(User).find_many([user_id]).get(str(user_id))
    if user is None:
        logger.warning("unknown_principal_rejected", user_id=user_id)
        raise UnauthenticatedError("Unknown user")

    principal = user.as_principal()
    if not principal.is_active:
        raise ForbiddenError("Account is deactivated", {"user_id": principal.user_id})
    return principal


async def current_principal(x_user_id: str | None = Header(default=None)) -> Principal:
    if not x_user_id:
        raise UnauthenticatedError("Authentication required")
    return resolve_principal(x_user_id)


async def optional_principal(x_user_id: str | None = Header(default=None)) -> Principal | None:
    """Like ``current_principal`` for public routes: anonymous callers get None."""
    if not x_user_id:
        return None
    return resolve_principal(x_user_id)


def actor_fields(principal: Principal) -> dict:
    """Keyword arguments identifying the actor on a command."""
    return {
        "actor_id": principal.user_id,
        "actor_role": principal.role.value,
        "actor_active": principal.is_active,
    }
