"""Repository for the User aggregate."""

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.shared.errors import UserNotFoundError
from storefront.user.user import User

_BATCH = 100


@storefront.repository(part_of=User)
class UserRepository:
    def find_by_external_id(self, external_id) -> User | None:
        found = self._dao.query.filter(external_id=external_id).limit(1).all()
        return found.items[0] if found.items else None

    def find_by_email(self, email) -> User | None:
        found = self._dao.query.filter(email=email.strip().lower()).limit(1).all()
        return found.items[0] if found.items else None

    def ids_with_email_like(self, fragment) -> list[str]:
        """Ids of users whose email contains ``fragment``, case-insensitively."""
        ids = []
        offset = 0
        while True:
            batch = (
                self._dao.query.filter(email__icontains=fragment).order_by("id").offset(offset).limit(_BATCH).all()
            )
            ids.extend(str(user.id) for user in batch.items)
            offset += _BATCH
            if offset >= batch.total:
                break
        return ids

    def find_many(self, user_ids) -> dict[str, User]:
        ids = sorted({str(uid) for uid in user_ids})
        if not ids:
            return {}
        found = self._dao.query.filter(id__in=ids).limit(len(ids)).all()
        return {str(user.id): user for user in found.items}


def load_user(user_id) -> User:
    try:
        return current_domain.repository_for(User).get(user_id)
    except ObjectNotFoundError:
        raise UserNotFoundError(user_id) from None
