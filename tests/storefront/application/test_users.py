"""Application tests for the user directory."""

import pytest
from protean import current_domain

from storefront.api.auth import actor_fields
from storefront.shared.errors import ForbiddenError, InvalidRequestError, UserNotFoundError
from storefront.shared.principal import Principal
from storefront.user.administration import ChangeUserRole, DeactivateUser
from storefront.user.registration import RegisterUser
from storefront.user.user import User


def _register(external_id="idp|ada", email="ada@example.com", **kwargs):
    return current_domain.process(RegisterUser(external_id=external_id, email=email, **kwargs), asynchronous=False)


class TestRegisterUser:
    def test_registers_customer(self):
        user_id = _register(first_name="Ada", last_name="Lovelace")

        user = current_domain.repository_for(User).get(user_id)
        assert user.role == "customer"
        assert user.is_active is True
        assert user.full_name == "Ada Lovelace"

    def test_reregistration_updates_profile(self):
        first = _register()
        second = _register(email="ADA@analytical.engine", first_name="Augusta")

        assert first == second
        user = current_domain.repository_for(User).get(first)
        assert user.email == "ada@analytical.engine"
        assert user.first_name == "Augusta"

    def test_email_must_be_unique(self):
        _register()
        with pytest.raises(InvalidRequestError):
            _register(external_id="idp|impostor", email="ada@example.com")


class TestAdministration:
    def test_promote_to_admin(self, admin):
        user_id = _register()
        current_domain.process(ChangeUserRole(**actor_fields(admin), user_id=user_id, role="ADMIN"), asynchronous=False)

        user = current_domain.repository_for(User).get(user_id)
        assert user.role == "admin"
        assert user.as_principal().is_admin

    def test_customer_cannot_promote(self, customer):
        user_id = _register()
        with pytest.raises(ForbiddenError):
            current_domain.process(
                ChangeUserRole(**actor_fields(customer), user_id=user_id, role="admin"),
                asynchronous=False,
            )

    def test_deactivate(self, admin):
        user_id = _register()
        current_domain.process(DeactivateUser(**actor_fields(admin), user_id=user_id), asynchronous=False)

        user = current_domain.repository_for(User).get(user_id)
        assert user.is_active is False
        assert user.as_principal().is_active is False

    def test_admin_cannot_deactivate_self(self):
        me = Principal.of(_register(), "admin")
        with pytest.raises(InvalidRequestError):
            current_domain.process(DeactivateUser(**actor_fields(me), user_id=me.user_id), asynchronous=False)

    def test_unknown_user(self, admin):
        with pytest.raises(UserNotFoundError):
            current_domain.process(DeactivateUser(**actor_fields(admin), user_id="ghost"), asynchronous=False)


class TestEmailSearch:
    def test_matches_beyond_one_batch(self):
        for n in range(101):
            _register(external_id=f"idp|bulk-{n}", email=f"bulk{n}@example.com")
        _register(external_id="idp|other", email="other@example.com")

        ids = current_domain.repository_for(User).ids_with_email_like("BULK")

        assert len(ids) == 101
        assert len(set(ids)) == 101
