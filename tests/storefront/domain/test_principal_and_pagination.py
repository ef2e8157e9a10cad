import pytest

from storefront.shared.errors import ForbiddenError, InvalidRequestError
from storefront.shared.pagination import Page, PageRequest
from storefront.shared.principal import Principal, Role


class TestRole:
    @pytest.mark.parametrize("raw", ["admin", "ADMIN", " Admin "])
    def test_admin_casing_is_normalized(self, raw):
        assert Role.parse(raw) is Role.ADMIN

    def test_missing_role_means_customer(self):
        assert Role.parse(None) is Role.CUSTOMER

    def test_unknown_role_is_rejected(self):
        with pytest.raises(InvalidRequestError):
            Role.parse("superuser")


class TestPrincipal:
    def test_owner_passes(self):
        Principal("u1").require_owner_or_admin("u1")

    def test_admin_passes_for_any_owner(self):
        Principal("a1", Role.ADMIN).require_owner_or_admin("u1")

    def test_stranger_is_forbidden(self):
        with pytest.raises(ForbiddenError):
            Principal("u2").require_owner_or_admin("u1")

    def test_inactive_admin_is_forbidden(self):
        with pytest.raises(ForbiddenError):
            Principal("a1", Role.ADMIN, is_active=False).require_admin()

    def test_missing_user_id(self):
        with pytest.raises(InvalidRequestError):
            Principal.of("", "admin")


class TestPagination:
    def test_first_page_of_25(self):
        page = Page(items=list(range(10)), request=PageRequest(page=1, limit=10), total=25)
        assert page.total_pages == 3
        assert page.has_next is True
        assert page.has_prev is False

    def test_last_page_of_25(self):
        page = Page(items=list(range(5)), request=PageRequest(page=3, limit=10), total=25)
        assert page.has_next is False
        assert page.has_prev is True

    def test_empty_result_has_one_page(self):
        page = Page(items=[], request=PageRequest(page=1, limit=10), total=0)
        assert page.pagination() == {
            "current_page": 1,
            "total_pages": 1,
            "total_items": 0,
            "has_next": False,
            "has_prev": False,
        }

    def test_offset(self):
        assert PageRequest(page=3, limit=10).offset == 20

    @pytest.mark.parametrize("page,limit", [(0, 10), (1, 0), (1, 101)])
    def test_out_of_range_requests(self, page, limit):
        with pytest.raises(InvalidRequestError):
            PageRequest(page=page, limit=limit)
