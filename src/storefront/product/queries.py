"""Catalog read side: listing, lookup and merchandising queries."""

from decimal import Decimal

from protean.utils.globals import current_domain

from storefront.product.details import load_product
from storefront.product.product import Product
from storefront.product.repository import SORT_FIELDS
from storefront.shared.errors import ForbiddenError, InvalidRequestError
from storefront.shared.money import format_amount, parse_amount, to_minor
from storefront.shared.pagination import Page, PageRequest
from storefront.shared.principal import Principal

DEFAULT_PAGE_SIZE = 12
FEATURED_LIMIT = 8
RELATED_LIMIT = 4


def product_summary(product: Product) -> dict:
    """Compact view embedded in order items."""
    images = product.image_list
    return {
        "id": str(product.id),
        "name": product.name,
        "price": format_amount(product.price),
        "image": images[0] if images else None,
        "is_active": product.is_active,
    }


def product_view(product: Product) -> dict:
    return {
        "id": str(product.id),
        "name": product.name,
        "description": product.description,
        "category": product.category,
        "price": format_amount(product.price),
        "stock": product.stock,
        "images": product.image_list,
        "is_active": product.is_active,
        "is_featured": product.is_featured,
        "rating_average": product.rating_average,
        "rating_count": product.rating_count,
        "created_at": product.created_at.isoformat() if product.created_at else None,
        "updated_at": product.updated_at.isoformat() if product.updated_at else None,
    }


def _price_bound(value) -> int | None:
    if value is None or value == "":
        return None
    try:
        amount = parse_amount(value)
    except ValueError:
        raise InvalidRequestError(f"Invalid price filter: {value}", {"price": str(value)}) from None
    if amount < Decimal(0):
        raise InvalidRequestError("Price filters cannot be negative", {"price": str(value)})
    return to_minor(amount)


def list_products(
    actor: Principal | None = None,
    page=1,
    limit=DEFAULT_PAGE_SIZE,
    category=None,
    min_price=None,
    max_price=None,
    search=None,
    featured=None,
    active=True,
    sort="created_at",
    order="desc",
) -> Page:
    """Active products for everyone; inactive or all products for administrators only."""
    if active is not True:
        if actor is None:
            raise ForbiddenError("Administrator role required to list inactive products", {"active": active})
        actor.require_admin()
    if sort not in SORT_FIELDS:
        raise InvalidRequestError(f"Cannot sort by {sort}", {"sort": sort})
    if order not in ("asc", "desc"):
        raise InvalidRequestError("order must be 'asc' or 'desc'", {"order": order})

    request = PageRequest(page=page, limit=limit)
    items, total = current_domain.repository_for(Product).search(
        offset=request.offset,
        limit=request.limit,
        category=category,
        min_price_minor=_price_bound(min_price),
        max_price_minor=_price_bound(max_price),
        search=search.strip() if search else None,
        featured=featured,
        active=active,
        sort=sort,
        descending=order == "desc",
    )
    return Page(items=[product_view(p) for p in items], request=request, total=total)


def get_product(product_id) -> dict:
    """Product detail including its reviews, newest first."""
    from storefront.review.queries import reviews_for_product

    product = load_product(product_id)
    view = product_view(product)
    view["reviews"] = reviews_for_product(product.id)
    return view


def list_categories() -> list[str]:
    return current_domain.repository_for(Product).active_categories()


def featured_products(limit=FEATURED_LIMIT) -> list[dict]:
    return [product_view(p) for p in current_domain.repository_for(Product).featured(limit)]


def related_products(product_id, limit=RELATED_LIMIT) -> list[dict]:
    product = load_product(product_id)
    return [product_view(p) for p in current_domain.repository_for(Product).related(product, limit)]
