"""Order read side: detail, per-customer and administrative listings, stats."""

from datetime import UTC, datetime, time, timedelta
from decimal import Decimal

from protean.utils.globals import current_domain

from storefront.order.order import Order, OrderStatus, PaymentStatus
from storefront.order.repository import load_order
from storefront.product.product import Product
from storefront.product.queries import product_summary
from storefront.shared.errors import InvalidRequestError
from storefront.shared.money import format_amount, quantize
from storefront.shared.pagination import Page, PageRequest
from storefront.shared.principal import Principal
from storefront.user.user import User

USER_PAGE_SIZE = 10
ADMIN_PAGE_SIZE = 20

STATS_PERIODS = {"7d": 7, "30d": 30, "90d": 90}
DEFAULT_STATS_PERIOD = "30d"

_STATS_BATCH = 100


def _address_view(address):
    if address is None:
        return None
    return {
        "name": address.name,
        "phone": address.phone,
        "street": address.street,
        "city": address.city,
        "state": address.state,
        "postal_code": address.postal_code,
        "country": address.country,
    }


def _timestamp(value):
    return value.isoformat() if value else None


def order_view(order: Order, products: dict | None = None, owner: User | None = None) -> dict:
    products = products or {}
    view = {
        "id": str(order.id),
        "order_number": order.order_number,
        "user_id": str(order.user_id),
        "status": order.status,
        "payment_status": order.payment_status,
        "payment_method": order.payment_method,
        "items": [
            {
                "id": str(item.id),
                "product_id": str(item.product_id),
                "product_name": item.product_name,
                "quantity": item.quantity,
                "unit_price": format_amount(item.unit_price),
                "line_total": format_amount(item.line_total),
                "product": (
                    product_summary(products[str(item.product_id)]) if str(item.product_id) in products else None
                ),
            }
            for item in order.items
        ],
        "shipping_address": _address_view(order.shipping_address),
        "billing_address": _address_view(order.billing_address),
        "subtotal": format_amount(order.pricing.subtotal),
        "shipping_cost": format_amount(order.pricing.shipping_cost),
        "tax": format_amount(order.pricing.tax),
        "total": format_amount(order.pricing.total),
        "customer_note": order.customer_note,
        "admin_note": order.admin_note,
        "tracking_number": order.tracking_number,
        "carrier": order.carrier,
        "estimated_delivery": order.estimated_delivery,
        "cancellation_reason": order.cancellation_reason,
        "created_at": _timestamp(order.created_at),
        "updated_at": _timestamp(order.updated_at),
        "delivered_at": _timestamp(order.delivered_at),
        "cancelled_at": _timestamp(order.cancelled_at),
    }
    if owner is not None:
        view["user"] = {
            "id": str(owner.id),
            "email": owner.email,
            "name": owner.full_name,
        }
    return view


def _products_for(orders) -> dict:
    ids = {str(item.product_id) for order in orders for item in order.items}
    return current_domain.repository_for(Product).find_many(ids)


def _render(orders, with_owners=False) -> list[dict]:
    products = _products_for(orders)
    owners = current_domain.repository_for(User).find_many(o.user_id for o in orders) if with_owners else {}
    return [order_view(order, products, owners.get(str(order.user_id))) for order in orders]


def _check_choice(value, enum_cls, name):
    if value and value not in {member.value for member in enum_cls}:
        raise InvalidRequestError(f"Unknown {name}: {value}", {name: value})


def _parse_bound(value, end_of_day=False):
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        moment = value
    else:
        try:
            moment = datetime.fromisoformat(str(value))
        except ValueError:
            raise InvalidRequestError(f"Invalid date: {value}", {"date": str(value)}) from None
        # A bare date as the upper bound covers that whole day
        if end_of_day and len(str(value)) == 10:
            moment = datetime.combine(moment.date(), time.max)
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=UTC)
    return moment


def get_order(order_id, actor: Principal) -> dict:
    """Fully populated order, visible to its owner and administrators only."""
    order = load_order(order_id)
    actor.require_owner_or_admin(order.user_id, "order")

    owner = current_domain.repository_for(User).find_many([order.user_id]).get(str(order.user_id))
    return order_view(order, _products_for([order]), owner)


def get_user_orders(actor: Principal, status=None, payment_status=None, page=1, limit=USER_PAGE_SIZE) -> Page:
    actor.require_active()
    _check_choice(status, OrderStatus, "status")
    _check_choice(payment_status, PaymentStatus, "payment_status")

    request = PageRequest(page=page, limit=limit)
    orders, total = current_domain.repository_for(Order).find_page(
        offset=request.offset,
        limit=request.limit,
        user_id=actor.user_id,
        status=status,
        payment_status=payment_status,
    )
    return Page(items=_render(orders), request=request, total=total)


def get_all_orders(
    actor: Principal,
    status=None,
    payment_status=None,
    start_date=None,
    end_date=None,
    search=None,
    page=1,
    limit=ADMIN_PAGE_SIZE,
) -> Page:
    actor.require_admin()
    _check_choice(status, OrderStatus, "status")
    _check_choice(payment_status, PaymentStatus, "payment_status")

    request = PageRequest(page=page, limit=limit)
    search = search.strip() if search else None
    matching_user_ids = current_domain.repository_for(User).ids_with_email_like(search) if search else []

    orders, total = current_domain.repository_for(Order).find_page(
        offset=request.offset,
        limit=request.limit,
        status=status,
        payment_status=payment_status,
        created_from=_parse_bound(start_date),
        created_to=_parse_bound(end_date, end_of_day=True),
        search=search,
        matching_user_ids=matching_user_ids,
    )
    return Page(items=_render(orders, with_owners=True), request=request, total=total)


def get_order_stats(actor: Principal, period=DEFAULT_STATS_PERIOD, now: datetime | None = None) -> dict:
    """Totals over orders created within the period (``7d``, ``30d`` or ``90d``).

    Unknown periods fall back to ``30d``.
    """
    actor.require_admin()
    days = STATS_PERIODS.get(period, STATS_PERIODS[DEFAULT_STATS_PERIOD])
    since = (now or datetime.now(UTC)) - timedelta(days=days)

    repo = current_domain.repository_for(Order)
    total_orders = 0
    revenue = Decimal(0)
    pending = 0
    completed = 0

    offset = 0
    while True:
        batch, total = repo.find_page(offset=offset, limit=_STATS_BATCH, created_from=since)
        for order in batch:
            revenue += order.pricing.total
            if order.status == OrderStatus.PENDING.value:
                pending += 1
            elif order.status == OrderStatus.DELIVERED.value:
                completed += 1
        total_orders = total
        offset += _STATS_BATCH
        if not batch or offset >= total:
            break

    average = quantize(revenue / total_orders) if total_orders else Decimal(0)
    return {
        "period": period if period in STATS_PERIODS else DEFAULT_STATS_PERIOD,
        "total_orders": total_orders,
        "total_revenue": format_amount(revenue),
        "average_order_value": format_amount(average),
        "pending_orders": pending,
        "completed_orders": completed,
    }
