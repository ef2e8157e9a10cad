"""Repository for the Order aggregate."""

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain
from protean.utils.query import Q

from storefront.domain import storefront
from storefront.order.order import Order
from storefront.shared.errors import OrderNotFoundError


@storefront.repository(part_of=Order)
class OrderRepository:
    def find_page(
        self,
        offset,
        limit,
        user_id=None,
        status=None,
        payment_status=None,
        created_from=None,
        created_to=None,
        search=None,
        matching_user_ids=(),
    ):
        """Newest-first page of orders. Returns ``(items, total)``.

        ``user_id`` scopes the query to one owner; it is applied as a filter
        criterion, never by discarding rows after the read.
        """
        query = self._dao.query
        if user_id is not None:
            query = query.filter(user_id=str(user_id))
        if status:
            query = query.filter(status=status)
        if payment_status:
            query = query.filter(payment_status=payment_status)
        if created_from is not None:
            query = query.filter(created_at__gte=created_from)
        if created_to is not None:
            query = query.filter(created_at__lte=created_to)
        if search:
            criteria = Q(order_number__icontains=search)
            if matching_user_ids:
                criteria = criteria | Q(user_id__in=list(matching_user_ids))
            query = query.filter(criteria)

        result = query.order_by("-created_at").offset(offset).limit(limit).all()
        return result.items, result.total


def load_order(order_id) -> Order:
    try:
        return current_domain.repository_for(Order).get(order_id)
    except ObjectNotFoundError:
        raise OrderNotFoundError(order_id) from None
