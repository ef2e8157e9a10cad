"""Repository for the Product aggregate with catalog read queries."""

from protean.utils.query import Q

from storefront.domain import storefront
from storefront.product.product import Product

# Public sort keys mapped to stored attributes
SORT_FIELDS = {
    "created_at": "created_at",
    "price": "price_minor",
    "rating_average": "rating_average",
    "rating_count": "rating_count",
    "name": "name",
}

_BATCH = 100


@storefront.repository(part_of=Product)
class ProductRepository:
    def find_many(self, product_ids) -> dict[str, Product]:
        """Resolve a set of ids in one read, keyed by id. Unknown ids are absent."""
        ids = sorted({str(pid) for pid in product_ids})
        if not ids:
            return {}
        found = self._dao.query.filter(id__in=ids).limit(len(ids)).all()
        return {str(product.id): product for product in found.items}

    def search(
        self,
        offset,
        limit,
        category=None,
        min_price_minor=None,
        max_price_minor=None,
        search=None,
        featured=None,
        active=True,
        sort="created_at",
        descending=True,
    ):
        """Filtered, sorted page of products. Returns ``(items, total)``."""
        query = self._dao.query
        if active is not None:
            query = query.filter(is_active=active)
        if category:
            query = query.filter(category=category)
        if min_price_minor is not None:
            query = query.filter(price_minor__gte=min_price_minor)
        if max_price_minor is not None:
            query = query.filter(price_minor__lte=max_price_minor)
        if featured is not None:
            query = query.filter(is_featured=featured)
        if search:
            query = query.filter(
                Q(name__icontains=search) | Q(description__icontains=search) | Q(category__icontains=search)
            )

        attribute = SORT_FIELDS.get(sort, "created_at")
        query = query.order_by(f"-{attribute}" if descending else attribute)

        result = query.offset(offset).limit(limit).all()
        return result.items, result.total

    def active_categories(self) -> list[str]:
        categories = set()
        offset = 0
        while True:
            batch = self._dao.query.filter(is_active=True).offset(offset).limit(_BATCH).all()
            categories.update(product.category for product in batch.items if product.category)
            offset += _BATCH
            if offset >= batch.total:
                break
        return sorted(categories)

    def featured(self, limit) -> list[Product]:
        return (
            self._dao.query.filter(is_active=True, is_featured=True)
            .order_by("-rating_average")
            .limit(limit)
            .all()
            .items
        )

    def related(self, product: Product, limit) -> list[Product]:
        if not product.category:
            return []
        candidates = (
            self._dao.query.filter(is_active=True, category=product.category)
            .order_by("-rating_average")
            .limit(limit + 1)
            .all()
            .items
        )
        return [p for p in candidates if p.id != product.id][:limit]
