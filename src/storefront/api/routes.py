"""FastAPI routes for the storefront.

Routes translate HTTP into commands and queries and wrap results in the
response envelope ``{"success": true, "data": ..., "message"?: ...}``.
Failures are rendered by the handlers in ``storefront.api.errors``.
"""

import json

from fastapi import APIRouter, Depends, Query
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from protean.utils.globals import current_domain

from storefront.api.auth import actor_fields, current_principal, optional_principal
from storefront.api.schemas import (
    AddReviewRequest,
    AdjustStockRequest,
    CancelOrderRequest,
    ChangeRoleRequest,
    CreateOrderRequest,
    CreateProductRequest,
    RegisterUserRequest,
    ShippingInfoRequest,
    UpdateOrderStatusRequest,
    UpdateProductRequest,
    UpdateReviewRequest,
)
from storefront.order.cancellation import CancelOrder
from storefront.order.creation import CreateOrder
from storefront.order.queries import (
    ADMIN_PAGE_SIZE,
    DEFAULT_STATS_PERIOD,
    USER_PAGE_SIZE,
    get_all_orders,
    get_order,
    get_order_stats,
    get_user_orders,
)
from storefront.order.status import AddShippingInfo, MarkOrderDelivered, UpdateOrderStatus
from storefront.product.creation import CreateProduct
from storefront.product.details import RetireProduct, UpdateProduct
from storefront.product.queries import (
    DEFAULT_PAGE_SIZE,
    FEATURED_LIMIT,
    RELATED_LIMIT,
    featured_products,
    get_product,
    list_categories,
    list_products,
    related_products,
)
from storefront.product.stock import AdjustStock
from storefront.review.editing import UpdateReview
from storefront.review.queries import review_view
from storefront.review.rating import RecalculateProductRating
from storefront.review.removal import DeleteReview
from storefront.review.repository import load_review
from storefront.review.submission import AddReview
from storefront.shared.pagination import Page
from storefront.shared.principal import Principal
from storefront.user.administration import ChangeUserRole, DeactivateUser
from storefront.user.registration import RegisterUser


def _ok(data=None, message=None, status_code=200) -> JSONResponse:
    content = {"success": True, "data": data}
    if message:
        content["message"] = message
    return JSONResponse(status_code=status_code, content=jsonable_encoder(content))


def _paged(page: Page) -> JSONResponse:
    return JSONResponse(
        content=jsonable_encoder({"success": True, "data": page.items, "pagination": page.pagination()})
    )


def _process(command):
    return current_domain.process(command, asynchronous=False)


# ---------------------------------------------------------------------------
# Order Router
# ---------------------------------------------------------------------------
order_router = APIRouter(prefix="/orders", tags=["orders"])


@order_router.post("", status_code=201)
async def create_order(body: CreateOrderRequest, principal: Principal = Depends(current_principal)):
    notes = body.notes
    order_id = _process(
        CreateOrder(
            **actor_fields(principal),
            items=json.dumps([item.model_dump() for item in body.items]),
            shipping_address=json.dumps(body.shipping_address.model_dump()),
            billing_address=json.dumps(body.billing_address.model_dump()) if body.billing_address else None,
            payment_method=body.payment_method,
            customer_note=notes.customer if notes else None,
            admin_note=notes.admin if notes else None,
        )
    )
    return _ok(get_order(order_id, principal), message="Order created successfully", status_code=201)


@order_router.get("")
async def list_my_orders(
    status: str | None = None,
    payment_status: str | None = None,
    page: int = Query(1),
    limit: int = Query(USER_PAGE_SIZE),
    principal: Principal = Depends(current_principal),
):
    return _paged(get_user_orders(principal, status=status, payment_status=payment_status, page=page, limit=limit))


@order_router.get("/admin/all")
async def list_all_orders(
    status: str | None = None,
    payment_status: str | None = None,
    start_date: str | None = None,
    end_date: str | None = None,
    search: str | None = None,
    page: int = Query(1),
    limit: int = Query(ADMIN_PAGE_SIZE),
    principal: Principal = Depends(current_principal),
):
    return _paged(
        get_all_orders(
            principal,
            status=status,
            payment_status=payment_status,
            start_date=start_date,
            end_date=end_date,
            search=search,
            page=page,
            limit=limit,
        )
    )


@order_router.get("/admin/stats")
async def order_stats(period: str = DEFAULT_STATS_PERIOD, principal: Principal = Depends(current_principal)):
    return _ok(get_order_stats(principal, period))


@order_router.get("/{order_id}")
async def read_order(order_id: str, principal: Principal = Depends(current_principal)):
    return _ok(get_order(order_id, principal))


@order_router.put("/{order_id}/status")
async def update_order_status(
    order_id: str, body: UpdateOrderStatusRequest, principal: Principal = Depends(current_principal)
):
    _process(UpdateOrderStatus(**actor_fields(principal), order_id=order_id, status=body.status, note=body.note))
    return _ok(get_order(order_id, principal), message="Order status updated")


@order_router.put("/{order_id}/shipping")
async def add_shipping_info(order_id: str, body: ShippingInfoRequest, principal: Principal = Depends(current_principal)):
    _process(
        AddShippingInfo(
            **actor_fields(principal),
            order_id=order_id,
            tracking_number=body.tracking_number,
            carrier=body.carrier,
            estimated_delivery=body.estimated_delivery,
        )
    )
    return _ok(get_order(order_id, principal), message="Shipping information added")


@order_router.put("/{order_id}/delivered")
async def mark_delivered(order_id: str, principal: Principal = Depends(current_principal)):
    _process(MarkOrderDelivered(**actor_fields(principal), order_id=order_id))
    return _ok(get_order(order_id, principal), message="Order marked as delivered")


@order_router.put("/{order_id}/cancel")
async def cancel_order(
    order_id: str,
    body: CancelOrderRequest | None = None,
    principal: Principal = Depends(current_principal),
):
    _process(CancelOrder(**actor_fields(principal), order_id=order_id, reason=body.reason if body else None))
    return _ok(get_order(order_id, principal), message="Order cancelled successfully")


# ---------------------------------------------------------------------------
# Product Router
# ---------------------------------------------------------------------------
product_router = APIRouter(prefix="/products", tags=["products"])


@product_router.get("")
async def browse_products(
    category: str | None = None,
    min_price: str | None = None,
    max_price: str | None = None,
    search: str | None = None,
    featured: bool | None = None,
    active: bool | None = True,
    sort: str = "created_at",
    order: str = "desc",
    page: int = Query(1),
    limit: int = Query(DEFAULT_PAGE_SIZE),
    principal: Principal | None = Depends(optional_principal),
):
    return _paged(
        list_products(
            actor=principal,
            page=page,
            limit=limit,
            category=category,
            min_price=min_price,
            max_price=max_price,
            search=search,
            featured=featured,
            active=active,
            sort=sort,
            order=order,
        )
    )


@product_router.get("/categories")
async def categories():
    return _ok(list_categories())


@product_router.get("/featured")
async def featured(limit: int = Query(FEATURED_LIMIT, ge=1, le=50)):
    return _ok(featured_products(limit))


@product_router.get("/{product_id}")
async def read_product(product_id: str):
    return _ok(get_product(product_id))


@product_router.get("/{product_id}/related")
async def related(product_id: str, limit: int = Query(RELATED_LIMIT, ge=1, le=20)):
    return _ok(related_products(product_id, limit))


@product_router.post("", status_code=201)
async def create_product(body: CreateProductRequest, principal: Principal = Depends(current_principal)):
    product_id = _process(
        CreateProduct(
            **actor_fields(principal),
            name=body.name,
            description=body.description,
            category=body.category,
            price=str(body.price),
            stock=body.stock,
            images=json.dumps(body.images),
            is_active=body.is_active,
            is_featured=body.is_featured,
        )
    )
    return _ok(get_product(product_id), message="Product created successfully", status_code=201)


@product_router.put("/{product_id}")
async def update_product(product_id: str, body: UpdateProductRequest, principal: Principal = Depends(current_principal)):
    _process(
        UpdateProduct(
            **actor_fields(principal),
            product_id=product_id,
            name=body.name,
            description=body.description,
            category=body.category,
            price=str(body.price) if body.price is not None else None,
            images=json.dumps(body.images) if body.images is not None else None,
            is_active=body.is_active,
            is_featured=body.is_featured,
        )
    )
    return _ok(get_product(product_id), message="Product updated successfully")


@product_router.delete("/{product_id}")
async def retire_product(product_id: str, principal: Principal = Depends(current_principal)):
    _process(RetireProduct(**actor_fields(principal), product_id=product_id))
    return _ok(message="Product retired successfully")


@product_router.put("/{product_id}/stock")
async def adjust_stock(product_id: str, body: AdjustStockRequest, principal: Principal = Depends(current_principal)):
    stock = _process(AdjustStock(**actor_fields(principal), product_id=product_id, delta=body.delta, reason=body.reason))
    return _ok({"product_id": product_id, "stock": stock}, message="Stock adjusted")


@product_router.post("/{product_id}/rating/recalculate")
async def recalculate_rating(product_id: str, principal: Principal = Depends(current_principal)):
    rating = _process(RecalculateProductRating(**actor_fields(principal), product_id=product_id))
    return _ok(rating)


@product_router.post("/{product_id}/reviews", status_code=201)
async def add_review(product_id: str, body: AddReviewRequest, principal: Principal = Depends(current_principal)):
    review_id = _process(
        AddReview(**actor_fields(principal), product_id=product_id, rating=body.rating, comment=body.comment)
    )
    return _ok(review_view(load_review(product_id, review_id)), message="Review added successfully", status_code=201)


@product_router.put("/{product_id}/reviews/{review_id}")
async def update_review(
    product_id: str,
    review_id: str,
    body: UpdateReviewRequest,
    principal: Principal = Depends(current_principal),
):
    _process(
        UpdateReview(
            **actor_fields(principal),
            product_id=product_id,
            review_id=review_id,
            rating=body.rating,
            comment=body.comment,
        )
    )
    return _ok(review_view(load_review(product_id, review_id)), message="Review updated successfully")


@product_router.delete("/{product_id}/reviews/{review_id}")
async def delete_review(product_id: str, review_id: str, principal: Principal = Depends(current_principal)):
    _process(DeleteReview(**actor_fields(principal), product_id=product_id, review_id=review_id))
    return _ok(message="Review deleted successfully")


# ---------------------------------------------------------------------------
# User Router
# ---------------------------------------------------------------------------
user_router = APIRouter(prefix="/users", tags=["users"])


@user_router.post("", status_code=201)
async def sync_user(body: RegisterUserRequest):
    """Directory sync, called by the identity provider webhook relay."""
    user_id = _process(
        RegisterUser(
            external_id=body.external_id,
            email=body.email,
            first_name=body.first_name,
            last_name=body.last_name,
        )
    )
    return _ok({"user_id": user_id}, status_code=201)


@user_router.put("/{user_id}/role")
async def change_role(user_id: str, body: ChangeRoleRequest, principal: Principal = Depends(current_principal)):
    _process(ChangeUserRole(**actor_fields(principal), user_id=user_id, role=body.role))
    return _ok({"user_id": user_id, "role": body.role.lower()}, message="Role updated")


@user_router.put("/{user_id}/deactivate")
async def deactivate_user(user_id: str, principal: Principal = Depends(current_principal)):
    _process(DeactivateUser(**actor_fields(principal), user_id=user_id))
    return _ok({"user_id": user_id, "is_active": False}, message="User deactivated")
