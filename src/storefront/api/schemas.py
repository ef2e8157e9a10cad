"""Pydantic request schemas for the storefront API.

These are external contracts, kept separate from the internal Protean
commands. Amounts are accepted as decimal strings (or numbers) and never
handled as floats inside the domain.
"""

from decimal import Decimal

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Orders
# ---------------------------------------------------------------------------
class AddressSchema(BaseModel):
    name: str | None = None
    phone: str | None = None
    street: str
    city: str
    state: str | None = None
    postal_code: str
    country: str


class CartItemSchema(BaseModel):
    product_id: str
    quantity: int


class NotesSchema(BaseModel):
    customer: str | None = None
    admin: str | None = None


class CreateOrderRequest(BaseModel):
    items: list[CartItemSchema]
    shipping_address: AddressSchema
    billing_address: AddressSchema | None = None
    payment_method: str | None = None
    notes: NotesSchema | None = None

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "items": [{"product_id": "3f1c0c1e-prod", "quantity": 2}],
                    "shipping_address": {
                        "street": "221B Baker Street",
                        "city": "London",
                        "postal_code": "NW1 6XE",
                        "country": "UK",
                    },
                    "payment_method": "card",
                    "notes": {"customer": "Leave at the door"},
                }
            ]
        }
    }


class UpdateOrderStatusRequest(BaseModel):
    status: str
    note: str | None = None


class ShippingInfoRequest(BaseModel):
    tracking_number: str = Field(min_length=1, max_length=255)
    carrier: str = Field(min_length=1, max_length=100)
    estimated_delivery: str | None = None


class CancelOrderRequest(BaseModel):
    reason: str | None = Field(default=None, max_length=500)


# ---------------------------------------------------------------------------
# Products
# ---------------------------------------------------------------------------
class CreateProductRequest(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    description: str | None = None
    category: str | None = None
    price: Decimal = Field(ge=0)
    stock: int = Field(default=0, ge=0)
    images: list[str] = Field(default_factory=list)
    is_active: bool = True
    is_featured: bool = False

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "name": "Trail Running Shoe",
                    "category": "footwear",
                    "price": "129.99",
                    "stock": 40,
                    "images": ["https://cdn.example.com/shoe.jpg"],
                }
            ]
        }
    }


class UpdateProductRequest(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=200)
    description: str | None = None
    category: str | None = None
    price: Decimal | None = Field(default=None, ge=0)
    images: list[str] | None = None
    is_active: bool | None = None
    is_featured: bool | None = None


class AdjustStockRequest(BaseModel):
    delta: int
    reason: str = Field(min_length=1, max_length=255)


class AddReviewRequest(BaseModel):
    rating: int
    comment: str | None = None


class UpdateReviewRequest(BaseModel):
    rating: int | None = None
    comment: str | None = None


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------
class RegisterUserRequest(BaseModel):
    external_id: str = Field(min_length=1, max_length=255)
    email: str
    first_name: str | None = None
    last_name: str | None = None


class ChangeRoleRequest(BaseModel):
    role: str
