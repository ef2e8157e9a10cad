"""Order pricing.

Pure arithmetic over resolved line items. Every amount is a two-place
``Decimal``; tax is rounded half-up once, on the subtotal, never per line.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from decimal import Decimal

from storefront.shared.money import quantize
from storefront.utils.settings import env_decimal


@dataclass(frozen=True)
class PricingPolicy:
    free_shipping_threshold: Decimal = Decimal("1000")
    flat_shipping_cost: Decimal = Decimal("100")
    tax_rate: Decimal = Decimal("0.05")

    @classmethod
    def from_env(cls) -> "PricingPolicy":
        return cls(
            free_shipping_threshold=env_decimal("STOREFRONT_FREE_SHIPPING_THRESHOLD", "1000"),
            flat_shipping_cost=env_decimal("STOREFRONT_FLAT_SHIPPING_COST", "100"),
            tax_rate=env_decimal("STOREFRONT_TAX_RATE", "0.05"),
        )


@dataclass(frozen=True)
class PricedLine:
    product_id: str
    product_name: str
    quantity: int
    unit_price: Decimal
    line_total: Decimal


@dataclass(frozen=True)
class PriceBreakdown:
    lines: tuple[PricedLine, ...]
    subtotal: Decimal
    shipping_cost: Decimal
    tax: Decimal
    total: Decimal


def price_line(product_id, product_name, quantity: int, unit_price: Decimal) -> PricedLine:
    unit_price = quantize(unit_price)
    return PricedLine(
        product_id=str(product_id),
        product_name=product_name,
        quantity=quantity,
        unit_price=unit_price,
        line_total=quantize(unit_price * quantity),
    )


def shipping_for(subtotal: Decimal, policy: PricingPolicy) -> Decimal:
    # Strictly greater: a subtotal exactly at the threshold still pays shipping
    if subtotal > policy.free_shipping_threshold:
        return quantize(Decimal(0))
    return quantize(policy.flat_shipping_cost)


def price_order(lines: Iterable[PricedLine], policy: PricingPolicy | None = None) -> PriceBreakdown:
    policy = policy or PricingPolicy.from_env()
    lines = tuple(lines)

    subtotal = quantize(sum((line.line_total for line in lines), Decimal(0)))
    shipping_cost = shipping_for(subtotal, policy)
    tax = quantize(subtotal * policy.tax_rate)

    return PriceBreakdown(
        lines=lines,
        subtotal=subtotal,
        shipping_cost=shipping_cost,
        tax=tax,
        total=subtotal + shipping_cost + tax,
    )
