# storefront/core/cart_rules.py
"""
Cart rules shared by the server cart service and the client cart store.

Every function here is pure: it receives the current lines and returns a new
list, never touching the input. The only difference between the two callers
is the stock policy:

  - StockPolicy.REJECT (server): exceeding stock raises InsufficientStockError
  - StockPolicy.CLAMP  (client): quantities are silently clamped to stock
"""

from decimal import Decimal, ROUND_HALF_UP
from enum import Enum

from sqlmodel import SQLModel, Field

from storefront.core.errors import (
    InputValidationError,
    InsufficientStockError,
    NotFoundError,
)

CENTS = Decimal("0.01")


class StockPolicy(str, Enum):
    CLAMP = "clamp"
    REJECT = "reject"


class ProductSnapshot(SQLModel):
    """
    What the cart needs to know about a product at the moment of a check.
    """

    product_id: str
    name: str
    price: float = Field(ge=0)
    image_url: str | None = None
    stock: int = Field(ge=0)


class CartLine(SQLModel):
    """
    One product's entry in a cart.

    name/price/image_url are denormalized from the product when the line was
    last validated; max_stock is the stock ceiling seen at that time.
    """

    product_id: str
    name: str
    price: float
    image_url: str | None = None
    quantity: int = Field(ge=1)
    max_stock: int = Field(ge=0)


class CartTotals(SQLModel):
    total_items: int = 0
    subtotal: float = 0.0


# ---- helpers ----


def round_money(value: Decimal | float | int) -> float:
    """Round half-up to cents."""
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return float(value.quantize(CENTS, rounding=ROUND_HALF_UP))


def line_total(line: CartLine) -> float:
    return round_money(Decimal(str(line.price)) * line.quantity)


def validate_quantity(quantity: object) -> int:
    # bool is an int subclass; True is not a quantity
    if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
        raise InputValidationError(error="Quantity must be a positive integer")
    return quantity


def find_line(lines: list[CartLine], product_id: str) -> CartLine | None:
    for line in lines:
        if line.product_id == product_id:
            return line
    return None


def _line_from_snapshot(product: ProductSnapshot, quantity: int) -> CartLine:
    return CartLine(
        product_id=product.product_id,
        name=product.name,
        price=product.price,
        image_url=product.image_url,
        quantity=quantity,
        max_stock=product.stock,
    )


# ---- operations ----


def compute_totals(lines: list[CartLine]) -> CartTotals:
    """
    total_items = sum of quantities
    subtotal    = round_half_up(sum(quantity * price), 2)
    """
    total_items = 0
    subtotal = Decimal("0")
    for line in lines:
        total_items += line.quantity
        subtotal += Decimal(str(line.price)) * line.quantity
    return CartTotals(total_items=total_items, subtotal=round_money(subtotal))


def add_line(
    lines: list[CartLine],
    product: ProductSnapshot,
    quantity: int,
    policy: StockPolicy,
) -> list[CartLine]:
    """
    Add `quantity` of `product`, merging into an existing line.

    Rules:
      - quantity must be a positive integer
      - an out-of-stock product cannot be added under either policy
      - REJECT: quantity (or existing + quantity) > stock => InsufficientStockError
      - CLAMP : the resulting quantity is min(requested, stock)
      - an existing line keeps its position; its denormalized fields are
        refreshed from the snapshot
    """
    quantity = validate_quantity(quantity)
    stock = product.stock

    if stock < 1:
        raise InsufficientStockError(error="Product is out of stock")

    if policy is StockPolicy.REJECT and quantity > stock:
        raise InsufficientStockError(error=f"Only {stock} items available in stock")

    existing = find_line(lines, product.product_id)

    if existing is None:
        return [*lines, _line_from_snapshot(product, min(quantity, stock))]

    new_quantity = existing.quantity + quantity
    if new_quantity > stock:
        if policy is StockPolicy.REJECT:
            raise InsufficientStockError(
                error=(
                    f"Only {stock} items available. "
                    f"You already have {existing.quantity} in cart."
                )
            )
        new_quantity = stock

    merged = _line_from_snapshot(product, new_quantity)
    return [merged if line is existing else line for line in lines]


def set_line_quantity(
    lines: list[CartLine],
    product_id: str,
    quantity: int,
    policy: StockPolicy,
    stock: int | None = None,
) -> list[CartLine]:
    """
    Set the quantity of an existing line.

    `stock` is the live stock ceiling. REJECT requires it; CLAMP falls back
    to the line's own max_stock when it is not given.
    """
    existing = find_line(lines, product_id)
    if existing is None:
        raise NotFoundError("Product not found in cart")

    quantity = validate_quantity(quantity)

    if policy is StockPolicy.REJECT:
        if stock is None:
            raise ValueError("REJECT policy needs the live stock value")
        if quantity > stock:
            raise InsufficientStockError(error=f"Only {stock} items available in stock")
        ceiling = stock
    else:
        ceiling = existing.max_stock if stock is None else stock
        quantity = min(quantity, ceiling)
        if quantity < 1:
            raise InsufficientStockError(error="Product is out of stock")

    updated = existing.model_copy(update={"quantity": quantity, "max_stock": ceiling})
    return [updated if line is existing else line for line in lines]


def remove_line(
    lines: list[CartLine],
    product_id: str,
    missing_ok: bool,
) -> list[CartLine]:
    """
    Drop the line for `product_id`.

    missing_ok=True returns the lines unchanged when nothing matches;
    missing_ok=False raises NotFoundError.
    """
    remaining = [line for line in lines if line.product_id != product_id]
    if len(remaining) == len(lines) and not missing_ok:
        raise NotFoundError("Product not found in cart")
    return remaining


def clear_lines() -> list[CartLine]:
    return []
