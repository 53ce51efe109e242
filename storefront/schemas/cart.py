# storefront/schemas/cart.py
from pydantic import Field

from storefront.core.cart_rules import CartLine, CartTotals, line_total
from storefront.schemas.common import CamelModel


class CartItemCreate(CamelModel):
    """
    Payload for adding to cart: {productId, quantity}
    """

    product_id: str
    quantity: int = Field(ge=1, strict=True)


class CartItemUpdate(CamelModel):
    """
    Payload for updating quantity of a cart item.
    """

    quantity: int = Field(ge=1, strict=True)


class CartItemRead(CamelModel):
    """
    Read model for a single cart line, priced against the live product.
    """

    product_id: str
    name: str
    price: float
    image_url: str | None = None
    quantity: int
    max_stock: int
    in_stock: bool
    line_total: float

    @classmethod
    def from_line(cls, line: CartLine) -> "CartItemRead":
        return cls(
            product_id=line.product_id,
            name=line.name,
            price=line.price,
            image_url=line.image_url,
            quantity=line.quantity,
            max_stock=line.max_stock,
            in_stock=line.max_stock >= line.quantity,
            line_total=line_total(line),
        )


class CartRead(CamelModel):
    """
    Full cart response model with totals.
    """

    items: list[CartItemRead] = Field(default_factory=list)
    total_items: int = 0
    subtotal: float = 0.0

    @classmethod
    def build(cls, lines: list[CartLine], totals: CartTotals) -> "CartRead":
        return cls(
            items=[CartItemRead.from_line(line) for line in lines],
            total_items=totals.total_items,
            subtotal=totals.subtotal,
        )
