# storefront/models/cart.py
from datetime import datetime

from sqlalchemy import UniqueConstraint
from sqlmodel import SQLModel, Field

from storefront.core.ids import new_object_id
from storefront.models.product import utcnow


class Cart(SQLModel, table=True):
    """
    Cart record for one caller-supplied session id.

    Created empty on first access, never deleted: clearing only removes
    its items.
    """

    __tablename__ = "carts"

    id: str = Field(
        default_factory=new_object_id,
        primary_key=True,
        max_length=24,
    )

    session_id: str = Field(
        max_length=128,
        unique=True,
        index=True,
        description="Identifier supplied by the caller (X-Cart-Session)",
    )

    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


class CartItem(SQLModel, table=True):
    """
    One product line inside a cart.
    One cart cannot have 2 rows for the same product.

    The autoincrement id doubles as insertion order.
    """

    __tablename__ = "cart_items"
    __table_args__ = (
        UniqueConstraint("cart_id", "product_id", name="uq_cart_items_cart_product"),
    )

    id: int | None = Field(
        default=None,
        primary_key=True,
    )

    cart_id: str = Field(
        foreign_key="carts.id",
        index=True,
    )

    product_id: str = Field(
        foreign_key="products.id",
        index=True,
    )

    quantity: int = Field(
        gt=0,
        description="Must be >= 1",
    )

    # Snapshot of the product when the line was created
    name: str
    price: float = Field(description="Price when added to cart")
    image_url: str | None = None

    created_at: datetime = Field(default_factory=utcnow)
