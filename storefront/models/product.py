# storefront/models/product.py
from datetime import datetime, timezone

from sqlalchemy import Column, JSON
from sqlmodel import SQLModel, Field

from storefront.core.ids import new_object_id

CATEGORIES: tuple[str, ...] = (
    "Electronics",
    "Clothing",
    "Books",
    "Home",
    "Sports",
    "Other",
)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Product(SQLModel, table=True):
    """
    Product catalog entry.

    The cart never owns a product; it re-reads price and stock from this
    table on every server-side check.
    """

    __tablename__ = "products"

    id: str = Field(
        default_factory=new_object_id,
        primary_key=True,
        max_length=24,
        description="24-char hex id",
    )

    name: str = Field(
        max_length=200,
        index=True,
        description="Display name",
    )

    description: str = Field(
        max_length=2000,
    )

    price: float = Field(
        ge=0,
        index=True,
        description="Unit price, at most 2 decimal places",
    )

    category: str = Field(
        default="Other",
        index=True,
        description="One of CATEGORIES",
    )

    image_url: str = Field(
        description="Main image URL (http/https)",
    )

    images: list[str] = Field(
        default_factory=list,
        sa_column=Column(JSON, nullable=False),
    )

    stock: int = Field(
        default=0,
        ge=0,
        description="How many units currently in stock",
    )

    rating: float = Field(
        default=0,
        ge=0,
        le=5,
    )

    specifications: dict[str, str] = Field(
        default_factory=dict,
        sa_column=Column(JSON, nullable=False),
    )

    created_at: datetime = Field(
        default_factory=utcnow,
        index=True,
        description="Creation timestamp (UTC)",
    )

    updated_at: datetime = Field(
        default_factory=utcnow,
        description="Last modification timestamp (UTC)",
    )

    @property
    def in_stock(self) -> bool:
        return self.stock > 0
