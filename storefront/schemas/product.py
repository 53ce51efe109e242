# storefront/schemas/product.py
import re
from datetime import datetime
from decimal import Decimal
from typing import Literal

from pydantic import ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from storefront.schemas.common import CamelModel

Category = Literal["Electronics", "Clothing", "Books", "Home", "Sports", "Other"]

URL_RE = re.compile(r"^https?://.+")


def _check_price(v: float | None) -> float | None:
    if v is None:
        return v
    exponent = Decimal(str(v)).normalize().as_tuple().exponent
    if isinstance(exponent, int) and exponent < -2:
        raise ValueError("Price must have at most 2 decimal places")
    return v


def _check_url(v: str | None) -> str | None:
    if v is None:
        return v
    v = v.strip()
    if not URL_RE.match(v):
        raise ValueError("Please provide a valid URL")
    return v


def _check_text(v: str | None) -> str | None:
    if v is None:
        return v
    v = v.strip()
    if not v:
        raise ValueError("field cannot be empty")
    return v


class ProductCreate(CamelModel):
    """
    Payload for creating a product.
    """

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="forbid"
    )

    name: str = Field(max_length=200)
    description: str = Field(max_length=2000)
    price: float = Field(ge=0)
    category: Category = "Other"
    image_url: str
    images: list[str] = Field(default_factory=list)
    stock: int = Field(default=0, ge=0)
    rating: float = Field(default=0, ge=0, le=5)
    specifications: dict[str, str] = Field(default_factory=dict)

    @field_validator("name", "description")
    @classmethod
    def not_empty(cls, v: str) -> str:
        return _check_text(v)

    @field_validator("price")
    @classmethod
    def two_decimals(cls, v: float) -> float:
        return _check_price(v)

    @field_validator("image_url")
    @classmethod
    def valid_url(cls, v: str) -> str:
        return _check_url(v)


class ProductUpdate(CamelModel):
    """
    Partial update payload for products.
    All fields are optional; validators run on whatever is sent.
    """

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="forbid"
    )

    name: str | None = Field(default=None, max_length=200)
    description: str | None = Field(default=None, max_length=2000)
    price: float | None = Field(default=None, ge=0)
    category: Category | None = None
    image_url: str | None = None
    images: list[str] | None = None
    stock: int | None = Field(default=None, ge=0)
    rating: float | None = Field(default=None, ge=0, le=5)
    specifications: dict[str, str] | None = None

    @field_validator("name", "description")
    @classmethod
    def not_empty(cls, v: str | None) -> str | None:
        return _check_text(v)

    @field_validator("price")
    @classmethod
    def two_decimals(cls, v: float | None) -> float | None:
        return _check_price(v)

    @field_validator("image_url")
    @classmethod
    def valid_url(cls, v: str | None) -> str | None:
        return _check_url(v)


class ProductRead(CamelModel):
    """
    Product representation for clients.
    """

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, from_attributes=True
    )

    id: str
    name: str
    description: str
    price: float
    category: str
    image_url: str
    images: list[str]
    stock: int
    rating: float
    specifications: dict[str, str]
    in_stock: bool
    created_at: datetime
    updated_at: datetime
