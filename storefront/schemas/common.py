# storefront/schemas/common.py
from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

DataT = TypeVar("DataT")


class CamelModel(BaseModel):
    """
    Base for wire schemas: snake_case in Python, camelCase in JSON.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ApiResponse(BaseModel, Generic[DataT]):
    """
    Envelope used by every endpoint: {success, message?, data?, error?}
    """

    success: bool = True
    message: str | None = None
    data: DataT | None = None
    error: str | None = None


class Pagination(CamelModel):
    current_page: int
    total_pages: int
    total_items: int
    items_per_page: int


class PaginatedResponse(ApiResponse[DataT], Generic[DataT]):
    pagination: Pagination


class DeletedRead(BaseModel):
    id: str
