# storefront/client/catalog.py
import logging
import math
from datetime import datetime, timezone

import httpx

from storefront.client.api import ApiError, StorefrontAPI
from storefront.fixtures import SAMPLE_PRODUCTS
from storefront.schemas.common import Pagination
from storefront.schemas.product import ProductRead
from storefront.services.product_service import normalize_paging

logger = logging.getLogger(__name__)

FIXTURE_TIMESTAMP = datetime(2024, 1, 1, tzinfo=timezone.utc)


def fixture_products() -> list[ProductRead]:
    return [
        ProductRead(
            **data,
            in_stock=data["stock"] > 0,
            created_at=FIXTURE_TIMESTAMP,
            updated_at=FIXTURE_TIMESTAMP,
        )
        for data in SAMPLE_PRODUCTS
    ]


class Catalog:
    """
    Product browsing for the storefront.

    When the API cannot be reached (or answers with an error) the bundled
    sample catalog is served instead; the caller is not told, only a warning
    is logged.
    """

    def __init__(self, api: StorefrontAPI | None):
        self.api = api

    def list_products(
        self,
        page: int = 1,
        limit: int = 20,
        category: str | None = None,
        sort: str | None = None,
        order: str | None = None,
    ) -> tuple[list[ProductRead], Pagination]:
        if self.api is not None:
            try:
                return self.api.list_products(
                    page=page, limit=limit, category=category, sort=sort, order=order
                )
            except (httpx.HTTPError, ApiError) as exc:
                logger.warning("Product list unavailable (%s); using sample catalog", exc)

        page, limit = normalize_paging(page, limit)
        products = [p for p in fixture_products() if not category or p.category == category]
        start = (page - 1) * limit
        pagination = Pagination(
            current_page=page,
            total_pages=math.ceil(len(products) / limit),
            total_items=len(products),
            items_per_page=limit,
        )
        return products[start:start + limit], pagination

    def get_product(self, product_id: str) -> ProductRead | None:
        if self.api is not None:
            try:
                return self.api.get_product(product_id)
            except (httpx.HTTPError, ApiError) as exc:
                logger.warning("Product %s unavailable (%s); using sample catalog", product_id, exc)

        for product in fixture_products():
            if product.id == product_id:
                return product
        return None
