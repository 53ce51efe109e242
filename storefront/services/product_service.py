# storefront/services/product_service.py
import logging
import math

from sqlmodel import Session

from storefront.core.errors import NotFoundError
from storefront.core.ids import ensure_object_id
from storefront.models.product import Product
from storefront.repositories.cart_repo import CartRepository
from storefront.repositories.product_repo import ProductRepository, SORTABLE_COLUMNS
from storefront.schemas.common import Pagination
from storefront.schemas.product import ProductCreate, ProductUpdate

logger = logging.getLogger(__name__)

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 20
MAX_LIMIT = 100
DEFAULT_SORT = "createdAt"
# offsets must stay inside a signed 64-bit SQL integer
MAX_PAGE = 2**31 - 1


def _positive_int(raw: str | int | None, default: int, ceiling: int | None = None) -> int:
    """
    Lenient query parsing: anything that is not an integer (or above
    `ceiling`) becomes the default.
    """
    if raw is None:
        return default
    try:
        value = int(raw)
    except (TypeError, ValueError):
        return default
    if value < 1 or (ceiling is not None and value > ceiling):
        return default
    return value


def normalize_paging(page: str | int | None, limit: str | int | None) -> tuple[int, int]:
    """Return (page, limit) with defaults applied and limit capped at MAX_LIMIT."""
    page_no = _positive_int(page, DEFAULT_PAGE, MAX_PAGE)
    per_page = min(_positive_int(limit, DEFAULT_LIMIT), MAX_LIMIT)
    return page_no, per_page


class ProductService:
    """
    Business logic for the product catalog.

    Responsibilities:
      - id format validation before any query
      - pagination / filter / sort normalization
      - keeping carts consistent when a product is deleted
    """

    def __init__(self, repo: ProductRepository, cart_repo: CartRepository):
        self.repo = repo
        self.cart_repo = cart_repo

    def list_products(
        self,
        session: Session,
        page: str | int | None = None,
        limit: str | int | None = None,
        category: str | None = None,
        sort: str | None = None,
        order: str | None = None,
    ) -> tuple[list[Product], Pagination]:
        """
        Paginated product listing.

        - page defaults to 1, limit to 20 (capped at 100)
        - unknown sort keys fall back to createdAt
        - order is "asc" or anything else (= desc)
        """
        page_no, per_page = normalize_paging(page, limit)
        sort_key = sort if sort in SORTABLE_COLUMNS else DEFAULT_SORT
        descending = order != "asc"
        category = category or None

        products = self.repo.list(
            session,
            skip=(page_no - 1) * per_page,
            limit=per_page,
            category=category,
            sort=sort_key,
            descending=descending,
        )
        total = self.repo.count(session, category=category)

        pagination = Pagination(
            current_page=page_no,
            total_pages=math.ceil(total / per_page),
            total_items=total,
            items_per_page=per_page,
        )
        return products, pagination

    def get_product(self, session: Session, product_id: str) -> Product:
        product_id = ensure_object_id(product_id)
        product = self.repo.get_by_id(session, product_id)
        if not product:
            raise NotFoundError("Product not found")
        return product

    def create_product(self, session: Session, payload: ProductCreate) -> Product:
        product = Product(**payload.model_dump())
        product = self.repo.create(session, product)
        logger.info("Created product %s (%s)", product.id, product.name)
        return product

    def update_product(
        self,
        session: Session,
        product_id: str,
        payload: ProductUpdate,
    ) -> Product:
        """
        Partial update: only fields present (and non-null) in the payload
        are applied.
        """
        product = self.get_product(session, product_id)

        for field, value in payload.model_dump(exclude_unset=True, exclude_none=True).items():
            setattr(product, field, value)

        return self.repo.update(session, product)

    def delete_product(self, session: Session, product_id: str) -> str:
        """
        Delete a product and drop it from every cart that references it.
        """
        product = self.get_product(session, product_id)
        removed = self.cart_repo.delete_lines_for_product(session, product.id)
        if removed:
            logger.info("Removed product %s from %d cart line(s)", product.id, removed)
        deleted_id = product.id
        self.repo.delete(session, product)
        return deleted_id
