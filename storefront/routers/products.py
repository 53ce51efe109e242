# storefront/routers/products.py
from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from storefront.database import get_session
from storefront.repositories.cart_repo import CartRepository
from storefront.repositories.product_repo import ProductRepository
from storefront.schemas.common import ApiResponse, DeletedRead, PaginatedResponse
from storefront.schemas.product import ProductCreate, ProductRead, ProductUpdate
from storefront.services.product_service import ProductService

router = APIRouter(prefix="/products", tags=["Products"])

repo = ProductRepository()
service = ProductService(repo, CartRepository())


# -------- Public endpoints --------


@router.get("", response_model=PaginatedResponse[list[ProductRead]])
def list_products(
    session: Session = Depends(get_session),
    page: str | None = None,
    limit: str | None = None,
    category: str | None = None,
    sort: str | None = None,
    order: str | None = None,
):
    """
    List products.

    - `page` (default 1), `limit` (default 20, max 100)
    - `category` exact match filter
    - `sort` field (createdAt, updatedAt, price, name, stock, rating)
    - `order` asc | desc (default desc)
    """
    products, pagination = service.list_products(
        session, page=page, limit=limit, category=category, sort=sort, order=order
    )
    return PaginatedResponse(
        data=[ProductRead.model_validate(p) for p in products],
        pagination=pagination,
    )


@router.get("/{product_id}", response_model=ApiResponse[ProductRead])
def get_product(
    product_id: str,
    session: Session = Depends(get_session),
):
    """
    Get a single product by id.
    """
    product = service.get_product(session, product_id)
    return ApiResponse(data=ProductRead.model_validate(product))


# -------- Admin endpoints --------
# TODO: guard these with an admin dependency once accounts exist.


@router.post(
    "",
    response_model=ApiResponse[ProductRead],
    status_code=status.HTTP_201_CREATED,
)
def create_product(
    payload: ProductCreate,
    session: Session = Depends(get_session),
):
    """
    Create a new product.
    """
    product = service.create_product(session, payload)
    return ApiResponse(
        message="Product created successfully",
        data=ProductRead.model_validate(product),
    )


@router.put("/{product_id}", response_model=ApiResponse[ProductRead])
def update_product(
    product_id: str,
    payload: ProductUpdate,
    session: Session = Depends(get_session),
):
    """
    Update an existing product (partial).
    """
    product = service.update_product(session, product_id, payload)
    return ApiResponse(
        message="Product updated successfully",
        data=ProductRead.model_validate(product),
    )


@router.delete("/{product_id}", response_model=ApiResponse[DeletedRead])
def delete_product(
    product_id: str,
    session: Session = Depends(get_session),
):
    """
    Delete a product; it is also dropped from every cart.
    """
    deleted_id = service.delete_product(session, product_id)
    return ApiResponse(
        message="Product deleted successfully",
        data=DeletedRead(id=deleted_id),
    )
