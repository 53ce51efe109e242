# storefront/routers/cart.py
from fastapi import APIRouter, Depends
from sqlmodel import Session

from storefront.core.session import get_cart_session_id
from storefront.database import get_session
from storefront.repositories.cart_repo import CartRepository
from storefront.repositories.product_repo import ProductRepository
from storefront.schemas.cart import CartItemCreate, CartItemUpdate, CartRead
from storefront.schemas.common import ApiResponse
from storefront.services.cart_service import CartService

router = APIRouter(prefix="/cart", tags=["Cart"])

cart_repo = CartRepository()
product_repo = ProductRepository()
service = CartService(cart_repo, product_repo)

CART_UPDATED = "Cart updated successfully"


@router.get("", response_model=ApiResponse[CartRead])
def get_cart(
    session: Session = Depends(get_session),
    session_id: str = Depends(get_cart_session_id),
):
    """
    Get the caller's cart with computed totals.
    """
    return ApiResponse(data=service.get_cart(session, session_id))


@router.post("", response_model=ApiResponse[CartRead])
def add_to_cart(
    payload: CartItemCreate,
    session: Session = Depends(get_session),
    session_id: str = Depends(get_cart_session_id),
):
    """
    Add `{productId, quantity}` to the cart, merging with an existing line.
    """
    cart = service.add_to_cart(session, session_id, payload)
    return ApiResponse(message=CART_UPDATED, data=cart)


@router.put("/{product_id}", response_model=ApiResponse[CartRead])
def update_cart_item(
    product_id: str,
    payload: CartItemUpdate,
    session: Session = Depends(get_session),
    session_id: str = Depends(get_cart_session_id),
):
    """
    Set the quantity of a product already in the cart.
    """
    cart = service.update_quantity(
        session=session,
        session_id=session_id,
        product_id=product_id,
        payload=payload,
    )
    return ApiResponse(message=CART_UPDATED, data=cart)


@router.delete("/{product_id}", response_model=ApiResponse[CartRead])
def remove_cart_item(
    product_id: str,
    session: Session = Depends(get_session),
    session_id: str = Depends(get_cart_session_id),
):
    """
    Remove a product from the cart (404 if it is not in the cart).
    """
    cart = service.remove_item(session, session_id, product_id)
    return ApiResponse(message="Item removed from cart", data=cart)


@router.delete("", response_model=ApiResponse[CartRead])
def clear_cart(
    session: Session = Depends(get_session),
    session_id: str = Depends(get_cart_session_id),
):
    """
    Clear the entire cart.
    """
    cart = service.clear_cart(session, session_id)
    return ApiResponse(message="Cart cleared successfully", data=cart)
