# storefront/client/api.py
"""
Thin httpx wrapper around the storefront REST API.

Every response is the `{success, data?, message?, error?}` envelope; a
non-success envelope (or non-2xx status) is raised as ApiError.
"""

from typing import Any

import httpx

from storefront.schemas.cart import CartRead
from storefront.schemas.common import Pagination
from storefront.schemas.product import ProductRead

DEFAULT_BASE_URL = "http://localhost:5000"
DEFAULT_SESSION_HEADER = "X-Cart-Session"


class ApiError(Exception):
    """The API answered with an error envelope."""

    def __init__(self, status_code: int, message: str, error: str | None = None):
        self.status_code = status_code
        self.message = message
        self.error = error
        super().__init__(f"{status_code} {message}" + (f": {error}" if error else ""))


class StorefrontAPI:
    """
    Client for /api/products and /api/cart.

    Args:
        base_url: server root (ignored when `client` is given).
        session_id: cart session sent in the session header on every call.
        client: pre-built httpx.Client (e.g. FastAPI's TestClient).
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        session_id: str | None = None,
        client: httpx.Client | None = None,
        api_prefix: str = "/api",
        session_header: str = DEFAULT_SESSION_HEADER,
        timeout: float = 10.0,
    ):
        self.session_id = session_id
        self.api_prefix = api_prefix.rstrip("/")
        self.session_header = session_header
        self._owns_client = client is None
        self._client = client if client is not None else httpx.Client(
            base_url=base_url, timeout=timeout
        )

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> "StorefrontAPI":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    # ---- transport ----

    def _request(self, method: str, path: str, **kwargs: Any) -> dict:
        headers = dict(kwargs.pop("headers", None) or {})
        if self.session_id:
            headers[self.session_header] = self.session_id

        response = self._client.request(
            method, f"{self.api_prefix}{path}", headers=headers, **kwargs
        )

        try:
            body = response.json()
        except ValueError:
            raise ApiError(response.status_code, f"HTTP {response.status_code}")

        if response.is_error or not body.get("success"):
            raise ApiError(
                response.status_code,
                body.get("message") or f"HTTP {response.status_code}",
                body.get("error"),
            )
        return body

    # ---- products ----

    def list_products(
        self,
        page: int | None = None,
        limit: int | None = None,
        category: str | None = None,
        sort: str | None = None,
        order: str | None = None,
    ) -> tuple[list[ProductRead], Pagination]:
        params = {
            key: value
            for key, value in {
                "page": page,
                "limit": limit,
                "category": category,
                "sort": sort,
                "order": order,
            }.items()
            if value is not None
        }
        body = self._request("GET", "/products", params=params)
        products = [ProductRead.model_validate(p) for p in body["data"]]
        return products, Pagination.model_validate(body["pagination"])

    def get_product(self, product_id: str) -> ProductRead:
        body = self._request("GET", f"/products/{product_id}")
        return ProductRead.model_validate(body["data"])

    # ---- cart ----

    def get_cart(self) -> CartRead:
        return CartRead.model_validate(self._request("GET", "/cart")["data"])

    def add_to_cart(self, product_id: str, quantity: int) -> CartRead:
        body = self._request(
            "POST", "/cart", json={"productId": product_id, "quantity": quantity}
        )
        return CartRead.model_validate(body["data"])

    def update_cart_item(self, product_id: str, quantity: int) -> CartRead:
        body = self._request("PUT", f"/cart/{product_id}", json={"quantity": quantity})
        return CartRead.model_validate(body["data"])

    def remove_from_cart(self, product_id: str) -> CartRead:
        return CartRead.model_validate(self._request("DELETE", f"/cart/{product_id}")["data"])

    def clear_cart(self) -> CartRead:
        return CartRead.model_validate(self._request("DELETE", "/cart")["data"])

    def health(self) -> dict:
        return self._request("GET", "/health")
