"""
Component tests for the cart API.

API endpoint -> CartService -> cart_rules -> CartRepository -> SQLite,
with real instances of every layer.
"""
import pytest
from fastapi.testclient import TestClient


def add(client: TestClient, product_id: str, quantity: int):
    return client.post("/api/cart", json={"productId": product_id, "quantity": quantity})


class TestGetCart:
    def test_new_cart_is_empty(self, test_client: TestClient):
        response = test_client.get("/api/cart")

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["data"] == {"items": [], "totalItems": 0, "subtotal": 0.0}

    def test_cart_lines_use_live_product_data(self, test_client, make_product):
        pid = make_product(name="Lamp", price=12.5, stock=3)
        add(test_client, pid, 2)

        item = test_client.get("/api/cart").json()["data"]["items"][0]

        assert item == {
            "productId": pid,
            "name": "Lamp",
            "price": 12.5,
            "imageUrl": "https://example.com/product.png",
            "quantity": 2,
            "maxStock": 3,
            "inStock": True,
            "lineTotal": 25.0,
        }

    def test_price_change_is_reflected_in_totals(self, test_client, make_product):
        pid = make_product(price=10.0, stock=5)
        add(test_client, pid, 2)

        test_client.put(f"/api/products/{pid}", json={"price": 7.5})
        data = test_client.get("/api/cart").json()["data"]

        assert data["subtotal"] == 15.0


class TestAddToCart:
    def test_add_distinct_products(self, test_client, make_product):
        ids = [make_product(name=f"P{i}", price=1.0, stock=10) for i in range(3)]
        for pid, qty in zip(ids, [1, 2, 3]):
            assert add(test_client, pid, qty).status_code == 200

        data = test_client.get("/api/cart").json()["data"]

        assert [item["productId"] for item in data["items"]] == ids
        assert data["totalItems"] == 6
        assert data["subtotal"] == 6.0

    def test_same_product_merges(self, test_client, make_product):
        pid = make_product(stock=10)
        add(test_client, pid, 3)
        response = add(test_client, pid, 4)

        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Cart updated successfully"
        assert len(body["data"]["items"]) == 1
        assert body["data"]["items"][0]["quantity"] == 7

    def test_merge_over_stock_is_rejected(self, test_client, make_product):
        pid = make_product(stock=5)
        add(test_client, pid, 3)

        response = add(test_client, pid, 4)

        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert body["message"] == "Insufficient stock available"
        assert body["error"] == "Only 5 items available. You already have 3 in cart."
        assert test_client.get("/api/cart").json()["data"]["totalItems"] == 3

    def test_subtotal_rounding(self, test_client, make_product):
        a = make_product(price=9.99, stock=5)
        b = make_product(price=0.02, stock=5)
        add(test_client, a, 2)
        response = add(test_client, b, 1)

        assert response.json()["data"]["subtotal"] == 20.0

    def test_unknown_product_is_404(self, test_client):
        response = add(test_client, "0" * 24, 1)

        assert response.status_code == 404
        assert response.json()["message"] == "Product not found"

    def test_malformed_product_id_is_400(self, test_client):
        response = add(test_client, "not-an-id", 1)

        assert response.status_code == 400
        assert response.json()["message"] == "Invalid ID format"

    @pytest.mark.parametrize("body", [
        {"productId": "a" * 24},
        {"quantity": 1},
        {"productId": "a" * 24, "quantity": 0},
        {"productId": "a" * 24, "quantity": 1.5},
        {"productId": "a" * 24, "quantity": "2"},
    ])
    def test_invalid_body_is_400(self, test_client, body):
        response = test_client.post("/api/cart", json=body)

        assert response.status_code == 400
        assert response.json()["message"] == "Validation error"

    def test_out_of_stock_product(self, test_client, make_product):
        pid = make_product(stock=0)

        response = add(test_client, pid, 1)

        assert response.status_code == 400
        assert response.json()["message"] == "Insufficient stock available"


class TestUpdateCartItem:
    def test_set_quantity(self, test_client, make_product):
        pid = make_product(stock=5)
        add(test_client, pid, 1)

        response = test_client.put(f"/api/cart/{pid}", json={"quantity": 4})

        assert response.status_code == 200
        assert response.json()["data"]["items"][0]["quantity"] == 4

    def test_over_live_stock_is_rejected(self, test_client, make_product):
        pid = make_product(stock=5)
        add(test_client, pid, 1)

        response = test_client.put(f"/api/cart/{pid}", json={"quantity": 6})

        assert response.status_code == 400
        assert response.json()["error"] == "Only 5 items available in stock"

    def test_stock_reduced_after_add(self, test_client, make_product):
        pid = make_product(stock=5)
        add(test_client, pid, 1)
        test_client.put(f"/api/products/{pid}", json={"stock": 2})

        response = test_client.put(f"/api/cart/{pid}", json={"quantity": 3})

        assert response.status_code == 400

    def test_product_not_in_cart(self, test_client, make_product):
        pid = make_product()

        response = test_client.put(f"/api/cart/{pid}", json={"quantity": 1})

        assert response.status_code == 404
        assert response.json()["message"] == "Product not found in cart"

    def test_zero_quantity_is_400(self, test_client, make_product):
        pid = make_product()
        add(test_client, pid, 1)

        response = test_client.put(f"/api/cart/{pid}", json={"quantity": 0})

        assert response.status_code == 400

    def test_malformed_id(self, test_client):
        response = test_client.put("/api/cart/xyz", json={"quantity": 1})
        assert response.status_code == 400
        assert response.json()["message"] == "Invalid ID format"


class TestRemoveAndClear:
    def test_remove_item(self, test_client, make_product):
        a = make_product(price=1.0)
        b = make_product(price=2.0)
        add(test_client, a, 1)
        add(test_client, b, 1)

        response = test_client.delete(f"/api/cart/{a}")

        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Item removed from cart"
        assert [i["productId"] for i in body["data"]["items"]] == [b]
        assert body["data"]["subtotal"] == 2.0

    def test_remove_missing_item_is_404(self, test_client, make_product):
        pid = make_product()

        response = test_client.delete(f"/api/cart/{pid}")

        assert response.status_code == 404

    def test_remove_malformed_id_is_400(self, test_client):
        assert test_client.delete("/api/cart/123").status_code == 400

    def test_clear(self, test_client, make_product):
        add(test_client, make_product(), 2)
        add(test_client, make_product(), 1)

        response = test_client.delete("/api/cart")

        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Cart cleared successfully"
        assert body["data"] == {"items": [], "totalItems": 0, "subtotal": 0.0}

    def test_clear_never_fails_on_fresh_session(self, cart_client):
        client = cart_client("never-seen-before")
        assert client.delete("/api/cart").status_code == 200


class TestCartSessions:
    def test_carts_are_isolated_by_session_header(self, cart_client, make_product):
        pid = make_product(stock=10)
        alice = cart_client("alice")
        bob = cart_client("bob")

        add(alice, pid, 2)
        add(bob, pid, 5)

        assert alice.get("/api/cart").json()["data"]["totalItems"] == 2
        assert bob.get("/api/cart").json()["data"]["totalItems"] == 5

    def test_missing_header_uses_default_cart(self, test_client, cart_client, make_product):
        pid = make_product()
        add(test_client, pid, 1)

        default = cart_client("defaultCart").get("/api/cart").json()["data"]

        assert default["totalItems"] == 1

    def test_malformed_session_header(self, cart_client):
        response = cart_client("bad id with spaces").get("/api/cart")
        assert response.status_code == 400


class TestShoppingScenario:
    def test_add_until_stock_then_remove(self, test_client, make_product):
        """
        price 10.00, stock 2:
        add 1 -> {A:1} 10.00; add 1 -> {A:2} 20.00; add 1 -> 400; remove -> empty
        """
        pid = make_product(price=10.0, stock=2)

        first = add(test_client, pid, 1).json()["data"]
        assert first["items"][0]["quantity"] == 1
        assert first["subtotal"] == 10.0

        second = add(test_client, pid, 1).json()["data"]
        assert second["items"][0]["quantity"] == 2
        assert second["subtotal"] == 20.0

        third = add(test_client, pid, 1)
        assert third.status_code == 400

        removed = test_client.delete(f"/api/cart/{pid}").json()["data"]
        assert removed == {"items": [], "totalItems": 0, "subtotal": 0.0}

    def test_deleting_product_removes_it_from_carts(self, test_client, make_product):
        keep = make_product(price=1.0)
        gone = make_product(price=2.0)
        add(test_client, keep, 1)
        add(test_client, gone, 1)

        test_client.delete(f"/api/products/{gone}")
        data = test_client.get("/api/cart").json()["data"]

        assert [i["productId"] for i in data["items"]] == [keep]
        assert data["subtotal"] == 1.0
