"""
Client cart store: local clamping rules, snapshot persistence and server sync.
"""
import json

import httpx
import pytest
from fastapi.testclient import TestClient

from storefront.client.api import ApiError, StorefrontAPI
from storefront.client.cart_store import CartStore
from storefront.core.cart_rules import ProductSnapshot
from storefront.core.errors import NotFoundError
from storefront.main import app


def snap(pid="a" * 24, price=10.0, stock=5):
    return ProductSnapshot(product_id=pid, name="Thing", price=price, stock=stock)


@pytest.fixture
def store(tmp_path):
    return CartStore(tmp_path / "cart.json")


class TestLocalStore:
    def test_add_clamps_merge_to_stock(self, store):
        store.add(snap(stock=5), 3)
        cart = store.add(snap(stock=5), 4)

        assert len(cart.items) == 1
        assert cart.items[0].quantity == 5
        assert cart.total_items == 5

    def test_update_clamps_to_ceiling(self, store):
        store.add(snap(stock=3), 1)

        cart = store.update_quantity("a" * 24, 10)

        assert cart.items[0].quantity == 3

    def test_update_below_one_removes(self, store):
        store.add(snap(), 2)

        cart = store.update_quantity("a" * 24, 0)

        assert cart.items == []

    def test_update_missing_line_is_not_found(self, store):
        with pytest.raises(NotFoundError):
            store.update_quantity("b" * 24, 1)

    def test_remove_missing_is_noop(self, store):
        store.add(snap(), 1)

        cart = store.remove("b" * 24)

        assert cart.total_items == 1

    def test_clear(self, store):
        store.add(snap(pid="a" * 24), 1)
        store.add(snap(pid="b" * 24), 2)

        cart = store.clear()

        assert cart.items == []
        assert cart.total_items == 0
        assert cart.subtotal == 0

    def test_subtotal(self, store):
        store.add(snap(pid="a" * 24, price=9.99), 2)
        store.add(snap(pid="b" * 24, price=0.02), 1)

        assert store.subtotal == 20.0

    def test_scenario_clamps_at_stock(self, store):
        product = snap(price=10.0, stock=2)

        assert store.add(product, 1).subtotal == 10.0
        assert store.add(product, 1).subtotal == 20.0
        cart = store.add(product, 1)
        assert cart.items[0].quantity == 2
        assert store.remove("a" * 24).items == []


class TestPersistence:
    def test_snapshot_written_after_each_mutation(self, tmp_path):
        path = tmp_path / "cart.json"
        store = CartStore(path)

        store.add(snap(price=2.5), 2)

        data = json.loads(path.read_text())
        assert data["totalItems"] == 2
        assert data["subtotal"] == 5.0
        assert data["items"][0]["productId"] == "a" * 24
        assert data["items"][0]["maxStock"] == 5

    def test_reload_restores_lines(self, tmp_path):
        path = tmp_path / "cart.json"
        CartStore(path).add(snap(), 3)

        reloaded = CartStore(path)

        assert reloaded.total_items == 3

    def test_corrupt_snapshot_starts_empty(self, tmp_path):
        path = tmp_path / "cart.json"
        path.write_text("{not json")

        assert CartStore(path).items == []


def offline_api() -> StorefrontAPI:
    def refuse(request):
        raise httpx.ConnectError("connection refused", request=request)

    client = httpx.Client(base_url="http://shop.invalid", transport=httpx.MockTransport(refuse))
    return StorefrontAPI(client=client)


def online_api(session_id="store-test") -> StorefrontAPI:
    return StorefrontAPI(client=TestClient(app), session_id=session_id)


@pytest.fixture
def synced_store(tmp_path):
    api = StorefrontAPI(client=TestClient(app), session_id="store-test")
    return CartStore(tmp_path / "cart.json", api=api)


class TestSyncedStore:
    def test_server_cart_replaces_local_state(self, synced_store, make_product):
        pid = make_product(name="Server Name", price=3.0, stock=4)

        cart = synced_store.add(snap(pid=pid, price=3.0, stock=4), 2)

        assert cart.items[0].name == "Server Name"
        assert synced_store.api.get_cart().total_items == 2

    def test_clamped_delta_is_sent(self, synced_store, make_product):
        pid = make_product(stock=3)
        product = snap(pid=pid, stock=3)
        synced_store.add(product, 2)

        cart = synced_store.add(product, 5)

        assert cart.items[0].quantity == 3
        assert synced_store.api.get_cart().items[0].quantity == 3

    def test_server_rejection_rolls_back(self, synced_store, make_product):
        pid = make_product(stock=1)
        # local copy believes there is more stock than the server has
        stale = snap(pid=pid, stock=5)

        with pytest.raises(ApiError) as exc:
            synced_store.add(stale, 3)

        assert exc.value.status_code == 400
        assert synced_store.items == []

    def test_remove_missing_on_server_is_tolerated(self, synced_store, make_product):
        pid = make_product()
        cart = synced_store.remove(pid)
        assert cart.items == []

    def test_sync_pulls_server_cart(self, tmp_path, make_product):
        pid = make_product(stock=5)
        api = StorefrontAPI(client=TestClient(app), session_id="shared")
        api.add_to_cart(pid, 2)

        store = CartStore(tmp_path / "cart.json", api=api)
        assert store.items == []

        assert store.sync().total_items == 2

    def test_offline_mutation_kept_locally(self, tmp_path):
        store = CartStore(tmp_path / "cart.json", api=offline_api())

        cart = store.add(snap(), 2)

        assert cart.total_items == 2
        assert store.pending_sync is True


class TestOfflineReplay:
    def test_offline_lines_reach_server_on_next_mutation(self, tmp_path, make_product):
        pid = make_product(stock=5)
        path = tmp_path / "cart.json"
        CartStore(path, api=offline_api()).add(snap(pid=pid, stock=5), 2)

        store = CartStore(path, api=online_api())
        assert store.pending_sync is True

        cart = store.add(snap(pid=pid, stock=5), 1)

        assert cart.total_items == 3
        assert online_api().get_cart().total_items == 3
        assert store.pending_sync is False
        assert json.loads(path.read_text())["pendingSync"] is False

    def test_sync_replays_offline_removal(self, tmp_path, make_product):
        keep = make_product(name="Keep", stock=5)
        drop = make_product(name="Drop", stock=5)
        online_api().add_to_cart(keep, 2)
        online_api().add_to_cart(drop, 1)

        store = CartStore(tmp_path / "cart.json", api=online_api())
        store.sync()
        store.api = offline_api()
        store.remove(drop)
        store.update_quantity(keep, 4)

        store.api = online_api()
        cart = store.sync()

        assert [(item.product_id, item.quantity) for item in cart.items] == [(keep, 4)]
        assert online_api().get_cart().total_items == 4

    def test_refused_offline_line_follows_server(self, tmp_path, make_product):
        pid = make_product(stock=2)
        store = CartStore(tmp_path / "cart.json", api=offline_api())
        # stale local stock lets the offline add go beyond the real stock
        store.add(snap(pid=pid, stock=5), 4)

        store.api = online_api()
        cart = store.sync()

        assert cart.items == []
        assert store.pending_sync is False

    def test_no_pending_flag_when_online(self, synced_store, make_product):
        pid = make_product(stock=5)

        synced_store.add(snap(pid=pid, stock=5), 1)

        assert synced_store.pending_sync is False
