# storefront/client/cart_store.py
"""
Client-side cart: in-memory state persisted to a local JSON snapshot.

Mutations go through the same cart_rules the server uses, with the
client's policy (clamp to stock, idempotent remove). When an API is
attached the server answer replaces the local state, so the snapshot is
only an optimistic cache of the server cart.

Mutations kept while the server is unreachable are flagged as pending
(the flag is persisted with the snapshot). The next connected call first
replays the local lines onto the server cart, then carries on.

Known limitation: two processes sharing one snapshot file race, the last
writer wins.
"""

import json
import logging
import os
import tempfile
from pathlib import Path

import httpx
from pydantic import ValidationError

from storefront.client.api import ApiError, StorefrontAPI
from storefront.core import cart_rules
from storefront.core.cart_rules import CartLine, ProductSnapshot, StockPolicy
from storefront.schemas.cart import CartRead
from storefront.schemas.product import ProductRead

logger = logging.getLogger(__name__)


def snapshot_of(product: ProductRead | ProductSnapshot) -> ProductSnapshot:
    if isinstance(product, ProductSnapshot):
        return product
    return ProductSnapshot(
        product_id=product.id,
        name=product.name,
        price=product.price,
        image_url=product.image_url,
        stock=product.stock,
    )


def lines_from_cart(cart: CartRead) -> list[CartLine]:
    return [
        CartLine(
            product_id=item.product_id,
            name=item.name,
            price=item.price,
            image_url=item.image_url,
            quantity=item.quantity,
            max_stock=item.max_stock,
        )
        for item in cart.items
    ]


class CartStore:
    def __init__(
        self,
        storage_path: str | Path,
        api: StorefrontAPI | None = None,
    ):
        self.storage_path = Path(storage_path)
        self.api = api
        self._pending = False
        self._lines: list[CartLine] = self._load()

    # ---- state ----

    @property
    def items(self) -> list[CartLine]:
        return list(self._lines)

    @property
    def total_items(self) -> int:
        return cart_rules.compute_totals(self._lines).total_items

    @property
    def subtotal(self) -> float:
        return cart_rules.compute_totals(self._lines).subtotal

    @property
    def pending_sync(self) -> bool:
        return self._pending

    def snapshot(self) -> CartRead:
        return CartRead.build(self._lines, cart_rules.compute_totals(self._lines))

    # ---- persistence ----

    def _load(self) -> list[CartLine]:
        if not self.storage_path.exists():
            return []
        try:
            data = json.loads(self.storage_path.read_text(encoding="utf-8"))
            lines = lines_from_cart(CartRead.model_validate(data))
            self._pending = bool(data.get("pendingSync", False))
            return lines
        except (OSError, ValueError, ValidationError) as exc:
            logger.error("Error loading cart from %s: %s", self.storage_path, exc)
            return []

    def _save(self) -> None:
        payload = self.snapshot().model_dump(mode="json", by_alias=True)
        payload["pendingSync"] = self._pending
        self.storage_path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(dir=self.storage_path.parent, suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(payload, fh)
            os.replace(tmp, self.storage_path)
        except OSError:
            Path(tmp).unlink(missing_ok=True)
            raise

    def _commit(self, lines: list[CartLine]) -> None:
        self._lines = lines
        self._save()

    def _push(self, previous: list[CartLine], call) -> None:
        """
        Forward a mutation to the server and adopt its cart.

        Pending offline lines are replayed first (see `_replay`).
        ApiError: restore `previous` and re-raise.
        Transport failure: keep the local state and mark it pending.
        """
        if self.api is None:
            return
        try:
            if self._pending:
                previous = self._replay(previous)
            cart = call()
        except ApiError:
            self._commit(previous)
            raise
        except httpx.TransportError as exc:
            logger.warning("Cart kept offline, server unreachable: %s", exc)
            self._pending = True
            self._save()
            return
        self._commit(lines_from_cart(cart))

    def _replay(self, lines: list[CartLine]) -> list[CartLine]:
        """
        Make the server cart match `lines` and return the resulting cart.

        Local lines win: quantities are set to the local value and server
        lines missing locally are removed. A line the server refuses (stock
        or unknown product) is logged and left as the server has it.
        """
        server = {item.product_id: item.quantity for item in self.api.get_cart().items}
        wanted = {line.product_id for line in lines}

        for line in lines:
            have = server.get(line.product_id, 0)
            if have == line.quantity:
                continue
            try:
                if have:
                    self.api.update_cart_item(line.product_id, line.quantity)
                else:
                    self.api.add_to_cart(line.product_id, line.quantity)
            except ApiError as exc:
                if exc.status_code not in (400, 404):
                    raise
                logger.warning("Offline change to %s not applied: %s", line.product_id, exc)

        for product_id in server.keys() - wanted:
            try:
                self.api.remove_from_cart(product_id)
            except ApiError as exc:
                if exc.status_code != 404:
                    raise

        self._pending = False
        logger.info("Replayed %d offline cart line(s)", len(lines))
        return lines_from_cart(self.api.get_cart())

    # ---- operations ----

    def add(self, product: ProductRead | ProductSnapshot, quantity: int = 1) -> CartRead:
        """
        Add a product, clamping the resulting quantity to its stock.
        """
        snapshot = snapshot_of(product)
        previous = self._lines
        before = cart_rules.find_line(previous, snapshot.product_id)

        lines = cart_rules.add_line(previous, snapshot, quantity, StockPolicy.CLAMP)
        self._commit(lines)

        after = cart_rules.find_line(lines, snapshot.product_id)
        delta = after.quantity - (before.quantity if before else 0)
        if delta > 0:
            self._push(previous, lambda: self.api.add_to_cart(snapshot.product_id, delta))
        return self.snapshot()

    def update_quantity(self, product_id: str, quantity: int) -> CartRead:
        """
        Set a line's quantity (clamped to its stock ceiling).
        A quantity below 1 removes the line.
        """
        if isinstance(quantity, int) and not isinstance(quantity, bool) and quantity < 1:
            return self.remove(product_id)

        previous = self._lines
        lines = cart_rules.set_line_quantity(previous, product_id, quantity, StockPolicy.CLAMP)
        self._commit(lines)

        clamped = cart_rules.find_line(lines, product_id).quantity
        self._push(previous, lambda: self.api.update_cart_item(product_id, clamped))
        return self.snapshot()

    def remove(self, product_id: str) -> CartRead:
        """
        Remove a line. Removing something that is not there is a no-op.
        """
        previous = self._lines
        self._commit(cart_rules.remove_line(previous, product_id, missing_ok=True))

        def call() -> CartRead:
            try:
                return self.api.remove_from_cart(product_id)
            except ApiError as exc:
                if exc.status_code != 404:
                    raise
                # already gone on the server
                return self.api.get_cart()

        self._push(previous, call)
        return self.snapshot()

    def clear(self) -> CartRead:
        previous = self._lines
        self._commit(cart_rules.clear_lines())
        self._push(previous, lambda: self.api.clear_cart())
        return self.snapshot()

    def sync(self) -> CartRead:
        """
        Replace the local cache with the server cart, replaying pending
        offline changes first.
        """
        if self.api is None:
            return self.snapshot()
        if self._pending:
            self._commit(self._replay(self._lines))
        else:
            self._commit(lines_from_cart(self.api.get_cart()))
        return self.snapshot()
