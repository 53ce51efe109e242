# storefront/services/cart_service.py
import logging

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session

from storefront.core import cart_rules
from storefront.core.cart_rules import CartLine, ProductSnapshot, StockPolicy
from storefront.core.errors import InsufficientStockError, NotFoundError
from storefront.core.ids import ensure_object_id
from storefront.models.cart import Cart, CartItem
from storefront.models.product import Product
from storefront.repositories.cart_repo import CartRepository
from storefront.repositories.product_repo import ProductRepository
from storefront.schemas.cart import CartItemCreate, CartItemUpdate, CartRead

logger = logging.getLogger(__name__)


class CartService:
    """
    Business logic for cart operations.

    Responsibilities:
      - resolve the cart for the caller's session id (created on first access)
      - re-read the product on every mutation (live price/stock)
      - delegate merge / stock decisions to cart_rules with StockPolicy.REJECT
      - persist through the repository's conditional statements so concurrent
        requests re-check stock at write time
      - compute totals fresh on every read
    """

    def __init__(self, cart_repo: CartRepository, product_repo: ProductRepository):
        self.cart_repo = cart_repo
        self.product_repo = product_repo

    # ---- internal helpers ----

    def _get_product(self, session: Session, product_id: str) -> Product:
        product = self.product_repo.get_by_id(session, product_id)
        if not product:
            raise NotFoundError("Product not found")
        return product

    @staticmethod
    def _snapshot(product: Product) -> ProductSnapshot:
        return ProductSnapshot(
            product_id=product.id,
            name=product.name,
            price=product.price,
            image_url=product.image_url,
            stock=product.stock,
        )

    @staticmethod
    def _to_line(item: CartItem, product: Product | None) -> CartLine:
        # A missing product keeps its snapshot but has nothing left in stock.
        if product is None:
            return CartLine(
                product_id=item.product_id,
                name=item.name,
                price=item.price,
                image_url=item.image_url,
                quantity=item.quantity,
                max_stock=0,
            )
        return CartLine(
            product_id=product.id,
            name=product.name,
            price=product.price,
            image_url=product.image_url,
            quantity=item.quantity,
            max_stock=product.stock,
        )

    def _lines(self, session: Session, cart: Cart) -> list[CartLine]:
        rows = self.cart_repo.list_with_products(session, cart.id)
        return [self._to_line(item, product) for item, product in rows]

    def _summary(self, session: Session, cart: Cart) -> CartRead:
        lines = self._lines(session, cart)
        return CartRead.build(lines, cart_rules.compute_totals(lines))

    # ---- public operations ----

    def get_cart(self, session: Session, session_id: str) -> CartRead:
        """
        Return the cart for `session_id`:
          - items priced against the live product
          - totalItems / subtotal computed now, never stored
        """
        cart = self.cart_repo.get_or_create(session, session_id)
        return self._summary(session, cart)

    def add_to_cart(
        self,
        session: Session,
        session_id: str,
        payload: CartItemCreate,
    ) -> CartRead:
        """
        Add a product to the cart, merging with an existing line.

        Rules:
          - productId must be a valid id and the product must exist
          - quantity (+ existing quantity) <= live stock, else 400
        """
        product_id = ensure_object_id(payload.product_id)
        product = self._get_product(session, product_id)
        cart = self.cart_repo.get_or_create(session, session_id)

        lines = self._lines(session, cart)
        existing = cart_rules.find_line(lines, product_id)
        cart_rules.add_line(lines, self._snapshot(product), payload.quantity, StockPolicy.REJECT)

        if existing is not None:
            written = self.cart_repo.increment_if_in_stock(
                session, cart.id, product_id, payload.quantity
            )
        else:
            try:
                written = self.cart_repo.insert_if_in_stock(
                    session, cart.id, product_id, payload.quantity
                )
            except IntegrityError:
                # a concurrent request created the line; merge onto it
                written = self.cart_repo.increment_if_in_stock(
                    session, cart.id, product_id, payload.quantity
                )

        if not written:
            logger.warning(
                "Stock changed while adding %s to cart %s", product_id, session_id
            )
            raise InsufficientStockError(error="Stock changed while updating the cart")

        self.cart_repo.touch(session, cart)
        logger.info("Cart %s: +%d x %s", session_id, payload.quantity, product_id)
        return self._summary(session, cart)

    def update_quantity(
        self,
        session: Session,
        session_id: str,
        product_id: str,
        payload: CartItemUpdate,
    ) -> CartRead:
        """
        Set the quantity of a line, re-validated against live stock.
        """
        product_id = ensure_object_id(product_id)
        product = self._get_product(session, product_id)
        cart = self.cart_repo.get_or_create(session, session_id)

        lines = self._lines(session, cart)
        cart_rules.set_line_quantity(
            lines, product_id, payload.quantity, StockPolicy.REJECT, stock=product.stock
        )

        if not self.cart_repo.set_quantity_if_in_stock(
            session, cart.id, product_id, payload.quantity
        ):
            if self.cart_repo.get_item(session, cart.id, product_id) is None:
                raise NotFoundError("Product not found in cart")
            logger.warning(
                "Stock changed while updating %s in cart %s", product_id, session_id
            )
            raise InsufficientStockError(error="Stock changed while updating the cart")

        self.cart_repo.touch(session, cart)
        logger.info("Cart %s: %s set to %d", session_id, product_id, payload.quantity)
        return self._summary(session, cart)

    def remove_item(
        self,
        session: Session,
        session_id: str,
        product_id: str,
    ) -> CartRead:
        """
        Remove a product from the cart. Strict: 404 if it is not there.
        """
        product_id = ensure_object_id(product_id)
        cart = self.cart_repo.get_or_create(session, session_id)

        item = self.cart_repo.get_item(session, cart.id, product_id)
        if not item:
            raise NotFoundError("Product not found in cart")

        self.cart_repo.delete(session, item)
        self.cart_repo.touch(session, cart)
        logger.info("Cart %s: removed %s", session_id, product_id)
        return self._summary(session, cart)

    def clear_cart(self, session: Session, session_id: str) -> CartRead:
        """
        Empty the cart (the record itself stays). Never fails.
        """
        cart = self.cart_repo.get_or_create(session, session_id)
        self.cart_repo.clear(session, cart.id)
        self.cart_repo.touch(session, cart)
        logger.info("Cart %s: cleared", session_id)
        lines = cart_rules.clear_lines()
        return CartRead.build(lines, cart_rules.compute_totals(lines))
