# storefront/repositories/cart_repo.py
from sqlalchemy import DateTime, delete, insert, literal, select as sa_select, update
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from storefront.models.cart import Cart, CartItem
from storefront.models.product import Product, utcnow


class CartRepository:
    """
    Data access layer for Cart & CartItem.

    Stock-sensitive writes are single conditional statements: the stock
    check and the write happen in the same SQL statement, so two concurrent
    requests cannot both pass a check that together would exceed stock.
    Each of them returns True when a row was written.
    """

    # ----- Carts -----

    def get_by_session(self, session: Session, session_id: str) -> Cart | None:
        stmt = select(Cart).where(Cart.session_id == session_id)
        return session.exec(stmt).first()

    def get_or_create(self, session: Session, session_id: str) -> Cart:
        cart = self.get_by_session(session, session_id)
        if cart is not None:
            return cart

        cart = Cart(session_id=session_id)
        session.add(cart)
        try:
            session.commit()
        except IntegrityError:
            # another request created it first
            session.rollback()
            existing = self.get_by_session(session, session_id)
            if existing is None:
                raise
            return existing
        session.refresh(cart)
        return cart

    def touch(self, session: Session, cart: Cart) -> None:
        cart.updated_at = utcnow()
        session.add(cart)
        session.commit()

    # ----- Items -----

    def list_with_products(
        self, session: Session, cart_id: str
    ) -> list[tuple[CartItem, Product | None]]:
        """
        Cart items in insertion order, each paired with its live product
        (None if the product row is gone).
        """
        stmt = (
            select(CartItem, Product)
            .join(Product, Product.id == CartItem.product_id, isouter=True)
            .where(CartItem.cart_id == cart_id)
            .order_by(CartItem.id)
        )
        return list(session.exec(stmt).all())

    def get_item(
        self, session: Session, cart_id: str, product_id: str
    ) -> CartItem | None:
        stmt = select(CartItem).where(
            CartItem.cart_id == cart_id, CartItem.product_id == product_id
        )
        return session.exec(stmt).first()

    def insert_if_in_stock(
        self, session: Session, cart_id: str, product_id: str, quantity: int
    ) -> bool:
        """
        INSERT INTO cart_items (...) SELECT ... FROM products
        WHERE id = :product_id AND stock >= :quantity

        Name, price and image are snapshotted from the product row.

        Raises:
            IntegrityError: if the line already exists (concurrent insert).
        """
        source = sa_select(
            literal(cart_id),
            Product.id,
            literal(quantity),
            Product.name,
            Product.price,
            Product.image_url,
            literal(utcnow(), type_=DateTime),
        ).where(Product.id == product_id, Product.stock >= quantity)

        stmt = insert(CartItem.__table__).from_select(
            ["cart_id", "product_id", "quantity", "name", "price", "image_url", "created_at"],
            source,
        )
        try:
            result = session.exec(stmt)
            session.commit()
        except IntegrityError:
            session.rollback()
            raise
        return result.rowcount == 1

    def increment_if_in_stock(
        self, session: Session, cart_id: str, product_id: str, delta: int
    ) -> bool:
        """
        UPDATE cart_items SET quantity = quantity + :delta
        WHERE cart/product match AND quantity + :delta <= current stock
        """
        stock = sa_select(Product.stock).where(Product.id == product_id).scalar_subquery()
        stmt = (
            update(CartItem)
            .where(
                CartItem.cart_id == cart_id,
                CartItem.product_id == product_id,
                CartItem.quantity + delta <= stock,
            )
            .values(quantity=CartItem.quantity + delta)
            .execution_options(synchronize_session=False)
        )
        result = session.exec(stmt)
        session.commit()
        return result.rowcount == 1

    def set_quantity_if_in_stock(
        self, session: Session, cart_id: str, product_id: str, quantity: int
    ) -> bool:
        """
        UPDATE cart_items SET quantity = :quantity
        WHERE cart/product match AND :quantity <= current stock
        """
        stock = sa_select(Product.stock).where(Product.id == product_id).scalar_subquery()
        stmt = (
            update(CartItem)
            .where(
                CartItem.cart_id == cart_id,
                CartItem.product_id == product_id,
                stock >= quantity,
            )
            .values(quantity=quantity)
            .execution_options(synchronize_session=False)
        )
        result = session.exec(stmt)
        session.commit()
        return result.rowcount == 1

    def delete(self, session: Session, item: CartItem) -> None:
        session.delete(item)
        session.commit()

    def clear(self, session: Session, cart_id: str) -> None:
        stmt = (
            delete(CartItem)
            .where(CartItem.cart_id == cart_id)
            .execution_options(synchronize_session=False)
        )
        session.exec(stmt)
        session.commit()

    def delete_lines_for_product(self, session: Session, product_id: str) -> int:
        """
        Remove a product from every cart (used when the product is deleted).
        """
        stmt = (
            delete(CartItem)
            .where(CartItem.product_id == product_id)
            .execution_options(synchronize_session=False)
        )
        result = session.exec(stmt)
        session.commit()
        return result.rowcount
