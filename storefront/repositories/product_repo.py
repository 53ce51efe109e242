# storefront/repositories/product_repo.py
from sqlalchemy import func
from sqlmodel import Session, select

from storefront.models.product import Product, utcnow

# camelCase sort keys accepted on the wire -> columns
SORTABLE_COLUMNS = {
    "createdAt": Product.created_at,
    "updatedAt": Product.updated_at,
    "price": Product.price,
    "name": Product.name,
    "stock": Product.stock,
    "rating": Product.rating,
}


class ProductRepository:
    """
    Data access layer for Product.

    - Pure DB operations (CRUD + queries).
    - No FastAPI, no business logic.
    """

    def get_by_id(self, session: Session, product_id: str) -> Product | None:
        return session.get(Product, product_id)

    def list(
        self,
        session: Session,
        skip: int = 0,
        limit: int = 20,
        category: str | None = None,
        sort: str = "createdAt",
        descending: bool = True,
    ) -> list[Product]:
        column = SORTABLE_COLUMNS[sort]
        stmt = select(Product)
        if category:
            stmt = stmt.where(Product.category == category)
        # id as tie-breaker keeps pages stable
        if descending:
            stmt = stmt.order_by(column.desc(), Product.id.desc())
        else:
            stmt = stmt.order_by(column.asc(), Product.id.asc())
        stmt = stmt.offset(skip).limit(limit)
        return list(session.exec(stmt).all())

    def count(self, session: Session, category: str | None = None) -> int:
        stmt = select(func.count()).select_from(Product)
        if category:
            stmt = stmt.where(Product.category == category)
        return session.exec(stmt).one()

    def create(self, session: Session, product: Product) -> Product:
        session.add(product)
        session.commit()
        session.refresh(product)
        return product

    def update(self, session: Session, product: Product) -> Product:
        product.updated_at = utcnow()
        session.add(product)
        session.commit()
        session.refresh(product)
        return product

    def delete(self, session: Session, product: Product) -> None:
        session.delete(product)
        session.commit()
