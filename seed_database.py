# seed_database.py

import argparse

from sqlalchemy import delete
from sqlmodel import Session

from storefront.database import create_db_and_tables, engine
from storefront.fixtures import SAMPLE_PRODUCTS
from storefront.models.cart import CartItem
from storefront.models.product import Product


def seed(session: Session, reset: bool = False) -> int:
    """
    Insert the sample catalog. Products that already exist are skipped.

    reset=True wipes products (and the cart lines pointing at them) first.
    Returns the number of inserted products.
    """
    if reset:
        session.exec(delete(CartItem))
        session.exec(delete(Product))
        session.commit()

    inserted = 0
    for data in SAMPLE_PRODUCTS:
        if session.get(Product, data["id"]) is not None:
            continue
        session.add(Product(**data))
        inserted += 1
    session.commit()
    return inserted


def main():
    parser = argparse.ArgumentParser(description="Seed the storefront database.")
    parser.add_argument("--reset", action="store_true", help="delete existing products first")
    args = parser.parse_args()

    print("Seeding database...")
    create_db_and_tables()
    with Session(engine) as session:
        inserted = seed(session, reset=args.reset)
    print(f"Inserted {inserted} product(s).")


if __name__ == "__main__":
    main()
