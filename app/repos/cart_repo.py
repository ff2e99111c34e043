# app/repos/cart_repo.py
from typing import List, Optional, Tuple

from sqlalchemy import select, update, delete
from sqlalchemy.orm import Session
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.dialects.mysql import insert as mysql_insert

from app.data.models.cart_item import CartItemModel, NO_VARIANT
from app.data.models.product import ProductModel

IDENTITY_COLUMNS = ["user_id", "product_id", "size", "color"]


def to_variant(value: Optional[str]) -> str:
    return value or NO_VARIANT


def from_variant(value: Optional[str]) -> Optional[str]:
    return value or None


class CartRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_cart_rows(self, user_id: int) -> List[Tuple[CartItemModel, Optional[ProductModel]]]:
        #outer join, zeby brakujacy produkt byl widoczny dla serwisu (None) zamiast cicho znikac
        stmt = (
            select(CartItemModel, ProductModel)
            .outerjoin(ProductModel, ProductModel.id == CartItemModel.product_id)
            .where(CartItemModel.user_id == user_id)
            .order_by(CartItemModel.id)
        )
        return [tuple(row) for row in self.db.execute(stmt).all()]

    def upsert_item(
        self,
        user_id: int,
        product_id: int,
        quantity: int,
        size: Optional[str],
        color: Optional[str],
    ) -> None:
        """
        INSERT albo quantity += quantity w jednym zapytaniu.
        Unikalnosc pilnuje constraint u_cart_identity, nie aplikacja.
        """
        values = {
            "user_id": user_id,
            "product_id": product_id,
            "quantity": quantity,
            "size": to_variant(size),
            "color": to_variant(color),
        }
        dialect = self.db.get_bind().dialect.name

        if dialect == "postgresql":
            stmt = pg_insert(CartItemModel).values(**values)
            stmt = stmt.on_conflict_do_update(
                index_elements=IDENTITY_COLUMNS,
                set_={"quantity": CartItemModel.quantity + stmt.excluded.quantity},
            )
        elif dialect == "sqlite":
            stmt = sqlite_insert(CartItemModel).values(**values)
            stmt = stmt.on_conflict_do_update(
                index_elements=IDENTITY_COLUMNS,
                set_={"quantity": CartItemModel.quantity + stmt.excluded.quantity},
            )
        elif dialect in ("mysql", "mariadb"):
            stmt = mysql_insert(CartItemModel).values(**values)
            stmt = stmt.on_duplicate_key_update(
                quantity=CartItemModel.quantity + stmt.inserted.quantity,
            )
        else:
            raise RuntimeError(f"Upsert not supported for dialect {dialect}")

        self.db.execute(stmt)

    def update_quantity(self, user_id: int, item_id: int, quantity: int) -> int:
        res = self.db.execute(
            update(CartItemModel)
            .where(CartItemModel.id == item_id, CartItemModel.user_id == user_id)
            .values(quantity=quantity)
        )
        return res.rowcount

    def delete_item(self, user_id: int, item_id: int) -> int:
        res = self.db.execute(
            delete(CartItemModel).where(
                CartItemModel.id == item_id,
                CartItemModel.user_id == user_id,
            )
        )
        return res.rowcount

    def delete_for_user(self, user_id: int) -> int:
        res = self.db.execute(delete(CartItemModel).where(CartItemModel.user_id == user_id))
        return res.rowcount

    def commit(self):
        self.db.commit()

    def rollback(self):
        self.db.rollback()
