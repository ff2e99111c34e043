# app/repos/order_repo.py
from typing import List, Optional, Tuple

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.data.models.order import OrderModel
from app.data.models.order_line import OrderLineModel
from app.data.models.product import ProductModel


class OrderRepo:
    """
    Repo nie commituje - granice transakcji wyznacza OrderService.
    """

    def __init__(self, db: Session):
        self.db = db

    def add_order(self, order: OrderModel) -> OrderModel:
        self.db.add(order)
        self.db.flush()  # nadaje id
        return order

    def add_order_line(self, line: OrderLineModel) -> OrderLineModel:
        self.db.add(line)
        self.db.flush()
        return line

    def get_order(self, order_id: int) -> OrderModel | None:
        return self.db.get(OrderModel, order_id)

    def get_user_orders(self, user_id: int) -> List[OrderModel]:
        stmt = (
            select(OrderModel)
            .where(OrderModel.user_id == user_id)
            .order_by(OrderModel.created_at.desc(), OrderModel.id.desc())
        )
        return list(self.db.execute(stmt).scalars().all())

    def get_order_lines(self, order_id: int) -> List[Tuple[OrderLineModel, Optional[ProductModel]]]:
        stmt = (
            select(OrderLineModel, ProductModel)
            .outerjoin(ProductModel, ProductModel.id == OrderLineModel.product_id)
            .where(OrderLineModel.order_id == order_id)
            .order_by(OrderLineModel.id)
        )
        return [tuple(row) for row in self.db.execute(stmt).all()]

    def commit(self):
        self.db.commit()

    def rollback(self):
        self.db.rollback()
