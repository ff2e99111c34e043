from sqlalchemy import Column, Integer, ForeignKey, Numeric, String

from app.data.database import Base


class OrderLineModel(Base):
    __tablename__ = "order_items"

    id = Column(Integer, primary_key=True)
    order_id = Column(Integer, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=False)

    quantity = Column(Integer, nullable=False)
    #cena skopiowana z koszyka w chwili zamowienia
    price = Column(Numeric(10, 2), nullable=False)
    size = Column(String(50), nullable=True)
    color = Column(String(50), nullable=True)

