#app/data/models/product.py
from datetime import datetime, timezone

from sqlalchemy import Column, Integer, ForeignKey, String, Text, Numeric, Boolean, DateTime

from app.data.database import Base


def _now():
    return datetime.now(timezone.utc)


class ProductModel(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True)
    name = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    price = Column(Numeric(10, 2), nullable=False)
    category_id = Column(Integer, ForeignKey("categories.id", ondelete="SET NULL"), nullable=True)
    image_url = Column(String(500), nullable=True, default="")

    #listy trzymane jako json w kolumnie tekstowej, (de)serializacja tylko w CatalogRepo
    gallery_images = Column(Text, nullable=False, default="[]")
    sizes = Column(Text, nullable=False, default="[]")
    colors = Column(Text, nullable=False, default="[]")

    #informacyjnie, zamowienie nie zmniejsza stanu
    stock_quantity = Column(Integer, nullable=False, default=0)
    featured = Column(Boolean, nullable=False, default=False)

    created_at = Column(DateTime(timezone=True), nullable=False, default=_now)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_now, onupdate=_now)

