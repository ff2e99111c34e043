from sqlalchemy import Column, Integer, ForeignKey, String, UniqueConstraint

from app.data.database import Base

#brak rozmiaru/koloru zapisujemy jako "" a nie NULL,
#bo NULL w unique constraint nigdy nie koliduje i merge by nie zadzialal
NO_VARIANT = ""

class CartItemModel(Base):
    __tablename__ = "cart_items"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=False)

    quantity = Column(Integer, nullable=False)
    size = Column(String(50), nullable=False, default=NO_VARIANT, server_default=NO_VARIANT)
    color = Column(String(50), nullable=False, default=NO_VARIANT, server_default=NO_VARIANT)

    __table_args__ = (
        UniqueConstraint("user_id", "product_id", "size", "color", name="u_cart_identity"),
    )
