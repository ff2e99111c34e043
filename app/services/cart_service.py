from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, Iterable, List, Optional, Tuple

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.domain.errors import (
    CartItemRejectedError,
    CatalogConsistencyError,
    InvalidQuantityError,
)
from app.repos.cart_repo import CartRepo, from_variant
from app.utils.logging import get_logger

logger = get_logger(__name__)

CENT = Decimal("0.01")


def compute_totals(items: Iterable[Dict[str, Any]]) -> Tuple[Decimal, int]:
    """
    total = suma price * quantity (zaokraglona do groszy), count = suma sztuk.
    Kolejnosc pozycji nie ma znaczenia.
    """
    total = Decimal("0.00")
    count = 0
    for i in items:
        total += Decimal(str(i["price"])) * int(i["quantity"])
        count += int(i["quantity"])
    return total.quantize(CENT, rounding=ROUND_HALF_UP), count


def validate_quantity(quantity: Any) -> int:
    if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
        raise InvalidQuantityError("Quantity must be a positive integer")
    return quantity


class CartService:
    """
    Use case'y koszyka, wszystkie w kontekscie zalogowanego usera.
    commands (add, update, remove, clear) modyfikuja stan i commituja
    query (get_cart_items, get_cart_summary) tylko odczyt
    """

    def __init__(self, db: Session):
        self.repo = CartRepo(db)

    #query - odczyt
    def get_cart_items(self, user_id: int) -> List[Dict[str, Any]]:
        items = []
        for item, product in self.repo.get_cart_rows(user_id):
            if product is None:
                logger.error(
                    f"Pozycja koszyka {item.id} wskazuje na nieistniejacy produkt {item.product_id}"
                )
                raise CatalogConsistencyError(
                    f"Cart item {item.id} references missing product {item.product_id}"
                )
            items.append(
                {
                    "id": item.id,
                    "user_id": item.user_id,
                    "product_id": item.product_id,
                    "quantity": item.quantity,
                    "size": from_variant(item.size),
                    "color": from_variant(item.color),
                    "name": product.name,
                    "price": product.price,
                    "image_url": product.image_url,
                }
            )
        return items

    def get_cart_summary(self, user_id: int) -> Dict[str, Any]:
        items = self.get_cart_items(user_id)
        total, count = compute_totals(items)
        #total jako string z 2 miejscami, tak jak oczekuje frontend
        return {"items": items, "total": f"{total:.2f}", "count": count}

    #commands
    def add_item(
        self,
        user_id: int,
        product_id: int,
        quantity: int,
        size: Optional[str] = None,
        color: Optional[str] = None,
    ) -> bool:
        validate_quantity(quantity)

        try:
            #merge-add robi baza (upsert), nie read-then-write
            self.repo.upsert_item(user_id, product_id, quantity, size, color)
            self.repo.commit()
        except IntegrityError as e:
            self.repo.rollback()
            logger.error(f"Odrzucono dodanie produktu {product_id} do koszyka usera {user_id}: {e}")
            raise CartItemRejectedError(f"Product {product_id} cannot be added to cart") from e
        except Exception as e:
            self.repo.rollback()
            logger.error(f"Blad podczas dodawania produktu {product_id}: {e}")
            raise

        logger.info(
            f"Produkt {product_id} (size={size}, color={color}) +{quantity} w koszyku usera {user_id}"
        )
        return True

    def update_item(self, user_id: int, item_id: int, quantity: int) -> bool:
        """
        Ustawia ilosc na sztywno. Zwraca False gdy pozycja nie istnieje
        albo nalezy do innego usera.
        """
        validate_quantity(quantity)

        try:
            rowcount = self.repo.update_quantity(user_id, item_id, quantity)
            self.repo.commit()
        except Exception:
            self.repo.rollback()
            raise

        if rowcount == 0:
            logger.info(f"Pozycja {item_id} nie znaleziona w koszyku usera {user_id}")
            return False

        logger.info(f"Pozycja {item_id} w koszyku usera {user_id}: quantity={quantity}")
        return True

    def remove_item(self, user_id: int, item_id: int) -> bool:
        #idempotentne - brak pozycji to tez sukces
        try:
            rowcount = self.repo.delete_item(user_id, item_id)
            self.repo.commit()
        except Exception:
            self.repo.rollback()
            raise

        logger.info(f"Usuwanie pozycji {item_id} z koszyka usera {user_id}, usunieto: {rowcount}")
        return rowcount > 0

    def clear_cart(self, user_id: int) -> bool:
        try:
            rowcount = self.repo.delete_for_user(user_id)
            self.repo.commit()
        except Exception:
            self.repo.rollback()
            raise

        logger.info(f"Wyczyszczono koszyk usera {user_id} ({rowcount} pozycji)")
        return True
