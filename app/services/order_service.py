# app/services/order_service.py
import json
from datetime import datetime, timezone, timedelta
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List, Optional
from uuid import uuid4

from redis.exceptions import RedisError
from sqlalchemy.orm import Session

from app.data.models.order import OrderModel
from app.data.models.order_line import OrderLineModel
from app.domain.errors import (
    CheckoutInProgressError,
    EmptyCartError,
    InvalidTotalError,
    OrderCreationError,
    TotalMismatchError,
)
from app.repos.cart_repo import CartRepo
from app.repos.order_repo import OrderRepo
from app.services.cart_service import CartService, CENT, compute_totals
from app.services.lock_service import LockService
from app.services.notification_service import NotificationService
from app.utils.settings import (
    CHECKOUT_LOCK_TTL_SECONDS,
    ORDER_DELIVERY_DAYS,
    ORDER_VERIFY_TOTAL,
)
from app.utils.logging import get_logger

logger = get_logger(__name__)


def parse_total(value) -> Decimal:
    """Kwota z requestu jako Decimal z dokladnoscia do centa."""
    try:
        amount = Decimal(str(value))
    except (InvalidOperation, TypeError, ValueError):
        raise InvalidTotalError(f"Invalid order total: {value!r}")
    if not amount.is_finite():
        raise InvalidTotalError(f"Invalid order total: {value!r}")
    return amount.quantize(CENT)


def _order_to_dict(order: OrderModel) -> Dict[str, Any]:
    return {
        "id": order.id,
        "user_id": order.user_id,
        "status": order.status,
        "total_amount": order.total_amount,
        "shipping_address": order.shipping_address,
        "payment_method": order.payment_method,
        "estimated_delivery": order.estimated_delivery,
        "created_at": order.created_at,
    }


class OrderService:
    """
    Serwis odpowiedzialny za domenę zamówień.
    Zamiana koszyka na zamówienie w jednej transakcji.
    """

    def __init__(
        self,
        db: Session,
        lock_service: LockService | None = None,
        notification_service: NotificationService | None = None,
        verify_total: bool = ORDER_VERIFY_TOTAL,
    ):
        self.db = db
        self.repo = OrderRepo(db)
        self.cart_repo = CartRepo(db)
        self.lock_service = lock_service or LockService()
        self.notification_service = notification_service or NotificationService()
        self.verify_total = verify_total

    def create_order(
        self,
        user_id: int,
        total_amount,
        shipping_address: Dict[str, Any],
        payment_method: str,
        cart_items: List[Dict[str, Any]],
    ) -> int:
        """
        Use Case: zamówienie ze snapshotu koszyka.

        1. Insert zamówienia (estimated_delivery = teraz + ORDER_DELIVERY_DAYS)
        2. Insert jednej linii na każdą pozycję koszyka, cena z koszyka
        3. Czyszczenie koszyka usera
        4. Commit - albo rollback całości i OrderCreationError
        """
        if not cart_items:
            raise EmptyCartError("Cart is empty")

        total_amount = parse_total(total_amount)

        if self.verify_total:
            expected, _ = compute_totals(cart_items)
            if expected != total_amount:
                logger.info(f"User {user_id}: total {total_amount} != koszyk {expected}")
                raise TotalMismatchError(expected, total_amount)

        now = datetime.now(timezone.utc)

        try:
            order = self.repo.add_order(
                OrderModel(
                    user_id=user_id,
                    status="placed",
                    total_amount=total_amount,
                    shipping_address=json.dumps(shipping_address),
                    payment_method=payment_method,
                    estimated_delivery=now + timedelta(days=ORDER_DELIVERY_DAYS),
                    created_at=now,
                )
            )

            for item in cart_items:
                self.repo.add_order_line(
                    OrderLineModel(
                        order_id=order.id,
                        product_id=item["product_id"],
                        quantity=item["quantity"],
                        price=Decimal(str(item["price"])),
                        size=item.get("size"),
                        color=item.get("color"),
                    )
                )

            self.cart_repo.delete_for_user(user_id)
            self.repo.commit()

        except Exception as e:
            self.repo.rollback()
            logger.error(f"Tworzenie zamówienia dla usera {user_id} nie powiodło się: {e}")
            raise OrderCreationError("Order creation failed") from e

        logger.info(
            f"Order {order.id} created for user {user_id}: "
            f"{len(cart_items)} lines, total {total_amount}"
        )
        return order.id

    def checkout(
        self,
        user_id: int,
        total_amount,
        shipping_address: Dict[str, Any],
        payment_method: str,
    ) -> int:
        """
        Use Case: checkout z bieżącego koszyka pod lockiem usera,
        żeby dwa równoległe checkouty nie skonsumowały tego samego koszyka.
        """
        token = uuid4().hex
        if not self.lock_service.acquire_checkout_lock(user_id, token, CHECKOUT_LOCK_TTL_SECONDS):
            raise CheckoutInProgressError("Checkout already in progress")

        try:
            cart_items = CartService(self.db).get_cart_items(user_id)
            order_id = self.create_order(
                user_id=user_id,
                total_amount=total_amount,
                shipping_address=shipping_address,
                payment_method=payment_method,
                cart_items=cart_items,
            )
        finally:
            self._release_lock(user_id, token)

        # zamówienie jest już zacommitowane, błąd kolejki go nie cofa
        try:
            self.notification_service.send_order_notification(user_id, order_id)
        except Exception:
            logger.exception(f"Nie udało się zakolejkować powiadomienia dla zamówienia {order_id}")

        return order_id

    def _release_lock(self, user_id: int, token: str) -> None:
        # lock ma TTL, nieudane zwolnienie tylko opoznia kolejny checkout
        try:
            self.lock_service.release_checkout_lock(user_id, token)
        except RedisError:
            logger.exception(f"Nie udalo sie zwolnic locka checkoutu usera {user_id}")

    def get_user_orders(self, user_id: int) -> List[Dict[str, Any]]:
        return [_order_to_dict(o) for o in self.repo.get_user_orders(user_id)]

    def get_order(self, order_id: int, user_id: Optional[int] = None) -> Dict[str, Any]:
        """
        Use Case: Pobranie zamówienia z liniami (Query).
        Pusty dict gdy zamówienie nie istnieje.
        """
        order = self.repo.get_order(order_id)

        if not order:
            return {}

        if user_id is not None and order.user_id != user_id:
            raise PermissionError("Access to order denied")

        result = _order_to_dict(order)
        result["items"] = [
            {
                "id": line.id,
                "order_id": line.order_id,
                "product_id": line.product_id,
                "quantity": line.quantity,
                "price": line.price,
                "size": line.size,
                "color": line.color,
                "product_name": product.name if product else None,
                "image_url": product.image_url if product else None,
            }
            for line, product in self.repo.get_order_lines(order_id)
        ]
        return result
