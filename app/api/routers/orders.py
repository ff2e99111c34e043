# app/api/routers/orders.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.api.deps import get_current_user_id, get_lock_service, get_notification_service
from app.data.database import get_db
from app.domain.errors import CheckoutInProgressError, OrderCreationError
from app.domain.schemas import OrderCreate, OrderOut, OrderDetailOut
from app.services.lock_service import LockService
from app.services.notification_service import NotificationService
from app.services.order_service import OrderService

router = APIRouter(prefix="/orders", tags=["orders"])


@router.post("/", response_model=OrderDetailOut, status_code=201)
def create_order(
    payload: OrderCreate,
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
    lock_service: LockService = Depends(get_lock_service),
    notification_service: NotificationService = Depends(get_notification_service),
):
    """
    Tworzy zamówienie z bieżącego koszyka usera i czyści koszyk.
    """
    svc = OrderService(db, lock_service=lock_service, notification_service=notification_service)
    try:
        order_id = svc.checkout(
            user_id=user_id,
            total_amount=payload.total_amount,
            shipping_address=payload.shipping_address.model_dump(),
            payment_method=payload.payment_method,
        )
    except CheckoutInProgressError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except OrderCreationError as e:
        raise HTTPException(status_code=500, detail=str(e))

    return svc.get_order(order_id)


@router.get("/", response_model=List[OrderOut])
def list_orders(
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    return OrderService(db).get_user_orders(user_id)


@router.get("/{order_id}", response_model=OrderDetailOut)
def get_order(
    order_id: int,
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """
    Pobiera zamówienie z liniami.
    """
    try:
        order = OrderService(db).get_order(order_id, user_id)
    except PermissionError as e:
        raise HTTPException(status_code=403, detail=str(e))
    if not order:
        raise HTTPException(status_code=404, detail="Order not found")
    return order
