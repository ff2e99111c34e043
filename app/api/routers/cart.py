# app/api/routers/cart.py
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from app.api.deps import get_current_user_id
from app.data.database import get_db
from app.domain.schemas import CartItemIn, CartItemUpdate, CartOut, CartActionOut
from app.services.cart_service import CartService
from app.services.catalog_service import CatalogService

router = APIRouter(prefix="/cart", tags=["cart"])


@router.get("", response_model=CartOut)
def get_cart(
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    return CartService(db).get_cart_summary(user_id)


@router.post("", response_model=CartActionOut)
def add_item(
    payload: CartItemIn,
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    if not CatalogService(db).get_product(payload.product_id):
        raise HTTPException(status_code=404, detail="Product not found")

    svc = CartService(db)
    try:
        svc.add_item(
            user_id=user_id,
            product_id=payload.product_id,
            quantity=payload.quantity,
            size=payload.size,
            color=payload.color,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return {"success": True, "message": "Item added to cart", "cart": svc.get_cart_items(user_id)}


@router.put("", response_model=CartActionOut)
def update_item(
    payload: CartItemUpdate,
    id: Optional[int] = Query(None),
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    if id is None:
        raise HTTPException(status_code=400, detail="Cart item ID required")

    try:
        updated = CartService(db).update_item(user_id, id, payload.quantity)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    if not updated:
        raise HTTPException(status_code=404, detail="Cart item not found")
    return {"success": True, "message": "Cart item updated"}


@router.delete("", response_model=CartActionOut)
def remove_or_clear(
    id: Optional[int] = Query(None),
    action: Optional[str] = Query(None),
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    svc = CartService(db)

    if id is not None:
        svc.remove_item(user_id, id)
        return {"success": True, "message": "Item removed from cart"}

    if action == "clear":
        svc.clear_cart(user_id)
        return {"success": True, "message": "Cart cleared"}

    raise HTTPException(status_code=400, detail="Cart item ID required")
