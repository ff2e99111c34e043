# app/api/routers/products.py
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from app.api.deps import require_admin
from app.data.database import get_db
from app.domain.errors import ProductInUseError
from app.domain.schemas import ProductCreate, ProductUpdate, ProductOut
from app.services.catalog_service import CatalogService

router = APIRouter(prefix="/products", tags=["products"])


@router.get("/", response_model=List[ProductOut])
def list_products(
    category_id: Optional[int] = Query(None),
    featured: bool = Query(False),
    search: Optional[str] = Query(None),
    db: Session = Depends(get_db),
):
    return CatalogService(db).list_products(category_id=category_id, featured=featured, search=search)


@router.get("/{product_id}", response_model=ProductOut)
def get_product(product_id: int, db: Session = Depends(get_db)):
    product = CatalogService(db).get_product(product_id)
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")
    return product


@router.post("/", response_model=ProductOut)
def create_product(
    payload: ProductCreate,
    _admin_id: int = Depends(require_admin),
    db: Session = Depends(get_db),
):
    try:
        return CatalogService(db).create_product(payload.model_dump())
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.put("/{product_id}", response_model=ProductOut)
def update_product(
    product_id: int,
    payload: ProductUpdate,
    _admin_id: int = Depends(require_admin),
    db: Session = Depends(get_db),
):
    changes = payload.model_dump(exclude_unset=True)
    if not changes:
        raise HTTPException(status_code=400, detail="No fields to update")
    try:
        product = CatalogService(db).update_product(product_id, changes)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")
    return product


@router.delete("/{product_id}")
def delete_product(
    product_id: int,
    _admin_id: int = Depends(require_admin),
    db: Session = Depends(get_db),
):
    try:
        deleted = CatalogService(db).delete_product(product_id)
    except ProductInUseError as e:
        raise HTTPException(status_code=409, detail=str(e))
    if not deleted:
        raise HTTPException(status_code=404, detail="Product not found")
    return {"message": "Product deleted successfully"}
