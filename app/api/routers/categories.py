# app/api/routers/categories.py
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.deps import require_admin
from app.data.database import get_db
from app.domain.schemas import CategoryCreate, CategoryOut
from app.services.catalog_service import CatalogService

router = APIRouter(prefix="/categories", tags=["categories"])


@router.get("/", response_model=List[CategoryOut])
def list_categories(db: Session = Depends(get_db)):
    return CatalogService(db).list_categories()


@router.post("/")
def create_category(
    payload: CategoryCreate,
    _admin_id: int = Depends(require_admin),
    db: Session = Depends(get_db),
):
    category = CatalogService(db).create_category(
        payload.name, payload.description, payload.image_url
    )
    return {"success": True, "message": "Category created successfully", "id": category.id}
