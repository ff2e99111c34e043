# app/repos/catalog_repo.py
import json
from typing import Any, Dict, List, Optional

from sqlalchemy import select, or_, func
from sqlalchemy.orm import Session

from app.data.models.category import CategoryModel
from app.data.models.product import ProductModel

#kolumny trzymane w bazie jako json array
JSON_LIST_FIELDS = ("gallery_images", "sizes", "colors")


def encode_list(values: Optional[List[str]]) -> str:
    return json.dumps(list(values or []))


def decode_list(raw: Optional[str]) -> List[str]:
    if not raw:
        return []
    decoded = json.loads(raw)
    return decoded if isinstance(decoded, list) else []


def product_to_dict(product: ProductModel, category_name: Optional[str] = None) -> Dict[str, Any]:
    return {
        "id": product.id,
        "name": product.name,
        "description": product.description,
        "price": product.price,
        "category_id": product.category_id,
        "category_name": category_name,
        "image_url": product.image_url,
        "gallery_images": decode_list(product.gallery_images),
        "sizes": decode_list(product.sizes),
        "colors": decode_list(product.colors),
        "stock_quantity": product.stock_quantity,
        "featured": bool(product.featured),
        "created_at": product.created_at,
        "updated_at": product.updated_at,
    }


class CatalogRepo:
    def __init__(self, db: Session):
        self.db = db

    # kategorie
    def list_categories(self) -> List[CategoryModel]:
        return list(self.db.execute(select(CategoryModel).order_by(CategoryModel.name)).scalars().all())

    def get_category(self, category_id: int) -> CategoryModel | None:
        return self.db.get(CategoryModel, category_id)

    def create_category(self, category: CategoryModel) -> CategoryModel:
        self.db.add(category)
        self.db.commit()
        self.db.refresh(category)
        return category

    # produkty
    def list_products(
        self,
        category_id: Optional[int] = None,
        featured: bool = False,
        search: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        stmt = select(ProductModel, CategoryModel.name).outerjoin(
            CategoryModel, CategoryModel.id == ProductModel.category_id
        )
        if category_id:
            stmt = stmt.where(ProductModel.category_id == category_id)
        if featured:
            stmt = stmt.where(ProductModel.featured.is_(True))
        if search:
            like = f"%{search.lower()}%"
            stmt = stmt.where(
                or_(
                    func.lower(ProductModel.name).like(like),
                    func.lower(ProductModel.description).like(like),
                )
            )
        stmt = stmt.order_by(ProductModel.created_at.desc(), ProductModel.id.desc())
        return [product_to_dict(p, cname) for p, cname in self.db.execute(stmt).all()]

    def get_product_model(self, product_id: int) -> ProductModel | None:
        return self.db.get(ProductModel, product_id)

    def get_product(self, product_id: int) -> Dict[str, Any] | None:
        row = self.db.execute(
            select(ProductModel, CategoryModel.name)
            .outerjoin(CategoryModel, CategoryModel.id == ProductModel.category_id)
            .where(ProductModel.id == product_id)
        ).first()
        if not row:
            return None
        return product_to_dict(row[0], row[1])

    def create_product(self, data: Dict[str, Any]) -> ProductModel:
        fields = dict(data)
        for key in JSON_LIST_FIELDS:
            fields[key] = encode_list(fields.get(key))
        product = ProductModel(**fields)
        self.db.add(product)
        self.db.commit()
        self.db.refresh(product)
        return product

    def update_product(self, product: ProductModel, changes: Dict[str, Any]) -> ProductModel:
        for key, value in changes.items():
            if key in JSON_LIST_FIELDS:
                value = encode_list(value)
            setattr(product, key, value)
        self.db.commit()
        self.db.refresh(product)
        return product

    def delete_product(self, product: ProductModel) -> None:
        self.db.delete(product)
        self.db.commit()

    def rollback(self):
        self.db.rollback()
