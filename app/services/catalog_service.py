# app/services/catalog_service.py
from typing import Any, Dict, List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.data.models.category import CategoryModel
from app.domain.errors import ProductInUseError
from app.repos.catalog_repo import CatalogRepo
from app.utils.logging import get_logger

logger = get_logger(__name__)


class CatalogService:
    """Kategorie i produkty. Pola json (gallery_images, sizes, colors) sa tu juz listami."""

    def __init__(self, db: Session):
        self.repo = CatalogRepo(db)

    def list_categories(self) -> List[CategoryModel]:
        return self.repo.list_categories()

    def create_category(self, name: str, description: str, image_url: str = "") -> CategoryModel:
        category = self.repo.create_category(
            CategoryModel(name=name, description=description, image_url=image_url)
        )
        logger.info(f"Utworzono kategorie {category.id} ({name})")
        return category

    def list_products(
        self,
        category_id: Optional[int] = None,
        featured: bool = False,
        search: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        return self.repo.list_products(category_id=category_id, featured=featured, search=search)

    def get_product(self, product_id: int) -> Dict[str, Any] | None:
        return self.repo.get_product(product_id)

    def create_product(self, data: Dict[str, Any]) -> Dict[str, Any]:
        if not self.repo.get_category(data["category_id"]):
            raise ValueError("Category not found")
        product = self.repo.create_product(data)
        logger.info(f"Utworzono produkt {product.id} ({product.name})")
        return self.repo.get_product(product.id)

    def update_product(self, product_id: int, changes: Dict[str, Any]) -> Dict[str, Any] | None:
        product = self.repo.get_product_model(product_id)
        if not product:
            return None
        if changes.get("category_id") and not self.repo.get_category(changes["category_id"]):
            raise ValueError("Category not found")
        self.repo.update_product(product, changes)
        logger.info(f"Zaktualizowano produkt {product_id}: {sorted(changes)}")
        return self.repo.get_product(product_id)

    def delete_product(self, product_id: int) -> bool:
        product = self.repo.get_product_model(product_id)
        if not product:
            return False
        try:
            self.repo.delete_product(product)
        except IntegrityError as e:
            self.repo.rollback()
            logger.error(f"Produkt {product_id} jest uzywany w koszykach lub zamowieniach: {e}")
            raise ProductInUseError(f"Product {product_id} is referenced by carts or orders") from e
        logger.info(f"Usunieto produkt {product_id}")
        return True
