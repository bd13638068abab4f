# storefront/services/catalog_service.py
from typing import List

from sqlalchemy.orm import Session

from storefront.data.models.category import CategoryModel
from storefront.data.models.product import ProductModel
from storefront.domain.errors import InvalidInput, NotFound, ProductNotFound
from storefront.repos.catalog_repo import CatalogRepo
from storefront.utils.retry import storage_retry


class CatalogService:
    def __init__(self, db: Session):
        self.db = db
        self.repo = CatalogRepo(db)

    @storage_retry()
    def list_products(self, limit: int | None = None) -> List[ProductModel]:
        if limit is not None and limit < 1:
            raise InvalidInput("limit musi byc wiekszy niz 0")
        return self.repo.list_products(limit)

    @storage_retry()
    def get_product(self, product_id: int) -> ProductModel:
        product = self.repo.get_product(product_id)
        if not product:
            raise ProductNotFound(f"Produkt {product_id} nie istnieje")
        return product

    @storage_retry()
    def list_products_by_category(self, slug: str) -> List[ProductModel]:
        category = self.repo.get_category_by_slug(slug)
        if not category:
            raise NotFound(f"Kategoria {slug} nie istnieje")
        return self.repo.list_products_by_category(category.name)

    @storage_retry()
    def list_categories(self) -> List[CategoryModel]:
        return self.repo.list_categories()
