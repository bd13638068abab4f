# storefront/api/routers/products.py
from typing import Annotated, List

from fastapi import APIRouter, Depends, Path, Query
from sqlalchemy.orm import Session

from storefront.data.database import get_db
from storefront.domain.schemas import MAX_INT, CategoryOut, ProductOut
from storefront.services.catalog_service import CatalogService

router = APIRouter(tags=["catalog"])


@router.get("/products", response_model=List[ProductOut])
def list_products(limit: int | None = Query(None, le=MAX_INT), db: Session = Depends(get_db)):
    return CatalogService(db).list_products(limit)


@router.get("/products/category/{slug}", response_model=List[ProductOut])
def list_products_by_category(slug: str, db: Session = Depends(get_db)):
    return CatalogService(db).list_products_by_category(slug)


@router.get("/products/{product_id}", response_model=ProductOut)
def get_product(product_id: Annotated[int, Path(ge=1, le=MAX_INT)], db: Session = Depends(get_db)):
    return CatalogService(db).get_product(product_id)


@router.get("/categories", response_model=List[CategoryOut])
def list_categories(db: Session = Depends(get_db)):
    return CatalogService(db).list_categories()
