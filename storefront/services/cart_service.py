# storefront/services/cart_service.py
from typing import Dict, Any

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from storefront.data.models.cart_item import CartItemModel
from storefront.domain.errors import InvalidInput, ProductNotFound, CartItemNotFound
from storefront.domain.pricing import compute_totals, empty_summary
from storefront.repos.cart_repo import CartRepo
from storefront.repos.catalog_repo import CatalogRepo
from storefront.utils.retry import storage_retry
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


def _validate_quantity(quantity) -> int:
    # bool to tez int w pythonie, odrzucamy
    if isinstance(quantity, bool) or not isinstance(quantity, int):
        raise InvalidInput("Ilosc musi byc liczba calkowita")
    if quantity < 1:
        raise InvalidInput("Ilosc musi byc wieksza niz 0")
    return quantity


def _variant(value: str | None) -> str:
    return (value or "").strip()


def _product_dict(p) -> Dict[str, Any]:
    return {
        "id": p.id,
        "name": p.name,
        "description": p.description,
        "price": p.price,
        "compare_price": p.compare_price,
        "image_url": p.image_url,
        "image_urls": p.image_urls or [],
        "category": p.category,
        "status": p.status,
        "rating": p.rating,
        "review_count": p.review_count,
    }


def empty_cart() -> Dict[str, Any]:
    return {"items": [], "summary": empty_summary()}


class CartService:
    """
    Koszyk sesji (cart ledger).
    commands (add, update, remove, clear) modyfikuja stan,
    query (get) tylko odczyt.
    Podsumowanie zawsze liczone od nowa z aktualnych pozycji.
    """

    def __init__(self, db: Session):
        self.db = db
        self.repo = CartRepo(db)
        self.catalog = CatalogRepo(db)

    def _build_cart(self, session_key: str) -> Dict[str, Any]:
        items = self.repo.get_items(session_key)
        totals = compute_totals((i.product.price, i.quantity) for i in items)

        return {
            "items": [
                {
                    "id": i.id,
                    "session_id": i.session_id,
                    "product_id": i.product_id,
                    "quantity": i.quantity,
                    "color": i.color or None,
                    "size": i.size or None,
                    "created_at": i.created_at,
                    "updated_at": i.updated_at,
                    "product": _product_dict(i.product),
                }
                for i in items
            ],
            "summary": totals.as_summary(),
        }

    #query
    @storage_retry()
    def get_cart(self, session_key: str | None) -> Dict[str, Any]:
        if not session_key:
            return empty_cart()
        return self._build_cart(session_key)

    #commands
    @storage_retry()
    def add_item(
        self,
        session_key: str,
        product_id: int,
        quantity: int = 1,
        color: str | None = None,
        size: str | None = None,
    ) -> Dict[str, Any]:
        quantity = _validate_quantity(quantity)

        if not session_key:
            raise InvalidInput("Brak identyfikatora sesji")

        if self.catalog.get_product(product_id) is None:
            raise ProductNotFound(f"Produkt {product_id} nie istnieje")

        color, size = _variant(color), _variant(size)

        existing = self.repo.find_item(session_key, product_id, color, size)
        if existing:
            self._merge(existing, quantity)
        else:
            try:
                self.repo.insert_item(
                    CartItemModel(
                        session_id=session_key,
                        product_id=product_id,
                        quantity=quantity,
                        color=color,
                        size=size,
                    )
                )
                logger.info(f"Dodano produkt {product_id} do koszyka sesji {session_key}")
            except IntegrityError:
                # inny proces wstawil ten sam wiersz w miedzyczasie, scalamy
                self.repo.rollback()
                existing = self.repo.find_item(session_key, product_id, color, size)
                if existing is None:
                    raise
                self._merge(existing, quantity)

        self.repo.commit()
        return self._build_cart(session_key)

    def _merge(self, item: CartItemModel, quantity: int):
        logger.info(
            f"Produkt {item.product_id} juz jest w koszyku, zwiekszam ilosc "
            f"z {item.quantity} do {item.quantity + quantity}"
        )
        item.quantity += quantity
        self.db.flush()

    @storage_retry()
    def update_item(self, session_key: str, item_id: int, quantity: int) -> Dict[str, Any]:
        quantity = _validate_quantity(quantity)

        item = self.repo.get_item(session_key, item_id)
        if item is None:
            raise CartItemNotFound(f"Pozycja koszyka {item_id} nie istnieje")

        if item.quantity != quantity:
            item.quantity = quantity
            self.repo.commit()
            logger.info(f"Pozycja {item_id} sesji {session_key}: ilosc {quantity}")

        return self._build_cart(session_key)

    @storage_retry()
    def remove_item(self, session_key: str, item_id: int) -> Dict[str, Any]:
        item = self.repo.get_item(session_key, item_id)
        if item is None:
            raise CartItemNotFound(f"Pozycja koszyka {item_id} nie istnieje")

        self.repo.delete_item(item)
        self.repo.commit()
        logger.info(f"Usunieto pozycje {item_id} z koszyka sesji {session_key}")

        return self._build_cart(session_key)

    @storage_retry()
    def clear_cart(self, session_key: str) -> Dict[str, Any]:
        if session_key:
            removed = self.repo.delete_for_session(session_key)
            self.repo.commit()
            logger.info(f"Wyczyszczono koszyk sesji {session_key} ({removed} pozycji)")
        return empty_cart()
