# storefront/services/chat_service.py
from typing import Any, Dict

from sqlalchemy.orm import Session

from storefront.domain.chat import ChatProduct
from storefront.domain.errors import InvalidInput, ProductNotFound
from storefront.repos.catalog_repo import CatalogRepo
from storefront.services.chatbot import DialogueEngine
from storefront.utils.retry import storage_retry
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


def to_chat_product(p) -> ChatProduct:
    return ChatProduct(
        id=p.id,
        name=p.name,
        price=p.price,
        description=p.description or "",
        image=p.image_url,
    )


class ChatService:
    """
    Sesje czatu przez HTTP: wczytaj stan ze store, odpal DialogueEngine
    na katalogu z bazy, zapisz stan.
    Odpowiedz bota jest liczona od razu, opoznienie robi widget.
    """

    def __init__(self, db: Session, store):
        self.db = db
        self.catalog = CatalogRepo(db)
        self.store = store

    @storage_retry()
    def _engine(self, session_key: str) -> DialogueEngine:
        if not session_key:
            raise InvalidInput("Brak identyfikatora sesji czatu")
        products = [to_chat_product(p) for p in self.catalog.list_products()]
        return DialogueEngine(products, state=self.store.load(session_key))

    def _save(self, session_key: str, engine: DialogueEngine) -> Dict[str, Any]:
        self.store.save(session_key, engine.state)
        return engine.state.model_dump(mode="json")

    def get_state(self, session_key: str) -> Dict[str, Any]:
        engine = self._engine(session_key)
        return self._save(session_key, engine)

    def submit(self, session_key: str, text: str) -> Dict[str, Any]:
        engine = self._engine(session_key)
        engine.submit(text)
        return self._save(session_key, engine)

    def add_to_cart(self, session_key: str, product_id: int) -> Dict[str, Any]:
        engine = self._engine(session_key)
        product = next((p for p in engine.catalog if p.id == product_id), None)
        if product is None:
            raise ProductNotFound(f"Produkt {product_id} nie istnieje")
        engine.add_to_cart(product)
        return self._save(session_key, engine)

    def checkout(self, session_key: str) -> Dict[str, Any]:
        engine = self._engine(session_key)
        engine.checkout()
        logger.info(f"Czat {session_key}: symulowany checkout")
        return self._save(session_key, engine)

    def open(self, session_key: str) -> Dict[str, Any]:
        engine = self._engine(session_key)
        engine.open()
        return self._save(session_key, engine)

    def close(self, session_key: str) -> Dict[str, Any]:
        engine = self._engine(session_key)
        engine.close()
        return self._save(session_key, engine)
