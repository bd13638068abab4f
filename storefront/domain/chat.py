# storefront/domain/chat.py
"""
Stan czatu i tabele slow kluczowych asystenta zakupowego.

Klasyfikacja to czyste funkcje tekst -> kategoria/intencja, bez stanu,
zeby dalo sie je testowac niezaleznie od DialogueEngine.
"""
from decimal import Decimal
from typing import Dict, List, Literal, Optional, Sequence, Tuple

from pydantic import BaseModel, Field


class ChatProduct(BaseModel):
    id: int
    name: str
    price: Decimal
    description: str = ""
    image: Optional[str] = None


class ChatMessage(BaseModel):
    id: str
    text: str
    sender: Literal["user", "bot"]
    products: Optional[List[ChatProduct]] = None


class ChatAnalytics(BaseModel):
    interactions: int = 0
    product_recommendations: int = 0
    add_to_cart_actions: int = 0
    inquiries: Dict[str, int] = Field(default_factory=dict)
    session_duration: int = 0  # sekundy


class ChatState(BaseModel):
    transcript: List[ChatMessage] = Field(default_factory=list)
    cart: List[ChatProduct] = Field(default_factory=list)
    analytics: ChatAnalytics = Field(default_factory=ChatAnalytics)
    # time.time() otwarcia okna czatu, None gdy zamkniete
    opened_at: Optional[float] = None


# kolejnosc ma znaczenie, pierwsze trafienie wygrywa
INQUIRY_CATEGORIES: Sequence[Tuple[str, Tuple[str, ...]]] = (
    ("price", ("precio", "costo", "cuánto")),
    ("shipping", ("envío", "entrega", "delivery")),
    ("specifications", ("características", "especificaciones")),
    ("availability", ("disponible", "stock", "hay")),
)
GENERAL_INQUIRY = "general"

SHOW_ALL_KEYWORDS = ("todo", "todos", "productos", "catalogo", "catálogo")

# typ produktu -> synonimy; dopasowanie po nazwie produktu zawierajacej typ
PRODUCT_TYPE_KEYWORDS: Sequence[Tuple[str, Tuple[str, ...]]] = (
    ("laptop", ("laptop", "computadora", "computer")),
    ("smartphone", ("smartphone", "phone", "celular", "telefono", "mobile")),
    ("iphone", ("iphone", "apple")),
    ("android", ("android",)),
    ("headphones", ("audífonos", "audifonos", "headphones", "auriculares")),
    ("watch", ("reloj", "watch", "smartwatch")),
    ("tablet", ("tablet", "tableta")),
)

ADD_KEYWORDS = ("agregar", "añadir", "comprar")
CART_KEYWORDS = ("carrito", "cart", "compras")


def _contains_any(text: str, keywords: Sequence[str]) -> bool:
    return any(keyword in text for keyword in keywords)


def classify_inquiry(text: str) -> str:
    lowered = text.lower()
    for category, keywords in INQUIRY_CATEGORIES:
        if _contains_any(lowered, keywords):
            return category
    return GENERAL_INQUIRY


def wants_full_catalog(text: str) -> bool:
    return _contains_any(text.lower(), SHOW_ALL_KEYWORDS)


def wants_to_add(text: str) -> bool:
    return _contains_any(text.lower(), ADD_KEYWORDS)


def asks_about_cart(text: str) -> bool:
    return _contains_any(text.lower(), CART_KEYWORDS)


def matched_product_types(text: str) -> List[str]:
    lowered = text.lower()
    return [ptype for ptype, keywords in PRODUCT_TYPE_KEYWORDS if _contains_any(lowered, keywords)]


def find_products_by_type(text: str, catalog: Sequence[ChatProduct]) -> List[ChatProduct]:
    """Produkty pasujace do wszystkich trafionych typow, kazdy najwyzej raz."""
    found: List[ChatProduct] = []
    seen = set()
    for ptype in matched_product_types(text):
        for product in catalog:
            if ptype in product.name.lower() and product.id not in seen:
                seen.add(product.id)
                found.append(product)
    return found


def find_product_by_name(text: str, catalog: Sequence[ChatProduct]) -> Optional[ChatProduct]:
    lowered = text.lower()
    for product in catalog:
        if product.name.lower() in lowered:
            return product
    return None
