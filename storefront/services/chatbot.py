# storefront/services/chatbot.py
import secrets
import string
import threading
import time
from decimal import Decimal
from typing import Callable, List, Optional, Sequence

from storefront.domain.chat import (
    ChatAnalytics,
    ChatMessage,
    ChatProduct,
    ChatState,
    asks_about_cart,
    classify_inquiry,
    find_product_by_name,
    find_products_by_type,
    wants_full_catalog,
    wants_to_add,
)
from storefront.domain.pricing import format_money
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

GREETING = "¡Hola! Soy el asistente de compras virtual. ¿En qué puedo ayudarte hoy?"
FULL_CATALOG_REPLY = "Aquí están todos nuestros productos disponibles:"
EMPTY_CART_REPLY = "Tu carrito está vacío. ¿Te gustaría ver nuestros productos?"
FALLBACK_REPLY = (
    "Lo siento no entendi, porfavor especificar tu pregunta, puedo ayudarte a encontrar "
    "productos, añadirlos al carrito y responder preguntas sobre nuestra tienda. "
    "¿Qué te gustaría hacer?"
)
CHECKOUT_REPLY = (
    "¡Gracias por tu compra! Tu pedido ha sido procesado. "
    "Recibirás un correo de confirmación en breve."
)

_ID_ALPHABET = string.ascii_lowercase + string.digits


def generate_message_id() -> str:
    return "".join(secrets.choice(_ID_ALPHABET) for _ in range(7))


def new_chat_state() -> ChatState:
    return ChatState(transcript=[ChatMessage(id=generate_message_id(), text=GREETING, sender="bot")])


class DialogueEngine:
    """
    Asystent zakupowy oparty o slowa kluczowe.

    Ma wlasny koszyk (lista produktow, bez ilosci, powtorzenia dozwolone)
    niezalezny od koszyka sesji w CartService. checkout() czatu tylko
    dopisuje potwierdzenie i czysci ten koszyk, zadne zamowienie nie powstaje.
    """

    def __init__(
        self,
        catalog: Sequence[ChatProduct],
        state: ChatState | None = None,
        reply_delay: float = 0.0,
        clock: Callable[[], float] = time.time,
    ):
        self.catalog = list(catalog)
        self.state = state if state is not None else new_chat_state()
        self.reply_delay = reply_delay
        self.clock = clock

    @property
    def transcript(self) -> List[ChatMessage]:
        return self.state.transcript

    @property
    def cart(self) -> List[ChatProduct]:
        return self.state.cart

    @property
    def analytics(self) -> ChatAnalytics:
        return self.state.analytics

    def _append(self, sender: str, text: str, products: Optional[List[ChatProduct]] = None) -> ChatMessage:
        message = ChatMessage(
            id=generate_message_id(),
            text=text,
            sender=sender,
            products=list(products) if products is not None else None,
        )
        self.state.transcript.append(message)
        return message

    def submit(self, text: str):
        if not text or not text.strip():
            return

        self._append("user", text)

        category = classify_inquiry(text)
        analytics = self.state.analytics
        analytics.interactions += 1
        analytics.inquiries[category] = analytics.inquiries.get(category, 0) + 1

        if self.reply_delay > 0:
            # fire-and-forget, odpowiedz moze przyjsc po zamknieciu okna
            timer = threading.Timer(self.reply_delay, self.respond, args=(text,))
            timer.daemon = True
            timer.start()
        else:
            self.respond(text)

    def respond(self, text: str) -> ChatMessage:
        """Wybiera dokladnie jedna odpowiedz bota, pierwsze trafienie wygrywa."""
        analytics = self.state.analytics

        if wants_full_catalog(text):
            analytics.product_recommendations += 1
            return self._append("bot", FULL_CATALOG_REPLY, self.catalog)

        found = find_products_by_type(text, self.catalog)
        if found:
            analytics.product_recommendations += 1
            if len(found) == 1:
                p = found[0]
                reply = (
                    f"Aquí tienes información sobre {p.name}: {p.description}. "
                    f"El precio es ${format_money(p.price)}. ¿Te gustaría agregarlo al carrito?"
                )
            else:
                reply = f"Encontré los siguientes productos: {', '.join(p.name for p in found)}"
            return self._append("bot", reply, found)

        if wants_to_add(text):
            product = find_product_by_name(text, self.catalog)
            if product is not None:
                self.add_to_cart(product)
                return self._append(
                    "bot",
                    f"¡He agregado {product.name} a tu carrito! "
                    "Puedes ver tu carrito haciendo clic en el botón de carrito.",
                )

        if asks_about_cart(text):
            if not self.state.cart:
                return self._append("bot", EMPTY_CART_REPLY)
            total = sum((p.price for p in self.state.cart), Decimal("0"))
            return self._append(
                "bot",
                f"Tu carrito contiene {len(self.state.cart)} producto(s) con un total de "
                f"${format_money(total)}. Puedes verlo haciendo clic en el botón de carrito.",
            )

        return self._append("bot", FALLBACK_REPLY)

    def add_to_cart(self, product: ChatProduct):
        self.state.cart.append(product)
        self.state.analytics.add_to_cart_actions += 1
        logger.info(f"Czat: produkt {product.id} w koszyku czatu ({len(self.state.cart)} szt.)")

    def checkout(self) -> ChatMessage:
        message = self._append("bot", CHECKOUT_REPLY)
        self.state.cart = []
        return message

    def open(self):
        if self.state.opened_at is None:
            self.state.opened_at = self.clock()

    def close(self):
        if self.state.opened_at is not None:
            elapsed = int(self.clock() - self.state.opened_at)
            self.state.analytics.session_duration += max(elapsed, 0)
            self.state.opened_at = None
