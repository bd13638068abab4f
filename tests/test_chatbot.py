import time
from decimal import Decimal

import pytest

from storefront.domain.chat import ChatProduct, classify_inquiry, matched_product_types
from storefront.services.chatbot import (
    CHECKOUT_REPLY,
    EMPTY_CART_REPLY,
    FALLBACK_REPLY,
    FULL_CATALOG_REPLY,
    GREETING,
    DialogueEngine,
)

CATALOG = [
    ChatProduct(id=1, name="Laptop Pro", price=Decimal("1299.99"), description="Powerful laptop with high performance specs"),
    ChatProduct(id=2, name="Smartphone X", price=Decimal("899.99"), description="Latest smartphone with advanced camera"),
    ChatProduct(id=3, name="Wireless Headphones", price=Decimal("199.99"), description="Noise-cancelling headphones"),
    ChatProduct(id=4, name="Smart Watch", price=Decimal("249.99"), description="Health tracking smart watch"),
    ChatProduct(id=5, name="Tablet Air", price=Decimal("499.99"), description="Lightweight tablet"),
    ChatProduct(id=6, name="Cámara Instantánea", price=Decimal("129.99"), description="Cámara retro"),
]


@pytest.fixture
def bot():
    return DialogueEngine(CATALOG)


def _last(bot):
    return bot.transcript[-1]


@pytest.mark.parametrize("text, category", [
    ("¿Cuánto cuesta?", "price"),
    ("precio y envío", "price"),
    ("tiempo de entrega", "shipping"),
    ("especificaciones del modelo", "specifications"),
    ("¿está disponible?", "availability"),
    ("hola", "general"),
])
def test_classify_inquiry(text, category):
    assert classify_inquiry(text) == category


def test_matched_types_follow_table_order():
    assert matched_product_types("una tableta o una computadora") == ["laptop", "tablet"]


def test_transcript_starts_with_greeting(bot):
    assert len(bot.transcript) == 1
    assert bot.transcript[0].sender == "bot"
    assert bot.transcript[0].text == GREETING


def test_full_catalog(bot):
    bot.submit("quiero ver todos los productos")

    reply = _last(bot)
    assert reply.sender == "bot"
    assert reply.text == FULL_CATALOG_REPLY
    assert reply.products == CATALOG
    assert bot.analytics.product_recommendations == 1


def test_single_product_type(bot):
    bot.submit("laptop")

    reply = _last(bot)
    assert [p.name for p in reply.products] == ["Laptop Pro"]
    assert "Laptop Pro" in reply.text
    assert "$1299.99" in reply.text
    assert reply.text.endswith("¿Te gustaría agregarlo al carrito?")


def test_multiple_product_types_accumulate(bot):
    bot.submit("busco una computadora o una tablet")

    reply = _last(bot)
    assert [p.name for p in reply.products] == ["Laptop Pro", "Tablet Air"]
    assert reply.text == "Encontré los siguientes productos: Laptop Pro, Tablet Air"


def test_type_match_is_case_insensitive(bot):
    bot.submit("LAPTOP")
    assert [p.id for p in _last(bot).products] == [1]


def test_fallback(bot):
    bot.submit("hola, qué tal")

    reply = _last(bot)
    assert reply.text == FALLBACK_REPLY
    assert reply.products is None


def test_add_by_name(bot):
    bot.submit("quiero comprar la cámara instantánea")

    assert [p.id for p in bot.cart] == [6]
    assert bot.analytics.add_to_cart_actions == 1
    assert "Cámara Instantánea" in _last(bot).text


def test_add_keyword_without_product_falls_back(bot):
    bot.submit("quiero comprar algo")
    assert bot.cart == []
    assert _last(bot).text == FALLBACK_REPLY


def test_type_keywords_take_precedence_over_add(bot):
    bot.submit("agregar laptop pro")
    assert bot.cart == []
    assert [p.id for p in _last(bot).products] == [1]


def test_cart_summary(bot):
    bot.submit("ver mi carrito")
    assert _last(bot).text == EMPTY_CART_REPLY

    bot.add_to_cart(CATALOG[5])
    bot.add_to_cart(CATALOG[5])
    bot.submit("ver mi carrito")

    assert _last(bot).text.startswith("Tu carrito contiene 2 producto(s) con un total de $259.98.")


def test_add_to_cart_keeps_duplicates(bot):
    bot.add_to_cart(CATALOG[0])
    bot.add_to_cart(CATALOG[0])

    assert [p.id for p in bot.cart] == [1, 1]
    assert bot.analytics.add_to_cart_actions == 2


def test_one_bot_message_per_submission(bot):
    for text in ("laptop", "hola", "todos", "carrito"):
        before = len(bot.transcript)
        bot.submit(text)
        assert len(bot.transcript) == before + 2
        assert bot.transcript[-2].sender == "user"
        assert bot.transcript[-2].text == text
        assert bot.transcript[-1].sender == "bot"


def test_blank_input_is_ignored(bot):
    bot.submit("   ")
    assert len(bot.transcript) == 1
    assert bot.analytics.interactions == 0


def test_analytics_counts_inquiries(bot):
    bot.submit("¿cuánto cuesta la laptop?")
    bot.submit("¿precio de la tablet?")
    bot.submit("hola")

    assert bot.analytics.interactions == 3
    assert bot.analytics.inquiries == {"price": 2, "general": 1}
    assert bot.analytics.product_recommendations == 2


def test_checkout_is_simulated(bot):
    bot.add_to_cart(CATALOG[1])
    msg = bot.checkout()

    assert msg.text == CHECKOUT_REPLY
    assert _last(bot) is msg
    assert bot.cart == []


def test_session_duration():
    now = {"t": 100.0}
    bot = DialogueEngine(CATALOG, clock=lambda: now["t"])

    bot.open()
    now["t"] = 165.7
    bot.close()
    bot.close()

    assert bot.analytics.session_duration == 65


def test_delayed_reply_arrives_later():
    bot = DialogueEngine(CATALOG, reply_delay=0.05)
    bot.submit("laptop")

    # wiadomosc usera od razu, bota po opoznieniu
    assert bot.transcript[-1].sender == "user"

    deadline = time.monotonic() + 2
    while len(bot.transcript) < 3 and time.monotonic() < deadline:
        time.sleep(0.01)

    assert bot.transcript[-1].sender == "bot"
    assert [p.id for p in bot.transcript[-1].products] == [1]
