# storefront/services/order_service.py
import secrets
import string
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Callable, Dict, List

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from storefront.data.models.order import OrderModel, OrderItemModel
from storefront.domain.errors import (
    EmptyCart,
    InvalidInput,
    InvalidTransition,
    OrderNotFound,
    OrderNumberExhausted,
    UserNotFound,
    ValidationError,
)
from storefront.domain.order_status import OrderStatus, can_transition
from storefront.domain.pricing import Totals, compute_totals, round_money
from storefront.domain.schemas import CustomerDetails, field_errors, normalize_email
from storefront.repos.cart_repo import CartRepo
from storefront.repos.order_repo import OrderRepo
from storefront.repos.user_repo import UserRepo
from storefront.services.notification_service import NotificationService
from storefront.utils.retry import storage_retry
from storefront.utils.settings import (
    ORDER_NUMBER_LENGTH,
    ORDER_NUMBER_MAX_ATTEMPTS,
    ORDER_NUMBER_PREFIX,
)
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

_ORDER_NUMBER_ALPHABET = string.ascii_uppercase + string.digits


def generate_order_number() -> str:
    token = "".join(secrets.choice(_ORDER_NUMBER_ALPHABET) for _ in range(ORDER_NUMBER_LENGTH))
    return f"{ORDER_NUMBER_PREFIX}{token}"


@dataclass(frozen=True)
class CartLine:
    """Zamrozona kopia pozycji koszyka, niezalezna od sesji ORM."""

    item_id: int
    product_id: int
    product_name: str
    product_image_url: str | None
    price: Decimal
    quantity: int
    color: str
    size: str


def order_to_dict(order: OrderModel) -> Dict[str, Any]:
    return {
        "id": order.id,
        "order_number": order.order_number,
        "user_id": order.user_id,
        "status": order.status,
        "subtotal": order.subtotal,
        "shipping": order.shipping,
        "taxes": order.taxes,
        "total": order.total,
        "payment_method": order.payment_method,
        "payment_proof": order.payment_proof,
        "shipping_address": order.shipping_address,
        "shipping_city": order.shipping_city,
        "shipping_postal_code": order.shipping_postal_code,
        "shipping_province": order.shipping_province,
        "shipping_country": order.shipping_country,
        "customer_name": order.customer_name,
        "customer_email": order.customer_email,
        "customer_phone": order.customer_phone,
        "created_at": order.created_at,
        "updated_at": order.updated_at,
        "items": [
            {
                "id": i.id,
                "product_id": i.product_id,
                "product_name": i.product_name,
                "product_image_url": i.product_image_url,
                "price": i.price,
                "quantity": i.quantity,
                "color": i.color or None,
                "size": i.size or None,
                "subtotal": i.subtotal,
            }
            for i in order.items
        ],
    }


class OrderService:
    """
    Zamowienia: tworzenie z koszyka sesji, odczyt i zmiany statusu.

    Koszyk -> zamowienie jest jedna transakcja: naglowek, pozycje
    i wyczyszczenie koszyka commitowane razem albo wcale.
    """

    def __init__(
        self,
        db: Session,
        notification_service: NotificationService | None = None,
        number_generator: Callable[[], str] = generate_order_number,
    ):
        self.db = db
        self.repo = OrderRepo(db)
        self.cart_repo = CartRepo(db)
        self.user_repo = UserRepo(db)
        self.notification_service = notification_service or NotificationService()
        self.number_generator = number_generator

    @storage_retry()
    def create_order(
        self,
        session_key: str,
        customer_details: Dict[str, Any] | None,
        user_id: int | None = None,
    ) -> Dict[str, Any]:
        """
        Use Case: Tworzenie zamowienia z koszyka sesji.

        1. Snapshot pozycji koszyka (pusty -> EmptyCart)
        2. Walidacja danych klienta (wszystkie bledy naraz)
        3. Sumy z tego samego snapshotu
        4-6. Numer zamowienia, zapis naglowka i pozycji, czyszczenie koszyka
             w jednej transakcji
        7. Powiadomienie po commicie
        """
        if not session_key:
            raise InvalidInput("Brak identyfikatora sesji")

        lines = self._snapshot_cart(session_key)
        if not lines:
            raise EmptyCart("Koszyk jest pusty")

        details = self._validate_details(customer_details)

        if user_id is not None and self.user_repo.get_user(user_id) is None:
            raise UserNotFound(f"Uzytkownik {user_id} nie istnieje")

        totals = compute_totals((line.price, line.quantity) for line in lines)

        try:
            order = self._persist(session_key, details, lines, totals, user_id)
        except Exception:
            self.repo.rollback()
            raise

        logger.info(
            f"Zamowienie {order.order_number} utworzone z koszyka sesji {session_key}",
            extra={"order_number": order.order_number, "session_id": session_key},
        )

        self._notify(order)
        return order_to_dict(order)

    def _snapshot_cart(self, session_key: str) -> List[CartLine]:
        return [
            CartLine(
                item_id=i.id,
                product_id=i.product_id,
                product_name=i.product.name,
                product_image_url=i.product.image_url,
                price=i.product.price,
                quantity=i.quantity,
                color=i.color,
                size=i.size,
            )
            for i in self.cart_repo.get_items(session_key, for_update=True)
        ]

    @staticmethod
    def _validate_details(customer_details) -> CustomerDetails:
        try:
            return CustomerDetails.model_validate(customer_details)
        except PydanticValidationError as e:
            raise ValidationError(field_errors(e))

    def _persist(
        self,
        session_key: str,
        details: CustomerDetails,
        lines: List[CartLine],
        totals: Totals,
        user_id: int | None,
    ) -> OrderModel:
        for attempt in range(1, ORDER_NUMBER_MAX_ATTEMPTS + 1):
            order_number = self.number_generator()

            if self.repo.order_number_exists(order_number):
                logger.warning(f"Numer {order_number} zajety (proba {attempt})")
                continue

            order = self._build_order(order_number, details, totals, user_id)
            items = [self._build_item(line) for line in lines]

            try:
                self.repo.add_order(order, items)
            except IntegrityError:
                self.repo.rollback()
                # ktos zajal ten numer miedzy sprawdzeniem a zapisem
                if not self.repo.order_number_exists(order_number):
                    raise
                logger.warning(f"Kolizja numeru {order_number} przy zapisie (proba {attempt})")
                continue

            # tylko pozycje ze snapshotu, dodane w miedzyczasie zostaja w koszyku
            self.cart_repo.delete_items(session_key, [line.item_id for line in lines])
            self.repo.commit()
            return order

        raise OrderNumberExhausted(
            f"Nie udalo sie wygenerowac unikalnego numeru zamowienia po {ORDER_NUMBER_MAX_ATTEMPTS} probach"
        )

    @staticmethod
    def _build_order(order_number, details: CustomerDetails, totals: Totals, user_id) -> OrderModel:
        return OrderModel(
            order_number=order_number,
            user_id=user_id,
            status=OrderStatus.PENDING.value,
            subtotal=round_money(totals.subtotal),
            shipping=round_money(totals.shipping),
            taxes=round_money(totals.taxes),
            total=round_money(totals.total),
            payment_method=details.payment_method.value,
            shipping_address=details.shipping_address,
            shipping_city=details.shipping_city,
            shipping_postal_code=details.shipping_postal_code,
            shipping_province=details.shipping_province,
            shipping_country=details.shipping_country,
            customer_name=details.customer_name,
            customer_email=str(details.customer_email),
            customer_phone=details.customer_phone,
        )

    @staticmethod
    def _build_item(line: CartLine) -> OrderItemModel:
        return OrderItemModel(
            product_id=line.product_id,
            product_name=line.product_name,
            product_image_url=line.product_image_url,
            price=line.price,
            quantity=line.quantity,
            color=line.color,
            size=line.size,
            subtotal=round_money(line.price * line.quantity),
        )

    def _notify(self, order: OrderModel):
        # zamowienie jest juz zacommitowane, blad brokera go nie cofa
        try:
            self.notification_service.send_order_confirmation(
                order.order_number, order.customer_email
            )
        except Exception as e:
            logger.warning(
                f"Nie udalo sie wyslac potwierdzenia dla {order.order_number}: {e}",
                extra={"order_number": order.order_number},
            )

    # =====================================================
    # QUERY
    # =====================================================
    @storage_retry()
    def get_order(self, order_id: int) -> Dict[str, Any]:
        order = self.repo.get_order(order_id)
        if not order:
            raise OrderNotFound(f"Zamowienie {order_id} nie istnieje")
        return order_to_dict(order)

    @storage_retry()
    def get_order_by_number(self, order_number: str) -> Dict[str, Any]:
        order = self.repo.get_order_by_number(order_number)
        if not order:
            raise OrderNotFound(f"Zamowienie {order_number} nie istnieje")
        return order_to_dict(order)

    @storage_retry()
    def list_orders(self, email: str | None = None, user_id: int | None = None) -> List[Dict[str, Any]]:
        if user_id is not None:
            orders = self.repo.list_orders_by_user(user_id)
        elif email:
            orders = self.repo.list_orders_by_email(normalize_email(email))
        else:
            raise InvalidInput("Wymagany email albo user_id")
        return [order_to_dict(o) for o in orders]

    # =====================================================
    # COMMANDS
    # =====================================================
    @storage_retry()
    def update_status(self, order_id: int, status: OrderStatus | str) -> Dict[str, Any]:
        try:
            new_status = OrderStatus(status)
        except ValueError:
            raise InvalidInput(f"Nieznany status {status}")

        order = self.repo.get_order(order_id)
        if not order:
            raise OrderNotFound(f"Zamowienie {order_id} nie istnieje")

        current = OrderStatus(order.status)
        if not can_transition(current, new_status):
            raise InvalidTransition(
                f"Nie mozna zmienic statusu z {current.value} na {new_status.value}"
            )

        order.status = new_status.value
        self.repo.commit()

        logger.info(
            f"Zamowienie {order.order_number}: {current.value} -> {new_status.value}",
            extra={"order_number": order.order_number},
        )
        return order_to_dict(order)

    @storage_retry()
    def attach_payment_proof(self, order_id: int, payment_proof: str) -> Dict[str, Any]:
        if not payment_proof or not payment_proof.strip():
            raise InvalidInput("Potwierdzenie platnosci nie moze byc puste")

        order = self.repo.get_order(order_id)
        if not order:
            raise OrderNotFound(f"Zamowienie {order_id} nie istnieje")

        if order.status == OrderStatus.CANCELLED.value:
            raise InvalidTransition("Zamowienie jest anulowane")

        order.payment_proof = payment_proof.strip()
        self.repo.commit()

        logger.info(f"Dodano potwierdzenie platnosci do {order.order_number}")
        return order_to_dict(order)
