# storefront/api/routers/orders.py
from typing import Annotated, Any, Dict, List

from fastapi import APIRouter, Body, Depends, Header, Path, Query
from sqlalchemy.orm import Session

from storefront.data.database import get_db
from storefront.domain.errors import InvalidInput
from storefront.domain.schemas import MAX_INT, OrderOut, OrderStatusIn, PaymentProofIn
from storefront.services.order_service import OrderService

router = APIRouter(prefix="/orders", tags=["orders"])

OrderId = Annotated[int, Path(ge=1, le=MAX_INT)]


def get_service(db: Session):
    return OrderService(db)


@router.post("", response_model=OrderOut, status_code=201)
def create_order(
    payload: Dict[str, Any] = Body(...),
    x_session_id: str | None = Header(None),
    db: Session = Depends(get_db),
):
    """
    Tworzy zamowienie z koszyka sesji.
    Dane klienta waliduje serwis, zeby pusty koszyk zglosic przed walidacja.
    """
    if not x_session_id:
        raise InvalidInput("Wymagany naglowek X-Session-Id")

    details = dict(payload)
    user_id = details.pop("user_id", None)
    if user_id is not None and (isinstance(user_id, bool) or not isinstance(user_id, int)):
        raise InvalidInput("user_id musi byc liczba calkowita")
    if user_id is not None and not 1 <= user_id <= MAX_INT:
        raise InvalidInput("user_id poza zakresem")

    return get_service(db).create_order(x_session_id, details, user_id=user_id)


@router.get("", response_model=List[OrderOut])
def list_orders(
    email: str | None = Query(None),
    user_id: int | None = Query(None, ge=1, le=MAX_INT),
    db: Session = Depends(get_db),
):
    return get_service(db).list_orders(email=email, user_id=user_id)


@router.get("/number/{order_number}", response_model=OrderOut)
def get_order_by_number(order_number: str, db: Session = Depends(get_db)):
    return get_service(db).get_order_by_number(order_number)


@router.get("/{order_id}", response_model=OrderOut)
def get_order(order_id: OrderId, db: Session = Depends(get_db)):
    return get_service(db).get_order(order_id)


@router.patch("/{order_id}/status", response_model=OrderOut)
def update_status(order_id: OrderId, payload: OrderStatusIn, db: Session = Depends(get_db)):
    return get_service(db).update_status(order_id, payload.status)


@router.post("/{order_id}/payment-proof", response_model=OrderOut)
def attach_payment_proof(order_id: OrderId, payload: PaymentProofIn, db: Session = Depends(get_db)):
    return get_service(db).attach_payment_proof(order_id, payload.payment_proof)
