# storefront/api/routers/cart.py
from typing import Annotated

from fastapi import APIRouter, Depends, Header, Path
from sqlalchemy.orm import Session

from storefront.data.database import get_db
from storefront.domain.errors import InvalidInput
from storefront.domain.schemas import MAX_INT, CartOut, ItemIn, ItemUpdateIn
from storefront.services.cart_service import CartService

router = APIRouter(prefix="/cart", tags=["cart"])

ItemId = Annotated[int, Path(ge=1, le=MAX_INT)]


def get_service(db: Session):
    return CartService(db)


def require_session(session_id: str | None) -> str:
    if not session_id:
        raise InvalidInput("Wymagany naglowek X-Session-Id")
    return session_id


@router.get("", response_model=CartOut)
def get_cart(
    x_session_id: str | None = Header(None),
    db: Session = Depends(get_db),
):
    # brak sesji = pusty koszyk, nie blad
    return get_service(db).get_cart(x_session_id)


@router.post("", response_model=CartOut, status_code=201)
def add_item(
    payload: ItemIn,
    x_session_id: str | None = Header(None),
    db: Session = Depends(get_db),
):
    return get_service(db).add_item(
        session_key=require_session(x_session_id),
        product_id=payload.product_id,
        quantity=payload.quantity,
        color=payload.color,
        size=payload.size,
    )


@router.put("/{item_id}", response_model=CartOut)
def update_item(
    item_id: ItemId,
    payload: ItemUpdateIn,
    x_session_id: str | None = Header(None),
    db: Session = Depends(get_db),
):
    return get_service(db).update_item(require_session(x_session_id), item_id, payload.quantity)


@router.delete("/{item_id}", response_model=CartOut)
def remove_item(
    item_id: ItemId,
    x_session_id: str | None = Header(None),
    db: Session = Depends(get_db),
):
    return get_service(db).remove_item(require_session(x_session_id), item_id)


@router.delete("", response_model=CartOut)
def clear_cart(
    x_session_id: str | None = Header(None),
    db: Session = Depends(get_db),
):
    return get_service(db).clear_cart(require_session(x_session_id))
