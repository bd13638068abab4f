# storefront/api/routers/chat.py
from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field, StrictInt
from sqlalchemy.orm import Session

from storefront.data.database import get_db
from storefront.domain.chat import ChatState
from storefront.domain.schemas import MAX_INT
from storefront.repos.chat_store import build_chat_store
from storefront.services.chat_service import ChatService

router = APIRouter(prefix="/chat", tags=["chat"])

_store = None


def get_chat_store():
    global _store
    if _store is None:
        _store = build_chat_store()
    return _store


class MessageIn(BaseModel):
    text: str = Field(..., min_length=1, max_length=1000)


class ChatCartIn(BaseModel):
    product_id: StrictInt = Field(..., ge=1, le=MAX_INT)


def get_service(db: Session = Depends(get_db), store=Depends(get_chat_store)):
    return ChatService(db, store)


@router.get("/{session_key}", response_model=ChatState)
def get_chat(session_key: str, svc: ChatService = Depends(get_service)):
    return svc.get_state(session_key)


@router.post("/{session_key}/messages", response_model=ChatState)
def submit_message(session_key: str, payload: MessageIn, svc: ChatService = Depends(get_service)):
    return svc.submit(session_key, payload.text)


@router.post("/{session_key}/cart", response_model=ChatState)
def add_to_chat_cart(session_key: str, payload: ChatCartIn, svc: ChatService = Depends(get_service)):
    return svc.add_to_cart(session_key, payload.product_id)


@router.post("/{session_key}/checkout", response_model=ChatState)
def chat_checkout(session_key: str, svc: ChatService = Depends(get_service)):
    return svc.checkout(session_key)


@router.post("/{session_key}/open", response_model=ChatState)
def open_chat(session_key: str, svc: ChatService = Depends(get_service)):
    return svc.open(session_key)


@router.post("/{session_key}/close", response_model=ChatState)
def close_chat(session_key: str, svc: ChatService = Depends(get_service)):
    return svc.close(session_key)
