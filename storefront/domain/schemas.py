# storefront/domain/schemas.py
from pydantic import BaseModel, Field, ConfigDict, EmailStr, StrictInt, TypeAdapter
from pydantic import ValidationError as PydanticValidationError
from typing import List, Optional
from decimal import Decimal
from datetime import datetime

from storefront.domain.errors import InvalidInput
from storefront.domain.order_status import OrderStatus, PaymentMethod

# gorna granica kolumn INTEGER, wieksze liczby wywalaja sterownik bazy
MAX_INT = 2**31 - 1

_EMAIL = TypeAdapter(EmailStr)


class CategoryOut(BaseModel):
    """Schema dla kategorii (response)."""

    id: int
    name: str
    slug: str
    description: Optional[str] = None
    image_url: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class ProductOut(BaseModel):
    """Schema dla produktu (response)."""

    id: int
    name: str
    description: Optional[str] = None
    price: Decimal
    compare_price: Optional[Decimal] = None
    image_url: Optional[str] = None
    image_urls: List[str] = []
    category: Optional[str] = None
    status: str
    rating: float
    review_count: int

    model_config = ConfigDict(from_attributes=True)


class ItemIn(BaseModel):
    """Schema dla dodawania produktu do koszyka. Ilosc sprawdza CartService."""

    product_id: StrictInt = Field(..., ge=1, le=MAX_INT, description="ID produktu")
    quantity: StrictInt = Field(1, le=MAX_INT, description="Ilosc produktu (>= 1)")
    color: Optional[str] = Field(None, max_length=50)
    size: Optional[str] = Field(None, max_length=50)


class ItemUpdateIn(BaseModel):
    quantity: StrictInt = Field(..., le=MAX_INT, description="Nowa ilosc (>= 1, 0 nie usuwa pozycji)")


class CartItemOut(BaseModel):
    """Schema dla produktu w koszyku (response)."""

    id: int
    session_id: str
    product_id: int
    quantity: int
    color: Optional[str] = None
    size: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    product: ProductOut


class CartSummaryOut(BaseModel):
    subtotal: str
    shipping: str
    taxes: str
    total: str
    item_count: int


class CartOut(BaseModel):
    """Schema dla koszyka (response)."""

    items: List[CartItemOut]
    summary: CartSummaryOut


class CustomerDetails(BaseModel):
    """Dane klienta wymagane przy skladaniu zamowienia."""

    customer_name: str = Field(..., min_length=2)
    customer_email: EmailStr
    customer_phone: str = Field(..., min_length=6)
    shipping_address: str = Field(..., min_length=5)
    shipping_city: str = Field(..., min_length=2)
    shipping_postal_code: str = Field(..., min_length=4)
    shipping_province: str = Field(..., min_length=1)
    shipping_country: str = Field(..., min_length=1)
    payment_method: PaymentMethod

    model_config = ConfigDict(str_strip_whitespace=True)


class OrderItemOut(BaseModel):
    id: int
    product_id: int
    product_name: str
    product_image_url: Optional[str] = None
    price: Decimal
    quantity: int
    color: Optional[str] = None
    size: Optional[str] = None
    subtotal: Decimal

    model_config = ConfigDict(from_attributes=True)


class OrderOut(BaseModel):
    """Schema dla zamowienia z pozycjami (response)."""

    id: int
    order_number: str
    user_id: Optional[int] = None
    status: OrderStatus
    subtotal: Decimal
    shipping: Decimal
    taxes: Decimal
    total: Decimal
    payment_method: str
    payment_proof: Optional[str] = None
    shipping_address: str
    shipping_city: str
    shipping_postal_code: str
    shipping_province: str
    shipping_country: str
    customer_name: str
    customer_email: str
    customer_phone: str
    created_at: datetime
    updated_at: datetime
    items: List[OrderItemOut]

    model_config = ConfigDict(from_attributes=True)


class OrderStatusIn(BaseModel):
    status: OrderStatus


class PaymentProofIn(BaseModel):
    payment_proof: str = Field(..., min_length=1, max_length=2000)


class UserCreate(BaseModel):
    """Schema dla tworzenia uzytkownika."""

    name: str = Field(..., min_length=1, max_length=100, description="Imie uzytkownika")
    email: EmailStr


class UserRead(BaseModel):
    """Schema dla uzytkownika (response)."""

    id: int
    name: str
    email: str

    model_config = ConfigDict(from_attributes=True)


def field_errors(exc, skip_prefixes=("body", "query", "header", "path")) -> dict:
    """pydantic ValidationError -> {pole: [komunikaty]}."""
    errors = {}
    for err in exc.errors():
        loc = [str(part) for part in err.get("loc", ())]
        if loc and loc[0] in skip_prefixes:
            loc = loc[1:]
        field = ".".join(loc) or "__root__"
        errors.setdefault(field, []).append(err["msg"])
    return errors


def normalize_email(value: str) -> str:
    """Ta sama normalizacja co EmailStr przy zapisie (domena malymi literami)."""
    try:
        return _EMAIL.validate_python(value.strip())
    except PydanticValidationError:
        raise InvalidInput(f"Niepoprawny adres email: {value}")
