# storefront/domain/errors.py
from typing import Dict, List


class StorefrontError(Exception):
    """Bazowy wyjatek domenowy. Routery mapuja go na odpowiedz HTTP."""

    status_code = 500
    code = "storefront_error"

    def __init__(self, message: str, code: str | None = None):
        self.message = message
        if code:
            self.code = code
        super().__init__(message)


class InvalidInput(StorefrontError):
    status_code = 400
    code = "invalid_input"


class InvalidTransition(InvalidInput):
    code = "invalid_transition"


class ValidationError(StorefrontError):
    """Wszystkie bledy walidacji naraz, pogrupowane po polu."""

    status_code = 400
    code = "validation_error"

    def __init__(self, errors: Dict[str, List[str]], message: str = "Niepoprawne dane"):
        self.errors = errors
        super().__init__(message)


class EmptyCart(StorefrontError):
    status_code = 400
    code = "empty_cart"


class NotFound(StorefrontError):
    status_code = 404
    code = "not_found"


class ProductNotFound(NotFound):
    code = "product_not_found"


class CartItemNotFound(NotFound):
    code = "cart_item_not_found"


class OrderNotFound(NotFound):
    code = "order_not_found"


class UserNotFound(NotFound):
    code = "user_not_found"


class StorageUnavailable(StorefrontError):
    status_code = 503
    code = "storage_unavailable"


class OrderNumberExhausted(StorefrontError):
    status_code = 500
    code = "order_number_exhausted"
