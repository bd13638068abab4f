# storefront/domain/pricing.py
"""
Liczenie podsumowania koszyka / zamowienia.

Cala arytmetyka na Decimal bez zaokraglania po drodze, zaokraglamy
dopiero przy formatowaniu (ROUND_HALF_UP = od zera dla kwot >= 0).
Ta sama funkcja liczy koszyk i zamowienie, zeby nie rozjechaly sie wzory.
"""
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Tuple

from storefront.utils.settings import SHIPPING_FLAT_FEE, TAX_RATE

CENT = Decimal("0.01")
ZERO = Decimal("0")


@dataclass(frozen=True)
class Totals:
    subtotal: Decimal
    shipping: Decimal
    taxes: Decimal
    total: Decimal
    item_count: int

    def as_summary(self) -> dict:
        return {
            "subtotal": format_money(self.subtotal),
            "shipping": format_money(self.shipping),
            "taxes": format_money(self.taxes),
            "total": format_money(self.total),
            "item_count": self.item_count,
        }


def to_decimal(value) -> Decimal:
    if isinstance(value, Decimal):
        return value
    # przez str zeby float 0.1 nie zamienil sie w 0.1000000000000000055...
    return Decimal(str(value))


def round_money(value: Decimal) -> Decimal:
    return to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def format_money(value) -> str:
    return str(round_money(value))


def compute_totals(
    lines: Iterable[Tuple[Decimal, int]],
    shipping_fee: Decimal = SHIPPING_FLAT_FEE,
    tax_rate: Decimal = TAX_RATE,
) -> Totals:
    """lines: pary (cena jednostkowa, ilosc)."""
    subtotal = ZERO
    item_count = 0
    for unit_price, quantity in lines:
        subtotal += to_decimal(unit_price) * quantity
        item_count += quantity

    shipping = to_decimal(shipping_fee) if item_count > 0 else ZERO
    taxes = subtotal * to_decimal(tax_rate)

    return Totals(
        subtotal=subtotal,
        shipping=shipping,
        taxes=taxes,
        total=subtotal + shipping + taxes,
        item_count=item_count,
    )


def empty_summary() -> dict:
    return compute_totals([]).as_summary()
