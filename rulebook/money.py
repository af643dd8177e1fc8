"""Monetary amounts

A minimal currency amount type and its formatter. Importing this module
registers MoneyFormatter on the process-wide formatter registry.

    Money("10.5", "USD")    -> "$10.50"   (never fewer digits than the currency's minor unit)
    Money("10.555", "USD")  -> "$10.555"  (never rounds the amount)
    Money(1000, "JPY")      -> "¥1,000"
"""
from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from functools import total_ordering
from typing import TYPE_CHECKING, Any

from babel.numbers import format_currency, get_currency_precision

from rulebook.i18n.formatters import Formatter, FormatFn, default_formatters

if TYPE_CHECKING:
    from rulebook.i18n.bundles import MessageBundle


@total_ordering
@dataclass(frozen=True, slots=True, eq=False)
class Money:
    amount: Decimal
    currency: str

    def __post_init__(self):
        amount = self.amount if isinstance(self.amount, Decimal) else Decimal(str(self.amount))
        object.__setattr__(self, "amount", amount)
        object.__setattr__(self, "currency", self.currency.upper())

    @property
    def minor_unit_digits(self) -> int: return get_currency_precision(self.currency)

    def _check(self, other: Money) -> None:
        if self.currency != other.currency:
            raise ValueError(f"Cannot compare {self.currency} with {other.currency}")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Money):
            return NotImplemented
        return self.currency == other.currency and self.amount == other.amount

    def __lt__(self, other: Money) -> bool:
        if not isinstance(other, Money):
            return NotImplemented
        self._check(other)
        return self.amount < other.amount

    def __hash__(self) -> int: return hash((self.amount, self.currency))

    def __str__(self) -> str: return f"{self.amount} {self.currency}"


class MoneyFormatter(Formatter):
    """Currency format of the bundle's locale; fraction digits are
    max(amount scale, currency minor unit)."""
    __slots__ = ()

    def format(self, value: Money, bundle: MessageBundle) -> str:
        return format_currency(value.amount, value.currency, locale=bundle.babel_locale,
            currency_digits=True, decimal_quantization=False)


def formatter_entries() -> dict[type, FormatFn]:
    """Entries for FormatterRegistry.register / plugin loading."""
    return {Money: MoneyFormatter()}


for _type, _formatter in formatter_entries().items():
    default_formatters.register(_type, _formatter)
