"""Constraint Catalogue

A constraint is an immutable, named descriptor: the engine only needs its
name, message bundle, message key and message params. Built-in constraints
also carry their predicate as `test(value)`.

Null policy: NotNull is the only built-in whose predicate fails on None;
every other built-in passes on None so that constraints combine freely.

Usage:
    from rulebook.validation.constraints import Between

    c = Between(start=1, end=10)
    c.name            # "Between"
    c.message_key     # "rulebook.validation.constraints.Between.message"
    c.message_params  # {"start": 1, "end": 10}
"""
from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass, fields, is_dataclass
from decimal import Decimal
from typing import Any, ClassVar

from rulebook.core.config import DEFAULT_BUNDLE
from rulebook.core.errors import RuleDefinitionError

EMAIL_PATTERN = re.compile(r'^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$')


class Constraint:
    """Base class for constraint descriptors.

    Subclasses are frozen dataclasses declared with `eq=False`; equality is
    structural over message_params and hashing only uses the constraint's
    identity, so params may hold unhashable values.
    """
    __slots__ = ()

    message_bundle: ClassVar[str] = DEFAULT_BUNDLE

    @property
    def name(self) -> str:
        return type(self).__name__

    @property
    def message_key(self) -> str:
        return f"{_key_prefix(self)}.message"

    @property
    def message_params(self) -> dict[str, Any]:
        if not is_dataclass(self):
            return {}
        return {f.name: getattr(self, f.name) for f in fields(self)}

    def test(self, value: Any) -> bool:
        """Predicate for this constraint; custom constraints pass their own to Property.validate."""
        raise RuleDefinitionError(f"{self.name} has no built-in predicate", constraint=self.name)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Constraint):
            return NotImplemented
        return type(self) is type(other) and self.message_params == other.message_params

    def __hash__(self) -> int:
        return hash((type(self).__qualname__, self.message_key))

    def __repr__(self) -> str:
        params = ", ".join(f"{k}={v!r}" for k, v in self.message_params.items())
        return f"{self.name}({params})"


class _Bounded(Constraint):
    """Constraint with an optional min/max pair.

    Uses `.min.message` / `.max.message` keys when only one bound is set and
    exposes only the bounds that are set as params.
    """
    __slots__ = ()

    @property
    def message_key(self) -> str:
        prefix = _key_prefix(self)
        if self.min is not None and self.max is None:
            return f"{prefix}.min.message"
        if self.max is not None and self.min is None:
            return f"{prefix}.max.message"
        return f"{prefix}.message"

    @property
    def message_params(self) -> dict[str, Any]:
        return {k: v for k, v in (("min", self.min), ("max", self.max)) if v is not None}

    def _within(self, n: int) -> bool:
        return (self.min is None or n >= self.min) and (self.max is None or n <= self.max)


# === Helper Functions ===

def _key_prefix(constraint: Constraint) -> str:
    cls = type(constraint)
    return f"{cls.__module__}.{cls.__qualname__}"


def _as_tuple(values: Iterable[Any]) -> tuple[Any, ...]:
    return values if isinstance(values, tuple) else tuple(values)


def _to_decimal(value: Any) -> Decimal:
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(str(value))
    return Decimal(value)


def is_finite(value: Any) -> bool:
    """False for NaN and infinities, which have no digits to count."""
    return _to_decimal(value).is_finite()


def integer_digits(value: Any) -> int:
    """Digits left of the decimal point (precision - scale)."""
    digits, exponent = _precision_scale(value)
    return max(digits - exponent, 0)


def decimal_digits(value: Any) -> int:
    """Digits right of the decimal point (scale, never negative)."""
    return max(_precision_scale(value)[1], 0)


def _precision_scale(value: Any) -> tuple[int, int]:
    number = _to_decimal(value)
    if not number.is_finite():
        raise ValueError(f"{value!r} has no digits")
    t = number.as_tuple()
    return len(t.digits), -t.exponent


# ============================================================================
# Any
# ============================================================================

@dataclass(frozen=True, slots=True, eq=False)
class Null(Constraint):
    def test(self, value: Any) -> bool: return value is None


@dataclass(frozen=True, slots=True, eq=False)
class NotNull(Constraint):
    def test(self, value: Any) -> bool: return value is not None


@dataclass(frozen=True, slots=True, eq=False)
class Equals(Constraint):
    value: Any

    def test(self, value: Any) -> bool: return value is None or value == self.value


@dataclass(frozen=True, slots=True, eq=False)
class NotEquals(Constraint):
    value: Any

    def test(self, value: Any) -> bool: return value is None or value != self.value


@dataclass(frozen=True, slots=True, eq=False)
class In(Constraint):
    values: tuple[Any, ...]

    def __post_init__(self):
        object.__setattr__(self, "values", _as_tuple(self.values))

    def test(self, value: Any) -> bool: return value is None or value in self.values


@dataclass(frozen=True, slots=True, eq=False)
class NotIn(Constraint):
    values: tuple[Any, ...]

    def __post_init__(self):
        object.__setattr__(self, "values", _as_tuple(self.values))

    def test(self, value: Any) -> bool: return value is None or value not in self.values


@dataclass(frozen=True, slots=True, eq=False)
class Valid(Constraint):
    """Custom predicate supplied at the call site (Property.is_valid)."""


# ============================================================================
# Boolean
# ============================================================================

@dataclass(frozen=True, slots=True, eq=False)
class IsTrue(Constraint):
    def test(self, value: Any) -> bool: return value is None or value is True


@dataclass(frozen=True, slots=True, eq=False)
class IsFalse(Constraint):
    def test(self, value: Any) -> bool: return value is None or value is False


# ============================================================================
# Sized / Collection / Text containment
# ============================================================================

@dataclass(frozen=True, slots=True, eq=False)
class Empty(Constraint):
    def test(self, value: Any) -> bool: return value is None or len(value) == 0


@dataclass(frozen=True, slots=True, eq=False)
class NotEmpty(Constraint):
    def test(self, value: Any) -> bool: return value is None or len(value) > 0


@dataclass(frozen=True, slots=True, eq=False)
class Size(_Bounded):
    min: int | None = None
    max: int | None = None

    def test(self, value: Any) -> bool: return value is None or self._within(len(value))


@dataclass(frozen=True, slots=True, eq=False)
class Contains(Constraint):
    value: Any

    def test(self, value: Any) -> bool: return value is None or self.value in value


@dataclass(frozen=True, slots=True, eq=False)
class ContainsAll(Constraint):
    values: tuple[Any, ...]

    def __post_init__(self):
        object.__setattr__(self, "values", _as_tuple(self.values))

    def test(self, value: Any) -> bool: return value is None or all(v in value for v in self.values)


@dataclass(frozen=True, slots=True, eq=False)
class ContainsAny(Constraint):
    values: tuple[Any, ...]

    def __post_init__(self):
        object.__setattr__(self, "values", _as_tuple(self.values))

    def test(self, value: Any) -> bool: return value is None or any(v in value for v in self.values)


@dataclass(frozen=True, slots=True, eq=False)
class NotContain(Constraint):
    value: Any

    def test(self, value: Any) -> bool: return value is None or self.value not in value


@dataclass(frozen=True, slots=True, eq=False)
class NotContainAll(Constraint):
    values: tuple[Any, ...]

    def __post_init__(self):
        object.__setattr__(self, "values", _as_tuple(self.values))

    def test(self, value: Any) -> bool: return value is None or not all(v in value for v in self.values)


@dataclass(frozen=True, slots=True, eq=False)
class NotContainAny(Constraint):
    values: tuple[Any, ...]

    def __post_init__(self):
        object.__setattr__(self, "values", _as_tuple(self.values))

    def test(self, value: Any) -> bool: return value is None or not any(v in value for v in self.values)


# ============================================================================
# Comparable
# ============================================================================

@dataclass(frozen=True, slots=True, eq=False)
class Less(Constraint):
    value: Any

    def test(self, value: Any) -> bool: return value is None or value < self.value


@dataclass(frozen=True, slots=True, eq=False)
class LessOrEqual(Constraint):
    value: Any

    def test(self, value: Any) -> bool: return value is None or value <= self.value


@dataclass(frozen=True, slots=True, eq=False)
class Greater(Constraint):
    value: Any

    def test(self, value: Any) -> bool: return value is None or value > self.value


@dataclass(frozen=True, slots=True, eq=False)
class GreaterOrEqual(Constraint):
    value: Any

    def test(self, value: Any) -> bool: return value is None or value >= self.value


@dataclass(frozen=True, slots=True, eq=False)
class Between(Constraint):
    start: Any
    end: Any

    def test(self, value: Any) -> bool: return value is None or self.start <= value <= self.end


@dataclass(frozen=True, slots=True, eq=False)
class NotBetween(Constraint):
    start: Any
    end: Any

    def test(self, value: Any) -> bool: return value is None or not (self.start <= value <= self.end)


# ============================================================================
# Numeric (NaN and infinities have no digits, so they fail both constraints)
# ============================================================================

@dataclass(frozen=True, slots=True, eq=False)
class IntegerDigits(_Bounded):
    min: int | None = None
    max: int | None = None

    def test(self, value: Any) -> bool:
        return value is None or (is_finite(value) and self._within(integer_digits(value)))


@dataclass(frozen=True, slots=True, eq=False)
class DecimalDigits(_Bounded):
    min: int | None = None
    max: int | None = None

    def test(self, value: Any) -> bool:
        return value is None or (is_finite(value) and self._within(decimal_digits(value)))


# ============================================================================
# Temporal (predicates need the validator clock, see Property.is_today)
# ============================================================================

@dataclass(frozen=True, slots=True, eq=False)
class Today(Constraint):
    pass


@dataclass(frozen=True, slots=True, eq=False)
class NotToday(Constraint):
    pass


# ============================================================================
# Text
# ============================================================================

@dataclass(frozen=True, slots=True, eq=False)
class Blank(Constraint):
    def test(self, value: Any) -> bool: return value is None or not value.strip()


@dataclass(frozen=True, slots=True, eq=False)
class NotBlank(Constraint):
    def test(self, value: Any) -> bool: return value is None or bool(value.strip())


@dataclass(frozen=True, slots=True, eq=False)
class Letter(Constraint):
    def test(self, value: Any) -> bool: return value is None or all(ch.isalpha() for ch in value)


@dataclass(frozen=True, slots=True, eq=False)
class NotLetter(Constraint):
    def test(self, value: Any) -> bool: return value is None or not all(ch.isalpha() for ch in value)


@dataclass(frozen=True, slots=True, eq=False)
class Digit(Constraint):
    def test(self, value: Any) -> bool: return value is None or all(ch.isdigit() for ch in value)


@dataclass(frozen=True, slots=True, eq=False)
class NotDigit(Constraint):
    def test(self, value: Any) -> bool: return value is None or not all(ch.isdigit() for ch in value)


@dataclass(frozen=True, slots=True, eq=False)
class LetterOrDigit(Constraint):
    def test(self, value: Any) -> bool: return value is None or all(ch.isalnum() for ch in value)


@dataclass(frozen=True, slots=True, eq=False)
class NotLetterOrDigit(Constraint):
    def test(self, value: Any) -> bool: return value is None or not all(ch.isalnum() for ch in value)


@dataclass(frozen=True, slots=True, eq=False)
class UpperCase(Constraint):
    def test(self, value: Any) -> bool: return value is None or value.upper() == value


@dataclass(frozen=True, slots=True, eq=False)
class LowerCase(Constraint):
    def test(self, value: Any) -> bool: return value is None or value.lower() == value


@dataclass(frozen=True, slots=True, eq=False)
class Matches(Constraint):
    pattern: str | re.Pattern

    def test(self, value: Any) -> bool: return value is None or re.fullmatch(self.pattern, value) is not None


@dataclass(frozen=True, slots=True, eq=False)
class NotMatch(Constraint):
    pattern: str | re.Pattern

    def test(self, value: Any) -> bool: return value is None or re.fullmatch(self.pattern, value) is None


@dataclass(frozen=True, slots=True, eq=False)
class ContainsRegex(Constraint):
    pattern: str | re.Pattern

    def test(self, value: Any) -> bool: return value is None or re.search(self.pattern, value) is not None


@dataclass(frozen=True, slots=True, eq=False)
class NotContainRegex(Constraint):
    pattern: str | re.Pattern

    def test(self, value: Any) -> bool: return value is None or re.search(self.pattern, value) is None


@dataclass(frozen=True, slots=True, eq=False)
class StartsWith(Constraint):
    prefix: str

    def test(self, value: Any) -> bool: return value is None or value.startswith(self.prefix)


@dataclass(frozen=True, slots=True, eq=False)
class NotStartWith(Constraint):
    prefix: str

    def test(self, value: Any) -> bool: return value is None or not value.startswith(self.prefix)


@dataclass(frozen=True, slots=True, eq=False)
class EndsWith(Constraint):
    suffix: str

    def test(self, value: Any) -> bool: return value is None or value.endswith(self.suffix)


@dataclass(frozen=True, slots=True, eq=False)
class NotEndWith(Constraint):
    suffix: str

    def test(self, value: Any) -> bool: return value is None or not value.endswith(self.suffix)


@dataclass(frozen=True, slots=True, eq=False)
class Email(Constraint):
    def test(self, value: Any) -> bool: return value is None or EMAIL_PATTERN.fullmatch(value) is not None


__all__ = [
    "Constraint", "EMAIL_PATTERN", "is_finite", "integer_digits", "decimal_digits",
    "Null", "NotNull", "Equals", "NotEquals", "In", "NotIn", "Valid",
    "IsTrue", "IsFalse",
    "Empty", "NotEmpty", "Size", "Contains", "ContainsAll", "ContainsAny",
    "NotContain", "NotContainAll", "NotContainAny",
    "Less", "LessOrEqual", "Greater", "GreaterOrEqual", "Between", "NotBetween",
    "IntegerDigits", "DecimalDigits", "Today", "NotToday",
    "Blank", "NotBlank", "Letter", "NotLetter", "Digit", "NotDigit",
    "LetterOrDigit", "NotLetterOrDigit", "UpperCase", "LowerCase",
    "Matches", "NotMatch", "ContainsRegex", "NotContainRegex",
    "StartsWith", "NotStartWith", "EndsWith", "NotEndWith", "Email",
]
