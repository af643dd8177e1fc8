"""Built-in rule methods for Property

Each mixin groups the rules of one concern. Every method appends at most one
violation through Property.validate and returns the property, so rules chain:

    v.field("name").is_not_blank().has_size(min=3, max=30)

Rules are generic over types: `contains` works on strings (substring) and
collections (membership), `is_between` on anything comparable.
"""
from __future__ import annotations

import re
from collections.abc import Callable, Iterable
from datetime import date, datetime
from typing import TYPE_CHECKING, Any

from rulebook.validation import constraints as c

if TYPE_CHECKING:
    from rulebook.validation.validator import Property


# === Helper Functions ===

def _values(values: tuple[Any, ...]) -> tuple[Any, ...]:
    """Accept both is_in(1, 2, 3) and is_in([1, 2, 3])."""
    if len(values) == 1 and isinstance(values[0], Iterable) and not isinstance(values[0], (str, bytes)):
        return tuple(values[0])
    return values


def _fold(value: Any) -> Any:
    return value.casefold() if isinstance(value, str) else value


def _fold_if(value: str, ignore_case: bool) -> str:
    return value.casefold() if ignore_case else value


def _has(container: Any, item: Any, ignore_case: bool) -> bool:
    if not ignore_case:
        return item in container
    if isinstance(container, str):
        return _fold(item) in container.casefold()
    folded = _fold(item)
    return any(_fold(e) == folded for e in container)


def _is_same_day(value: date, now: datetime | date) -> bool:
    today = now.date() if isinstance(now, datetime) else now
    if isinstance(value, datetime):
        if value.tzinfo is not None and isinstance(now, datetime) and now.tzinfo is not None:
            value = value.astimezone(now.tzinfo)
        value = value.date()
    return value == today


# ============================================================================
# Any
# ============================================================================

class AnyRules:
    __slots__ = ()

    def is_null(self) -> Property: return self.validate(c.Null())

    def is_not_null(self) -> Property: return self.validate(c.NotNull())

    def is_equal_to(self, value: Any) -> Property: return self.validate(c.Equals(value))

    def is_not_equal_to(self, value: Any) -> Property: return self.validate(c.NotEquals(value))

    def is_in(self, *values: Any) -> Property: return self.validate(c.In(_values(values)))

    def is_not_in(self, *values: Any) -> Property: return self.validate(c.NotIn(_values(values)))

    def is_valid(self, predicate: Callable[[Any], bool]) -> Property:
        """Custom predicate, reported as the Valid constraint. Not called for None."""
        return self.validate(c.Valid(), lambda v: v is None or bool(predicate(v)))


# ============================================================================
# Boolean
# ============================================================================

class BooleanRules:
    __slots__ = ()

    def is_true(self) -> Property: return self.validate(c.IsTrue())

    def is_false(self) -> Property: return self.validate(c.IsFalse())


# ============================================================================
# Comparable / Numeric
# ============================================================================

class ComparableRules:
    __slots__ = ()

    def is_less_than(self, value: Any) -> Property: return self.validate(c.Less(value))

    def is_less_than_or_equal_to(self, value: Any) -> Property: return self.validate(c.LessOrEqual(value))

    def is_greater_than(self, value: Any) -> Property: return self.validate(c.Greater(value))

    def is_greater_than_or_equal_to(self, value: Any) -> Property: return self.validate(c.GreaterOrEqual(value))

    def is_between(self, start: Any, end: Any) -> Property:
        """Inclusive on both ends."""
        return self.validate(c.Between(start, end))

    def is_not_between(self, start: Any, end: Any) -> Property: return self.validate(c.NotBetween(start, end))


class NumberRules:
    __slots__ = ()

    def is_zero(self) -> Property: return self.validate(c.Equals(0))

    def is_not_zero(self) -> Property: return self.validate(c.NotEquals(0))

    def is_one(self) -> Property: return self.validate(c.Equals(1))

    def is_not_one(self) -> Property: return self.validate(c.NotEquals(1))

    def is_positive(self) -> Property: return self.validate(c.Greater(0))

    def is_not_positive(self) -> Property: return self.validate(c.LessOrEqual(0))

    def is_negative(self) -> Property: return self.validate(c.Less(0))

    def is_not_negative(self) -> Property: return self.validate(c.GreaterOrEqual(0))

    def has_integer_digits(self, min: int | None = None, max: int | None = None) -> Property:
        return self.validate(c.IntegerDigits(min, max))

    def has_decimal_digits(self, min: int | None = None, max: int | None = None) -> Property:
        """Digits after the decimal point; floats are read through str(), so 0.1 has one."""
        return self.validate(c.DecimalDigits(min, max))


# ============================================================================
# Sized / Collection / Text containment
# ============================================================================

class ContainerRules:
    __slots__ = ()

    def is_empty(self) -> Property: return self.validate(c.Empty())

    def is_not_empty(self) -> Property: return self.validate(c.NotEmpty())

    def has_size(self, min: int | None = None, max: int | None = None) -> Property:
        return self.validate(c.Size(min, max))

    def contains(self, value: Any, *, ignore_case: bool = False) -> Property:
        return self.validate(c.Contains(value), lambda v: v is None or _has(v, value, ignore_case))

    def contains_all(self, *values: Any, ignore_case: bool = False) -> Property:
        values = _values(values)
        return self.validate(c.ContainsAll(values),
            lambda v: v is None or all(_has(v, x, ignore_case) for x in values))

    def contains_any(self, *values: Any, ignore_case: bool = False) -> Property:
        values = _values(values)
        return self.validate(c.ContainsAny(values),
            lambda v: v is None or any(_has(v, x, ignore_case) for x in values))

    def does_not_contain(self, value: Any, *, ignore_case: bool = False) -> Property:
        return self.validate(c.NotContain(value), lambda v: v is None or not _has(v, value, ignore_case))

    def does_not_contain_all(self, *values: Any, ignore_case: bool = False) -> Property:
        values = _values(values)
        return self.validate(c.NotContainAll(values),
            lambda v: v is None or not all(_has(v, x, ignore_case) for x in values))

    def does_not_contain_any(self, *values: Any, ignore_case: bool = False) -> Property:
        values = _values(values)
        return self.validate(c.NotContainAny(values),
            lambda v: v is None or not any(_has(v, x, ignore_case) for x in values))


# ============================================================================
# Text
# ============================================================================

class TextRules:
    __slots__ = ()

    def is_blank(self) -> Property: return self.validate(c.Blank())

    def is_not_blank(self) -> Property: return self.validate(c.NotBlank())

    def is_letter(self) -> Property: return self.validate(c.Letter())

    def is_not_letter(self) -> Property: return self.validate(c.NotLetter())

    def is_digit(self) -> Property: return self.validate(c.Digit())

    def is_not_digit(self) -> Property: return self.validate(c.NotDigit())

    def is_letter_or_digit(self) -> Property: return self.validate(c.LetterOrDigit())

    def is_not_letter_or_digit(self) -> Property: return self.validate(c.NotLetterOrDigit())

    def is_upper_case(self) -> Property: return self.validate(c.UpperCase())

    def is_lower_case(self) -> Property: return self.validate(c.LowerCase())

    def is_email(self) -> Property: return self.validate(c.Email())

    def matches(self, pattern: str | re.Pattern) -> Property:
        """Whole-value match."""
        return self.validate(c.Matches(pattern))

    def does_not_match(self, pattern: str | re.Pattern) -> Property: return self.validate(c.NotMatch(pattern))

    def contains_regex(self, pattern: str | re.Pattern) -> Property: return self.validate(c.ContainsRegex(pattern))

    def does_not_contain_regex(self, pattern: str | re.Pattern) -> Property:
        return self.validate(c.NotContainRegex(pattern))

    def starts_with(self, prefix: str, *, ignore_case: bool = False) -> Property:
        return self.validate(c.StartsWith(prefix),
            lambda v: v is None or _fold_if(v, ignore_case).startswith(_fold_if(prefix, ignore_case)))

    def does_not_start_with(self, prefix: str, *, ignore_case: bool = False) -> Property:
        return self.validate(c.NotStartWith(prefix),
            lambda v: v is None or not _fold_if(v, ignore_case).startswith(_fold_if(prefix, ignore_case)))

    def ends_with(self, suffix: str, *, ignore_case: bool = False) -> Property:
        return self.validate(c.EndsWith(suffix),
            lambda v: v is None or _fold_if(v, ignore_case).endswith(_fold_if(suffix, ignore_case)))

    def does_not_end_with(self, suffix: str, *, ignore_case: bool = False) -> Property:
        return self.validate(c.NotEndWith(suffix),
            lambda v: v is None or not _fold_if(v, ignore_case).endswith(_fold_if(suffix, ignore_case)))

    def is_equal_to_ignoring_case(self, value: str) -> Property:
        return self.validate(c.Equals(value), lambda v: v is None or _fold(v) == _fold(value))

    def is_not_equal_to_ignoring_case(self, value: str) -> Property:
        return self.validate(c.NotEquals(value), lambda v: v is None or _fold(v) != _fold(value))

    def is_in_ignoring_case(self, *values: str) -> Property:
        values = _values(values)
        return self.validate(c.In(values), lambda v: v is None or _fold(v) in {_fold(x) for x in values})

    def is_not_in_ignoring_case(self, *values: str) -> Property:
        values = _values(values)
        return self.validate(c.NotIn(values), lambda v: v is None or _fold(v) not in {_fold(x) for x in values})


# ============================================================================
# Temporal
# ============================================================================

class TemporalRules:
    __slots__ = ()

    def is_today(self) -> Property:
        now = self.clock()
        return self.validate(c.Today(), lambda v: v is None or _is_same_day(v, now))

    def is_not_today(self) -> Property:
        now = self.clock()
        return self.validate(c.NotToday(), lambda v: v is None or not _is_same_day(v, now))

    def is_before(self, value: date) -> Property: return self.validate(c.Less(value))

    def is_before_or_equal_to(self, value: date) -> Property: return self.validate(c.LessOrEqual(value))

    def is_after(self, value: date) -> Property: return self.validate(c.Greater(value))

    def is_after_or_equal_to(self, value: date) -> Property: return self.validate(c.GreaterOrEqual(value))
