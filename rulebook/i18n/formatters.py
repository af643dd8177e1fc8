"""Formatter Registry

Maps a runtime type to a formatter `(value, bundle) -> str`. Lookup goes:
1. exact type
2. the type's MRO, nearest ancestor first
3. the most specific registered abstract base class the type is a virtual
   subclass of, ties in registration order (int -> numbers.Number,
   list -> Sequence if registered, else Iterable)
4. AnyFormatter (str), so lookup is total

Registration is last-write-wins per exact type. The entry map is
copy-on-write: writers swap a new map under a lock, readers never lock.

Usage:
    from rulebook.i18n.formatters import default_formatters

    default_formatters[Temperature] = lambda value, bundle: f"{value.celsius} °C"
    default_formatters[Temperature](Temperature(21), bundle)

    # isolated registry for one render
    registry = FormatterRegistry.with_defaults()
    to_message(violation, formatters=registry)

Extension packages publish a callable returning (type, formatter) pairs
under the "rulebook.formatters" entry-point group.
"""
from __future__ import annotations

import datetime as dt
import decimal
import enum
import numbers
import re
import threading
from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable, Mapping
from decimal import Decimal
from importlib.metadata import entry_points
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from babel.dates import format_date, format_datetime, format_time
from babel.numbers import format_decimal

from rulebook.core.logging import i18n_logger

if TYPE_CHECKING:
    from rulebook.i18n.bundles import MessageBundle

log = i18n_logger()

PLUGIN_GROUP = "rulebook.formatters"

FormatFn = Callable[[Any, "MessageBundle"], str]


class Formatter(ABC):
    """Base class for class-based formatters; plain callables work too."""
    __slots__ = ()

    @abstractmethod
    def format(self, value: Any, bundle: MessageBundle) -> str:
        """Render a value for the bundle's locale."""

    def __call__(self, value: Any, bundle: MessageBundle) -> str: return self.format(value, bundle)

    def __repr__(self) -> str: return f"{type(self).__name__}()"


# ============================================================================
# Built-in Formatters
# ============================================================================

class AnyFormatter(Formatter):
    __slots__ = ()

    def format(self, value: Any, bundle: MessageBundle) -> str: return str(value)


class NumberFormatter(Formatter):
    """Locale symbols and grouping, exact scale.

    1000 -> "1,000", Decimal("1.50") -> "1.50", 9999.999 -> "9,999.999"
    (de: "9.999,999"). Floats are read through repr(), so they keep the
    digits they print with. Babel quantizes in the current decimal context,
    so its precision is raised to hold every digit of the value.
    """
    __slots__ = ()

    def format(self, value: Any, bundle: MessageBundle) -> str:
        number = _as_decimal(value)
        if number is None or not number.is_finite():
            return str(value)
        digits, exponent = len(number.as_tuple().digits), number.as_tuple().exponent
        scale = max(-exponent, 0)
        pattern = "#,##0." + "0" * scale if scale else "#,##0"
        with decimal.localcontext() as ctx:
            ctx.prec = max(ctx.prec, digits + abs(exponent) + 1)
            return format_decimal(number, format=pattern, locale=bundle.babel_locale)


class DateFormatter(Formatter):
    __slots__ = ()

    def format(self, value: dt.date, bundle: MessageBundle) -> str:
        return format_date(value, format="medium", locale=bundle.babel_locale)


class DateTimeFormatter(Formatter):
    __slots__ = ()

    def format(self, value: dt.datetime, bundle: MessageBundle) -> str:
        return format_datetime(value, format="medium", locale=bundle.babel_locale)


class TimeFormatter(Formatter):
    __slots__ = ()

    def format(self, value: dt.time, bundle: MessageBundle) -> str:
        return format_time(value, format="medium", locale=bundle.babel_locale)


class EnumFormatter(Formatter):
    __slots__ = ()

    def format(self, value: enum.Enum, bundle: MessageBundle) -> str: return value.name


class PatternFormatter(Formatter):
    __slots__ = ()

    def format(self, value: re.Pattern, bundle: MessageBundle) -> str: return value.pattern


class IterableFormatter(Formatter):
    """Elements formatted one by one and joined with ", " (not localized)."""
    __slots__ = ()

    def format(self, value: Iterable[Any], bundle: MessageBundle) -> str:
        return ", ".join(bundle.format(element) for element in value)


class MappingFormatter(Formatter):
    __slots__ = ()

    def format(self, value: Mapping[Any, Any], bundle: MessageBundle) -> str:
        return ", ".join(f"{bundle.format(k)}={bundle.format(v)}" for k, v in value.items())


ANY_FORMATTER = AnyFormatter()


# === Helper Functions ===

def _as_decimal(value: Any) -> Decimal | None:
    if isinstance(value, Decimal):
        return value
    if isinstance(value, int):
        return Decimal(value)
    if isinstance(value, float):
        return Decimal(repr(value))
    if isinstance(value, numbers.Real):
        return Decimal(repr(float(value)))
    return None


def builtin_entries() -> dict[type, FormatFn]:
    """Default entries; Mapping is more specific than Iterable, so dicts render as pairs."""
    return {
        object: ANY_FORMATTER,
        str: ANY_FORMATTER,
        bytes: ANY_FORMATTER,
        bool: ANY_FORMATTER,
        numbers.Number: NumberFormatter(),
        dt.datetime: DateTimeFormatter(),
        dt.date: DateFormatter(),
        dt.time: TimeFormatter(),
        enum.Enum: EnumFormatter(),
        re.Pattern: PatternFormatter(),
        Mapping: MappingFormatter(),
        Iterable: IterableFormatter(),
    }


# ============================================================================
# Registry
# ============================================================================

class FormatterRegistry:
    """Type -> formatter map with nearest-ancestor lookup."""
    __slots__ = ("_state", "_lock")

    def __init__(self, entries: Mapping[type, FormatFn] | None = None):
        # (entries, resolved lookups); replaced as a whole on every write
        self._state: tuple[Mapping[type, FormatFn], dict[type, FormatFn]] = (
            MappingProxyType(dict(entries or {})), {})
        self._lock = threading.Lock()

    @classmethod
    def with_defaults(cls) -> FormatterRegistry:
        return cls(builtin_entries())

    @property
    def entries(self) -> Mapping[type, FormatFn]:
        """Current registrations (read-only snapshot)."""
        return self._state[0]

    def register(self, type_: type, formatter: FormatFn) -> None:
        """Register or replace the formatter for an exact type."""
        if not callable(formatter):
            raise TypeError(f"Formatter for {type_!r} must be callable")
        with self._lock:
            entries = dict(self._state[0])
            entries[type_] = formatter
            self._state = (MappingProxyType(entries), {})
        log.debug("formatter_registered", type=getattr(type_, "__qualname__", repr(type_)))

    def unregister(self, type_: type) -> None:
        """Remove the formatter registered for an exact type."""
        with self._lock:
            entries = dict(self._state[0])
            del entries[type_]
            self._state = (MappingProxyType(entries), {})

    def lookup(self, type_: type) -> FormatFn:
        entries, resolved = self._state
        formatter = resolved.get(type_)
        if formatter is None:
            formatter = resolved[type_] = _find(entries, type_)
        return formatter

    def format(self, value: Any, bundle: MessageBundle) -> str:
        """Render a value; None renders as the empty string."""
        if value is None:
            return ""
        return self.lookup(type(value))(value, bundle)

    def copy(self) -> FormatterRegistry: return FormatterRegistry(self._state[0])

    def load_plugins(self, group: str = PLUGIN_GROUP) -> int:
        """Register the pairs published by installed extension packages."""
        count = 0
        for entry_point in entry_points(group=group):
            provided = entry_point.load()()
            pairs = provided.items() if isinstance(provided, Mapping) else provided
            for type_, formatter in pairs:
                self.register(type_, formatter)
                count += 1
            log.debug("formatter_plugin_loaded", plugin=entry_point.name)
        return count

    __getitem__ = lookup
    __setitem__ = register
    __delitem__ = unregister

    def __contains__(self, type_: object) -> bool: return type_ in self._state[0]

    def __len__(self) -> int: return len(self._state[0])


def _find(entries: Mapping[type, FormatFn], type_: type) -> FormatFn:
    if type_ in entries:
        return entries[type_]
    for base in type_.__mro__[1:-1]:
        if base in entries:
            return entries[base]
    matches = [key for key in entries if key is not object and isinstance(key, type) and issubclass(type_, key)]
    # Most specific ABC: one that no other match derives from (Sequence before Iterable)
    for key in matches:
        if not any(other is not key and issubclass(other, key) for other in matches):
            return entries[key]
    return entries.get(object, ANY_FORMATTER)


# Process-wide default registry
default_formatters = FormatterRegistry.with_defaults()
default_formatters.load_plugins()
