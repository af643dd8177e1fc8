"""Formatter registry: lookup order, overrides, isolation, built-in renderings."""

from __future__ import annotations

import enum
import re
import threading
from collections import OrderedDict
from collections.abc import Sequence
from datetime import date, datetime, time
from decimal import Decimal
from fractions import Fraction

import pytest
from babel.dates import format_date, format_datetime, format_time

from rulebook.i18n import formatters as formatters_module
from rulebook.i18n.bundles import MessageBundle
from rulebook.i18n.formatters import (
    ANY_FORMATTER,
    AnyFormatter,
    FormatterRegistry,
    IterableFormatter,
    MappingFormatter,
    NumberFormatter,
    default_formatters,
)


class Animal:
    def __str__(self): return "animal"


class Dog(Animal):
    pass


class Color(enum.Enum):
    RED = 1


def _animal(value, bundle): return "an animal"


def _dog(value, bundle): return "a dog"


# ------------------------------------------------------------------
# Lookup
# ------------------------------------------------------------------


def test_lookup_is_total(registry):
    assert registry[Animal] is ANY_FORMATTER
    assert FormatterRegistry()[Animal] is ANY_FORMATTER


@pytest.mark.parametrize(
    "type_, formatter_type",
    [
        (int, NumberFormatter),
        (float, NumberFormatter),
        (Decimal, NumberFormatter),
        (Fraction, NumberFormatter),
        (bool, AnyFormatter),
        (str, AnyFormatter),
        (dict, MappingFormatter),
        (OrderedDict, MappingFormatter),
        (list, IterableFormatter),
        (tuple, IterableFormatter),
        (frozenset, IterableFormatter),
    ],
)
def test_builtin_dispatch(registry, type_, formatter_type):
    assert isinstance(registry[type_], formatter_type)


def test_nearest_ancestor_wins(registry):
    registry[Animal] = _animal
    assert registry[Dog] is _animal
    registry[Dog] = _dog
    assert registry[Dog] is _dog
    assert registry[Animal] is _animal


def test_register_is_last_write_wins(registry, bundle_en):
    registry[int] = lambda value, bundle: f"int:{value}"
    registry[int] = lambda value, bundle: f"integer:{value}"
    assert registry.format(5, bundle_en) == "integer:5"
    assert registry.format(Decimal("5"), bundle_en) == "5"


def test_most_specific_abc_wins(registry):
    sequences = lambda value, bundle: "sequence"
    registry[Sequence] = sequences
    assert registry[list] is sequences
    assert registry[tuple] is sequences
    assert isinstance(registry[frozenset], IterableFormatter)
    assert isinstance(registry[dict], MappingFormatter)


def test_unregister_restores_ancestor(registry):
    registry[Dog] = _dog
    del registry[Dog]
    assert registry[Dog] is ANY_FORMATTER
    with pytest.raises(KeyError):
        registry.unregister(Dog)


def test_copy_is_isolated(registry):
    copy = registry.copy()
    copy[int] = _dog
    assert copy[int] is _dog
    assert isinstance(registry[int], NumberFormatter)
    assert Animal not in registry


def test_register_requires_callable(registry):
    with pytest.raises(TypeError):
        registry.register(Animal, "not callable")


def test_concurrent_register_and_lookup(registry):
    types = [type(f"T{i}", (Animal,), {}) for i in range(50)]
    errors = []

    def writer():
        for t in types:
            registry[t] = _dog

    def reader():
        try:
            for _ in range(20):
                for t in types:
                    assert registry[t] in (_dog, ANY_FORMATTER)
        except AssertionError as exc:
            errors.append(exc)

    threads = [threading.Thread(target=writer)] + [threading.Thread(target=reader) for _ in range(4)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    assert errors == []
    assert all(registry[t] is _dog for t in types)


def test_plugins_are_loaded_from_entry_points(registry, monkeypatch):
    class FakeEntryPoint:
        name = "animals"

        def load(self):
            return lambda: {Animal: _animal}

    monkeypatch.setattr(formatters_module, "entry_points", lambda group: [FakeEntryPoint()])
    assert registry.load_plugins() == 1
    assert registry[Dog] is _animal


def test_default_registry_is_shared():
    assert isinstance(default_formatters, FormatterRegistry)
    assert MessageBundle(locale="en").formatters is default_formatters


# ------------------------------------------------------------------
# Rendering
# ------------------------------------------------------------------


@pytest.mark.parametrize(
    "value, en, de",
    [
        (1000, "1,000", "1.000"),
        (-1, "-1", "-1"),
        (0, "0", "0"),
        (Decimal("1.50"), "1.50", "1,50"),
        (9999.999, "9,999.999", "9.999,999"),
        (Decimal("0.5"), "0.5", "0,5"),
        (Decimal("1E+3"), "1,000", "1.000"),
        (Decimal("1234567.891"), "1,234,567.891", "1.234.567,891"),
    ],
)
def test_numbers_keep_exact_scale(value, en, de, bundle_en, bundle_de):
    assert bundle_en.format(value) == en
    assert bundle_de.format(value) == de


def test_special_values(bundle_en):
    assert bundle_en.format(None) == ""
    assert bundle_en.format(True) == "True"
    assert bundle_en.format(float("nan")) == "nan"
    assert bundle_en.format(Color.RED) == "RED"
    assert bundle_en.format(re.compile(r"\d+")) == r"\d+"
    assert bundle_en.format(Dog()) == "animal"


def test_collections_join_formatted_elements(bundle_en, bundle_de):
    assert bundle_en.format([1, 2, 3]) == "1, 2, 3"
    assert bundle_de.format((1000, Decimal("2.5"))) == "1.000, 2,5"
    assert bundle_en.format(["a", None, "b"]) == "a, , b"
    assert bundle_en.format({"a": 1, "b": 2000}) == "a=1, b=2,000"
    assert bundle_en.format("abc") == "abc"


def test_dates_use_medium_locale_format(bundle_en):
    d = date(2024, 5, 17)
    dt_ = datetime(2024, 5, 17, 15, 4, 5)
    t = time(15, 4, 5)
    assert bundle_en.format(d) == format_date(d, format="medium", locale="en")
    assert bundle_en.format(dt_) == format_datetime(dt_, format="medium", locale="en")
    assert bundle_en.format(t) == format_time(t, format="medium", locale="en")
    assert "2024" in bundle_en.format(d)


def test_per_bundle_registry(registry):
    registry[int] = lambda value, bundle: "custom"
    assert MessageBundle(locale="en", formatters=registry).format(3) == "custom"
    assert MessageBundle(locale="en").format(3) == "3"


def test_numbers_beyond_default_decimal_precision(bundle_en, bundle_de):
    assert bundle_en.format(10**30) == "1" + ",000" * 10
    assert bundle_de.format(10**30) == "1" + ".000" * 10
    assert bundle_en.format(Decimal("1.23456789012345678901234567890")) == "1.23456789012345678901234567890"
    assert bundle_en.format(Decimal("1E+40")) == "10" + ",000" * 13
