"""Placeholder substitution."""

from __future__ import annotations

from decimal import Decimal

from structlog.testing import capture_logs

from rulebook.i18n.interpolation import interpolate, render


def test_params_are_substituted(bundle_en):
    assert interpolate("Must be between {start} and {end}", {"start": 1, "end": 10}, bundle_en) == \
        "Must be between 1 and 10"


def test_params_use_locale_formatting(bundle_en, bundle_de):
    template = "Must be greater than {value}"
    assert interpolate(template, {"value": 1000}, bundle_en) == "Must be greater than 1,000"
    assert interpolate(template, {"value": Decimal("1.50")}, bundle_de) == "Must be greater than 1,50"


def test_repeated_placeholder(bundle_en):
    assert interpolate("{a} and {a}", {"a": "x"}, bundle_en) == "x and x"


def test_none_renders_empty(bundle_en):
    assert interpolate("[{value}]", {"value": None}, bundle_en) == "[]"


def test_unknown_placeholder_stays_verbatim_and_logs(bundle_en):
    with capture_logs() as logs:
        assert interpolate("Hello {name}, {value}", {"value": 3}, bundle_en) == "Hello {name}, 3"
    assert [e["placeholder"] for e in logs if e["event"] == "unresolved_placeholder"] == ["name"]


def test_text_without_placeholders_is_untouched(bundle_en):
    assert interpolate("No braces here", {"value": 1}, bundle_en) == "No braces here"
    assert interpolate("{not closed", {}, bundle_en) == "{not closed"
    assert interpolate("{a-b}", {"a-b": 1}, bundle_en) == "{a-b}"


def test_render_resolves_then_interpolates(bundle_de):
    key = "rulebook.validation.constraints.Between.message"
    assert render(bundle_de, key, {"start": 1, "end": 1000}) == "Muss zwischen 1 und 1.000 sein"
