"""Shared fixtures for the rulebook test-suite.

Every test starts from default settings (no RULEBOOK_* variables) and empty
bundle caches, so environment-driven tests cannot leak into each other.
"""
from __future__ import annotations

import os
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal

import pytest

from rulebook.core.config import get_settings
from rulebook.i18n.bundles import MessageBundle, clear_bundle_cache
from rulebook.i18n.formatters import FormatterRegistry


@pytest.fixture(autouse=True)
def _isolated_settings(monkeypatch):
    for key in list(os.environ):
        if key.startswith("RULEBOOK_"):
            monkeypatch.delenv(key)
    get_settings.cache_clear()
    clear_bundle_cache()
    yield
    get_settings.cache_clear()
    clear_bundle_cache()


# ------------------------------------------------------------------
# Domain objects
# ------------------------------------------------------------------


@dataclass
class City:
    name: str


@dataclass
class Address:
    street: str
    city: City | None = None


@dataclass
class Company:
    name: str
    address: Address | None = None


@dataclass
class Dependent:
    name: str
    age: int = 0


@dataclass
class Employee:
    id: int
    name: str
    email: str | None = None
    salary: float | Decimal | None = None
    company: Company | None = None
    address: Address | None = None
    dependents: list[Dependent] = field(default_factory=list)


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2024, 5, 17, 10, 30)


@pytest.fixture
def clock(fixed_now):
    return lambda: fixed_now


@pytest.fixture
def registry() -> FormatterRegistry:
    return FormatterRegistry.with_defaults()


@pytest.fixture
def bundle_en() -> MessageBundle:
    return MessageBundle(locale="en")


@pytest.fixture
def bundle_de() -> MessageBundle:
    return MessageBundle(locale="de")


@pytest.fixture
def test_bundle(tmp_path) -> str:
    """Filesystem bundle "testMessages" with root, en and pt_BR files."""
    (tmp_path / "testMessages.yaml").write_text(
        'rulebook.validation.constraints.NotEquals.message: "Should not be equal to {value}"\n'
        'rulebook.validation.constraints.Null.message: "Root null"\n',
        encoding="utf-8",
    )
    (tmp_path / "testMessages_en.yaml").write_text(
        'rulebook.validation.constraints:\n'
        '  NotEquals.message: "Cannot be equal to {value}"\n'
        '  Null.message: "   "\n',
        encoding="utf-8",
    )
    (tmp_path / "testMessages_pt_BR.yaml").write_text(
        'rulebook.validation.constraints.NotEmpty.message: "Não pode ser vazio"\n',
        encoding="utf-8",
    )
    return str(tmp_path / "testMessages")
