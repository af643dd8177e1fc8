"""Settings, error taxonomy and logging setup."""

from __future__ import annotations

import logging

import pytest
import structlog
from pydantic import ValidationError

from rulebook.core.config import Settings, get_settings
from rulebook.core.errors import (
    BundleFormatError,
    ErrorCode,
    I18nError,
    MessageNotFoundError,
    RuleDefinitionError,
    RulebookError,
)
from rulebook.core.logging import _censor_sensitive_keys, configure_logging, get_logger

# ------------------------------------------------------------------
# Settings
# ------------------------------------------------------------------


def test_defaults():
    settings = get_settings()
    assert settings.DEFAULT_LOCALE == "en"
    assert settings.BUNDLE_PATHS == []
    assert settings.STRICT_MESSAGES is False
    assert settings.LOG_JSON is False


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("RULEBOOK_DEFAULT_LOCALE", "pt_BR")
    monkeypatch.setenv("RULEBOOK_STRICT_MESSAGES", "1")
    monkeypatch.setenv("RULEBOOK_BUNDLE_PATHS", '["/srv/messages"]')
    get_settings.cache_clear()
    settings = get_settings()
    assert settings.DEFAULT_LOCALE == "pt_BR"
    assert settings.STRICT_MESSAGES is True
    assert settings.BUNDLE_PATHS == ["/srv/messages"]


def test_settings_are_cached():
    assert get_settings() is get_settings()


def test_malformed_default_locale_is_rejected():
    with pytest.raises(ValidationError):
        Settings(DEFAULT_LOCALE="not a locale!")


# ------------------------------------------------------------------
# Errors
# ------------------------------------------------------------------


@pytest.mark.parametrize(
    "code, category",
    [
        (ErrorCode.E2000_VALIDATION_GENERIC, "validation"),
        (ErrorCode.E2030_INVALID_RULE, "validation"),
        (ErrorCode.E7000_I18N_GENERIC, "i18n"),
        (ErrorCode.E7001_MESSAGE_NOT_FOUND, "i18n"),
    ],
)
def test_error_categories(code, category):
    assert code.category == category


def test_error_to_dict():
    error = MessageNotFoundError("No message for 'k'", key="k")
    assert error.to_dict() == {
        "code": "E7001_MESSAGE_NOT_FOUND",
        "category": "i18n",
        "message": "No message for 'k'",
        "metadata": {"key": "k"},
    }
    assert RulebookError("boom").to_dict() == {
        "code": "E2000_VALIDATION_GENERIC", "category": "validation", "message": "boom"}


def test_errors_keep_builtin_bases():
    assert isinstance(RuleDefinitionError("x"), TypeError)
    assert isinstance(MessageNotFoundError("x"), LookupError)
    assert isinstance(BundleFormatError("x"), ValueError)
    assert isinstance(MessageNotFoundError("x"), I18nError)
    assert isinstance(BundleFormatError("x"), I18nError)
    assert I18nError("x").code is ErrorCode.E7000_I18N_GENERIC
    assert RuleDefinitionError("x", code=ErrorCode.E2000_VALIDATION_GENERIC).code is ErrorCode.E2000_VALIDATION_GENERIC


# ------------------------------------------------------------------
# Logging
# ------------------------------------------------------------------


def test_sensitive_keys_are_redacted():
    event = {"event": "x", "value": "secret-ish", "nested": {"password": "p", "ok": 1}}
    assert _censor_sensitive_keys(None, "info", event) == {
        "event": "x", "value": "[REDACTED]", "nested": {"password": "[REDACTED]", "ok": 1}}


@pytest.fixture
def restore_logging():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield root
    structlog.reset_defaults()
    root.handlers = handlers
    root.setLevel(level)


@pytest.mark.parametrize("json_logs", [True, False])
def test_configure_logging(restore_logging, capsys, json_logs):
    configure_logging("DEBUG", json_logs=json_logs)
    assert restore_logging.level == logging.DEBUG
    assert len(restore_logging.handlers) == 1
    assert logging.getLogger("babel").level == logging.WARNING

    with structlog.contextvars.bound_contextvars(request_id="req-42"):
        get_logger("rulebook.tests").info("configured", locale="de")
    out = capsys.readouterr().out
    assert "configured" in out
    assert "rulebook" in out
    assert "req-42" in out
