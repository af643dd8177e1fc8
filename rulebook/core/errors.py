"""Error Taxonomy

Exceptions the library raises itself. Constraint failures are never raised
one by one: they are collected during traversal and surface once, wrapped in
ConstraintViolationException (see rulebook.validation.violations).

E2xxx: Validation errors
E7xxx: Message/i18n errors
"""
from __future__ import annotations

from enum import Enum
from typing import Any


class ErrorCode(Enum):
    """Hierarchical error code taxonomy."""
    # Validation (E2xxx)
    E2000_VALIDATION_GENERIC = 2000
    E2030_INVALID_RULE = 2030

    # Messages (E7xxx)
    E7000_I18N_GENERIC = 7000
    E7001_MESSAGE_NOT_FOUND = 7001
    E7002_MALFORMED_BUNDLE = 7002

    @property
    def category(self) -> str:
        """Human-readable error category."""
        code = self.value
        if 2000 <= code < 3000:
            return "validation"
        if 7000 <= code < 8000:
            return "i18n"
        return "internal"


class RulebookError(Exception):
    """Base exception carrying an ErrorCode and structured metadata."""

    default_code = ErrorCode.E2000_VALIDATION_GENERIC

    def __init__(self, message: str, *, code: ErrorCode | None = None, **metadata: Any):
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code
        self.metadata = metadata

    def to_dict(self) -> dict[str, Any]:
        """Serialize for logs and API responses."""
        result = {"code": self.code.name, "category": self.code.category, "message": self.message}
        if self.metadata:
            result["metadata"] = self.metadata
        return result


class RuleDefinitionError(RulebookError, TypeError):
    """A rule was declared against a value it cannot apply to."""

    default_code = ErrorCode.E2030_INVALID_RULE


class I18nError(RulebookError):
    """Base for message resolution failures."""

    default_code = ErrorCode.E7000_I18N_GENERIC


class MessageNotFoundError(I18nError, LookupError):
    """A message key is missing from every bundle in the fallback chain (strict mode)."""

    default_code = ErrorCode.E7001_MESSAGE_NOT_FOUND


class BundleFormatError(I18nError, ValueError):
    """A bundle file exists but is not a key/value mapping."""

    default_code = ErrorCode.E7002_MALFORMED_BUNDLE
