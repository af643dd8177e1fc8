"""Human-readable messages for constraint violations.

Usage:
    try:
        validate(employee, employee_rules)
    except ConstraintViolationException as exc:
        for m in map_to_message(exc.violations, locale="pt_BR"):
            print(m.property, m.message)
"""
from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

from rulebook.i18n.bundles import MessageBundle
from rulebook.i18n.formatters import FormatterRegistry
from rulebook.i18n.interpolation import render
from rulebook.i18n.locales import LocaleLike
from rulebook.validation.constraints import Constraint
from rulebook.validation.violations import ConstraintViolation


@dataclass(frozen=True, slots=True)
class ConstraintViolationMessage:
    """A violation together with its rendered message."""
    property: str
    value: Any
    constraint: Constraint
    message: str

    def to_dict(self) -> dict[str, Any]:
        return {"property": self.property, "value": self.value, "constraint": self.constraint.name,
            "message": self.message}


def to_message(violation: ConstraintViolation, base_name: str | None = None, locale: LocaleLike = None, *,
               fallback_locale: LocaleLike = None,
               formatters: FormatterRegistry | None = None) -> ConstraintViolationMessage:
    """Render one violation.

    Args:
        violation: The violation to render.
        base_name: Bundle consulted first; the constraint's own bundle is the
            fallback. Defaults to the constraint's bundle.
        locale: Requested locale, defaults to Settings.DEFAULT_LOCALE.
        fallback_locale: Locale tried next, defaults to Settings.DEFAULT_LOCALE.
        formatters: Registry for params, defaults to the process-wide one.
    """
    constraint = violation.constraint
    bundle = MessageBundle(base_name or constraint.message_bundle, locale, constraint.message_bundle,
        fallback_locale, formatters)
    return ConstraintViolationMessage(property=violation.property, value=violation.value, constraint=constraint,
        message=render(bundle, constraint.message_key, constraint.message_params))


def map_to_message(violations: Iterable[ConstraintViolation], base_name: str | None = None,
                   locale: LocaleLike = None, **kwargs: Any) -> list[ConstraintViolationMessage]:
    """Render every violation, keeping their order."""
    return [to_message(v, base_name, locale, **kwargs) for v in violations]
