"""Violation Model

ConstraintViolation records one failed constraint on one property value.
ViolationSet is the finalized, insertion-ordered result of one traversal,
and ConstraintViolationException is the single aggregate failure raised
once a traversal has collected at least one violation.

Error Format (ConstraintViolationException.to_dict):
{
    "code": "E2000_VALIDATION_GENERIC",
    "category": "validation",
    "message": "Validation failed: 2 violations",
    "violations": [
        {"property": "name", "value": "aa", "constraint": "Size", "params": {"min": 3, "max": 30}},
        {"property": "dependents[0].name", "value": "", "constraint": "NotBlank", "params": {}}
    ]
}
"""
from __future__ import annotations

from collections.abc import Iterable, Iterator, Set
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from rulebook.core.errors import ErrorCode, RulebookError
from rulebook.validation.constraints import Constraint

if TYPE_CHECKING:
    from babel import Locale

    from rulebook.i18n.messages import ConstraintViolationMessage


@dataclass(frozen=True, slots=True, eq=False)
class ConstraintViolation:
    """One failed constraint: full property path, offending value, constraint."""
    property: str
    value: Any
    constraint: Constraint

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ConstraintViolation):
            return NotImplemented
        return (self.property == other.property and self.constraint == other.constraint
            and _same_value(self.value, other.value))

    def __hash__(self) -> int: return hash((self.property, self.constraint))

    def to_dict(self) -> dict[str, Any]:
        """Serialize for API responses."""
        return {"property": self.property, "value": self.value, "constraint": self.constraint.name,
            "params": self.constraint.message_params}


def _same_value(a: Any, b: Any) -> bool:
    if a is b:
        return True
    try:
        return bool(a == b)
    except (TypeError, ValueError):
        # Values with non-boolean __eq__ (arrays and the like) compare by identity
        return False


class ViolationSet(Set):
    """Immutable, insertion-ordered set of violations.

    Iteration follows rule-declaration order of the traversal that produced
    it. Equal violations collapse onto their first occurrence.
    """
    __slots__ = ("_items",)

    def __init__(self, violations: Iterable[ConstraintViolation] = ()):
        self._items: dict[ConstraintViolation, None] = dict.fromkeys(violations)

    @classmethod
    def _from_iterable(cls, it: Iterable[ConstraintViolation]) -> ViolationSet: return cls(it)

    def __contains__(self, item: object) -> bool: return item in self._items

    def __iter__(self) -> Iterator[ConstraintViolation]: return iter(self._items)

    def __len__(self) -> int: return len(self._items)

    def __repr__(self) -> str: return f"ViolationSet({list(self._items)!r})"

    @property
    def first(self) -> ConstraintViolation | None: return next(iter(self._items), None)

    @property
    def properties(self) -> list[str]:
        """Distinct property paths in first-seen order."""
        return list(dict.fromkeys(v.property for v in self._items))

    def for_property(self, path: str) -> list[ConstraintViolation]:
        return [v for v in self._items if v.property == path]

    def by_property(self) -> dict[str, list[ConstraintViolation]]:
        """Group violations by property path."""
        result: dict[str, list[ConstraintViolation]] = {}
        for v in self._items: result.setdefault(v.property, []).append(v)
        return result

    def to_list(self) -> list[ConstraintViolation]: return list(self._items)

    def to_dict(self) -> dict[str, Any]:
        return {"violation_count": len(self._items), "violations": [v.to_dict() for v in self._items]}

    def to_messages(self, base_name: str | None = None, locale: str | Locale | None = None,
                    **kwargs: Any) -> list[ConstraintViolationMessage]:
        """Render every violation; see rulebook.i18n.messages.map_to_message."""
        from rulebook.i18n.messages import map_to_message

        return map_to_message(self, base_name, locale, **kwargs)


class ConstraintViolationException(RulebookError):
    """Aggregate failure carrying every violation found by one traversal."""

    default_code = ErrorCode.E2000_VALIDATION_GENERIC

    def __init__(self, violations: Iterable[ConstraintViolation]):
        self.violations = violations if isinstance(violations, ViolationSet) else ViolationSet(violations)
        super().__init__(f"Validation failed: {len(self.violations)} violations",
            violation_count=len(self.violations))

    def __str__(self) -> str:
        if len(self.violations) == 1:
            v = self.violations.first
            return f"{v.property}: {v.constraint.name}"
        return self.message

    def to_dict(self) -> dict[str, Any]:
        return {"code": self.code.name, "category": self.code.category, "message": self.message,
            "violations": self.violations.to_dict()["violations"]}

    def to_messages(self, base_name: str | None = None, locale: str | Locale | None = None,
                    **kwargs: Any) -> list[ConstraintViolationMessage]:
        return self.violations.to_messages(base_name, locale, **kwargs)
