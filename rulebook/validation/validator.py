"""Validation Engine

Depth-first traversal of an object graph driven by rule blocks. Every
declared rule runs; failures are collected (never fail-fast) and surface
once, as a ConstraintViolationException, after the whole block finished.

Key Features:
- Explicit property descriptors: a name plus an accessor, no reflection
- Dotted/indexed paths: "company.address.city", "dependents[2].name"
- Nested blocks skipped on None, iterable blocks fan out per element
- Deterministic: violation order follows rule-declaration order
- Injectable clock for date rules

Usage:
    from rulebook import validate

    def address_rules(v):
        v.field("city").is_not_blank()

    def employee_rules(v):
        v.field("id").is_positive()
        v.field("name").is_not_blank().has_size(min=3, max=30)
        v.field("address").validate_nested(address_rules)
        v.field("dependents").validate_for_each(lambda d: d.field("name").is_not_blank())

    employee = validate(employee, employee_rules)

    # or as a context manager
    with Validator(employee) as v:
        v.field("email").is_email()
"""
from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field as dc_field
from datetime import datetime
from operator import attrgetter, methodcaller
from typing import Any, Generic, TypeVar, Union

from rulebook.core.errors import RuleDefinitionError
from rulebook.core.logging import validation_logger
from rulebook.validation.constraints import Constraint
from rulebook.validation.paths import PropertyPath
from rulebook.validation.rules import (
    AnyRules, BooleanRules, ComparableRules, ContainerRules, NumberRules, TemporalRules, TextRules,
)
from rulebook.validation.violations import ConstraintViolation, ConstraintViolationException, ViolationSet

E = TypeVar("E")
T = TypeVar("T")

Clock = Callable[[], datetime]
Rule = Callable[["Validator[Any]"], Any]
RuleBlock = Union[Rule, Iterable[Rule]]

log = validation_logger()


@dataclass(slots=True)
class _Traversal:
    """State owned by one validate() call, shared by its nested validators."""
    clock: Clock
    violations: list[ConstraintViolation] = dc_field(default_factory=list)


class Validator(Generic[E]):
    """Collects constraint violations for one object graph."""
    __slots__ = ("obj", "path", "_traversal")

    def __init__(self, obj: E, *, clock: Clock | None = None):
        self.obj = obj
        self.path = PropertyPath.root()
        self._traversal = _Traversal(clock or datetime.now)

    @classmethod
    def _nested(cls, obj: Any, path: PropertyPath, traversal: _Traversal) -> Validator[Any]:
        validator = cls.__new__(cls)
        validator.obj, validator.path, validator._traversal = obj, path, traversal
        return validator

    @property
    def clock(self) -> Clock: return self._traversal.clock

    @property
    def violations(self) -> ViolationSet:
        """Snapshot of everything collected so far, in declaration order."""
        return ViolationSet(self._traversal.violations)

    def field(self, name: str, accessor: Callable[[E], T] | None = None) -> Property[T]:
        """Handle on a named property of the validated object.

        Args:
            name: Path segment reported in violations.
            accessor: Reads the value from the object. Defaults to `get(name)`
                for mappings, so a missing key reads as None, and to attribute
                access otherwise (a missing attribute raises AttributeError).
        """
        if accessor is None:
            accessor = methodcaller("get", name) if isinstance(self.obj, Mapping) else attrgetter(name)
        return Property(self, name, self.path.child(name), accessor(self.obj))

    def value(self) -> Property[E]:
        """Handle on the validated object itself (scalar collection elements)."""
        return Property(self, "", self.path, self.obj)

    def apply(self, rules: RuleBlock) -> Validator[E]:
        """Run a rule block (one callable or an iterable of them) against this object."""
        if callable(rules):
            rules(self)
        else:
            for rule in rules:
                rule(self)
        return self

    def raise_if_violations(self) -> None:
        if self._traversal.violations:
            raise ConstraintViolationException(self.violations)

    def _report(self, violation: ConstraintViolation) -> None:
        self._traversal.violations.append(violation)

    def __enter__(self) -> Validator[E]: return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc_type is None:
            self.raise_if_violations()


class Property(AnyRules, BooleanRules, ComparableRules, NumberRules, ContainerRules, TextRules, TemporalRules,
               Generic[T]):
    """Transient handle binding a property name, its path and its value.

    Owned by one traversal. `validate` is the single primitive every rule
    method goes through; it never short-circuits the chain.
    """
    __slots__ = ("_validator", "name", "path", "value")

    def __init__(self, validator: Validator[Any], name: str, path: PropertyPath, value: T):
        self._validator = validator
        self.name = name
        self.path = path
        self.value = value

    @property
    def clock(self) -> Clock: return self._validator.clock

    def validate(self, constraint: Constraint, predicate: Callable[[T], bool] | None = None) -> Property[T]:
        """Apply one constraint; a failing predicate appends exactly one violation.

        Args:
            constraint: Descriptor reported on failure.
            predicate: Check to run, defaults to the constraint's own `test`.
        """
        check = predicate or constraint.test
        if not check(self.value):
            self._validator._report(ConstraintViolation(str(self.path), self.value, constraint))
        return self

    def validate_nested(self, rules: RuleBlock) -> Property[T]:
        """Run a rule block against the value; skipped when the value is None."""
        if self.value is not None:
            Validator._nested(self.value, self.path, self._validator._traversal).apply(rules)
        return self

    def validate_for_each(self, rules: RuleBlock) -> Property[T]:
        """Run a rule block against every element, paths suffixed with [index] or [key]."""
        if self.value is None:
            return self
        if isinstance(self.value, (str, bytes)) or not isinstance(self.value, Iterable):
            raise RuleDefinitionError(
                f"validate_for_each needs a collection, got {type(self.value).__name__}",
                property=str(self.path))
        traversal = self._validator._traversal
        if isinstance(self.value, Mapping):
            for key, element in self.value.items():
                self._each(element, self.path.key(key), traversal, rules)
        else:
            for i, element in enumerate(self.value):
                self._each(element, self.path.index(i), traversal, rules)
        return self

    @staticmethod
    def _each(element: Any, path: PropertyPath, traversal: _Traversal, rules: RuleBlock) -> None:
        if element is not None:
            Validator._nested(element, path, traversal).apply(rules)

    def __repr__(self) -> str: return f"Property({str(self.path)!r}, {self.value!r})"


# === Entry Points ===

def collect_violations(obj: E, rules: RuleBlock, *, clock: Clock | None = None) -> ViolationSet:
    """Run a rule block and return every violation without raising."""
    validator = Validator(obj, clock=clock).apply(rules)
    violations = validator.violations
    log.debug("validation_completed", root=type(obj).__name__, violation_count=len(violations))
    return violations


def validate(obj: E, rules: RuleBlock, *, clock: Clock | None = None) -> E:
    """Validate an object graph.

    Returns:
        The object itself when every rule holds.

    Raises:
        ConstraintViolationException: carrying every violation, after the
            whole rule block ran.
    """
    violations = collect_violations(obj, rules, clock=clock)
    if violations:
        raise ConstraintViolationException(violations)
    return obj
