"""Test Helpers

Assertions over the violations a rule block produces. A mismatch fails with
an aligned expected-versus-actual table instead of two opaque sets.

Usage:
    from rulebook.testing import should_fail_validation

    def test_employee_rules():
        should_fail_validation(employee, employee_rules).verify(lambda e: (
            e.expect("id", -1, Greater(0)),
            e.expect_nested("company", lambda company: company.expect("name", " ", NotBlank())),
            e.expect_all("dependents",
                lambda first: first.expect("name", "", NotBlank()),
                None,  # second dependent is valid
                lambda third: third.expect("age", 200, LessOrEqual(120))),
        ))

Expectations are compared as sets, so their order does not matter.
"""
from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import Any

from rulebook.validation.constraints import Constraint
from rulebook.validation.paths import PropertyPath
from rulebook.validation.validator import Clock, RuleBlock, validate
from rulebook.validation.violations import ConstraintViolation, ConstraintViolationException, ViolationSet

ExpectationBlock = Callable[["ViolationExpectations"], Any]


class ViolationExpectations:
    """Expected violations, recorded relative to a property path."""
    __slots__ = ("path", "_expected")

    def __init__(self, path: PropertyPath | None = None, expected: list[ConstraintViolation] | None = None):
        self.path = path or PropertyPath.root()
        self._expected = [] if expected is None else expected

    @property
    def expected(self) -> ViolationSet:
        return ViolationSet(self._expected)

    def expect(self, name: str, value: Any, constraint: Constraint) -> ViolationExpectations:
        """Expect one violation; an empty name targets the current path (scalar elements)."""
        self._expected.append(ConstraintViolation(str(self.path.child(name)), value, constraint))
        return self

    def expect_nested(self, name: str, block: ExpectationBlock) -> ViolationExpectations:
        """Expect violations inside a nested object."""
        block(ViolationExpectations(self.path.child(name), self._expected))
        return self

    def expect_all(self, name: str, *elements: ExpectationBlock | None) -> ViolationExpectations:
        """Expect violations per element of a collection.

        Args:
            name: The collection property.
            elements: One block per element, by position; None for an
                element without violations.
        """
        path = self.path.child(name)
        for i, block in enumerate(elements):
            if block is not None:
                block(ViolationExpectations(path.index(i), self._expected))
        return self


class ValidationFailure:
    """Violations collected by a failed validation."""
    __slots__ = ("violations",)

    def __init__(self, violations: ViolationSet):
        self.violations = violations

    def verify(self, block: ExpectationBlock) -> None:
        """Assert that exactly the expected violations were collected.

        Raises:
            AssertionError: With both sets rendered as tables.
        """
        expectations = ViolationExpectations()
        block(expectations)
        if expectations.expected != self.violations:
            raise AssertionError(describe_mismatch(expectations.expected, self.violations))


def should_fail_validation(obj: Any, rules: RuleBlock, *, clock: Clock | None = None) -> ValidationFailure:
    """Validate and return the failure; raise AssertionError if every rule held."""
    try:
        validate(obj, rules, clock=clock)
    except ConstraintViolationException as exc:
        return ValidationFailure(exc.violations)
    raise AssertionError(f"Expected {type(obj).__name__} to fail validation, but every rule held")


# === Rendering ===

def describe_mismatch(expected: Iterable[ConstraintViolation], actual: Iterable[ConstraintViolation]) -> str:
    return f"Expected:\n\n{_table(expected)}\n\nbut was:\n\n{_table(actual)}\n"


def _table(violations: Iterable[ConstraintViolation]) -> str:
    rows = [(v.property, "" if v.value is None else str(v.value), _describe(v.constraint)) for v in violations]
    if not rows:
        return "(no violations)"
    path_width = max(len(row[0]) for row in rows)
    value_width = max(len(row[1]) for row in rows)
    return "\n".join(f"{path.ljust(path_width)} | {value.ljust(value_width)} | {constraint}"
        for path, value, constraint in rows)


def _describe(constraint: Constraint) -> str:
    params = ", ".join(f"{k} = {v}" for k, v in constraint.message_params.items())
    return f"{constraint.name}({params})" if params else constraint.name
