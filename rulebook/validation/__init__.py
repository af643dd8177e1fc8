"""Validation engine: constraints, traversal and violations.

Key Features:
- Constraint descriptors with message bundle, key and params
- Property handles with chainable built-in rules
- Nested and per-element rule blocks with dotted/indexed paths
- Ordered, immutable violation sets and one aggregate exception
"""
from rulebook.validation.constraints import Constraint
from rulebook.validation.paths import PropertyPath
from rulebook.validation.validator import (
    Clock,
    Property,
    RuleBlock,
    Validator,
    collect_violations,
    validate,
)
from rulebook.validation.violations import (
    ConstraintViolation,
    ConstraintViolationException,
    ViolationSet,
)

__all__ = [
    "Constraint", "PropertyPath", "Clock", "Property", "RuleBlock", "Validator",
    "collect_violations", "validate",
    "ConstraintViolation", "ConstraintViolationException", "ViolationSet",
]
