"""rulebook: declarative object validation with localized messages.

Key Features:
- Rule blocks over plain objects and mappings, nested and per element
- Every rule evaluated, violations collected in declaration order
- Locale fallback over YAML message bundles (en, pt_BR, de, es, ca built in)
- Type-dispatched, Babel-backed value formatting with exact numeric scale

Usage:
    from rulebook import ConstraintViolationException, map_to_message, validate

    def employee_rules(v):
        v.field("id").is_positive()
        v.field("name").has_size(min=3, max=30)
        v.field("email").is_not_blank().is_email()
        v.field("salary").has_decimal_digits(max=2)

    try:
        validate(employee, employee_rules)
    except ConstraintViolationException as exc:
        messages = map_to_message(exc.violations, locale="de")
"""
__version__ = "0.1.0"

from rulebook.core import (
    BundleFormatError,
    ErrorCode,
    I18nError,
    MessageNotFoundError,
    RuleDefinitionError,
    RulebookError,
    Settings,
    configure_logging,
    get_settings,
)
from rulebook.validation import (
    Constraint,
    ConstraintViolation,
    ConstraintViolationException,
    Property,
    PropertyPath,
    Validator,
    ViolationSet,
    collect_violations,
    validate,
)
from rulebook.i18n import (
    ConstraintViolationMessage,
    Formatter,
    FormatterRegistry,
    MessageBundle,
    default_formatters,
    interpolate,
    map_to_message,
    resolve,
    to_message,
)
from rulebook.money import Money, MoneyFormatter

__all__ = [
    "__version__",
    "BundleFormatError", "ErrorCode", "I18nError", "MessageNotFoundError", "RuleDefinitionError", "RulebookError",
    "Settings", "configure_logging", "get_settings",
    "Constraint", "ConstraintViolation", "ConstraintViolationException", "Property", "PropertyPath",
    "Validator", "ViolationSet", "collect_violations", "validate",
    "ConstraintViolationMessage", "Formatter", "FormatterRegistry", "MessageBundle", "default_formatters",
    "interpolate", "map_to_message", "resolve", "to_message",
    "Money", "MoneyFormatter",
]
