"""Internationalization: bundles, locale fallback, formatters, interpolation."""
from rulebook.i18n.bundles import MessageBundle, clear_bundle_cache, fallback_chain, load_bundle, resolve
from rulebook.i18n.formatters import Formatter, FormatterRegistry, default_formatters
from rulebook.i18n.interpolation import interpolate, render
from rulebook.i18n.locales import babel_locale, candidates, normalize
from rulebook.i18n.messages import ConstraintViolationMessage, map_to_message, to_message

__all__ = [
    "MessageBundle", "clear_bundle_cache", "fallback_chain", "load_bundle", "resolve",
    "Formatter", "FormatterRegistry", "default_formatters",
    "interpolate", "render",
    "babel_locale", "candidates", "normalize",
    "ConstraintViolationMessage", "map_to_message", "to_message",
]
