"""Locale tags and candidate chains.

Locales are handled as canonical tags ("pt_BR", "zh_Hant_TW", "" for root)
so that unknown-but-wellformed locales still take part in bundle lookup.
Babel Locale objects are only built for formatting.
"""
from __future__ import annotations

from functools import lru_cache

from babel import Locale, UnknownLocaleError
from babel.core import parse_locale

from rulebook.core.logging import i18n_logger

ROOT = ""
FORMAT_FALLBACK = "en"

log = i18n_logger()

LocaleLike = str | Locale | None


def _parts(locale: LocaleLike) -> tuple[str, str | None, str | None, str | None]:
    """(language, territory, script, variant) of a locale, root on bad input."""
    if locale is None:
        return ROOT, None, None, None
    if isinstance(locale, Locale):
        return locale.language, locale.territory, locale.script, locale.variant
    tag = locale.strip().replace("-", "_")
    if not tag or tag.lower() == "root":
        return ROOT, None, None, None
    try:
        lang, territory, script, variant = parse_locale(tag)[:4]
    except ValueError:
        log.warning("invalid_locale", locale=locale)
        return ROOT, None, None, None
    return lang, territory, script, variant


def _join(*parts: str | None) -> str:
    return "_".join(p for p in parts if p)


def normalize(locale: LocaleLike) -> str:
    """Canonical tag: "pt-br" -> "pt_BR", None -> "" (root)."""
    lang, territory, script, variant = _parts(locale)
    return _join(lang, script, territory, variant)


@lru_cache(maxsize=256)
def _candidates(tag: str) -> tuple[str, ...]:
    lang, territory, script, variant = _parts(tag)
    if not lang:
        return (ROOT,)
    chain = []
    if script:
        chain += [_join(lang, script, territory, variant), _join(lang, script, territory), _join(lang, script)]
    chain += [_join(lang, territory, variant), _join(lang, territory), lang, ROOT]
    return tuple(dict.fromkeys(chain))


def candidates(locale: LocaleLike) -> list[str]:
    """Tags from most to least specific, ending with root.

    >>> candidates("pt_BR")
    ['pt_BR', 'pt', '']
    >>> candidates("zh_Hant_TW")
    ['zh_Hant_TW', 'zh_Hant', 'zh_TW', 'zh', '']
    """
    return list(_candidates(normalize(locale)))


@lru_cache(maxsize=64)
def _babel_locale(tag: str) -> Locale:
    for candidate in _candidates(tag):
        if not candidate:
            break
        try:
            return Locale.parse(candidate)
        except (UnknownLocaleError, ValueError):
            continue
    return Locale.parse(FORMAT_FALLBACK)


def babel_locale(locale: LocaleLike) -> Locale:
    """Closest Babel locale for formatting; root and unknown tags format as English."""
    if isinstance(locale, Locale):
        return locale
    return _babel_locale(normalize(locale))
