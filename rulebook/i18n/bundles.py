"""Message Bundles and Locale Fallback

A bundle base name points at a family of YAML files, one per locale:

    messages.yaml          root (locale-neutral default)
    messages_en.yaml
    messages_pt_BR.yaml

Base names are either "<package>:<relative/stem>" for files shipped inside
a package, or a filesystem stem searched as given and then under each
directory of Settings.BUNDLE_PATHS. Files hold flat "key: template" pairs;
nested mappings are flattened with dots. Blank templates count as missing.

Resolution (first match wins):
1. base bundle over the requested locale's candidates, root included
2. fallback bundle over the requested locale's candidates, root excluded
3. fallback bundle over the fallback locale's candidates, root included
4. the built-in bundle's root file

A key missing everywhere is logged and resolves to the key itself, or raises
MessageNotFoundError when Settings.STRICT_MESSAGES is set.
"""
from __future__ import annotations

import importlib.util
from collections.abc import Mapping
from functools import lru_cache
from importlib import resources
from pathlib import Path
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

import yaml

from rulebook.core.config import DEFAULT_BUNDLE, get_settings
from rulebook.core.errors import BundleFormatError, MessageNotFoundError
from rulebook.core.logging import i18n_logger
from rulebook.i18n.locales import ROOT, LocaleLike, babel_locale, candidates, normalize

if TYPE_CHECKING:
    from babel import Locale

    from rulebook.i18n.formatters import FormatterRegistry

log = i18n_logger()

BUNDLE_SUFFIX = ".yaml"


# === Loading ===

def _filename(stem: str, tag: str) -> str:
    return f"{stem}_{tag}{BUNDLE_SUFFIX}" if tag else f"{stem}{BUNDLE_SUFFIX}"


def _package_source(base_name: str) -> tuple[str, str] | None:
    package, sep, relative = base_name.partition(":")
    if not sep or not relative or not all(part.isidentifier() for part in package.split(".")):
        return None
    try:
        found = importlib.util.find_spec(package) is not None
    except (ImportError, ValueError):
        found = False
    return (package, relative) if found else None


def _read_package(package: str, relative: str, tag: str) -> str | None:
    *dirs, stem = relative.split("/")
    resource = resources.files(package)
    for part in dirs:
        resource = resource / part
    resource = resource / _filename(stem, tag)
    return resource.read_text(encoding="utf-8") if resource.is_file() else None


def _read_path(base_name: str, tag: str, search_paths: tuple[str, ...]) -> str | None:
    base = Path(base_name)
    name = _filename(base.name, tag)
    roots = [base.parent] if base.is_absolute() else [base.parent, *(Path(p) / base.parent for p in search_paths)]
    for root in roots:
        path = root / name
        if path.is_file():
            return path.read_text(encoding="utf-8")
    return None


def _flatten(data: Mapping[Any, Any], prefix: str = "") -> dict[str, str]:
    flat: dict[str, str] = {}
    for key, value in data.items():
        name = f"{prefix}.{key}" if prefix else str(key)
        if isinstance(value, Mapping):
            flat.update(_flatten(value, name))
        elif value is not None:
            flat[name] = str(value)
    return flat


@lru_cache(maxsize=512)
def load_bundle(base_name: str, tag: str, search_paths: tuple[str, ...] = ()) -> Mapping[str, str]:
    """Read one bundle file. A missing file is an empty bundle."""
    source = _package_source(base_name)
    text = _read_package(*source, tag) if source else _read_path(base_name, tag, search_paths)
    if text is None:
        return MappingProxyType({})
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise BundleFormatError(f"Bundle {base_name!r} ({tag or 'root'}) is not valid YAML",
            base_name=base_name, locale=tag) from exc
    if data is None:
        data = {}
    if not isinstance(data, Mapping):
        raise BundleFormatError(f"Bundle {base_name!r} ({tag or 'root'}) must be a mapping",
            base_name=base_name, locale=tag)
    messages = _flatten(data)
    log.debug("bundle_loaded", base_name=base_name, locale=tag or "root", keys=len(messages))
    return MappingProxyType(messages)


# === Resolution ===

def fallback_chain(base_name: str, locale: LocaleLike, fallback_base_name: str,
                   fallback_locale: LocaleLike) -> list[tuple[str, str]]:
    """(base name, locale tag) pairs in lookup order, duplicates removed."""
    requested = candidates(locale)
    chain = [(base_name, tag) for tag in requested]
    chain += [(fallback_base_name, tag) for tag in requested if tag != ROOT]
    chain += [(fallback_base_name, tag) for tag in candidates(fallback_locale)]
    chain.append((DEFAULT_BUNDLE, ROOT))
    return list(dict.fromkeys(chain))


@lru_cache(maxsize=256)
def _merged(base_name: str, locale: str, fallback_base_name: str, fallback_locale: str,
            search_paths: tuple[str, ...]) -> Mapping[str, str]:
    merged: dict[str, str] = {}
    # Least specific first so that earlier chain entries overwrite later ones
    for name, tag in reversed(fallback_chain(base_name, locale, fallback_base_name, fallback_locale)):
        merged.update((k, v) for k, v in load_bundle(name, tag, search_paths).items() if v.strip())
    return MappingProxyType(merged)


def clear_bundle_cache() -> None:
    """Forget loaded bundle files (after editing them at runtime)."""
    load_bundle.cache_clear()
    _merged.cache_clear()


class MessageBundle:
    """Resource namespace plus requested/fallback locale pair for one render.

    Args:
        base_name: Bundle to consult first. Defaults to the built-in bundle.
        locale: Requested locale. Defaults to Settings.DEFAULT_LOCALE.
        fallback_base_name: Bundle consulted next. Defaults to base_name.
        fallback_locale: Locale tried after the requested one.
            Defaults to Settings.DEFAULT_LOCALE.
        formatters: Registry used to render params. Defaults to the
            process-wide registry.
    """
    __slots__ = ("base_name", "locale", "fallback_base_name", "fallback_locale", "_formatters", "_messages")

    def __init__(self, base_name: str | None = None, locale: LocaleLike = None,
                 fallback_base_name: str | None = None, fallback_locale: LocaleLike = None,
                 formatters: FormatterRegistry | None = None):
        settings = get_settings()
        self.base_name = base_name or DEFAULT_BUNDLE
        self.locale = normalize(settings.DEFAULT_LOCALE if locale is None else locale)
        self.fallback_base_name = fallback_base_name or self.base_name
        self.fallback_locale = normalize(settings.DEFAULT_LOCALE if fallback_locale is None else fallback_locale)
        self._formatters = formatters
        self._messages = _merged(self.base_name, self.locale, self.fallback_base_name, self.fallback_locale,
            tuple(settings.BUNDLE_PATHS))

    @property
    def messages(self) -> Mapping[str, str]:
        """Every key visible through the fallback chain."""
        return self._messages

    @property
    def formatters(self) -> FormatterRegistry:
        if self._formatters is None:
            from rulebook.i18n.formatters import default_formatters
            return default_formatters
        return self._formatters

    @property
    def babel_locale(self) -> Locale:
        """Locale used by formatters."""
        return babel_locale(self.locale or self.fallback_locale)

    def get_message(self, key: str) -> str:
        template = self._messages.get(key)
        if template is not None:
            return template
        if get_settings().STRICT_MESSAGES:
            raise MessageNotFoundError(f"No message for {key!r}", key=key, base_name=self.base_name,
                locale=self.locale)
        log.warning("message_not_found", key=key, base_name=self.base_name, locale=self.locale or "root")
        return key

    def format(self, value: Any) -> str:
        """Render a value through this bundle's formatter registry."""
        return self.formatters.format(value, self)

    def __repr__(self) -> str:
        return (f"MessageBundle({self.base_name!r}, {self.locale!r}, {self.fallback_base_name!r}, "
            f"{self.fallback_locale!r})")


def resolve(base_name: str | None, key: str, locale: LocaleLike = None,
            fallback_base_name: str | None = None, fallback_locale: LocaleLike = None) -> str:
    """Best matching template for a key."""
    return MessageBundle(base_name, locale, fallback_base_name, fallback_locale).get_message(key)
