"""Placeholder interpolation for message templates.

"Must be between {start} and {end}" + {"start": 1, "end": 10}
    -> "Must be between 1 and 10"

Params render through the bundle's formatter registry, so numbers, dates and
collections come out localized. A placeholder without a matching param stays
in the output verbatim ("{name}") and is logged; None renders as "".
"""
from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

from rulebook.core.logging import i18n_logger
from rulebook.i18n.bundles import MessageBundle

PLACEHOLDER_PATTERN = re.compile(r'\{(\w+)\}')

log = i18n_logger()


def interpolate(template: str, params: Mapping[str, Any], bundle: MessageBundle) -> str:
    """Substitute every {name} placeholder in a template."""
    if "{" not in template:
        return template

    def _replace(match: re.Match[str]) -> str:
        name = match.group(1)
        if name not in params:
            log.warning("unresolved_placeholder", placeholder=name, template=template)
            return match.group(0)
        return bundle.format(params[name])

    return PLACEHOLDER_PATTERN.sub(_replace, template)


def render(bundle: MessageBundle, key: str, params: Mapping[str, Any]) -> str:
    """Resolve a key in the bundle and interpolate its template."""
    return interpolate(bundle.get_message(key), params, bundle)
