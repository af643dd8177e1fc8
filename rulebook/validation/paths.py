"""Property paths ("company.address.city", "dependents[2].name")."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class PropertyPath:
    """Immutable path from the validated root to a value.

    Segments are stored already rendered: names as-is, indices and mapping
    keys as "[i]" / "[key]".
    """
    segments: tuple[str, ...] = ()

    @classmethod
    def root(cls) -> PropertyPath: return _ROOT

    def child(self, name: str) -> PropertyPath:
        return self if not name else PropertyPath(self.segments + (name,))

    def index(self, i: int) -> PropertyPath: return PropertyPath(self.segments + (f"[{i}]",))

    def key(self, k: Any) -> PropertyPath: return PropertyPath(self.segments + (f"[{k}]",))

    @property
    def is_root(self) -> bool: return not self.segments

    def __str__(self) -> str:
        parts: list[str] = []
        for segment in self.segments:
            if segment.startswith("[") or not parts:
                parts.append(segment)
            else:
                parts.append(f".{segment}")
        return "".join(parts)


_ROOT = PropertyPath()
