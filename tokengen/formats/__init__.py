"""Output format implementations and discovery utilities."""

from __future__ import annotations

from importlib import metadata
from pathlib import Path
from typing import Callable, Iterable, List, Sequence, Set

from .base import TokenFormat
from .compose import ComposeFormat

_ENTRY_POINT_GROUP = "tokengen.formats"


def discover_formats(
    enabled: Sequence[str] | None = None,
    *,
    templates_dir: Path | None = None,
) -> List[TokenFormat]:
    """Return instantiated formats, honoring optional enabled names."""

    builtin_factories: dict[str, Callable[[], TokenFormat]] = {
        ComposeFormat.name: lambda: ComposeFormat(templates_dir=templates_dir),
    }

    enabled_set: Set[str] | None = None
    if enabled is not None:
        enabled_set = {name.lower() for name in enabled}

    formats: List[TokenFormat] = []
    seen: Set[str] = set()

    def _add(name: str, factory: Callable[[], TokenFormat]) -> None:
        key = name.lower()
        if enabled_set is not None and key not in enabled_set:
            return
        if key in seen:
            return
        instance = factory()
        if not isinstance(instance, TokenFormat):
            raise TypeError(f"Format factory for '{name}' did not return a TokenFormat instance")
        formats.append(instance)
        seen.add(key)
        if enabled_set is not None:
            enabled_set.discard(key)

    for name, factory in builtin_factories.items():
        _add(name, factory)

    for entry in _iter_entry_points():
        name = entry.name
        try:
            loaded = entry.load()
        except Exception as exc:  # pragma: no cover
            raise RuntimeError(f"Failed to load format entry point '{name}': {exc}") from exc

        def _factory(obj: object = loaded) -> TokenFormat:
            return _coerce_format(obj)

        _add(name, _factory)

    if enabled_set:
        missing = ", ".join(sorted(enabled_set))
        raise ValueError(f"Unknown formats requested: {missing}")

    return formats


def _coerce_format(obj: object) -> TokenFormat:
    if isinstance(obj, TokenFormat):
        return obj
    if isinstance(obj, type) and issubclass(obj, TokenFormat):
        return obj()
    if callable(obj):
        instance = obj()
        if isinstance(instance, TokenFormat):
            return instance
    raise TypeError("Format entry point must be a TokenFormat subclass or factory")


def _iter_entry_points() -> Iterable[metadata.EntryPoint]:
    try:
        entry_points = metadata.entry_points()
    except Exception:  # pragma: no cover
        return []

    if hasattr(entry_points, "select"):
        return entry_points.select(group=_ENTRY_POINT_GROUP)  # type: ignore[return-value]

    return entry_points.get(_ENTRY_POINT_GROUP, [])  # type: ignore[return-value]


__all__ = [
    "ComposeFormat",
    "TokenFormat",
    "discover_formats",
]
