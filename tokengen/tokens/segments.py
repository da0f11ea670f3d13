"""Token node discrimination and path-segment helpers."""

from __future__ import annotations

import re
from typing import Any, Iterable, List, Mapping

_WORD_SPLIT = re.compile(r"[^a-zA-Z0-9]+")


def is_token_node(value: Any) -> bool:
    """Return True when ``value`` is a token node (carries ``type`` and ``value``)."""
    return isinstance(value, Mapping) and "type" in value and "value" in value


def is_group_node(value: Any) -> bool:
    """Return True for mappings that are not token nodes."""
    return isinstance(value, Mapping) and not is_token_node(value)


def split_path_segment(value: object) -> List[str]:
    """Split a raw path segment on ``/``, trimming and dropping empty parts."""
    return [part.strip() for part in str(value).split("/") if part.strip()]


def split_path(path: Iterable[object]) -> List[str]:
    segments: List[str] = []
    for segment in path:
        segments.extend(split_path_segment(segment))
    return segments


def split_words(value: object) -> List[str]:
    """Split a segment into alphanumeric words, keeping ``iOS`` together."""
    text = str(value).replace("iOS", "IOS")
    return [word for word in _WORD_SPLIT.split(text) if word]


__all__ = [
    "is_group_node",
    "is_token_node",
    "split_path",
    "split_path_segment",
    "split_words",
]
