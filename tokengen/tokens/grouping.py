"""Group-key derivation over token paths."""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from ..models import Group, Token
from .segments import is_token_node, split_path, split_path_segment


class SegmentCache:
    """Per-build memo of the full path segments of each token."""

    def __init__(self) -> None:
        self._entries: Dict[Tuple[Tuple[str, ...], str], List[str]] = {}

    def get(self, token: Token) -> List[str]:
        key = (tuple(str(segment) for segment in token.path), token.name)
        segments = self._entries.get(key)
        if segments is None:
            segments = token_segments(token)
            self._entries[key] = segments
        return segments

    def __len__(self) -> int:
        return len(self._entries)


def token_segments(token: Token) -> List[str]:
    """Return the full segment list of a token, falling back to its name."""
    if not token.path:
        return split_path_segment(token.name) if token.name else []
    return split_path(token.path)


def group_segments(segments: Sequence[str], depth: Optional[int] = None) -> List[str]:
    """Drop the leaf segment and truncate to ``depth`` leading segments."""
    if len(segments) < 2:
        return []
    parents = list(segments[:-1])
    if not depth or depth <= 0:
        return parents
    return parents[: min(depth, len(parents))]


def selected_sets(document: Optional[Mapping[str, Any]]) -> List[str]:
    """Top-level sets eligible for grouping; ``$`` keys hold tool metadata."""
    if not document:
        return []
    return [key for key in document if not key.startswith("$")]


def compute_groups(
    document: Mapping[str, Any],
    sets: Iterable[str],
    depth: Optional[int] = None,
) -> List[Group]:
    """Return the sorted, de-duplicated groups found under the selected sets."""
    groups: Dict[str, Group] = {}

    def walk(node: Any, path: List[str]) -> None:
        if is_token_node(node):
            segments = group_segments(split_path(path), depth)
            if not segments:
                return
            group = Group(segments=tuple(segments))
            groups.setdefault(group.key, group)
            return
        if isinstance(node, Mapping):
            for key, child in node.items():
                walk(child, path + [key])

    for set_name in sets:
        if set_name in document:
            walk(document[set_name], [set_name])

    return sorted(groups.values(), key=lambda group: group.key)


def token_filter(group: Group, depth: Optional[int], cache: SegmentCache):
    """Return a predicate accepting tokens whose group path equals ``group``."""

    def accept(token: Token) -> bool:
        segments = group_segments(cache.get(token), depth)
        if not segments:
            return False
        return "/".join(segments) == group.key

    return accept


__all__ = [
    "SegmentCache",
    "compute_groups",
    "group_segments",
    "selected_sets",
    "token_filter",
    "token_segments",
]
