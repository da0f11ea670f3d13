"""Declaration names for tokens within one emission unit."""

from __future__ import annotations

import re
from typing import Dict, Optional, Sequence

from .segments import split_words

_UPPER_WORD = re.compile(r"^[A-Z0-9]+$")
_UNSAFE = re.compile(r"[^a-zA-Z0-9_]")
_BASE36 = "0123456789abcdefghijklmnopqrstuvwxyz"


def camel_case(segment: object) -> str:
    """Camel-case the words of ``segment``; empty when it has none."""
    parts = []
    for index, word in enumerate(split_words(segment)):
        if _UPPER_WORD.match(word):
            parts.append(word.lower() if index == 0 else word)
        elif index == 0:
            parts.append(word.lower())
        else:
            lower = word.lower()
            parts.append(lower[:1].upper() + lower[1:])
    return "".join(parts)


def to_identifier(name: str, prefix: str = "token") -> str:
    safe = _UNSAFE.sub("_", name)
    if safe[:1].isdigit():
        return f"{prefix}{safe}"
    return safe


def value_name(segment: object, parent: Optional[object] = None) -> str:
    """Return the base declaration name for a leaf segment.

    Leaves that start with a digit (``500``) borrow their parent segment as a
    prefix (``primary500``) and fall back to ``token`` at the root.
    """
    name = camel_case(segment)
    if not name:
        return "value"
    prefix = "token"
    if parent is not None:
        parent_name = _UNSAFE.sub("_", camel_case(parent))
        if parent_name and not parent_name[:1].isdigit():
            prefix = parent_name
    return to_identifier(name, prefix)


def package_segment(value: object) -> str:
    """Lower-case a group segment into a package/directory name part."""
    return re.sub(r"[^a-z0-9]+", "_", str(value).lower()).strip("_")


def hash_string(value: str) -> str:
    """djb2 over UTF-16 code units, returned as unsigned 32-bit base 36."""
    encoded = value.encode("utf-16-le")
    digest = 5381
    for index in range(0, len(encoded), 2):
        unit = encoded[index] | (encoded[index + 1] << 8)
        digest = (digest * 33 + unit) & 0xFFFFFFFF
    return _to_base36(digest)


def _to_base36(number: int) -> str:
    if number == 0:
        return "0"
    digits = []
    while number:
        number, remainder = divmod(number, 36)
        digits.append(_BASE36[remainder])
    return "".join(reversed(digits))


class NameRegistry:
    """Tracks used base names and disambiguates repeats with a path hash.

    Two distinct paths sharing a base name could still hash to the same six
    character suffix; such collisions are not detected.
    """

    def __init__(self) -> None:
        self._counts: Dict[str, int] = {}

    def resolve(self, segments: Sequence[str], fallback_name: Optional[str] = None) -> str:
        if segments:
            leaf: object = segments[-1]
            parent: Optional[object] = segments[-2] if len(segments) > 1 else None
        else:
            leaf = fallback_name or "value"
            parent = None
        base = value_name(leaf, parent)
        count = self._counts.get(base, 0)
        self._counts[base] = count + 1
        if count == 0:
            return base
        return f"{base}_{hash_string('/'.join(segments))[:6]}"

    def count(self, base: str) -> int:
        return self._counts.get(base, 0)


__all__ = [
    "NameRegistry",
    "camel_case",
    "hash_string",
    "package_segment",
    "to_identifier",
    "value_name",
]
