"""Flattening of the canonical tree into resolved tokens."""

from __future__ import annotations

import re
from typing import Any, Dict, List, Mapping, Optional, Sequence

from ..logging import get_logger
from ..models import Token
from .segments import is_token_node, split_words

logger = get_logger("resolver")

_REFERENCE = re.compile(r"^\{([^{}]+)\}$")


class TokenResolver:
    """Collects token nodes and resolves ``{alias.path}`` references."""

    def __init__(self, document: Optional[Mapping[str, Any]]) -> None:
        self._document = document or {}
        self._nodes: Dict[str, Mapping[str, Any]] = {}
        self._ordered: List[tuple[List[str], Mapping[str, Any]]] = []
        for key, child in self._document.items():
            if str(key).startswith("$"):
                continue
            self._collect(child, [str(key)])

    def tokens(self) -> List[Token]:
        resolved: List[Token] = []
        for path, node in self._ordered:
            value = self._resolve(node.get("value"), [".".join(path)])
            resolved.append(
                Token(
                    type=str(node.get("type")),
                    value=value,
                    path=list(path),
                    name=camel_name(path),
                    description=node.get("description") or None,
                    category=node.get("category") or path[0],
                    original_value=node.get("value"),
                )
            )
        return resolved

    def _collect(self, node: Any, path: List[str]) -> None:
        if is_token_node(node):
            self._nodes[".".join(path)] = node
            self._ordered.append((path, node))
            return
        if isinstance(node, Mapping):
            for key, child in node.items():
                self._collect(child, path + [str(key)])

    def _resolve(self, value: Any, stack: List[str]) -> Any:
        if isinstance(value, str):
            match = _REFERENCE.match(value.strip())
            if not match:
                return value
            reference = match.group(1).strip()
            target = self._nodes.get(reference)
            if target is None:
                logger.debug("Unresolved reference %s in %s", value, stack[0])
                return value
            if reference in stack:
                logger.debug("Circular reference %s in %s", value, stack[0])
                return value
            return self._resolve(target.get("value"), stack + [reference])
        if isinstance(value, Mapping):
            return {key: self._resolve(child, stack) for key, child in value.items()}
        if isinstance(value, list):
            return [self._resolve(item, stack) for item in value]
        return value


def flatten_tokens(document: Optional[Mapping[str, Any]]) -> List[Token]:
    """Return every token of ``document`` in document order with aliases resolved."""
    return TokenResolver(document).tokens()


def camel_name(path: Sequence[str]) -> str:
    words = [word for segment in path for word in split_words(segment)]
    if not words:
        return ""
    head, *rest = words
    return head.lower() + "".join(word[:1].upper() + word[1:].lower() for word in rest)


__all__ = ["TokenResolver", "camel_name", "flatten_tokens"]
