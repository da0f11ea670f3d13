"""Canonicalization of raw (V2) design-token documents.

The raw export carries tool specific token types. Normalization folds them
into the shapes the rest of the pipeline understands:

- a group made only of ``custom-shadow`` tokens becomes one ``boxShadow`` token
  whose value lists the layers in author order;
- ``custom-fontStyle`` tokens become ``typography`` tokens;
- standalone ``custom-shadow`` tokens become single layer ``boxShadow`` tokens;
- the top-level ``typography`` group is dropped when ``font`` already carries
  ``custom-fontStyle`` tokens.

The input tree is never mutated; every call returns a new tree.
"""

from __future__ import annotations

import json
import re
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple

from ..logging import get_logger
from ..models import ShadowLayer
from .segments import is_token_node

logger = get_logger("normalizer")

CUSTOM_FONT_STYLE = "custom-fontStyle"
CUSTOM_SHADOW = "custom-shadow"

_INTEGER_KEY = re.compile(r"[+-]?[0-9]+")


def load_document(path: Path) -> Optional[Dict[str, Any]]:
    """Read a JSON token document, returning None when missing or malformed."""
    if not path.exists():
        logger.warning("Token source not found: %s", path)
        return None
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
        logger.warning("Token source %s could not be parsed: %s", path, exc)
        return None
    if not isinstance(data, dict):
        logger.warning("Token source %s does not contain a mapping", path)
        return None
    return data


def normalize_document(raw: Any) -> Optional[Dict[str, Any]]:
    """Return the canonical form of ``raw`` or None when it is not a mapping."""
    if not isinstance(raw, Mapping):
        return None

    drop_typography = (
        "font" in raw and "typography" in raw and has_custom_font_style(raw["font"])
    )
    normalized: Dict[str, Any] = {}
    for key, child in raw.items():
        if drop_typography and key == "typography":
            logger.debug("Dropping top-level typography group in favour of font styles")
            continue
        normalized[key] = _transform(child)
    return normalized


def has_custom_font_style(tree: Any) -> bool:
    """Return True when any token below ``tree`` has type ``custom-fontStyle``."""
    if is_token_node(tree):
        return tree["type"] == CUSTOM_FONT_STYLE
    if isinstance(tree, Mapping):
        return any(has_custom_font_style(child) for child in tree.values())
    if isinstance(tree, list):
        return any(has_custom_font_style(child) for child in tree)
    return False


def is_shadow_group(node: Any) -> bool:
    """Return True when every non-description entry is a ``custom-shadow`` token."""
    if not isinstance(node, Mapping) or is_token_node(node):
        return False
    entries = [value for key, value in node.items() if key != "description"]
    if not entries:
        return False
    return all(is_token_node(value) and value["type"] == CUSTOM_SHADOW for value in entries)


def fold_shadow_group(node: Mapping[str, Any]) -> Dict[str, Any]:
    """Collapse a shadow group into a single ``boxShadow`` token."""
    entries = [(key, value) for key, value in node.items() if key != "description"]
    layers = [
        ShadowLayer.from_raw(value.get("value")).to_dict()
        for _, value in _sort_layer_entries(entries)
    ]
    token: Dict[str, Any] = {"type": "boxShadow", "value": layers}
    description = node.get("description")
    if description:
        token["description"] = description
    return token


def _sort_layer_entries(entries: List[Tuple[str, Any]]) -> List[Tuple[str, Any]]:
    numeric_keys = [_as_int(key) for key, _ in entries]
    if all(key is not None for key in numeric_keys):
        order = sorted(range(len(entries)), key=lambda index: numeric_keys[index])
        return [entries[index] for index in order]
    return sorted(entries, key=lambda entry: entry[0])


def _as_int(value: str) -> Optional[int]:
    text = value.strip()
    if not _INTEGER_KEY.fullmatch(text):
        return None
    return int(text)


def _transform(node: Any) -> Any:
    if isinstance(node, list):
        return [_transform(item) for item in node]
    if is_token_node(node):
        return _transform_token(node)
    if is_shadow_group(node):
        return fold_shadow_group(node)
    if isinstance(node, Mapping):
        return {key: _transform(child) for key, child in node.items()}
    return node


def _transform_token(node: Mapping[str, Any]) -> Dict[str, Any]:
    token = dict(node)
    if token["type"] == CUSTOM_FONT_STYLE:
        token["type"] = "typography"
    elif token["type"] == CUSTOM_SHADOW:
        token["type"] = "boxShadow"
        token["value"] = [ShadowLayer.from_raw(node["value"]).to_dict()]
    return token


__all__ = [
    "fold_shadow_group",
    "has_custom_font_style",
    "is_shadow_group",
    "load_document",
    "normalize_document",
]
