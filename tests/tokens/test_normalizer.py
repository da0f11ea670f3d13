"""Tests for tokengen.tokens.normalizer."""

from __future__ import annotations

import copy
from pathlib import Path

from tokengen.tokens.normalizer import (
    has_custom_font_style,
    is_shadow_group,
    load_document,
    normalize_document,
)


def _shadow(offset_y: int, color: str = "#000000") -> dict:
    return {
        "type": "custom-shadow",
        "value": {"offsetX": 0, "offsetY": offset_y, "radius": 4, "spread": 0, "color": color},
    }


def test_shadow_group_folds_into_ordered_box_shadow() -> None:
    raw = {"elevation": {"raised": {"1": _shadow(2), "2": _shadow(8)}}}

    normalized = normalize_document(raw)

    token = normalized["elevation"]["raised"]
    assert token["type"] == "boxShadow"
    assert [layer["y"] for layer in token["value"]] == [2, 8]
    assert token["value"][0] == {"color": "#000000", "x": 0, "y": 2, "blur": 4, "spread": 0}
    assert "description" not in token


def test_shadow_group_orders_numeric_keys_numerically() -> None:
    raw = {"shadow": {"10": _shadow(10), "2": _shadow(2), "1": _shadow(1)}}

    token = normalize_document(raw)["shadow"]

    assert [layer["y"] for layer in token["value"]] == [1, 2, 10]


def test_shadow_group_treats_non_ascii_integer_keys_as_names() -> None:
    underscored = {"shadow": {"1_0": _shadow(10), "9": _shadow(9)}}
    full_width = {"shadow": {"２": _shadow(2), "10": _shadow(10)}}

    assert [layer["y"] for layer in normalize_document(underscored)["shadow"]["value"]] == [10, 9]
    assert [layer["y"] for layer in normalize_document(full_width)["shadow"]["value"]] == [10, 2]


def test_shadow_group_orders_signed_keys_numerically() -> None:
    raw = {"shadow": {" 2": _shadow(2), "-1": _shadow(-1), "+10": _shadow(10)}}

    token = normalize_document(raw)["shadow"]

    assert [layer["y"] for layer in token["value"]] == [-1, 2, 10]


def test_shadow_group_orders_named_keys_lexicographically() -> None:
    raw = {"shadow": {"outer": _shadow(8), "inner": _shadow(1)}}

    token = normalize_document(raw)["shadow"]

    assert [layer["y"] for layer in token["value"]] == [1, 8]


def test_shadow_group_copies_non_empty_description() -> None:
    raw = {
        "with_description": {"description": "Card", "1": _shadow(2)},
        "empty_description": {"description": "", "1": _shadow(2)},
    }

    normalized = normalize_document(raw)

    assert normalized["with_description"]["description"] == "Card"
    assert "description" not in normalized["empty_description"]


def test_shadow_layer_defaults_missing_fields() -> None:
    raw = {"shadow": {"1": {"type": "custom-shadow", "value": {"offsetY": 3}}}}

    layer = normalize_document(raw)["shadow"]["value"][0]

    assert layer == {"color": "#00000000", "x": 0, "y": 3, "blur": 0, "spread": 0}


def test_standalone_custom_shadow_becomes_single_layer() -> None:
    raw = {
        "card": {
            "shadow": _shadow(4, "#111111"),
            "border": {"type": "color", "value": "#CCCCCC"},
        }
    }

    normalized = normalize_document(raw)

    shadow = normalized["card"]["shadow"]
    assert shadow["type"] == "boxShadow"
    assert shadow["value"] == [{"color": "#111111", "x": 0, "y": 4, "blur": 4, "spread": 0}]
    assert normalized["card"]["border"] == {"type": "color", "value": "#CCCCCC"}


def test_custom_font_style_is_retyped_to_typography() -> None:
    value = {"fontFamily": "Inter", "fontWeight": 600, "fontSize": 14}
    raw = {"font": {"label": {"type": "custom-fontStyle", "value": value}}}

    token = normalize_document(raw)["font"]["label"]

    assert token == {"type": "typography", "value": value}


def test_typography_group_dropped_when_font_has_custom_font_style() -> None:
    raw = {
        "font": {"group1": {"type": "custom-fontStyle", "value": {"fontFamily": "Inter"}}},
        "typography": {"body": {"type": "typography", "value": {"fontFamily": "Inter"}}},
    }

    normalized = normalize_document(raw)

    assert "typography" not in normalized
    assert normalized["font"]["group1"]["type"] == "typography"
    assert "typography" in raw


def test_typography_group_kept_without_custom_font_style() -> None:
    raw = {
        "font": {"family": {"type": "text", "value": "Inter"}},
        "typography": {"body": {"type": "typography", "value": {"fontFamily": "Inter"}}},
    }

    normalized = normalize_document(raw)

    assert normalized["typography"] == raw["typography"]


def test_normalize_is_idempotent_on_canonical_documents(raw_document: dict) -> None:
    canonical = normalize_document(raw_document)

    assert normalize_document(canonical) == canonical


def test_normalize_does_not_mutate_input(raw_document: dict) -> None:
    snapshot = copy.deepcopy(raw_document)

    normalize_document(raw_document)

    assert raw_document == snapshot


def test_normalize_rejects_non_mapping_documents() -> None:
    assert normalize_document(None) is None
    assert normalize_document(["not", "a", "mapping"]) is None


def test_is_shadow_group_requires_only_custom_shadow_entries() -> None:
    assert is_shadow_group({"description": "x", "1": _shadow(1)})
    assert not is_shadow_group({"description": "only a description"})
    assert not is_shadow_group({"1": _shadow(1), "2": {"type": "color", "value": "#000"}})
    assert not is_shadow_group(_shadow(1))


def test_has_custom_font_style_searches_nested_groups() -> None:
    assert has_custom_font_style({"a": {"b": {"type": "custom-fontStyle", "value": {}}}})
    assert not has_custom_font_style({"a": {"type": "typography", "value": {}}})


def test_load_document_returns_none_for_missing_or_malformed(tmp_path: Path, write_document) -> None:
    assert load_document(tmp_path / "missing.json") is None

    broken = write_document("{not json")
    assert load_document(broken) is None

    listing = write_document([1, 2, 3], "tokens/list.json")
    assert load_document(listing) is None


def test_load_document_reads_json_mapping(write_document, raw_document: dict) -> None:
    path = write_document(raw_document)

    assert load_document(path) == raw_document
