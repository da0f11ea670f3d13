from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Callable, Dict

import pytest


@pytest.fixture
def raw_document() -> Dict[str, Any]:
    """A small V2 export covering every token family the pipeline knows."""
    return {
        "$metadata": {"tokenSetOrder": ["Color", "font", "typography"]},
        "Color": {
            "Primary": {
                "500": {"type": "color", "value": "#FF5733"},
                "600": {"type": "color", "value": "rgba(200, 40, 20, 0.5)"},
            },
            "Neutral": {
                "0": {"type": "color", "value": "#FFFFFF"},
                "alias": {"type": "color", "value": "{Color.Primary.500}"},
            },
        },
        "spacing": {
            "sm": {"type": "dimension", "value": "8"},
            "lg": {"type": "dimension", "value": 24},
        },
        "elevation": {
            "card": {
                "description": "Card elevation",
                "1": {
                    "type": "custom-shadow",
                    "value": {"offsetX": 0, "offsetY": 2, "radius": 4, "spread": 0, "color": "#000000"},
                },
                "2": {
                    "type": "custom-shadow",
                    "value": {"offsetX": 0, "offsetY": 8, "radius": 16, "spread": -2, "color": "#0000001F"},
                },
            }
        },
        "font": {
            "heading": {
                "h1": {
                    "type": "custom-fontStyle",
                    "value": {
                        "fontFamily": "Inter",
                        "fontWeight": 700,
                        "fontSize": 32,
                        "lineHeight": 40,
                        "letterSpacing": 0,
                    },
                }
            }
        },
        "typography": {
            "body": {
                "type": "typography",
                "value": {"fontFamily": "Inter", "fontSize": 16},
            }
        },
    }


@pytest.fixture
def write_document(tmp_path: Path) -> Callable[[Any, str], Path]:
    """Write a token document below ``tmp_path`` and return its path."""

    def _write(document: Any, relative: str = "tokens/design-tokens.tokens-2.json") -> Path:
        path = tmp_path / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(document, str):
            path.write_text(document, encoding="utf-8")
        else:
            path.write_text(json.dumps(document), encoding="utf-8")
        return path

    return _write
