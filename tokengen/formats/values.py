"""Kotlin literal rendering for token values.

Every function here is pure and total: values that do not match a known
encoding fall back to a documented default instead of raising.
"""

from __future__ import annotations

import json
import math
import re
from typing import Any, Dict, Optional

from ..models import ShadowLayer, Token, TypographyValue

DEFAULT_COLOR = "Color(0xFF000000)"
DEFAULT_FONT_WEIGHT = 400

_NUMBER_PREFIX = re.compile(r"^\s*[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")
_HEX_COLOR = re.compile(r"^#?([0-9a-fA-F]{6}|[0-9a-fA-F]{8})$")
_RGB_COLOR = re.compile(r"^rgba?\(([^)]+)\)$", re.IGNORECASE)


def to_number(value: Any) -> Optional[float]:
    """Coerce numbers and numeric-prefixed strings (``"16px"``); else None."""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value) if math.isfinite(value) else None
    if isinstance(value, str):
        match = _NUMBER_PREFIX.match(value)
        if match:
            number = float(match.group(0))
            return number if math.isfinite(number) else None
    return None


def format_number(value: Optional[float]) -> str:
    if value is None:
        return "0"
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))


def format_unit(value: Any, unit: str) -> str:
    number = to_number(value)
    if number is None:
        return f"0.{unit}"
    text = format_number(number)
    return f"({text}).{unit}" if number < 0 else f"{text}.{unit}"


def format_float(value: Any) -> str:
    number = to_number(value)
    return f"{format_number(0 if number is None else number)}f"


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def to_argb_hex(value: Any) -> Optional[str]:
    """Return ``AARRGGBB`` for hex and ``rgb()``/``rgba()`` colors, else None."""
    if not isinstance(value, str):
        return None
    trimmed = value.strip()

    hex_match = _HEX_COLOR.match(trimmed)
    if hex_match:
        digits = hex_match.group(1).upper()
        if len(digits) == 6:
            return f"FF{digits}"
        return f"{digits[6:8]}{digits[0:6]}"

    rgb_match = _RGB_COLOR.match(trimmed)
    if not rgb_match:
        return None
    parts = [part.strip() for part in rgb_match.group(1).split(",")]
    if len(parts) < 3:
        return None
    channels = [to_number(part) for part in parts[:3]]
    alpha = to_number(parts[3]) if len(parts) == 4 else 1.0
    if alpha is None or any(channel is None for channel in channels):
        return None
    alpha = max(0.0, min(1.0, alpha))
    red, green, blue = (max(0, min(255, round_half_up(channel))) for channel in channels)
    return f"{round_half_up(alpha * 255):02X}{red:02X}{green:02X}{blue:02X}"


def format_color(value: Any) -> str:
    argb = to_argb_hex(value)
    return f"Color(0x{argb})" if argb else DEFAULT_COLOR


def escape_string(value: str) -> str:
    """Escape backslashes first so later escapes are not doubled."""
    return value.replace("\\", "\\\\").replace('"', '\\"').replace("\n", "\\n")


def format_string(value: Any) -> str:
    text = "" if value is None else _text(value)
    return f'"{escape_string(text)}"'


def _text(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        return format_number(value)
    if isinstance(value, (dict, list)):
        return json.dumps(value, separators=(",", ":"))
    return str(value)


def letter_spacing_unit(value: Any) -> str:
    number = to_number(value)
    return "em" if number is not None and abs(number) < 1 else "sp"


def typography_fields(value: Any) -> Dict[str, str]:
    """Render each ``TypographyToken`` argument as a Kotlin expression."""
    typography = TypographyValue.from_value(value)
    weight = to_number(typography.font_weight)
    return {
        "fontFamily": f'"{escape_string(_text(typography.font_family))}"',
        "fontWeight": f"FontWeight({DEFAULT_FONT_WEIGHT if weight is None else int(weight)})",
        "fontSize": format_unit(typography.font_size, "sp"),
        "lineHeight": format_unit(typography.line_height, "sp"),
        "letterSpacing": format_unit(
            typography.letter_spacing, letter_spacing_unit(typography.letter_spacing)
        ),
    }


def format_shadow_layer(layer: ShadowLayer) -> str:
    return (
        f"ShadowLayer(color = {format_color(layer.color)}, "
        f"x = {format_float(layer.x)}, y = {format_float(layer.y)}, "
        f"blur = {format_float(layer.blur)}, spread = {format_float(layer.spread)})"
    )


def format_box_shadow(value: Any) -> str:
    raw_layers = value if isinstance(value, list) else [value]
    layers = [
        format_shadow_layer(
            ShadowLayer(
                color=layer.get("color"),
                x=layer.get("x"),
                y=layer.get("y"),
                blur=layer.get("blur"),
                spread=layer.get("spread"),
            )
        )
        for layer in raw_layers
        if isinstance(layer, dict)
    ]
    return f"ElevationToken(layers = listOf({', '.join(layers)}))"


def render_value(token: Token) -> str:
    """Return the Kotlin expression for a single-line token declaration."""
    kind = token.kind
    if kind == "color":
        return format_color(token.value)
    if kind == "dimension":
        return format_unit(token.value, "dp")
    if kind == "boxShadow":
        return format_box_shadow(token.value)
    if kind == "typography":
        fields = typography_fields(token.value)
        return "TypographyToken(" + ", ".join(f"{key} = {text}" for key, text in fields.items()) + ")"
    return format_string(token.value)


__all__ = [
    "escape_string",
    "format_box_shadow",
    "format_color",
    "format_float",
    "format_number",
    "format_string",
    "format_unit",
    "letter_spacing_unit",
    "render_value",
    "to_argb_hex",
    "to_number",
    "typography_fields",
]
