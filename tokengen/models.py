"""Core data models shared across tokengen components."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple

TOKEN_TYPES = ("color", "dimension", "typography", "boxShadow", "text")


@dataclass
class Token:
    """Resolved design token handed to output formats."""

    type: str
    value: Any
    path: List[str]
    name: str = ""
    description: Optional[str] = None
    category: Optional[str] = None
    original_value: Any = None

    @property
    def kind(self) -> str:
        """Return the token type, folding unknown types into ``other``."""
        return self.type if self.type in TOKEN_TYPES else "other"


@dataclass(frozen=True)
class ShadowLayer:
    """Single layer of a ``boxShadow`` token value."""

    color: str = "#00000000"
    x: Any = 0
    y: Any = 0
    blur: Any = 0
    spread: Any = 0

    @classmethod
    def from_raw(cls, raw: object) -> "ShadowLayer":
        """Map a raw ``custom-shadow`` payload onto a layer."""
        safe = raw if isinstance(raw, Mapping) else {}
        return cls(
            color=safe.get("color") or "#00000000",
            x=safe.get("offsetX") or 0,
            y=safe.get("offsetY") or 0,
            blur=safe.get("radius") or 0,
            spread=safe.get("spread") or 0,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "color": self.color,
            "x": self.x,
            "y": self.y,
            "blur": self.blur,
            "spread": self.spread,
        }


@dataclass(frozen=True)
class TypographyValue:
    """Fields read from a ``typography`` token value."""

    font_family: Any = ""
    font_weight: Any = None
    font_size: Any = None
    line_height: Any = None
    letter_spacing: Any = None

    @classmethod
    def from_value(cls, value: object) -> "TypographyValue":
        safe = value if isinstance(value, Mapping) else {}
        return cls(
            font_family=safe.get("fontFamily") or "",
            font_weight=safe.get("fontWeight"),
            font_size=safe.get("fontSize"),
            line_height=safe.get("lineHeight"),
            letter_spacing=safe.get("letterSpacing"),
        )


@dataclass(frozen=True)
class Group:
    """Derived partition key over token paths."""

    segments: Tuple[str, ...]

    @property
    def key(self) -> str:
        return "/".join(self.segments)


@dataclass(frozen=True)
class EmissionUnit:
    """One output file worth of tokens plus its output identity."""

    package_name: str
    class_name: str
    destination: str
    tokens: Tuple[Token, ...] = ()
    group: Optional[Group] = None

    @property
    def group_path(self) -> Optional[str]:
        return self.group.key if self.group is not None else None


@dataclass
class BuildResult:
    """Outcome of a build pipeline run."""

    units: List[EmissionUnit]
    files: List[Path] = field(default_factory=list)
    document: Optional[Dict[str, Any]] = None
