"""Jetpack Compose (Kotlin) output format."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional

from jinja2 import Environment, FileSystemLoader

from ..models import EmissionUnit
from ..tokens.grouping import SegmentCache
from ..tokens.naming import NameRegistry
from .base import TokenFormat
from .values import render_value, typography_fields

COLOR_IMPORT = "androidx.compose.ui.graphics.Color"
DP_IMPORT = "androidx.compose.ui.unit.dp"
TYPOGRAPHY_IMPORTS = (
    "androidx.compose.ui.text.font.FontWeight",
    "androidx.compose.ui.unit.TextUnit",
    "androidx.compose.ui.unit.sp",
    "androidx.compose.ui.unit.em",
)

TEMPLATE_NAME = "compose.kt.j2"


@dataclass
class Declaration:
    """One ``val`` inside the generated object."""

    name: str
    value: str
    fields: Optional[Dict[str, str]] = None


class ComposeFormat(TokenFormat):
    """Renders an emission unit as a Kotlin object of Compose values."""

    name = "android/compose"
    build_subdir = "android-compose"

    def __init__(self, templates_dir: Path | None = None) -> None:
        self.templates_dir = templates_dir
        self._env = self._create_env(templates_dir)

    def render(self, unit: EmissionUnit, cache: SegmentCache | None = None) -> str:
        if cache is None:
            cache = SegmentCache()
        kinds = {token.kind for token in unit.tokens}
        template = self._env.get_template(TEMPLATE_NAME)
        return template.render(
            group_path=unit.group_path,
            package_name=unit.package_name,
            class_name=unit.class_name,
            imports=self.collect_imports(kinds),
            has_box_shadow="boxShadow" in kinds,
            has_typography="typography" in kinds,
            declarations=self.build_declarations(unit, cache),
        )

    @staticmethod
    def collect_imports(kinds: set[str]) -> List[str]:
        imports: set[str] = set()
        if "color" in kinds or "boxShadow" in kinds:
            imports.add(COLOR_IMPORT)
        if "dimension" in kinds:
            imports.add(DP_IMPORT)
        if "typography" in kinds:
            imports.update(TYPOGRAPHY_IMPORTS)
        return sorted(imports)

    @staticmethod
    def build_declarations(unit: EmissionUnit, cache: SegmentCache) -> List[Declaration]:
        registry = NameRegistry()
        ordered = sorted(unit.tokens, key=lambda token: "/".join(cache.get(token)))
        declarations: List[Declaration] = []
        for token in ordered:
            name = registry.resolve(cache.get(token), token.name or None)
            if token.kind == "typography":
                declarations.append(
                    Declaration(name=name, value="", fields=typography_fields(token.value))
                )
            else:
                declarations.append(Declaration(name=name, value=render_value(token)))
        return declarations

    @staticmethod
    def _create_env(templates_dir: Path | None) -> Environment:
        directories = []
        if templates_dir:
            directories.append(str(templates_dir))
        directories.append(str(Path(__file__).with_name("templates")))
        loader = FileSystemLoader(directories)
        return Environment(
            loader=loader,
            autoescape=False,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
        )


__all__ = ["ComposeFormat", "Declaration"]
