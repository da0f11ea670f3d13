"""Build pipeline: load, normalize, plan emission units, render and write."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional

from .config import DEFAULT_CLASS_NAME, DEFAULT_PACKAGE, TokenGenConfig
from .formats import TokenFormat, discover_formats
from .logging import get_logger
from .models import BuildResult, EmissionUnit
from .tokens.grouping import SegmentCache, compute_groups, selected_sets, token_filter
from .tokens.naming import package_segment
from .tokens.normalizer import load_document, normalize_document
from .tokens.resolver import flatten_tokens


def plan_units(
    document: Optional[Mapping[str, Any]],
    *,
    depth: Optional[int] = None,
    package_name: str = DEFAULT_PACKAGE,
    class_name: str = DEFAULT_CLASS_NAME,
    file_name: str = "Tokens.kt",
    cache: SegmentCache | None = None,
) -> List[EmissionUnit]:
    """Partition the tokens of a canonical document into emission units.

    Without any group (no document, or only root-level tokens) a single
    fallback unit in the base package carries every resolved token.
    """
    if cache is None:
        cache = SegmentCache()
    tokens = flatten_tokens(document)
    groups = compute_groups(document or {}, selected_sets(document), depth)

    units: List[EmissionUnit] = []
    for group in groups:
        segments = [part for part in (package_segment(segment) for segment in group.segments) if part]
        accept = token_filter(group, depth, cache)
        units.append(
            EmissionUnit(
                package_name=".".join([package_name, *segments]),
                class_name=class_name,
                destination="/".join([*segments, file_name]),
                tokens=tuple(token for token in tokens if accept(token)),
                group=group,
            )
        )

    if not units:
        units.append(
            EmissionUnit(
                package_name=package_name,
                class_name=class_name,
                destination=file_name,
                tokens=tuple(tokens),
            )
        )
    return units


class BuildPipeline:
    """Runs a full token build for one configuration."""

    def __init__(
        self,
        config: TokenGenConfig,
        formats: Optional[Iterable[TokenFormat]] = None,
    ) -> None:
        self.config = config
        self._format_overrides = list(formats) if formats is not None else None
        self.logger = get_logger("pipeline")

    def run(self) -> BuildResult:
        config = self.config
        self.logger.info("Build started from %s", config.source)

        raw = load_document(config.source)
        document = normalize_document(raw) if raw is not None else None
        if document is None:
            self.logger.warning("No canonical token document; emitting fallback output only")
        else:
            self._write_generated(document)

        cache = SegmentCache()
        units = plan_units(
            document,
            depth=config.group_depth,
            package_name=config.compose.package_name,
            class_name=config.compose.class_name,
            file_name=config.compose.file_name,
            cache=cache,
        )
        self.logger.debug(
            "Planned %d emission unit(s) at group depth %s",
            len(units),
            config.group_depth or "full",
        )

        written: List[Path] = []
        for token_format in self._select_formats():
            output_dir = config.build_dir / token_format.build_subdir
            for unit in units:
                text = token_format.render(unit, cache)
                destination = output_dir / unit.destination
                destination.parent.mkdir(parents=True, exist_ok=True)
                destination.write_text(text, encoding="utf-8")
                written.append(destination)

        self._log_summary(written)
        return BuildResult(units=units, files=written, document=document)

    def _select_formats(self) -> List[TokenFormat]:
        if self._format_overrides is not None:
            return self._format_overrides
        return discover_formats(
            self.config.formats, templates_dir=self.config.compose.templates_dir
        )

    def _write_generated(self, document: Dict[str, Any]) -> None:
        path = self.config.generated_path
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(f"{json.dumps(document, indent=2, ensure_ascii=False)}\n", encoding="utf-8")
        self.logger.debug("Wrote canonical document to %s", path)

    def _log_summary(self, files: List[Path]) -> None:
        self.logger.info("Build completed: %d file(s) generated", len(files))
        for path in files:
            try:
                relative = path.relative_to(self.config.build_dir)
            except ValueError:
                relative = path
            self.logger.info("  - %s (%d bytes)", relative.as_posix(), path.stat().st_size)


__all__ = ["BuildPipeline", "plan_units"]
