"""Copies built artifacts into target repositories and opens pull requests."""

from __future__ import annotations

import shutil
import subprocess
import tempfile
from pathlib import Path
from typing import Callable, Dict, List, Mapping

from ..config import DeployTarget, DirectoryCopy
from ..logging import get_logger
from .publisher import Publisher


class Deployer:
    """Publishes generated token files to the repositories that consume them."""

    def __init__(
        self,
        publisher: Publisher | None = None,
        runner: Callable[..., str] | None = None,
    ) -> None:
        self._runner = runner or Publisher._default_runner
        self.publisher = publisher or Publisher(runner=self._runner)
        self.logger = get_logger("deploy")

    def deploy(self, name: str, target: DeployTarget, build_root: Path) -> bool:
        """Deploy one target; returns False when nothing was published."""
        self._check_build_outputs(name, target, build_root)

        with tempfile.TemporaryDirectory(prefix=f"tokengen-{name}-") as workdir:
            clone_dir = Path(workdir) / name
            self.logger.info("Cloning %s", target.url)
            self._runner(
                ["git", "clone", target.url, str(clone_dir)],
                cwd=Path(workdir),
                env=None,
                capture_output=False,
            )

            paths = self._copy_files(name, target, build_root, clone_dir)
            for directory in target.directories:
                paths.append(self._copy_directory(directory, build_root, clone_dir))
            if not paths:
                self.logger.warning("Nothing to deploy for %s", name)
                return False

            published = self.publisher.publish_pr(
                str(clone_dir),
                paths,
                branch_name=target.branch,
                base_branch=target.base_branch,
                title=f"Update {name} design tokens",
                body=self.build_pr_body(name, target, build_root),
                message=f"Update {name} design tokens\n\nGenerated with tokengen",
            )
        if published:
            self.logger.info("Opened pull request for %s on branch %s", name, target.branch)
        else:
            self.logger.info("No pull request opened for %s", name)
        return published

    def deploy_all(
        self, targets: Mapping[str, DeployTarget], build_root: Path
    ) -> Dict[str, bool]:
        """Deploy every target, continuing past individual failures."""
        results: Dict[str, bool] = {}
        for name, target in targets.items():
            try:
                results[name] = self.deploy(name, target, build_root)
            except (OSError, subprocess.CalledProcessError) as exc:
                self.logger.error("Deployment failed for %s: %s", name, exc)
                results[name] = False
        return results

    @staticmethod
    def build_pr_body(name: str, target: DeployTarget, build_root: Path) -> str:
        lines = [
            "## Summary",
            f"- Updates {name} design tokens from the design tool export",
            "- Generated with tokengen",
            "",
            "## Files Updated",
        ]
        if target.files:
            lines.extend(f"- `{target.target_path}{file}`" for file in target.files)
        else:
            lines.append("- No file list configured")
        if target.directories:
            lines.extend(["", "## Directories Updated"])
            for directory in target.directories:
                count = count_files(build_root / directory.build_dir, ".kt")
                lines.append(f"- `{directory.target_path}` ({count} files)")
        return "\n".join(lines) + "\n"

    # ------------------------------------------------------------------
    # Helpers

    @staticmethod
    def _check_build_outputs(name: str, target: DeployTarget, build_root: Path) -> None:
        if target.files:
            build_dir = build_root / (target.build_dir or name)
            if not build_dir.is_dir():
                raise FileNotFoundError(f"Build directory not found: {build_dir}")
            if not any(build_dir.iterdir()):
                raise FileNotFoundError(f"No files found in build directory: {build_dir}")
        for directory in target.directories:
            source = build_root / directory.build_dir
            if not source.is_dir():
                raise FileNotFoundError(f"Build directory not found: {source}")

    def _copy_files(
        self, name: str, target: DeployTarget, build_root: Path, clone_dir: Path
    ) -> List[Path]:
        if not target.files:
            return []
        build_dir = build_root / (target.build_dir or name)
        destination_dir = clone_dir / target.target_path
        destination_dir.mkdir(parents=True, exist_ok=True)
        copied: List[Path] = []
        for file in target.files:
            source = build_dir / file
            if not source.is_file():
                self.logger.warning("%s not found in build output; skipping", file)
                continue
            destination = destination_dir / file
            destination.parent.mkdir(parents=True, exist_ok=True)
            shutil.copyfile(source, destination)
            copied.append(destination)
        return copied

    @staticmethod
    def _copy_directory(directory: DirectoryCopy, build_root: Path, clone_dir: Path) -> Path:
        source = build_root / directory.build_dir
        destination = clone_dir / directory.target_path
        destination.mkdir(parents=True, exist_ok=True)
        if directory.clean:
            for entry in source.iterdir():
                existing = destination / entry.name
                if existing.is_dir() and not existing.is_symlink():
                    shutil.rmtree(existing)
                elif existing.exists() or existing.is_symlink():
                    existing.unlink()
        shutil.copytree(source, destination, dirs_exist_ok=True)
        return destination


def count_files(directory: Path, extension: str | None = None) -> int:
    if not directory.is_dir():
        return 0
    return sum(
        1
        for path in directory.rglob("*")
        if path.is_file() and (not extension or path.name.endswith(extension))
    )


__all__ = ["Deployer", "count_files"]
