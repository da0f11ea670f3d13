"""Git and GitHub CLI steps for publishing generated token files."""

from __future__ import annotations

import os
import subprocess
from pathlib import Path
from typing import Callable, Iterable, Sequence

from ..logging import get_logger

DEFAULT_COMMIT_MESSAGE = "Update design tokens\n\nGenerated with tokengen"

Runner = Callable[..., str]


class Publisher:
    """Commits token files on a branch, pushes it and opens a pull request.

    Every command goes through ``runner(args, cwd=..., env=..., capture_output=...)``
    so tests can record the calls instead of spawning git.
    """

    def __init__(self, runner: Runner | None = None) -> None:
        self._runner = runner or self._default_runner
        self.logger = get_logger("publisher")

    def switch_branch(self, repo: Path, branch: str, base_branch: str | None = None) -> None:
        """Create ``branch`` (from ``base_branch`` when given) or check it out if it exists."""
        create = ["git", "checkout", "-b", branch]
        if base_branch:
            create.append(base_branch)
        try:
            self._run(create, cwd=repo)
        except subprocess.CalledProcessError:
            self.logger.info("Branch %s exists; checking it out", branch)
            self._run(["git", "checkout", branch], cwd=repo)

    def has_changes(self, repo: Path) -> bool:
        status = self._run(["git", "status", "--porcelain"], cwd=repo, capture_output=True)
        return bool(status.strip())

    def commit(
        self,
        repo_path: str,
        paths: Sequence[Path | str],
        *,
        message: str = DEFAULT_COMMIT_MESSAGE,
    ) -> bool:
        """Stage ``paths`` and commit them; False when the tree is clean."""
        repo = Path(repo_path)
        if not (repo / ".git").exists():
            return False
        if not self.has_changes(repo):
            self.logger.info("No changes detected in %s", repo)
            return False

        targets = [_relative_to(repo, Path(path)) for path in paths] or ["."]
        self._run(["git", "add", "--all", "--", *targets], cwd=repo)
        self._run(["git", "commit", "-m", message], cwd=repo, env=_author_env())
        return True

    def publish_pr(
        self,
        repo_path: str,
        paths: Sequence[Path | str],
        *,
        branch_name: str,
        title: str,
        body: str,
        base_branch: str | None = None,
        message: str = DEFAULT_COMMIT_MESSAGE,
        push: bool = True,
    ) -> bool:
        """Commit on ``branch_name``, push it and open a pull request.

        Git failures propagate. A failing ``gh pr create`` is logged and
        reported as False, leaving the pushed branch for a manual pull request.
        """
        repo = Path(repo_path)
        if not (repo / ".git").exists():
            return False

        self.switch_branch(repo, branch_name, base_branch)
        if not self.commit(repo_path, paths, message=message):
            return False
        if not push:
            return False
        self._run(["git", "push", "origin", branch_name], cwd=repo)

        pr_args = ["gh", "pr", "create", "--title", title, "--body", body, "--head", branch_name]
        if base_branch:
            pr_args.extend(["--base", base_branch])
        try:
            self._run(pr_args, cwd=repo)
        except (subprocess.CalledProcessError, OSError) as exc:
            self.logger.warning(
                "Could not create the pull request for %s (%s); open it manually", branch_name, exc
            )
            return False
        return True

    def _run(
        self,
        args: Iterable[str],
        *,
        cwd: Path,
        env: dict[str, str] | None = None,
        capture_output: bool = False,
    ) -> str:
        return self._runner(list(args), cwd=cwd, env=env, capture_output=capture_output)

    @staticmethod
    def _default_runner(
        args: Iterable[str],
        *,
        cwd: Path,
        env: dict[str, str] | None = None,
        capture_output: bool = False,
    ) -> str:
        completed = subprocess.run(
            list(args),
            cwd=str(cwd),
            env=env,
            check=True,
            text=True,
            capture_output=capture_output,
        )
        return completed.stdout if capture_output else ""


def _relative_to(repo: Path, path: Path) -> str:
    try:
        return path.relative_to(repo).as_posix()
    except ValueError:
        return path.as_posix()


def _author_env() -> dict[str, str]:
    env = os.environ.copy()
    env.setdefault("GIT_AUTHOR_NAME", "tokengen")
    env.setdefault("GIT_AUTHOR_EMAIL", "tokengen@example.com")
    env.setdefault("GIT_COMMITTER_NAME", env["GIT_AUTHOR_NAME"])
    env.setdefault("GIT_COMMITTER_EMAIL", env["GIT_AUTHOR_EMAIL"])
    return env


__all__ = ["DEFAULT_COMMIT_MESSAGE", "Publisher"]
