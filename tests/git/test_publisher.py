"""Tests for the git publisher."""

from __future__ import annotations

import subprocess
from pathlib import Path

import pytest

from tokengen.git.publisher import Publisher


def _repo(tmp_path: Path) -> Path:
    repo = tmp_path / "repo"
    (repo / ".git").mkdir(parents=True)
    return repo


def _runner(calls, *, status=" M Tokens.kt\n", fail=()):
    """Record every command; raise for commands starting with a prefix in ``fail``."""

    def runner(args, cwd, env=None, capture_output=False):
        args = list(args)
        calls.append(args)
        if any(args[: len(prefix)] == list(prefix) for prefix in fail):
            raise subprocess.CalledProcessError(1, args)
        if args == ["git", "status", "--porcelain"]:
            return status
        return ""

    return runner


def test_publisher_adds_and_commits_files(tmp_path: Path) -> None:
    repo = _repo(tmp_path)
    tokens = repo / "app" / "Tokens.kt"
    envs = []
    calls = []
    record = _runner(calls)

    def runner(args, cwd, env=None, capture_output=False):
        envs.append(env)
        assert Path(cwd) == repo
        return record(args, cwd, env=env, capture_output=capture_output)

    result = Publisher(runner=runner).commit(str(repo), [tokens], message="Update tokens")

    assert result is True
    assert calls == [
        ["git", "status", "--porcelain"],
        ["git", "add", "--all", "--", "app/Tokens.kt"],
        ["git", "commit", "-m", "Update tokens"],
    ]
    assert envs[-1]["GIT_AUTHOR_NAME"]


def test_publisher_skips_commit_without_changes(tmp_path: Path) -> None:
    repo = _repo(tmp_path)
    calls = []

    result = Publisher(runner=_runner(calls, status="")).commit(str(repo), [repo / "Tokens.kt"])

    assert result is False
    assert calls == [["git", "status", "--porcelain"]]


def test_publisher_noop_without_git_repo(tmp_path: Path) -> None:
    repo = tmp_path / "repo"
    repo.mkdir()
    calls = []
    publisher = Publisher(runner=_runner(calls))

    assert publisher.commit(str(repo), [repo / "Tokens.kt"]) is False
    assert publisher.publish_pr(str(repo), [], branch_name="b", title="t", body="b") is False
    assert not calls


def test_publisher_publish_pr_runs_git_commands(tmp_path: Path) -> None:
    repo = _repo(tmp_path)
    calls = []

    result = Publisher(runner=_runner(calls)).publish_pr(
        str(repo),
        [repo / "android"],
        branch_name="design-tokens-update",
        base_branch="main",
        title="Update android design tokens",
        body="summary",
    )

    assert result is True
    assert calls[0] == ["git", "checkout", "-b", "design-tokens-update", "main"]
    assert calls[1] == ["git", "status", "--porcelain"]
    assert calls[2] == ["git", "add", "--all", "--", "android"]
    assert calls[3][:3] == ["git", "commit", "-m"]
    assert calls[4] == ["git", "push", "origin", "design-tokens-update"]
    assert calls[5] == [
        "gh", "pr", "create",
        "--title", "Update android design tokens",
        "--body", "summary",
        "--head", "design-tokens-update",
        "--base", "main",
    ]


def test_publisher_reuses_existing_branch(tmp_path: Path) -> None:
    repo = _repo(tmp_path)
    calls = []

    result = Publisher(runner=_runner(calls, fail=[("git", "checkout", "-b")])).publish_pr(
        str(repo),
        [repo / "Tokens.kt"],
        branch_name="tokens",
        title="Update tokens",
        body="summary",
    )

    assert result is True
    assert calls[:2] == [["git", "checkout", "-b", "tokens"], ["git", "checkout", "tokens"]]


def test_publisher_stops_when_nothing_changed(tmp_path: Path) -> None:
    repo = _repo(tmp_path)
    calls = []

    result = Publisher(runner=_runner(calls, status="")).publish_pr(
        str(repo), [repo / "Tokens.kt"], branch_name="tokens", title="t", body="b"
    )

    assert result is False
    assert not any(call[:2] in (["git", "push"], ["gh", "pr"]) for call in calls)


def test_publisher_propagates_push_failure(tmp_path: Path) -> None:
    repo = _repo(tmp_path)
    calls = []

    with pytest.raises(subprocess.CalledProcessError):
        Publisher(runner=_runner(calls, fail=[("git", "push")])).publish_pr(
            str(repo), [repo / "Tokens.kt"], branch_name="tokens", title="t", body="b"
        )

    assert not any(call[:2] == ["gh", "pr"] for call in calls)


def test_publisher_keeps_branch_when_pr_creation_fails(tmp_path: Path) -> None:
    repo = _repo(tmp_path)
    calls = []

    result = Publisher(runner=_runner(calls, fail=[("gh", "pr", "create")])).publish_pr(
        str(repo), [repo / "Tokens.kt"], branch_name="tokens", title="t", body="b"
    )

    assert result is False
    assert ["git", "push", "origin", "tokens"] in calls


def test_publisher_publish_pr_skips_push_when_disabled(tmp_path: Path) -> None:
    repo = _repo(tmp_path)
    calls = []

    result = Publisher(runner=_runner(calls)).publish_pr(
        str(repo), [repo / "Tokens.kt"], branch_name="tokens", title="t", body="b", push=False
    )

    assert result is False
    assert ["git", "commit", "-m", "Update design tokens\n\nGenerated with tokengen"] in calls
    assert not any(call[:2] in (["git", "push"], ["gh", "pr"]) for call in calls)
