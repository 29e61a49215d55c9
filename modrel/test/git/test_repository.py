"""Tests for modrel.git.repository."""

from __future__ import annotations

from pathlib import Path

import pytest

from modrel.core.result import Err, Ok, Result
from modrel.git import repository as repository_mod
from modrel.git.repository import Repository, github_remote_url, parse_github_remote
from modrel.platform.process import ProcessError


class FakeGit:
    """Scripted replacement for ``run_process``: maps git args to results."""

    def __init__(self, responses: dict[tuple[str, ...], Result[str, ProcessError]]) -> None:
        self.responses = responses
        self.calls: list[tuple[str, ...]] = []

    def __call__(
        self, cmd: list[str], cwd: Path, env: object = None, *, timeout: float | None = None
    ) -> Result[str, ProcessError]:
        args = tuple(cmd[3:])  # drop "git -C <path>"
        self.calls.append(args)
        return self.responses.get(args, Ok(""))


def _fail(stderr: str, code: int = 128) -> Err[ProcessError]:
    return Err(ProcessError(command=("git",), returncode=code, stdout="", stderr=stderr))


@pytest.fixture
def repo(tmp_path: Path) -> Repository:
    (tmp_path / ".git").mkdir()
    return Repository(tmp_path)


class TestGithubRemote:
    @pytest.mark.parametrize(
        "url",
        [
            "https://github.com/fluffy-mods/ColonyManager.git",
            "https://github.com/fluffy-mods/ColonyManager",
            "git@github.com:fluffy-mods/ColonyManager.git",
        ],
    )
    def test_parse(self, url: str) -> None:
        assert parse_github_remote(url) == ("fluffy-mods", "ColonyManager")

    def test_parse_other_host(self) -> None:
        assert parse_github_remote("https://gitlab.com/a/b.git") is None

    def test_url(self) -> None:
        assert github_remote_url("a", "b") == "https://github.com/a/b.git"


class TestRepository:
    def test_exists(self, repo: Repository, tmp_path: Path) -> None:
        assert repo.exists()
        assert not Repository(tmp_path / "nope").exists()

    def test_last_tag(self, repo: Repository, monkeypatch: pytest.MonkeyPatch) -> None:
        fake = FakeGit({("describe", "--tags", "--abbrev=0"): Ok("v1.2.3\n")})
        monkeypatch.setattr(repository_mod, "run_process", fake)
        assert repo.last_tag() == Ok("v1.2.3")

    def test_last_tag_none(self, repo: Repository, monkeypatch: pytest.MonkeyPatch) -> None:
        fake = FakeGit(
            {("describe", "--tags", "--abbrev=0"): _fail("fatal: No names found, cannot describe")}
        )
        monkeypatch.setattr(repository_mod, "run_process", fake)
        assert repo.last_tag() == Ok(None)

    def test_last_tag_error(self, repo: Repository, monkeypatch: pytest.MonkeyPatch) -> None:
        fake = FakeGit({("describe", "--tags", "--abbrev=0"): _fail("fatal: not a git repository")})
        monkeypatch.setattr(repository_mod, "run_process", fake)
        result = repo.last_tag()
        assert isinstance(result, Err)
        assert result.error.command == "describe"
        assert "not a git repository" in result.error.message

    def test_log_lines_since_tag(self, repo: Repository, monkeypatch: pytest.MonkeyPatch) -> None:
        fake = FakeGit(
            {
                ("log", "v1.0.0..HEAD", "--no-merges", "--pretty=tformat:%H"): Ok("a\n\nb\n"),
            }
        )
        monkeypatch.setattr(repository_mod, "run_process", fake)
        assert repo.log_lines(since="v1.0.0", pretty="%H") == Ok(["a", "b"])

    def test_log_lines_whole_history(
        self, repo: Repository, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        fake = FakeGit({})
        monkeypatch.setattr(repository_mod, "run_process", fake)
        repo.log_lines(since=None, pretty="%H")
        assert fake.calls == [("log", "HEAD", "--no-merges", "--pretty=tformat:%H")]

    def test_authors(self, repo: Repository, monkeypatch: pytest.MonkeyPatch) -> None:
        fake = FakeGit({("shortlog", "HEAD", "-ns"): Ok("   120\tFluffy\n     3\tSome One\n")})
        monkeypatch.setattr(repository_mod, "run_process", fake)
        assert repo.authors() == Ok(["Fluffy", "Some One"])

    def test_version_branches(self, repo: Repository, monkeypatch: pytest.MonkeyPatch) -> None:
        listing = "1.4\nmain\norigin/1.10\norigin/1.4\norigin/HEAD\norigin/feature/1.5\n"
        fake = FakeGit({("branch", "--all", "--format=%(refname:short)"): Ok(listing)})
        monkeypatch.setattr(repository_mod, "run_process", fake)
        assert repo.version_branches() == Ok(["1.4", "1.10"])

    def test_current_branch_detached(
        self, repo: Repository, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        fake = FakeGit({("rev-parse", "--abbrev-ref", "HEAD"): Ok("HEAD\n")})
        monkeypatch.setattr(repository_mod, "run_process", fake)
        assert isinstance(repo.current_branch(), Err)

    def test_reset_tags(self, repo: Repository, monkeypatch: pytest.MonkeyPatch) -> None:
        fake = FakeGit({})
        monkeypatch.setattr(repository_mod, "run_process", fake)
        assert repo.reset_tags() == Ok(None)
        assert fake.calls == [
            ("fetch", "--prune", "origin", "+refs/tags/*:refs/tags/*"),
            ("fetch", "--tags"),
        ]

    def test_commit_failure(self, repo: Repository, monkeypatch: pytest.MonkeyPatch) -> None:
        fake = FakeGit({("commit", "-am", "Release 1.0.1 [nolog]"): _fail("nothing to commit", 1)})
        monkeypatch.setattr(repository_mod, "run_process", fake)
        result = repo.commit_all("Release 1.0.1 [nolog]")
        assert isinstance(result, Err)
        assert result.error.returncode == 1
