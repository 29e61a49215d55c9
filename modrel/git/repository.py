"""Git repository abstraction.

``Repository`` is the version-control collaborator of the release pipeline:
it lists commits since the last tag, reports working tree state, and commits,
pushes and fetches tags. All operations return Result types.

Usage:
    repo = Repository(Path("/path/to/mod"))

    match repo.last_tag():
        case Ok(tag):
            lines = repo.log_lines(since=tag, pretty=LOG_FORMAT)
        case Err(e):
            print(f"Error: {e.message}")
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path

from modrel.core.result import Err, Ok, Result
from modrel.platform.process import ProcessError
from modrel.platform.process import run as run_process

_GIT_TIMEOUT_SECONDS = 30.0
_GIT_NETWORK_TIMEOUT_SECONDS = 3 * 60.0

_NETWORK_COMMANDS = frozenset({"fetch", "pull", "push", "clone"})

# Matches both https and ssh remotes.
_GITHUB_REMOTE_RE = re.compile(r"^(?:https://|git@)github\.com[:/](.+?)/(.+?)(?:\.git)?/?$")

_SHORTLOG_RE = re.compile(r"^\s*\d+\s+(.*)$", re.MULTILINE)

# Game version branches, local ("1.4") or remote ("origin/1.4").
_VERSION_BRANCH_RE = re.compile(r"^(?:[^/]+/)?(\d+\.\d+)$")

__all__ = [
    "GitError",
    "Repository",
    "github_remote_url",
    "parse_github_remote",
]


@dataclass(frozen=True, slots=True)
class GitError:
    """Error from a git operation.

    Attributes:
        command: The git subcommand that failed
        message: Error message
        returncode: Process return code
    """

    command: str
    message: str
    returncode: int = 1


def parse_github_remote(url: str) -> tuple[str, str] | None:
    """Split a GitHub remote URL into ``(owner, repo)``."""
    m = _GITHUB_REMOTE_RE.match(url.strip())
    if m is None:
        return None
    return (m.group(1), m.group(2))


def github_remote_url(owner: str, repo: str) -> str:
    return f"https://github.com/{owner}/{repo}.git"


class Repository:
    """A mod's git checkout.

    Attributes:
        path: Path to the repository root
    """

    def __init__(self, path: Path) -> None:
        self.path = path

    def exists(self) -> bool:
        """Check if this is a valid git repository."""
        return (self.path / ".git").exists()

    def porcelain(self) -> Result[str, GitError]:
        """Uncommitted changes in ``git status --porcelain`` form ("" when clean)."""
        return self._git(["status", "--porcelain"]).map(str.strip)

    def current_branch(self) -> Result[str, GitError]:
        result = self._git(["rev-parse", "--abbrev-ref", "HEAD"])
        if isinstance(result, Err):
            return result
        branch = result.value.strip()
        if branch == "HEAD":
            return Err(GitError(command="rev-parse", message="detached HEAD"))
        return Ok(branch)

    def unpushed_commits(self, branch: str) -> Result[str, GitError]:
        """One-line log of commits on ``branch`` missing from ``origin``."""
        return self._git(["log", "--oneline", f"origin/{branch}.."]).map(str.strip)

    def last_tag(self) -> Result[str | None, GitError]:
        """Most recent reachable tag, or None when the repository has no tags."""
        result = self._run(["describe", "--tags", "--abbrev=0"])
        match result:
            case Ok(stdout):
                return Ok(stdout.strip() or None)
            case Err(e):
                text = e.stderr.lower()
                if "no names found" in text or "cannot describe" in text:
                    return Ok(None)
                return Err(self._error("describe", e))

    def log_lines(self, *, since: str | None, pretty: str) -> Result[list[str], GitError]:
        """Non-merge commits after ``since`` (exclusive) up to HEAD, one per line.

        With ``since=None`` the whole history of HEAD is listed.
        """
        rev = f"{since}..HEAD" if since else "HEAD"
        result = self._git(["log", rev, "--no-merges", f"--pretty=tformat:{pretty}"])
        if isinstance(result, Err):
            return result
        return Ok([ln for ln in result.value.splitlines() if ln.strip()])

    def reset_tags(self) -> Result[None, GitError]:
        """Replace local tags with the remote's (drops tags deleted upstream)."""
        pruned = self._git(["fetch", "--prune", "origin", "+refs/tags/*:refs/tags/*"])
        if isinstance(pruned, Err):
            return pruned
        fetched = self._git(["fetch", "--tags"])
        if isinstance(fetched, Err):
            return fetched
        return Ok(None)

    def pull_tags(self) -> Result[None, GitError]:
        return self._git(["pull", "--tags"]).map(lambda _: None)

    def authors(self) -> Result[list[str], GitError]:
        """Commit authors of HEAD, most commits first."""
        result = self._git(["shortlog", "HEAD", "-ns"])
        if isinstance(result, Err):
            return result
        return Ok([m.group(1).strip() for m in _SHORTLOG_RE.finditer(result.value)])

    def author_subjects(self, author: str) -> Result[list[str], GitError]:
        result = self._git(["log", f"--author={author}", "--pretty=tformat:%s"])
        if isinstance(result, Err):
            return result
        return Ok([ln.strip() for ln in result.value.splitlines() if ln.strip()])

    def version_branches(self) -> Result[list[str], GitError]:
        """Names of local and remote branches named after a game version, oldest first."""
        result = self._git(["branch", "--all", "--format=%(refname:short)"])
        if isinstance(result, Err):
            return result
        versions = {
            m.group(1)
            for line in result.value.splitlines()
            if (m := _VERSION_BRANCH_RE.match(line.strip()))
        }
        return Ok(sorted(versions, key=lambda v: tuple(int(p) for p in v.split("."))))

    def origin_url(self) -> Result[str, GitError]:
        return self._git(["remote", "get-url", "origin"]).map(str.strip)

    def set_origin_url(self, url: str) -> Result[None, GitError]:
        return self._git(["remote", "set-url", "origin", url]).map(lambda _: None)

    def commit_all(self, message: str) -> Result[str, GitError]:
        return self._git(["commit", "-am", message]).map(str.strip)

    def push(self) -> Result[str, GitError]:
        return self._git(["push"]).map(str.strip)

    def _git(self, args: list[str]) -> Result[str, GitError]:
        result = self._run(args)
        if isinstance(result, Err):
            return Err(self._error(args[0], result.error))
        return Ok(result.value)

    def _error(self, command: str, e: ProcessError) -> GitError:
        return GitError(
            command=command,
            message=e.stderr.strip() or e.stdout.strip() or f"git {command} failed",
            returncode=e.returncode,
        )

    def _run(self, args: list[str]) -> Result[str, ProcessError]:
        """Run a git command in this repository."""
        command = args[0] if args else ""
        timeout = (
            _GIT_NETWORK_TIMEOUT_SECONDS if command in _NETWORK_COMMANDS else _GIT_TIMEOUT_SECONDS
        )
        return run_process(["git", "-C", str(self.path), *args], cwd=self.path, timeout=timeout)
