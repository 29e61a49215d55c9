"""Git operations module.

Usage:
    from modrel.git import Repository

    repo = Repository(Path("/path/to/mod"))
    tag = repo.last_tag()
"""

from modrel.git.repository import (
    GitError,
    Repository,
    github_remote_url,
    parse_github_remote,
)

__all__ = [
    "GitError",
    "Repository",
    "github_remote_url",
    "parse_github_remote",
]
