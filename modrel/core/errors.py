"""Process exit codes.

Every command maps its failure onto one of these codes; the values are part of
the CLI contract and must stay stable:
- 0: Success
- 1: User error (bad flags, unknown dialect, dirty repository)
- 2: Environment error (missing git/gh/updater executable)
- 3: Build error (build command failed)
- 4: Network error (release, workshop or forum upload failed)
- 5: I/O error (descriptor, store or archive could not be written)
- 6: Config error (invalid config file, missing template, broken expression)
"""

from enum import IntEnum

__all__ = ["ErrorCode"]


class ErrorCode(IntEnum):
    """Exit codes for CLI commands."""

    OK = 0
    USER_ERROR = 1
    ENV_ERROR = 2
    BUILD_ERROR = 3
    NETWORK_ERROR = 4
    IO_ERROR = 5
    CONFIG_ERROR = 6

    def __str__(self) -> str:
        return self.name.lower().replace("_", " ")

    @property
    def is_success(self) -> bool:
        return self == ErrorCode.OK
