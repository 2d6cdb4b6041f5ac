"""Exit codes for the ghr command line.

A release run either succeeds or stops at the first fatal error; the kind of
that error decides which of these codes the process exits with.
"""

from enum import IntEnum

__all__ = ["ErrorCode"]


class ErrorCode(IntEnum):
    """Process exit codes. Values are stable.

    - 0: Success
    - 1: User error (bad config file, unsupported event, conflicting flags)
    - 2: Environment error (missing GITHUB_WORKSPACE, missing tools)
    - 3: Git error (unknown revision, git log failed)
    - 4: Network error (release store or comment API failed)
    - 5: I/O error (cannot write action outputs)
    """

    OK = 0
    USER_ERROR = 1
    ENV_ERROR = 2
    GIT_ERROR = 3
    NETWORK_ERROR = 4
    IO_ERROR = 5
