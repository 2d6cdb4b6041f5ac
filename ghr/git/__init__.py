"""Git operations module.

Usage:
    from ghr.git import History

    history = History(Path("/path/to/repo"))
    config_text = history.read_file("HEAD", "RELEASE")
"""

from ghr.git.history import (
    CommitRecord,
    GitError,
    History,
    HistoryReader,
    parse_log,
)

__all__ = [
    "CommitRecord",
    "GitError",
    "History",
    "HistoryReader",
    "parse_log",
]
