"""Exception types raised by the ghost commit scheduler."""


class GhostCommitError(Exception):
    """Base class for scheduler errors."""


class BusyError(GhostCommitError):
    """Another commit is already in flight."""

    def __init__(self, message: str = "A commit is already in progress"):
        super().__init__(message)


class CommitFailedError(GhostCommitError):
    """The external commit operation failed."""


class NotConfiguredError(GhostCommitError):
    """No configuration has been stored yet."""

    def __init__(self, message: str = "Ghost commits are not configured"):
        super().__init__(message)


class InvalidConfigError(GhostCommitError):
    """The stored configuration cannot be interpreted."""
