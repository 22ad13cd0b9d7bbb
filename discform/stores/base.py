"""Errors shared by store implementations."""


class PersistenceError(Exception):
    """Raised when an external store fails to read or write.

    Recoverable: the caller's state does not advance and the same
    operation may be retried.
    """

    pass
