class ESGTrackerError(Exception):
    """Base class for errors raised by the storage and auth services."""


class InvalidRecordError(ESGTrackerError):
    """
    The caller sent something we refuse to store: a missing fiscal year
    or no user identity. Nothing is written when this is raised.
    """


class PersistenceError(ESGTrackerError):
    """The storage backend failed. Surfaced to clients as an opaque 500."""


class DuplicateEmailError(ESGTrackerError):
    pass
