"""Exception hierarchy for Groot.

Core components raise these and never print; the CLI maps them to
messages and exit codes.
"""


class GrootError(Exception):
    """Base class for all Groot errors."""


class ObjectNotFoundError(GrootError):
    """Raised when an object id is absent from the object store."""


class ObjectCorruptedError(GrootError):
    """Raised when an object's content no longer matches its id."""


class CommitNotFoundError(GrootError):
    """Raised when a commit is missing or the object is not a commit."""


class AlreadyInitializedError(GrootError):
    """Raised by bootstrap when the repository layout already exists."""


class NotARepositoryError(GrootError):
    """Raised when no .groot/ directory is found."""


class RepositoryIOError(GrootError):
    """Raised when reading or writing the persisted layout fails."""


class StagingError(GrootError):
    """Raised for invalid staging requests or a corrupted index."""


class SerializationError(GrootError):
    """Raised when a stored record cannot be decoded."""
