"""Domain errors raised by catalog repositories."""


class BookstoreError(Exception):
    """Base class for every catalog error."""


class NotFoundError(BookstoreError):
    """The requested or referenced entity does not exist."""


class AlreadyExistsError(BookstoreError):
    """An entity with the same unique key already exists."""


class GenreInUseError(BookstoreError):
    """The genre is still linked to at least one book."""


class StorageError(BookstoreError):
    """The backing store failed for a reason the caller cannot act on."""


class StorageTimeoutError(StorageError):
    """A storage call did not finish before its deadline."""
