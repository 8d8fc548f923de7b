from __future__ import annotations


class ReaderError(RuntimeError):
    """Base class for every error raised by royalreader."""


class ExtractionError(ReaderError):
    """Raised when a document does not yield the expected record."""


class MarkerNotFoundError(ExtractionError):
    pass


class UnbalancedBracketsError(ExtractionError):
    pass


class MissingFieldError(ExtractionError):
    pass


class MalformedTimestampError(ExtractionError):
    pass


class FetchError(ReaderError):
    """Raised when a page cannot be turned into a Fiction or Chapter."""


class NotFoundError(FetchError):
    """Raised when the remote page cannot be retrieved."""


class UnrecognizedLayoutError(FetchError):
    """Raised when a page does not match any known layout."""


class PersistenceError(ReaderError):
    """Raised when the tracked-fiction file cannot be read or written."""
