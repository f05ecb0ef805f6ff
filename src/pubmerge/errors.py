"""Exception types raised by pubmerge."""

__all__ = ["PubmergeError", "MalformedRecordError"]


class PubmergeError(Exception):
    """Base class for pubmerge errors."""


class MalformedRecordError(PubmergeError, ValueError):
    """Raised when a raw record has no derivable title."""

    def __init__(
        self,
        message: str,
        source: str | None = None,
        index: int | None = None,
    ) -> None:
        """Initialize malformed record error.

        Parameters
        ----------
        message : str
            Error message.
        source : str | None, optional
            Source the record came from.
        index : int | None, optional
            0-based position of the record in its source list.
        """
        super().__init__(message)
        self.message = message
        self.source = source
        self.index = index
