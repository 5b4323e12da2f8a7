"""Exceptions raised by the draw service and its storage backends."""


class InvalidArgumentError(ValueError):
    """Raised when a caller supplies an unsupported argument, e.g. a group
    count other than 4 or 8."""


class StorageError(RuntimeError):
    """Raised when a persistence backend fails to read or write a draw.

    The underlying driver exception is always chained as ``__cause__``.
    """


class DrawError(RuntimeError):
    """Raised when the roster cannot be drawn into complete groups."""
