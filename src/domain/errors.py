"""Error kinds raised by the pricing and booking core."""


class BookingError(Exception):
    """Base class for every failure surfaced by the core."""


class InvalidCoordinate(BookingError, ValueError):
    """Latitude / longitude outside the valid range (or not a number)."""


class InvalidArgument(BookingError, ValueError):
    """Negative or non-numeric distance / duration passed to the tariff."""


class ValidationError(BookingError):
    """A booking draft is incomplete or malformed.  Nothing was written."""


class StoreUnavailable(BookingError):
    """The document store could not be reached or rejected the operation."""
