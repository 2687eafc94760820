"""
Exception hierarchy for hubprint.

Transport errors are raised unmodified to the caller so it can tell a
retryable connection problem apart from a missing capability. Encoding
errors are also ValueErrors, since they always come from bad arguments.
"""


class PrinterError(Exception):
    """Base class for every error raised by hubprint."""


class UnsupportedTransport(PrinterError):
    """Neither transport is available, or the requested one is absent."""


# Name used by callers that think in terms of auto-detect failing
NoSupportedTransport = UnsupportedTransport


class TransportError(PrinterError):
    """A hardware transport failed."""


class ConnectionFailure(TransportError):
    """Device handshake or port open failed."""


class SelectionCancelled(ConnectionFailure):
    """The user or environment did not select a device."""


class NotConnected(TransportError):
    """A write or print was attempted without an active transport."""


class WriteFailure(TransportError):
    """The transport accepted the connection but a write failed or timed out."""


class EncodingError(PrinterError, ValueError):
    """A command could not be encoded from the given arguments."""


class InvalidArgument(EncodingError):
    """A command parameter is invalid (for example a negative feed)."""


class OutOfRange(EncodingError):
    """A QR size or error-correction parameter is outside its range."""


class QrEncodingFailure(EncodingError):
    """The QR sub-sequence could not be built for the payload."""
