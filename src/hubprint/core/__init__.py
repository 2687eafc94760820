"""Core framework components for hubprint."""

from .errors import (
    PrinterError,
    UnsupportedTransport,
    NoSupportedTransport,
    TransportError,
    ConnectionFailure,
    SelectionCancelled,
    NotConnected,
    WriteFailure,
    EncodingError,
    InvalidArgument,
    OutOfRange,
    QrEncodingFailure,
)
from .state import TransportState, StateTracker

__all__ = [
    "PrinterError",
    "UnsupportedTransport",
    "NoSupportedTransport",
    "TransportError",
    "ConnectionFailure",
    "SelectionCancelled",
    "NotConnected",
    "WriteFailure",
    "EncodingError",
    "InvalidArgument",
    "OutOfRange",
    "QrEncodingFailure",
    "TransportState",
    "StateTracker",
]
