"""hubprint - ESC/POS receipt printing over Bluetooth LE and serial."""

from hubprint.core.errors import PrinterError
from hubprint.hardware.base import ConnectionInfo, TransportKind
from hubprint.printing.manager import ConnectionManager
from hubprint.printing.receipt import ReceiptData

__version__ = "0.1.0"

__all__ = [
    "ConnectionManager",
    "ConnectionInfo",
    "PrinterError",
    "ReceiptData",
    "TransportKind",
]
