"""Printing module for hubprint - ESC/POS receipt generation."""

from hubprint.printing.commands import Command, CommandKind, Alignment, TextSize
from hubprint.printing.qr import build_qr_sequence, wifi_payload
from hubprint.printing.receipt import ReceiptData, ReceiptFormatter, sample_receipt
from hubprint.printing.manager import ConnectionManager

__all__ = [
    # Commands
    "Command",
    "CommandKind",
    "Alignment",
    "TextSize",
    "build_qr_sequence",
    "wifi_payload",
    # Receipt
    "ReceiptData",
    "ReceiptFormatter",
    "sample_receipt",
    "ConnectionManager",
]
