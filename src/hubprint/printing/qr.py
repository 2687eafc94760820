"""QR code sub-commands (GS ( k, function 165).

The printer renders the symbol itself; we only send the model, module
size, error-correction level, the stored payload and the print trigger.
"""

import logging

from hubprint.core.errors import OutOfRange, QrEncodingFailure
from hubprint.printing.commands import GS, Command, CommandKind

logger = logging.getLogger(__name__)

QR_PREFIX = GS + b'(k'

MIN_SIZE = 1
MAX_SIZE = 16
MIN_ERROR_CORRECTION = 0  # L
MAX_ERROR_CORRECTION = 3  # H

# cn=49 fn=80 m=48 precede the payload in the store command
STORE_HEADER_LENGTH = 3
MAX_STORE_LENGTH = 0xFFFF


def qr_length_prefix(payload_length: int) -> tuple[int, int]:
    """Compute the (pL, pH) length field for a stored payload.

    pL + 256 * pH == (payload_length + 3) mod 65536.
    """
    total = payload_length + STORE_HEADER_LENGTH
    return total % 256, (total // 256) % 256


def select_model() -> Command:
    """Select QR model 2."""
    return Command(QR_PREFIX + b'\x04\x00\x31\x41\x32\x00', CommandKind.QR_MODEL)


def select_size(size: int) -> Command:
    """Set module size in dots (1-16)."""
    if not MIN_SIZE <= size <= MAX_SIZE:
        raise OutOfRange(f"QR size must be {MIN_SIZE}..{MAX_SIZE}, got {size}")
    return Command(QR_PREFIX + b'\x03\x00\x31\x43' + bytes([size]), CommandKind.QR_SIZE)


def select_error_correction(level: int) -> Command:
    """Set error-correction level (0=L, 1=M, 2=Q, 3=H)."""
    if not MIN_ERROR_CORRECTION <= level <= MAX_ERROR_CORRECTION:
        raise OutOfRange(
            f"QR error correction must be {MIN_ERROR_CORRECTION}..{MAX_ERROR_CORRECTION}, got {level}"
        )
    return Command(
        QR_PREFIX + b'\x03\x00\x31\x45' + bytes([48 + level]),
        CommandKind.QR_ERROR_CORRECTION,
    )


def store_payload(payload: bytes) -> Command:
    """Store payload bytes in the symbol storage area."""
    if len(payload) + STORE_HEADER_LENGTH > MAX_STORE_LENGTH:
        raise QrEncodingFailure(
            f"QR payload of {len(payload)} bytes does not fit the length field"
        )
    p_l, p_h = qr_length_prefix(len(payload))
    return Command(
        QR_PREFIX + bytes([p_l, p_h]) + b'\x31\x50\x30' + payload,
        CommandKind.QR_STORE,
    )


def print_stored() -> Command:
    """Print the symbol in the storage area."""
    return Command(QR_PREFIX + b'\x03\x00\x31\x51\x30', CommandKind.QR_PRINT)


def build_qr_sequence(payload: str, size: int = 6, error_correction: int = 1) -> list[Command]:
    """Build the QR lifecycle for a payload.

    Args:
        payload: Data to encode (sent as UTF-8)
        size: Module size, 1-16
        error_correction: Level 0-3

    Returns:
        Model, size, error-correction, store and print commands, in order

    Raises:
        OutOfRange: If size or error_correction is invalid
        QrEncodingFailure: If the payload is too long to store
    """
    commands = [
        select_model(),
        select_size(size),
        select_error_correction(error_correction),
        store_payload(payload.encode("utf-8")),
        print_stored(),
    ]
    logger.debug(f"Built QR sequence for {len(payload)} chars at size {size}")
    return commands


def wifi_payload(ssid: str, password: str, security: str = "WPA") -> str:
    """Render a WiFi network QR payload.

    Format: WIFI:T:<SEC>;S:<SSID>;P:<PASSWORD>;;
    """
    return f"WIFI:T:{security};S:{ssid};P:{password};;"
