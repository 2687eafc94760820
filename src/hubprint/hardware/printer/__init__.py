"""Printer transports for hubprint."""

import logging
from typing import Optional

from hubprint.core.errors import UnsupportedTransport
from hubprint.hardware.base import CapabilityProvider, Transport, TransportKind
from hubprint.hardware.printer.serial_port import SerialTransport
from hubprint.hardware.printer.wireless import WirelessTransport
from hubprint.settings import Settings, get_settings

logger = logging.getLogger(__name__)


def create_transport(
    kind: TransportKind,
    capabilities: CapabilityProvider,
    settings: Optional[Settings] = None,
) -> Transport:
    """Factory function to create a fresh, disconnected transport.

    Args:
        kind: Which link to drive
        capabilities: Provider used for device selection
        settings: Application settings (defaults to get_settings())

    Returns:
        Transport instance
    """
    settings = settings or get_settings()

    if kind == TransportKind.WIRELESS:
        return WirelessTransport(
            capabilities,
            settings.wireless,
            connect_timeout=settings.connect_timeout,
            write_timeout=settings.write_timeout,
        )
    if kind == TransportKind.SERIAL:
        return SerialTransport(
            capabilities,
            settings.serial,
            connect_timeout=settings.connect_timeout,
            write_timeout=settings.write_timeout,
        )
    raise UnsupportedTransport(f"No transport for kind {kind.value}")


__all__ = [
    "Transport",
    "WirelessTransport",
    "SerialTransport",
    "create_transport",
]
