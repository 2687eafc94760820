"""Hardware abstraction layer for hubprint."""

from .base import (
    Transport,
    TransportKind,
    ConnectionInfo,
    CapabilityProvider,
    GattDevice,
    GattCharacteristic,
    SerialPort,
    SerialWriter,
    WirelessSelection,
    SerialSelection,
)
from .capabilities import SystemCapabilities

__all__ = [
    # Base classes
    "Transport",
    "TransportKind",
    "ConnectionInfo",
    "CapabilityProvider",
    "GattDevice",
    "GattCharacteristic",
    "SerialPort",
    "SerialWriter",
    "WirelessSelection",
    "SerialSelection",
    # Platform provider
    "SystemCapabilities",
]
