"""
Abstract base classes for printer transports.

These interfaces define the contract that the real Bluetooth and serial
backends and the test doubles must follow. Transports never touch a
platform API directly; they go through a CapabilityProvider, which hands
out device handles.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from hubprint.core.state import TransportState


class TransportKind(Enum):
    """Physical link to the printer."""

    NONE = "none"
    WIRELESS = "wireless"
    SERIAL = "serial"


@dataclass(frozen=True)
class ConnectionInfo:
    """Snapshot of the current connection."""

    connected: bool
    transport_kind: TransportKind = TransportKind.NONE
    device_name: Optional[str] = None


DISCONNECTED_INFO = ConnectionInfo(connected=False)


@dataclass(frozen=True)
class WirelessSelection:
    """Which Bluetooth devices may be offered for selection."""

    service_uuid: str
    name_prefixes: tuple[str, ...] = ()
    timeout: float = 10.0

    def matches(self, name: Optional[str], service_uuids: list[str]) -> bool:
        """Check an advertised device against the filter."""
        if self.service_uuid.lower() in (uuid.lower() for uuid in service_uuids):
            return True
        return bool(name) and any(name.startswith(prefix) for prefix in self.name_prefixes)


@dataclass(frozen=True)
class SerialSelection:
    """Which serial ports may be offered for selection."""

    vendor_ids: tuple[int, ...] = field(default_factory=tuple)
    port: Optional[str] = None  # Explicit path, skips the vendor filter

    def matches(self, vendor_id: Optional[int]) -> bool:
        return vendor_id is not None and vendor_id in self.vendor_ids


class GattCharacteristic(ABC):
    """A writable GATT characteristic."""

    @abstractmethod
    async def write_value(self, data: bytes) -> None:
        """Write one chunk (at most the link's maximum payload)."""
        ...


class GattDevice(ABC):
    """A selected Bluetooth LE device."""

    @property
    @abstractmethod
    def name(self) -> Optional[str]:
        """Advertised device name."""
        ...

    @abstractmethod
    async def connect(self) -> None:
        """Open the GATT link."""
        ...

    @abstractmethod
    async def disconnect(self) -> None:
        """Close the GATT link."""
        ...

    @abstractmethod
    def is_connected(self) -> bool:
        """Check if the GATT link is up."""
        ...

    @abstractmethod
    async def get_characteristic(
        self, service_uuid: str, characteristic_uuid: str
    ) -> GattCharacteristic:
        """Resolve a characteristic on a primary service."""
        ...


class SerialWriter(ABC):
    """Exclusive writer on an open serial port."""

    @abstractmethod
    async def write(self, data: bytes) -> None:
        """Write the whole buffer."""
        ...

    @abstractmethod
    async def close(self) -> None:
        """Release the writer."""
        ...


class SerialPort(ABC):
    """A selected serial port."""

    @property
    @abstractmethod
    def name(self) -> Optional[str]:
        """Human-readable port name."""
        ...

    @abstractmethod
    async def open(self, baudrate: int, write_timeout: Optional[float] = None) -> None:
        """Open the port.

        write_timeout bounds each write inside the driver, None blocks.
        """
        ...

    @abstractmethod
    def get_writer(self) -> SerialWriter:
        """Get the exclusive writer for an open port."""
        ...

    @abstractmethod
    async def close(self) -> None:
        """Close the port."""
        ...


class CapabilityProvider(ABC):
    """Platform capabilities and device selection.

    Injected into transports so tests can replace real hardware.
    """

    @abstractmethod
    def wireless_available(self) -> bool:
        """Check if Bluetooth LE can be used."""
        ...

    @abstractmethod
    def serial_available(self) -> bool:
        """Check if serial ports can be used."""
        ...

    @abstractmethod
    async def request_wireless_device(self, selection: WirelessSelection) -> GattDevice:
        """
        Select a Bluetooth device matching the filter.

        Raises:
            SelectionCancelled: If no device was selected
        """
        ...

    @abstractmethod
    async def request_serial_port(self, selection: SerialSelection) -> SerialPort:
        """
        Select a serial port matching the filter.

        Raises:
            SelectionCancelled: If no port was selected
        """
        ...


class Transport(ABC):
    """Abstract base class for a printer link.

    Concurrent write() calls on one instance are not allowed; callers
    must await each write before starting the next.
    """

    @property
    @abstractmethod
    def kind(self) -> TransportKind:
        """Which link this transport drives."""
        ...

    @property
    @abstractmethod
    def state(self) -> TransportState:
        """Current connection state."""
        ...

    @abstractmethod
    async def connect(self) -> None:
        """
        Select a device and complete the handshake.

        Holds no resources if it fails.

        Raises:
            ConnectionFailure: If selection or handshake failed
        """
        ...

    @abstractmethod
    async def disconnect(self) -> None:
        """Release all held resources. Safe to call in any state."""
        ...

    @abstractmethod
    async def write(self, data: bytes) -> None:
        """
        Send bytes to the printer.

        Raises:
            NotConnected: If not in the CONNECTED state
            WriteFailure: If the hardware write failed
        """
        ...

    def is_connected(self) -> bool:
        """Check if the transport is connected."""
        return self.state == TransportState.CONNECTED

    @abstractmethod
    def get_info(self) -> ConnectionInfo:
        """Get a snapshot of the connection."""
        ...
