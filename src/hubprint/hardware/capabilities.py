"""Platform capability provider backed by bleak and pyserial.

Bluetooth:
- Scans with BleakScanner for a device advertising the printer service
  or carrying a known name prefix
- Writes through BleakClient.write_gatt_char

Serial:
- Lists ports with pyserial and picks the first known USB vendor id
- Blocking pyserial calls run in a worker thread

Override the port with HUBPRINT_SERIAL__PORT=/dev/ttyUSB0
"""

import asyncio
import logging
import threading
from typing import Optional

from hubprint.core.errors import ConnectionFailure, NotConnected, SelectionCancelled, WriteFailure
from hubprint.hardware.base import (
    CapabilityProvider,
    GattCharacteristic,
    GattDevice,
    SerialPort,
    SerialSelection,
    SerialWriter,
    WirelessSelection,
)

logger = logging.getLogger(__name__)

# Check if bleak is available
try:
    from bleak import BleakClient, BleakScanner
    from bleak.backends.characteristic import BleakGATTCharacteristic
    from bleak.backends.device import BLEDevice
    from bleak.backends.scanner import AdvertisementData
    from bleak.exc import BleakError
    BLEAK_AVAILABLE = True
except ImportError:
    BLEAK_AVAILABLE = False
    logger.debug("bleak not available - Bluetooth printing requires: pip install bleak")

# Check if pyserial is available
try:
    import serial
    from serial.tools import list_ports
    PYSERIAL_AVAILABLE = True
except ImportError:
    PYSERIAL_AVAILABLE = False
    logger.debug("pyserial not available - USB printing requires: pip install pyserial")


class BleakCharacteristic(GattCharacteristic):
    """Write characteristic on a connected BleakClient."""

    def __init__(self, client: "BleakClient", characteristic: "BleakGATTCharacteristic"):
        self._client = client
        self._characteristic = characteristic

    async def write_value(self, data: bytes) -> None:
        # Prefer acknowledged writes when the printer supports them
        response = "write" in self._characteristic.properties
        await self._client.write_gatt_char(self._characteristic, data, response=response)


class BleakDevice(GattDevice):
    """A scanned BLE printer."""

    def __init__(self, device: "BLEDevice"):
        self._device = device
        self._client: Optional["BleakClient"] = None

    @property
    def name(self) -> Optional[str]:
        return self._device.name

    async def connect(self) -> None:
        client = BleakClient(self._device)
        # Held before connecting so a cancelled connect is still torn down
        self._client = client
        try:
            await client.connect()
        except BleakError as e:
            raise ConnectionFailure(f"GATT connect to {self.name} failed: {e}") from e
        logger.info("Connected to GATT server")

    async def disconnect(self) -> None:
        client = self._client
        self._client = None
        if client is not None:
            await client.disconnect()

    def is_connected(self) -> bool:
        return self._client is not None and self._client.is_connected

    async def get_characteristic(
        self, service_uuid: str, characteristic_uuid: str
    ) -> GattCharacteristic:
        if self._client is None:
            raise ConnectionFailure("GATT link is not open")

        service = self._client.services.get_service(service_uuid)
        if service is None:
            raise ConnectionFailure(f"Printer service {service_uuid} not found on {self.name}")

        characteristic = service.get_characteristic(characteristic_uuid)
        if characteristic is None:
            raise ConnectionFailure(
                f"Write characteristic {characteristic_uuid} not found on {self.name}"
            )
        return BleakCharacteristic(self._client, characteristic)


class PySerialWriter(SerialWriter):
    """Writer bound to one open pyserial handle.

    The write timeout lives in pyserial (write_timeout on the handle), so a
    slow write fails in its own thread instead of being abandoned there.
    Writes hold a lock, so a thread left running by a cancelled caller
    still finishes before the next write starts.
    """

    def __init__(self, handle: "serial.Serial"):
        self._serial = handle
        self._closed = False
        self._lock = threading.Lock()

    @property
    def closed(self) -> bool:
        return self._closed

    async def write(self, data: bytes) -> None:
        if self._closed:
            raise NotConnected("Serial writer is closed")
        await asyncio.to_thread(self._write_all, data)

    def _write_all(self, data: bytes) -> None:
        with self._lock:
            try:
                self._serial.write(data)
            except serial.SerialTimeoutException as e:
                raise WriteFailure(
                    f"Serial write timed out after {self._serial.write_timeout}s"
                ) from e
            except serial.SerialException as e:
                raise WriteFailure(f"Serial write failed: {e}") from e

    async def close(self) -> None:
        self._closed = True


class PySerialPort(SerialPort):
    """A serial port opened through pyserial."""

    def __init__(self, device: str, description: Optional[str] = None):
        self._device = device
        self._description = description
        self._serial: Optional["serial.Serial"] = None
        self._writer: Optional[PySerialWriter] = None

    @property
    def name(self) -> Optional[str]:
        return self._description or self._device

    async def open(self, baudrate: int, write_timeout: Optional[float] = None) -> None:
        try:
            self._serial = await asyncio.to_thread(
                serial.Serial,
                port=self._device,
                baudrate=baudrate,
                bytesize=serial.EIGHTBITS,
                parity=serial.PARITY_NONE,
                stopbits=serial.STOPBITS_ONE,
                timeout=2.0,
                write_timeout=write_timeout,
            )
        except serial.SerialException as e:
            raise ConnectionFailure(f"Failed to open {self._device}: {e}") from e
        logger.info(f"Serial port {self._device} opened at {baudrate} baud")

    def get_writer(self) -> SerialWriter:
        if self._serial is None or not self._serial.is_open:
            raise NotConnected(f"Serial port {self._device} is not open")
        if self._writer is not None and not self._writer.closed:
            raise ConnectionFailure(f"Serial port {self._device} writer is already in use")
        self._writer = PySerialWriter(self._serial)
        return self._writer

    async def close(self) -> None:
        handle = self._serial
        self._serial = None
        self._writer = None
        if handle is not None and handle.is_open:
            await asyncio.to_thread(handle.close)


class SystemCapabilities(CapabilityProvider):
    """Capabilities of the machine we are running on."""

    def __init__(self, wireless_enabled: bool = True, serial_enabled: bool = True):
        self._wireless_enabled = wireless_enabled
        self._serial_enabled = serial_enabled

    def wireless_available(self) -> bool:
        return self._wireless_enabled and BLEAK_AVAILABLE

    def serial_available(self) -> bool:
        return self._serial_enabled and PYSERIAL_AVAILABLE

    async def request_wireless_device(self, selection: WirelessSelection) -> GattDevice:
        def accept(device: "BLEDevice", adv: "AdvertisementData") -> bool:
            return selection.matches(device.name or adv.local_name, adv.service_uuids)

        try:
            device = await BleakScanner.find_device_by_filter(accept, timeout=selection.timeout)
        except BleakError as e:
            raise ConnectionFailure(f"Bluetooth scan failed: {e}") from e

        if device is None:
            raise SelectionCancelled(
                f"No Bluetooth printer found within {selection.timeout}s"
            )
        return BleakDevice(device)

    async def request_serial_port(self, selection: SerialSelection) -> SerialPort:
        if selection.port:
            logger.info(f"Using printer port from settings: {selection.port}")
            return PySerialPort(selection.port)

        ports = await asyncio.to_thread(list_ports.comports)
        for info in sorted(ports, key=lambda p: p.device):
            if selection.matches(info.vid):
                logger.info(f"Auto-detected serial printer: {info.device} ({info.description})")
                return PySerialPort(info.device, info.product or info.description)

        wanted = ", ".join(f"0x{vid:04x}" for vid in selection.vendor_ids)
        raise SelectionCancelled(f"No serial printer with vendor id in [{wanted}]")
