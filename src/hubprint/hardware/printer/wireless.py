"""Bluetooth LE thermal printer transport.

Writes ESC/POS data to the printer's GATT write characteristic.

Link constraints:
- Max payload per characteristic write: 512 bytes
- The printer drops data if chunks arrive back to back, so every chunk
  is followed by a fixed pause (50 ms default)
"""

import asyncio
import logging
from typing import Awaitable, Callable, Optional

from hubprint.core.errors import NotConnected
from hubprint.hardware.base import (
    CapabilityProvider,
    GattCharacteristic,
    GattDevice,
    TransportKind,
    WirelessSelection,
)
from hubprint.hardware.printer.link import LinkTransport
from hubprint.settings import WirelessSettings

logger = logging.getLogger(__name__)

Sleep = Callable[[float], Awaitable[None]]


def iter_chunks(data: bytes, chunk_size: int):
    """Split data into consecutive chunks of at most chunk_size bytes."""
    for start in range(0, len(data), chunk_size):
        yield data[start:start + chunk_size]


class WirelessTransport(LinkTransport):
    """Transport over a Bluetooth LE write characteristic."""

    def __init__(
        self,
        capabilities: CapabilityProvider,
        settings: Optional[WirelessSettings] = None,
        connect_timeout: Optional[float] = None,
        write_timeout: Optional[float] = None,
        sleep: Sleep = asyncio.sleep,
    ):
        super().__init__(capabilities, connect_timeout, write_timeout)
        self._settings = settings or WirelessSettings()
        self._sleep = sleep
        self._device: Optional[GattDevice] = None
        self._characteristic: Optional[GattCharacteristic] = None

    @property
    def kind(self) -> TransportKind:
        return TransportKind.WIRELESS

    @property
    def selection(self) -> WirelessSelection:
        return WirelessSelection(
            service_uuid=self._settings.service_uuid,
            name_prefixes=tuple(self._settings.name_prefixes),
            timeout=self._settings.scan_timeout,
        )

    def is_connected(self) -> bool:
        return (
            super().is_connected()
            and self._device is not None
            and self._device.is_connected()
        )

    async def _open(self) -> None:
        logger.info("Requesting Bluetooth printer...")
        device = await self._capabilities.request_wireless_device(self.selection)
        self._device = device
        logger.info(f"Selected: {device.name}")

        await device.connect()
        self._characteristic = await device.get_characteristic(
            self._settings.service_uuid,
            self._settings.characteristic_uuid,
        )

    async def _send(self, data: bytes) -> None:
        characteristic = self._characteristic
        if characteristic is None:
            # Link dropped between the state check and here
            raise NotConnected("Bluetooth characteristic not available")

        count = 0
        for chunk in iter_chunks(data, self._settings.chunk_size):
            await self._bounded(characteristic.write_value(chunk))
            await self._sleep(self._settings.pacing)
            count += 1

        logger.debug(f"Bluetooth write: {len(data)} bytes in {count} chunks")

    async def _release(self) -> None:
        device = self._device
        self._characteristic = None
        self._device = None

        if device is None:
            return

        try:
            await device.disconnect()
        except Exception as e:
            logger.warning(f"Bluetooth disconnect error (ignored): {e}")

    def _device_name(self) -> Optional[str]:
        return self._device.name if self._device else None
