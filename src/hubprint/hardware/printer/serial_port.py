"""USB/serial thermal printer transport.

Communicates with ESC/POS receipt printers over a USB CDC or UART serial
port. The port's own flow control is enough, so each write goes out as a
single call without chunking.

Port settings:
- Baud: 9600 (default, configurable)
- Selection: known USB vendor ids, or an explicit port path
"""

import logging
from typing import Optional

from hubprint.core.errors import NotConnected
from hubprint.hardware.base import (
    CapabilityProvider,
    SerialPort,
    SerialSelection,
    SerialWriter,
    TransportKind,
)
from hubprint.hardware.printer.link import LinkTransport
from hubprint.settings import SerialSettings

logger = logging.getLogger(__name__)


class SerialTransport(LinkTransport):
    """Transport over a serial port."""

    def __init__(
        self,
        capabilities: CapabilityProvider,
        settings: Optional[SerialSettings] = None,
        connect_timeout: Optional[float] = None,
        write_timeout: Optional[float] = None,
    ):
        super().__init__(capabilities, connect_timeout, write_timeout)
        self._settings = settings or SerialSettings()
        self._port: Optional[SerialPort] = None
        self._writer: Optional[SerialWriter] = None

    @property
    def kind(self) -> TransportKind:
        return TransportKind.SERIAL

    @property
    def selection(self) -> SerialSelection:
        return SerialSelection(
            vendor_ids=tuple(self._settings.vendor_ids),
            port=self._settings.port,
        )

    def is_connected(self) -> bool:
        return super().is_connected() and self._writer is not None

    async def _open(self) -> None:
        logger.info("Requesting USB printer...")
        port = await self._capabilities.request_serial_port(self.selection)
        self._port = port
        logger.info(f"Port selected: {port.name}")

        await port.open(self._settings.baudrate, write_timeout=self._write_timeout)
        self._writer = port.get_writer()

    async def _send(self, data: bytes) -> None:
        writer = self._writer
        if writer is None:
            raise NotConnected("Serial writer not available")

        # Bounded by the driver write timeout set at open
        await writer.write(data)
        logger.debug(f"Serial write: {len(data)} bytes")

    async def _release(self) -> None:
        writer, port = self._writer, self._port
        self._writer = None
        self._port = None

        # Writer first, then the port
        if writer is not None:
            try:
                await writer.close()
            except Exception as e:
                logger.warning(f"Serial writer close error (ignored): {e}")

        if port is not None:
            try:
                await port.close()
            except Exception as e:
                logger.warning(f"Serial port close error (ignored): {e}")

    def _device_name(self) -> Optional[str]:
        if self._port is None:
            return None
        return self._port.name or "USB Printer"
