"""Connection manager for hubprint receipt printers."""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime
from functools import partial
from typing import Awaitable, Callable, List, Optional

from hubprint.core.errors import NotConnected, PrinterError, UnsupportedTransport, WriteFailure
from hubprint.hardware.base import (
    DISCONNECTED_INFO,
    CapabilityProvider,
    ConnectionInfo,
    Transport,
    TransportKind,
)
from hubprint.hardware.capabilities import SystemCapabilities
from hubprint.hardware.printer import create_transport
from hubprint.printing.commands import Command, CommandKind
from hubprint.printing.receipt import ReceiptData, ReceiptFormatter, sample_receipt
from hubprint.settings import Settings, get_settings

logger = logging.getLogger(__name__)

TransportFactory = Callable[[TransportKind], Transport]


class ConnectionManager:
    """Owns at most one printer transport and prints receipts through it.

    Calls are expected one at a time: connect, print and disconnect must
    not overlap on the same manager.
    """

    def __init__(
        self,
        capabilities: Optional[CapabilityProvider] = None,
        settings: Optional[Settings] = None,
        formatter: Optional[ReceiptFormatter] = None,
        transport_factory: Optional[TransportFactory] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._settings = settings or get_settings()
        self._capabilities = capabilities or SystemCapabilities(
            wireless_enabled=self._settings.wireless_enabled,
            serial_enabled=self._settings.serial_enabled,
        )
        self._formatter = formatter or ReceiptFormatter(self._settings.receipt, clock=clock)
        self._transport_factory = transport_factory or partial(
            create_transport,
            capabilities=self._capabilities,
            settings=self._settings,
        )
        self._sleep = sleep
        self._clock = clock
        self._transport: Optional[Transport] = None

    def is_wireless_supported(self) -> bool:
        """Check if Bluetooth printing is possible here."""
        return self._capabilities.wireless_available()

    def is_serial_supported(self) -> bool:
        """Check if USB/serial printing is possible here."""
        return self._capabilities.serial_available()

    @property
    def is_connected(self) -> bool:
        return self._transport is not None and self._transport.is_connected()

    def get_connection_info(self) -> ConnectionInfo:
        """Get a snapshot of the current connection."""
        if not self.is_connected:
            return DISCONNECTED_INFO
        return self._transport.get_info()

    async def connect(self, kind: Optional[TransportKind] = None) -> ConnectionInfo:
        """Connect to a printer.

        Any previous transport is fully released first.

        Args:
            kind: Transport to use, or None to try Bluetooth then serial

        Returns:
            Connection snapshot

        Raises:
            UnsupportedTransport: If the requested (or any) transport is unavailable
            ConnectionFailure: If the handshake failed
        """
        await self.disconnect()

        if kind is None:
            transport = await self._auto_connect()
        else:
            transport = await self._connect_kind(kind)

        self._transport = transport
        return self.get_connection_info()

    async def disconnect(self) -> None:
        """Disconnect from the printer. Safe to call at any time."""
        transport = self._transport
        self._transport = None
        if transport is not None:
            await transport.disconnect()

    async def print(self, receipt: ReceiptData) -> None:
        """Print a receipt.

        Args:
            receipt: Receipt to print

        Raises:
            NotConnected: If no printer is connected
            TransportError: If a non-QR write failed
        """
        transport = self._require_transport()
        commands = self._formatter.format(receipt)

        try:
            await self._write_commands(transport, commands)
        except PrinterError as e:
            logger.error(f"Print failed: {e}")
            raise

        logger.info(f"Receipt printed: session {receipt.session_id}")

    async def print_test(self) -> None:
        """Print a sample receipt."""
        await self.print(sample_receipt(self._clock()))

    def _require_transport(self) -> Transport:
        transport = self._transport
        if transport is None or not transport.is_connected():
            raise NotConnected("Printer not connected. Please connect first.")
        return transport

    async def _auto_connect(self) -> Transport:
        wireless = self.is_wireless_supported()
        serial = self.is_serial_supported()

        if not wireless and not serial:
            raise UnsupportedTransport("No supported printer connection method available")

        if wireless:
            try:
                return await self._connect_kind(TransportKind.WIRELESS)
            except PrinterError as e:
                if not serial:
                    raise
                logger.info(f"Bluetooth failed ({e}), trying USB...")

        return await self._connect_kind(TransportKind.SERIAL)

    async def _connect_kind(self, kind: TransportKind) -> Transport:
        if kind == TransportKind.WIRELESS and not self.is_wireless_supported():
            raise UnsupportedTransport("Bluetooth printing is not supported here")
        if kind == TransportKind.SERIAL and not self.is_serial_supported():
            raise UnsupportedTransport("Serial printing is not supported here")

        transport = self._transport_factory(kind)
        await transport.connect()
        return transport

    async def _write_commands(self, transport: Transport, commands: List[Command]) -> None:
        """Write commands in order.

        A failed QR write drops the rest of that QR sequence; everything
        else is sent.
        """
        skipping_qr = False

        for command in commands:
            if not command.is_qr:
                skipping_qr = False
                await transport.write(command.data)
                continue

            if skipping_qr:
                continue

            try:
                await transport.write(command.data)
            except WriteFailure as e:
                logger.warning(f"QR code print failed, continuing receipt: {e}")
                skipping_qr = True
                continue

            if command.kind == CommandKind.QR_STORE:
                # Let the printer finish storing before the print trigger
                await self._sleep(self._settings.receipt.qr_store_delay)
