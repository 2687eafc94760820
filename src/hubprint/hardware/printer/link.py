"""Shared connection lifecycle for printer transports.

Subclasses supply the hardware steps (_open, _send, _release); this
class owns the state machine, the round-trip timeouts and the
translation of platform errors into the hubprint error types.
"""

import asyncio
import logging
from abc import abstractmethod
from typing import Awaitable, Optional, TypeVar

from hubprint.core.errors import ConnectionFailure, NotConnected, TransportError, WriteFailure
from hubprint.core.state import StateTracker, TransportState
from hubprint.hardware.base import CapabilityProvider, ConnectionInfo, Transport

logger = logging.getLogger(__name__)

T = TypeVar("T")


class LinkTransport(Transport):
    """Base for transports that hold one device link."""

    def __init__(
        self,
        capabilities: CapabilityProvider,
        connect_timeout: Optional[float] = None,
        write_timeout: Optional[float] = None,
    ):
        """Initialize the transport.

        Args:
            capabilities: Provider used for device selection
            connect_timeout: Limit for the whole connect, None to wait forever
            write_timeout: Limit per hardware write, None to wait forever
        """
        self._capabilities = capabilities
        self._connect_timeout = connect_timeout
        self._write_timeout = write_timeout
        self._tracker = StateTracker(self.__class__.__name__)

    @property
    def state(self) -> TransportState:
        return self._tracker.state

    async def connect(self) -> None:
        if self.state == TransportState.CONNECTED:
            return
        if not self._tracker.transition(TransportState.CONNECTING):
            raise ConnectionFailure(f"Cannot connect from state {self.state.name}")

        opened = False
        try:
            await asyncio.wait_for(self._open(), self._connect_timeout)
            opened = True
        except asyncio.TimeoutError as e:
            raise ConnectionFailure(
                f"{self.kind.value} connect timed out after {self._connect_timeout}s"
            ) from e
        except ConnectionFailure:
            raise
        except Exception as e:
            raise ConnectionFailure(f"{self.kind.value} connect failed: {e}") from e
        finally:
            if not opened:
                await self._release()
                self._tracker.transition(TransportState.DISCONNECTED)

        self._tracker.transition(TransportState.CONNECTED)
        logger.info(f"Printer connected over {self.kind.value}: {self._device_name()}")

    async def disconnect(self) -> None:
        was_connected = self.state != TransportState.DISCONNECTED
        try:
            await self._release()
        finally:
            self._tracker.transition(TransportState.DISCONNECTED)

        if was_connected:
            logger.info(f"Printer disconnected ({self.kind.value})")

    async def write(self, data: bytes) -> None:
        if not self.is_connected():
            raise NotConnected(f"{self.kind.value} transport is not connected")

        try:
            await self._send(data)
        except TransportError:
            raise
        except asyncio.TimeoutError as e:
            raise WriteFailure(
                f"{self.kind.value} write timed out after {self._write_timeout}s"
            ) from e
        except Exception as e:
            raise WriteFailure(f"{self.kind.value} write failed: {e}") from e

    def get_info(self) -> ConnectionInfo:
        connected = self.is_connected()
        return ConnectionInfo(
            connected=connected,
            transport_kind=self.kind,
            device_name=self._device_name() if connected else None,
        )

    async def _bounded(self, operation: Awaitable[T]) -> T:
        """Run one hardware write round-trip under the write timeout."""
        return await asyncio.wait_for(operation, self._write_timeout)

    @abstractmethod
    async def _open(self) -> None:
        """Select the device and acquire its handles."""
        ...

    @abstractmethod
    async def _send(self, data: bytes) -> None:
        """Push bytes over the held link."""
        ...

    @abstractmethod
    async def _release(self) -> None:
        """Drop every held handle. Must not raise."""
        ...

    @abstractmethod
    def _device_name(self) -> Optional[str]:
        ...
