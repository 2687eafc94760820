import asyncio

import pytest

from hubprint.core.errors import ConnectionFailure, NotConnected, SelectionCancelled, WriteFailure
from hubprint.core.state import TransportState
from hubprint.hardware.base import TransportKind, WirelessSelection
from hubprint.hardware.printer.wireless import WirelessTransport, iter_chunks
from hubprint.settings import WirelessSettings

from fakes import FakeCapabilities, FakeCharacteristic, SleepRecorder


def make_transport(capabilities, **kwargs):
    sleep = SleepRecorder(capabilities.device.log)
    transport = WirelessTransport(capabilities, WirelessSettings(), sleep=sleep, **kwargs)
    return transport, sleep


def test_iter_chunks():
    assert [len(c) for c in iter_chunks(b"x" * 1100, 512)] == [512, 512, 76]
    assert list(iter_chunks(b"", 512)) == []


def test_selection_filter():
    selection = WirelessSelection(
        service_uuid="000018f0-0000-1000-8000-00805f9b34fb",
        name_prefixes=("RPP", "Printer"),
    )
    assert selection.matches("RPP02N", [])
    assert selection.matches("Printer-58", [])
    assert selection.matches(None, ["000018F0-0000-1000-8000-00805F9B34FB"])
    assert not selection.matches("Headphones", ["0000180f-0000-1000-8000-00805f9b34fb"])
    assert not selection.matches(None, [])


@pytest.mark.asyncio
async def test_connect_and_info(capabilities):
    transport, _ = make_transport(capabilities)

    await transport.connect()

    assert transport.is_connected()
    assert transport.state == TransportState.CONNECTED
    info = transport.get_info()
    assert info.connected
    assert info.transport_kind == TransportKind.WIRELESS
    assert info.device_name == "RPP02N"


@pytest.mark.asyncio
async def test_write_1100_bytes_in_three_paced_chunks(capabilities):
    transport, sleep = make_transport(capabilities)
    await transport.connect()

    await transport.write(bytes(range(256)) * 4 + b"z" * 76)

    characteristic = capabilities.device.characteristic
    assert [len(c) for c in characteristic.writes] == [512, 512, 76]
    assert b"".join(characteristic.writes) == bytes(range(256)) * 4 + b"z" * 76
    assert sleep.delays == [0.05, 0.05, 0.05]
    assert capabilities.device.log == [
        ("write", 512), ("sleep", 0.05),
        ("write", 512), ("sleep", 0.05),
        ("write", 76), ("sleep", 0.05),
    ]


@pytest.mark.asyncio
@pytest.mark.parametrize("size", [0, 1, 511, 512, 513, 1024, 5000])
async def test_chunk_count(capabilities, size):
    transport, _ = make_transport(capabilities)
    await transport.connect()

    await transport.write(b"a" * size)

    writes = capabilities.device.characteristic.writes
    assert len(writes) == -(-size // 512)
    assert all(len(w) <= 512 for w in writes)


@pytest.mark.asyncio
async def test_write_before_connect_fails(capabilities):
    transport, _ = make_transport(capabilities)

    with pytest.raises(NotConnected):
        await transport.write(b"data")
    assert capabilities.device.characteristic.writes == []


@pytest.mark.asyncio
async def test_write_after_link_drop_fails(capabilities):
    transport, _ = make_transport(capabilities)
    await transport.connect()
    capabilities.device.connected = False

    assert not transport.is_connected()
    with pytest.raises(NotConnected):
        await transport.write(b"data")


@pytest.mark.asyncio
async def test_characteristic_error_becomes_write_failure(capabilities):
    transport, _ = make_transport(capabilities)
    await transport.connect()
    capabilities.device.characteristic.fail = True

    with pytest.raises(WriteFailure):
        await transport.write(b"data")
    assert transport.is_connected()


@pytest.mark.asyncio
async def test_selection_cancelled(capabilities):
    capabilities.cancel_wireless = True
    transport, _ = make_transport(capabilities)

    with pytest.raises(SelectionCancelled):
        await transport.connect()

    assert isinstance(SelectionCancelled("x"), ConnectionFailure)
    assert transport.state == TransportState.DISCONNECTED
    assert transport.get_info().connected is False


@pytest.mark.asyncio
async def test_failed_handshake_releases_device(capabilities):
    capabilities.device.fail_connect = True
    transport, _ = make_transport(capabilities)

    with pytest.raises(ConnectionFailure):
        await transport.connect()

    assert transport.state == TransportState.DISCONNECTED
    assert capabilities.device.disconnect_calls == 1
    assert transport.get_info().device_name is None


@pytest.mark.asyncio
async def test_connect_timeout(capabilities):
    class SlowCapabilities(FakeCapabilities):
        async def request_wireless_device(self, selection):
            await asyncio.sleep(10)

    transport = WirelessTransport(SlowCapabilities(), connect_timeout=0.01)

    with pytest.raises(ConnectionFailure, match="timed out"):
        await transport.connect()
    assert transport.state == TransportState.DISCONNECTED


@pytest.mark.asyncio
async def test_write_timeout(capabilities):
    class StuckCharacteristic(FakeCharacteristic):
        async def write_value(self, data):
            await asyncio.sleep(10)

    capabilities.device.characteristic = StuckCharacteristic([])
    transport, _ = make_transport(capabilities, write_timeout=0.01)
    await transport.connect()

    with pytest.raises(WriteFailure, match="timed out"):
        await transport.write(b"data")
    assert transport.is_connected()


@pytest.mark.asyncio
async def test_disconnect_is_idempotent(capabilities):
    transport, _ = make_transport(capabilities)

    await transport.disconnect()
    await transport.connect()
    await transport.disconnect()
    await transport.disconnect()

    assert not transport.is_connected()
    assert capabilities.device.disconnect_calls == 1


@pytest.mark.asyncio
async def test_disconnect_tolerates_link_errors(capabilities):
    transport, _ = make_transport(capabilities)
    await transport.connect()
    capabilities.device.fail_disconnect = True

    await transport.disconnect()

    assert transport.state == TransportState.DISCONNECTED
    with pytest.raises(NotConnected):
        await transport.write(b"x")
