from dataclasses import replace

from hubprint.printing import commands
from hubprint.printing.commands import Alignment, CommandKind
from hubprint.printing.receipt import ReceiptFormatter, sample_receipt
from hubprint.settings import ReceiptSettings

from fakes import FIXED_NOW


def make_formatter(**overrides) -> ReceiptFormatter:
    return ReceiptFormatter(ReceiptSettings(**overrides), clock=lambda: FIXED_NOW)


def texts(command_list):
    return [c.data.decode("utf-8") for c in command_list if c.kind == CommandKind.TEXT]


def qr_commands(command_list):
    return [c for c in command_list if c.is_qr]


def test_header_order(receipt):
    out = make_formatter().format(receipt)

    assert out[0] == commands.initialize()
    assert out[1] == commands.set_alignment(Alignment.CENTER)
    assert commands.set_emphasis(True) in out[:4]
    assert out[4].data == b"Sunny Side Up"
    assert out[5] == commands.line_feed()
    assert out[6].data == b"Work + Study"
    assert out[7] == commands.line_feed()
    assert out[8] == commands.set_emphasis(False)
    assert out[-1] == commands.cut_paper()


def test_field_order(receipt):
    lines = texts(make_formatter().format(receipt))

    expected = [
        "Sunny Side Up",
        "Work + Study",
        "12 Mango St",
        "=" * 32,
        "Session: a1b2c3d4",
        "Customer: Ana Cruz",
        "Table: T-07",
        "Start: 03/01/2024, 02:00:00 PM",
        "End: 03/01/2024, 04:00:00 PM",
        "Package: 2-Hour Pass",
        "-" * 32,
        "TOTAL: PHP 100.00",
        "Payment: GCash",
        "=" * 32,
        "Thank you for studying with us!",
        "03/01/2024, 06:30:00 PM",
    ]
    assert lines == expected


def test_total_without_wifi_has_no_qr(receipt):
    out = make_formatter().format(receipt)

    assert "TOTAL: PHP 100.00" in texts(out)
    assert qr_commands(out) == []
    assert "WiFi Access" not in texts(out)


def test_optional_fields_absent(receipt):
    bare = replace(receipt, address=None, payment_method=None, package=None)
    lines = texts(make_formatter().format(bare))

    assert "12 Mango St" not in lines
    assert not any(line.startswith("Payment:") for line in lines)
    assert "Package: N/A" in lines


def test_package_is_emphasized(receipt):
    out = make_formatter().format(receipt)
    index = next(i for i, c in enumerate(out) if c.data == b"Package: 2-Hour Pass")
    assert out[index - 1] == commands.set_emphasis(True)
    assert out[index + 1] == commands.set_emphasis(False)


def test_wifi_block(receipt):
    out = make_formatter().format(replace(receipt, wifi_password="s3cret"))
    lines = texts(out)

    assert lines.index("WiFi Access") < lines.index("Password: s3cret") < lines.index("Scan to connect:")

    qr = qr_commands(out)
    assert [c.kind for c in qr] == [
        CommandKind.QR_MODEL,
        CommandKind.QR_SIZE,
        CommandKind.QR_ERROR_CORRECTION,
        CommandKind.QR_STORE,
        CommandKind.QR_PRINT,
    ]
    store = qr[3]
    assert store.data[8:] == b"WIFI:T:WPA;S:Sunny Side Up Work + Study;P:s3cret;;"
    assert qr[1].data[-1] == 6
    assert qr[2].data[-1] == 48 + 1

    # QR sits between the prompt and the footer
    first_qr = out.index(qr[0])
    thank_you = next(i for i, c in enumerate(out) if c.data == b"Thank you for studying with us!")
    assert first_qr < thank_you


def test_qr_defaults_to_wifi_payload(receipt):
    out = make_formatter().format(replace(receipt, wifi_password="pw", qr_data=None))
    store = qr_commands(out)[3]
    payload = b"WIFI:T:WPA;S:Sunny Side Up Work + Study;P:pw;;"
    assert store.data == b'\x1d(k' + bytes([len(payload) + 3, 0]) + b'\x31\x50\x30' + payload


def test_qr_override_payload(receipt):
    out = make_formatter().format(replace(receipt, wifi_password="pw", qr_data="https://hub.example/wifi"))
    store = qr_commands(out)[3]
    assert store.data.endswith(b"https://hub.example/wifi")
    assert b"WIFI:" not in store.data


def test_qr_settings_are_used(receipt):
    out = make_formatter(qr_size=8, qr_error_correction=3, network_label="Hub").format(
        replace(receipt, wifi_password="pw")
    )
    qr = qr_commands(out)
    assert qr[1].data[-1] == 8
    assert qr[2].data[-1] == 48 + 3
    assert qr[3].data.endswith(b"WIFI:T:WPA;S:Hub;P:pw;;")


def test_invalid_qr_size_skips_qr_only(receipt, caplog):
    formatter = ReceiptFormatter(ReceiptSettings.model_construct(qr_size=40), clock=lambda: FIXED_NOW)
    out = formatter.format(replace(receipt, wifi_password="pw"))

    assert qr_commands(out) == []
    assert "Password: pw" in texts(out)
    assert out[-1] == commands.cut_paper()
    assert "Skipping WiFi QR code" in caplog.text


def test_session_id_is_truncated(receipt):
    lines = texts(make_formatter(session_prefix_length=4).format(receipt))
    assert "Session: a1b2" in lines


def test_sample_receipt():
    sample = sample_receipt(FIXED_NOW)
    assert sample.store_name == "STUDY HUB"
    assert sample.table_id == "T-01"
    assert sample.wifi_password == "test1234"
    assert (sample.end_time - sample.start_time).total_seconds() == 2 * 3600
    assert sample.session_id.startswith("TEST-")
