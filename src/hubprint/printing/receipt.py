"""Receipt formatter for study hub sessions.

Turns a ReceiptData value into the ordered command list for one receipt:
- Store header and optional address
- Session, customer and table details
- Start/end times and package
- Total and payment method
- WiFi access block with a QR code (only when a password is given)
- Footer with timestamp, then cut
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Callable, List, Optional, Union

from hubprint.core.errors import OutOfRange, QrEncodingFailure
from hubprint.printing import commands
from hubprint.printing.commands import Alignment, Command, TextSize
from hubprint.printing.qr import build_qr_sequence, wifi_payload
from hubprint.settings import ReceiptSettings

logger = logging.getLogger(__name__)

Amount = Union[int, float, Decimal]


@dataclass(frozen=True)
class ReceiptData:
    """Everything printed on one session receipt.

    qr_data, when set, replaces the default WiFi QR payload
    (WIFI:T:WPA;S:<network label>;P:<wifi_password>;;). The WiFi block and
    its QR code still print only when wifi_password is set.
    """

    store_name: str
    session_id: str
    customer_name: str
    table_id: str
    start_time: datetime
    end_time: datetime
    hours: float
    rate: Amount
    total_amount: Amount
    address: Optional[str] = None
    payment_method: Optional[str] = None
    wifi_password: Optional[str] = None
    qr_data: Optional[str] = None
    package: Optional[str] = None


def sample_receipt(now: Optional[datetime] = None) -> ReceiptData:
    """Sample receipt used to check a freshly connected printer."""
    now = now or datetime.now()
    return ReceiptData(
        store_name="STUDY HUB",
        address="Test Location",
        session_id=f"TEST-{int(now.timestamp() * 1000)}",
        customer_name="Test User",
        table_id="T-01",
        start_time=now - timedelta(hours=2),
        end_time=now,
        hours=2,
        rate=50,
        total_amount=100,
        payment_method="Cash",
        wifi_password="test1234",
    )


class ReceiptFormatter:
    """Formats receipts into ESC/POS command lists.

    The formatter only builds commands; writing them is up to the
    connection manager.
    """

    def __init__(
        self,
        settings: Optional[ReceiptSettings] = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self._settings = settings or ReceiptSettings()
        self._clock = clock

    def format(self, receipt: ReceiptData) -> List[Command]:
        """Format a receipt.

        Args:
            receipt: Receipt to print

        Returns:
            Commands in emission order
        """
        out: List[Command] = []

        self._add_header(out, receipt)
        self._add_session(out, receipt)
        self._add_total(out, receipt)

        if receipt.wifi_password:
            self._add_wifi(out, receipt.wifi_password, receipt.qr_data)

        self._add_footer(out)

        logger.debug(
            f"Formatted receipt for session {receipt.session_id}: "
            f"{len(out)} commands, {sum(len(c) for c in out)} bytes"
        )
        return out

    def _text(self, value: str) -> Command:
        return commands.text(value, self._settings.encoding)

    def _line(self, out: List[Command], value: str) -> None:
        out.append(self._text(value))
        out.append(commands.line_feed())

    def _divider(self, char: str) -> str:
        return char * self._settings.divider_width

    def _timestamp(self, value: datetime) -> str:
        return value.strftime(self._settings.timestamp_format)

    def _add_header(self, out: List[Command], receipt: ReceiptData) -> None:
        out.append(commands.initialize())
        out.append(commands.set_alignment(Alignment.CENTER))
        out.append(commands.set_size(TextSize.NORMAL))
        out.append(commands.set_emphasis(True))
        self._line(out, receipt.store_name)
        self._line(out, self._settings.tagline)
        out.append(commands.set_emphasis(False))

        if receipt.address:
            self._line(out, receipt.address)

        self._line(out, self._divider("="))
        out.append(commands.set_alignment(Alignment.LEFT))

    def _add_session(self, out: List[Command], receipt: ReceiptData) -> None:
        session = receipt.session_id[:self._settings.session_prefix_length]
        out.append(commands.line_feed())
        self._line(out, f"Session: {session}")
        self._line(out, f"Customer: {receipt.customer_name}")
        self._line(out, f"Table: {receipt.table_id}")
        out.append(commands.line_feed())

        self._line(out, f"Start: {self._timestamp(receipt.start_time)}")
        self._line(out, f"End: {self._timestamp(receipt.end_time)}")

        package = receipt.package or self._settings.package_placeholder
        out.append(commands.set_emphasis(True))
        out.append(self._text(f"Package: {package}"))
        out.append(commands.set_emphasis(False))
        out.append(commands.line_feed())
        out.append(commands.line_feed())

    def _add_total(self, out: List[Command], receipt: ReceiptData) -> None:
        self._line(out, self._divider("-"))
        out.append(commands.set_alignment(Alignment.CENTER))
        out.append(commands.set_emphasis(True))
        out.append(self._text(
            f"TOTAL: {self._settings.currency} {receipt.total_amount:.2f}"
        ))
        out.append(commands.set_emphasis(False))
        out.append(commands.line_feed())

        if receipt.payment_method:
            self._line(out, f"Payment: {receipt.payment_method}")

    def _add_wifi(self, out: List[Command], password: str, override: Optional[str]) -> None:
        out.append(commands.line_feed())
        self._line(out, self._divider("="))
        out.append(commands.set_alignment(Alignment.CENTER))
        out.append(commands.set_emphasis(True))
        self._line(out, "WiFi Access")
        self._line(out, f"Password: {password}")
        out.append(commands.set_emphasis(False))
        out.append(commands.line_feed())
        self._line(out, "Scan to connect:")

        payload = override or wifi_payload(self._settings.network_label, password)
        try:
            out.extend(build_qr_sequence(
                payload,
                size=self._settings.qr_size,
                error_correction=self._settings.qr_error_correction,
            ))
        except (OutOfRange, QrEncodingFailure) as e:
            # Receipt still prints without the code
            logger.warning(f"Skipping WiFi QR code: {e}")

        out.append(commands.line_feed())

    def _add_footer(self, out: List[Command]) -> None:
        out.append(commands.set_alignment(Alignment.CENTER))
        out.append(commands.line_feed())
        self._line(out, self._divider("="))
        self._line(out, self._settings.thank_you)
        self._line(out, self._timestamp(self._clock()))
        out.append(commands.cut_paper())
