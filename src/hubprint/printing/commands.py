"""ESC/POS command encoder.

Every function returns a Command holding the exact bytes sent to the
printer. Text is encoded once, when its Command is created, so a command
list always knows its own byte count.
"""

from dataclasses import dataclass
from enum import Enum, auto

from hubprint.core.errors import InvalidArgument

# ESC/POS command constants
ESC = b'\x1b'
GS = b'\x1d'
LF = b'\x0a'

# ESC d n takes a single byte
MAX_FEED_PER_COMMAND = 255


class Alignment(Enum):
    """Text alignment options."""

    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"


class TextSize(Enum):
    """Character size options (ESC ! print mode)."""

    NORMAL = "normal"
    DOUBLE_WIDTH = "double_width"
    DOUBLE_HEIGHT = "double_height"


class CommandKind(Enum):
    """What a command does, so writers can treat QR commands separately."""

    CONTROL = auto()
    TEXT = auto()
    QR_MODEL = auto()
    QR_SIZE = auto()
    QR_ERROR_CORRECTION = auto()
    QR_STORE = auto()
    QR_PRINT = auto()


QR_KINDS = frozenset({
    CommandKind.QR_MODEL,
    CommandKind.QR_SIZE,
    CommandKind.QR_ERROR_CORRECTION,
    CommandKind.QR_STORE,
    CommandKind.QR_PRINT,
})


@dataclass(frozen=True)
class Command:
    """A single printer command."""

    data: bytes
    kind: CommandKind = CommandKind.CONTROL

    def __len__(self) -> int:
        return len(self.data)

    @property
    def is_qr(self) -> bool:
        return self.kind in QR_KINDS


_ALIGN_BYTES = {
    Alignment.LEFT: b'\x00',
    Alignment.CENTER: b'\x01',
    Alignment.RIGHT: b'\x02',
}

_SIZE_BYTES = {
    TextSize.NORMAL: b'\x00',
    TextSize.DOUBLE_WIDTH: b'\x20',
    TextSize.DOUBLE_HEIGHT: b'\x10',
}


def initialize() -> Command:
    """Initialize printer (ESC @)."""
    return Command(ESC + b'@')


def set_alignment(alignment: Alignment) -> Command:
    """Set text alignment (ESC a n)."""
    return Command(ESC + b'a' + _ALIGN_BYTES[alignment])


def set_emphasis(enabled: bool) -> Command:
    """Set emphasized (bold) mode (ESC E n)."""
    return Command(ESC + b'E' + (b'\x01' if enabled else b'\x00'))


def set_size(size: TextSize) -> Command:
    """Select print mode character size (ESC ! n)."""
    return Command(ESC + b'!' + _SIZE_BYTES[size])


def line_feed() -> Command:
    """Print buffer and feed one line."""
    return Command(LF)


def feed(lines: int) -> Command:
    """Print buffer and feed paper by the given number of lines (ESC d n).

    Feeds longer than 255 lines are emitted as several ESC d runs inside
    one command.

    Args:
        lines: Number of lines to feed, zero or more

    Raises:
        InvalidArgument: If lines is negative
    """
    if lines < 0:
        raise InvalidArgument(f"feed lines must be >= 0, got {lines}")

    runs = []
    remaining = lines
    while remaining > MAX_FEED_PER_COMMAND:
        runs.append(ESC + b'd' + bytes([MAX_FEED_PER_COMMAND]))
        remaining -= MAX_FEED_PER_COMMAND
    runs.append(ESC + b'd' + bytes([remaining]))
    return Command(b''.join(runs))


def cut_paper() -> Command:
    """Feed to cutter and cut (GS V 65 0)."""
    return Command(GS + b'V' + b'\x41' + b'\x00')


def text(value: str, encoding: str = "utf-8") -> Command:
    """Printable text, encoded for the printer's code page.

    Characters the code page cannot represent are replaced.
    """
    return Command(value.encode(encoding, errors="replace"), CommandKind.TEXT)
