import pytest

from hubprint.core.errors import InvalidArgument
from hubprint.printing import commands
from hubprint.printing.commands import Alignment, CommandKind, TextSize


def test_fixed_commands():
    assert commands.initialize().data == b'\x1b@'
    assert commands.line_feed().data == b'\n'
    assert commands.cut_paper().data == b'\x1dV\x41\x00'


@pytest.mark.parametrize("alignment, expected", [
    (Alignment.LEFT, b'\x1ba\x00'),
    (Alignment.CENTER, b'\x1ba\x01'),
    (Alignment.RIGHT, b'\x1ba\x02'),
])
def test_alignment(alignment, expected):
    assert commands.set_alignment(alignment).data == expected


def test_emphasis():
    assert commands.set_emphasis(True).data == b'\x1bE\x01'
    assert commands.set_emphasis(False).data == b'\x1bE\x00'


@pytest.mark.parametrize("size, expected", [
    (TextSize.NORMAL, b'\x1b!\x00'),
    (TextSize.DOUBLE_WIDTH, b'\x1b!\x20'),
    (TextSize.DOUBLE_HEIGHT, b'\x1b!\x10'),
])
def test_size(size, expected):
    assert commands.set_size(size).data == expected


def test_feed():
    assert commands.feed(0).data == b'\x1bd\x00'
    assert commands.feed(3).data == b'\x1bd\x03'


def test_long_feed_is_split_into_runs():
    assert commands.feed(300).data == b'\x1bd\xff' + b'\x1bd\x2d'


def test_negative_feed_rejected():
    with pytest.raises(InvalidArgument):
        commands.feed(-1)


def test_text_tracks_encoded_length():
    command = commands.text("Café")
    assert command.kind == CommandKind.TEXT
    assert command.data == "Café".encode("utf-8")
    assert len(command) == 5


def test_text_replaces_unencodable_characters():
    assert commands.text("₱100", encoding="ascii").data == b'?100'
