"""Tests for command encoding and status decoding."""

import json

import numpy as np
import pytest

from led_applet.protocol_config import (
    Opcode,
    Separator,
    StatusCode,
    describe_status,
)
from led_applet.protocol_encoder import ProtocolEncoder


@pytest.fixture
def encoder():
    return ProtocolEncoder()


def test_create_applet_message(encoder):
    msg = encoder.encode_create_applet(2, Separator.DOTTED)
    assert json.loads(msg) == {"opcode": "CreateApplet", "app_num": 2, "parameters": [2]}
    # compact, single object, no framing
    assert b" " not in msg
    assert not msg.endswith(b"\n")


@pytest.mark.parametrize(
    "separator, code",
    [
        (Separator.EMPTY, 0),
        (Separator.SOLID, 1),
        (Separator.DOTTED, 2),
        (Separator.VARIABLE, 3),
    ],
)
def test_separator_codes(encoder, separator, code):
    assert json.loads(encoder.encode_create_applet(1, separator))["parameters"] == [code]


def test_grid_update_is_row_major(encoder):
    grid = np.arange(1, 91, dtype=np.uint8).reshape(10, 9)
    cmd = json.loads(encoder.encode_grid_update(1, grid))
    assert cmd["opcode"] == "UpdateGrid"
    assert cmd["app_num"] == 1
    assert cmd["parameters"] == list(range(1, 91))
    # row 1 starts after the 9 values of row 0
    assert cmd["parameters"][9] == grid[1, 0]


def test_bar_update(encoder):
    bar = np.array([255, 150, 50, 10, 0, 10, 50, 150, 255], dtype=np.uint8)
    cmd = json.loads(encoder.encode_bar_update(3, bar))
    assert cmd == {
        "opcode": "UpdateBar",
        "app_num": 3,
        "parameters": [255, 150, 50, 10, 0, 10, 50, 150, 255],
    }


def test_wrong_sizes_rejected(encoder):
    with pytest.raises(ValueError):
        encoder.encode_grid_update(1, np.zeros((11, 9), dtype=np.uint8))
    with pytest.raises(ValueError):
        encoder.encode_bar_update(1, np.zeros(8, dtype=np.uint8))


def test_parameter_out_of_byte_range(encoder):
    with pytest.raises(ValueError, match="does not fit"):
        encoder.encode_command(Opcode.UPDATE_BAR, 1, [256])


def test_decode_status(encoder):
    assert encoder.decode_status(b"\x00") == 0
    assert encoder.decode_status(bytes([34])) == StatusCode.ALREADY_EXISTS
    assert encoder.decode_status(b"\xff") == 255
    with pytest.raises(ValueError):
        encoder.decode_status(b"")
    with pytest.raises(ValueError):
        encoder.decode_status(b"\x00\x00")


def test_status_table():
    assert StatusCode.from_code(32) is StatusCode.ILLEGAL_UPDATE
    assert StatusCode.from_code(99) is None
    assert describe_status(40) == "invalid separator value at creation"
    assert describe_status(99) == "unrecognized status 99"


def test_separator_parse():
    assert Separator.parse("Variable") is Separator.VARIABLE
    assert Separator.parse(1) is Separator.SOLID
    assert Separator.parse(Separator.EMPTY) is Separator.EMPTY
    assert str(Separator.DOTTED) == "dotted"
    assert Separator.parse(np.int64(3)) is Separator.VARIABLE
    assert Separator.parse(np.uint8(0)) is Separator.EMPTY
    with pytest.raises(ValueError):
        Separator.parse("wavy")
    with pytest.raises(ValueError):
        Separator.parse(4)
    with pytest.raises(ValueError):
        Separator.parse(True)
