import pytest

from serialterm.textutils import to_hex_str, truncate_name


def test_truncate_name_short_name_unchanged():
    assert truncate_name("COM1", 256) == "COM1"


def test_truncate_name_leaves_room_for_terminator():
    name = "abcdef"
    assert truncate_name(name, 4) == name[:3]
    assert len(truncate_name(name, 4)) == 3


def test_truncate_name_stops_at_nul():
    assert truncate_name("COM5\0garbage", 256) == "COM5"


def test_truncate_name_count_one_is_empty():
    assert truncate_name("COM1", 1) == ""


def test_truncate_name_rejects_zero_count():
    with pytest.raises(ValueError):
        truncate_name("COM1", 0)


def test_to_hex_str_pinned_value():
    assert to_hex_str(b"\x00\xff\x1a") == "00FF1A"


def test_to_hex_str_empty():
    assert to_hex_str(b"") == ""


@pytest.mark.parametrize("data", [b"\x01", bytes(range(256)), b"hello world"])
def test_to_hex_str_round_trip(data):
    text = to_hex_str(data)
    assert len(text) == 2 * len(data)
    assert text == text.upper()
    assert bytes.fromhex(text) == data


def test_to_hex_str_accepts_bytearray():
    data = bytearray(b"\xab\xcd")
    assert bytes.fromhex(to_hex_str(data)) == bytes(data)