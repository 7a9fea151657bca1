import pytest

from serialterm.ringbuffer import RingBuffer, next_power_of_2


@pytest.mark.parametrize("num", [0, 1073741825, 2**31])
def test_next_power_of_2_out_of_range_gives_default(num):
    assert next_power_of_2(num) == 4096


@pytest.mark.parametrize("num", [1, 2, 64, 1024, 1073741824])
def test_next_power_of_2_keeps_powers(num):
    assert next_power_of_2(num) == num


def test_next_power_of_2_rounds_up():
    assert next_power_of_2(1000) == 1024


@pytest.mark.parametrize("num", [3, 5, 100, 4097, 123456])
def test_next_power_of_2_invariants(num):
    result = next_power_of_2(num)
    assert result >= num
    assert result & (result - 1) == 0
    assert result // 2 < num


def test_default_size():
    assert RingBuffer().buffer_size() == 4096


def test_non_power_size_is_rounded():
    assert RingBuffer(1000).buffer_size() == next_power_of_2(1000)


def test_zero_size_uses_default():
    assert RingBuffer(0).buffer_size() == 4096


def test_write_then_read_round_trip():
    buf = RingBuffer(16)
    data = b"hello"
    assert buf.write(data) == len(data)
    assert buf.used_len() == len(data)
    assert buf.read(len(data)) == data
    assert buf.is_empty()


def test_read_empty_returns_nothing():
    buf = RingBuffer(8)
    assert buf.read(4) == b""
    assert buf.is_empty()


def test_read_never_returns_more_than_stored():
    buf = RingBuffer(8)
    buf.write(b"ab")
    assert buf.read(8) == b"ab"
    assert buf.used_len() == 0


def test_full_after_writing_capacity():
    buf = RingBuffer(8)
    data = bytes(range(8))
    buf.write(data)
    assert buf.is_full()
    assert buf.unused_len() == 0
    assert buf.read(8) == data


def test_overflow_keeps_newest_bytes():
    buf = RingBuffer(4)
    data = b"abcdefghij"
    assert buf.write(data) == len(data)
    assert buf.is_full()
    assert buf.read(4) == data[-4:]


def test_partial_reads_preserve_order_across_wrap():
    buf = RingBuffer(4)
    buf.write(b"abc")
    assert buf.read(2) == b"ab"
    buf.write(b"xyz")
    assert buf.read(4) == b"cxyz"


def test_used_and_unused_sum_to_size():
    buf = RingBuffer(8)
    for chunk in (b"abc", b"defgh", b"ij", b"k"):
        buf.write(chunk)
        assert buf.used_len() + buf.unused_len() == buf.buffer_size()
        buf.read(2)
        assert buf.used_len() + buf.unused_len() == buf.buffer_size()
        assert len(buf) == buf.used_len()


def test_read_is_capped_at_buffer_size():
    buf = RingBuffer(4)
    buf.write(b"wxyz")
    assert len(buf.read(100)) == buf.buffer_size()