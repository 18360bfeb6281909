import hashlib

import pytest

from icekit.md5 import Md5, md5


def _payload(size):
    return bytes((i * 7 + 3) % 256 for i in range(size))


def test_empty_input_known_digest():
    assert Md5().hexdigest() == "d41d8cd98f00b204e9800998ecf8427e"


def test_abc_known_digest():
    assert md5(b"abc").hex() == "900150983cd24fb0d6963f7d28e17f72"


@pytest.mark.parametrize("size", [0, 1, 55, 56, 57, 63, 64, 65, 119, 120, 128, 1000])
def test_matches_reference_at_padding_boundaries(size):
    data = _payload(size)
    assert md5(data) == hashlib.md5(data).digest()


def test_chunked_updates_equal_one_shot():
    data = _payload(777)
    h = Md5()
    for start in range(0, len(data), 13):
        h.update(data[start : start + 13])
    assert h.digest() == md5(data)


def test_digest_is_not_destructive():
    h = Md5(b"hello ")
    first = h.digest()
    assert h.digest() == first
    h.update(b"world")
    assert h.digest() == md5(b"hello world")


def test_copy_is_independent():
    h = Md5(b"prefix")
    clone = h.copy()
    clone.update(b"-more")
    assert h.digest() == md5(b"prefix")
    assert clone.digest() == md5(b"prefix-more")


def test_reset_discards_input():
    h = Md5(b"something")
    h.reset()
    h.update(b"other")
    assert h.digest() == md5(b"other")


def test_accepts_buffer_types():
    data = _payload(70)
    assert md5(bytearray(data)) == md5(memoryview(data)) == md5(data)


def test_digest_length():
    assert len(md5(_payload(200))) == Md5.digest_size == 16


def test_rejects_str():
    with pytest.raises(TypeError):
        Md5().update("text")