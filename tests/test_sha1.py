import hashlib

import pytest

from icekit.sha1 import Sha1, sha1


def _payload(size):
    return bytes((i * 11 + 5) % 256 for i in range(size))


def test_empty_input_known_digest():
    assert Sha1().hexdigest() == "da39a3ee5e6b4b0d3255bfef95601890afd80709"


def test_abc_known_digest():
    assert sha1(b"abc").hex() == "a9993e364706816aba3e25717850c26c9cd0d89d"


@pytest.mark.parametrize("size", [0, 1, 55, 56, 57, 63, 64, 65, 119, 120, 128, 1000])
def test_matches_reference_at_padding_boundaries(size):
    data = _payload(size)
    assert sha1(data) == hashlib.sha1(data).digest()


def test_chunked_updates_equal_one_shot():
    data = _payload(555)
    h = Sha1()
    for start in range(0, len(data), 17):
        h.update(data[start : start + 17])
    assert h.digest() == sha1(data)


def test_digest_is_not_destructive():
    h = Sha1(b"hello ")
    first = h.digest()
    assert h.digest() == first
    h.update(b"world")
    assert h.digest() == sha1(b"hello world")


def test_copy_is_independent():
    h = Sha1(b"prefix")
    clone = h.copy()
    clone.update(b"-more")
    assert h.digest() == sha1(b"prefix")
    assert clone.digest() == sha1(b"prefix-more")


def test_reset_discards_input():
    h = Sha1(b"something")
    h.reset()
    h.update(b"other")
    assert h.digest() == sha1(b"other")


def test_accepts_buffer_types():
    data = _payload(90)
    assert sha1(bytearray(data)) == sha1(memoryview(data)) == sha1(data)


def test_digest_length():
    assert len(sha1(_payload(200))) == Sha1.digest_size == 20


def test_rejects_str():
    with pytest.raises(TypeError):
        Sha1().update("text")