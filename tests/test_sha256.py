import hashlib

import pytest

from icekit.sha256 import Sha224, Sha256, sha224, sha256

LENGTHS = [0, 1, 3, 55, 56, 57, 63, 64, 65, 119, 120, 128, 1000]


def _payload(n):
    return bytes((i * 7 + 3) & 0xFF for i in range(n))


def test_sha256_known_vector():
    assert sha256(b"abc").hex() == (
        "ba7816bf8f01cfea414140de5dae2223b00361a396177a9cb410ff61f20015ad"
    )


@pytest.mark.parametrize("length", LENGTHS)
def test_sha256_matches_reference(length):
    data = _payload(length)
    assert sha256(data) == hashlib.sha256(data).digest()


@pytest.mark.parametrize("length", LENGTHS)
def test_sha224_matches_reference(length):
    data = _payload(length)
    assert sha224(data) == hashlib.sha224(data).digest()


def test_digest_sizes():
    assert len(sha256(b"x")) == Sha256.digest_size == 32
    assert len(sha224(b"x")) == Sha224.digest_size == 28


@pytest.mark.parametrize("chunk", [1, 5, 63, 64, 100])
def test_incremental_equals_one_shot(chunk):
    data = _payload(777)
    h = Sha256()
    for start in range(0, len(data), chunk):
        h.update(data[start : start + chunk])
    assert h.digest() == sha256(data)


def test_digest_does_not_consume_state():
    h = Sha256(b"hello ")
    first = h.digest()
    assert h.digest() == first
    h.update(b"world")
    assert h.digest() == sha256(b"hello world")


def test_hexdigest_matches_digest():
    h = Sha224(b"data")
    assert h.hexdigest() == h.digest().hex()


def test_reset_discards_input():
    h = Sha256(b"something")
    h.reset()
    h.update(b"abc")
    assert h.digest() == sha256(b"abc")


def test_sha224_reset_keeps_its_own_initial_state():
    h = Sha224(b"junk")
    h.reset()
    assert h.digest() == hashlib.sha224(b"").digest()


def test_copy_is_independent():
    h = Sha256(b"prefix")
    clone = h.copy()
    clone.update(b"-more")
    assert h.digest() == sha256(b"prefix")
    assert clone.digest() == sha256(b"prefix-more")


def test_copy_preserves_type():
    clone = Sha224(b"abc").copy()
    assert isinstance(clone, Sha224)
    assert clone.digest() == sha224(b"abc")


def test_accepts_bytearray_and_memoryview():
    data = _payload(90)
    assert sha256(bytearray(data)) == sha256(memoryview(data)) == sha256(data)


def test_rejects_str():
    with pytest.raises(TypeError):
        Sha256().update("text")