"""SHA-1 message digest (FIPS 180)."""

from __future__ import annotations

import struct

BLOCK_SIZE = 64
DIGEST_SIZE = 20

_INITIAL_STATE = (0x67452301, 0xEFCDAB89, 0x98BADCFE, 0x10325476, 0xC3D2E1F0)

_K0 = 0x5A827999
_K20 = 0x6ED9EBA1
_K40 = 0x8F1BBCDC
_K60 = 0xCA62C1D6

_MASK = 0xFFFFFFFF


def _as_bytes(data) -> bytes:
    if isinstance(data, str):
        raise TypeError("strings must be encoded before hashing")
    return memoryview(data).tobytes()


def _rotl(value: int, bits: int) -> int:
    return ((value << bits) | (value >> (32 - bits))) & _MASK


def _compress(state: tuple[int, ...], block: bytes) -> tuple[int, ...]:
    w = list(struct.unpack(">16I", block))
    a, b, c, d, e = state
    for i in range(80):
        if i >= 16:
            j = i & 15
            w[j] = _rotl(w[(i + 13) & 15] ^ w[(i + 8) & 15] ^ w[(i + 2) & 15] ^ w[j], 1)
        if i < 20:
            t = (d ^ (b & (c ^ d))) + _K0
        elif i < 40:
            t = (b ^ c ^ d) + _K20
        elif i < 60:
            t = ((b & c) | (d & (b | c))) + _K40
        else:
            t = (b ^ c ^ d) + _K60
        t = (t + _rotl(a, 5) + e + w[i & 15]) & _MASK
        a, b, c, d, e = t, a, _rotl(b, 30), c, d
    return tuple((x + y) & _MASK for x, y in zip(state, (a, b, c, d, e)))


class Sha1:
    """Incremental SHA-1 hash."""

    name = "sha1"
    block_size = BLOCK_SIZE
    digest_size = DIGEST_SIZE

    def __init__(self, data=b"") -> None:
        self.reset()
        if data:
            self.update(data)

    def reset(self) -> None:
        """Return to the initial state, discarding all input."""
        self._state = _INITIAL_STATE
        self._buffer = bytearray()
        self._length = 0

    def update(self, data) -> None:
        """Feed more bytes into the hash."""
        chunk = _as_bytes(data)
        self._length += len(chunk)
        self._buffer += chunk
        full = len(self._buffer) - len(self._buffer) % BLOCK_SIZE
        state = self._state
        for offset in range(0, full, BLOCK_SIZE):
            state = _compress(state, bytes(self._buffer[offset : offset + BLOCK_SIZE]))
        self._state = state
        del self._buffer[:full]

    def digest(self) -> bytes:
        """Return the digest of everything fed so far, leaving the hash usable."""
        bit_length = (self._length * 8) & 0xFFFFFFFFFFFFFFFF
        tail = bytes(self._buffer) + b"\x80"
        tail += b"\x00" * ((56 - len(tail)) % BLOCK_SIZE)
        tail += struct.pack(">Q", bit_length)
        state = self._state
        for offset in range(0, len(tail), BLOCK_SIZE):
            state = _compress(state, tail[offset : offset + BLOCK_SIZE])
        return struct.pack(">5I", *state)

    def hexdigest(self) -> str:
        """Return the digest as lower-case hexadecimal."""
        return self.digest().hex()

    def copy(self) -> "Sha1":
        """Return an independent hash with the same state."""
        clone = Sha1.__new__(Sha1)
        clone._state = self._state
        clone._buffer = bytearray(self._buffer)
        clone._length = self._length
        return clone


def sha1(data) -> bytes:
    """Return the SHA-1 digest of ``data``."""
    return Sha1(data).digest()