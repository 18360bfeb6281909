"""MD5 message digest (RFC 1321)."""

from __future__ import annotations

import struct

BLOCK_SIZE = 64
DIGEST_SIZE = 16

_INITIAL_STATE = (0x67452301, 0xEFCDAB89, 0x98BADCFE, 0x10325476)

_SHIFTS = (7, 12, 17, 22) * 4 + (5, 9, 14, 20) * 4 + (4, 11, 16, 23) * 4 + (6, 10, 15, 21) * 4

_CONSTANTS = (
    0xD76AA478, 0xE8C7B756, 0x242070DB, 0xC1BDCEEE, 0xF57C0FAF, 0x4787C62A, 0xA8304613, 0xFD469501,
    0x698098D8, 0x8B44F7AF, 0xFFFF5BB1, 0x895CD7BE, 0x6B901122, 0xFD987193, 0xA679438E, 0x49B40821,
    0xF61E2562, 0xC040B340, 0x265E5A51, 0xE9B6C7AA, 0xD62F105D, 0x02441453, 0xD8A1E681, 0xE7D3FBC8,
    0x21E1CDE6, 0xC33707D6, 0xF4D50D87, 0x455A14ED, 0xA9E3E905, 0xFCEFA3F8, 0x676F02D9, 0x8D2A4C8A,
    0xFFFA3942, 0x8771F681, 0x6D9D6122, 0xFDE5380C, 0xA4BEEA44, 0x4BDECFA9, 0xF6BB4B60, 0xBEBFBC70,
    0x289B7EC6, 0xEAA127FA, 0xD4EF3085, 0x04881D05, 0xD9D4D039, 0xE6DB99E5, 0x1FA27CF8, 0xC4AC5665,
    0xF4292244, 0x432AFF97, 0xAB9423A7, 0xFC93A039, 0x655B59C3, 0x8F0CCC92, 0xFFEFF47D, 0x85845DD1,
    0x6FA87E4F, 0xFE2CE6E0, 0xA3014314, 0x4E0811A1, 0xF7537E82, 0xBD3AF235, 0x2AD7D2BB, 0xEB86D391,
)

_WORD_INDEX = (
    tuple(range(16))
    + tuple((1 + 5 * i) % 16 for i in range(16))
    + tuple((5 + 3 * i) % 16 for i in range(16))
    + tuple((7 * i) % 16 for i in range(16))
)

_MASK = 0xFFFFFFFF


def _as_bytes(data) -> bytes:
    if isinstance(data, str):
        raise TypeError("strings must be encoded before hashing")
    return memoryview(data).tobytes()


def _rotl(value: int, bits: int) -> int:
    value &= _MASK
    return ((value << bits) | (value >> (32 - bits))) & _MASK


def _compress(state: tuple[int, int, int, int], block: bytes) -> tuple[int, int, int, int]:
    words = struct.unpack("<16I", block)
    a, b, c, d = state
    for i in range(64):
        if i < 16:
            f = d ^ (b & (c ^ d))
        elif i < 32:
            f = c ^ (d & (b ^ c))
        elif i < 48:
            f = b ^ c ^ d
        else:
            f = c ^ (b | (~d & _MASK))
        rotated = _rotl(a + f + words[_WORD_INDEX[i]] + _CONSTANTS[i], _SHIFTS[i])
        a, d, c, b = d, c, b, (b + rotated) & _MASK
    return (
        (state[0] + a) & _MASK,
        (state[1] + b) & _MASK,
        (state[2] + c) & _MASK,
        (state[3] + d) & _MASK,
    )


class Md5:
    """Incremental MD5 hash."""

    name = "md5"
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
        tail += struct.pack("<Q", bit_length)
        state = self._state
        for offset in range(0, len(tail), BLOCK_SIZE):
            state = _compress(state, tail[offset : offset + BLOCK_SIZE])
        return struct.pack("<4I", *state)

    def hexdigest(self) -> str:
        """Return the digest as lower-case hexadecimal."""
        return self.digest().hex()

    def copy(self) -> "Md5":
        """Return an independent hash with the same state."""
        clone = Md5.__new__(Md5)
        clone._state = self._state
        clone._buffer = bytearray(self._buffer)
        clone._length = self._length
        return clone


def md5(data) -> bytes:
    """Return the MD5 digest of ``data``."""
    return Md5(data).digest()