"""SHA-256 and SHA-224 message digests (FIPS 180-4)."""

from __future__ import annotations

import struct

BLOCK_SIZE = 64

_MASK = 0xFFFFFFFF

_K = (
    0x428A2F98, 0x71374491, 0xB5C0FBCF, 0xE9B5DBA5, 0x3956C25B, 0x59F111F1, 0x923F82A4, 0xAB1C5ED5,
    0xD807AA98, 0x12835B01, 0x243185BE, 0x550C7DC3, 0x72BE5D74, 0x80DEB1FE, 0x9BDC06A7, 0xC19BF174,
    0xE49B69C1, 0xEFBE4786, 0x0FC19DC6, 0x240CA1CC, 0x2DE92C6F, 0x4A7484AA, 0x5CB0A9DC, 0x76F988DA,
    0x983E5152, 0xA831C66D, 0xB00327C8, 0xBF597FC7, 0xC6E00BF3, 0xD5A79147, 0x06CA6351, 0x14292967,
    0x27B70A85, 0x2E1B2138, 0x4D2C6DFC, 0x53380D13, 0x650A7354, 0x766A0ABB, 0x81C2C92E, 0x92722C85,
    0xA2BFE8A1, 0xA81A664B, 0xC24B8B70, 0xC76C51A3, 0xD192E819, 0xD6990624, 0xF40E3585, 0x106AA070,
    0x19A4C116, 0x1E376C08, 0x2748774C, 0x34B0BCB5, 0x391C0CB3, 0x4ED8AA4A, 0x5B9CCA4F, 0x682E6FF3,
    0x748F82EE, 0x78A5636F, 0x84C87814, 0x8CC70208, 0x90BEFFFA, 0xA4506CEB, 0xBEF9A3F7, 0xC67178F2,
)

_SHA256_INITIAL = (
    0x6A09E667, 0xBB67AE85, 0x3C6EF372, 0xA54FF53A,
    0x510E527F, 0x9B05688C, 0x1F83D9AB, 0x5BE0CD19,
)

_SHA224_INITIAL = (
    0xC1059ED8, 0x367CD507, 0x3070DD17, 0xF70E5939,
    0xFFC00B31, 0x68581511, 0x64F98FA7, 0xBEFA4FA4,
)


def _as_bytes(data) -> bytes:
    if isinstance(data, str):
        raise TypeError("strings must be encoded before hashing")
    return memoryview(data).tobytes()


def _rotr(value: int, bits: int) -> int:
    return ((value >> bits) | (value << (32 - bits))) & _MASK


def _compress(state: tuple[int, ...], block: bytes) -> tuple[int, ...]:
    w = list(struct.unpack(">16I", block))
    for i in range(16, 64):
        x, y = w[i - 15], w[i - 2]
        gamma0 = _rotr(x, 7) ^ _rotr(x, 18) ^ (x >> 3)
        gamma1 = _rotr(y, 17) ^ _rotr(y, 19) ^ (y >> 10)
        w.append((gamma1 + w[i - 7] + gamma0 + w[i - 16]) & _MASK)

    a, b, c, d, e, f, g, h = state
    for k, word in zip(_K, w):
        sigma1 = _rotr(e, 6) ^ _rotr(e, 11) ^ _rotr(e, 25)
        ch = g ^ (e & (f ^ g))
        t0 = (h + sigma1 + ch + k + word) & _MASK
        sigma0 = _rotr(a, 2) ^ _rotr(a, 13) ^ _rotr(a, 22)
        maj = ((a | b) & c) | (a & b)
        t1 = (sigma0 + maj) & _MASK
        a, b, c, d, e, f, g, h = (t0 + t1) & _MASK, a, b, c, (d + t0) & _MASK, e, f, g
    return tuple((x + y) & _MASK for x, y in zip(state, (a, b, c, d, e, f, g, h)))


class Sha256:
    """Incremental SHA-256 hash."""

    name = "sha256"
    block_size = BLOCK_SIZE
    digest_size = 32
    _initial_state = _SHA256_INITIAL

    def __init__(self, data=b"") -> None:
        self.reset()
        if data:
            self.update(data)

    def reset(self) -> None:
        """Return to the initial state, discarding all input."""
        self._state = type(self)._initial_state
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
        return struct.pack(">8I", *state)[: self.digest_size]

    def hexdigest(self) -> str:
        """Return the digest as lower-case hexadecimal."""
        return self.digest().hex()

    def copy(self) -> "Sha256":
        """Return an independent hash with the same state."""
        cls = type(self)
        clone = cls.__new__(cls)
        clone._state = self._state
        clone._buffer = bytearray(self._buffer)
        clone._length = self._length
        return clone


class Sha224(Sha256):
    """Incremental SHA-224 hash: SHA-256 with other initial values, truncated."""

    name = "sha224"
    digest_size = 28
    _initial_state = _SHA224_INITIAL


def sha256(data) -> bytes:
    """Return the SHA-256 digest of ``data``."""
    return Sha256(data).digest()


def sha224(data) -> bytes:
    """Return the SHA-224 digest of ``data``."""
    return Sha224(data).digest()