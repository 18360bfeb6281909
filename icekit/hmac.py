"""HMAC (RFC 2104) over any incremental hash with block and digest sizes."""

from __future__ import annotations

from typing import Any, Callable

_INNER_PAD = 0x36
_OUTER_PAD = 0x5C


def _as_bytes(data) -> bytes:
    if isinstance(data, str):
        raise TypeError("strings must be encoded before hashing")
    return memoryview(data).tobytes()


def _xor(key: bytes, delta: int) -> bytes:
    return bytes(b ^ delta for b in key)


class Hmac:
    """Keyed hash built on ``hash_factory``, a callable returning a fresh hash object."""

    def __init__(self, hash_factory: Callable[[], Any], key) -> None:
        self._factory = hash_factory
        probe = hash_factory()
        self.block_size = probe.block_size
        self.digest_size = probe.digest_size
        self.name = f"hmac-{probe.name}"

        key = _as_bytes(key)
        if len(key) > self.block_size:
            probe.update(key)
            key = probe.digest()
        self._key = key.ljust(self.block_size, b"\x00")
        self.reset()

    def reset(self) -> None:
        """Discard the message fed so far, keeping the key."""
        self._inner = self._factory()
        self._inner.update(_xor(self._key, _INNER_PAD))

    def update(self, data) -> None:
        """Feed more message bytes."""
        self._inner.update(_as_bytes(data))

    def digest(self) -> bytes:
        """Return the authentication code of the message fed so far."""
        inner_digest = self._inner.digest()
        outer = self._factory()
        outer.update(_xor(self._key, _OUTER_PAD))
        outer.update(inner_digest)
        return outer.digest()

    def hexdigest(self) -> str:
        """Return the authentication code as lower-case hexadecimal."""
        return self.digest().hex()


def hmac_digest(hash_factory: Callable[[], Any], key, data) -> bytes:
    """Return the HMAC of ``data`` under ``key``."""
    mac = Hmac(hash_factory, key)
    mac.update(data)
    return mac.digest()