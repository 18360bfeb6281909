"""Classification and IPv4/IPv6 mapping of network addresses."""

from __future__ import annotations

import ipaddress
from typing import Tuple, Union

Host = Union[str, bytes, bytearray, memoryview, ipaddress.IPv4Address, ipaddress.IPv6Address]

_V4_MAPPED_PREFIX = 0xFFFF
_LINK_LOCAL_V6 = 0xFE800000
_SITE_LOCAL_V6 = 0xFEC00000
_PREFIX_10_MASK = 0xFFC00000
_LINK_LOCAL_V4 = b"\xa9\xfe"  # 169.254.0.0/16
_LOOPBACK_V4_FIRST_OCTET = 127


def _parse(host: Host) -> Union[ipaddress.IPv4Address, ipaddress.IPv6Address]:
    """Turn a textual, packed or ipaddress host into an ipaddress object."""
    if isinstance(host, (ipaddress.IPv4Address, ipaddress.IPv6Address)):
        return host
    if isinstance(host, (bytes, bytearray, memoryview)):
        packed = bytes(host)
        if len(packed) not in (4, 16):
            raise ValueError(f"packed address must be 4 or 16 bytes, got {len(packed)}")
        return ipaddress.ip_address(packed)
    if isinstance(host, str):
        text = host.strip()
        if text.startswith("[") and text.endswith("]"):
            text = text[1:-1]
        text = text.split("%", 1)[0]
        return ipaddress.ip_address(text)
    raise TypeError(f"unsupported host type: {type(host).__name__}")


def _first_word(ip: ipaddress.IPv6Address) -> int:
    return int(ip) >> 96


def is_loopback(host: Host) -> bool:
    """True for 127.0.0.0/8 and for ::1."""
    ip = _parse(host)
    if ip.version == 4:
        return ip.packed[0] == _LOOPBACK_V4_FIRST_OCTET
    return int(ip) == 1


def is_link_local(host: Host) -> bool:
    """True for 169.254.0.0/16 and for fe80::/10."""
    ip = _parse(host)
    if ip.version == 4:
        return ip.packed[:2] == _LINK_LOCAL_V4
    return _first_word(ip) & _PREFIX_10_MASK == _LINK_LOCAL_V6


def is_site_local(host: Host) -> bool:
    """True for the deprecated IPv6 site-local range fec0::/10."""
    ip = _parse(host)
    if ip.version == 4:
        return False
    return _first_word(ip) & _PREFIX_10_MASK == _SITE_LOCAL_V6


def is_v4_mapped(host: Host) -> bool:
    """True for IPv4-mapped IPv6 addresses (::ffff:a.b.c.d)."""
    ip = _parse(host)
    if ip.version == 4:
        return False
    return int(ip) >> 32 == _V4_MAPPED_PREFIX


def is_any(host: Host) -> bool:
    """True for the wildcard addresses 0.0.0.0 and ::."""
    return int(_parse(host)) == 0


def is_local(host: Host) -> bool:
    """True for loopback and link-local addresses, IPv4-mapped ones included."""
    ip = _parse(host)
    if ip.version == 6 and is_v4_mapped(ip):
        ip = ip.ipv4_mapped
    return is_loopback(ip) or is_link_local(ip)


def _split(address) -> Tuple[Host, int, tuple]:
    parts = tuple(address)
    if len(parts) < 2:
        raise ValueError("address must hold at least a host and a port")
    host, port, *rest = parts
    if isinstance(port, bool) or not isinstance(port, int) or not 0 <= port <= 0xFFFF:
        raise ValueError(f"invalid port: {port!r}")
    return host, port, tuple(rest)


def map_v4_to_v6(address) -> tuple:
    """Turn an IPv4 socket address into its IPv4-mapped IPv6 form.

    IPv6 addresses come back unchanged.
    """
    host, port, rest = _split(address)
    ip = _parse(host)
    if ip.version == 6:
        return (host, port, *rest)
    return (f"::ffff:{ip}", port, 0, 0)


def unmap_v6_to_v4(address) -> tuple:
    """Turn an IPv4-mapped IPv6 socket address back into an IPv4 one.

    Other addresses come back unchanged.
    """
    host, port, rest = _split(address)
    ip = _parse(host)
    if ip.version == 6 and is_v4_mapped(ip):
        return (str(ip.ipv4_mapped), port)
    return (host, port, *rest)