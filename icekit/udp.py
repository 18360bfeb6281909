"""Non-blocking UDP sockets for ICE: creation, port ranges, send/receive and local addresses."""

from __future__ import annotations

import errno
import ipaddress
import logging
import random
import socket
import sys
import threading
from contextlib import suppress
from dataclasses import dataclass
from typing import List, Optional, Tuple

import psutil

from .netaddr import is_any, is_local, map_v4_to_v6, unmap_v6_to_v4

logger = logging.getLogger(__name__)

_PORT_MAX = 0xFFFF
_DEFAULT_PORT_BEGIN = 1024
_BUFFER_SIZE = 1024 * 1024
_IGNORED_RECV_ERRORS = {
    errno.ECONNRESET: "ECONNRESET",
    errno.ENETRESET: "ENETRESET",
    errno.ECONNREFUSED: "ECONNREFUSED",
}
_RETRY_BIND_ERRORS = (errno.EADDRINUSE, errno.EACCES)
_EXCLUDED_INTERFACES = ("docker0",)

# Linux values, used where the socket module does not export them
_LINUX_IP_MTU_DISCOVER = 10
_LINUX_IPV6_MTU_DISCOVER = 23
_LINUX_IP_PMTUDISC_DO = 2
_LINUX_IPV6_TCLASS = 67

_port_lock = threading.Lock()
_port_counter = 0


@dataclass(frozen=True)
class UdpSocketConfig:
    """Where to bind a UDP socket; a port range of 0..0 lets the system choose."""

    bind_address: Optional[str] = None
    port_begin: int = 0
    port_end: int = 0

    def __post_init__(self) -> None:
        for name in ("port_begin", "port_end"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise TypeError(f"{name} must be an integer")
            if not 0 <= value <= _PORT_MAX:
                raise ValueError(f"{name} must be between 0 and {_PORT_MAX}, got {value}")


def _ip(host) -> ipaddress._BaseAddress:
    text = str(host).split("%", 1)[0]
    return ipaddress.ip_address(text)


def _family(address) -> int:
    return socket.AF_INET6 if _ip(address[0]).version == 6 else socket.AF_INET


def _with_port(address, port: int) -> tuple:
    return (address[0], port, *tuple(address)[2:])


def next_port_in_range(begin: int, end: int) -> int:
    """Return the next candidate port in ``[begin, end]``, 0 meaning 1024 and 65535."""
    global _port_counter
    if begin == 0:
        begin = _DEFAULT_PORT_BEGIN
    if end == 0:
        end = _PORT_MAX
    if begin == end:
        return begin
    with _port_lock:
        if _port_counter == 0:
            _port_counter = random.getrandbits(32)
        diff = end - begin if end > begin else 0
        port = (begin + _port_counter % (diff + 1)) & _PORT_MAX
        _port_counter = (_port_counter + 1) & 0xFFFFFFFF
    return port


def _set_options(sock: socket.socket, family: int) -> None:
    if family == socket.AF_INET6:
        with suppress(OSError):
            sock.setsockopt(socket.IPPROTO_IPV6, socket.IPV6_V6ONLY, 0)

    # Set the DF flag
    if sys.platform.startswith("linux"):
        pmtu_do = getattr(socket, "IP_PMTUDISC_DO", _LINUX_IP_PMTUDISC_DO)
        with suppress(OSError):
            sock.setsockopt(
                socket.IPPROTO_IP,
                getattr(socket, "IP_MTU_DISCOVER", _LINUX_IP_MTU_DISCOVER),
                pmtu_do,
            )
        if family == socket.AF_INET6:
            with suppress(OSError):
                sock.setsockopt(
                    socket.IPPROTO_IPV6,
                    getattr(socket, "IPV6_MTU_DISCOVER", _LINUX_IPV6_MTU_DISCOVER),
                    pmtu_do,
                )
    else:
        dont_frag = getattr(socket, "IP_DONTFRAG", None)
        if dont_frag is not None:
            with suppress(OSError):
                sock.setsockopt(socket.IPPROTO_IP, dont_frag, 1)
        v6_dont_frag = getattr(socket, "IPV6_DONTFRAG", None)
        if v6_dont_frag is not None and family == socket.AF_INET6:
            with suppress(OSError):
                sock.setsockopt(socket.IPPROTO_IPV6, v6_dont_frag, 1)

    for option in (socket.SO_RCVBUF, socket.SO_SNDBUF):
        with suppress(OSError):
            sock.setsockopt(socket.SOL_SOCKET, option, _BUFFER_SIZE)


def _bind(sock: socket.socket, sockaddr: tuple, config: UdpSocketConfig) -> None:
    where = config.bind_address or "any"
    if config.port_begin == 0 and config.port_end == 0:
        try:
            sock.bind(sockaddr)
        except OSError as exc:
            logger.error("UDP socket binding failed, errno=%s", exc.errno)
            raise
        logger.debug("UDP socket bound to %s:%d", where, get_port(sock))
        return

    if config.port_begin == config.port_end:
        port = config.port_begin
        try:
            sock.bind(_with_port(sockaddr, port))
        except OSError as exc:
            logger.error("UDP socket binding failed on port %d, errno=%s", port, exc.errno)
            raise
        logger.debug("UDP socket bound to %s:%d", where, port)
        return

    retries = config.port_end - config.port_begin
    while True:
        port = next_port_in_range(config.port_begin, config.port_end)
        try:
            sock.bind(_with_port(sockaddr, port))
        except OSError as exc:
            if exc.errno not in _RETRY_BIND_ERRORS or retries <= 0:
                logger.error(
                    "UDP socket binding failed on port range %s:[%d,%d], errno=%s",
                    where, config.port_begin, config.port_end, exc.errno,
                )
                raise
            retries -= 1
            continue
        logger.debug("UDP socket bound to %s:%d", where, port)
        return


def create_udp_socket(config: UdpSocketConfig) -> socket.socket:
    """Create a bound, non-blocking UDP socket, preferring dual-stack IPv6."""
    try:
        infos = socket.getaddrinfo(
            config.bind_address,
            "0",
            socket.AF_UNSPEC,
            socket.SOCK_DGRAM,
            socket.IPPROTO_UDP,
            socket.AI_PASSIVE | socket.AI_NUMERICSERV,
        )
    except OSError as exc:
        logger.error("getaddrinfo for binding address failed: %s", exc)
        raise

    sock: Optional[socket.socket] = None
    sockaddr: tuple = ()
    for family, label in ((socket.AF_INET6, "IPv6"), (socket.AF_INET, "IPv4")):
        info = next((entry for entry in infos if entry[0] == family), None)
        if info is None:
            continue
        try:
            sock = socket.socket(info[0], info[1], info[2])
        except OSError as exc:
            logger.warning("UDP socket creation for %s family failed, errno=%s", label, exc.errno)
            continue
        sockaddr = info[4]
        break

    if sock is None:
        logger.error("UDP socket creation failed: no suitable address family")
        raise OSError(errno.EAFNOSUPPORT, "no suitable address family for UDP socket")

    try:
        _set_options(sock, sock.family)
        sock.setblocking(False)
        _bind(sock, sockaddr, config)
    except BaseException:
        sock.close()
        raise
    return sock


def recvfrom(sock: socket.socket, size: int) -> Tuple[bytes, tuple]:
    """Receive one datagram of at most ``size`` bytes and its unmapped source address.

    Stored ICMP errors from earlier sends are skipped; with nothing pending,
    ``BlockingIOError`` is raised.
    """
    while True:
        try:
            data, address = sock.recvfrom(size)
        except OSError as exc:
            name = _IGNORED_RECV_ERRORS.get(exc.errno)
            if name is None:
                raise
            logger.debug("Ignoring %s returned by recvfrom", name)
            continue
        return data, unmap_v6_to_v4(address)


def sendto(sock: socket.socket, data, address) -> int:
    """Send ``data`` to ``address``, mapping IPv4 destinations for IPv6 sockets."""
    destination = tuple(address)
    if sock.family == socket.AF_INET6:
        destination = map_v4_to_v6(destination)
    return sock.sendto(data, destination)


def sendto_self(sock: socket.socket, data) -> int:
    """Send ``data`` to the socket's own local address."""
    local = get_local_addr(sock, socket.AF_UNSPEC)
    try:
        return sock.sendto(data, local)
    except OSError:
        if _family(local) != socket.AF_INET6:
            raise
    # IPv6 may be disabled on the loopback interface
    local = get_local_addr(sock, socket.AF_INET)
    if sock.family == socket.AF_INET6:
        local = map_v4_to_v6(local)
    return sock.sendto(data, local)


def set_diffserv(sock: socket.socket, ds: int) -> None:
    """Set the DSCP/ECN byte of outgoing packets (IP ToS or IPv6 traffic class)."""
    if sys.platform == "win32":
        logger.info("IP Differentiated Services are not supported on Windows")
        raise NotImplementedError("IP Differentiated Services are not supported on Windows")

    try:
        family = _family(sock.getsockname())
    except OSError as exc:
        logger.warning("getsockname failed, errno=%s", exc.errno)
        raise

    ip_tos = getattr(socket, "IP_TOS", None)
    if family == socket.AF_INET:
        if ip_tos is None:
            logger.info("Setting IP ToS is not supported")
            raise NotImplementedError("setting IP ToS is not supported")
        try:
            sock.setsockopt(socket.IPPROTO_IP, ip_tos, ds)
        except OSError as exc:
            logger.warning("Setting IP ToS failed, errno=%s", exc.errno)
            raise
        return

    tclass = getattr(socket, "IPV6_TCLASS", None)
    if tclass is None and sys.platform.startswith("linux"):
        tclass = _LINUX_IPV6_TCLASS
    if tclass is None:
        logger.info("Setting IPv6 traffic class is not supported")
        raise NotImplementedError("setting IPv6 traffic class is not supported")
    try:
        sock.setsockopt(socket.IPPROTO_IPV6, tclass, ds)
    except OSError as exc:
        logger.warning("Setting IPv6 traffic class failed, errno=%s", exc.errno)
        raise
    if ip_tos is not None:
        # Also set IP_TOS for IPv4, in case the system requires it
        with suppress(OSError):
            sock.setsockopt(socket.IPPROTO_IP, ip_tos, ds)


def get_port(sock: socket.socket) -> int:
    """Return the port the socket is bound to, or 0 if it cannot be read."""
    try:
        return get_bound_addr(sock)[1]
    except OSError:
        return 0


def get_bound_addr(sock: socket.socket) -> tuple:
    """Return the address the socket is bound to."""
    try:
        return tuple(sock.getsockname())
    except OSError as exc:
        logger.warning("getsockname failed, errno=%s", exc.errno)
        raise


def get_local_addr(sock: socket.socket, family_hint: int = socket.AF_UNSPEC) -> tuple:
    """Return an address that reaches the socket from this host.

    A wildcard binding becomes the loopback address; ``family_hint`` asks for
    an IPv4 or IPv4-mapped IPv6 form.
    """
    record = get_bound_addr(sock)

    if not is_any(record[0]):
        if _family(record) == socket.AF_INET and family_hint == socket.AF_INET6:
            record = map_v4_to_v6(record)
        return record

    if _family(record) == socket.AF_INET6 and family_hint == socket.AF_INET:
        # Socket listens on any IPv4 or IPv6: use IPv4 instead
        port = record[1]
        if port == 0:
            raise OSError(errno.EADDRNOTAVAIL, "socket has no port to reach")
        record = ("0.0.0.0", port)

    if _family(record) == socket.AF_INET:
        record = ("127.0.0.1", *record[1:])
    else:
        record = ("::1", *record[1:])

    if _family(record) == socket.AF_INET and family_hint == socket.AF_INET6:
        record = map_v4_to_v6(record)
    return record


def _has_duplicate(candidate: ipaddress._BaseAddress, records: List[tuple]) -> bool:
    """True if a record shares the IPv4 address or the IPv6 /64 network of ``candidate``."""
    for record in records:
        existing = _ip(record[0])
        if existing.version != candidate.version:
            continue
        if candidate.version == 4 and existing.packed == candidate.packed:
            return True
        if candidate.version == 6 and existing.packed[:8] == candidate.packed[:8]:
            return True
    return False


def _is_loopback_interface(stats) -> bool:
    flags = getattr(stats, "flags", "") or ""
    return "loopback" in flags.split(",")


def get_addrs(sock: socket.socket) -> List[tuple]:
    """List the host addresses the socket can be reached on, with its port.

    Loopback and link-local addresses are never listed, and IPv6 addresses
    only when the socket is IPv6.
    """
    try:
        bound = get_bound_addr(sock)
    except OSError:
        logger.error("Getting UDP bound address failed")
        raise

    if not is_any(bound[0]):
        return [bound]

    port = bound[1]
    bound_is_v6 = _family(bound) == socket.AF_INET6
    interfaces = psutil.net_if_addrs()
    stats = psutil.net_if_stats()

    records: List[tuple] = []
    for name, addresses in interfaces.items():
        if name in _EXCLUDED_INTERFACES:
            continue
        interface_stats = stats.get(name)
        if interface_stats is None or not interface_stats.isup:
            continue
        if _is_loopback_interface(interface_stats):
            continue
        for entry in addresses:
            if entry.family == socket.AF_INET:
                pass
            elif entry.family == socket.AF_INET6 and bound_is_v6:
                pass
            else:
                continue
            try:
                ip = _ip(entry.address)
            except ValueError:
                continue
            if is_local(ip) or _has_duplicate(ip, records):
                continue
            if ip.version == 4:
                records.append((str(ip), port))
            else:
                records.append((str(ip), port, 0, 0))
    return records