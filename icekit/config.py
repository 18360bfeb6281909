"""States, modes and configuration records for ICE agents and servers."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any, Callable, Optional, Sequence

MAX_ADDRESS_STRING_LEN = 64
MAX_CANDIDATE_SDP_STRING_LEN = 256
MAX_SDP_STRING_LEN = 4096

_PORT_MAX = 0xFFFF


class AgentState(enum.IntEnum):
    """Connection state of an ICE agent."""

    DISCONNECTED = 0
    GATHERING = 1
    CONNECTING = 2
    CONNECTED = 3
    COMPLETED = 4
    FAILED = 5


class ConcurrencyMode(enum.IntEnum):
    """How agents share threads and sockets."""

    POLL = 0  # connections share a single thread
    MUX = 1  # connections are multiplexed on a single UDP socket
    THREAD = 2  # each connection runs in its own thread


class LogLevel(enum.IntEnum):
    """Severity of log messages; NONE silences everything."""

    VERBOSE = 0
    DEBUG = 1
    INFO = 2
    WARN = 3
    ERROR = 4
    FATAL = 5
    NONE = 6


def _check_port(name: str, value: int) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{name} must be an integer")
    if not 0 <= value <= _PORT_MAX:
        raise ValueError(f"{name} must be between 0 and {_PORT_MAX}, got {value}")


def _check_non_negative(name: str, value: int) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{name} must be an integer")
    if value < 0:
        raise ValueError(f"{name} must not be negative, got {value}")


def _check_callback(name: str, value: Optional[Callable]) -> None:
    if value is not None and not callable(value):
        raise TypeError(f"{name} must be callable or None")


@dataclass(frozen=True)
class TurnServer:
    """A TURN relay and the credentials to use with it."""

    host: str
    username: Optional[str] = None
    password: Optional[str] = None
    port: int = 0

    def __post_init__(self) -> None:
        if not self.host:
            raise ValueError("TURN server host must not be empty")
        _check_port("port", self.port)


@dataclass
class AgentConfig:
    """Settings for an ICE agent; callbacks receive the agent as first argument."""

    concurrency_mode: ConcurrencyMode = ConcurrencyMode.POLL
    stun_server_host: Optional[str] = None
    stun_server_port: int = 0
    turn_servers: Sequence[TurnServer] = field(default_factory=tuple)
    bind_address: Optional[str] = None
    local_port_range_begin: int = 0
    local_port_range_end: int = 0
    on_state_changed: Optional[Callable[[Any, AgentState], None]] = None
    on_candidate: Optional[Callable[[Any, str], None]] = None
    on_gathering_done: Optional[Callable[[Any], None]] = None
    on_recv: Optional[Callable[[Any, bytes], None]] = None

    def __post_init__(self) -> None:
        self.concurrency_mode = ConcurrencyMode(self.concurrency_mode)
        _check_port("stun_server_port", self.stun_server_port)
        _check_port("local_port_range_begin", self.local_port_range_begin)
        _check_port("local_port_range_end", self.local_port_range_end)
        self.turn_servers = tuple(self.turn_servers)
        for server in self.turn_servers:
            if not isinstance(server, TurnServer):
                raise TypeError("turn_servers must hold TurnServer entries")
        _check_callback("on_state_changed", self.on_state_changed)
        _check_callback("on_candidate", self.on_candidate)
        _check_callback("on_gathering_done", self.on_gathering_done)
        _check_callback("on_recv", self.on_recv)


@dataclass(frozen=True)
class ServerCredentials:
    """A user allowed to allocate relays on the server; quota 0 means the default."""

    username: str
    password: str
    allocations_quota: int = 0

    def __post_init__(self) -> None:
        _check_non_negative("allocations_quota", self.allocations_quota)


@dataclass
class ServerConfig:
    """Settings for an embedded STUN/TURN server."""

    credentials: Sequence[ServerCredentials] = field(default_factory=tuple)
    max_allocations: int = 0
    max_peers: int = 0
    bind_address: Optional[str] = None
    external_address: Optional[str] = None
    port: int = 0
    relay_port_range_begin: int = 0
    relay_port_range_end: int = 0
    realm: Optional[str] = None

    def __post_init__(self) -> None:
        self.credentials = tuple(self.credentials)
        for entry in self.credentials:
            if not isinstance(entry, ServerCredentials):
                raise TypeError("credentials must hold ServerCredentials entries")
        _check_non_negative("max_allocations", self.max_allocations)
        _check_non_negative("max_peers", self.max_peers)
        _check_port("port", self.port)
        _check_port("relay_port_range_begin", self.relay_port_range_begin)
        _check_port("relay_port_range_end", self.relay_port_range_end)