# icekit

Building blocks for Interactive Connectivity Establishment (ICE) agents,
written in plain Python.

## Modules

- `icekit.md5`, `icekit.sha1`, `icekit.sha256`: streaming hash classes
  `Md5`, `Sha1`, `Sha256` and `Sha224`, each with `update`, `digest`,
  `hexdigest`, `reset` and `copy`, and the one-shot helpers `md5`, `sha1`,
  `sha256` and `sha224`. The constructors take optional initial data;
  `digest()` does not disturb the running state, so more data can follow.
  Text must be encoded first: passing a `str` raises `TypeError`.
- `icekit.hmac`: `Hmac(hash_factory, key)` over any of those hash classes
  (keys longer than the block size are hashed first), with `update`,
  `digest`, `hexdigest` and `reset`, and `hmac_digest(hash_factory, key,
  data)` for one-shot use.
- `icekit.config`: the enums `AgentState`, `ConcurrencyMode` and `LogLevel`,
  and the validated dataclasses `TurnServer`, `AgentConfig`,
  `ServerCredentials` and `ServerConfig`. Ports outside 0..65535, negative
  counts and non-callable callbacks raise `ValueError` or `TypeError`.
- `icekit.netaddr`: address classification (`is_loopback`, `is_link_local`,
  `is_site_local`, `is_v4_mapped`, `is_any`, `is_local`) for textual,
  packed (4 or 16 bytes) or `ipaddress` hosts, and conversion of socket
  address tuples between IPv4 and IPv4-mapped IPv6 (`map_v4_to_v6`,
  `unmap_v6_to_v4`).
- `icekit.threads`: `set_thread_name_self(name)` names the calling thread
  (and, on Linux, the system thread as well); `start_thread(target, name,
  *args)` starts a named thread whose `join()` returns the target's result
  or re-raises its exception.
- `icekit.udp`: `UdpSocketConfig` and `create_udp_socket`, which makes a
  non-blocking UDP socket, dual-stack IPv6 where available, bound to a
  system-chosen port, a single port or a port range (retrying on ports in
  use); `next_port_in_range`; `sendto`, `recvfrom` and `sendto_self`;
  `set_diffserv`; `get_port`, `get_bound_addr`, `get_local_addr`; and
  `get_addrs`, which lists the host addresses the socket is reachable on,
  leaving out loopback, link-local and `docker0` addresses. Failures raise
  `OSError`; `recvfrom` raises `BlockingIOError` when nothing is pending;
  `set_diffserv` raises `NotImplementedError` where the platform cannot set
  it. Messages go to the `icekit.udp` logger.

## Examples

Hashing and HMAC:

```python
from icekit.sha1 import Sha1, sha1
from icekit.hmac import Hmac, hmac_digest

print(sha1(b"abc").hex())

mac = Hmac(Sha1, b"secret")
mac.update(b"message")
tag = mac.digest()

assert tag == hmac_digest(Sha1, b"secret", b"message")
```

A UDP socket on a local port range:

```python
from icekit.udp import UdpSocketConfig, create_udp_socket, get_port, get_addrs

sock = create_udp_socket(UdpSocketConfig(bind_address="127.0.0.1",
                                         port_begin=60000, port_end=61000))
print(get_port(sock))
print(get_addrs(sock))
sock.close()
```

## What this package does not do

There is no ICE agent here: nothing gathers candidates, runs connectivity
checks or drives the states in `AgentState`, and `AgentConfig` and
`ServerConfig` are records only. There is no STUN or TURN message encoding
or parsing, no STUN/TURN server, and no command-line program.

## Tests

The test suite uses pytest; install it with the `test` extra.