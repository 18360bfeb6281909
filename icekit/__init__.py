"""Building blocks for ICE agents: hashes, HMAC, configuration types, address helpers, named threads and UDP sockets."""

__version__ = "0.1.0"

__all__ = ["config", "hmac", "md5", "netaddr", "sha1", "sha256", "threads", "udp"]