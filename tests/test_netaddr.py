import ipaddress

import pytest

from icekit.netaddr import (
    is_any,
    is_link_local,
    is_local,
    is_loopback,
    is_site_local,
    is_v4_mapped,
    map_v4_to_v6,
    unmap_v6_to_v4,
)


@pytest.mark.parametrize("host", ["::1", "127.0.0.1", "127.8.9.10", "[::1]"])
def test_loopback_hosts(host):
    assert is_loopback(host)


@pytest.mark.parametrize("host", ["::2", "::", "10.0.0.1", "::ffff:127.0.0.1", "fe80::1"])
def test_non_loopback_hosts(host):
    assert not is_loopback(host)


@pytest.mark.parametrize("host", ["fe80::1", "febf::1", "fe80::1%eth0", "169.254.3.4"])
def test_link_local_hosts(host):
    assert is_link_local(host)


@pytest.mark.parametrize("host", ["fec0::1", "2001:db8::1", "169.253.1.1", "::1"])
def test_non_link_local_hosts(host):
    assert not is_link_local(host)


def test_site_local():
    assert is_site_local("fec0::1")
    assert is_site_local("feff::1")
    assert not is_site_local("fe80::1")
    assert not is_site_local("10.0.0.1")


def test_v4_mapped():
    assert is_v4_mapped("::ffff:192.0.2.1")
    assert not is_v4_mapped("192.0.2.1")
    assert not is_v4_mapped("::192.0.2.1")
    assert not is_v4_mapped("2001:db8::1")


def test_packed_and_object_hosts_agree_with_text():
    text = "fe80::1234"
    packed = ipaddress.IPv6Address(text).packed
    assert is_link_local(packed) == is_link_local(text)
    assert is_loopback(ipaddress.IPv4Address("127.0.0.1"))
    assert is_loopback(bytes([127, 0, 0, 1]))


def test_any():
    assert is_any("0.0.0.0")
    assert is_any("::")
    assert not is_any("::1")
    assert not is_any("192.0.2.1")


def test_local_covers_mapped_addresses():
    assert is_local("::ffff:127.0.0.1")
    assert is_local("::ffff:169.254.1.1")
    assert is_local("fe80::1")
    assert is_local("::1")
    assert not is_local("192.0.2.1")
    assert not is_local("2001:db8::1")


def test_map_then_unmap_round_trip():
    address = ("192.0.2.7", 3478)
    mapped = map_v4_to_v6(address)
    assert is_v4_mapped(mapped[0])
    assert mapped[1] == 3478
    assert len(mapped) == 4
    assert unmap_v6_to_v4(mapped) == address


def test_map_leaves_ipv6_unchanged():
    address = ("2001:db8::1", 5000, 0, 0)
    assert map_v4_to_v6(address) == address


def test_unmap_leaves_plain_addresses_unchanged():
    assert unmap_v6_to_v4(("2001:db8::1", 9, 0, 0)) == ("2001:db8::1", 9, 0, 0)
    assert unmap_v6_to_v4(("192.0.2.1", 9)) == ("192.0.2.1", 9)


def test_invalid_host_raises():
    with pytest.raises(ValueError):
        is_loopback("not an address")
    with pytest.raises(ValueError):
        is_any(b"\x01\x02\x03")
    with pytest.raises(TypeError):
        is_local(42)


def test_invalid_address_tuple_raises():
    with pytest.raises(ValueError):
        map_v4_to_v6(("192.0.2.1",))
    with pytest.raises(ValueError):
        unmap_v6_to_v4(("::ffff:192.0.2.1", 70000))