"""
Client address normalization.

Log tokens carry addresses in several shapes: X-Forwarded-For chains,
bracketed IPv6, host:port. normalize_ip reduces them to one canonical
string so that exclusion lists and private-range checks compare like with
like.
"""

import ipaddress
from typing import Optional, Union

IPAddress = Union[ipaddress.IPv4Address, ipaddress.IPv6Address]

# RFC 1918 and unique-local ranges only; documentation and benchmark nets
# count as public
PRIVATE_NETWORKS = tuple(
    ipaddress.ip_network(cidr)
    for cidr in ("10.0.0.0/8", "172.16.0.0/12", "192.168.0.0/16", "fc00::/7")
)


def parse_ip(value: str) -> Optional[IPAddress]:
    """Parse an address; IPv4-mapped IPv6 addresses come back as IPv4."""
    if not value:
        return None
    try:
        ip_obj = ipaddress.ip_address(value)
    except ValueError:
        return None
    if isinstance(ip_obj, ipaddress.IPv6Address) and ip_obj.ipv4_mapped is not None:
        return ip_obj.ipv4_mapped
    return ip_obj


def _split_host_port(value: str) -> Optional[str]:
    """
    Return the host part of ``host:port`` or ``[host]:port``.

    None when the value is not in either form (no colon, or a bare IPv6
    address with several colons).
    """
    if value.startswith("["):
        end = value.find("]")
        if end == -1 or not value[end + 1:].startswith(":"):
            return None
        port = value[end + 2:]
        if ":" in port:
            return None
        return value[1:end]

    host, sep, _ = value.rpartition(":")
    if not sep or ":" in host or "[" in host or "]" in host:
        return None
    return host


def normalize_ip(raw: str) -> str:
    """
    Extract a canonical address string from a raw log token.

    Never fails: returns the canonical IP form when one can be parsed,
    otherwise the best candidate string (e.g. a hostname), or "" for blank
    input.

    Examples:
        "10.0.0.1:8080"          -> "10.0.0.1"
        "[::1]:9000"             -> "::1"
        "203.0.113.5, 10.0.0.2"  -> "203.0.113.5"
    """
    candidate = (raw or "").strip()
    if not candidate:
        return ""

    # Forwarded-for chain: first non-blank hop
    if "," in candidate:
        candidate = next((part.strip() for part in candidate.split(",") if part.strip()), "")
        if not candidate:
            return ""

    if candidate.startswith("["):
        end = candidate.find("]")
        if end != -1 and candidate[1:end]:
            candidate = candidate[1:end]

    host = _split_host_port(candidate)
    if host is not None:
        candidate = host
    elif candidate.count(":") == 1 and "." in candidate:
        host = candidate.split(":", 1)[0]
        if host:
            candidate = host

    ip_obj = parse_ip(candidate)
    if ip_obj is not None:
        return str(ip_obj)
    return candidate


def is_private_ip(value: str) -> bool:
    """
    True for RFC 1918 / unique-local, loopback, link-local, reserved or
    unspecified addresses.

    Documentation and benchmark ranges are public here; hostnames are never
    private.
    """
    ip_obj = parse_ip(value)
    if ip_obj is None:
        return False
    return (
        any(ip_obj in network for network in PRIVATE_NETWORKS)
        or ip_obj.is_loopback
        or ip_obj.is_link_local
        or ip_obj.is_reserved
        or ip_obj.is_unspecified
    )
