import ipaddress
import logging
import re
import socket
from typing import Optional, Set, Union
from urllib.parse import urlsplit

logger = logging.getLogger(__name__)

IPAddress = Union[ipaddress.IPv4Address, ipaddress.IPv6Address]

# RFC 6598 carrier-grade NAT, not covered by ipaddress.is_private
_SHARED_ADDRESS_SPACE = ipaddress.ip_network("100.64.0.0/10")
_LEGACY_IPV4_RE = re.compile(r"^(0x[0-9a-f]*|[0-9]+)(\.(0x[0-9a-f]*|[0-9]+)){0,3}$", re.IGNORECASE)

def is_private_address(ip: IPAddress) -> bool:
    if isinstance(ip, ipaddress.IPv6Address) and ip.ipv4_mapped is not None:
        ip = ip.ipv4_mapped
    return (
        ip.is_private
        or ip.is_loopback
        or ip.is_link_local
        or ip.is_multicast
        or ip.is_reserved
        or ip.is_unspecified
        or (isinstance(ip, ipaddress.IPv4Address) and ip in _SHARED_ADDRESS_SPACE)
    )

def _parse_ip_literal(host: str) -> Optional[IPAddress]:
    try:
        return ipaddress.ip_address(host.split("%", 1)[0])
    except ValueError:
        pass
    # Shorthand IPv4 forms browsers accept: 2130706433, 0x7f.1, 127.1
    if _LEGACY_IPV4_RE.match(host):
        try:
            return ipaddress.IPv4Address(socket.inet_aton(host))
        except OSError:
            return None
    return None

def _resolve(host: str) -> Set[IPAddress]:
    addresses: Set[IPAddress] = set()
    try:
        infos = socket.getaddrinfo(host, None, proto=socket.IPPROTO_TCP)
    except (socket.gaierror, UnicodeError) as e:
        logger.debug("Could not resolve %s: %s", host, e)
        return addresses
    for _family, _type, _proto, _canon, sockaddr in infos:
        ip = _parse_ip_literal(str(sockaddr[0]))
        if ip is not None:
            addresses.add(ip)
    return addresses

def is_blocked(url: str, *, resolve: bool = True) -> bool:
    """
    Return True when the URL targets a private, loopback, link-local or
    otherwise reserved address.

    A URL without a usable host is blocked. With resolve=True host names are
    looked up and blocked if any address they resolve to is internal; names
    that do not resolve are left for the HTTP client to fail on.
    """
    try:
        host = urlsplit(url).hostname
    except ValueError:
        return True
    if not host:
        return True

    host = host.rstrip(".")
    ip = _parse_ip_literal(host)
    if ip is not None:
        return is_private_address(ip)

    if host == "localhost" or host.endswith(".localhost"):
        return True

    if not resolve:
        return False

    return any(is_private_address(addr) for addr in _resolve(host))
