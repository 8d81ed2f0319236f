"""Trusted proxy networks and client IP extraction from forwarding headers."""

from __future__ import annotations

import ipaddress
from typing import Iterable, Union

IPAddress = Union[ipaddress.IPv4Address, ipaddress.IPv6Address]
IPNetwork = Union[ipaddress.IPv4Network, ipaddress.IPv6Network]

DEFAULT_TRUSTED_PROXIES = ("0.0.0.0/0", "::/0")


class TrustedProxyError(ValueError):
    """Raised when a trusted proxy entry is not a valid address or network.

    ``parsed`` holds the networks read successfully before the bad entry.
    """

    def __init__(self, message: str, parsed: list[IPNetwork]) -> None:
        super().__init__(message)
        self.parsed = parsed


def _parse_address(text: str) -> IPAddress | None:
    """Parse a bare IP address; zones and non-address forms are rejected."""
    if not text or "%" in text or "/" in text:
        return None
    try:
        return ipaddress.ip_address(text)
    except ValueError:
        return None


def _unmap(ip: IPAddress) -> IPAddress:
    if isinstance(ip, ipaddress.IPv6Address) and ip.ipv4_mapped is not None:
        return ip.ipv4_mapped
    return ip


def parse_ip(text: str) -> IPAddress | None:
    """Parse ``text`` as an IP address in its smallest form.

    IPv4 and IPv4-mapped IPv6 addresses come back as IPv4; other IPv6
    addresses as IPv6. Returns None for invalid input.
    """
    ip = _parse_address(text)
    return None if ip is None else _unmap(ip)


def _parse_cidr(text: str) -> IPNetwork:
    address, _, prefix = text.partition("/")
    ip = _parse_address(address)
    if ip is None or not prefix.isdigit() or not prefix.isascii():
        raise ValueError(f"invalid CIDR address: {text}")
    if int(prefix) > ip.max_prefixlen:
        raise ValueError(f"invalid CIDR address: {text}")
    return ipaddress.ip_network(f"{ip}/{int(prefix)}", strict=False)


def prepare_trusted_cidrs(proxies: Iterable[str] | None) -> list[IPNetwork] | None:
    """Turn proxy addresses and networks into a list of networks.

    Bare addresses become single-host networks. Returns None for None.
    Raises TrustedProxyError on the first invalid entry.
    """
    if proxies is None:
        return None
    networks: list[IPNetwork] = []
    for proxy in proxies:
        if "/" not in proxy:
            ip = parse_ip(proxy)
            if ip is None:
                raise TrustedProxyError(f"invalid IP address: {proxy}", networks)
            proxy += "/32" if ip.version == 4 else "/128"
        try:
            networks.append(_parse_cidr(proxy))
        except ValueError as exc:
            raise TrustedProxyError(str(exc), networks) from None
    return networks


def _normalize_network(network: IPNetwork) -> IPNetwork:
    if isinstance(network, ipaddress.IPv6Network) and network.prefixlen >= 96:
        mapped = network.network_address.ipv4_mapped
        if mapped is not None:
            return ipaddress.IPv4Network(f"{mapped}/{network.prefixlen - 96}", strict=False)
    return network


class TrustedProxies:
    """The set of proxy networks whose forwarding headers are believed."""

    def __init__(self, proxies: Iterable[str] | None = DEFAULT_TRUSTED_PROXIES) -> None:
        self.proxies: list[str] | None = None
        self.cidrs: list[IPNetwork] | None = None
        self.set(proxies)

    def set(self, proxies: Iterable[str] | None) -> None:
        """Replace the trusted proxies; None disables trust entirely.

        On an invalid entry the networks parsed before it stay in effect and
        TrustedProxyError is raised.
        """
        self.proxies = None if proxies is None else list(proxies)
        try:
            self.cidrs = prepare_trusted_cidrs(self.proxies)
        except TrustedProxyError as exc:
            self.cidrs = list(exc.parsed)
            raise

    def contains(self, ip: str | IPAddress) -> bool:
        """Return True if ``ip`` lies in one of the trusted networks."""
        if self.cidrs is None:
            return False
        address = parse_ip(ip) if isinstance(ip, str) else _unmap(ip)
        if address is None:
            return False
        for network in self.cidrs:
            network = _normalize_network(network)
            if network.version == address.version and address in network:
                return True
        return False

    def is_unsafe(self) -> bool:
        """True when every address is trusted."""
        return self.contains("0.0.0.0") or self.contains("::")

    def validate_header(self, header: str) -> str | None:
        """Return the client IP from an X-Forwarded-For style header, or None.

        Entries are read right to left; the first one not from a trusted
        proxy, or the leftmost one, is the client. An invalid entry stops
        the search.
        """
        if not header:
            return None
        items = header.split(",")
        for position in range(len(items) - 1, -1, -1):
            text = items[position].strip()
            ip = _parse_address(text)
            if ip is None:
                break
            if position == 0 or not self.contains(ip):
                return text
        return None