"""Reverse DNS for remote endpoints shown in the connection table."""

from __future__ import annotations

import ipaddress
import logging
import socket
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)


@dataclass
class HostResolver:
    """Resolves remote IPs to hostnames via PTR lookups.

    Results, including misses, are cached for the lifetime of the resolver.
    Wildcard, unspecified and loopback addresses are never looked up.
    """

    _cache: dict[str, str] = field(default_factory=dict)

    def resolve(self, ip: str) -> str:
        """Return the hostname for *ip*, or "" when there is none."""
        if ip in self._cache:
            return self._cache[ip]

        hostname = self._reverse_dns(ip) if _lookup_worthy(ip) else ""
        self._cache[ip] = hostname
        return hostname

    def resolve_addr(self, addr: str) -> str:
        """Resolve the ip part of an ``ip:port`` string."""
        ip, sep, _ = addr.rpartition(":")
        if not sep:
            return ""
        return self.resolve(ip)

    @staticmethod
    def _reverse_dns(ip: str) -> str:
        try:
            hostname, _aliases, _addrs = socket.gethostbyaddr(ip)
            return hostname
        except (socket.herror, socket.gaierror, OSError) as exc:
            logger.debug("Reverse DNS failed for %s: %s", ip, exc)
            return ""


def _lookup_worthy(ip: str) -> bool:
    try:
        addr = ipaddress.ip_address(ip)
    except ValueError:
        return False
    return not (addr.is_unspecified or addr.is_loopback)
