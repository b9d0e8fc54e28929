"""Parses and pins the address of the discovery DNS server."""

import dataclasses
import ipaddress
import logging
import socket
from typing import Tuple

from servicediscovery.errors import ConfigurationError, ResolutionError

logger = logging.getLogger(__name__)


def is_ip_literal(host: str) -> bool:
    """Returns whether |host| is an IPv4 or IPv6 address literal."""
    try:
        ipaddress.ip_address(host)
    except ValueError:
        return False
    return True


def split_host_port(host_port: str) -> Tuple[str, int]:
    """Splits a `host:port` string into its host and numeric port.

    IPv6 literals must be bracketed, as in `[::1]:8600`.

    Raises:
        ConfigurationError: If |host_port| is malformed.
    """
    if not isinstance(host_port, str) or not host_port:
        raise ConfigurationError(
            "DNS server address must be a non-empty 'host:port' string, "
            f"got {host_port!r}."
        )

    if host_port.startswith("["):
        closing = host_port.find("]")
        if closing < 0:
            raise ConfigurationError(f"Missing ']' in address '{host_port}'.")
        host = host_port[1:closing]
        remainder = host_port[closing + 1 :]
        if not remainder.startswith(":"):
            raise ConfigurationError(f"Missing port in address '{host_port}'.")
        port_str = remainder[1:]
    else:
        host, sep, port_str = host_port.rpartition(":")
        if not sep:
            raise ConfigurationError(f"Missing port in address '{host_port}'.")
        if ":" in host:
            raise ConfigurationError(f"Too many colons in address '{host_port}'.")

    if not host:
        raise ConfigurationError(f"Missing host in address '{host_port}'.")
    if not (port_str.isascii() and port_str.isdigit()):
        raise ConfigurationError(
            f"Invalid port '{port_str}' in address '{host_port}'."
        )
    port = int(port_str)
    if port > 65535:
        raise ConfigurationError(
            f"Port {port} out of range in address '{host_port}'."
        )
    return host, port


def lookup_host(host: str) -> list[str]:
    """Returns the addresses |host| resolves to, in resolver order.

    Raises:
        ResolutionError: If the lookup fails.
    """
    try:
        infos = socket.getaddrinfo(host, None, proto=socket.IPPROTO_UDP)
    except (socket.gaierror, UnicodeError) as e:
        logger.error("Could not resolve discovery server host '%s': %s", host, e)
        raise ResolutionError(
            f"Could not resolve discovery server host '{host}': {e}"
        ) from e

    addresses: list[str] = []
    for _, _, _, _, sockaddr in infos:
        address = str(sockaddr[0])
        if address not in addresses:
            addresses.append(address)
    return addresses


@dataclasses.dataclass(frozen=True)
class DnsServerAddress:
    """The IP address and port DNS queries are sent to."""

    host: str
    port: int

    def __str__(self) -> str:
        if ":" in self.host:
            return f"[{self.host}]:{self.port}"
        return f"{self.host}:{self.port}"

    @classmethod
    def resolve(cls, host_port: str) -> "DnsServerAddress":
        """Parses |host_port| and pins it to a single IP address.

        A hostname is looked up once and the first returned address is used
        from then on. There is no later re-resolution and no fallback to the
        other returned addresses.

        Raises:
            ConfigurationError: If |host_port| is malformed.
            ResolutionError: If the hostname lookup fails or finds nothing.
        """
        host, port = split_host_port(host_port)
        if is_ip_literal(host):
            return cls(host, port)

        addresses = lookup_host(host)
        if len(addresses) == 0:
            logger.error("No service discovery host could be resolved for '%s'", host)
            raise ResolutionError(
                f"No service discovery host could be resolved for '{host}'."
            )

        logger.info(
            "Pinned discovery server '%s' to %s (of %d candidates)",
            host,
            addresses[0],
            len(addresses),
        )
        return cls(addresses[0], port)
