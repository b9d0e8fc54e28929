# servicediscovery/config/discovery_config.py
import os
from dataclasses import dataclass
from typing import Mapping, Optional

from servicediscovery.errors import ConfigurationError

DEFAULT_DNS_SEARCH = ".service.consul"

DNS_SERVER_ENV = "SERVICE_DISCOVERY_DNS_SERVER"
DOMAIN_ENV = "SERVICE_DISCOVERY_DOMAIN"
TIMEOUT_ENV = "SERVICE_DISCOVERY_TIMEOUT"
TCP_FALLBACK_ENV = "SERVICE_DISCOVERY_TCP_FALLBACK"

_TRUE_VALUES = ("1", "true", "yes", "on")
_FALSE_VALUES = ("0", "false", "no", "off")


@dataclass(frozen=True)
class ServiceDiscoveryConfig:
    """Configuration for creating a ConsulServiceDiscovery."""

    # Discovery DNS server as 'host:port', e.g. '127.0.0.1:8600'.
    dns_server: str

    # Appended to every service name before querying.
    dns_search: str = DEFAULT_DNS_SEARCH

    # Per-exchange timeout for the DNS transport.
    timeout_seconds: float = 2.0

    # Re-ask over TCP when a UDP reply comes back truncated.
    tcp_fallback: bool = True

    def __post_init__(self) -> None:
        if not self.dns_server:
            raise ConfigurationError("dns_server must not be empty.")
        if self.timeout_seconds <= 0:
            raise ConfigurationError(
                f"timeout_seconds must be positive, got {self.timeout_seconds}."
            )

    @classmethod
    def from_environment(
        cls, environ: Optional[Mapping[str, str]] = None
    ) -> "ServiceDiscoveryConfig":
        """Builds a config from `SERVICE_DISCOVERY_*` environment variables.

        Args:
            environ: Mapping to read instead of `os.environ`.

        Raises:
            ConfigurationError: If the server is missing or a value is invalid.
        """
        env = os.environ if environ is None else environ

        dns_server = env.get(DNS_SERVER_ENV, "").strip()
        if not dns_server:
            raise ConfigurationError(f"{DNS_SERVER_ENV} is not set.")

        domain = env.get(DOMAIN_ENV, "").strip().strip(".")
        dns_search = f".service.{domain}" if domain else DEFAULT_DNS_SEARCH

        timeout_seconds = 2.0
        raw_timeout = env.get(TIMEOUT_ENV)
        if raw_timeout is not None:
            try:
                timeout_seconds = float(raw_timeout)
            except ValueError as e:
                raise ConfigurationError(
                    f"{TIMEOUT_ENV} must be a number, got '{raw_timeout}'."
                ) from e

        tcp_fallback = True
        raw_fallback = env.get(TCP_FALLBACK_ENV)
        if raw_fallback is not None:
            lowered = raw_fallback.strip().lower()
            if lowered in _TRUE_VALUES:
                tcp_fallback = True
            elif lowered in _FALSE_VALUES:
                tcp_fallback = False
            else:
                raise ConfigurationError(
                    f"{TCP_FALLBACK_ENV} must be a boolean, got '{raw_fallback}'."
                )

        return cls(
            dns_server=dns_server,
            dns_search=dns_search,
            timeout_seconds=timeout_seconds,
            tcp_fallback=tcp_fallback,
        )
