"""Configuration for servicediscovery resolvers."""

from servicediscovery.config.discovery_config import (
    DEFAULT_DNS_SEARCH,
    ServiceDiscoveryConfig,
)

__all__ = ["DEFAULT_DNS_SEARCH", "ServiceDiscoveryConfig"]
