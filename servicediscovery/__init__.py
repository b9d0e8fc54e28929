"""Servicediscovery package for resolving services through Consul DNS.

A service name is looked up with an SRV query against the discovery DNS
server, and every SRV target hostname is resolved to an IPv4 address with an
A query. The resulting endpoints are returned as `ServiceInstance` objects.
"""

from servicediscovery.config.discovery_config import ServiceDiscoveryConfig
from servicediscovery.consul_service_discovery import ConsulServiceDiscovery
from servicediscovery.errors import (
    ConfigurationError,
    NoInstanceError,
    NoRecordError,
    QueryFailedError,
    ResolutionError,
    ServiceDiscoveryError,
    TransportError,
)
from servicediscovery.service_discovery import ServiceDiscovery
from servicediscovery.service_instance import ServiceInstance

__all__ = [
    "ConfigurationError",
    "ConsulServiceDiscovery",
    "NoInstanceError",
    "NoRecordError",
    "QueryFailedError",
    "ResolutionError",
    "ServiceDiscovery",
    "ServiceDiscoveryConfig",
    "ServiceDiscoveryError",
    "ServiceInstance",
    "TransportError",
]
