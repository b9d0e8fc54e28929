"""Exception types raised by the service discovery resolver."""


class ServiceDiscoveryError(Exception):
    """Base class for all service discovery failures."""


class ConfigurationError(ServiceDiscoveryError, ValueError):
    """Raised when the discovery server address or settings are malformed."""


class ResolutionError(ServiceDiscoveryError):
    """Raised when the discovery server hostname cannot be resolved."""


class TransportError(ServiceDiscoveryError):
    """Raised when a DNS exchange fails at the network level."""


class QueryFailedError(ServiceDiscoveryError):
    """Raised when the DNS server answers with a non-success response code."""

    def __init__(self, message: str, rcode: int) -> None:
        super().__init__(message)
        self.rcode = rcode


class NoRecordError(ServiceDiscoveryError):
    """Raised when a successful answer lacks the expected record type."""


class NoInstanceError(ServiceDiscoveryError, LookupError):
    """Raised when an SRV query yields no usable service instance."""
