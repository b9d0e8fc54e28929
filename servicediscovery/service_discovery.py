"""ServiceDiscovery ABC: resolves service names into endpoints."""

from abc import ABC, abstractmethod
from typing import List, Tuple

from servicediscovery.service_instance import ServiceInstance


class ServiceDiscovery(ABC):
    """Interface for looking up the endpoints of a named service."""

    @abstractmethod
    def discover_service(self, service_name: str) -> Tuple[str, str]:
        """Returns the `(ip, port)` of one instance of |service_name|.

        Raises:
            NoInstanceError: If no instance could be resolved.
            ServiceDiscoveryError: If the lookup itself failed.
        """
        raise NotImplementedError(
            "ServiceDiscovery.discover_service must be implemented by subclasses."
        )

    @abstractmethod
    def discover_all_service_instances(
        self, service_name: str
    ) -> List[ServiceInstance]:
        """Returns every resolvable instance of |service_name|.

        Raises:
            ServiceDiscoveryError: If the lookup itself failed.
        """
        raise NotImplementedError(
            "ServiceDiscovery.discover_all_service_instances must be "
            "implemented by subclasses."
        )
