"""Resolves service names through the Consul DNS interface."""

import logging
from typing import List, Optional, Tuple, cast

from servicediscovery.config.discovery_config import (
    DEFAULT_DNS_SEARCH,
    ServiceDiscoveryConfig,
)
from servicediscovery.errors import (
    NoInstanceError,
    NoRecordError,
    QueryFailedError,
    ServiceDiscoveryError,
    TransportError,
)
from servicediscovery.service_discovery import ServiceDiscovery
from servicediscovery.service_instance import ServiceInstance
from servicediscovery.target_address_cache import TargetAddressCache
from servicediscovery.transport.dns_query import DnsQuery
from servicediscovery.transport.dns_record import (
    ARecord,
    DnsRecordType,
    DnsResponse,
    SrvRecord,
)
from servicediscovery.transport.dns_transport import DnsTransport
from servicediscovery.transport.dnspython_transport import DnspythonTransport
from servicediscovery.transport.server_address import DnsServerAddress
from servicediscovery.util.atomic_counter import AtomicCounter

logger = logging.getLogger(__name__)


class ConsulServiceDiscovery(ServiceDiscovery):
    """Discovers service instances with SRV then A lookups against Consul DNS.

    A service name is suffixed with `dns_search` (".service.consul" by default)
    and queried for SRV records. Each SRV target hostname is then resolved
    with an A query, and the resulting address is cached for the lifetime of
    this instance. Targets whose address cannot be resolved are left out of
    the result and counted in `skipped_target_count`.

    Calls are synchronous and block until the DNS exchanges complete.
    """

    def __init__(
        self,
        dns_server: str,
        *,
        dns_search: str = DEFAULT_DNS_SEARCH,
        transport: Optional[DnsTransport] = None,
    ) -> None:
        """Initializes the resolver and pins the DNS server address.

        Args:
            dns_server: Discovery DNS server as 'host:port'. A hostname is
                resolved once, here, and its first address is used from then on.
            dns_search: Suffix appended to every service name.
            transport: Sends queries. Defaults to a `DnspythonTransport`.

        Raises:
            ConfigurationError: If |dns_server| is malformed.
            ResolutionError: If the server hostname cannot be resolved.
        """
        self.__dns_server: DnsServerAddress = DnsServerAddress.resolve(dns_server)
        self.__dns_search: str = dns_search
        self.__transport: DnsTransport = (
            transport if transport is not None else DnspythonTransport()
        )
        self.__target_cache = TargetAddressCache()
        self.__skipped_targets = AtomicCounter()

    @classmethod
    def from_config(
        cls,
        config: ServiceDiscoveryConfig,
        *,
        transport: Optional[DnsTransport] = None,
    ) -> "ConsulServiceDiscovery":
        """Creates a resolver from |config|.

        Unless |transport| is given, a `DnspythonTransport` is built from the
        timeout and TCP fallback settings of |config|.
        """
        if transport is None:
            transport = DnspythonTransport(
                timeout=config.timeout_seconds,
                tcp_fallback=config.tcp_fallback,
            )
        return cls(
            config.dns_server,
            dns_search=config.dns_search,
            transport=transport,
        )

    @property
    def dns_server(self) -> DnsServerAddress:
        return self.__dns_server

    @property
    def dns_search(self) -> str:
        return self.__dns_search

    @property
    def target_address_cache(self) -> TargetAddressCache:
        return self.__target_cache

    @property
    def skipped_target_count(self) -> int:
        """Number of SRV targets dropped because their address lookup failed."""
        return self.__skipped_targets.get()

    def discover_service(self, service_name: str) -> Tuple[str, str]:
        instances = self.discover_all_service_instances(service_name)
        if len(instances) == 0:
            logger.error(
                "Service lookup: No SRV entry in DNS response for '%s'",
                service_name,
            )
            raise NoInstanceError(
                f"Service lookup: No SRV entry in DNS response for '{service_name}'."
            )

        first = instances[0]
        return first.ip, first.port

    def discover_all_service_instances(
        self, service_name: str
    ) -> List[ServiceInstance]:
        query = DnsQuery.for_name(
            service_name + self.__dns_search, DnsRecordType.SRV
        )
        response = self.__exchange(query, target=None)

        instances: List[ServiceInstance] = []
        for record in response.answers:
            if record.record_type is not DnsRecordType.SRV:
                continue
            srv = cast(SrvRecord, record)

            target = srv.bare_target
            try:
                target_ip = self._resolve_target(target)
            except ServiceDiscoveryError as e:
                count = self.__skipped_targets.increment()
                logger.warning(
                    "Skipping target '%s' of service '%s': %s (%d skipped so far)",
                    target,
                    query.name,
                    e,
                    count,
                )
                continue

            instances.append(ServiceInstance(ip=target_ip, port=str(srv.port)))

        return instances

    def _resolve_target(self, target: str) -> str:
        """Returns the IPv4 address of the bare hostname |target|.

        Successful lookups are cached; failures are not, so a later call
        queries again.

        Raises:
            TransportError: If the A query could not be exchanged.
            QueryFailedError: If the server answered with an error code.
            NoRecordError: If the answer held no A record.
        """
        cached = self.__target_cache.get(target)
        if cached is not None:
            logger.debug("Target '%s' served from cache: %s", target, cached)
            return cached

        query = DnsQuery.for_name(target, DnsRecordType.A)
        response = self.__exchange(query, target=target)

        for record in response.answers:
            if record.record_type is DnsRecordType.A:
                address = cast(ARecord, record).address
                return self.__target_cache.store(target, address)

        logger.error(
            "Service lookup: No A entry in DNS response for '%s' (target '%s')",
            query.name,
            target,
        )
        raise NoRecordError(
            f"Service lookup: No A entry in DNS response for '{query.name}'."
        )

    def __exchange(self, query: DnsQuery, target: Optional[str]) -> DnsResponse:
        """Sends |query| to the pinned server, raising unless it succeeded."""
        try:
            response = self.__transport.exchange(query, self.__dns_server)
        except TransportError as e:
            logger.error(
                "Error during connection to DNS server %s for '%s' (target %s): %s",
                self.__dns_server,
                query.name,
                target,
                e,
            )
            raise

        if not response.is_success:
            stage = "Target" if target is not None else "Service"
            logger.error(
                "Service lookup: %s DNS query for '%s' did not succeed (rcode %d)",
                stage,
                query.name,
                response.rcode,
            )
            raise QueryFailedError(
                f"Service lookup: {stage} DNS query for '{query.name}' "
                "did not succeed.",
                response.rcode,
            )

        return response
