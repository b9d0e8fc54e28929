"""DnsTransport ABC: sends one query to a DNS server and decodes the reply."""

from abc import ABC, abstractmethod

from servicediscovery.transport.dns_query import DnsQuery
from servicediscovery.transport.dns_record import DnsResponse
from servicediscovery.transport.server_address import DnsServerAddress


class DnsTransport(ABC):
    """Interface for exchanging a DNS query with a server.

    Implementations own sockets, timeouts and retransmission. Callers only see
    a decoded `DnsResponse` or a `TransportError`.
    """

    @abstractmethod
    def exchange(self, query: DnsQuery, server: DnsServerAddress) -> DnsResponse:
        """Sends |query| to |server| and returns the decoded response.

        Args:
            query: The question to ask.
            server: The pinned address of the DNS server.

        Returns:
            The response code and the SRV and A answer records, in the order
            the server returned them.

        Raises:
            TransportError: On any I/O failure or timeout, or when |query|
                cannot be encoded.
        """
        raise NotImplementedError(
            "DnsTransport.exchange must be implemented by subclasses."
        )
