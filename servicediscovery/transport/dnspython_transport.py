"""DnsTransport implementation backed by dnspython."""

import logging
from typing import List

import dns.exception
import dns.message
import dns.query
import dns.rdatatype

from servicediscovery.errors import TransportError
from servicediscovery.transport.dns_query import DnsQuery
from servicediscovery.transport.dns_record import (
    ARecord,
    DnsRecord,
    DnsResponse,
    SrvRecord,
)
from servicediscovery.transport.dns_transport import DnsTransport
from servicediscovery.transport.server_address import DnsServerAddress

logger = logging.getLogger(__name__)


class DnspythonTransport(DnsTransport):
    """Sends queries over UDP with `dns.query`, retrying over TCP if truncated."""

    def __init__(self, timeout: float = 2.0, tcp_fallback: bool = True) -> None:
        """Initializes the transport.

        Args:
            timeout: Seconds to wait for each exchange.
            tcp_fallback: Whether a truncated UDP reply is re-asked over TCP.

        Raises:
            ValueError: If |timeout| is not positive.
        """
        if timeout <= 0:
            raise ValueError(f"timeout must be positive, got {timeout}.")
        self.__timeout = timeout
        self.__tcp_fallback = tcp_fallback

    @property
    def timeout(self) -> float:
        return self.__timeout

    @property
    def tcp_fallback(self) -> bool:
        return self.__tcp_fallback

    def exchange(self, query: DnsQuery, server: DnsServerAddress) -> DnsResponse:
        try:
            message = dns.message.make_query(
                query.name, dns.rdatatype.RdataType(query.record_type.value)
            )
            if self.__tcp_fallback:
                response, used_tcp = dns.query.udp_with_fallback(
                    message, server.host, timeout=self.__timeout, port=server.port
                )
                if used_tcp:
                    logger.debug(
                        "Truncated reply for %s, re-asked over TCP", query.name
                    )
            else:
                response = dns.query.udp(
                    message, server.host, timeout=self.__timeout, port=server.port
                )
        except (dns.exception.DNSException, OSError) as e:
            raise TransportError(
                f"DNS exchange for '{query.name}' with {server} failed: {e}"
            ) from e

        return DnsResponse(
            rcode=int(response.rcode()), answers=decode_answers(response)
        )


def decode_answers(response: dns.message.Message) -> List[DnsRecord]:
    """Decodes the SRV and A records of |response|'s answer section.

    Other record types (e.g. CNAME) are dropped.
    """
    records: List[DnsRecord] = []
    for rrset in response.answer:
        if rrset.rdtype == dns.rdatatype.SRV:
            for rdata in rrset:
                records.append(
                    SrvRecord(
                        target=rdata.target.to_text(),
                        port=rdata.port,
                        priority=rdata.priority,
                        weight=rdata.weight,
                    )
                )
        elif rrset.rdtype == dns.rdatatype.A:
            for rdata in rrset:
                records.append(ARecord(address=rdata.address))
        else:
            logger.debug(
                "Skipping %s record for %s",
                dns.rdatatype.to_text(rrset.rdtype),
                rrset.name,
            )
    return records

