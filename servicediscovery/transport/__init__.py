"""Initializes the servicediscovery.transport package.

This package holds the boundary between the resolver and the network: the
decoded record and query types, the `DnsTransport` interface with its
dnspython-backed implementation, and discovery server address handling.
"""

from servicediscovery.transport.dns_query import DnsQuery, fqdn
from servicediscovery.transport.dns_record import (
    ARecord,
    DnsRecord,
    DnsRecordType,
    DnsResponse,
    SrvRecord,
)
from servicediscovery.transport.dns_transport import DnsTransport
from servicediscovery.transport.dnspython_transport import DnspythonTransport
from servicediscovery.transport.server_address import DnsServerAddress

__all__ = [
    "ARecord",
    "DnsQuery",
    "DnsRecord",
    "DnsRecordType",
    "DnsResponse",
    "DnsServerAddress",
    "DnsTransport",
    "DnspythonTransport",
    "SrvRecord",
    "fqdn",
]
