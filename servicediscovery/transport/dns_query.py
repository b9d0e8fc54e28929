"""Defines DnsQuery and the canonical fully-qualified name form."""

import dataclasses

from servicediscovery.transport.dns_record import DnsRecordType


def fqdn(name: str) -> str:
    """Returns |name| in the trailing-dot form required on the wire."""
    if name.endswith("."):
        return name
    return name + "."


@dataclasses.dataclass(frozen=True)
class DnsQuery:
    """A single-question DNS query."""

    name: str
    record_type: DnsRecordType

    @classmethod
    def for_name(cls, name: str, record_type: DnsRecordType) -> "DnsQuery":
        """Creates a query for |name|, normalizing it with `fqdn`."""
        return cls(fqdn(name), record_type)
