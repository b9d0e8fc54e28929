"""DNS answer records understood by service discovery.

Records are decoded once, by the transport, into one of the dataclasses below.
Consumers dispatch on `record_type` rather than inspecting classes.
"""

import dataclasses
from enum import Enum
from typing import ClassVar, List, Union


class DnsRecordType(Enum):
    """Record types used by service discovery, valued by their wire codes."""

    A = 1
    SRV = 33


@dataclasses.dataclass(frozen=True)
class SrvRecord:
    """An SRV answer: where an instance of a service can be reached."""

    record_type: ClassVar[DnsRecordType] = DnsRecordType.SRV

    target: str
    port: int
    priority: int = 0
    weight: int = 0

    @property
    def bare_target(self) -> str:
        """The target hostname without its trailing root dot."""
        if self.target.endswith("."):
            return self.target[:-1]
        return self.target


@dataclasses.dataclass(frozen=True)
class ARecord:
    """An A answer: the IPv4 address of a hostname."""

    record_type: ClassVar[DnsRecordType] = DnsRecordType.A

    address: str


DnsRecord = Union[SrvRecord, ARecord]


RCODE_SUCCESS = 0


@dataclasses.dataclass(frozen=True)
class DnsResponse:
    """A decoded DNS response: its response code and answer records."""

    rcode: int
    answers: List[DnsRecord] = dataclasses.field(default_factory=list)

    @property
    def is_success(self) -> bool:
        return self.rcode == RCODE_SUCCESS
