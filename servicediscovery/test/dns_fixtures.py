from typing import Dict, List, Tuple, Union

from servicediscovery.errors import TransportError
from servicediscovery.transport.dns_query import DnsQuery
from servicediscovery.transport.dns_record import (
    ARecord,
    DnsRecordType,
    DnsResponse,
    SrvRecord,
)
from servicediscovery.transport.dns_transport import DnsTransport
from servicediscovery.transport.server_address import DnsServerAddress

ScriptedReply = Union[DnsResponse, Exception]


class FakeDnsTransport(DnsTransport):
    """DnsTransport answering from a table keyed by (name, record type).

    Every exchange is recorded so tests can assert which queries were sent.
    Unknown questions are answered with an empty successful response.
    """

    __test__ = False

    def __init__(self) -> None:
        self.replies: Dict[Tuple[str, DnsRecordType], ScriptedReply] = {}
        self.exchanges: List[Tuple[DnsQuery, DnsServerAddress]] = []

    def reply(
        self, name: str, record_type: DnsRecordType, reply: ScriptedReply
    ) -> None:
        self.replies[(name, record_type)] = reply

    def srv(self, name: str, *targets: Tuple[str, int]) -> None:
        self.reply(
            name,
            DnsRecordType.SRV,
            DnsResponse(
                rcode=0,
                answers=[
                    SrvRecord(target=t, port=p, priority=1, weight=1)
                    for t, p in targets
                ],
            ),
        )

    def a(self, name: str, address: str) -> None:
        self.reply(
            name,
            DnsRecordType.A,
            DnsResponse(rcode=0, answers=[ARecord(address=address)]),
        )

    def queries_of_type(self, record_type: DnsRecordType) -> List[DnsQuery]:
        return [q for q, _ in self.exchanges if q.record_type is record_type]

    def exchange(self, query: DnsQuery, server: DnsServerAddress) -> DnsResponse:
        self.exchanges.append((query, server))
        reply = self.replies.get(
            (query.name, query.record_type), DnsResponse(rcode=0)
        )
        if isinstance(reply, Exception):
            raise reply
        return reply


def transport_error(message: str = "timed out") -> TransportError:
    return TransportError(message)
