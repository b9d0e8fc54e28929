from servicediscovery.transport.dns_query import DnsQuery, fqdn
from servicediscovery.transport.dns_record import (
    ARecord,
    DnsRecordType,
    DnsResponse,
    SrvRecord,
)


def test_fqdn() -> None:
    assert fqdn("api.service.consul") == "api.service.consul."
    assert fqdn("api.service.consul.") == "api.service.consul."


def test_query_for_name_normalizes() -> None:
    query = DnsQuery.for_name("host1.node.consul", DnsRecordType.A)
    assert query == DnsQuery("host1.node.consul.", DnsRecordType.A)


def test_srv_bare_target() -> None:
    assert SrvRecord("host1.node.consul.", 80).bare_target == "host1.node.consul"
    assert SrvRecord("host1", 80).bare_target == "host1"


def test_record_types() -> None:
    assert SrvRecord("host1.", 80).record_type is DnsRecordType.SRV
    assert ARecord("10.0.0.1").record_type is DnsRecordType.A
    assert DnsRecordType.SRV.value == 33
    assert DnsRecordType.A.value == 1


def test_response_success() -> None:
    assert DnsResponse(rcode=0).is_success
    assert DnsResponse(rcode=0).answers == []
    assert not DnsResponse(rcode=2).is_success
