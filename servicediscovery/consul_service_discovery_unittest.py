import logging
import socket

import pytest

from servicediscovery.config.discovery_config import ServiceDiscoveryConfig
from servicediscovery.consul_service_discovery import ConsulServiceDiscovery
from servicediscovery.errors import (
    ConfigurationError,
    NoInstanceError,
    NoRecordError,
    QueryFailedError,
    ResolutionError,
    TransportError,
)
from servicediscovery.service_instance import ServiceInstance
from servicediscovery.test.dns_fixtures import FakeDnsTransport, transport_error
from servicediscovery.transport.dns_record import (
    ARecord,
    DnsRecordType,
    DnsResponse,
    SrvRecord,
)
from servicediscovery.transport.server_address import DnsServerAddress

DNS_SERVER = "127.0.0.1:8600"
API_FQDN = "api.service.consul."


@pytest.fixture
def transport() -> FakeDnsTransport:
    return FakeDnsTransport()


@pytest.fixture
def discovery(transport: FakeDnsTransport) -> ConsulServiceDiscovery:
    return ConsulServiceDiscovery(DNS_SERVER, transport=transport)


def test_discover_all_worked_example(
    discovery: ConsulServiceDiscovery, transport: FakeDnsTransport
) -> None:
    transport.srv(
        API_FQDN,
        ("host1.node.dc1.consul.", 8080),
        ("host2.node.dc1.consul.", 8081),
    )
    transport.a("host1.node.dc1.consul.", "10.0.0.1")
    transport.a("host2.node.dc1.consul.", "10.0.0.2")

    instances = discovery.discover_all_service_instances("api")

    assert instances == [
        ServiceInstance(ip="10.0.0.1", port="8080"),
        ServiceInstance(ip="10.0.0.2", port="8081"),
    ]
    assert discovery.discover_service("api") == ("10.0.0.1", "8080")


def test_discover_all_preserves_answer_order(
    discovery: ConsulServiceDiscovery, transport: FakeDnsTransport
) -> None:
    # Priorities and weights are deliberately out of order.
    transport.reply(
        API_FQDN,
        DnsRecordType.SRV,
        DnsResponse(
            rcode=0,
            answers=[
                SrvRecord("c.node.consul.", 3, priority=30, weight=1),
                SrvRecord("a.node.consul.", 1, priority=10, weight=5),
                SrvRecord("b.node.consul.", 2, priority=20, weight=9),
            ],
        ),
    )
    transport.a("a.node.consul.", "10.0.0.1")
    transport.a("b.node.consul.", "10.0.0.2")
    transport.a("c.node.consul.", "10.0.0.3")

    instances = discovery.discover_all_service_instances("api")

    assert [i.port for i in instances] == ["3", "1", "2"]
    assert [i.ip for i in instances] == ["10.0.0.3", "10.0.0.1", "10.0.0.2"]


def test_discover_all_queries_pinned_server_with_srv_fqdn(
    discovery: ConsulServiceDiscovery, transport: FakeDnsTransport
) -> None:
    discovery.discover_all_service_instances("api")

    assert len(transport.exchanges) == 1
    query, server = transport.exchanges[0]
    assert query.name == API_FQDN
    assert query.record_type is DnsRecordType.SRV
    assert server == DnsServerAddress("127.0.0.1", 8600)


def test_discover_all_uses_custom_search_suffix(
    transport: FakeDnsTransport,
) -> None:
    discovery = ConsulServiceDiscovery(
        DNS_SERVER, dns_search=".service.dc2.example", transport=transport
    )
    discovery.discover_all_service_instances("web")

    assert transport.exchanges[0][0].name == "web.service.dc2.example."


def test_discover_all_no_answers_returns_empty_list(
    discovery: ConsulServiceDiscovery, transport: FakeDnsTransport
) -> None:
    transport.srv(API_FQDN)

    assert discovery.discover_all_service_instances("api") == []


def test_discover_service_no_answers_raises_no_instance(
    discovery: ConsulServiceDiscovery, transport: FakeDnsTransport
) -> None:
    transport.srv(API_FQDN)

    with pytest.raises(NoInstanceError, match="No SRV entry"):
        discovery.discover_service("api")


def test_discover_all_skips_target_without_a_record(
    discovery: ConsulServiceDiscovery, transport: FakeDnsTransport
) -> None:
    transport.srv(
        API_FQDN,
        ("host1.node.consul.", 8080),
        ("missing.node.consul.", 8081),
        ("host3.node.consul.", 8082),
    )
    transport.a("host1.node.consul.", "10.0.0.1")
    transport.a("host3.node.consul.", "10.0.0.3")

    instances = discovery.discover_all_service_instances("api")

    assert instances == [
        ServiceInstance("10.0.0.1", "8080"),
        ServiceInstance("10.0.0.3", "8082"),
    ]
    assert discovery.skipped_target_count == 1


def test_discover_all_skips_targets_with_failed_queries(
    discovery: ConsulServiceDiscovery, transport: FakeDnsTransport
) -> None:
    transport.srv(
        API_FQDN,
        ("refused.node.consul.", 1),
        ("broken.node.consul.", 2),
        ("good.node.consul.", 3),
    )
    transport.reply(
        "refused.node.consul.", DnsRecordType.A, DnsResponse(rcode=5)
    )
    transport.reply(
        "broken.node.consul.", DnsRecordType.A, transport_error()
    )
    transport.a("good.node.consul.", "10.0.0.3")

    instances = discovery.discover_all_service_instances("api")

    assert instances == [ServiceInstance("10.0.0.3", "3")]
    assert discovery.skipped_target_count == 2


def test_discover_service_returns_first_resolvable_instance(
    discovery: ConsulServiceDiscovery, transport: FakeDnsTransport
) -> None:
    transport.srv(
        API_FQDN,
        ("missing.node.consul.", 8080),
        ("host2.node.consul.", 8081),
    )
    transport.a("host2.node.consul.", "10.0.0.2")

    assert discovery.discover_service("api") == ("10.0.0.2", "8081")


def test_discover_service_all_targets_unresolvable_raises_no_instance(
    discovery: ConsulServiceDiscovery, transport: FakeDnsTransport
) -> None:
    transport.srv(API_FQDN, ("missing.node.consul.", 8080))

    with pytest.raises(NoInstanceError):
        discovery.discover_service("api")
    assert discovery.skipped_target_count == 1


def test_srv_transport_error_raises_without_a_queries(
    discovery: ConsulServiceDiscovery, transport: FakeDnsTransport
) -> None:
    transport.reply(API_FQDN, DnsRecordType.SRV, transport_error())

    with pytest.raises(TransportError):
        discovery.discover_all_service_instances("api")
    assert transport.queries_of_type(DnsRecordType.A) == []

    with pytest.raises(TransportError):
        discovery.discover_service("api")


def test_srv_query_failure_raises_query_failed(
    discovery: ConsulServiceDiscovery, transport: FakeDnsTransport
) -> None:
    transport.reply(API_FQDN, DnsRecordType.SRV, DnsResponse(rcode=3))

    with pytest.raises(QueryFailedError) as exc_info:
        discovery.discover_all_service_instances("api")
    assert exc_info.value.rcode == 3
    assert transport.queries_of_type(DnsRecordType.A) == []


def test_non_srv_answers_are_ignored(
    discovery: ConsulServiceDiscovery, transport: FakeDnsTransport
) -> None:
    transport.reply(
        API_FQDN,
        DnsRecordType.SRV,
        DnsResponse(
            rcode=0,
            answers=[
                ARecord("192.0.2.1"),
                SrvRecord("host1.node.consul.", 80),
            ],
        ),
    )
    transport.a("host1.node.consul.", "10.0.0.1")

    assert discovery.discover_all_service_instances("api") == [
        ServiceInstance("10.0.0.1", "80")
    ]


def test_repeated_target_is_queried_once(
    discovery: ConsulServiceDiscovery, transport: FakeDnsTransport
) -> None:
    transport.srv(API_FQDN, ("host1.node.consul.", 8080))
    transport.srv("db.service.consul.", ("host1.node.consul.", 5432))
    transport.a("host1.node.consul.", "10.0.0.1")

    assert discovery.discover_service("api") == ("10.0.0.1", "8080")
    assert discovery.discover_service("db") == ("10.0.0.1", "5432")
    assert discovery.discover_service("api") == ("10.0.0.1", "8080")

    a_queries = transport.queries_of_type(DnsRecordType.A)
    assert [q.name for q in a_queries] == ["host1.node.consul."]
    assert len(transport.queries_of_type(DnsRecordType.SRV)) == 3


def test_same_target_twice_in_one_answer_is_queried_once(
    discovery: ConsulServiceDiscovery, transport: FakeDnsTransport
) -> None:
    transport.srv(
        API_FQDN,
        ("host1.node.consul.", 8080),
        ("host1.node.consul.", 8081),
    )
    transport.a("host1.node.consul.", "10.0.0.1")

    instances = discovery.discover_all_service_instances("api")

    assert instances == [
        ServiceInstance("10.0.0.1", "8080"),
        ServiceInstance("10.0.0.1", "8081"),
    ]
    assert len(transport.queries_of_type(DnsRecordType.A)) == 1


def test_cache_keeps_first_address(
    discovery: ConsulServiceDiscovery, transport: FakeDnsTransport
) -> None:
    transport.a("host1.node.consul.", "10.0.0.1")
    assert discovery._resolve_target("host1.node.consul") == "10.0.0.1"

    transport.a("host1.node.consul.", "10.9.9.9")
    assert discovery._resolve_target("host1.node.consul") == "10.0.0.1"
    assert discovery.target_address_cache.get("host1.node.consul") == "10.0.0.1"


def test_resolve_target_uses_first_a_record(
    discovery: ConsulServiceDiscovery, transport: FakeDnsTransport
) -> None:
    transport.reply(
        "host1.node.consul.",
        DnsRecordType.A,
        DnsResponse(
            rcode=0,
            answers=[
                SrvRecord("other.node.consul.", 1),
                ARecord("10.0.0.1"),
                ARecord("10.0.0.2"),
            ],
        ),
    )

    assert discovery._resolve_target("host1.node.consul") == "10.0.0.1"


def test_resolve_target_failure_is_not_cached(
    discovery: ConsulServiceDiscovery, transport: FakeDnsTransport
) -> None:
    with pytest.raises(NoRecordError):
        discovery._resolve_target("late.node.consul")
    assert "late.node.consul" not in discovery.target_address_cache

    transport.a("late.node.consul.", "10.0.0.7")
    assert discovery._resolve_target("late.node.consul") == "10.0.0.7"
    assert len(transport.queries_of_type(DnsRecordType.A)) == 2


def test_resolve_target_errors(
    discovery: ConsulServiceDiscovery, transport: FakeDnsTransport
) -> None:
    transport.reply("down.node.consul.", DnsRecordType.A, transport_error())
    transport.reply("nx.node.consul.", DnsRecordType.A, DnsResponse(rcode=3))

    with pytest.raises(TransportError):
        discovery._resolve_target("down.node.consul")
    with pytest.raises(QueryFailedError):
        discovery._resolve_target("nx.node.consul")
    assert len(discovery.target_address_cache) == 0


def test_skipped_target_is_logged(
    discovery: ConsulServiceDiscovery,
    transport: FakeDnsTransport,
    caplog: pytest.LogCaptureFixture,
) -> None:
    transport.srv(API_FQDN, ("missing.node.consul.", 8080))

    with caplog.at_level(logging.WARNING):
        discovery.discover_all_service_instances("api")

    assert any(
        "Skipping target 'missing.node.consul'" in r.getMessage()
        for r in caplog.records
    )


def test_instances_do_not_share_cache(transport: FakeDnsTransport) -> None:
    transport.a("host1.node.consul.", "10.0.0.1")
    first = ConsulServiceDiscovery(DNS_SERVER, transport=transport)
    second = ConsulServiceDiscovery(DNS_SERVER, transport=transport)

    first._resolve_target("host1.node.consul")

    assert "host1.node.consul" in first.target_address_cache
    assert "host1.node.consul" not in second.target_address_cache


def test_init_malformed_server_raises_configuration_error(
    transport: FakeDnsTransport,
) -> None:
    with pytest.raises(ConfigurationError):
        ConsulServiceDiscovery("127.0.0.1", transport=transport)


def test_init_resolves_hostname_and_pins_first_address(
    mocker, transport: FakeDnsTransport
) -> None:
    mock_getaddrinfo = mocker.patch(
        "socket.getaddrinfo",
        return_value=[
            (socket.AF_INET, socket.SOCK_DGRAM, 17, "", ("10.1.1.1", 0)),
            (socket.AF_INET, socket.SOCK_DGRAM, 17, "", ("10.1.1.2", 0)),
        ],
    )

    discovery = ConsulServiceDiscovery("consul.local:8600", transport=transport)
    discovery.discover_all_service_instances("api")
    discovery.discover_all_service_instances("api")

    mock_getaddrinfo.assert_called_once()
    assert discovery.dns_server == DnsServerAddress("10.1.1.1", 8600)
    assert all(
        server == DnsServerAddress("10.1.1.1", 8600)
        for _, server in transport.exchanges
    )


def test_init_unresolvable_hostname_raises_resolution_error(
    mocker, transport: FakeDnsTransport
) -> None:
    mocker.patch(
        "socket.getaddrinfo", side_effect=socket.gaierror("Name or service not known")
    )

    with pytest.raises(ResolutionError):
        ConsulServiceDiscovery("nowhere.invalid:8600", transport=transport)


def test_init_defaults_to_dnspython_transport() -> None:
    discovery = ConsulServiceDiscovery(DNS_SERVER)

    assert discovery.dns_search == ".service.consul"
    assert discovery.skipped_target_count == 0
    assert len(discovery.target_address_cache) == 0


def test_from_config_builds_transport(mocker) -> None:
    mock_transport_class = mocker.patch(
        "servicediscovery.consul_service_discovery.DnspythonTransport",
        autospec=True,
    )
    config = ServiceDiscoveryConfig(
        dns_server="10.0.0.53:53",
        dns_search=".service.dc2.consul",
        timeout_seconds=0.5,
        tcp_fallback=False,
    )

    discovery = ConsulServiceDiscovery.from_config(config)

    mock_transport_class.assert_called_once_with(timeout=0.5, tcp_fallback=False)
    assert discovery.dns_server == DnsServerAddress("10.0.0.53", 53)
    assert discovery.dns_search == ".service.dc2.consul"


def test_from_config_with_explicit_transport(transport: FakeDnsTransport) -> None:
    config = ServiceDiscoveryConfig(dns_server=DNS_SERVER)
    discovery = ConsulServiceDiscovery.from_config(config, transport=transport)

    discovery.discover_all_service_instances("api")

    assert len(transport.exchanges) == 1


@pytest.mark.parametrize("service_name", ["api..v2", ".api", "a" * 64])
def test_invalid_service_name_raises_transport_error(
    mocker, service_name: str
) -> None:
    mock_udp = mocker.patch("dns.query.udp_with_fallback")
    discovery = ConsulServiceDiscovery(DNS_SERVER)

    with pytest.raises(TransportError):
        discovery.discover_all_service_instances(service_name)
    with pytest.raises(TransportError):
        discovery.discover_service(service_name)
    mock_udp.assert_not_called()
