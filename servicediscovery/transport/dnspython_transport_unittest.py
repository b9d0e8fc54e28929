import dns.exception
import dns.message
import dns.rcode
import dns.rdatatype
import dns.rrset
import pytest

from servicediscovery.errors import TransportError
from servicediscovery.transport.dns_query import DnsQuery
from servicediscovery.transport.dns_record import (
    ARecord,
    DnsRecordType,
    SrvRecord,
)
from servicediscovery.transport.dnspython_transport import (
    DnspythonTransport,
    decode_answers,
)
from servicediscovery.transport.server_address import DnsServerAddress

SERVER = DnsServerAddress("127.0.0.1", 8600)
SRV_QUERY = DnsQuery("api.service.consul.", DnsRecordType.SRV)


def make_response(
    query_name: str, rdtype: str, *rrsets: dns.rrset.RRset
) -> dns.message.Message:
    request = dns.message.make_query(query_name, rdtype)
    response = dns.message.make_response(request)
    for rrset in rrsets:
        response.answer.append(rrset)
    return response


def srv_rrset(*texts: str) -> dns.rrset.RRset:
    return dns.rrset.from_text_list(
        "api.service.consul.", 0, "IN", "SRV", list(texts)
    )


class TestDecodeAnswers:

    def test_decodes_srv_records_in_order(self) -> None:
        response = make_response(
            "api.service.consul.",
            "SRV",
            srv_rrset(
                "1 1 8080 host1.node.dc1.consul.",
                "1 1 8081 host2.node.dc1.consul.",
            ),
        )

        records = decode_answers(response)

        assert records == [
            SrvRecord("host1.node.dc1.consul.", 8080, priority=1, weight=1),
            SrvRecord("host2.node.dc1.consul.", 8081, priority=1, weight=1),
        ]
        assert records[0].record_type is DnsRecordType.SRV

    def test_decodes_a_record_and_drops_cname(self) -> None:
        cname = dns.rrset.from_text(
            "alias.node.consul.", 0, "IN", "CNAME", "host1.node.consul."
        )
        a = dns.rrset.from_text("host1.node.consul.", 0, "IN", "A", "10.0.0.1")
        response = make_response("alias.node.consul.", "A", cname, a)

        assert decode_answers(response) == [ARecord("10.0.0.1")]

    def test_empty_answer(self) -> None:
        response = make_response("api.service.consul.", "SRV")

        assert decode_answers(response) == []


class TestDnspythonTransport:

    def test_init_rejects_non_positive_timeout(self) -> None:
        with pytest.raises(ValueError):
            DnspythonTransport(timeout=0)

    def test_exchange_with_fallback(self, mocker) -> None:
        response = make_response(
            "api.service.consul.", "SRV", srv_rrset("1 1 8080 host1.node.consul.")
        )
        mock_udp = mocker.patch(
            "dns.query.udp_with_fallback", return_value=(response, False)
        )
        transport = DnspythonTransport(timeout=1.5)

        result = transport.exchange(SRV_QUERY, SERVER)

        assert result.is_success
        assert result.answers == [SrvRecord("host1.node.consul.", 8080, 1, 1)]
        mock_udp.assert_called_once()
        args, kwargs = mock_udp.call_args
        sent = args[0]
        assert sent.question[0].name.to_text() == "api.service.consul."
        assert sent.question[0].rdtype == dns.rdatatype.SRV
        assert args[1] == "127.0.0.1"
        assert kwargs == {"timeout": 1.5, "port": 8600}

    def test_exchange_without_fallback_uses_udp(self, mocker) -> None:
        response = make_response("host1.node.consul.", "A")
        mock_udp = mocker.patch("dns.query.udp", return_value=response)
        mock_fallback = mocker.patch("dns.query.udp_with_fallback")
        transport = DnspythonTransport(tcp_fallback=False)

        transport.exchange(DnsQuery("host1.node.consul.", DnsRecordType.A), SERVER)

        mock_udp.assert_called_once()
        assert mock_udp.call_args.args[0].question[0].rdtype == dns.rdatatype.A
        mock_fallback.assert_not_called()

    def test_exchange_reports_rcode(self, mocker) -> None:
        response = make_response("api.service.consul.", "SRV")
        response.set_rcode(dns.rcode.NXDOMAIN)
        mocker.patch("dns.query.udp_with_fallback", return_value=(response, True))

        result = DnspythonTransport().exchange(SRV_QUERY, SERVER)

        assert result.rcode == 3
        assert not result.is_success

    @pytest.mark.parametrize(
        "error",
        [
            dns.exception.Timeout(),
            ConnectionRefusedError("refused"),
            OSError("unreachable"),
        ],
    )
    def test_exchange_wraps_network_errors(
        self, mocker, error: Exception
    ) -> None:
        mocker.patch("dns.query.udp_with_fallback", side_effect=error)

        with pytest.raises(TransportError) as exc_info:
            DnspythonTransport().exchange(SRV_QUERY, SERVER)
        assert exc_info.value.__cause__ is error

    @pytest.mark.parametrize(
        "name",
        ["api..v2.service.consul.", ".api.service.consul.", "a" * 64 + ".consul."],
    )
    def test_exchange_invalid_name_raises_transport_error(
        self, mocker, name: str
    ) -> None:
        mock_udp = mocker.patch("dns.query.udp_with_fallback")

        with pytest.raises(TransportError) as exc_info:
            DnspythonTransport().exchange(
                DnsQuery(name, DnsRecordType.SRV), SERVER
            )
        assert isinstance(exc_info.value.__cause__, dns.exception.DNSException)
        mock_udp.assert_not_called()
