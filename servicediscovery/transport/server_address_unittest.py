import socket

import pytest

from servicediscovery.errors import ConfigurationError, ResolutionError
from servicediscovery.transport.server_address import (
    DnsServerAddress,
    is_ip_literal,
    split_host_port,
)


def addrinfo(*addresses: str):
    return [
        (socket.AF_INET, socket.SOCK_DGRAM, socket.IPPROTO_UDP, "", (a, 0))
        for a in addresses
    ]


class TestSplitHostPort:

    @pytest.mark.parametrize(
        "host_port, expected",
        [
            ("127.0.0.1:8600", ("127.0.0.1", 8600)),
            ("consul:53", ("consul", 53)),
            ("[::1]:8600", ("::1", 8600)),
            ("localhost:0", ("localhost", 0)),
        ],
    )
    def test_valid(self, host_port: str, expected) -> None:
        assert split_host_port(host_port) == expected

    @pytest.mark.parametrize(
        "host_port",
        [
            "",
            "127.0.0.1",
            ":8600",
            "consul:",
            "consul:dns",
            "consul:70000",
            "::1:8600",
            "[::1]8600",
            "[::1:8600",
        ],
    )
    def test_malformed(self, host_port: str) -> None:
        with pytest.raises(ConfigurationError):
            split_host_port(host_port)


def test_is_ip_literal() -> None:
    assert is_ip_literal("10.0.0.1")
    assert is_ip_literal("::1")
    assert not is_ip_literal("consul.local")


class TestDnsServerAddress:

    def test_ip_literal_skips_lookup(self, mocker) -> None:
        mock_getaddrinfo = mocker.patch("socket.getaddrinfo")

        address = DnsServerAddress.resolve("10.0.0.53:8600")

        assert address == DnsServerAddress("10.0.0.53", 8600)
        mock_getaddrinfo.assert_not_called()

    def test_hostname_pins_first_address(self, mocker) -> None:
        mocker.patch(
            "socket.getaddrinfo",
            return_value=addrinfo("10.0.0.2", "10.0.0.2", "10.0.0.3"),
        )

        assert DnsServerAddress.resolve("consul:8600") == DnsServerAddress(
            "10.0.0.2", 8600
        )

    def test_hostname_lookup_failure(self, mocker) -> None:
        mocker.patch(
            "socket.getaddrinfo",
            side_effect=socket.gaierror(-2, "Name or service not known"),
        )

        with pytest.raises(ResolutionError):
            DnsServerAddress.resolve("consul:8600")

    def test_hostname_without_addresses(self, mocker) -> None:
        mocker.patch("socket.getaddrinfo", return_value=[])

        with pytest.raises(ResolutionError, match="No service discovery host"):
            DnsServerAddress.resolve("consul:8600")

    def test_malformed_raises_before_lookup(self, mocker) -> None:
        mock_getaddrinfo = mocker.patch("socket.getaddrinfo")

        with pytest.raises(ConfigurationError):
            DnsServerAddress.resolve("consul")
        mock_getaddrinfo.assert_not_called()

    def test_str(self) -> None:
        assert str(DnsServerAddress("10.0.0.1", 53)) == "10.0.0.1:53"
        assert str(DnsServerAddress("::1", 8600)) == "[::1]:8600"
