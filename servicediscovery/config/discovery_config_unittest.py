import pytest

from servicediscovery.config.discovery_config import (
    DEFAULT_DNS_SEARCH,
    ServiceDiscoveryConfig,
)
from servicediscovery.errors import ConfigurationError


def test_defaults() -> None:
    config = ServiceDiscoveryConfig(dns_server="127.0.0.1:8600")
    assert config.dns_search == DEFAULT_DNS_SEARCH == ".service.consul"
    assert config.timeout_seconds == 2.0
    assert config.tcp_fallback is True


@pytest.mark.parametrize(
    "kwargs",
    [
        {"dns_server": ""},
        {"dns_server": "127.0.0.1:8600", "timeout_seconds": 0},
        {"dns_server": "127.0.0.1:8600", "timeout_seconds": -1.0},
    ],
)
def test_invalid_values(kwargs) -> None:
    with pytest.raises(ConfigurationError):
        ServiceDiscoveryConfig(**kwargs)


def test_from_environment_minimal() -> None:
    config = ServiceDiscoveryConfig.from_environment(
        {"SERVICE_DISCOVERY_DNS_SERVER": "consul:8600"}
    )
    assert config == ServiceDiscoveryConfig(dns_server="consul:8600")


def test_from_environment_all_values() -> None:
    config = ServiceDiscoveryConfig.from_environment(
        {
            "SERVICE_DISCOVERY_DNS_SERVER": " 10.0.0.53:53 ",
            "SERVICE_DISCOVERY_DOMAIN": "dc2.consul.",
            "SERVICE_DISCOVERY_TIMEOUT": "0.75",
            "SERVICE_DISCOVERY_TCP_FALLBACK": "Off",
        }
    )
    assert config.dns_server == "10.0.0.53:53"
    assert config.dns_search == ".service.dc2.consul"
    assert config.timeout_seconds == 0.75
    assert config.tcp_fallback is False


def test_from_environment_reads_os_environ(monkeypatch) -> None:
    monkeypatch.setenv("SERVICE_DISCOVERY_DNS_SERVER", "127.0.0.1:8600")
    monkeypatch.delenv("SERVICE_DISCOVERY_DOMAIN", raising=False)
    monkeypatch.delenv("SERVICE_DISCOVERY_TIMEOUT", raising=False)
    monkeypatch.delenv("SERVICE_DISCOVERY_TCP_FALLBACK", raising=False)

    config = ServiceDiscoveryConfig.from_environment()
    assert config.dns_server == "127.0.0.1:8600"


@pytest.mark.parametrize(
    "environ, match",
    [
        ({}, "SERVICE_DISCOVERY_DNS_SERVER"),
        (
            {
                "SERVICE_DISCOVERY_DNS_SERVER": "a:53",
                "SERVICE_DISCOVERY_TIMEOUT": "soon",
            },
            "SERVICE_DISCOVERY_TIMEOUT",
        ),
        (
            {
                "SERVICE_DISCOVERY_DNS_SERVER": "a:53",
                "SERVICE_DISCOVERY_TCP_FALLBACK": "maybe",
            },
            "SERVICE_DISCOVERY_TCP_FALLBACK",
        ),
        (
            {"SERVICE_DISCOVERY_DNS_SERVER": "a:53", "SERVICE_DISCOVERY_TIMEOUT": "-2"},
            "timeout_seconds",
        ),
    ],
)
def test_from_environment_invalid(environ, match: str) -> None:
    with pytest.raises(ConfigurationError, match=match):
        ServiceDiscoveryConfig.from_environment(environ)
