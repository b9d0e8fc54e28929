import dataclasses

import pytest

from servicediscovery.service_instance import ServiceInstance


def test_address() -> None:
    assert ServiceInstance(ip="10.0.0.1", port="8080").address == "10.0.0.1:8080"


def test_immutable() -> None:
    instance = ServiceInstance(ip="10.0.0.1", port="8080")
    with pytest.raises(dataclasses.FrozenInstanceError):
        instance.ip = "10.0.0.2"  # type: ignore[misc]


def test_equality() -> None:
    assert ServiceInstance("10.0.0.1", "80") == ServiceInstance("10.0.0.1", "80")
    assert ServiceInstance("10.0.0.1", "80") != ServiceInstance("10.0.0.1", "81")
