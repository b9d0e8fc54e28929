"""Defines the ServiceInstance returned by service discovery."""

import dataclasses


@dataclasses.dataclass(frozen=True)
class ServiceInstance:
    """A resolved endpoint of a discovered service.

    Both fields are kept as strings so they can be joined directly into a
    connection target. `port` originates from the unsigned 16-bit port field
    of an SRV record.
    """

    ip: str
    port: str

    @property
    def address(self) -> str:
        """Returns the endpoint as an `ip:port` string."""
        return f"{self.ip}:{self.port}"
