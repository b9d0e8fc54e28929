"""Memoizes the IPv4 address of SRV target hostnames."""

import threading
from typing import Dict, Optional


class TargetAddressCache:
    """Maps bare target hostnames to their resolved IPv4 address.

    Entries are never evicted, expired or refreshed: the first address stored
    for a hostname is kept for the lifetime of the cache. Each resolver owns
    its own instance.
    """

    def __init__(self) -> None:
        self.__addresses: Dict[str, str] = {}
        self.__lock = threading.Lock()

    def get(self, hostname: str) -> Optional[str]:
        """Returns the cached address of |hostname|, or None on a miss."""
        with self.__lock:
            return self.__addresses.get(hostname)

    def store(self, hostname: str, address: str) -> str:
        """Caches |address| for |hostname| unless one is already present.

        Returns:
            The address now cached for |hostname|, which is the earlier one if
            another caller stored first.
        """
        with self.__lock:
            return self.__addresses.setdefault(hostname, address)

    def __contains__(self, hostname: object) -> bool:
        with self.__lock:
            return hostname in self.__addresses

    def __len__(self) -> int:
        with self.__lock:
            return len(self.__addresses)
