"""
Provides `AtomicCounter`, a lock-protected integer counter.

Used to expose diagnostic counts (such as skipped discovery targets) that may
be read from a thread other than the one incrementing them.
"""

import threading


class AtomicCounter:
    """
    This class provides a counter whose increments and reads are performed
    under a `threading.Lock`.
    """

    def __init__(self, value: int = 0) -> None:
        """
        Initializes the counter.

        Args:
            value (int): The starting count.
        """
        self.__value: int = value
        self.__lock = threading.Lock()

    def increment(self, amount: int = 1) -> int:
        """
        Atomically adds |amount| to the count.

        Returns:
            int: The count after the increment.
        """
        with self.__lock:
            self.__value += amount
            return self.__value

    def get(self) -> int:
        """
        Atomically retrieves the current count.
        """
        with self.__lock:
            return self.__value
