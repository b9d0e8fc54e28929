"""Utility classes for servicediscovery."""

from servicediscovery.util.atomic_counter import AtomicCounter

__all__ = ["AtomicCounter"]
