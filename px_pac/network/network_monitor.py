"""
Network change detection based on local interface addresses.

A change in the set of addresses assigned to the machine's interfaces is the
signal used to re-fetch the PAC script.
"""

import logging
import socket
import threading
from typing import Callable, FrozenSet, Iterable, Optional

import psutil

AddressProvider = Callable[[], Iterable[str]]

# Link-layer entries (MAC addresses) are not network changes
IP_FAMILIES = (socket.AF_INET, socket.AF_INET6)


def interface_addresses() -> FrozenSet[str]:
    """Return every IPv4 and IPv6 address configured on a local interface."""
    return frozenset(
        addr.address
        for addrs in psutil.net_if_addrs().values()
        for addr in addrs
        if addr.family in IP_FAMILIES and addr.address
    )


class NetworkChangeMonitor:
    """
    Tracks the local address set and reports when it changes.

    The baseline is taken at construction. Enumeration failures never count
    as a change.
    """

    def __init__(self, address_provider: Optional[AddressProvider] = None):
        """
        Initialize the monitor and record the baseline.

        Args:
            address_provider: Callable returning the current local addresses.
                Defaults to enumerating interfaces with psutil.
        """
        self.logger = logging.getLogger(__name__)
        self._address_provider = address_provider or interface_addresses
        self._lock = threading.Lock()

        try:
            self._addresses = frozenset(self._address_provider())
        except Exception as e:
            self.logger.warning(f"Error enumerating network addresses: {e}")
            self._addresses = frozenset()

    @property
    def addresses(self) -> FrozenSet[str]:
        """Last observed address set."""
        return self._addresses

    def has_changed(self) -> bool:
        """
        Check whether the address set differs from the last observation.

        The new set becomes the baseline whatever the outcome, so one change
        is reported once.
        """
        try:
            current = frozenset(self._address_provider())
        except Exception as e:
            self.logger.warning(f"Error enumerating network addresses: {e}")
            return False

        with self._lock:
            changed = current != self._addresses
            self._addresses = current

        if changed:
            self.logger.info(f"Network addresses changed: {sorted(current)}")
        return changed
