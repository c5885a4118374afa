"""
Local network monitoring used to decide when the PAC script is stale.
"""

from .network_monitor import NetworkChangeMonitor, interface_addresses

__all__ = ['NetworkChangeMonitor', 'interface_addresses']
