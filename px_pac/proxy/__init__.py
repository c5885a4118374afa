"""
Proxy resolution: PAC download and the resolver used by request handlers.
"""

from .pac_fetcher import PACFetcher
from .proxy_resolver import Resolver, ProxyResolver, DirectResolver, create_resolver

__all__ = [
    'PACFetcher',
    'Resolver',
    'ProxyResolver',
    'DirectResolver',
    'create_resolver'
]
