"""
Data models for px-pac.

This module contains the data structures shared by the resolver and its
callers: parsed proxy directives, request contexts and resolver state.
"""

from .proxy_directive import ProxyDirective, DirectiveKind
from .request_context import RequestContext
from .resolver_state import ResolverState, ResolverStatus

__all__ = [
    'ProxyDirective',
    'DirectiveKind',
    'RequestContext',
    'ResolverState',
    'ResolverStatus'
]
