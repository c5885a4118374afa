"""
Parser for the string returned by FindProxyForURL.

The grammar is a semicolon separated list of DIRECT, PROXY host[:port] and
SOCKS host[:port]. Only the first entry is honoured.
"""

from typing import List, Tuple

from ..error_handling.exceptions import DirectiveParseError
from ..models.proxy_directive import ProxyDirective

DEFAULT_PROXY_PORT = 80


def parse_directive(raw: str) -> ProxyDirective:
    """
    Turn a PAC result into a ProxyDirective.

    Args:
        raw: String returned by FindProxyForURL

    Returns:
        The directive for the first entry. Problems that do not prevent a
        decision (ignored entries, SOCKS downgraded to DIRECT) are listed in
        its warnings.

    Raises:
        DirectiveParseError: if the first entry is not a recognised directive
    """
    warnings: List[str] = []

    first, sep, remainder = raw.partition(';')
    if sep:
        warnings.append(f"Ignoring all but first proxy in {raw!r} (ignored: {remainder.strip()!r})")

    entry = first.strip()
    if entry == 'DIRECT':
        return ProxyDirective.direct(tuple(warnings))

    tokens = entry.split()
    if len(tokens) == 2 and tokens[0] == 'PROXY':
        host, port = split_host_port(tokens[1], raw)
        return ProxyDirective.proxy(host, port, tuple(warnings))

    if len(tokens) == 2 and tokens[0] == 'SOCKS':
        warnings.append(f"Ignoring unsupported SOCKS proxy {tokens[1]!r}")
        return ProxyDirective.direct(tuple(warnings))

    raise DirectiveParseError(f"Couldn't parse PAC response {raw!r}", raw)


def split_host_port(value: str, raw: str = '') -> Tuple[str, int]:
    """
    Split host[:port] into its parts, defaulting the port to 80.

    IPv6 literals must be bracketed when a port is given; the returned host
    never carries brackets.
    """
    raw = raw or value
    if value.startswith('['):
        host, sep, rest = value[1:].partition(']')
        if not sep or not host:
            raise DirectiveParseError(f"Malformed proxy address {value!r} in {raw!r}", raw)
        if not rest:
            return host, DEFAULT_PROXY_PORT
        if not rest.startswith(':'):
            raise DirectiveParseError(f"Malformed proxy address {value!r} in {raw!r}", raw)
        return host, _parse_port(rest[1:], value, raw)

    if value.count(':') > 1:
        # Unbracketed IPv6 literal, no port possible
        return value, DEFAULT_PROXY_PORT

    host, sep, port = value.partition(':')
    if not host:
        raise DirectiveParseError(f"Missing proxy host in {raw!r}", raw)
    if not sep:
        return host, DEFAULT_PROXY_PORT
    return host, _parse_port(port, value, raw)


def _parse_port(port: str, value: str, raw: str) -> int:
    if not (port.isascii() and port.isdigit()) or not (1 <= int(port) <= 65535):
        raise DirectiveParseError(f"Invalid port in proxy address {value!r} in {raw!r}", raw)
    return int(port)
