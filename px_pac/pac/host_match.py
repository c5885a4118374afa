"""
Host matching functions made available to PAC scripts.

Only isPlainHostName, dnsDomainIs and shExpMatch are provided. They are plain
Python functions; PAC_FUNCTIONS wraps them with the argument coercion a
JavaScript runtime would apply before they are registered in the evaluator.
"""

import functools
import re
from typing import Any, Callable, Dict, Optional, Pattern


def is_plain_host_name(host: str) -> bool:
    """True if host has no domain name (contains no dot)."""
    return '.' not in host


def dns_domain_is(host: str, domain: str) -> bool:
    """True if host ends with domain. No case folding, no dot handling."""
    return host.endswith(domain)


def sh_exp_match(value: str, pattern: str) -> Optional[bool]:
    """
    Match value against a shell expression.

    Returns:
        True or False, or None when the pattern is malformed. PAC scripts see
        None as null, so an invalid pattern simply never matches.
    """
    try:
        compiled = compile_shell_pattern(pattern)
    except ValueError:
        return None
    return compiled.fullmatch(value) is not None


@functools.lru_cache(maxsize=256)
def compile_shell_pattern(pattern: str) -> Pattern:
    """
    Compile a shell glob into a regular expression.

    Supports *, ?, [abc], [a-z], [!abc] or [^abc], {alt1,alt2} and backslash
    escapes. * matches any run of characters, separators included.

    Raises:
        ValueError: if the pattern is malformed
    """
    out = []
    depth = 0
    i, n = 0, len(pattern)
    while i < n:
        c = pattern[i]
        i += 1
        if c == '*':
            out.append('.*')
        elif c == '?':
            out.append('.')
        elif c == '\\':
            if i >= n:
                raise ValueError(f"Trailing escape in pattern: {pattern!r}")
            out.append(re.escape(pattern[i]))
            i += 1
        elif c == '[':
            i = _translate_class(pattern, i, out)
        elif c == '{':
            depth += 1
            out.append('(?:')
        elif c == ',' and depth:
            out.append('|')
        elif c == '}' and depth:
            depth -= 1
            out.append(')')
        else:
            out.append(re.escape(c))

    if depth:
        raise ValueError(f"Unterminated alternation in pattern: {pattern!r}")

    try:
        return re.compile(''.join(out), re.DOTALL)
    except re.error as e:
        raise ValueError(f"Invalid pattern {pattern!r}: {e}") from e


def _translate_class(pattern: str, start: int, out: list) -> int:
    """Translate the character class opening at start; return the index after it."""
    i = start
    negate = i < len(pattern) and pattern[i] in '!^'
    if negate:
        i += 1

    end = pattern.find(']', i)
    if end == -1:
        raise ValueError(f"Unterminated character class in pattern: {pattern!r}")
    if end == i:
        raise ValueError(f"Empty character class in pattern: {pattern!r}")

    body = pattern[i:end].replace('\\', '\\\\').replace('^', '\\^').replace('[', '\\[')
    out.append(f"[{'^' if negate else ''}{body}]")
    return end + 1


def _js_string(args: tuple, index: int) -> str:
    """Coerce a JavaScript argument to a string the way String(x) does."""
    if index >= len(args) or args[index] is None:
        return 'undefined'
    value = args[index]
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


PAC_FUNCTIONS: Dict[str, Callable[..., Any]] = {
    'isPlainHostName': lambda *args: is_plain_host_name(_js_string(args, 0)),
    'dnsDomainIs': lambda *args: dns_domain_is(_js_string(args, 0), _js_string(args, 1)),
    'shExpMatch': lambda *args: sh_exp_match(_js_string(args, 0), _js_string(args, 1)),
}
