"""
PAC script handling: host matching functions, sandboxed evaluation and
parsing of the returned directives.
"""

from .host_match import is_plain_host_name, dns_domain_is, sh_exp_match, PAC_FUNCTIONS
from .directive_parser import parse_directive
from .script_engine import ScriptEngine

__all__ = [
    'is_plain_host_name',
    'dns_domain_is',
    'sh_exp_match',
    'PAC_FUNCTIONS',
    'parse_directive',
    'ScriptEngine'
]
