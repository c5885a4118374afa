"""
px-pac - Proxy Auto-Config resolution core for a local forward proxy.

This package decides, per request, whether traffic goes DIRECT or through an
upstream proxy by evaluating a PAC script fetched from a URL.
"""

__version__ = "1.0.0"
__author__ = "px-pac"
