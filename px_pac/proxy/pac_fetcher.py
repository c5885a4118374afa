"""
PAC file download.

The PAC file is always fetched without a proxy: the environment's
http_proxy may well point at this daemon, whose decisions depend on the very
file being fetched.
"""

import logging
from http.client import HTTPException
from urllib.error import HTTPError, URLError
from urllib.request import ProxyHandler, Request, build_opener

from .. import __version__
from ..error_handling.exceptions import PacFetchError

PAC_ACCEPT = 'application/x-ns-proxy-autoconfig, application/x-javascript-config, text/plain, */*'


class PACFetcher:
    """Downloads PAC files over http(s) or from file:// URLs."""

    def __init__(self, timeout: float = 10.0, max_size: int = 1024 * 1024,
                 encoding: str = "utf-8"):
        """
        Initialize the fetcher.

        Args:
            timeout: Seconds allowed for connecting and reading
            max_size: Largest accepted PAC file, in bytes
            encoding: Expected character encoding of the PAC file
        """
        self.logger = logging.getLogger(__name__)
        self.timeout = timeout
        self.max_size = max_size
        self.encoding = encoding
        # An empty ProxyHandler disables proxies from the environment
        self._opener = build_opener(ProxyHandler({}))

    def fetch(self, url: str) -> str:
        """
        Download and decode the PAC file at url.

        Raises:
            PacFetchError: on transport errors (including malformed or
                truncated responses), any HTTP status other than 200, or an
                oversized body
        """
        try:
            request = Request(url, headers={
                'User-Agent': f'px-pac/{__version__}',
                'Accept': PAC_ACCEPT
            })
            with self._opener.open(request, timeout=self.timeout) as response:
                status = response.getcode()
                self.logger.info(f"GET {url!r} returned {status}")
                if status is not None and status != 200:
                    raise PacFetchError(f"Unexpected status {status} fetching PAC file", url, status)
                content = response.read(self.max_size + 1)
        except HTTPError as e:
            self.logger.info(f"GET {url!r} returned {e.code}")
            raise PacFetchError(f"Unexpected status {e.code} fetching PAC file", url, e.code) from e
        except (URLError, HTTPException, OSError, ValueError) as e:
            raise PacFetchError(f"Error downloading PAC file: {e}", url) from e

        if len(content) > self.max_size:
            raise PacFetchError(f"PAC file larger than {self.max_size} bytes", url, status)

        return self._decode(content)

    def _decode(self, content: bytes) -> str:
        """Decode with the configured encoding, falling back to latin-1."""
        try:
            return content.decode(self.encoding)
        except UnicodeDecodeError:
            self.logger.warning(f"PAC file is not valid {self.encoding}, decoding as latin-1")
            return content.decode('latin-1')
