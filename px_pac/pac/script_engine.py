"""
Sandboxed PAC script evaluation using quickjs.

Each ScriptEngine owns one quickjs Context bound to one PAC document. The
context is only ever touched from a dedicated worker thread, and evaluation
is serialised by a per-engine lock. The script can call nothing but the
functions in host_match.PAC_FUNCTIONS.
"""

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from typing import Optional
from urllib.parse import urlsplit, urlunsplit

import quickjs

from .host_match import PAC_FUNCTIONS
from ..error_handling.exceptions import ScriptConstructionError, EvaluationError

# Schemes whose path, query and fragment are hidden from the PAC script
SECURE_SCHEMES = ('https', 'wss')

FIND_PROXY_FUNCTION = 'FindProxyForURL'


def url_for_script(url: str) -> str:
    """Return the URL as the PAC script may see it."""
    parts = urlsplit(url)
    if parts.scheme.lower() in SECURE_SCHEMES:
        return urlunsplit((parts.scheme, parts.netloc, '', '', ''))
    return url


def host_for_script(url: str) -> str:
    """Return the bare host of url: no userinfo, port or IPv6 brackets."""
    netloc = urlsplit(url).netloc
    hostport = netloc.rpartition('@')[2]
    if hostport.startswith('['):
        return hostport[1:].partition(']')[0]
    return hostport.partition(':')[0]


class ScriptEngine:
    """
    One loaded PAC script.

    Construction executes the script once; a failure raises
    ScriptConstructionError and leaves nothing behind. Engines are never
    reloaded: a new PAC document means a new ScriptEngine.
    """

    def __init__(self, pac_source: str, memory_limit: Optional[int] = None):
        """
        Load pac_source into a fresh evaluator.

        Args:
            pac_source: PAC JavaScript defining FindProxyForURL(url, host)
            memory_limit: Maximum bytes the evaluator may allocate

        Raises:
            ScriptConstructionError: if the evaluator cannot be set up or the
                script fails to execute
        """
        self.logger = logging.getLogger(__name__)
        self._lock = threading.Lock()
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="pac-engine")
        self._closed = False

        try:
            self._context = self._executor.submit(
                self._create_context, pac_source, memory_limit
            ).result()
        except Exception as e:
            self._executor.shutdown(wait=False)
            raise ScriptConstructionError(f"Error loading PAC script: {e}") from e

        self.logger.debug(f"Loaded PAC script ({len(pac_source)} characters)")

    @staticmethod
    def _create_context(pac_source: str, memory_limit: Optional[int]) -> quickjs.Context:
        """
        Build the evaluator. Runs on the worker thread.

        No time limit is set: quickjs refuses to call into Python while one
        is active, and every PAC script can reach the host functions.
        """
        context = quickjs.Context()
        if memory_limit is not None:
            context.set_memory_limit(memory_limit)
        for name, function in PAC_FUNCTIONS.items():
            context.add_callable(name, function)
        context.eval(pac_source)
        return context

    def evaluate(self, url: str) -> str:
        """
        Run FindProxyForURL for url.

        https and wss URLs are reduced to scheme and authority first.

        Returns:
            The raw string returned by the script

        Raises:
            EvaluationError: if the script raises or returns a non-string
        """
        script_url = url_for_script(url)
        host = host_for_script(url)

        with self._lock:
            if self._closed:
                raise EvaluationError("PAC script engine is closed")
            try:
                result = self._executor.submit(self._call, script_url, host).result()
            except quickjs.JSException as e:
                raise EvaluationError(f"FindProxyForURL failed for {script_url}: {e}") from e

            if not isinstance(result, str):
                raise EvaluationError(f"FindProxyForURL didn't return a string (got {result!r})")
            return result

    def _call(self, url: str, host: str):
        """Invoke FindProxyForURL. Runs on the worker thread."""
        function = self._context.get(FIND_PROXY_FUNCTION)
        if not isinstance(function, quickjs.Object):
            raise EvaluationError(f"{FIND_PROXY_FUNCTION} is not defined by the PAC script")
        return function(url, host)

    def close(self):
        """Release the worker thread. Later evaluations raise EvaluationError."""
        with self._lock:
            if self._closed:
                return
            self._closed = True
        self._executor.shutdown(wait=False)

    @property
    def closed(self) -> bool:
        return self._closed
