"""
Proxy resolution for outbound requests.

ProxyResolver ties together PAC download, script evaluation, directive
parsing and network change detection. It is the only entry point request
handlers need: resolve(request) returns the directive for that request.
"""

import logging
import threading
from abc import ABC, abstractmethod
from typing import Callable, Optional

from .pac_fetcher import PACFetcher
from ..communication.event_system import EventSystem
from ..communication.events import (
    create_decision_event, create_warning_event, create_status_event
)
from ..config.resolver_settings import ResolverSettings
from ..error_handling.error_manager import ErrorManager
from ..error_handling.exceptions import (
    ConfigUnavailableError, EvaluationError, DirectiveParseError
)
from ..models.proxy_directive import ProxyDirective
from ..models.request_context import RequestContext
from ..models.resolver_state import ResolverState, ResolverStatus
from ..network.network_monitor import NetworkChangeMonitor
from ..pac.directive_parser import parse_directive
from ..pac.script_engine import ScriptEngine

EngineFactory = Callable[[str], ScriptEngine]


class Resolver(ABC):
    """Interface shared by the PAC resolver and the always-direct stub."""

    @abstractmethod
    def resolve(self, request: RequestContext) -> ProxyDirective:
        """Return the proxy directive for request."""

    @property
    @abstractmethod
    def status(self) -> ResolverStatus:
        """Current resolver status."""

    @property
    def online(self) -> bool:
        return self.status is ResolverStatus.ONLINE

    def close(self):
        """Release resources held by the resolver."""


class DirectResolver(Resolver):
    """Resolver used when no PAC URL is configured: everything goes DIRECT."""

    def __init__(self, event_system: Optional[EventSystem] = None):
        self.logger = logging.getLogger(__name__)
        self.event_system = event_system or EventSystem()
        self.logger.info("No PAC URL specified; all requests will be made directly")

    @property
    def status(self) -> ResolverStatus:
        return ResolverStatus.OFFLINE

    def resolve(self, request: RequestContext) -> ProxyDirective:
        directive = ProxyDirective.direct()
        self.logger.info(f'[{request.correlation_id}] {request.method} {request.url} via "DIRECT"')
        self.event_system.send_event(create_decision_event(
            request.correlation_id, request.method, request.url, str(directive)
        ))
        return directive


class ProxyResolver(Resolver):
    """
    Resolves requests through a PAC script.

    The {status, engine} pair is held in one immutable ResolverState that is
    replaced by a single assignment, so concurrent resolve() calls always see
    a consistent pair. While offline every request resolves DIRECT; losing the
    PAC file never blocks traffic.
    """

    def __init__(self, pac_url: str,
                 fetcher: Optional[PACFetcher] = None,
                 network_monitor: Optional[NetworkChangeMonitor] = None,
                 event_system: Optional[EventSystem] = None,
                 error_manager: Optional[ErrorManager] = None,
                 engine_factory: Optional[EngineFactory] = None):
        """
        Initialize the resolver and perform the first PAC download.

        Args:
            pac_url: URL of the PAC file
            fetcher: PAC downloader; a default PACFetcher if None
            network_monitor: Change detector; monitors local interfaces if None
            event_system: Receiver of decision, warning and status events
            error_manager: Recorder for loading and per-request errors
            engine_factory: Callable building a ScriptEngine from PAC source
        """
        self.logger = logging.getLogger(__name__)
        self._pac_url = pac_url
        self.fetcher = fetcher or PACFetcher()
        self.network_monitor = network_monitor or NetworkChangeMonitor()
        self.event_system = event_system or EventSystem()
        self.error_manager = error_manager or ErrorManager()
        self._engine_factory = engine_factory or ScriptEngine

        self._state = ResolverState.uninitialized()
        self._refresh_lock = threading.Lock()
        self._generation = 0

        self.refresh()

    @property
    def pac_url(self) -> str:
        return self._pac_url

    @property
    def state(self) -> ResolverState:
        return self._state

    @property
    def status(self) -> ResolverStatus:
        return self._state.status

    @property
    def generation(self) -> int:
        """Number of state snapshots published so far."""
        return self._generation

    def resolve(self, request: RequestContext) -> ProxyDirective:
        """
        Decide how request should be sent.

        Returns:
            DIRECT while offline, otherwise the parsed PAC result

        Raises:
            EvaluationError: if the PAC script fails for this request
            DirectiveParseError: if the PAC result cannot be parsed
        """
        if self.network_monitor.has_changed():
            self.logger.info("Network change detected, reloading PAC file")
            self._refresh_coalesced()

        state = self._state
        if not state.online:
            return ProxyDirective.direct()

        context = {'correlation_id': request.correlation_id, 'url': request.url}
        try:
            pac_result = state.engine.evaluate(request.url)
        except EvaluationError as e:
            self.error_manager.handle_evaluation_error(str(e), context=context, exception=e)
            raise

        self.logger.info(f'[{request.correlation_id}] {request.method} {request.url} via {pac_result!r}')

        try:
            directive = parse_directive(pac_result)
        except DirectiveParseError as e:
            self.error_manager.handle_directive_error(str(e), context=context, exception=e)
            raise

        for warning in directive.warnings:
            self.logger.warning(f"[{request.correlation_id}] Warning: {warning}")
            self.event_system.send_event(create_warning_event(
                request.correlation_id, request.url, warning, pac_result
            ))

        self.event_system.send_event(create_decision_event(
            request.correlation_id, request.method, request.url, str(directive), pac_result
        ))
        return directive

    def refresh(self):
        """
        Download the PAC file and publish a new state.

        Fetch or load failures publish an OFFLINE state; they are recorded,
        never raised. Refreshes never overlap.
        """
        with self._refresh_lock:
            self._do_refresh()

    def _refresh_coalesced(self):
        """Refresh unless another refresh published while we waited for the lock."""
        generation = self._generation
        with self._refresh_lock:
            if self._generation != generation:
                self.logger.debug("PAC file reloaded by a concurrent request")
                return
            self._do_refresh()

    def _do_refresh(self):
        try:
            source = self.fetcher.fetch(self._pac_url)
            engine = self._engine_factory(source)
        except ConfigUnavailableError as e:
            self.error_manager.handle_pac_loading_error(
                "PAC file unavailable, all requests will be made directly",
                details=str(e), exception=e
            )
            self._publish(ResolverState.offline(), reason=str(e))
            return

        self._publish(ResolverState.with_engine(engine))

    def _publish(self, state: ResolverState, reason: Optional[str] = None):
        self._state = state
        self._generation += 1
        self.logger.info(f"PAC resolver is {state.status.value} ({self._pac_url})")
        self.event_system.send_event(create_status_event(state.status.value, self._pac_url, reason))

    def close(self):
        """Go offline and release the current script engine."""
        with self._refresh_lock:
            engine = self._state.engine
            self._state = ResolverState.offline()
            self._generation += 1
        if engine is not None:
            engine.close()


def create_resolver(settings: ResolverSettings,
                    network_monitor: Optional[NetworkChangeMonitor] = None,
                    event_system: Optional[EventSystem] = None,
                    error_manager: Optional[ErrorManager] = None) -> Resolver:
    """
    Build the resolver described by settings.

    Returns:
        DirectResolver when no PAC URL is configured, otherwise a ProxyResolver
        that has already attempted its first download
    """
    if not settings.has_pac:
        return DirectResolver(event_system)

    fetcher = PACFetcher(
        timeout=settings.fetch_timeout,
        max_size=settings.max_pac_size,
        encoding=settings.pac_encoding
    )

    def engine_factory(source: str) -> ScriptEngine:
        return ScriptEngine(
            source,
            memory_limit=settings.script_memory_limit
        )

    return ProxyResolver(
        settings.pac_url,
        fetcher=fetcher,
        network_monitor=network_monitor,
        event_system=event_system,
        error_manager=error_manager,
        engine_factory=engine_factory
    )
