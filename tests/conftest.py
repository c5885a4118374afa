"""
Shared fixtures: a local HTTP server serving PAC files and a controllable
network address provider.
"""

import socket
import threading
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import Dict, Iterable, Tuple

import pytest


SIMPLE_PAC = '''
function FindProxyForURL(url, host) {
    if (isPlainHostName(host) || dnsDomainIs(host, ".internal.example")) {
        return "DIRECT";
    }
    if (shExpMatch(url, "*socks*")) {
        return "SOCKS socks.example:1080";
    }
    if (shExpMatch(host, "*.multi.example")) {
        return "PROXY first.example:3128; PROXY second.example:3128; DIRECT";
    }
    if (shExpMatch(host, "*.bogus.example")) {
        return "BOGUS";
    }
    return "PROXY proxy.example:8080";
}
'''


class PACServer:
    """Threaded HTTP server returning configurable responses per path."""

    def __init__(self):
        self.routes: Dict[str, Tuple[int, bytes]] = {}
        self.hits: Dict[str, int] = {}
        self._lock = threading.Lock()
        self._httpd = ThreadingHTTPServer(('127.0.0.1', 0), self._make_handler())
        self._httpd.daemon_threads = True
        self._thread = threading.Thread(target=self._httpd.serve_forever, daemon=True)

    def _make_handler(self):
        server = self

        class Handler(BaseHTTPRequestHandler):
            def do_GET(self):
                with server._lock:
                    server.hits[self.path] = server.hits.get(self.path, 0) + 1
                    status, body = server.routes.get(self.path, (404, b'not found'))
                self.send_response(status)
                self.send_header('Content-Type', 'application/x-ns-proxy-autoconfig')
                self.send_header('Content-Length', str(len(body)))
                self.end_headers()
                self.wfile.write(body)

            def log_message(self, format, *args):
                pass

        return Handler

    def start(self):
        self._thread.start()

    def stop(self):
        self._httpd.shutdown()
        self._httpd.server_close()

    def serve(self, path: str, body, status: int = 200):
        if isinstance(body, str):
            body = body.encode('utf-8')
        with self._lock:
            self.routes[path] = (status, body)

    def url(self, path: str) -> str:
        host, port = self._httpd.server_address[:2]
        return f"http://{host}:{port}{path}"

    def hit_count(self, path: str) -> int:
        with self._lock:
            return self.hits.get(path, 0)


class RawResponseServer:
    """TCP server answering every request with fixed bytes, HTTP or not."""

    def __init__(self, payload: bytes):
        self.payload = payload
        self._stopped = threading.Event()
        self._sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        self._sock.bind(('127.0.0.1', 0))
        self._sock.listen(5)
        self._sock.settimeout(0.1)
        self._thread = threading.Thread(target=self._serve, daemon=True)

    def _serve(self):
        while not self._stopped.is_set():
            try:
                conn, _ = self._sock.accept()
            except socket.timeout:
                continue
            except OSError:
                return
            with conn:
                conn.settimeout(5)
                try:
                    data = b''
                    while b'\r\n\r\n' not in data:
                        chunk = conn.recv(4096)
                        if not chunk:
                            break
                        data += chunk
                    conn.sendall(self.payload)
                except OSError:
                    pass

    def start(self):
        self._thread.start()

    def stop(self):
        self._stopped.set()
        self._thread.join(timeout=5)
        self._sock.close()

    def url(self, path: str = '/proxy.pac') -> str:
        host, port = self._sock.getsockname()[:2]
        return f"http://{host}:{port}{path}"


class FakeAddressProvider:
    """Address provider whose result and failure mode tests control."""

    def __init__(self, addresses: Iterable[str] = ('192.168.1.10', 'fe80::1')):
        self.addresses = list(addresses)
        self.fail = False
        self.calls = 0

    def __call__(self):
        self.calls += 1
        if self.fail:
            raise OSError("interface enumeration failed")
        return list(self.addresses)


@pytest.fixture
def pac_server():
    server = PACServer()
    server.start()
    yield server
    server.stop()


@pytest.fixture
def raw_server():
    """Factory starting RawResponseServers that are stopped after the test."""
    servers = []

    def start(payload: bytes) -> RawResponseServer:
        server = RawResponseServer(payload)
        server.start()
        servers.append(server)
        return server

    yield start
    for server in servers:
        server.stop()


@pytest.fixture
def address_provider():
    return FakeAddressProvider()


@pytest.fixture
def simple_pac():
    return SIMPLE_PAC
