"""
Unit tests for PAC script loading and evaluation.
Tests sandboxing, URL stripping, result validation and serialisation.
"""

import threading

import pytest

from px_pac.error_handling.exceptions import ScriptConstructionError, EvaluationError
from px_pac.pac.script_engine import ScriptEngine, url_for_script, host_for_script


ECHO_URL_PAC = '''
function FindProxyForURL(url, host) {
    return url;
}
'''

ECHO_HOST_PAC = '''
function FindProxyForURL(url, host) {
    return host;
}
'''


class TestUrlForScript:
    """Test what part of the URL the script may see."""

    def test_https_path_query_fragment_stripped(self):
        assert url_for_script("https://example.com/path?q=1#frag") == "https://example.com"

    def test_https_port_kept(self):
        assert url_for_script("https://example.com:8443/secret") == "https://example.com:8443"

    def test_wss_stripped(self):
        assert url_for_script("wss://chat.example.com/socket?token=x") == "wss://chat.example.com"

    def test_http_unchanged(self):
        url = "http://example.com/path?q=1#frag"
        assert url_for_script(url) == url

    def test_host_without_port_and_userinfo(self):
        assert host_for_script("http://user:pw@Example.com:8080/") == "Example.com"

    def test_ipv6_host(self):
        assert host_for_script("http://[2001:db8::1]:8080/") == "2001:db8::1"


class TestScriptEngine:
    """Test ScriptEngine construction and evaluation."""

    def test_evaluate_returns_script_result(self, simple_pac):
        engine = ScriptEngine(simple_pac)

        assert engine.evaluate("http://www.example.com/") == "PROXY proxy.example:8080"
        assert engine.evaluate("http://intranet/") == "DIRECT"
        assert engine.evaluate("http://wiki.internal.example/") == "DIRECT"

    def test_https_url_is_stripped_before_evaluation(self):
        engine = ScriptEngine(ECHO_URL_PAC)

        assert engine.evaluate("https://host.example/path?q#frag") == "https://host.example"

    def test_http_url_is_passed_unchanged(self):
        engine = ScriptEngine(ECHO_URL_PAC)

        assert engine.evaluate("http://host.example/path?q#frag") == "http://host.example/path?q#frag"

    def test_host_argument_is_hostname_only(self):
        engine = ScriptEngine(ECHO_HOST_PAC)

        assert engine.evaluate("http://host.example:8080/path") == "host.example"

    def test_invalid_glob_is_falsy_in_script(self):
        engine = ScriptEngine('''
        function FindProxyForURL(url, host) {
            if (shExpMatch(host, "[")) {
                return "PROXY wrong.example:1";
            }
            return "DIRECT";
        }
        ''')

        assert engine.evaluate("http://host.example/") == "DIRECT"

    def test_non_string_result(self):
        engine = ScriptEngine('function FindProxyForURL(url, host) { return 42; }')

        with pytest.raises(EvaluationError):
            engine.evaluate("http://host.example/")

    def test_undefined_result(self):
        engine = ScriptEngine('function FindProxyForURL(url, host) { }')

        with pytest.raises(EvaluationError):
            engine.evaluate("http://host.example/")

    def test_script_exception(self):
        engine = ScriptEngine('function FindProxyForURL(url, host) { throw new Error("boom"); }')

        with pytest.raises(EvaluationError):
            engine.evaluate("http://host.example/")

    def test_unsupported_api_fails_at_evaluation(self):
        """Only the three host functions exist; others fail when called, not when loaded."""
        engine = ScriptEngine('''
        function FindProxyForURL(url, host) {
            if (isInNet(dnsResolve(host), "10.0.0.0", "255.0.0.0")) {
                return "DIRECT";
            }
            return "PROXY proxy.example:8080";
        }
        ''')

        with pytest.raises(EvaluationError):
            engine.evaluate("http://host.example/")

    def test_missing_find_proxy_function(self):
        engine = ScriptEngine('var notAPacFile = true;')

        with pytest.raises(EvaluationError):
            engine.evaluate("http://host.example/")

    def test_syntax_error_fails_construction(self):
        with pytest.raises(ScriptConstructionError):
            ScriptEngine('function FindProxyForURL(url, host) { return "DIRECT"; ')

    def test_top_level_exception_fails_construction(self):
        with pytest.raises(ScriptConstructionError):
            ScriptEngine('throw new Error("broken pac");')

    def test_top_level_statements_can_use_host_functions(self):
        engine = ScriptEngine('''
        var plain = isPlainHostName("intranet");
        function FindProxyForURL(url, host) {
            return plain ? "DIRECT" : "PROXY wrong.example:1";
        }
        ''')

        assert engine.evaluate("http://host.example/") == "DIRECT"

    def test_no_ambient_host_access(self):
        engine = ScriptEngine('''
        function FindProxyForURL(url, host) {
            return [typeof std, typeof os, typeof require].join(",");
        }
        ''')

        assert engine.evaluate("http://host.example/") == "undefined,undefined,undefined"

    def test_engines_are_isolated(self):
        first = ScriptEngine('var name = "first"; function FindProxyForURL(u, h) { return name; }')
        second = ScriptEngine('var name = "second"; function FindProxyForURL(u, h) { return name; }')

        assert first.evaluate("http://a/") == "first"
        assert second.evaluate("http://a/") == "second"

    def test_closed_engine(self, simple_pac):
        engine = ScriptEngine(simple_pac)
        engine.close()

        assert engine.closed
        with pytest.raises(EvaluationError):
            engine.evaluate("http://www.example.com/")

    def test_concurrent_evaluations_do_not_mix_results(self):
        """Calls from many threads each get the answer for their own host."""
        engine = ScriptEngine('''
        var active = 0;
        function FindProxyForURL(url, host) {
            active++;
            var overlapping = active > 1;
            for (var i = 0; i < 2000; i++) {}
            active--;
            return overlapping ? "OVERLAP" : "PROXY " + host + ":3128";
        }
        ''')
        errors = []

        def worker(index):
            host = f"host{index}.example"
            for _ in range(25):
                result = engine.evaluate(f"http://{host}/page")
                if result != f"PROXY {host}:3128":
                    errors.append(result)

        threads = [threading.Thread(target=worker, args=(i,)) for i in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert errors == []

    def test_host_functions_work_under_memory_limit(self):
        engine = ScriptEngine(
            'function FindProxyForURL(url, host) { return isPlainHostName(host) ? "DIRECT" : "PROXY p.example:1"; }',
            memory_limit=64 * 1024 * 1024
        )

        assert engine.evaluate("http://intranet/") == "DIRECT"
        assert engine.evaluate("http://www.example.com/") == "PROXY p.example:1"
