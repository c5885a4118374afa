#!/usr/bin/env python3
"""
Command line entry point for px-pac.

Resolves the given URLs through the configured PAC file and prints the
decision for each one, e.g.

    px-pac -C http://wpad.corp.example/proxy.pac https://example.com/
"""

import argparse
import dataclasses
import logging
import sys
from typing import List, Optional

from .config.config_manager import ConfigManager
from .error_handling.exceptions import PacError
from .models.request_context import RequestContext
from .proxy.proxy_resolver import create_resolver


def setup_logging(log_level: str = "INFO"):
    """Set up application logging."""
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[logging.StreamHandler()]
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="px-pac",
        description="Show the proxy a PAC file chooses for each URL."
    )
    parser.add_argument("-C", "--pac-url", help="URL of the proxy auto-config (PAC) file")
    parser.add_argument("--config-dir", help="Directory holding px_pac_config.json")
    parser.add_argument("--method", default="GET", help="HTTP method recorded in the decision trace")
    parser.add_argument("--log-level", help="Logging level (overrides the configuration file)")
    parser.add_argument("urls", nargs="+", metavar="URL", help="Request URLs to resolve")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main application entry point."""
    args = build_parser().parse_args(argv)

    settings = ConfigManager(args.config_dir).load_settings()
    overrides = {}
    if args.pac_url is not None:
        overrides['pac_url'] = args.pac_url
    if args.log_level is not None:
        overrides['log_level'] = args.log_level
    try:
        settings = dataclasses.replace(settings, **overrides)
    except ValueError as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        return 2

    setup_logging(settings.log_level)

    resolver = create_resolver(settings)
    failed = False
    try:
        for url in args.urls:
            request = RequestContext(url, method=args.method)
            try:
                directive = resolver.resolve(request)
            except PacError as e:
                failed = True
                print(f"{url} -> ERROR {e}")
                continue
            print(f"{url} -> {directive}")
    finally:
        resolver.close()

    return 1 if failed else 0


if __name__ == "__main__":
    sys.exit(main())
