"""
Exception hierarchy for PAC loading, evaluation and directive parsing.
"""

from typing import Optional


class PacError(Exception):
    """Base class for all px-pac errors."""


class ConfigUnavailableError(PacError):
    """The PAC script could not be fetched or loaded.

    Never reaches request callers: the resolver absorbs it and goes offline.
    """


class PacFetchError(ConfigUnavailableError):
    """Downloading the PAC document failed."""

    def __init__(self, message: str, url: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.url = url
        self.status_code = status_code


class ScriptConstructionError(ConfigUnavailableError):
    """The PAC script could not be loaded into a fresh evaluator."""


class EvaluationError(PacError):
    """FindProxyForURL raised or returned something other than a string."""


class DirectiveParseError(PacError, ValueError):
    """The string returned by the PAC script is not a recognised directive."""

    def __init__(self, message: str, raw: str):
        super().__init__(message)
        self.raw = raw
