"""
Error types and error recording for px-pac.

Fetch and compile failures are absorbed into resolver state; evaluation and
directive failures are surfaced to the caller. Both are recorded through the
ErrorManager.
"""

from .error_manager import ErrorManager, ErrorSeverity, ErrorCategory, ErrorInfo
from .exceptions import (
    PacError,
    ConfigUnavailableError,
    PacFetchError,
    ScriptConstructionError,
    EvaluationError,
    DirectiveParseError
)

__all__ = [
    'ErrorManager',
    'ErrorSeverity',
    'ErrorCategory',
    'ErrorInfo',
    'PacError',
    'ConfigUnavailableError',
    'PacFetchError',
    'ScriptConstructionError',
    'EvaluationError',
    'DirectiveParseError'
]
