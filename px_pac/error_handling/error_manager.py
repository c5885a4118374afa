"""
Central error recording for the resolver.

This module provides the ErrorManager class that classifies, logs and keeps
a bounded history of PAC loading, evaluation and parsing failures, and lets
observers subscribe to them.
"""

import logging
import threading
import uuid
from datetime import datetime, timedelta
from enum import Enum, IntEnum
from typing import Dict, List, Optional, Callable, Any
from dataclasses import dataclass


class ErrorSeverity(IntEnum):
    """Error severity levels."""
    LOW = 1
    MEDIUM = 2
    HIGH = 3
    CRITICAL = 4


class ErrorCategory(Enum):
    """Error categories for classification."""
    PAC_LOADING = "pac_loading"
    PAC_EVALUATION = "pac_evaluation"
    DIRECTIVE = "directive"
    NETWORK = "network"
    CONFIGURATION = "configuration"


@dataclass
class ErrorInfo:
    """Information about an error occurrence."""
    error_id: str
    category: ErrorCategory
    severity: ErrorSeverity
    message: str
    details: Optional[str] = None
    timestamp: datetime = None
    context: Optional[Dict[str, Any]] = None
    exception: Optional[Exception] = None
    suppressed: bool = False

    def __post_init__(self):
        if self.timestamp is None:
            self.timestamp = datetime.now()
        if self.context is None:
            self.context = {}


class ErrorManager:
    """
    Records errors raised while resolving proxies.

    Errors are logged at a level derived from their severity, kept in a
    bounded history, counted per category and severity, and forwarded to
    registered callbacks. Identical errors repeated inside the suppression
    window are only logged once.
    """

    def __init__(self, max_history_size: int = 1000,
                 suppression_window: timedelta = timedelta(minutes=5)):
        """
        Initialize the error manager.

        Args:
            max_history_size: Number of errors kept in history
            suppression_window: Period during which duplicate errors are not logged again
        """
        self.logger = logging.getLogger(__name__)
        self._error_history: List[ErrorInfo] = []
        self._error_callbacks: List[Callable[[ErrorInfo], None]] = []
        self._lock = threading.RLock()

        self.max_history_size = max_history_size
        self.error_suppression_window = suppression_window
        self._suppressed_errors: Dict[str, datetime] = {}

        self._stats = {
            'total_errors': 0,
            'suppressed_errors': 0,
            'errors_by_category': {},
            'errors_by_severity': {},
        }

    def add_error_callback(self, callback: Callable[[ErrorInfo], None]):
        """Add callback to be notified of errors."""
        with self._lock:
            self._error_callbacks.append(callback)

    def remove_error_callback(self, callback: Callable[[ErrorInfo], None]):
        """Remove error callback."""
        with self._lock:
            if callback in self._error_callbacks:
                self._error_callbacks.remove(callback)

    def handle_error(self,
                     category: ErrorCategory,
                     severity: ErrorSeverity,
                     message: str,
                     details: Optional[str] = None,
                     context: Optional[Dict[str, Any]] = None,
                     exception: Optional[Exception] = None) -> ErrorInfo:
        """
        Record an error occurrence.

        Args:
            category: Error category
            severity: Error severity
            message: Error message
            details: Additional error details
            context: Error context information
            exception: Associated exception if any

        Returns:
            ErrorInfo describing the recorded error
        """
        error = ErrorInfo(
            error_id=str(uuid.uuid4()),
            category=category,
            severity=severity,
            message=message,
            details=details,
            context=context or {},
            exception=exception
        )

        with self._lock:
            self._error_history.append(error)
            self._cleanup_history()
            self._update_stats(error)

            if self._should_suppress_error(error):
                error.suppressed = True
                self._stats['suppressed_errors'] += 1
                self.logger.debug(f"Suppressing duplicate error: {message}")
            else:
                self._log_error(error)

            callbacks = list(self._error_callbacks)

        self._notify_callbacks(callbacks, error)
        return error

    def handle_pac_loading_error(self, message: str, details: Optional[str] = None,
                                 exception: Optional[Exception] = None) -> ErrorInfo:
        """Handle a failure to fetch or compile the PAC script."""
        return self.handle_error(
            category=ErrorCategory.PAC_LOADING,
            severity=ErrorSeverity.HIGH,
            message=message,
            details=details,
            exception=exception
        )

    def handle_evaluation_error(self, message: str, context: Optional[Dict[str, Any]] = None,
                                exception: Optional[Exception] = None) -> ErrorInfo:
        """Handle a FindProxyForURL failure for a single request."""
        return self.handle_error(
            category=ErrorCategory.PAC_EVALUATION,
            severity=ErrorSeverity.MEDIUM,
            message=message,
            context=context,
            exception=exception
        )

    def handle_directive_error(self, message: str, context: Optional[Dict[str, Any]] = None,
                               exception: Optional[Exception] = None) -> ErrorInfo:
        """Handle an unparsable PAC result for a single request."""
        return self.handle_error(
            category=ErrorCategory.DIRECTIVE,
            severity=ErrorSeverity.MEDIUM,
            message=message,
            context=context,
            exception=exception
        )

    def get_error_history(self,
                          category: Optional[ErrorCategory] = None,
                          severity: Optional[ErrorSeverity] = None,
                          since: Optional[datetime] = None) -> List[ErrorInfo]:
        """Get error history with optional filtering."""
        with self._lock:
            errors = self._error_history.copy()

        if category:
            errors = [e for e in errors if e.category == category]

        if severity:
            errors = [e for e in errors if e.severity == severity]

        if since:
            errors = [e for e in errors if e.timestamp >= since]

        return errors

    def get_stats(self) -> Dict[str, Any]:
        """Get error statistics."""
        with self._lock:
            stats = self._stats.copy()
            stats['errors_by_category'] = dict(self._stats['errors_by_category'])
            stats['errors_by_severity'] = dict(self._stats['errors_by_severity'])
            return stats

    def clear_history(self):
        """Clear error history."""
        with self._lock:
            self._error_history.clear()
            self._suppressed_errors.clear()
            self.logger.info("Error history cleared")

    def _should_suppress_error(self, error: ErrorInfo) -> bool:
        """Check if error was already logged inside the suppression window."""
        error_key = f"{error.category.value}:{error.message}"

        last_occurrence = self._suppressed_errors.get(error_key)
        if last_occurrence and error.timestamp - last_occurrence < self.error_suppression_window:
            return True

        self._suppressed_errors[error_key] = error.timestamp
        return False

    def _log_error(self, error: ErrorInfo):
        """Log error with appropriate level."""
        log_message = f"[{error.category.value.upper()}] {error.message}"
        if error.details:
            log_message += f" - {error.details}"

        if error.severity == ErrorSeverity.CRITICAL:
            self.logger.critical(log_message)
        elif error.severity == ErrorSeverity.HIGH:
            self.logger.error(log_message)
        elif error.severity == ErrorSeverity.MEDIUM:
            self.logger.warning(log_message)
        else:
            self.logger.info(log_message)

    def _update_stats(self, error: ErrorInfo):
        """Update error statistics."""
        self._stats['total_errors'] += 1

        category_key = error.category.value
        by_category = self._stats['errors_by_category']
        by_category[category_key] = by_category.get(category_key, 0) + 1

        severity_key = error.severity.value
        by_severity = self._stats['errors_by_severity']
        by_severity[severity_key] = by_severity.get(severity_key, 0) + 1

    def _notify_callbacks(self, callbacks: List[Callable[[ErrorInfo], None]], error: ErrorInfo):
        """Notify error callbacks."""
        for callback in callbacks:
            try:
                callback(error)
            except Exception as e:
                self.logger.error(f"Error in error callback: {e}")

    def _cleanup_history(self):
        """Clean up old error history entries."""
        if len(self._error_history) > self.max_history_size:
            self._error_history = self._error_history[-self.max_history_size:]

        cutoff_time = datetime.now() - self.error_suppression_window
        self._suppressed_errors = {
            key: timestamp for key, timestamp in self._suppressed_errors.items()
            if timestamp > cutoff_time
        }
