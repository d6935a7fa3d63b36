"""
Error handling for roof geometry operations.
Geometry failures are raised as typed exceptions inside the core and turned
into no-ops at the public mutation boundary.
"""

import functools
import logging
import traceback
import time
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

from ..topology.types import MutationResult

logger = logging.getLogger(__name__)


class ErrorSeverity(Enum):
    """Error severity levels."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class ErrorCategory(Enum):
    """Error categories."""
    INVALID_GEOMETRY = "invalid_geometry"
    INVALID_REFERENCE = "invalid_reference"
    INVARIANT_VIOLATION = "invariant_violation"
    EXPORT_ERROR = "export_error"
    UNKNOWN = "unknown"


class RoofGeometryError(Exception):
    """Base class for recoverable roof geometry failures."""
    category = ErrorCategory.UNKNOWN


class InvalidGeometryError(RoofGeometryError):
    """Degenerate polygon, zero-length edge or coincident vertices."""
    category = ErrorCategory.INVALID_GEOMETRY


class InvalidReferenceError(RoofGeometryError):
    """Unknown vertex or edge id, or an id that is already taken."""
    category = ErrorCategory.INVALID_REFERENCE


class InvariantViolationError(RoofGeometryError):
    """Edit that would break the topology invariants."""
    category = ErrorCategory.INVARIANT_VIOLATION


@dataclass
class ErrorContext:
    """Context information for errors."""
    operation: str
    metadata: Optional[Dict[str, Any]] = None


@dataclass
class ErrorReport:
    """Structured error report."""
    timestamp: float
    severity: ErrorSeverity
    category: ErrorCategory
    message: str
    exception_type: str
    traceback: str
    context: ErrorContext


class ErrorHandler:
    """Collects error reports and keeps simple per-category statistics."""

    def __init__(self, max_recent: int = 100):
        self.max_recent = max_recent
        self.error_stats: Dict[str, Any] = {
            'total_errors': 0,
            'errors_by_category': {},
            'recent_errors': []
        }

    def handle_error(self,
                     exception: Exception,
                     context: ErrorContext,
                     severity: ErrorSeverity = ErrorSeverity.MEDIUM,
                     category: Optional[ErrorCategory] = None) -> ErrorReport:
        """
        Handle an error and generate a structured report.

        Args:
            exception: The exception that occurred
            context: Error context
            severity: Error severity
            category: Error category; taken from the exception when omitted

        Returns:
            Error report
        """
        if category is None:
            category = getattr(exception, 'category', ErrorCategory.UNKNOWN)

        report = ErrorReport(
            timestamp=time.time(),
            severity=severity,
            category=category,
            message=str(exception),
            exception_type=type(exception).__name__,
            traceback=traceback.format_exc(),
            context=context
        )

        log_message = (f"{context.operation} failed "
                       f"[{category.value}] {report.exception_type}: {report.message}")
        if severity == ErrorSeverity.HIGH:
            logger.error(log_message)
        elif severity == ErrorSeverity.MEDIUM:
            logger.warning(log_message)
        else:
            logger.debug(log_message)

        self._update_error_stats(report)
        return report

    def _update_error_stats(self, report: ErrorReport):
        """Update error statistics."""
        self.error_stats['total_errors'] += 1
        by_category = self.error_stats['errors_by_category']
        by_category[report.category.value] = by_category.get(report.category.value, 0) + 1

        self.error_stats['recent_errors'].append({
            'timestamp': report.timestamp,
            'category': report.category.value,
            'operation': report.context.operation
        })
        if len(self.error_stats['recent_errors']) > self.max_recent:
            self.error_stats['recent_errors'] = self.error_stats['recent_errors'][-self.max_recent:]

    def get_error_stats(self) -> Dict[str, Any]:
        return dict(self.error_stats)

    def get_recent_errors(self, count: int = 10) -> List[Dict[str, Any]]:
        return self.error_stats['recent_errors'][-count:]


def mutator(creates: bool = False):
    """
    Decorator for topology mutators.

    A RoofGeometryError raised by the wrapped function turns the call into a
    no-op: the input topology (first positional argument) is returned
    unchanged, paired with a None id for creating mutators. Any other
    exception propagates.

    Args:
        creates: Whether the mutator returns a MutationResult
    """
    def decorator(func: Callable):
        @functools.wraps(func)
        def wrapper(topology, *args, **kwargs):
            try:
                return func(topology, *args, **kwargs)
            except RoofGeometryError as e:
                logger.debug(f"{func.__name__} rejected [{e.category.value}]: {e}")
                if creates:
                    return MutationResult(topology, None)
                return topology
        return wrapper
    return decorator


def safe_execute(func: Callable,
                 default_return: Any = None,
                 context: Optional[ErrorContext] = None,
                 handler: Optional[ErrorHandler] = None) -> Any:
    """
    Execute a callable and fall back to a default on roof geometry errors.

    Args:
        func: Function to execute
        default_return: Value returned when func raises RoofGeometryError
        context: Error context for the report
        handler: Optional ErrorHandler that records the failure

    Returns:
        Function result or default return value
    """
    try:
        return func()
    except RoofGeometryError as e:
        if handler is not None:
            handler.handle_error(e, context or ErrorContext(operation=getattr(func, '__name__', 'call')),
                                 ErrorSeverity.LOW)
        else:
            logger.debug(f"safe_execute fell back to default: {e}")
        return default_return
