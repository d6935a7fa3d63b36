"""
Utilities module for roofkit.
Contains logging setup and error handling.
"""

from .logger import setup_logger, get_logger, log_config
from .error_handling import (
    ErrorSeverity,
    ErrorCategory,
    ErrorContext,
    ErrorReport,
    ErrorHandler,
    RoofGeometryError,
    InvalidGeometryError,
    InvalidReferenceError,
    InvariantViolationError,
    mutator,
    safe_execute
)

__all__ = [
    'setup_logger',
    'get_logger',
    'log_config',
    'ErrorSeverity',
    'ErrorCategory',
    'ErrorContext',
    'ErrorReport',
    'ErrorHandler',
    'RoofGeometryError',
    'InvalidGeometryError',
    'InvalidReferenceError',
    'InvariantViolationError',
    'mutator',
    'safe_execute'
]
