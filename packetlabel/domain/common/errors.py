#packetlabel/domain/common/errors.py

"""
Domain-specific error types for standardized error handling.

Expected failures (a bad drag selection, an inconsistent set of saved regions)
travel inside a Result as DomainError objects. Only conditions raised by the
rendering collaborator in the middle of a paint pass are real exceptions.
"""
from enum import Enum
from typing import Optional, Dict, Any


class ErrorCategory(Enum):
    """Categories of errors in the application."""
    VALIDATION = "Validation"
    CONFIGURATION = "Configuration"
    GROUPING = "Grouping"
    RESOURCE = "Resource"
    UI = "UI"
    UNKNOWN = "Unknown"


class ErrorSeverity(Enum):
    """Severity levels for errors."""
    INFO = "Info"
    WARNING = "Warning"
    ERROR = "Error"
    CRITICAL = "Critical"


class DomainError:
    """
    Base class for domain-specific errors.

    Carries enough structure for logging and for deciding what the user sees.
    """

    def __init__(self,
                 message: str,
                 category: ErrorCategory = ErrorCategory.UNKNOWN,
                 severity: ErrorSeverity = ErrorSeverity.ERROR,
                 code: Optional[str] = None,
                 details: Optional[Dict[str, Any]] = None,
                 inner_error: Optional[Exception] = None):
        """
        Initialize a domain error.

        Args:
            message: Human-readable error message
            category: Error category
            severity: Error severity
            code: Optional error code for programmatic handling
            details: Optional additional error details
            inner_error: Optional original exception
        """
        self.message = message
        self.category = category
        self.severity = severity
        self.code = code
        self.details = details or {}
        self.inner_error = inner_error

    def __str__(self) -> str:
        return f"{self.category.value} Error: {self.message}"


class ValidationError(DomainError):
    """A selection or record that breaks an offset invariant."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None,
                 inner_error: Optional[Exception] = None, code: Optional[str] = None):
        super().__init__(
            message=message,
            category=ErrorCategory.VALIDATION,
            severity=ErrorSeverity.WARNING,
            code=code,
            details=details,
            inner_error=inner_error
        )


class ConfigurationError(DomainError):
    """Error for configuration issues."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None,
                 inner_error: Optional[Exception] = None):
        super().__init__(
            message=message,
            category=ErrorCategory.CONFIGURATION,
            severity=ErrorSeverity.ERROR,
            details=details,
            inner_error=inner_error
        )


class GroupingError(DomainError):
    """
    Saved regions that cannot be placed into a single area.

    Raised on reload when more than one distinct area id is found. The
    correct grouping cannot be inferred, so nothing is repaired.
    """

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=message,
            category=ErrorCategory.GROUPING,
            severity=ErrorSeverity.ERROR,
            code="inconsistent_area_grouping",
            details=details
        )


class ResourceError(DomainError):
    """Error for resource access or availability issues."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None,
                 inner_error: Optional[Exception] = None):
        super().__init__(
            message=message,
            category=ErrorCategory.RESOURCE,
            severity=ErrorSeverity.ERROR,
            details=details,
            inner_error=inner_error
        )


class UIError(DomainError):
    """Error for UI-related issues."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None,
                 inner_error: Optional[Exception] = None):
        super().__init__(
            message=message,
            category=ErrorCategory.UI,
            severity=ErrorSeverity.WARNING,
            details=details,
            inner_error=inner_error
        )


class StaleNodeReferenceError(LookupError):
    """
    A byte node vanished between resolution and use.

    Raised by view bindings when a node key no longer maps to a rendered
    element, typically because the grid was re-rendered.
    """

    def __init__(self, node_key: Any):
        super().__init__(f"Byte node no longer rendered: {node_key!r}")
        self.node_key = node_key
