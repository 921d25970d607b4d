"""Error Hierarchy — typed, categorized exceptions for compile-time failures.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - All compile errors are fatal: compilation halts at the first one raised
    - to_response() produces the REST envelope used by the HTTP shell

Design Decisions:
    - Single hierarchy with SchemaCompilationError base: the shell catches one type
    - ErrorContext as dataclass: names the resource/field/route/type at fault
      without coupling to the logging framework
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any
from datetime import datetime, timezone


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    CONFIGURATION = "configuration"
    UNSUPPORTED = "unsupported"
    RESOURCE_NOT_FOUND = "resource_not_found"
    VALIDATION = "validation"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Where in the resource model the failure was found."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    resource_type: str | None = None
    field_name: str | None = None
    route_path: str | None = None
    type_name: str | None = None
    debug_info: dict[str, Any] | None = None


class SchemaCompilationError(Exception):
    """Base exception for all schema compilation errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.CRITICAL,
        context: ErrorContext | None = None,
        http_status: int = 500,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.http_status = http_status

    def to_response(self) -> dict:
        """Convert to standardized REST error response."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
                "context": {
                    "resource_type": self.context.resource_type,
                    "field_name": self.context.field_name,
                    "route_path": self.context.route_path,
                    "type_name": self.context.type_name,
                },
            }
        }


# ─── Compile Errors ─────────────────────────────────────────────

class UnknownFieldError(SchemaCompilationError):
    """A declared field is neither attribute, relationship nor aggregate."""
    def __init__(self, resource_type: str, field_name: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.resource_type = resource_type
        ctx.field_name = field_name
        super().__init__(
            f"Invalid field {field_name!r} on resource {resource_type!r}: "
            f"not an attribute, relationship or aggregate",
            "UNKNOWN_FIELD", ErrorCategory.CONFIGURATION,
            ErrorSeverity.CRITICAL, ctx, 500,
        )
        self.resource_type = resource_type
        self.field_name = field_name


class UnimplementedTypeError(SchemaCompilationError):
    """Attribute type has no mapping, even after storage type normalization."""
    def __init__(self, type_name: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.type_name = type_name
        super().__init__(
            f"unimplemented type {type_name}",
            "UNIMPLEMENTED_TYPE", ErrorCategory.UNSUPPORTED,
            ErrorSeverity.CRITICAL, ctx, 500,
        )
        self.type_name = type_name


class UnsupportedRouteShapeError(SchemaCompilationError):
    """Route path parameters other than [] or ["id"] on a POST or PATCH route."""
    def __init__(
        self, route_path: str, parameters: list[str], context: ErrorContext | None = None,
    ):
        ctx = context or ErrorContext()
        ctx.route_path = route_path
        super().__init__(
            f"Unsupported path parameters {parameters} on route {route_path!r}: "
            f"only [] or ['id'] are supported",
            "UNSUPPORTED_ROUTE_SHAPE", ErrorCategory.UNSUPPORTED,
            ErrorSeverity.CRITICAL, ctx, 500,
        )
        self.route_path = route_path
        self.parameters = parameters


class UnknownResourceError(SchemaCompilationError):
    """Requested resource type does not exist in the model."""
    def __init__(self, resource_type: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.resource_type = resource_type
        super().__init__(
            f"Resource {resource_type!r} not found",
            "UNKNOWN_RESOURCE", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, ctx, 404,
        )
        self.resource_type = resource_type


# ─── Infrastructure Errors ──────────────────────────────────────

class ResourceModelLoadError(SchemaCompilationError):
    """Resource model file could not be read or failed validation."""
    def __init__(self, message: str, source: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.debug_info = {"source": source}
        super().__init__(
            f"Resource model {source} is invalid: {message}",
            "RESOURCE_MODEL_INVALID", ErrorCategory.VALIDATION,
            ErrorSeverity.CRITICAL, ctx, 500,
        )
        self.source = source
