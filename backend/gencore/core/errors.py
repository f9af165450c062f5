"""Error Hierarchy — typed, categorized exceptions for all GenCore failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Template errors (400-level) are caller mistakes; graph configuration errors are
      construction-time defects (500-level)
    - to_response() produces the REST envelope
    - Resolver exceptions are NOT wrapped — they propagate as raised

Design Decisions:
    - Single hierarchy with GenCoreError base: FastAPI global handler catches all
    - TemplateParseError subclasses TemplateValidationError: callers catching
      validation failures also catch malformed JSON
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any
from datetime import datetime, timezone


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    CONFIGURATION = "configuration"
    RESOURCE_NOT_FOUND = "resource_not_found"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    graph_key: str | None = None
    node_key: str | None = None
    debug_info: dict[str, Any] | None = None


class GenCoreError(Exception):
    """Base exception for all GenCore errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
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
                    "graph_key": self.context.graph_key,
                    "node_key": self.context.node_key,
                },
            }
        }


# ─── Template Errors (400-level) ────────────────────────────────

class TemplateValidationError(GenCoreError):
    """Review template does not match the message schema."""
    def __init__(
        self,
        message: str,
        details: list[dict] | None = None,
        context: ErrorContext | None = None,
    ):
        super().__init__(
            message, "TEMPLATE_INVALID", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )
        self.details = details or []

    def to_response(self) -> dict:
        response = super().to_response()
        response["error"]["details"] = self.details
        return response


class TemplateParseError(TemplateValidationError):
    """Review template is not valid JSON."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(f"Template is not valid JSON: {message}", context=context)
        self.code = "TEMPLATE_PARSE_ERROR"


# ─── Graph Errors ───────────────────────────────────────────────

class ConfigError(GenCoreError):
    """Graph definition is inconsistent (raised at construction, before compute)."""
    def __init__(
        self, message: str, node_key: str | None = None,
        context: ErrorContext | None = None,
    ):
        ctx = context or ErrorContext()
        ctx.node_key = node_key
        super().__init__(
            message, "GRAPH_CONFIG_ERROR", ErrorCategory.CONFIGURATION,
            ErrorSeverity.CRITICAL, ctx, 500,
        )


class MissingContextError(GenCoreError):
    """Compute requested without the external context keys the graph declares."""
    def __init__(
        self, graph_key: str, missing: list[str], context: ErrorContext | None = None,
    ):
        ctx = context or ErrorContext()
        ctx.graph_key = graph_key
        super().__init__(
            f"Graph '{graph_key}' requires context keys: {', '.join(missing)}",
            "CONTEXT_INCOMPLETE", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, ctx, 400,
        )
        self.missing = missing


class GraphNotFoundError(GenCoreError):
    """No graph is registered under the requested key."""
    def __init__(self, graph_key: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.graph_key = graph_key
        super().__init__(
            f"Graph '{graph_key}' not found",
            "GRAPH_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, ctx, 404,
        )
