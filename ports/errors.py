"""
Engine error types.

Insufficient data is deliberately absent: indicators degrade to neutral
defaults instead of raising. Everything here aborts a single analyze call.
"""

from datetime import datetime
from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    """Error codes for structured error handling."""

    # Upstream / timing errors (1xx)
    UPSTREAM_TIMEOUT = "E101"
    UPSTREAM_UNAVAILABLE = "E102"
    UPSTREAM_EMPTY = "E103"

    # Data errors (4xx)
    DATA_INVALID = "E402"
    DATA_EMPTY = "E404"

    # Validation errors (5xx)
    VALIDATION_CONFIG = "E503"

    # Internal errors (9xx)
    INTERNAL = "E901"
    CANCELLED = "E902"
    UNKNOWN = "E999"


class EngineError(Exception):
    """
    Base exception for analysis failures.

    Carries a code, the originating component and free-form context so
    callers can log or serialize the failure without parsing messages.
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.UNKNOWN,
        source: str | None = None,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ):
        self.code = code
        self.source = source
        self.context = context or {}
        self.cause = cause
        self.timestamp = datetime.now()

        parts = [f"[{code.value}]"]
        if source:
            parts.append(f"[{source}]")
        parts.append(message)

        self.message = message
        super().__init__(" ".join(parts))

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging/serialization."""
        return {
            "code": self.code.value,
            "message": self.message,
            "source": self.source,
            "context": self.context,
            "timestamp": self.timestamp.isoformat(),
            "cause": str(self.cause) if self.cause else None,
        }

    def with_context(self, **kwargs: Any) -> "EngineError":
        """Add additional context and return self for chaining."""
        self.context.update(kwargs)
        return self


class InvalidInputError(EngineError):
    """Raised when a price bar or series cannot be trusted."""

    def __init__(
        self,
        reason: str,
        field: str | None = None,
        value: Any = None,
        index: int | None = None,
    ):
        self.reason = reason
        self.field = field
        self.value = value
        self.index = index

        context: dict[str, Any] = {}
        if field:
            context["field"] = field
        if value is not None:
            context["value"] = repr(value)
        if index is not None:
            context["index"] = index

        super().__init__(
            message=reason,
            code=ErrorCode.DATA_INVALID,
            source="input",
            context=context,
        )

    def with_index(self, index: int) -> "InvalidInputError":
        """Record the position of the offending bar and return self."""
        self.index = index
        self.context["index"] = index
        return self


class UpstreamUnavailableError(EngineError):
    """Raised when the price data provider cannot deliver a series."""

    def __init__(
        self,
        source: str,
        reason: str,
        symbol: str | None = None,
        timeframe: str | None = None,
        code: ErrorCode = ErrorCode.UPSTREAM_UNAVAILABLE,
        cause: Exception | None = None,
    ):
        self.reason = reason
        self.symbol = symbol
        self.timeframe = timeframe

        context: dict[str, Any] = {"reason": reason}
        if symbol:
            context["symbol"] = symbol
        if timeframe:
            context["timeframe"] = timeframe

        super().__init__(
            message=reason,
            code=code,
            source=source,
            context=context,
            cause=cause,
        )


class AnalysisTimeoutError(EngineError):
    """Raised when an analyze call exceeds its deadline."""

    def __init__(self, symbol: str, timeout: float, stage: str):
        self.symbol = symbol
        self.timeout = timeout
        self.stage = stage
        super().__init__(
            message=f"Analysis of {symbol} exceeded {timeout:.2f}s before stage '{stage}'",
            code=ErrorCode.UPSTREAM_TIMEOUT,
            source="pipeline",
            context={"symbol": symbol, "timeout_seconds": timeout, "stage": stage},
        )


class AnalysisCancelledError(EngineError):
    """Raised when a caller cancels an in-flight analyze call."""

    def __init__(self, symbol: str, stage: str):
        self.symbol = symbol
        self.stage = stage
        super().__init__(
            message=f"Analysis of {symbol} cancelled before stage '{stage}'",
            code=ErrorCode.CANCELLED,
            source="pipeline",
            context={"symbol": symbol, "stage": stage},
        )
