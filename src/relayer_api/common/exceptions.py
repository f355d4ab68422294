"""
Exception types and error classification for relayer_api.

Provides:
- ErrorCategory enum describing which layer produced an error
- Typed exception hierarchy for union, cost and event errors
"""

from enum import Enum
from typing import Optional


class ErrorCategory(Enum):
    """
    Classification of schema errors.

    Categories:
        ENCODE: A value could not be serialized (logic error, not expected
                in normal operation)
        DECODE: Stored or received bytes do not parse as the requested shape
        TYPE: The container holds a different variant than requested
        REGISTRY: A tag is outside the closed set of known variants
        VALIDATION: The value parsed but breaks a semantic rule
    """

    ENCODE = "encode"
    DECODE = "decode"
    TYPE = "type"
    REGISTRY = "registry"
    VALIDATION = "validation"


class RelayerApiError(Exception):
    """
    Base exception for all relayer_api errors.

    Attributes:
        message: Human-readable error description
        category: Error classification
        cause: Original exception if wrapping
        context: Additional context dict for debugging
    """

    category: ErrorCategory = ErrorCategory.DECODE

    def __init__(
        self,
        message: str,
        cause: Optional[Exception] = None,
        context: Optional[dict] = None,
    ):
        self.message = message
        self.cause = cause
        self.context = context or {}
        super().__init__(message)

    def __str__(self) -> str:
        parts = [self.message]
        if self.cause:
            parts.append(f"Caused by: {self.cause}")
        return " | ".join(parts)


# =============================================================================
# Serialization Errors
# =============================================================================


class EncodeError(RelayerApiError):
    """A variant could not be serialized."""

    category = ErrorCategory.ENCODE


class DecodeError(RelayerApiError, ValueError):
    """Bytes do not parse as the requested shape.

    Also a ValueError so that pydantic reports it as a validation error when
    raised while decoding a container nested inside a model.
    """

    category = ErrorCategory.DECODE


class ShapeMismatchError(DecodeError):
    """Cost holds neither the requested Token nor Fees shape."""

    pass


# =============================================================================
# Union Errors
# =============================================================================


class TypeMismatchError(RelayerApiError):
    """Container discriminator does not match the requested variant."""

    category = ErrorCategory.TYPE

    def __init__(
        self,
        expected: str,
        actual: str,
        cause: Optional[Exception] = None,
    ):
        message = f"discriminator mismatch: expected {expected!r}, got {actual!r}"
        super().__init__(message, cause, {"expected": expected, "actual": actual})
        self.expected = expected
        self.actual = actual


class EmptyUnionError(RelayerApiError):
    """No variant has ever been set on the container."""

    category = ErrorCategory.TYPE


class UnknownDiscriminatorError(RelayerApiError):
    """Tag value is outside the closed variant registry."""

    category = ErrorCategory.REGISTRY

    def __init__(
        self,
        discriminator: str,
        cause: Optional[Exception] = None,
        message: Optional[str] = None,
    ):
        super().__init__(
            message or f"unknown discriminator: {discriminator}",
            cause,
            {"discriminator": discriminator},
        )
        self.discriminator = discriminator


class UnknownTaskTypeError(UnknownDiscriminatorError):
    """Task type supplied out-of-band is not a registered task type."""

    def __init__(self, task_type: str, cause: Optional[Exception] = None):
        super().__init__(task_type, cause, message=f"unknown task type: {task_type}")


# =============================================================================
# Validation Errors
# =============================================================================


class CostValidationError(RelayerApiError, ValueError):
    """Cost breaks a semantic rule (bad shape or duplicate fee IDs)."""

    category = ErrorCategory.VALIDATION


class MissingCostError(CostValidationError):
    """Event type requires a cost but none is present."""

    pass

