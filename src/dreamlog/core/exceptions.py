"""
DreamLog Domain-Specific Exceptions
===================================

This module defines a hierarchy of exceptions for consistent error handling
across DreamLog.

Exception Hierarchy:
    DreamLogError (base)
    ├── RecoverableError (transient, retry possible)
    │   └── EnrichmentError
    ├── IrrecoverableError (permanent, requires intervention)
    │   ├── ConfigurationError
    │   ├── ValidationError
    │   ├── NotFoundError
    │   │   └── DreamNotFoundError
    │   ├── DataCorruptionError
    │   └── UnsupportedProviderError
    └── Domain Errors (mixed recoverability)
        ├── StorageError
        ├── ProviderError
        │   └── AnalysisError
        └── BatchImportError

Usage Guidelines:
    - Skipped input (wrong file type, empty description) is not an error
    - Per-file enrichment failures are caught by the importer and counted
    - Only batch-level faults surface to the caller, as a message
    - Always include context in error messages
"""

from typing import Optional, Any


class DreamLogError(Exception):
    """
    Base exception for all DreamLog errors.

    Attributes:
        message: Human-readable error message
        error_code: Machine-readable error code
        context: Additional context about the error
        recoverable: Whether the error is potentially recoverable
    """

    error_code: str = "DREAMLOG_ERROR"
    recoverable: bool = True

    def __init__(
        self,
        message: str,
        context: Optional[dict] = None,
        error_code: Optional[str] = None,
        recoverable: Optional[bool] = None
    ):
        super().__init__(message)
        self.message = message
        self.context = context or {}
        if error_code is not None:
            self.error_code = error_code
        if recoverable is not None:
            self.recoverable = recoverable

    def __str__(self) -> str:
        if self.context:
            return f"{self.message} | context={self.context}"
        return self.message

    def to_dict(self) -> dict:
        """Convert exception to dictionary for JSON output."""
        result = {
            "error": self.message,
            "code": self.error_code,
            "recoverable": self.recoverable,
        }

        if self.context:
            result["context"] = self.context

        return result


# =============================================================================
# Base Categories: Recoverable vs Irrecoverable
# =============================================================================

class RecoverableError(DreamLogError):
    """
    Base class for recoverable errors.

    These are transient errors that may succeed on retry:
    - Provider/network failures
    - Timeouts
    - Rate limiting
    """
    recoverable = True


class IrrecoverableError(DreamLogError):
    """
    Base class for irrecoverable errors.

    These are permanent errors that require intervention:
    - Invalid configuration
    - Data corruption
    - Validation failures
    - Resource not found
    """
    recoverable = False


# =============================================================================
# Storage Errors
# =============================================================================

class StorageError(DreamLogError):
    """Base exception for storage-related errors."""
    error_code = "STORAGE_ERROR"

    def __init__(self, path: str, operation: str, reason: str, context: Optional[dict] = None):
        ctx = {"path": path, "operation": operation}
        if context:
            ctx.update(context)
        super().__init__(f"Store {operation} failed for '{path}': {reason}", ctx)
        self.path = path
        self.operation = operation


class DataCorruptionError(IrrecoverableError):
    """Raised when stored data is corrupt or cannot be deserialized."""
    error_code = "DATA_CORRUPTION_ERROR"

    def __init__(self, resource_id: str, reason: str = "Data corruption detected", context: Optional[dict] = None):
        ctx = {"resource_id": resource_id}
        if context:
            ctx.update(context)
        super().__init__(f"{reason} for resource '{resource_id}'", ctx)
        self.resource_id = resource_id


# =============================================================================
# Configuration Errors
# =============================================================================

class ConfigurationError(IrrecoverableError):
    """Raised when configuration is invalid or missing."""
    error_code = "CONFIGURATION_ERROR"

    def __init__(self, config_key: str, reason: str, context: Optional[dict] = None):
        ctx = {"config_key": config_key}
        if context:
            ctx.update(context)
        super().__init__(f"Configuration error for '{config_key}': {reason}", ctx)
        self.config_key = config_key


# =============================================================================
# Validation Errors
# =============================================================================

class ValidationError(IrrecoverableError):
    """Raised when input validation fails."""
    error_code = "VALIDATION_ERROR"

    def __init__(self, field: str, reason: str, value: Any = None, context: Optional[dict] = None):
        ctx = {"field": field}
        if value is not None:
            # Truncate large values
            value_str = str(value)
            if len(value_str) > 100:
                value_str = value_str[:100] + "..."
            ctx["value"] = value_str
        if context:
            ctx.update(context)
        super().__init__(f"Validation error for '{field}': {reason}", ctx)
        self.field = field
        self.reason = reason


# =============================================================================
# Not Found Errors
# =============================================================================

class NotFoundError(IrrecoverableError):
    """Raised when a requested resource is not found."""
    error_code = "NOT_FOUND_ERROR"

    def __init__(self, resource_type: str, resource_id: str, context: Optional[dict] = None):
        ctx = {"resource_type": resource_type, "resource_id": resource_id}
        if context:
            ctx.update(context)
        super().__init__(f"{resource_type} '{resource_id}' not found", ctx)
        self.resource_type = resource_type
        self.resource_id = resource_id


class DreamNotFoundError(NotFoundError):
    """Raised when a dream id is not in the collection."""
    error_code = "DREAM_NOT_FOUND_ERROR"

    def __init__(self, dream_id: str, context: Optional[dict] = None):
        super().__init__("Dream", dream_id, context)
        self.dream_id = dream_id


# =============================================================================
# Provider Errors
# =============================================================================

class ProviderError(DreamLogError):
    """Base exception for LLM provider-related errors."""
    error_code = "PROVIDER_ERROR"


class UnsupportedProviderError(IrrecoverableError, ProviderError):
    """Raised when an unsupported provider is requested."""
    error_code = "UNSUPPORTED_PROVIDER_ERROR"

    def __init__(self, provider: str, supported_providers: Optional[list] = None, context: Optional[dict] = None):
        ctx = {"provider": provider}
        if supported_providers:
            ctx["supported_providers"] = supported_providers
        if context:
            ctx.update(context)
        msg = f"Unsupported provider: {provider}"
        if supported_providers:
            msg += f". Supported: {', '.join(supported_providers)}"
        super().__init__(msg, ctx)
        self.provider = provider


class EnrichmentError(RecoverableError, ProviderError):
    """Raised when a dream text could not be enriched (title/tags/people)."""
    error_code = "ENRICHMENT_ERROR"

    def __init__(self, provider: str, reason: str, context: Optional[dict] = None):
        ctx = {"provider": provider}
        if context:
            ctx.update(context)
        super().__init__(f"Enrichment via '{provider}' failed: {reason}", ctx)
        self.provider = provider
        self.reason = reason


class AnalysisError(ProviderError):
    """Raised when a pattern analysis over a set of dreams fails."""
    error_code = "ANALYSIS_ERROR"

    def __init__(self, reason: str = "Failed to generate dream analysis.", context: Optional[dict] = None):
        super().__init__(reason, context)
        self.reason = reason


# =============================================================================
# Import Errors
# =============================================================================

class BatchImportError(IrrecoverableError):
    """Raised when a whole import batch could not be completed."""
    error_code = "BATCH_IMPORT_ERROR"

    def __init__(self, reason: str, files_total: int = 0, context: Optional[dict] = None):
        ctx = {"files_total": files_total}
        if context:
            ctx.update(context)
        super().__init__(f"Batch import failed: {reason}", ctx)
        self.files_total = files_total


__all__ = [
    # Base
    "DreamLogError",
    "RecoverableError",
    "IrrecoverableError",
    # Storage
    "StorageError",
    "DataCorruptionError",
    # Config
    "ConfigurationError",
    # Validation
    "ValidationError",
    # Not Found
    "NotFoundError",
    "DreamNotFoundError",
    # Provider
    "ProviderError",
    "UnsupportedProviderError",
    "EnrichmentError",
    "AnalysisError",
    # Import
    "BatchImportError",
]
