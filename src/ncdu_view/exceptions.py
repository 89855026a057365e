"""
ncdu-view exceptions.

These are plain exceptions with no web framework dependency.
HTTP mapping is done at the API layer (see ncdu_view.api).
"""
from typing import Optional, Any, Dict


class NcduViewException(Exception):
    """Base exception for all ncdu-view errors."""

    # Default HTTP status code mapping (used by the API layer)
    status_code: int = 500

    def __init__(self, detail: str = "An error occurred", context: Optional[Dict[str, Any]] = None):
        self.detail = detail
        self.context = context or {}
        super().__init__(detail)


class FormatError(NcduViewException):
    """Raised when an export does not match any recognized ncdu layout."""
    status_code = 422

    def __init__(self, detail: str = "Invalid ncdu export format", context: Optional[Dict[str, Any]] = None):
        super().__init__(detail=detail, context=context)


class NotFoundError(NcduViewException):
    """Raised when a requested resource does not exist."""
    status_code = 404

    def __init__(self, detail: str = "Resource not found", context: Optional[Dict[str, Any]] = None):
        super().__init__(detail=detail, context=context)


class ConfigError(NcduViewException):
    """Raised when configuration is missing or invalid."""
    status_code = 400

    def __init__(self, detail: str = "Configuration error", context: Optional[Dict[str, Any]] = None):
        super().__init__(detail=detail, context=context)


class SnapshotUnavailableError(NcduViewException):
    """Raised when no export has been loaded successfully yet."""
    status_code = 503

    def __init__(self, detail: str = "Export data is not available", context: Optional[Dict[str, Any]] = None):
        super().__init__(detail=detail, context=context)
