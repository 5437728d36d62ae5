"""
Parcel Hub Exception Hierarchy

Structured exception classes for carrier adapters and the multi-carrier
dispatcher. All exceptions include code, message, and details so callers can
log or serialize them without knowing which carrier raised them.

Exception Hierarchy:
    ParcelHubError
    ├── CarrierError
    │   ├── CarrierTransportError
    │   ├── CarrierServiceError
    │   └── CarrierNotSupportedError
    ├── AllCarriersFailedError
    └── CarrierNotFoundError
"""
from typing import Optional, Dict, Any, List, Sequence


class ParcelHubError(Exception):
    """
    Base exception for all Parcel Hub errors.

    Attributes:
        message: Human-readable error description
        code: Machine-readable error code for programmatic handling
        details: Additional context for debugging
    """

    default_code: str = "PARCEL_HUB_ERROR"

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.code = code or self.default_code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for logging/serialization."""
        return {
            "error_type": self.__class__.__name__,
            "code": self.code,
            "message": self.message,
            "details": self.details,
        }

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"


# =============================================================================
# CARRIER ADAPTER ERRORS
# =============================================================================

class CarrierError(ParcelHubError):
    """Base exception for errors raised by a single carrier adapter."""
    default_code = "CARRIER_ERROR"

    def __init__(self, message: str, vendor: Optional[str] = None, **kwargs):
        self.vendor = vendor
        details = kwargs.pop("details", {})
        details["vendor"] = vendor
        super().__init__(message, details=details, **kwargs)


class CarrierTransportError(CarrierError):
    """Network or HTTP-level failure talking to a carrier."""
    default_code = "CARRIER_TRANSPORT_FAILED"

    def __init__(self, message: str, status_code: Optional[int] = None, **kwargs):
        self.status_code = status_code
        details = kwargs.pop("details", {})
        details["status_code"] = status_code
        super().__init__(message, details=details, **kwargs)


class CarrierServiceError(CarrierError):
    """
    The carrier answered, but reported a business error.

    `errors` holds the carrier's own messages; `body` keeps the raw
    response so it can be inspected later.
    """
    default_code = "CARRIER_SERVICE_ERROR"

    def __init__(
        self,
        errors: Sequence[str],
        body: str = "",
        **kwargs
    ):
        self.errors: List[str] = list(errors)
        self.body = body
        message = kwargs.pop("message", None) or "; ".join(self.errors) or "Carrier reported an error"
        details = kwargs.pop("details", {})
        details["errors"] = self.errors
        super().__init__(message, details=details, **kwargs)


class CarrierNotSupportedError(CarrierError):
    """The carrier does not offer the requested operation."""
    default_code = "CARRIER_OPERATION_NOT_SUPPORTED"


# =============================================================================
# DISPATCHER ERRORS
# =============================================================================

class AllCarriersFailedError(ParcelHubError):
    """
    Every composed carrier failed for the same request.

    `errors` lists the underlying failures in carrier registration order.
    """
    default_code = "ALL_CARRIERS_FAILED"

    def __init__(self, message: str, errors: Optional[Sequence[BaseException]] = None, **kwargs):
        self.errors: List[BaseException] = list(errors or [])
        details = kwargs.pop("details", {})
        details["errors"] = [f"{type(e).__name__}: {e}" for e in self.errors]
        super().__init__(message, details=details, **kwargs)


class CarrierNotFoundError(ParcelHubError):
    """No composed carrier matches the requested vendor."""
    default_code = "CARRIER_NOT_FOUND"

    def __init__(self, vendor: str, **kwargs):
        self.vendor = vendor
        details = kwargs.pop("details", {})
        details["vendor"] = vendor
        super().__init__(f"No carrier registered for vendor {vendor!r}", details=details, **kwargs)
