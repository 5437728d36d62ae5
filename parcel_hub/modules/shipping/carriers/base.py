"""
Base Carrier Interface

- All carriers implement BaseCarrier
- ShippingQueryService is the read-only subset (quotes, tracking) that can be
  fanned out across several carriers by the CompositeService
- Shipment, pickup and cancellation operations commit to one carrier and are
  always called on an explicitly selected carrier
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from parcel_hub.core.exceptions import CarrierNotSupportedError

UNITS_METRIC = "metric"


# =============================================================================
# Carrier-Agnostic Data Classes
# =============================================================================

@dataclass(frozen=True)
class Money:
    """Currency-tagged amount in minor units (e.g. cents)."""
    amount: int
    currency: str

    MINOR_UNIT_DIGITS = 2

    @classmethod
    def from_decimal(cls, value: Union[str, int, float, Decimal], currency: str) -> "Money":
        """
        Build from a major-unit decimal value, e.g. "12.345" -> 1235.

        Carriers report charges as decimal strings; rounding is half-up.
        """
        scaled = Decimal(str(value)) * (10 ** cls.MINOR_UNIT_DIGITS)
        amount = int(scaled.quantize(Decimal("1"), rounding=ROUND_HALF_UP))
        return cls(amount=amount, currency=currency.upper())

    def format(self) -> str:
        """Major-unit decimal string, e.g. 1235 -> "12.35"."""
        value = Decimal(self.amount).scaleb(-self.MINOR_UNIT_DIGITS)
        return f"{value:.{self.MINOR_UNIT_DIGITS}f}"

    def __str__(self) -> str:
        return f"{self.format()} {self.currency}"


@dataclass(frozen=True)
class Address:
    """Postal address. Every field is optional so tracking locations can be partial."""
    name: str = ""
    lines: Tuple[str, ...] = ()
    zip: str = ""
    city: str = ""
    state: str = ""
    country_code: str = ""
    contact_name: str = ""
    contact_phone: str = ""
    contact_email: str = ""
    residential: bool = False


@dataclass(frozen=True)
class Parcel:
    """Parcel dimensions and weight. Units are labels; no conversion happens here."""
    length: float
    width: float
    height: float
    weight: float
    dimension_unit: str = "cm"
    weight_unit: str = "kg"


@dataclass(frozen=True)
class QuoteRequest:
    """Request for shipping quotes or available services."""
    sender: Address
    recipient: Address
    parcels: Tuple[Parcel, ...]
    date: Optional[datetime] = None
    units: str = UNITS_METRIC
    is_dutiable: bool = False
    currency: str = "USD"
    insured_value: Optional[Money] = None
    special_services: Tuple[str, ...] = ()
    extra: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class Quote:
    """Price for one carrier service."""
    vendor: str
    service: str
    price: Money


class TrackingStatus(str, Enum):
    """Normalized status of a single tracking activity."""
    IN_TRANSIT = "IN_TRANSIT"
    DELIVERED = "DELIVERED"
    EXCEPTION = "EXCEPTION"
    ERROR = "ERROR"


@dataclass(frozen=True)
class TrackingActivity:
    """A single tracking event."""
    status: TrackingStatus
    description: str
    date: datetime
    address: Address = field(default_factory=Address)


@dataclass(frozen=True)
class Tracking:
    """Tracking history of one shipment, most recent activity first."""
    vendor: str
    service: str
    activities: Tuple[TrackingActivity, ...] = ()
    estimated_delivery_date: Optional[datetime] = None

    @property
    def latest_activity(self) -> Optional[TrackingActivity]:
        return self.activities[0] if self.activities else None

    @property
    def is_delivered(self) -> bool:
        latest = self.latest_activity
        return latest is not None and latest.status == TrackingStatus.DELIVERED


class TrackingResultStatus(str, Enum):
    SUCCESS = "SUCCESS"
    ERROR = "ERROR"


@dataclass(frozen=True)
class TrackingResult:
    """
    Per-number tracking outcome, used when several numbers are tracked at once
    and each can succeed or fail on its own.
    """
    status: TrackingResultStatus
    tracking_number: str
    body: str = ""
    tracking: Optional[Tracking] = None

    @classmethod
    def success(cls, tracking_number: str, tracking: Tracking, body: str = "") -> "TrackingResult":
        return cls(TrackingResultStatus.SUCCESS, tracking_number, body, tracking)

    @classmethod
    def error(cls, tracking_number: str, body: str = "") -> "TrackingResult":
        return cls(TrackingResultStatus.ERROR, tracking_number, body)

    @property
    def is_success(self) -> bool:
        return self.status == TrackingResultStatus.SUCCESS and self.tracking is not None


@dataclass(frozen=True)
class ShipmentRequest:
    """Request to create a shipment and its label."""
    service: str
    sender: Address
    recipient: Address
    parcels: Tuple[Parcel, ...]
    date: Optional[datetime] = None
    units: str = UNITS_METRIC
    reference: str = ""
    currency: str = "USD"
    value: Optional[Money] = None
    insured_value: Optional[Money] = None
    signature_required: bool = False
    special_services: Tuple[str, ...] = ()
    label_format: str = "PDF"
    extra: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class Shipment:
    """A created shipment with its label."""
    id: str
    vendor: str
    label_data: bytes = b""
    raw: str = ""


@dataclass(frozen=True)
class PickupRequest:
    """Request to book a pickup."""
    service: str
    pickup_address: Address
    requestor_address: Address
    parcels: Tuple[Parcel, ...]
    earliest_pickup: datetime
    latest_pickup: datetime
    units: str = UNITS_METRIC
    location_type: str = "business"
    notes: str = ""


@dataclass(frozen=True)
class Pickup:
    """A booked pickup."""
    vendor: str
    id: str
    service: str
    date: datetime
    location_code: str = ""
    raw: str = ""


@dataclass(frozen=True)
class CancelPickupRequest:
    """Request to cancel a booked pickup."""
    service: str
    id: str
    requestor_address: Address
    location_code: str
    date: datetime


# =============================================================================
# Capability Interfaces
# =============================================================================

class ShippingQueryService(ABC):
    """
    Read-only carrier operations.

    These can be answered by any number of carriers at once, so a
    CompositeService implements this interface as well as single carriers do.
    """

    @abstractmethod
    async def get_quotes(self, request: QuoteRequest) -> List[Quote]:
        """
        Get shipping quotes.

        Args:
            request: Sender, recipient and parcels to quote

        Returns:
            List of Quote objects, possibly empty
        """
        pass

    @abstractmethod
    async def get_tracking_status(
        self,
        tracking_number: str,
        options: Optional[Dict[str, Any]] = None,
    ) -> Union[Tracking, TrackingResult]:
        """
        Get tracking information for a shipment.

        Args:
            tracking_number: The tracking number to look up
            options: Carrier-specific lookup options

        Returns:
            Tracking, or a TrackingResult when the carrier reports per-number status
        """
        pass


class BaseCarrier(ShippingQueryService):
    """
    Abstract base class for all shipping carriers.

    Carriers can share utility code but must provide their own API integration.
    """

    @property
    @abstractmethod
    def vendor(self) -> str:
        """Vendor name embedded in quotes and trackings."""
        pass

    @abstractmethod
    async def create_shipment(self, request: ShipmentRequest) -> List[Shipment]:
        """Create a shipment and generate its label(s)."""
        pass

    @abstractmethod
    async def cancel_shipment(self, shipment_id: str, data: Optional[Dict[str, Any]] = None) -> bool:
        """Cancel a shipment. Returns True when the carrier accepted the cancellation."""
        pass

    @abstractmethod
    async def create_pickup(self, request: PickupRequest) -> Pickup:
        """Book a pickup."""
        pass

    @abstractmethod
    async def cancel_pickup(self, request: CancelPickupRequest) -> bool:
        """Cancel a booked pickup."""
        pass

    @abstractmethod
    async def get_available_services(self, request: QuoteRequest) -> List[str]:
        """Service/product codes the carrier offers for this route."""
        pass

    async def get_proof_of_delivery(self, tracking_number: str) -> bytes:
        """Proof of delivery document. Not every carrier offers one."""
        raise CarrierNotSupportedError(
            f"{self.vendor} does not provide proof of delivery",
            vendor=self.vendor,
        )

    def __repr__(self) -> str:
        return f"<{type(self).__name__} vendor={self.vendor!r}>"
