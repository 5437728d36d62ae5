"""
Pytest configuration and fixtures for Parcel Hub tests.
"""
import asyncio
import os
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import pytest

# Set test environment before importing app modules
os.environ["ENVIRONMENT"] = "development"
os.environ.setdefault("ENABLED_CARRIERS", "DHL,FEDEX,UPS")

from parcel_hub.core.exceptions import CarrierNotSupportedError
from parcel_hub.modules.shipping.carriers.base import (
    Address,
    BaseCarrier,
    Money,
    Parcel,
    Quote,
    QuoteRequest,
    Tracking,
    TrackingActivity,
    TrackingStatus,
)


class StubCarrier(BaseCarrier):
    """
    Deterministic in-memory carrier.

    Each query can be delayed and/or made to fail. Calls are counted and
    `finished` records calls that ran to completion (success or failure).
    """

    def __init__(
        self,
        vendor: str,
        quotes: Optional[List[Quote]] = None,
        tracking: Any = None,
        quote_error: Optional[Exception] = None,
        tracking_error: Optional[Exception] = None,
        delay: float = 0.0,
        wait_for: Optional[asyncio.Event] = None,
        signal: Optional[asyncio.Event] = None,
    ):
        self._vendor = vendor
        self._quotes = quotes or []
        self._tracking = tracking
        self._quote_error = quote_error
        self._tracking_error = tracking_error
        self._delay = delay
        self._wait_for = wait_for
        self._signal = signal
        self.quote_calls = 0
        self.tracking_calls: List[str] = []
        self.finished = 0

    @property
    def vendor(self) -> str:
        return self._vendor

    async def _pause(self):
        if self._signal:
            self._signal.set()
        if self._wait_for:
            await self._wait_for.wait()
        if self._delay:
            await asyncio.sleep(self._delay)

    async def get_quotes(self, request: QuoteRequest) -> List[Quote]:
        self.quote_calls += 1
        try:
            await self._pause()
            if self._quote_error:
                raise self._quote_error
            return self._quotes
        finally:
            self.finished += 1

    async def get_tracking_status(self, tracking_number: str, options: Optional[Dict[str, Any]] = None):
        self.tracking_calls.append(tracking_number)
        try:
            await self._pause()
            if self._tracking_error:
                raise self._tracking_error
            return self._tracking
        finally:
            self.finished += 1

    async def create_shipment(self, request):
        raise CarrierNotSupportedError("stub", vendor=self.vendor)

    async def cancel_shipment(self, shipment_id, data=None):
        return True

    async def create_pickup(self, request):
        raise CarrierNotSupportedError("stub", vendor=self.vendor)

    async def cancel_pickup(self, request):
        return True

    async def get_available_services(self, request):
        return [quote.service for quote in self._quotes]


@pytest.fixture
def make_carrier():
    """Factory for StubCarrier instances."""
    return StubCarrier


@pytest.fixture
def sample_address() -> Address:
    return Address(
        name="Jane Doe",
        lines=("123 Main Street",),
        zip="10001",
        city="New York",
        state="NY",
        country_code="US",
        contact_phone="212-555-1234",
    )


@pytest.fixture
def quote_request(sample_address) -> QuoteRequest:
    """Quote request with one 1 kg parcel."""
    return QuoteRequest(
        sender=sample_address,
        recipient=sample_address,
        parcels=(Parcel(length=1, width=1, height=1, weight=1),),
        date=datetime(2024, 3, 4, 12, 0, tzinfo=timezone.utc),
    )


@pytest.fixture
def zero_usd() -> Money:
    return Money(0, "USD")


@pytest.fixture
def sample_tracking() -> Tracking:
    return Tracking(
        vendor="DHL",
        service="P",
        activities=(
            TrackingActivity(
                status=TrackingStatus.DELIVERED,
                description="Delivered - Signed for by: J DOE",
                date=datetime(2024, 3, 6, 9, 30, tzinfo=timezone.utc),
                address=Address(city="NEW YORK", country_code="US"),
            ),
            TrackingActivity(
                status=TrackingStatus.IN_TRANSIT,
                description="Shipment picked up",
                date=datetime(2024, 3, 4, 15, 0, tzinfo=timezone.utc),
                address=Address(city="STOCKHOLM", country_code="SE"),
            ),
        ),
    )
