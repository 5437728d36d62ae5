"""
Composite Carrier Service

Answers quote and tracking requests from several carriers at once:
- Every carrier is called concurrently for each request
- Quotes: results of all carriers that succeed, in registration order;
  failing carriers contribute nothing and never fail the request
- Tracking: the first carrier in registration order that can track the
  number wins; the request only fails when every carrier fails

Shipment, pickup and cancellation commit to a single carrier and are never
fanned out; use `carrier(vendor)` to select one explicitly.

Usage:
    service = CompositeService([dhl, fedex, ups])
    quotes = await service.get_quotes(request)
    tracking = await service.get_tracking_status("1234567890")
"""
import asyncio
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, List, Optional, Sequence, Set, Tuple, Union

from parcel_hub.core.exceptions import (
    AllCarriersFailedError,
    CarrierNotFoundError,
    CarrierServiceError,
)
from parcel_hub.modules.shipping.carriers.base import (
    BaseCarrier,
    QuoteRequest,
    Quote,
    ShippingQueryService,
    Tracking,
    TrackingResult,
)

# Calls still running after their request was already answered.
# asyncio keeps only weak references to tasks, so hold them until they finish.
_ABANDONED_CALLS: Set[asyncio.Future] = set()


@dataclass(frozen=True)
class CarrierOutcome:
    """Settled result of one carrier call: either a value or an error."""
    carrier: ShippingQueryService
    value: Any = None
    error: Optional[BaseException] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def _vendor_of(carrier: ShippingQueryService) -> str:
    return getattr(carrier, "vendor", None) or type(carrier).__name__


def _retrieve(future: asyncio.Future) -> None:
    """Mark a finished future's exception as retrieved."""
    if not future.cancelled():
        future.exception()


def _release(future: asyncio.Future) -> None:
    _ABANDONED_CALLS.discard(future)
    _retrieve(future)


def _abandon(futures: Sequence[asyncio.Future]) -> None:
    """Let calls nobody waits for anymore run to completion quietly."""
    for future in futures:
        if future.done():
            _retrieve(future)
            continue
        _ABANDONED_CALLS.add(future)
        future.add_done_callback(_release)


def _is_tracked(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, TrackingResult):
        return value.is_success
    return True


class CompositeService(ShippingQueryService):
    """
    Dispatches quote and tracking requests to every composed carrier.

    Carrier order is precedence order: it decides the order of merged quotes
    and which tracking wins when several carriers succeed.
    """

    def __init__(self, carriers: Sequence[ShippingQueryService]):
        self._carriers: Tuple[ShippingQueryService, ...] = tuple(carriers)

    @property
    def carriers(self) -> Tuple[ShippingQueryService, ...]:
        return self._carriers

    def carrier(self, vendor: str) -> BaseCarrier:
        """
        Select one composed carrier by vendor name (case-insensitive).

        Only full carriers are selectable; nested composites and query-only
        services cannot create shipments or pickups.

        Raises:
            CarrierNotFoundError: no composed carrier has that vendor
        """
        wanted = str(vendor).strip().upper()
        for carrier in self._carriers:
            if isinstance(carrier, BaseCarrier) and carrier.vendor.upper() == wanted:
                return carrier
        raise CarrierNotFoundError(str(vendor))

    # ==================== Fan-out ====================

    def _fan_out(
        self,
        call: Callable[[ShippingQueryService], Awaitable[Any]],
    ) -> List[asyncio.Future]:
        """Start the call on every carrier before awaiting any of them."""
        loop = asyncio.get_running_loop()
        futures = []
        for carrier in self._carriers:
            try:
                future = asyncio.ensure_future(call(carrier))
            except asyncio.CancelledError:
                future = loop.create_future()
                future.cancel()
            except Exception as e:
                # Raised before returning an awaitable; settle it as a failure
                future = loop.create_future()
                future.set_exception(e)
            futures.append(future)
        return futures

    @staticmethod
    async def _settle(carrier: ShippingQueryService, future: asyncio.Future) -> CarrierOutcome:
        # wait() only raises when the caller itself is cancelled
        await asyncio.wait([future])
        if future.cancelled():
            return CarrierOutcome(
                carrier=carrier,
                error=asyncio.CancelledError(f"{_vendor_of(carrier)} call was cancelled"),
            )
        error = future.exception()
        if error is not None:
            return CarrierOutcome(carrier=carrier, error=error)
        return CarrierOutcome(carrier=carrier, value=future.result())

    # ==================== Quotes ====================

    async def get_quotes(self, request: QuoteRequest) -> List[Quote]:
        """
        Get quotes from every carrier.

        Waits for all carriers. Quotes from carriers that succeed are
        concatenated in registration order; failed carriers are dropped.
        Returns an empty list when every carrier fails.
        """
        futures = self._fan_out(lambda carrier: carrier.get_quotes(request))
        try:
            outcomes = await asyncio.gather(
                *(self._settle(carrier, future) for carrier, future in zip(self._carriers, futures))
            )
        except BaseException:
            _abandon(futures)
            raise

        quotes: List[Quote] = []
        for outcome in outcomes:
            if outcome.ok:
                quotes.extend(outcome.value or [])
        return quotes

    # ==================== Tracking ====================

    async def get_tracking_status(
        self,
        tracking_number: str,
        options: Optional[Dict[str, Any]] = None,
    ) -> Union[Tracking, TrackingResult]:
        """
        Track a number with every carrier and return the first success.

        "First" is registration order, not completion order. A TrackingResult
        with ERROR status counts as a failure. Carriers after the winner keep
        running but are not awaited.

        Raises:
            AllCarriersFailedError: every carrier failed, or none are composed.
                `errors` holds each carrier's failure in registration order and
                the exception is chained from the last one.
        """
        futures = self._fan_out(
            lambda carrier: carrier.get_tracking_status(tracking_number, options)
        )
        errors: List[BaseException] = []

        try:
            for index, (carrier, future) in enumerate(zip(self._carriers, futures)):
                outcome = await self._settle(carrier, future)
                if outcome.ok and _is_tracked(outcome.value):
                    _abandon(futures[index + 1:])
                    return outcome.value
                errors.append(outcome.error or self._untracked_error(carrier, tracking_number, outcome.value))
        except BaseException:
            _abandon(futures)
            raise

        if not self._carriers:
            raise AllCarriersFailedError(f"No carriers available to track {tracking_number}")

        raise AllCarriersFailedError(
            f"All {len(self._carriers)} carriers failed to track {tracking_number}",
            errors=errors,
        ) from errors[-1]

    @staticmethod
    def _untracked_error(
        carrier: ShippingQueryService,
        tracking_number: str,
        value: Any,
    ) -> CarrierServiceError:
        body = value.body if isinstance(value, TrackingResult) else ""
        return CarrierServiceError(
            [f"{_vendor_of(carrier)} could not track {tracking_number}"],
            body=body,
            vendor=_vendor_of(carrier),
        )

    async def track_many(
        self,
        tracking_numbers: Sequence[str],
        options: Optional[Dict[str, Any]] = None,
    ) -> List[TrackingResult]:
        """
        Track several numbers at once.

        Returns one TrackingResult per number, in input order. Numbers no
        carrier could track come back with ERROR status instead of raising.
        """
        return list(await asyncio.gather(
            *(self._track_one(number, options) for number in tracking_numbers)
        ))

    async def _track_one(self, tracking_number: str, options: Optional[Dict[str, Any]]) -> TrackingResult:
        try:
            result = await self.get_tracking_status(tracking_number, options)
        except AllCarriersFailedError as e:
            body = "; ".join(e.details["errors"]) or e.message
            return TrackingResult.error(tracking_number, body=body)

        if isinstance(result, TrackingResult):
            return result
        return TrackingResult.success(tracking_number, result)
