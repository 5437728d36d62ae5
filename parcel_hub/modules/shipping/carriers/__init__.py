"""
Carrier Registry and Factory

- Carrier implementations register themselves with @register_carrier
- CarrierFactory only returns carriers enabled in settings.ENABLED_CARRIERS
- Enabled carriers come back in configured order, which is the precedence
  order used by the CompositeService
"""
from typing import Any, Dict, List, Optional, Type
import logging

from parcel_hub.core.config import settings
from parcel_hub.models.carrier import CarrierCode
from parcel_hub.modules.shipping.carriers.base import BaseCarrier

logger = logging.getLogger(__name__)

# Registry of carrier implementations
_CARRIER_REGISTRY: Dict[CarrierCode, Type[BaseCarrier]] = {}


def register_carrier(carrier_code: CarrierCode):
    """
    Decorator to register a carrier implementation.

    Usage:
        @register_carrier(CarrierCode.DHL)
        class DHLCarrier(HttpCarrier):
            ...
    """
    def decorator(cls: Type[BaseCarrier]):
        _CARRIER_REGISTRY[carrier_code] = cls
        logger.info(f"Registered carrier: {carrier_code.value} -> {cls.__name__}")
        return cls
    return decorator


def unregister_carrier(carrier_code: CarrierCode) -> None:
    """Remove a carrier implementation from the registry."""
    _CARRIER_REGISTRY.pop(carrier_code, None)


class CarrierFactory:
    """
    Factory for creating carrier instances.

    Checks settings before returning carriers.
    Returns None for disabled carriers.
    """

    @classmethod
    def is_carrier_enabled(cls, carrier_code: CarrierCode) -> bool:
        return carrier_code.value in settings.ENABLED_CARRIERS

    @classmethod
    def get_carrier(cls, carrier_code: CarrierCode, **carrier_kwargs: Any) -> Optional[BaseCarrier]:
        """
        Get a carrier instance if enabled.

        Args:
            carrier_code: The carrier to get
            **carrier_kwargs: Passed to the carrier constructor

        Returns:
            BaseCarrier instance or None if disabled/not found
        """
        if not cls.is_carrier_enabled(carrier_code):
            logger.debug(f"Carrier {carrier_code.value} is disabled")
            return None

        carrier_cls = _CARRIER_REGISTRY.get(carrier_code)
        if not carrier_cls:
            logger.warning(f"No implementation registered for carrier: {carrier_code.value}")
            return None

        return carrier_cls(**carrier_kwargs)

    @classmethod
    def get_enabled_carriers(
        cls,
        carrier_kwargs: Optional[Dict[CarrierCode, Dict[str, Any]]] = None,
    ) -> List[BaseCarrier]:
        """
        Get all enabled carrier instances, in configured order.

        Args:
            carrier_kwargs: Optional dict of CarrierCode -> constructor kwargs

        Returns:
            List of enabled BaseCarrier instances
        """
        carriers = []

        for code in settings.ENABLED_CARRIERS:
            try:
                carrier_code = CarrierCode.parse(code)
            except ValueError:
                logger.warning(f"Unknown carrier code in ENABLED_CARRIERS: {code}")
                continue

            kwargs = (carrier_kwargs or {}).get(carrier_code, {})
            carrier = cls.get_carrier(carrier_code, **kwargs)
            if carrier:
                carriers.append(carrier)

        return carriers

    @classmethod
    def build_composite(
        cls,
        carrier_kwargs: Optional[Dict[CarrierCode, Dict[str, Any]]] = None,
    ):
        """Build a CompositeService over every enabled carrier."""
        from parcel_hub.services.composite_service import CompositeService

        carriers = cls.get_enabled_carriers(carrier_kwargs)
        if not carriers:
            logger.warning("No carriers enabled for composite service")
        return CompositeService(carriers)

    @classmethod
    def get_registered_carriers(cls) -> List[CarrierCode]:
        """Get list of all registered carrier codes."""
        return list(_CARRIER_REGISTRY.keys())


def get_carrier(carrier_code: CarrierCode, **carrier_kwargs: Any) -> Optional[BaseCarrier]:
    """
    Convenience function to get a carrier.

    Equivalent to CarrierFactory.get_carrier().
    """
    return CarrierFactory.get_carrier(carrier_code, **carrier_kwargs)
