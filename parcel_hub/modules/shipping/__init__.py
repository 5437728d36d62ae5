"""
Shipping Module

- BaseCarrier interface for all carrier implementations
- CarrierFactory for building carriers from settings
"""
from parcel_hub.modules.shipping.carriers import CarrierFactory, get_carrier, register_carrier
from parcel_hub.modules.shipping.carriers.base import BaseCarrier, ShippingQueryService

__all__ = [
    "CarrierFactory",
    "get_carrier",
    "register_carrier",
    "BaseCarrier",
    "ShippingQueryService",
]
