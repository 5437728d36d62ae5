"""
Carrier identification.
"""
import enum


class CarrierCode(str, enum.Enum):
    """
    Known carriers.

    The value is also the vendor name adapters embed in their quotes and
    trackings.
    """
    DHL = "DHL"
    FEDEX = "FEDEX"
    UPS = "UPS"
    USPS = "USPS"

    @classmethod
    def parse(cls, value: str) -> "CarrierCode":
        """Parse a carrier code, case-insensitively."""
        return cls(value.strip().upper())
