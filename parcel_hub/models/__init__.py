from parcel_hub.models.carrier import CarrierCode

__all__ = ["CarrierCode"]
