# Services layer: multi-carrier orchestration
from parcel_hub.services.composite_service import CarrierOutcome, CompositeService

__all__ = ["CarrierOutcome", "CompositeService"]
