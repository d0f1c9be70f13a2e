"""Service layer for DHL shipment creation.

Provides the request normalizer, payload builder, XML serializer,
transport, response extractor and the DHLShipmentService that ties them
together.
"""

from src.services.dhl_service import DHLShipmentService, ShipmentServiceInterface
from src.services.errors import (
    CarrierRejectionError,
    DHLServiceError,
    MalformedResponseError,
    TransportError,
)
from src.services.shipment_models import (
    Address,
    ExportDeclaration,
    ShipmentRequest,
    ShipmentResult,
    UnitSystem,
)

__all__ = [
    "DHLShipmentService",
    "ShipmentServiceInterface",
    "DHLServiceError",
    "TransportError",
    "CarrierRejectionError",
    "MalformedResponseError",
    "Address",
    "ExportDeclaration",
    "ShipmentRequest",
    "ShipmentResult",
    "UnitSystem",
]
