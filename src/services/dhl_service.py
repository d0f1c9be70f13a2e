"""DHL shipment service: request -> XML-PI round trip -> ShipmentResult.

Composes the pure stages (normalize, build, serialize) with one transport
call and the streaming response extractor. Errors from any stage
propagate unmodified; nothing is retried.

Example:
    config = load_config()
    async with DHLTransport(config.dhl.endpoint()) as transport:
        svc = DHLShipmentService(
            credentials=config.dhl.to_credentials(),
            country_names=load_country_names(config.dhl.country_names_file),
            transport=transport,
        )
        result = await svc.create_shipment(request)
        result.tracking_number
"""

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable, Mapping
from datetime import UTC, datetime
from typing import Any

from src.services.connection_types import DHLCredentials
from src.services.dhl_constants import DHL_CARRIER_NAME
from src.services.dhl_payload_builder import build_shipment_payload
from src.services.dhl_request_normalizer import normalize_request
from src.services.dhl_response import extract_shipment_response
from src.services.dhl_transport import DHLTransport
from src.services.dhl_xml import serialize_shipment_request
from src.services.payload_tree import prune_absent
from src.services.shipment_models import ShipmentRequest, ShipmentResult
from src.utils.redaction import redact_for_logging

logger = logging.getLogger(__name__)


def _utc_now() -> datetime:
    return datetime.now(UTC)


class ShipmentServiceInterface(ABC):
    """Carrier-agnostic shipment operations.

    Concrete implementations map ShipmentRequest onto one carrier's API.
    """

    @property
    @abstractmethod
    def carrier_name(self) -> str:
        """Return the carrier display name, e.g. 'DHL'."""
        ...

    @abstractmethod
    async def create_shipment(self, request: ShipmentRequest) -> ShipmentResult:
        """Book a shipment and return its tracking number and label.

        Raises:
            DHLServiceError: Subclass describing the failure.
        """
        ...

    @abstractmethod
    async def cancel_shipment(
        self, shipment_id: str, data: dict[str, Any] | None = None
    ) -> bool:
        """Cancel a booked shipment.

        Args:
            shipment_id: Carrier tracking / airway bill number.
            data: Carrier-specific extra data.

        Returns:
            True if the shipment is cancelled.
        """
        ...


class DHLShipmentService(ShipmentServiceInterface):
    """Creates DHL Express shipments through XML-PI."""

    def __init__(
        self,
        credentials: DHLCredentials,
        country_names: Mapping[str, str],
        transport: DHLTransport,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        """Initialize the service.

        Args:
            credentials: Site ID, password and account number.
            country_names: Country code -> name table for CountryName.
            transport: Transport used for the single HTTP round trip.
            clock: Returns the current time. Defaults to UTC now.
        """
        self._credentials = credentials
        self._country_names = country_names
        self._transport = transport
        self._clock = clock or _utc_now

    @property
    def carrier_name(self) -> str:
        return DHL_CARRIER_NAME

    def build_request_xml(
        self, request: ShipmentRequest, message_reference: str | None = None
    ) -> str:
        """Build the XML-PI request document without sending it.

        Args:
            request: Shipment to book.
            message_reference: Fixed MessageReference (random when omitted).

        Returns:
            Serialized ShipmentRequest document.
        """
        normalized = normalize_request(request)
        tree = build_shipment_payload(
            normalized,
            credentials=self._credentials,
            country_names=self._country_names,
            now=self._clock(),
            message_reference=message_reference,
        )
        if logger.isEnabledFor(logging.DEBUG):
            pruned = prune_absent(tree)
            logger.debug(
                "DHL shipment payload: %s",
                redact_for_logging(pruned.to_value() if pruned is not None else {}),
            )
        return serialize_shipment_request(tree)

    async def create_shipment(self, request: ShipmentRequest) -> ShipmentResult:
        """Book a shipment with DHL.

        Args:
            request: Shipment to book.

        Returns:
            ShipmentResult with the airway bill number and decoded label.

        Raises:
            TransportError: The request did not get a 2xx response.
            CarrierRejectionError: DHL answered with a condition code.
            MalformedResponseError: The response had no result and no condition.
        """
        xml = self.build_request_xml(request)
        logger.info(
            "Creating DHL shipment: reference=%s product=%s parcels=%d",
            request.reference,
            request.service,
            len(request.parcels),
        )
        body = await self._transport.post(xml)

        extracted = extract_shipment_response(body)

        logger.info(
            "DHL shipment created: reference=%s awb=%s label_bytes=%d",
            request.reference,
            extracted.airway_bill_number,
            len(extracted.label_data),
        )
        return ShipmentResult(
            tracking_number=extracted.airway_bill_number,
            carrier_name=DHL_CARRIER_NAME,
            label_data=extracted.label_data,
            raw_response=extracted.raw_body,
        )

    async def cancel_shipment(
        self, shipment_id: str, data: dict[str, Any] | None = None
    ) -> bool:
        """Report a shipment as cancelled.

        XML-PI has no cancellation call; unused DHL airway bills are never
        billed, so there is nothing to send. Always returns True.
        """
        logger.info("DHL cancel requested for %s; nothing to send", shipment_id)
        return True
