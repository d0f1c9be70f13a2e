"""Streaming extraction of DHL XML-PI shipment responses.

The success body embeds the label as a base64 OutputImage, which can be
large, so responses are scanned with a pull parser and named-capture
callbacks instead of building a document tree. Elements are cleared as
soon as they close.

Scan outcomes map one-to-one onto results:
- RESULT_FOUND -> ExtractedShipment
- ERROR_FOUND  -> CarrierRejectionError
- EXHAUSTED    -> MalformedResponseError
"""

import base64
import binascii
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from xml.etree.ElementTree import ParseError, XMLPullParser

from src.services.dhl_constants import (
    RESPONSE_AWB_ELEMENT,
    RESPONSE_CONDITION_CODE_ELEMENT,
    RESPONSE_CONDITION_DATA_ELEMENT,
    RESPONSE_CONDITION_ELEMENT,
    RESPONSE_IMAGE_ELEMENT,
)
from src.services.errors import CarrierRejectionError, MalformedResponseError
from src.utils.redaction import sanitize_error_message

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 64 * 1024


class ScanState(str, Enum):
    """State of a response scan."""

    SCANNING = "scanning"
    RESULT_FOUND = "result_found"
    ERROR_FOUND = "error_found"
    EXHAUSTED = "exhausted"


def _local_name(tag: str) -> str:
    """Strip a '{namespace}' prefix from an element tag."""
    return tag.rsplit("}", 1)[-1]


class StreamingCapture:
    """Pull-parse XML text and fire a callback for each named element.

    Callbacks receive the element's text when the element closes. Names
    are matched without namespace. Every element is cleared after its
    callback runs.

    Example:
        capture = StreamingCapture({"AirwayBillNumber": numbers.append})
        capture.parse(body)
    """

    def __init__(
        self,
        callbacks: dict[str, Callable[[str], None]],
        chunk_size: int = DEFAULT_CHUNK_SIZE,
    ) -> None:
        self._callbacks = callbacks
        self._chunk_size = chunk_size

    def parse(self, text: str) -> None:
        """Parse the whole text.

        Raises:
            xml.etree.ElementTree.ParseError: If the text is not well-formed XML.
        """
        parser = XMLPullParser(events=("end",))
        for start in range(0, len(text), self._chunk_size):
            parser.feed(text[start:start + self._chunk_size])
            self._drain(parser)
        parser.close()
        self._drain(parser)

    def _drain(self, parser: XMLPullParser) -> None:
        for _event, elem in parser.read_events():
            callback = self._callbacks.get(_local_name(elem.tag))
            if callback is not None:
                callback(elem.text or "")
            elem.clear()


@dataclass
class ResponseScanner:
    """Collects the fields of interest from one response body.

    Attributes:
        state: Current scan state; SCANNING until scan() finishes.
        airway_bill_number: Text of the first AirwayBillNumber element.
        output_image: Text of the first OutputImage element.
        conditions: (code, message) pairs in document order.
    """

    state: ScanState = ScanState.SCANNING
    airway_bill_number: str = ""
    output_image: str = ""
    conditions: list[tuple[str, str]] = field(default_factory=list)
    parse_error: str = ""
    _condition_code: str = field(default="", init=False, repr=False)
    _condition_data: str = field(default="", init=False, repr=False)

    def scan(self, body: str, chunk_size: int = DEFAULT_CHUNK_SIZE) -> ScanState:
        """Scan a body and move to a terminal state."""
        capture = StreamingCapture(
            {
                RESPONSE_AWB_ELEMENT: self._on_airway_bill,
                RESPONSE_IMAGE_ELEMENT: self._on_image,
                RESPONSE_CONDITION_CODE_ELEMENT: self._on_condition_code,
                RESPONSE_CONDITION_DATA_ELEMENT: self._on_condition_data,
                RESPONSE_CONDITION_ELEMENT: self._on_condition_end,
            },
            chunk_size=chunk_size,
        )
        try:
            capture.parse(body)
        except ParseError as e:
            self.parse_error = str(e)
            self.state = ScanState.EXHAUSTED
            return self.state

        # ConditionCode/ConditionData without an enclosing Condition element
        self._on_condition_end("")

        if self.airway_bill_number:
            self.state = ScanState.RESULT_FOUND
        elif self.conditions:
            self.state = ScanState.ERROR_FOUND
        else:
            self.state = ScanState.EXHAUSTED
        return self.state

    def _on_airway_bill(self, text: str) -> None:
        if not self.airway_bill_number:
            self.airway_bill_number = text.strip()

    def _on_image(self, text: str) -> None:
        if not self.output_image:
            self.output_image = text

    def _on_condition_code(self, text: str) -> None:
        self._condition_code = text.strip()

    def _on_condition_data(self, text: str) -> None:
        self._condition_data = text.strip()

    def _on_condition_end(self, _text: str) -> None:
        if self._condition_code or self._condition_data:
            self.conditions.append((self._condition_code, self._condition_data))
        self._condition_code = ""
        self._condition_data = ""


@dataclass(frozen=True)
class ExtractedShipment:
    """Successful extraction: airway bill number, label bytes, raw body."""

    airway_bill_number: str
    label_data: bytes
    raw_body: str


def decode_label(output_image: str, raw_body: str) -> bytes:
    """Decode the base64 label image.

    Raises:
        MalformedResponseError: If the image is not valid base64.
    """
    try:
        return base64.b64decode("".join(output_image.split()), validate=True)
    except (binascii.Error, ValueError) as e:
        raise MalformedResponseError.for_body(raw_body, reason=f"invalid label image: {e}") from e


def extract_shipment_response(
    body: str, chunk_size: int = DEFAULT_CHUNK_SIZE
) -> ExtractedShipment:
    """Turn a DHL response body into a result or a typed error.

    A non-empty AirwayBillNumber is the only success signal. Without one,
    the first Condition is raised as a CarrierRejectionError; without any
    condition either, the body is raised as a MalformedResponseError.

    Args:
        body: Response body text.
        chunk_size: Characters fed to the parser at a time.

    Returns:
        ExtractedShipment with the decoded label.

    Raises:
        CarrierRejectionError: DHL returned condition code(s).
        MalformedResponseError: Nothing usable in the body.
    """
    scanner = ResponseScanner()
    state = scanner.scan(body, chunk_size=chunk_size)

    if state is ScanState.RESULT_FOUND:
        return ExtractedShipment(
            airway_bill_number=scanner.airway_bill_number,
            label_data=decode_label(scanner.output_image, body),
            raw_body=body,
        )

    if state is ScanState.ERROR_FOUND:
        error = CarrierRejectionError.from_conditions(scanner.conditions, body)
        logger.warning(
            "DHL rejected shipment: condition %s: %s",
            error.code,
            sanitize_error_message(error.message, max_length=500),
        )
        raise error

    logger.warning(
        "Malformed DHL response (%s): %s",
        scanner.parse_error or "no airway bill number or condition",
        sanitize_error_message(body, max_length=500),
    )
    raise MalformedResponseError.for_body(body, reason=scanner.parse_error)
