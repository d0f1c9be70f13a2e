"""Serialize a DHL payload tree into the XML-PI request document.

Uses xmltodict.unparse, which emits map keys in insertion order and
repeats the element for each list item (Piece, ExportLineItem,
SpecialService), so the tree built by dhl_payload_builder maps
one-to-one onto the schema's element order.
"""

from typing import Any

import xmltodict

from src.services.dhl_constants import (
    DHL_REQUEST_NAMESPACE,
    DHL_REQUEST_ROOT,
    DHL_SCHEMA_LOCATION,
    DHL_SCHEMA_VERSION,
    DHL_XSI_NAMESPACE,
)
from src.services.payload_tree import PayloadNode, prune_absent


def envelope(body: dict[str, Any]) -> dict[str, Any]:
    """Wrap section content in the namespaced ShipmentRequest root."""
    root: dict[str, Any] = {
        "@xmlns:req": DHL_REQUEST_NAMESPACE,
        "@xmlns:xsi": DHL_XSI_NAMESPACE,
        "@xsi:schemaLocation": DHL_SCHEMA_LOCATION,
        "@schemaVersion": DHL_SCHEMA_VERSION,
    }
    root.update(body)
    return {DHL_REQUEST_ROOT: root}


def serialize_shipment_request(tree: PayloadNode, pretty: bool = False) -> str:
    """Prune absent fields and render the request document.

    Args:
        tree: Map node from build_shipment_payload().
        pretty: Indent the output (useful for previews and logs).

    Returns:
        XML document string with a UTF-8 declaration.
    """
    pruned = prune_absent(tree)
    body = pruned.to_value() if pruned is not None else {}
    return xmltodict.unparse(
        envelope(body),
        encoding="UTF-8",
        full_document=True,
        pretty=pretty,
    )
