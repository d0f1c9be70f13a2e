"""Tagged-variant tree for carrier wire payloads.

Every node is exactly one of null, scalar, list or map. Builders produce
a tree where absent optional fields are explicit null nodes; overrides
are applied with set_path(); prune_absent() then compacts the tree before
it is serialized.

Example:
    tree = PayloadNode.from_value({"Consignee": {"AddressLine2": None, "City": "X"}})
    set_path(tree, "Consignee.PostalCode", "10115")
    prune_absent(tree).to_value()
    # {"Consignee": {"City": "X", "PostalCode": "10115"}}
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Union

Scalar = Union[str, int, float, bool]


class NodeKind(str, Enum):
    """Variant tag of a PayloadNode."""

    NULL = "null"
    SCALAR = "scalar"
    LIST = "list"
    MAP = "map"


@dataclass
class PayloadNode:
    """One node of a payload tree.

    Only the attribute matching `kind` is meaningful: `value` for scalars,
    `items` for lists, `fields` for maps (insertion ordered).
    """

    kind: NodeKind
    value: Scalar | None = None
    items: list["PayloadNode"] = field(default_factory=list)
    fields: dict[str, "PayloadNode"] = field(default_factory=dict)

    @classmethod
    def null(cls) -> "PayloadNode":
        return cls(NodeKind.NULL)

    @classmethod
    def scalar(cls, value: Scalar) -> "PayloadNode":
        return cls(NodeKind.SCALAR, value=value)

    @classmethod
    def list_of(cls, items: list["PayloadNode"]) -> "PayloadNode":
        return cls(NodeKind.LIST, items=list(items))

    @classmethod
    def map_of(cls, fields: dict[str, "PayloadNode"]) -> "PayloadNode":
        return cls(NodeKind.MAP, fields=dict(fields))

    @classmethod
    def from_value(cls, obj: Any) -> "PayloadNode":
        """Build a tree from nested dicts, lists/tuples and scalars.

        None becomes a null node. Existing PayloadNode instances are kept.

        Raises:
            TypeError: For values that cannot appear on the wire.
        """
        if isinstance(obj, PayloadNode):
            return obj
        if obj is None:
            return cls.null()
        if isinstance(obj, dict):
            return cls.map_of({str(k): cls.from_value(v) for k, v in obj.items()})
        if isinstance(obj, (list, tuple)):
            return cls.list_of([cls.from_value(v) for v in obj])
        if isinstance(obj, (str, int, float, bool)):
            return cls.scalar(obj)
        raise TypeError(f"Unsupported payload value type: {type(obj).__name__}")

    @property
    def is_null(self) -> bool:
        return self.kind is NodeKind.NULL

    def get(self, path: str) -> "PayloadNode | None":
        """Return the node at a dotted path, or None if it does not exist."""
        node: PayloadNode | None = self
        for segment in _split_path(path):
            if node is None:
                return None
            if node.kind is NodeKind.MAP:
                node = node.fields.get(segment)
            elif node.kind is NodeKind.LIST and segment.isdigit():
                index = int(segment)
                node = node.items[index] if index < len(node.items) else None
            else:
                return None
        return node

    def to_value(self) -> Any:
        """Convert back to plain Python containers.

        Scalars are rendered as wire text: booleans become "true"/"false",
        numbers their str() form.
        """
        if self.kind is NodeKind.NULL:
            return None
        if self.kind is NodeKind.SCALAR:
            if isinstance(self.value, bool):
                return "true" if self.value else "false"
            return str(self.value)
        if self.kind is NodeKind.LIST:
            return [item.to_value() for item in self.items]
        return {key: child.to_value() for key, child in self.fields.items()}


def _split_path(path: str) -> list[str]:
    segments = path.split(".")
    if not path or any(not s for s in segments):
        raise ValueError(f"Invalid payload path: {path!r}")
    return segments


def _list_index(node: PayloadNode, segment: str, path: str) -> int:
    """Index for a segment under a list node; len(items) means append.

    Raises:
        ValueError: If the segment is not a number or is out of range.
    """
    if not segment.isdigit() or int(segment) > len(node.items):
        raise ValueError(
            f"Invalid list index {segment!r} in payload path {path!r} "
            f"(list has {len(node.items)} items)"
        )
    return int(segment)


def set_path(root: PayloadNode, path: str, value: Any) -> None:
    """Set the value at a dotted path, creating intermediate maps as needed.

    Numeric segments index into an existing list (an index equal to the
    list length appends). Scalar and null intermediates are replaced by
    an empty map; lists are never replaced. Whatever was at the final
    segment is overwritten.

    Args:
        root: Map node to modify in place.
        path: Dotted path, e.g. "Billing.DutyAccountNumber" or
            "ShipmentDetails.Pieces.Piece.0.PackageType".
        value: Plain value or PayloadNode to store.

    Raises:
        ValueError: If the path is empty/malformed, a list segment is not a
            valid index, or root is not a map.
    """
    if root.kind is not NodeKind.MAP:
        raise ValueError("set_path requires a map node as root")

    segments = _split_path(path)
    new_node = PayloadNode.from_value(value)
    node = root

    for i, segment in enumerate(segments):
        last = i == len(segments) - 1

        if node.kind is NodeKind.LIST:
            index = _list_index(node, segment, path)
            if index == len(node.items):
                node.items.append(PayloadNode.null())
            if last:
                node.items[index] = new_node
                return
            child = node.items[index]
            if child.kind not in (NodeKind.MAP, NodeKind.LIST):
                child = PayloadNode.map_of({})
                node.items[index] = child
            node = child
            continue

        if last:
            node.fields[segment] = new_node
            return
        child = node.fields.get(segment)
        if child is None or child.kind not in (NodeKind.MAP, NodeKind.LIST):
            child = PayloadNode.map_of({})
            node.fields[segment] = child
        node = child


def prune_absent(node: PayloadNode) -> PayloadNode | None:
    """Remove null nodes and containers left empty by their removal.

    Zero numbers, False and empty strings are present values and are kept.
    Returns a new tree, or None if the whole node is absent.
    """
    if node.kind is NodeKind.NULL:
        return None
    if node.kind is NodeKind.SCALAR:
        return PayloadNode.scalar(node.value)  # type: ignore[arg-type]
    if node.kind is NodeKind.LIST:
        items = [p for p in (prune_absent(item) for item in node.items) if p is not None]
        return PayloadNode.list_of(items) if items else None

    fields: dict[str, PayloadNode] = {}
    for key, child in node.fields.items():
        pruned = prune_absent(child)
        if pruned is not None:
            fields[key] = pruned
    return PayloadNode.map_of(fields) if fields else None
