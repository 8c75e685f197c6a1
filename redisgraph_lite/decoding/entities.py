"""Entity decoder: one result cell -> one resolved Python value.

Compact cell shapes by column type:
- scalar:       [scalar_type, value]
- node:         [id, [label_id, ...], [[key_id, value_type, value], ...]]
- relationship: [id, type_id, src_id, dst_id, [[key_id, value_type, value], ...]]

Verbose (non-compact) replies carry names inline instead:
- node:         [["id", 9], ["labels", ["person"]], ["properties", [["name", "Zack"]]]]
- relationship: [["id", 3], ["type", "knows"], ["src_node", 1], ["dest_node", 2], ["properties", [...]]]
- scalar:       the bare value

Property value types are not used for coercion; values pass through as the
transport delivered them.
"""

import asyncio
import warnings
from enum import IntEnum
from typing import Any, Iterable

from redisgraph_lite.decoding.catalog import CatalogKind, CatalogResolver
from redisgraph_lite.exceptions import DecodeWarning
from redisgraph_lite.log_config import get_logger

log = get_logger("decoder.entities")

_VERBOSE_KEYS = frozenset({"id", "labels", "type", "src_node", "dest_node", "properties"})


class ColumnType(IntEnum):
    """Column header type tags."""

    UNKNOWN = 0
    SCALAR = 1
    NODE = 2
    RELATION = 3

    @classmethod
    def from_tag(cls, tag: int) -> "ColumnType":
        try:
            return cls(tag)
        except ValueError:
            return cls.UNKNOWN


class Node(dict):
    """Resolved node: {"id", "labels", **properties}."""

    @property
    def id(self) -> int:
        return self["id"]

    @property
    def labels(self) -> list[str | None]:
        return self["labels"]

    @property
    def properties(self) -> dict[str, Any]:
        return {k: v for k, v in self.items() if k not in ("id", "labels")}


class Relationship(dict):
    """Resolved relationship.

    "labels" holds exactly one relationship type name, kept as a list so
    nodes and relationships read the same way.
    """

    RESERVED = ("id", "labels", "sourceNodeId", "destinationNodeId")

    @property
    def id(self) -> int:
        return self["id"]

    @property
    def type(self) -> str | None:
        return self["labels"][0]

    @property
    def source_node_id(self) -> int:
        return self["sourceNodeId"]

    @property
    def destination_node_id(self) -> int:
        return self["destinationNodeId"]

    @property
    def properties(self) -> dict[str, Any]:
        return {k: v for k, v in self.items() if k not in self.RESERVED}


def merge_properties(entity: dict, properties: Iterable[tuple[str, Any]]) -> dict:
    """Merge (name, value) pairs into entity without overwriting anything.

    Precedence is first-wins: keys already on the entity (id, labels, ...)
    are kept, and a repeated property name keeps its first value.

    Args:
        entity: Target mapping, modified in place
        properties: Ordered (name, value) pairs

    Returns:
        The same entity
    """
    for name, value in properties:
        entity.setdefault(name, value)
    return entity


class EntityDecoder:
    """Turns raw cells into scalars, Nodes and Relationships."""

    def __init__(self, catalog: CatalogResolver):
        self._catalog = catalog
        self._handlers = {
            ColumnType.SCALAR: self.decode_scalar,
            ColumnType.NODE: self.decode_node,
            ColumnType.RELATION: self.decode_relationship,
        }

    async def decode_cell(self, type_tag: int, cell: Any) -> Any:
        """Decode one cell according to its column's type tag.

        Unknown tags emit a DecodeWarning and decode to None (fatal only if
        the caller escalates DecodeWarning with a warnings filter).
        """
        column_type = ColumnType.from_tag(type_tag)
        handler = self._handlers.get(column_type)
        if handler is None:
            message = f"Unknown column type {type_tag!r}; cell decoded as None"
            log.warning(message)
            warnings.warn(message, DecodeWarning, stacklevel=2)
            return None
        return await handler(cell)

    async def decode_scalar(self, cell: Any) -> Any:
        return cell[1]

    async def decode_node(self, cell: Any) -> Node:
        node_id, label_ids, raw_properties = cell
        labels, properties = await asyncio.gather(
            asyncio.gather(
                *(self._catalog.resolve_name(CatalogKind.LABEL, label_id) for label_id in label_ids)
            ),
            self._decode_properties(raw_properties),
        )
        node = Node(id=node_id, labels=list(labels))
        return merge_properties(node, properties)

    async def decode_relationship(self, cell: Any) -> Relationship:
        rel_id, type_id, src_id, dst_id, raw_properties = cell
        type_name, properties = await asyncio.gather(
            self._catalog.resolve_name(CatalogKind.RELATIONSHIP_TYPE, type_id),
            self._decode_properties(raw_properties),
        )
        relationship = Relationship(
            id=rel_id,
            labels=[type_name],
            sourceNodeId=src_id,
            destinationNodeId=dst_id,
        )
        return merge_properties(relationship, properties)

    async def _decode_properties(self, raw_properties: list) -> list[tuple[str, Any]]:
        """Resolve [[key_id, value_type, value], ...] to ordered (name, value) pairs."""
        names = await asyncio.gather(
            *(self._catalog.resolve_name(CatalogKind.PROPERTY_KEY, prop[0]) for prop in raw_properties)
        )
        pairs = []
        for name, prop in zip(names, raw_properties):
            if name is None:
                log.warning(f"Dropping property with unresolved key id {prop[0]}")
                continue
            pairs.append((name, prop[2]))
        return pairs

    async def decode_verbose(self, cell: Any) -> Any:
        """Decode a cell from a non-compact reply.

        Entity cells become Nodes / Relationships with the same shape and
        overwrite protection as compact ones; no catalog lookup is needed.
        Any other cell is a scalar and passes through unchanged.
        """
        fields = _verbose_fields(cell)
        if fields is None:
            return cell

        properties = [(_text(name), value) for name, value in fields.get("properties") or []]
        if "type" in fields:
            entity = Relationship(
                id=fields["id"],
                labels=[_text(fields["type"])],
                sourceNodeId=fields.get("src_node"),
                destinationNodeId=fields.get("dest_node"),
            )
        else:
            entity = Node(id=fields["id"], labels=[_text(label) for label in fields.get("labels") or []])
        return merge_properties(entity, properties)


def _text(value: Any) -> Any:
    if isinstance(value, bytes):
        return value.decode("utf-8")
    return value


def _verbose_fields(cell: Any) -> dict[str, Any] | None:
    """Return the [key, value] pairs of a verbose entity cell, or None for scalars."""
    if not isinstance(cell, (list, tuple)) or not cell:
        return None
    fields = {}
    for item in cell:
        if not isinstance(item, (list, tuple)) or len(item) != 2:
            return None
        key = _text(item[0])
        if not isinstance(key, str) or key not in _VERBOSE_KEYS:
            return None
        fields[key] = item[1]
    return fields if "id" in fields else None
