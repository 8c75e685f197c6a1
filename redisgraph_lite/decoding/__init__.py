"""Decoding of compact graph query replies.

Module Structure:
- catalog.py: CatalogResolver, lazily hydrated ID -> name mappings
- entities.py: EntityDecoder, one cell -> scalar / Node / Relationship
- rows.py: ResultDecoder and QueryResult, whole reply -> ordered records
- stats.py: parse_stats, "Label: Value" lines -> {camelCaseKey: value}

Example:
    catalog = CatalogResolver(transport, "social")
    decoder = ResultDecoder(EntityDecoder(catalog))
    result = await decoder.decode_reply(raw_reply)
    print(result.records, result.stats)
"""

from redisgraph_lite.decoding.catalog import CatalogKind, CatalogResolver
from redisgraph_lite.decoding.entities import (
    ColumnType,
    EntityDecoder,
    Node,
    Relationship,
    merge_properties,
)
from redisgraph_lite.decoding.rows import QueryResult, ResultDecoder
from redisgraph_lite.decoding.stats import camel_case, parse_stats

__all__ = [
    "CatalogKind",
    "CatalogResolver",
    "ColumnType",
    "EntityDecoder",
    "Node",
    "QueryResult",
    "Relationship",
    "ResultDecoder",
    "camel_case",
    "merge_properties",
    "parse_stats",
]
