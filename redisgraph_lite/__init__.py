"""redisgraph-lite - Async client and decoder for compact graph query replies.

A lightweight client for Redis-hosted graph databases with:
- Compact reply decoding (interned IDs resolved to names)
- Lazy, single-flight catalog hydration per session
- Execution statistics as a camelCase key/value mapping
"""

__version__ = "0.1.0"

from redisgraph_lite.config import GraphConfig
from redisgraph_lite.decoding import (
    CatalogKind,
    CatalogResolver,
    Node,
    QueryResult,
    Relationship,
    parse_stats,
)
from redisgraph_lite.exceptions import (
    ConfigurationError,
    DecodeWarning,
    GraphClientError,
    TransportError,
)
from redisgraph_lite.graph import Graph, GraphPipeline
from redisgraph_lite.transport import RedisTransport, Transport

__all__ = [
    "CatalogKind",
    "CatalogResolver",
    "ConfigurationError",
    "DecodeWarning",
    "Graph",
    "GraphClientError",
    "GraphConfig",
    "GraphPipeline",
    "Node",
    "QueryResult",
    "RedisTransport",
    "Relationship",
    "Transport",
    "TransportError",
    "parse_stats",
]
