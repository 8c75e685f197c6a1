"""Catalog resolver: interned label / property-key / relationship-type names.

Compact replies reference names by integer ID. The resolver keeps one
ID -> name mapping per kind for the lifetime of a session and hydrates a
mapping from the server only when an unknown ID shows up.

Hydration is single-flight per kind: while a catalog query for a kind is in
flight, every other lookup of that kind awaits the same task instead of
issuing its own round trip.
"""

import asyncio
from enum import Enum
from typing import Any

from redisgraph_lite.log_config import get_logger
from redisgraph_lite.transport import COMPACT_FLAG, QUERY_COMMAND, Transport

log = get_logger("catalog")


class CatalogKind(str, Enum):
    """The three interned name dictionaries, valued by their catalog procedure."""

    LABEL = "db.labels"
    PROPERTY_KEY = "db.propertyKeys"
    RELATIONSHIP_TYPE = "db.relationshipTypes"

    @property
    def procedure_call(self) -> str:
        return f"CALL {self.value}()"


def _catalog_name(cell: Any) -> str:
    """Pull the name out of a catalog row cell (compact [tag, name] or plain)."""
    if isinstance(cell, (list, tuple)):
        cell = cell[-1]
    if isinstance(cell, bytes):
        return cell.decode("utf-8")
    return cell


class CatalogResolver:
    """Session-scoped ID -> name resolution with lazy, single-flight hydration."""

    def __init__(self, transport: Transport, graph_name: str, compact: bool = True):
        """Initialize with empty mappings.

        Args:
            transport: Transport used for catalog queries
            graph_name: Graph the catalog belongs to
            compact: Send catalog queries with the compact flag
        """
        self._transport = transport
        self._graph_name = graph_name
        self._compact = compact
        self._mappings: dict[CatalogKind, dict[int, str]] = {kind: {} for kind in CatalogKind}
        self._pending: dict[CatalogKind, asyncio.Task] = {}
        # Bumped by clear(); hydrations started under an older generation discard their result
        self._generation = 0

    def mapping(self, kind: CatalogKind) -> dict[int, str]:
        """Return a copy of the current mapping for a kind."""
        return dict(self._mappings[kind])

    async def resolve_name(self, kind: CatalogKind, entity_id: int) -> str | None:
        """Resolve an interned ID to its name.

        Args:
            kind: Which catalog the ID belongs to
            entity_id: Integer ID from the reply

        Returns:
            The name, or None if the ID is still unknown after a refresh
            (the entry may have been created after the catalog was read)
        """
        name = self._mappings[kind].get(entity_id)
        if name is not None:
            return name

        await self._hydrate(kind)

        name = self._mappings[kind].get(entity_id)
        if name is None:
            log.warning(f"{kind.value}: id {entity_id} missing after refresh")
        return name

    async def refresh(self, kind: CatalogKind | None = None) -> None:
        """Force a hydration of one kind, or of every kind when kind is None."""
        kinds = [kind] if kind is not None else list(CatalogKind)
        await asyncio.gather(*(self._hydrate(k) for k in kinds))

    async def labels(self) -> list[str]:
        return await self._names(CatalogKind.LABEL)

    async def property_keys(self) -> list[str]:
        return await self._names(CatalogKind.PROPERTY_KEY)

    async def relationship_types(self) -> list[str]:
        return await self._names(CatalogKind.RELATIONSHIP_TYPE)

    def clear(self) -> None:
        """Drop every cached name (e.g. after the graph itself was deleted).

        Hydrations already in flight still complete for their waiters but do
        not write their names back; the next lookup starts a fresh one.
        """
        self._generation += 1
        self._pending.clear()
        for kind in CatalogKind:
            self._mappings[kind] = {}

    async def _names(self, kind: CatalogKind) -> list[str]:
        if not self._mappings[kind]:
            await self._hydrate(kind)
        mapping = self._mappings[kind]
        return [mapping[i] for i in sorted(mapping)]

    async def _hydrate(self, kind: CatalogKind) -> None:
        """Join the in-flight hydration for kind, starting one if needed."""
        task = self._pending.get(kind)
        if task is None:
            task = asyncio.ensure_future(self._fetch(kind, self._generation))
            self._pending[kind] = task
            task.add_done_callback(lambda t, k=kind: self._forget(k, t))
        else:
            log.trace(f"{kind.value}: joining in-flight hydration")
        await asyncio.shield(task)

    def _forget(self, kind: CatalogKind, task: asyncio.Task) -> None:
        if self._pending.get(kind) is task:
            del self._pending[kind]

    async def _fetch(self, kind: CatalogKind, generation: int) -> None:
        args = [self._graph_name, kind.procedure_call]
        if self._compact:
            args.append(COMPACT_FLAG)

        log.debug(f"Hydrating {kind.value} for graph={self._graph_name}")
        reply = await self._transport.send(QUERY_COMMAND, *args)

        if generation != self._generation:
            log.debug(f"{kind.value}: catalog cleared during hydration, discarding reply")
            return

        rows = reply[1] if len(reply) > 1 else []
        # Full refresh: row position is the interned ID
        self._mappings[kind] = {i: _catalog_name(row[0]) for i, row in enumerate(rows)}
        log.debug(f"{kind.value}: {len(self._mappings[kind])} names")
