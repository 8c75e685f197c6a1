"""Row/result decoder: a whole GRAPH.QUERY reply -> QueryResult.

A reply is [header, rows, stats] for queries that return a result set and
just [stats] for pure side-effect queries.
"""

import asyncio
from dataclasses import dataclass, field
from typing import Any

from redisgraph_lite.decoding.entities import EntityDecoder
from redisgraph_lite.decoding.stats import parse_stats
from redisgraph_lite.log_config import get_logger

log = get_logger("decoder.rows")


@dataclass
class QueryResult:
    """Decoded reply of one query.

    Attributes:
        records: One dict per row, keyed by column name in column order
        header: Column names in order (empty when there was no result set)
        stats: Execution statistics, e.g. {"nodesCreated": "1"}
    """
    records: list[dict[str, Any]] = field(default_factory=list)
    header: list[str] = field(default_factory=list)
    stats: dict[str, str] = field(default_factory=dict)

    def __iter__(self):
        """Allow iteration over records."""
        return iter(self.records)

    def __len__(self):
        """Return number of records."""
        return len(self.records)

    def __bool__(self):
        """Check if result has any records."""
        return len(self.records) > 0

    def __getitem__(self, index):
        return self.records[index]


def _column_name(name: str | bytes) -> str:
    if isinstance(name, bytes):
        return name.decode("utf-8")
    return name


def _column(entry: Any) -> tuple[int | None, str]:
    """Header entry -> (type_tag, name).

    Compact headers are [tag, name]; verbose headers are the bare name and
    get a None tag.
    """
    if isinstance(entry, (list, tuple)):
        tag, name = entry
        return tag, _column_name(name)
    return None, _column_name(entry)


class ResultDecoder:
    """Applies column headers to rows, delegating cells to an EntityDecoder."""

    def __init__(self, entities: EntityDecoder):
        self._entities = entities

    def _decode_cell(self, column: tuple[int | None, str], cell: Any):
        tag, _ = column
        if tag is None:
            return self._entities.decode_verbose(cell)
        return self._entities.decode_cell(tag, cell)

    async def decode_row(self, header: list, row: list) -> dict[str, Any]:
        columns = [_column(entry) for entry in header]
        values = await asyncio.gather(
            *(self._decode_cell(column, cell) for column, cell in zip(columns, row))
        )
        return {name: value for (_, name), value in zip(columns, values)}

    async def decode_records(self, header: list, rows: list) -> list[dict[str, Any]]:
        """Decode every row; output order matches row order."""
        return list(await asyncio.gather(*(self.decode_row(header, row) for row in rows)))

    async def decode_reply(self, reply: list) -> QueryResult:
        """Decode a raw GRAPH.QUERY reply.

        Args:
            reply: [header, rows, stats] or [stats]; header entries are
                [tag, name] (compact) or bare names (verbose)

        Returns:
            QueryResult; records is empty (never None) without a result set
        """
        stats = parse_stats(reply[-1])

        prefix = reply[:-1]
        if not prefix:
            log.trace("Reply has no result set")
            return QueryResult(stats=stats)

        header = prefix[0]
        rows = prefix[1] if len(prefix) > 1 else []
        records = await self.decode_records(header, rows)
        log.debug(f"Decoded {len(records)} records x {len(header)} columns")
        return QueryResult(
            records=records,
            header=[_column(entry)[1] for entry in header],
            stats=stats,
        )
