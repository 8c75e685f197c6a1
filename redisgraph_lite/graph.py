"""Query façade: one named graph, one transport, one catalog session.

Usage:
    from redisgraph_lite import Graph, GraphConfig

    async with Graph.from_config(GraphConfig(graph_name="social")) as graph:
        result = await graph.query("MATCH (a:person) RETURN a, id(a)")
        for record in result:
            print(record["a"]["name"], record["id(a)"])
        print(result.stats["queryInternalExecutionTime"])
"""

import asyncio
from typing import Any

from redisgraph_lite.config import GraphConfig
from redisgraph_lite.decoding import CatalogResolver, EntityDecoder, QueryResult, ResultDecoder
from redisgraph_lite.exceptions import ConfigurationError
from redisgraph_lite.log_config import get_logger, log_timing
from redisgraph_lite.transport import (
    COMPACT_FLAG,
    DELETE_COMMAND,
    EXPLAIN_COMMAND,
    QUERY_COMMAND,
    RedisTransport,
    Transport,
)

log = get_logger("graph")


class Graph:
    """Async client for a single named graph.

    Queries are sent in the compact reply format by default and decoded
    into records whose nodes and relationships carry resolved names.
    """

    def __init__(self, graph_name: str, transport: Transport, *, compact: bool = True):
        """Bind the client to a graph.

        Args:
            graph_name: Graph identifier (required, non-empty)
            transport: Command transport
            compact: Append --compact to queries

        Raises:
            ConfigurationError: If graph_name is missing or empty
        """
        if not graph_name:
            raise ConfigurationError("Must specify a graph name")

        self.graph_name = graph_name
        self.compact = compact
        self._transport = transport
        self.catalog = CatalogResolver(transport, graph_name, compact=compact)
        self._decoder = ResultDecoder(EntityDecoder(self.catalog))
        log.trace(f"Graph initialized: name={graph_name}, compact={compact}")

    @classmethod
    def from_config(cls, config: GraphConfig, transport: Transport | None = None) -> "Graph":
        """Create a Graph from configuration, building a Redis transport if none is given."""
        if not config.graph_name:
            raise ConfigurationError("Must specify a graph name")
        if transport is None:
            transport = RedisTransport.from_config(config)
        return cls(config.graph_name, transport, compact=config.compact)

    async def __aenter__(self) -> "Graph":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def query(self, cypher: str) -> QueryResult:
        """Run a query and decode its reply.

        Args:
            cypher: Query text

        Returns:
            QueryResult with records in row order and stats attached
        """
        command = self._query_command(cypher)

        log.debug(f"{QUERY_COMMAND} {self.graph_name}: {command[2][:100]}")
        with log_timing(QUERY_COMMAND, log):
            reply = await self._transport.send(*command)

        return await self._decoder.decode_reply(reply)

    async def delete(self) -> Any:
        """Drop the graph and forget its catalog. Returns the server reply."""
        log.info(f"Deleting graph {self.graph_name}")
        reply = await self._transport.send(DELETE_COMMAND, self.graph_name)
        self.catalog.clear()
        return reply

    async def explain(self, cypher: str) -> Any:
        """Return the server's execution plan for a query, undecoded."""
        return await self._transport.send(EXPLAIN_COMMAND, self.graph_name, str(cypher))

    def pipeline(self) -> "GraphPipeline":
        """Start a batch of query / delete / explain commands sent in one round trip."""
        return GraphPipeline(self)

    def _query_command(self, cypher: str) -> tuple:
        command = (QUERY_COMMAND, self.graph_name, str(cypher))
        if self.compact:
            command += (COMPACT_FLAG,)
        return command

    async def close(self) -> None:
        """Close the underlying transport."""
        await self._transport.close()


class GraphPipeline:
    """Graph commands queued on the client and sent in one round trip.

    Usage:
        results = await (
            graph.pipeline()
            .query("CREATE (:person {name: 'Chuck'})")
            .query("MATCH (p:person) RETURN p")
            .execute()
        )

    Each GRAPH.QUERY reply is decoded like Graph.query(); delete and explain
    replies are returned as sent.
    """

    def __init__(self, graph: Graph):
        self._graph = graph
        self._commands: list[tuple] = []

    def __len__(self):
        return len(self._commands)

    def query(self, cypher: str) -> "GraphPipeline":
        self._commands.append(self._graph._query_command(cypher))
        return self

    def delete(self) -> "GraphPipeline":
        self._commands.append((DELETE_COMMAND, self._graph.graph_name))
        return self

    def explain(self, cypher: str) -> "GraphPipeline":
        self._commands.append((EXPLAIN_COMMAND, self._graph.graph_name, str(cypher)))
        return self

    async def execute(self) -> list[Any]:
        """Send every queued command and empty the queue.

        Returns:
            One entry per command in queue order: a QueryResult for queries,
            the raw reply otherwise. A command the server rejected is returned
            as its TransportError so the other replies are not lost.
        """
        commands, self._commands = self._commands, []
        if not commands:
            return []

        log.debug(f"Pipeline of {len(commands)} commands on {self._graph.graph_name}")
        with log_timing("pipeline", log):
            replies = await self._graph._transport.send_batch(commands)

        results = await asyncio.gather(
            *(self._decode(command, reply) for command, reply in zip(commands, replies))
        )

        deleted = any(
            command[0] == DELETE_COMMAND and not isinstance(reply, Exception)
            for command, reply in zip(commands, replies)
        )
        if deleted:
            self._graph.catalog.clear()
        return list(results)

    async def _decode(self, command: tuple, reply: Any) -> Any:
        if command[0] != QUERY_COMMAND or isinstance(reply, Exception):
            return reply
        return await self._graph._decoder.decode_reply(reply)
