"""Transport protocol for redisgraph-lite.

The decoder never talks to the network itself. It needs something that can
send a named command with arguments and hand back the reply untouched; this
module defines that contract and a Redis implementation of it.
"""

from typing import Any, Protocol, runtime_checkable

import redis.asyncio as aioredis
from redis.exceptions import RedisError

from redisgraph_lite.config import GraphConfig
from redisgraph_lite.exceptions import TransportError
from redisgraph_lite.log_config import get_logger

log = get_logger("transport")

QUERY_COMMAND = "GRAPH.QUERY"
DELETE_COMMAND = "GRAPH.DELETE"
EXPLAIN_COMMAND = "GRAPH.EXPLAIN"
COMPACT_FLAG = "--compact"


@runtime_checkable
class Transport(Protocol):
    """Protocol for anything that can carry graph commands to the server.

    Connection management, pipelining, retries and auth all live behind it.
    """

    async def send(self, command: str, *args: Any) -> Any:
        """Issue a command and return its structured reply uninterpreted.

        Args:
            command: Command name (e.g. GRAPH.QUERY)
            *args: Command arguments

        Returns:
            The raw reply exactly as the server produced it
        """
        ...

    async def send_batch(self, commands: list[tuple]) -> list[Any]:
        """Issue several commands in one round trip.

        Args:
            commands: (command, *args) tuples, in order

        Returns:
            One raw reply per command, in order. A command the server
            rejected yields its TransportError in place of a reply.
        """
        ...

    async def close(self) -> None:
        """Release any connection resources."""
        ...


class RedisTransport:
    """Transport over a redis-py asyncio client.

    Replies are decoded to str (decode_responses=True) but are otherwise
    passed through as the server sent them.
    """

    def __init__(self, client: aioredis.Redis):
        """Wrap an existing asyncio Redis client.

        Args:
            client: redis.asyncio.Redis instance
        """
        self._client = client

    @classmethod
    def from_config(cls, config: GraphConfig) -> "RedisTransport":
        """Build a transport from connection settings."""
        log.info(f"Connecting to {config.host}:{config.port} db={config.db}")
        client = aioredis.Redis(
            host=config.host,
            port=config.port,
            db=config.db,
            password=config.password,
            decode_responses=True,
        )
        return cls(client)

    async def send(self, command: str, *args: Any) -> Any:
        log.trace(f"{command} {args[:1]}")
        try:
            return await self._client.execute_command(command, *args)
        except RedisError as e:
            log.error(f"{command} failed: {e}")
            raise TransportError(str(e), command=command) from e

    async def send_batch(self, commands: list[tuple]) -> list[Any]:
        log.trace(f"Pipelining {len(commands)} commands")
        pipe = self._client.pipeline(transaction=False)
        for command, *args in commands:
            pipe.execute_command(command, *args)
        try:
            replies = await pipe.execute(raise_on_error=False)
        except RedisError as e:
            log.error(f"Pipeline failed: {e}")
            raise TransportError(str(e)) from e
        return [
            _command_error(command[0], reply) if isinstance(reply, RedisError) else reply
            for command, reply in zip(commands, replies)
        ]

    async def close(self) -> None:
        log.info("Closing Redis connection")
        await self._client.aclose()


def _command_error(command: str, cause: RedisError) -> TransportError:
    error = TransportError(str(cause), command=command)
    error.__cause__ = cause
    return error
