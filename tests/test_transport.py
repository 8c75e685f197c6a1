"""Redis transport tests.

Uses a mocked redis.asyncio client; no server required.
"""

from unittest.mock import AsyncMock, MagicMock, call, patch

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import ResponseError

from redisgraph_lite.config import GraphConfig
from redisgraph_lite.exceptions import TransportError
from redisgraph_lite.transport import RedisTransport, Transport

from conftest import FakeTransport


@pytest.fixture
def redis_client():
    client = MagicMock()
    client.execute_command = AsyncMock(return_value=[["Nodes created: 1"]])
    client.aclose = AsyncMock()
    client.pipeline.return_value.execute = AsyncMock(return_value=[])
    return client


class TestProtocol:
    """Test the Transport protocol."""

    def test_redis_transport_satisfies_protocol(self, redis_client):
        assert isinstance(RedisTransport(redis_client), Transport)

    def test_fake_transport_satisfies_protocol(self):
        assert isinstance(FakeTransport(), Transport)


class TestRedisTransport:
    """Test RedisTransport."""

    @pytest.mark.asyncio
    async def test_send_passes_reply_through(self, redis_client):
        """The reply is returned untouched."""
        transport = RedisTransport(redis_client)

        reply = await transport.send("GRAPH.QUERY", "g", "CREATE ()", "--compact")

        assert reply == [["Nodes created: 1"]]
        redis_client.execute_command.assert_awaited_once_with("GRAPH.QUERY", "g", "CREATE ()", "--compact")

    @pytest.mark.asyncio
    async def test_redis_error_becomes_transport_error(self, redis_client):
        """Redis failures surface as TransportError with the cause chained."""
        cause = RedisConnectionError("Connection refused")
        redis_client.execute_command.side_effect = cause
        transport = RedisTransport(redis_client)

        with pytest.raises(TransportError) as exc_info:
            await transport.send("GRAPH.DELETE", "g")

        assert exc_info.value.command == "GRAPH.DELETE"
        assert exc_info.value.__cause__ is cause

    @pytest.mark.asyncio
    async def test_send_batch_uses_pipeline(self, redis_client):
        """Commands are queued on a non-transactional pipeline and replies returned in order."""
        pipe = redis_client.pipeline.return_value
        pipe.execute.return_value = [[["Nodes created: 1"]], "plan"]
        transport = RedisTransport(redis_client)

        replies = await transport.send_batch([
            ("GRAPH.QUERY", "g", "CREATE ()", "--compact"),
            ("GRAPH.EXPLAIN", "g", "MATCH (n) RETURN n"),
        ])

        assert replies == [[["Nodes created: 1"]], "plan"]
        redis_client.pipeline.assert_called_once_with(transaction=False)
        assert pipe.execute_command.call_args_list == [
            call("GRAPH.QUERY", "g", "CREATE ()", "--compact"),
            call("GRAPH.EXPLAIN", "g", "MATCH (n) RETURN n"),
        ]
        pipe.execute.assert_awaited_once_with(raise_on_error=False)

    @pytest.mark.asyncio
    async def test_send_batch_command_error_in_place(self, redis_client):
        """A rejected command becomes a TransportError entry; the rest are kept."""
        cause = ResponseError("errMsg: Invalid input")
        redis_client.pipeline.return_value.execute.return_value = [cause, "Graph removed"]
        transport = RedisTransport(redis_client)

        replies = await transport.send_batch([("GRAPH.QUERY", "g", "MATC"), ("GRAPH.DELETE", "g")])

        assert isinstance(replies[0], TransportError)
        assert replies[0].command == "GRAPH.QUERY"
        assert replies[0].__cause__ is cause
        assert replies[1] == "Graph removed"

    @pytest.mark.asyncio
    async def test_send_batch_connection_error(self, redis_client):
        """A failure of the whole pipeline raises TransportError."""
        cause = RedisConnectionError("Connection refused")
        redis_client.pipeline.return_value.execute.side_effect = cause
        transport = RedisTransport(redis_client)

        with pytest.raises(TransportError) as exc_info:
            await transport.send_batch([("GRAPH.DELETE", "g")])
        assert exc_info.value.__cause__ is cause

    @pytest.mark.asyncio
    async def test_close(self, redis_client):
        await RedisTransport(redis_client).close()
        redis_client.aclose.assert_awaited_once()

    def test_from_config(self):
        """from_config builds a decoding client from connection settings."""
        config = GraphConfig(graph_name="g", host="graph.local", port=6380, password="pw", db=1)

        with patch("redisgraph_lite.transport.aioredis.Redis") as redis_cls:
            transport = RedisTransport.from_config(config)

        redis_cls.assert_called_once_with(
            host="graph.local",
            port=6380,
            db=1,
            password="pw",
            decode_responses=True,
        )
        assert isinstance(transport, RedisTransport)
