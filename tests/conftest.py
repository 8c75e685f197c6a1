"""Shared pytest fixtures for redisgraph-lite tests."""

from __future__ import annotations

import asyncio
from typing import Any

import pytest

STATS_TAIL = ["Query internal execution time: 0.250000 milliseconds"]


def catalog_reply(names: list[str]) -> list:
    """Compact reply of a CALL db.*() procedure: one [string_tag, name] cell per row."""
    return [[[1, "name"]], [[[2, name]] for name in names], list(STATS_TAIL)]


class FakeTransport:
    """In-memory Transport that records every send() and serves scripted replies.

    Catalog procedure calls are answered from `catalogs` (procedure -> names,
    row index is the ID). Anything else pops the next reply from `replies`.
    """

    def __init__(
        self,
        catalogs: dict[str, list[str]] | None = None,
        replies: list[Any] | None = None,
        delay: float = 0.0,
    ):
        self.catalogs = catalogs or {}
        self.replies = list(replies or [])
        self.delay = delay
        self.calls: list[tuple] = []
        self.batches: list[list[tuple]] = []
        self.failure: Exception | None = None
        self.closed = False

    def catalog_calls(self, procedure: str | None = None) -> list[tuple]:
        return [
            call for call in self.calls
            if call[0] == "GRAPH.QUERY"
            and call[2].startswith("CALL db.")
            and (procedure is None or procedure in call[2])
        ]

    async def send(self, command: str, *args: Any) -> Any:
        self.calls.append((command, *args))
        # Always suspend so concurrent callers interleave like a real round trip
        await asyncio.sleep(self.delay)
        if self.failure is not None:
            raise self.failure

        if command == "GRAPH.QUERY" and args[1].startswith("CALL db."):
            procedure = args[1][len("CALL "):].rstrip("()")
            return catalog_reply(self.catalogs.get(procedure, []))
        return self.replies.pop(0)

    async def send_batch(self, commands: list[tuple]) -> list[Any]:
        """Serve one scripted reply per command; an Exception reply is returned in place."""
        self.batches.append(list(commands))
        self.calls.extend(commands)
        await asyncio.sleep(self.delay)
        if self.failure is not None:
            raise self.failure
        return [self.replies.pop(0) for _ in commands]

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def social_catalogs() -> dict[str, list[str]]:
    """Catalog where label 2 is "person", property key 0 is "name", rel type 5 is "friendsWith"."""
    return {
        "db.labels": ["movie", "actor", "person"],
        "db.propertyKeys": ["name", "age", "since"],
        "db.relationshipTypes": ["acted", "directed", "rides", "knows", "likes", "friendsWith"],
    }


@pytest.fixture
def transport(social_catalogs) -> FakeTransport:
    return FakeTransport(catalogs=social_catalogs)


@pytest.fixture
def catalog(transport):
    from redisgraph_lite.decoding import CatalogResolver

    return CatalogResolver(transport, "social")


@pytest.fixture
def entity_decoder(catalog):
    from redisgraph_lite.decoding import EntityDecoder

    return EntityDecoder(catalog)


@pytest.fixture
def result_decoder(entity_decoder):
    from redisgraph_lite.decoding import ResultDecoder

    return ResultDecoder(entity_decoder)
