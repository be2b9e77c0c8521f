"""
Shared pytest fixtures for queue client tests.

This module provides common fixtures including:
- FakeSortedSetStore: in-memory stand-in for Redis that runs the queue scripts
- Redis mocks for call-shape tests
- Queue clients wired to either of them
"""

import hashlib
import os
import sys
from typing import Any, Dict, List, Optional
from unittest.mock import AsyncMock

import pytest
from redis.exceptions import NoScriptError

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from redis_priority_queue.modules.queue import PriorityQueueClient
from redis_priority_queue.modules.scripts import (
    SCRIPT_BATCH_POP,
    SCRIPT_BATCH_PUSH,
    SCRIPT_POP_ONE,
    SCRIPT_PUSH_ONE,
)


# =============================================================================
# Sorted Set Fake
# =============================================================================


def _encode(value: Any) -> bytes:
    """Encode an argument the way redis-py puts it on the wire."""
    if isinstance(value, bytes):
        return value
    if isinstance(value, float):
        return repr(value).encode()
    return str(value).encode()


def _parse_score(value: bytes) -> float:
    text = value.decode()
    if text in ("+inf", "inf"):
        return float("inf")
    if text == "-inf":
        return float("-inf")
    return float(text)


def _format_score(score: float) -> bytes:
    """Format a score as a Redis bulk string reply."""
    if score == int(score):
        return str(int(score)).encode()
    return repr(score).encode()


class FakeSortedSetStore:
    """
    In-memory Redis fake that understands the four queue scripts.

    Scripts are recognised by SHA after script_load(), so a SHA the fake has
    not seen (or has forgotten via flush_scripts()) raises NoScriptError just
    like a real server.

    Usage:
        async def test_ordering(fake_store):
            client = PriorityQueueClient(fake_store, "json", payload_type=str)
            await client.push_one("a", 1, "q")
            assert fake_store.zscore("q", b'"a"') == 1.0
    """

    def __init__(self):
        self.sets: Dict[bytes, Dict[bytes, float]] = {}
        self._scripts: Dict[str, str] = {}
        self.script_load_count = 0
        self.evalsha_count = 0

    async def script_load(self, body: str) -> str:
        self.script_load_count += 1
        sha = hashlib.sha1(body.encode()).hexdigest()
        self._scripts[sha] = body
        return sha

    async def evalsha(self, sha: str, numkeys: int, *keys_and_args: Any) -> Any:
        self.evalsha_count += 1
        if sha not in self._scripts:
            raise NoScriptError("NOSCRIPT No matching script. Please use EVAL.")

        key = _encode(keys_and_args[0])
        args = [_encode(arg) for arg in keys_and_args[numkeys:]]
        handlers = {
            SCRIPT_PUSH_ONE: self._push_one,
            SCRIPT_BATCH_PUSH: self._batch_push,
            SCRIPT_POP_ONE: self._pop_one,
            SCRIPT_BATCH_POP: self._batch_pop,
        }
        return handlers[self._scripts[sha]](key, args)

    def flush_scripts(self) -> None:
        """Forget every loaded script (SCRIPT FLUSH)."""
        self._scripts.clear()

    # Inspection helpers

    def zscore(self, key: str, member: bytes) -> Optional[float]:
        return self.sets.get(key.encode(), {}).get(member)

    def zmembers(self, key: str) -> List[bytes]:
        return [member for member, _ in self._ordered(key.encode())]

    def zcard(self, key: str) -> int:
        return len(self.sets.get(key.encode(), {}))

    # Script implementations

    def _zincrby(self, key: bytes, increment: bytes, member: bytes) -> bytes:
        members = self.sets.setdefault(key, {})
        members[member] = members.get(member, 0.0) + _parse_score(increment)
        return _format_score(members[member])

    def _push_one(self, key: bytes, args: List[bytes]) -> bytes:
        return self._zincrby(key, args[0], args[1])

    def _batch_push(self, key: bytes, args: List[bytes]) -> List[bytes]:
        return [self._zincrby(key, args[i], args[i + 1]) for i in range(0, len(args), 2)]

    def _range(self, key: bytes, low: bytes, high: bytes, count: int) -> List[bytes]:
        low_score, high_score = _parse_score(low), _parse_score(high)
        selected = [
            member
            for member, score in self._ordered(key)
            if low_score <= score <= high_score
        ]
        return selected[:count]

    def _remove(self, key: bytes, members: List[bytes]) -> None:
        current = self.sets.get(key, {})
        for member in members:
            current.pop(member, None)
        if not current:
            self.sets.pop(key, None)

    def _pop_one(self, key: bytes, args: List[bytes]) -> List[bytes]:
        members = self._range(key, args[0], args[1], 1)
        self._remove(key, members)
        return members

    def _batch_pop(self, key: bytes, args: List[bytes]) -> List[bytes]:
        members = self._range(key, args[0], args[1], int(args[2]))
        self._remove(key, members)
        return members

    def _ordered(self, key: bytes) -> List[tuple]:
        return sorted(self.sets.get(key, {}).items(), key=lambda item: (item[1], item[0]))


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def fake_store():
    """Create an empty in-memory sorted set store."""
    return FakeSortedSetStore()


@pytest.fixture
def queue_client(fake_store):
    """Create a str-typed queue client backed by the fake store."""
    return PriorityQueueClient(fake_store, "json", payload_type=str, poll_interval=0.01)


@pytest.fixture
def mock_redis():
    """Create a mock Redis client with the script methods the client uses."""
    redis = AsyncMock()
    redis.script_load = AsyncMock(side_effect=lambda body: hashlib.sha1(body.encode()).hexdigest())
    redis.evalsha = AsyncMock()
    return redis
