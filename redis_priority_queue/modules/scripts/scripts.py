import asyncio
import logging
from typing import Any, Dict, List, Optional, Sequence, Union

from redis.exceptions import NoScriptError, RedisError

from ...errors import TransportError

logger = logging.getLogger(__name__)

Priority = Union[int, float]

# Pops only ever see entries scored in [0, +inf]
POP_MIN_SCORE = 0
POP_MAX_SCORE = "+inf"

SCRIPT_PUSH_ONE = """
-- KEYS[1] = queue key
-- ARGV[1] = priority increment
-- ARGV[2] = serialized payload
return redis.call('ZINCRBY', KEYS[1], ARGV[1], ARGV[2])
"""

SCRIPT_BATCH_PUSH = """
-- KEYS[1] = queue key
-- ARGV = priority, payload, priority, payload, ...
local results = {}
for i = 1, #ARGV, 2 do
    local new_score = redis.call('ZINCRBY', KEYS[1], ARGV[i], ARGV[i + 1])
    table.insert(results, new_score)
end
return results
"""

SCRIPT_POP_ONE = """
-- KEYS[1] = queue key
-- ARGV[1] = min score, ARGV[2] = max score
local member = redis.call('ZRANGEBYSCORE', KEYS[1], ARGV[1], ARGV[2], 'LIMIT', 0, 1)
if #member > 0 then
    redis.call('ZREM', KEYS[1], member[1])
end
return member
"""

SCRIPT_BATCH_POP = """
-- KEYS[1] = queue key
-- ARGV[1] = min score, ARGV[2] = max score, ARGV[3] = count
local members = redis.call('ZRANGEBYSCORE', KEYS[1], ARGV[1], ARGV[2], 'LIMIT', 0, ARGV[3])
for _, member in ipairs(members) do
    redis.call('ZREM', KEYS[1], member)
end
return members
"""

SCRIPTS = {
    "push_one": SCRIPT_PUSH_ONE,
    "batch_push": SCRIPT_BATCH_PUSH,
    "pop_one": SCRIPT_POP_ONE,
    "batch_pop": SCRIPT_BATCH_POP,
}


class ScriptProtocol:
    """
    Executes the four queue scripts against a Redis-compatible store.

    Scripts are loaded once with SCRIPT LOAD and invoked by SHA. A NOSCRIPT
    reply (cache flushed, failover) reloads them and re-issues the call once.

    Entries are removed by the pop scripts before the reply reaches the
    client. Anything that goes wrong after the reply (decoding, cancellation)
    cannot put them back.
    """

    def __init__(self, redis_client):
        """
        Initialize script protocol.

        Args:
            redis_client: Async Redis client exposing script_load() and evalsha()
        """
        self.redis = redis_client
        self._shas: Dict[str, str] = {}
        self._lock = asyncio.Lock()

    async def load(self) -> Dict[str, str]:
        """
        Load all scripts into the store's script cache.

        Returns:
            Mapping of script name to SHA

        Raises:
            TransportError: If the store rejects or cannot receive a script
        """
        async with self._lock:
            try:
                for name, body in SCRIPTS.items():
                    self._shas[name] = _as_str(await self.redis.script_load(body))
            except RedisError as e:
                logger.error(f"Failed to load queue scripts: {e}", exc_info=True)
                raise TransportError(f"Failed to load queue scripts: {e}") from e
            logger.debug(f"Loaded {len(self._shas)} queue scripts")
            return dict(self._shas)

    async def push_one(self, key: str, priority: Priority, payload: bytes) -> float:
        """Add priority to the score of payload in key. Returns the new score."""
        _check_priority(priority)
        result = await self._run("push_one", key, [priority, payload])
        return _as_score(result)

    async def batch_push(
        self, key: str, priority: Priority, payloads: Sequence[bytes]
    ) -> List[float]:
        """
        Apply push_one to every payload in input order, in one atomic call.

        Returns:
            Resulting scores, in input order
        """
        _check_priority(priority)
        if not payloads:
            return []

        args: List[Any] = []
        for payload in payloads:
            args.extend((priority, payload))

        results = await self._run("batch_push", key, args)
        return [_as_score(score) for score in results]

    async def pop_one(self, key: str) -> Optional[bytes]:
        """
        Remove and return the lowest-scored member in [0, +inf].

        Returns:
            Serialized payload, or None if nothing qualifies
        """
        results = await self._run("pop_one", key, [POP_MIN_SCORE, POP_MAX_SCORE])
        if not results:
            return None
        return _as_bytes(results[0])

    async def batch_pop(self, key: str, count: int) -> List[bytes]:
        """
        Remove and return up to count lowest-scored members in [0, +inf].

        Fewer than count qualifying members is not an error.

        Returns:
            Serialized payloads by ascending score, ties by member bytes
        """
        if isinstance(count, bool) or not isinstance(count, int) or count <= 0:
            raise ValueError(f"count must be a positive integer, got {count!r}")

        results = await self._run("batch_pop", key, [POP_MIN_SCORE, POP_MAX_SCORE, count])
        return [_as_bytes(member) for member in results or []]

    async def _run(self, name: str, key: str, args: Sequence[Any]) -> Any:
        """Invoke a loaded script by SHA with a single key."""
        if name not in self._shas:
            await self.load()

        try:
            try:
                return await self.redis.evalsha(self._shas[name], 1, key, *args)
            except NoScriptError:
                logger.warning(f"Script '{name}' missing from store cache, reloading")
                await self.load()
                return await self.redis.evalsha(self._shas[name], 1, key, *args)
        except RedisError as e:
            logger.error(f"Queue script '{name}' failed for key '{key}': {e}", exc_info=True)
            raise TransportError(f"Queue script '{name}' failed for key '{key}': {e}") from e


def _check_priority(priority: Any) -> None:
    if isinstance(priority, bool) or not isinstance(priority, (int, float)):
        raise TypeError(f"priority must be int or float, got {type(priority).__name__}")


def _as_str(value: Any) -> str:
    if isinstance(value, bytes):
        return value.decode()
    return str(value)


def _as_bytes(value: Any) -> bytes:
    if isinstance(value, str):
        return value.encode()
    return bytes(value)


def _as_score(value: Any) -> float:
    # Scores come back as bulk strings on RESP2 and as doubles on RESP3
    if isinstance(value, bytes):
        value = value.decode()
    return float(value)
