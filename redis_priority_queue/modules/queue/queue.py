import asyncio
import logging
from typing import Any, AsyncIterator, Dict, Generic, List, Optional, Sequence, TypeVar, Union

from ...errors import DecodingError, EmptyQueueError
from ..logger import LogLevel, NullQueueLogger, QueueLogger
from ..scripts import ScriptProtocol
from ..scripts.scripts import Priority
from ..serializer import Serializer, SerializerType, new_serializer

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_POLL_INTERVAL = 0.5


class PriorityQueueClient(Generic[T]):
    def __init__(
        self,
        redis_client,
        serializer: Union[Serializer, SerializerType, str] = SerializerType.JSON,
        logger: Optional[QueueLogger] = None,
        payload_type: Any = Any,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
    ):
        """
        Initialize priority queue client.

        Args:
            redis_client: Async Redis client
            serializer: Serializer instance, or a SerializerType name to build one
            logger: Optional observer told about every store response
            payload_type: Payload type when the serializer is built by name
            poll_interval: Seconds sub() sleeps while the queue is empty

        Raises:
            UnknownSerializerError: If serializer names an unsupported codec
        """
        if isinstance(serializer, (SerializerType, str)):
            serializer = new_serializer(serializer, payload_type)

        self.redis = redis_client
        self.serializer = serializer
        self.logger = logger or NullQueueLogger()
        self.scripts = ScriptProtocol(redis_client)
        self.poll_interval = poll_interval

        self._stop_events: Dict[str, asyncio.Event] = {}
        self._active_subs: Dict[str, int] = {}

    @classmethod
    def with_logger(
        cls,
        redis_client,
        serializer: Union[Serializer, SerializerType, str],
        logger: QueueLogger,
        **kwargs: Any,
    ) -> "PriorityQueueClient[T]":
        """Create a client with an observer attached."""
        return cls(redis_client, serializer, logger=logger, **kwargs)

    async def push_one(self, payload: T, priority: Priority, key: str) -> float:
        """
        Push a payload to the queue.

        Pushing a payload whose encoding is already queued adds priority to
        the existing entry's score instead of creating a second entry.

        Args:
            payload: Value to enqueue
            priority: Score increment, lower pops first
            key: Queue key

        Returns:
            Resulting score of the entry

        Raises:
            EncodingError: If the payload cannot be encoded
            TransportError: If the store call fails
        """
        data = self.serializer.serialize(payload)
        score = await self.scripts.push_one(key, priority, data)

        self._log("push_one result: %s", score)
        return score

    async def batch_push(self, priority: Priority, key: str, payloads: Sequence[T]) -> List[float]:
        """
        Push a batch of payloads sharing one priority, atomically.

        Every payload is encoded before the store is contacted, so an
        encoding failure leaves the queue untouched.

        Returns:
            Resulting scores, in input order
        """
        encoded = [self.serializer.serialize(payload) for payload in payloads]
        scores = await self.scripts.batch_push(key, priority, encoded)

        self._log("batch_push result: %s", scores)
        return scores

    async def pop_one(self, key: str) -> T:
        """
        Pop the lowest-scored payload with a score in [0, +inf].

        Raises:
            EmptyQueueError: If nothing qualifies
            DecodingError: If the popped bytes do not match the payload type
            TransportError: If the store call fails
        """
        data = await self.scripts.pop_one(key)
        if data is None:
            raise EmptyQueueError(key)

        self._log("pop_one result: %s", data)
        return self.serializer.deserialize(data)

    async def batch_pop(self, key: str, count: int) -> List[T]:
        """
        Pop up to count payloads by ascending score.

        Entries are removed by the store before they are decoded. If one
        fails to decode, it and every entry after it are gone from the queue
        and never returned; the raised DecodingError records where and how
        many.

        Raises:
            EmptyQueueError: If nothing qualifies
            DecodingError: At the first payload that fails to decode
            TransportError: If the store call fails
        """
        results = await self.scripts.batch_pop(key, count)
        if not results:
            raise EmptyQueueError(key)

        self._log("batch_pop results: %s", results)

        payloads = []
        for index, data in enumerate(results):
            try:
                payloads.append(self.serializer.deserialize(data))
            except DecodingError as e:
                lost = len(results) - index
                raise DecodingError(
                    f"batch_pop on '{key}' failed at item {index}, "
                    f"{lost} removed entries not delivered: {e}",
                    index=index,
                    lost=lost,
                ) from e
        return payloads

    def sub(self, key: str, poll_interval: Optional[float] = None) -> AsyncIterator[T]:
        """
        Subscribe to a queue.

        Every poll pops the highest-priority payload and yields it. While the
        queue is empty the subscription sleeps poll_interval seconds between
        polls. Nothing is popped until the consumer asks for the next item.

        Delivery is at-most-once: a payload is removed before it is yielded.

        The subscription is registered when sub() is called, so an unsub(key)
        issued before iteration starts still ends it. Ends when unsub(key) is
        called or the consumer stops iterating.
        """
        interval = self.poll_interval if poll_interval is None else poll_interval

        stop = self._stop_events.get(key)
        if stop is None:
            stop = self._stop_events[key] = asyncio.Event()
        self._active_subs[key] = self._active_subs.get(key, 0) + 1
        logger.debug(f"Subscribed to queue '{key}' (poll every {interval}s)")

        return self._poll(key, stop, interval)

    async def _poll(self, key: str, stop: asyncio.Event, interval: float) -> AsyncIterator[T]:
        try:
            while not stop.is_set():
                try:
                    payload = await self.pop_one(key)
                except EmptyQueueError:
                    try:
                        await asyncio.wait_for(stop.wait(), timeout=interval)
                    except asyncio.TimeoutError:
                        pass
                    continue

                yield payload
        finally:
            self._release(key, stop)
            logger.debug(f"Subscription to queue '{key}' ended")

    async def unsub(self, key: str) -> None:
        """
        Stop every active subscription on key.

        Each subscription exits at its next poll boundary. Unsubscribing a
        key with no subscriptions does nothing.
        """
        stop = self._stop_events.pop(key, None)
        if stop is not None:
            stop.set()
            logger.debug(f"Unsubscribed from queue '{key}'")

    def _release(self, key: str, stop: asyncio.Event) -> None:
        remaining = self._active_subs.get(key, 1) - 1
        if remaining > 0:
            self._active_subs[key] = remaining
            return

        self._active_subs.pop(key, None)
        if self._stop_events.get(key) is stop:
            del self._stop_events[key]

    def _log(self, msg: str, *args: Any) -> None:
        """Report a store response to the observer at its configured level."""
        try:
            level = self.logger.get_level()
            if level == LogLevel.INFO:
                self.logger.info(msg, *args)
            elif level == LogLevel.ERROR:
                self.logger.error(msg, *args)
            elif level == LogLevel.DEBUG:
                self.logger.debug(msg, *args)
            elif level == LogLevel.TRACE:
                self.logger.trace(msg, *args)
        except Exception:
            logger.exception("Queue observer raised, ignoring")
