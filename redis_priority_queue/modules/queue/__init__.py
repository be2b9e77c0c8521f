"""
Queue Module - Black Box Interface

Purpose: Typed priority queue over a Redis sorted set
Interface: push_one(), batch_push(), pop_one(), batch_pop(), sub(), unsub()
Hidden: Encoding, atomic scripts, subscription polling

Can be backed by any store that runs the queue scripts atomically.
"""

from .queue import DEFAULT_POLL_INTERVAL, PriorityQueueClient

__all__ = ["DEFAULT_POLL_INTERVAL", "PriorityQueueClient"]
