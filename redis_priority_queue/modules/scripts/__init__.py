"""
Scripts Module - Black Box Interface

Purpose: Atomic queue operations executed inside the store
Interface: push_one(), batch_push(), pop_one(), batch_pop()
Hidden: Lua sources, script loading, SHA cache, reply normalisation

Any store able to run a script atomically against a sorted set can back it.
"""

from .scripts import (
    POP_MAX_SCORE,
    POP_MIN_SCORE,
    SCRIPT_BATCH_POP,
    SCRIPT_BATCH_PUSH,
    SCRIPT_POP_ONE,
    SCRIPT_PUSH_ONE,
    ScriptProtocol,
)

__all__ = [
    "POP_MAX_SCORE",
    "POP_MIN_SCORE",
    "SCRIPT_BATCH_POP",
    "SCRIPT_BATCH_PUSH",
    "SCRIPT_POP_ONE",
    "SCRIPT_PUSH_ONE",
    "ScriptProtocol",
]
