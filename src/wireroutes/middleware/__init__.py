"""Middleware: pre/post inheritance and the asynchronous post chain.

Pre middleware is handed to the host as-is. Post middleware runs after the
action starts it, one step per loop turn:
    def post_mw(*args, next) -> None

Building blocks:
    MiddlewareSet -- inherited pre/post middleware of one tree branch
    PostChain -- ordered post middleware plus the scheduler that runs them
    PostAction -- the action wrapper registered with the host
"""

from wireroutes.middleware.inherit import MiddlewareSet, derive
from wireroutes.middleware.post_chain import (
    ChainState,
    Continuation,
    PostAction,
    PostChain,
    PostChainRun,
    build_post_action,
)
from wireroutes.middleware.protocol import Scheduler, next_tick

__all__ = [
    "ChainState",
    "Continuation",
    "MiddlewareSet",
    "PostAction",
    "PostChain",
    "PostChainRun",
    "Scheduler",
    "build_post_action",
    "derive",
    "next_tick",
]
