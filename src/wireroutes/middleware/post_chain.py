"""Post-action middleware chain.

Post middleware runs after the action says so, one at a time, each one
scheduled only when the previous one calls its continuation::

    def action(request, response, next, post):
        response.send("done")
        post(request, response)        # starts the chain

    def m1(request, response, next):   # runs on a later loop turn
        next(request, response)        # schedules m2

    def m2(request, response, next):
        next()                         # terminal continuation, a no-op

The chain is an explicit sequence of steps. :class:`PostChain` is built once
per registration; every call of the registered :class:`PostAction` starts a
fresh :class:`PostChainRun`, so concurrent requests share no mutable state.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Awaitable
from dataclasses import dataclass
from enum import Enum
from functools import partial
from typing import Any

from wireroutes._internal.types import Handler, PostMiddleware
from wireroutes.middleware.protocol import Scheduler, next_tick

logger = logging.getLogger("wireroutes.post_chain")


class ChainState(Enum):
    """Where a single run of the chain is."""

    IDLE = "idle"  # entry point not called yet
    WAITING = "waiting"  # a post middleware holds the continuation
    DONE = "done"  # the terminal continuation was reached


@dataclass(frozen=True, slots=True)
class PostChain:
    """The ordered post middleware of one route plus the scheduler to run them."""

    middlewares: tuple[PostMiddleware, ...] = ()
    scheduler: Scheduler = next_tick

    def start(self) -> PostChainRun:
        return PostChainRun(self)

    def __len__(self) -> int:
        return len(self.middlewares)


@dataclass(frozen=True, slots=True)
class Continuation:
    """Step *index* of a run. Calling it schedules ``middlewares[index]``.

    The continuation past the last middleware is terminal: it takes any
    arguments and invokes nothing.
    """

    run: PostChainRun
    index: int

    @property
    def terminal(self) -> bool:
        return self.index >= len(self.run.chain)

    def __call__(self, *args: Any, **kwargs: Any) -> None:
        self.run.advance(self.index, args, kwargs)


class PostChainRun:
    """One execution of a :class:`PostChain`, created per request.

    A middleware that never calls its continuation leaves the run in
    ``ChainState.WAITING`` for good. That is a valid outcome, not an error.
    """

    __slots__ = ("_position", "_state", "_tasks", "chain")

    def __init__(self, chain: PostChain) -> None:
        self.chain = chain
        self._position = 0
        self._state = ChainState.IDLE
        self._tasks: set[asyncio.Task[Any]] = set()

    @property
    def entry(self) -> Continuation:
        """The continuation handed to the action to start the chain."""
        return Continuation(self, 0)

    @property
    def state(self) -> ChainState:
        return self._state

    @property
    def position(self) -> int:
        """Number of post middlewares scheduled so far."""
        return self._position

    def advance(self, index: int, args: tuple[Any, ...], kwargs: dict[str, Any]) -> None:
        """Schedule the middleware at *index*, or finish if there is none."""
        if index >= len(self.chain):
            if self._state is not ChainState.DONE:
                logger.debug("post chain finished after %d middleware(s)", self._position)
            self._state = ChainState.DONE
            return

        middleware = self.chain.middlewares[index]
        following = Continuation(self, index + 1)
        self._state = ChainState.WAITING
        self._position = index + 1
        self.chain.scheduler(partial(self._invoke, middleware, (*args, following), kwargs))

    def _invoke(
        self,
        middleware: PostMiddleware,
        args: tuple[Any, ...],
        kwargs: dict[str, Any],
    ) -> None:
        result = middleware(*args, **kwargs)
        if not inspect.isawaitable(result):
            return

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # No loop on this thread: the injected scheduler owns the turn
            asyncio.run(_drive(result))
            return

        # Keep a strong ref until the task is done
        task = loop.create_task(_drive(result))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)


async def _drive(awaitable: Awaitable[Any]) -> Any:
    return await awaitable


class PostAction:
    """The callable registered with the host in place of the raw action.

    Calls ``action(*args, post, **kwargs)`` where ``post`` is the entry
    point of a fresh post chain run. If the action never calls ``post``,
    no post middleware runs.
    """

    __slots__ = ("action", "chain")

    def __init__(self, action: Handler, chain: PostChain) -> None:
        self.action = action
        self.chain = chain

    @property
    def __name__(self) -> str:
        return getattr(self.action, "__name__", type(self.action).__name__)

    def __call__(self, *args: Any, **kwargs: Any) -> Any:
        run = self.chain.start()
        return self.action(*args, run.entry, **kwargs)

    def __repr__(self) -> str:
        return f"PostAction({self.__name__}, post={len(self.chain)})"


def build_post_action(
    action: Handler,
    post: tuple[PostMiddleware, ...] = (),
    scheduler: Scheduler = next_tick,
) -> PostAction:
    """Wrap *action* so it receives the entry point of its post chain."""
    return PostAction(action, PostChain(tuple(post), scheduler))
