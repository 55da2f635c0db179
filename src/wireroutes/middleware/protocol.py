"""Scheduler capability and continuation shapes for post middleware.

A post middleware is any callable matching::

    def audit(request, response, next) -> None:
        log_request(request, response)
        next(request, response)

It receives whatever arguments its continuation was called with, plus
``next`` appended last. Calling ``next`` hands control to the following post
middleware; not calling it ends the chain. ``async def`` post middleware is
accepted too.

A scheduler is any callable that runs a zero-argument callback *after* the
current synchronous turn of work. The default uses the running asyncio loop.
"""

import asyncio
from collections.abc import Callable
from typing import TypeAlias

# Run a callback once the current unit of work is over
Scheduler: TypeAlias = Callable[[Callable[[], object]], object]


def next_tick(callback: Callable[[], object]) -> None:
    """Schedule *callback* on the running event loop's next iteration.

    Raises ``RuntimeError`` when called outside a running loop; hosts
    without one must pass their own scheduler to ``WireRoutes``.
    """
    asyncio.get_running_loop().call_soon(callback)
