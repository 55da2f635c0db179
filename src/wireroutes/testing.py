"""Test helpers for wireroutes route trees.

An in-memory routing host that records registrations instead of serving
them, and a scheduler that only runs callbacks when told to.
"""

from collections import deque
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from wireroutes.middleware.post_chain import PostAction

HTTP_VERBS = ("get", "post", "put", "patch", "delete", "head", "options", "all")


@dataclass(frozen=True, slots=True)
class Registration:
    """One ``host.<method>(path, *pre, action)`` call."""

    method: str
    path: object
    pre: tuple[Callable[..., Any], ...]
    action: PostAction


class RecordingHost:
    """Express-style host exposing one registrar per HTTP verb.

    Usage::

        host = RecordingHost()
        WireRoutes(host, routes, {"method": "get"})
        assert host.paths() == ["/api/users"]
    """

    __test__ = False

    __slots__ = ("registrations",)

    def __init__(self) -> None:
        self.registrations: list[Registration] = []

    def __getattr__(self, name: str) -> Callable[..., None]:
        if name not in HTTP_VERBS:
            msg = f"{type(self).__name__!r} has no HTTP verb {name!r}"
            raise AttributeError(msg)

        def register(path: object, *handlers: Any) -> None:
            *pre, action = handlers
            self.registrations.append(Registration(name, path, tuple(pre), action))

        return register

    def paths(self) -> list[object]:
        return [r.path for r in self.registrations]

    def find(self, method: str, path: object) -> Registration:
        """Return the registration for *method* and *path*.

        Raises ``LookupError`` if there is none.
        """
        for registration in self.registrations:
            if registration.method == method and registration.path == path:
                return registration
        msg = f"No registration for {method} {path!r}. Registered: {self.paths()!r}"
        raise LookupError(msg)


class DeferredScheduler:
    """Scheduler that queues callbacks until the test runs them.

    ``run_pending()`` plays one turn: only callbacks queued before the call
    run, anything they schedule waits for the next turn.
    """

    __test__ = False

    __slots__ = ("_queue",)

    def __init__(self) -> None:
        self._queue: deque[Callable[[], object]] = deque()

    def __call__(self, callback: Callable[[], object]) -> None:
        self._queue.append(callback)

    @property
    def pending(self) -> int:
        return len(self._queue)

    def run_pending(self) -> int:
        """Run the callbacks queued so far. Returns how many ran."""
        count = len(self._queue)
        for _ in range(count):
            self._queue.popleft()()
        return count

    def run_all(self, limit: int = 1000) -> int:
        """Run turns until nothing is queued. Returns how many callbacks ran."""
        total = 0
        while self._queue:
            if total >= limit:
                msg = f"Scheduler still busy after {limit} callbacks"
                raise RuntimeError(msg)
            total += self.run_pending()
        return total
