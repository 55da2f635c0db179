"""RouteNode: one entry of the declarative route tree.

Nodes are normalized at the boundary: ``pre`` and ``post`` always hold
tuples, ``path`` is a tagged :data:`RoutePath` (or ``None`` to inherit the
parent's), and ``routes`` is a tuple of child nodes. The rest of the package
never sees the "single callable or list" dual form.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from wireroutes._internal.types import Handler, Middleware, PostMiddleware
from wireroutes.errors import ConfigurationError
from wireroutes.routing.path import RoutePath, as_path

NODE_KEYS = frozenset({"path", "action", "pre", "post", "method", "routes"})


@dataclass(frozen=True, slots=True)
class RouteNode:
    """A normalized route definition.

    A node with an ``action`` is registered with the host. A node with
    ``routes`` mounts its children under its path and middleware. A node
    with neither is inert: only its path gets indexed.
    """

    path: RoutePath | None = None
    action: Handler | None = None
    pre: tuple[Middleware, ...] = ()
    post: tuple[PostMiddleware, ...] = ()
    method: str | None = None
    routes: tuple[RouteNode, ...] = ()

    @property
    def registrable(self) -> bool:
        return self.action is not None

    @property
    def inert(self) -> bool:
        return self.action is None and not self.routes

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any]) -> RouteNode:
        """Build a node (and its subtree) from a plain mapping::

            RouteNode.from_mapping({
                "path": "/api",
                "pre": auth,
                "routes": [{"path": "users", "method": "get", "action": list_users}],
            })
        """
        unknown = set(mapping) - NODE_KEYS
        if unknown:
            msg = (
                f"Unknown route keys {sorted(unknown)!r}. "
                f"Supported keys: {sorted(NODE_KEYS)!r}"
            )
            raise ConfigurationError(msg)
        return route(
            mapping.get("path"),
            mapping.get("action"),
            pre=mapping.get("pre"),
            post=mapping.get("post"),
            method=mapping.get("method"),
            routes=mapping.get("routes"),
        )


def route(
    path: object = None,
    action: Handler | None = None,
    *,
    pre: Middleware | Iterable[Middleware] | None = None,
    post: PostMiddleware | Iterable[PostMiddleware] | None = None,
    method: str | None = None,
    routes: Iterable[RouteNode | Mapping[str, Any]] | None = None,
) -> RouteNode:
    """Build a :class:`RouteNode`, accepting the loose input forms.

    ``pre``/``post`` take a single callable or a sequence of them; ``path``
    takes a string, a pattern object or ``None``.
    """
    return RouteNode(
        path=as_path(path),
        action=action,
        pre=_as_chain(pre),
        post=_as_chain(post),
        method=method or None,
        routes=coerce_routes(routes) if routes else (),
    )


def coerce_routes(
    routes: Iterable[RouteNode | Mapping[str, Any]],
) -> tuple[RouteNode, ...]:
    """Normalize a sequence of nodes and/or mappings into a node tuple."""
    nodes: list[RouteNode] = []
    for entry in routes:
        match entry:
            case RouteNode():
                nodes.append(entry)
            case Mapping():
                nodes.append(RouteNode.from_mapping(entry))
            case _:
                msg = f"Route entries must be RouteNode or mapping, got {type(entry).__name__}"
                raise ConfigurationError(msg)
    return tuple(nodes)


def _as_chain(
    value: Callable[..., Any] | Iterable[Callable[..., Any]] | None,
) -> tuple[Callable[..., Any], ...]:
    if value is None:
        return ()
    if callable(value):
        return (value,)
    return tuple(value)
