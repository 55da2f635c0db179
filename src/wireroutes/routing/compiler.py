"""Tree compiler: flattens a nested route tree into host registrations.

The whole tree is compiled once, synchronously, when :class:`WireRoutes` is
constructed. Every node with an action ends up as one call of the form::

    host.<method>(effective_path, *pre_middleware, post_action)
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from wireroutes.config import RoutesConfig
from wireroutes.errors import ConfigurationError
from wireroutes.middleware.inherit import MiddlewareSet, derive
from wireroutes.middleware.post_chain import build_post_action
from wireroutes.middleware.protocol import Scheduler, next_tick
from wireroutes.routing.node import RouteNode, coerce_routes
from wireroutes.routing.path import ROOT, RoutePath, compose_path
from wireroutes.routing.words import PathWordIndex

logger = logging.getLogger("wireroutes.compiler")


class WireRoutes:
    """Registers a declarative route tree with an express-style host.

    The host is any object exposing one callable per HTTP verb (``get``,
    ``post``, ...), each accepting ``(path, *middleware, action)``.

    Usage::

        WireRoutes(
            app,
            [
                {
                    "path": "/api",
                    "pre": authenticate,
                    "routes": [
                        {"path": "users", "method": "get", "action": list_users},
                        {"path": "users", "action": create_user, "post": audit},
                    ],
                },
            ],
            {"method": "post"},
        )

    Paths and middleware are inherited by child routes; the method is not.
    A node without ``method`` uses the configured default.
    """

    __slots__ = ("config", "host", "path_words", "routes", "scheduler")

    def __init__(
        self,
        host: object,
        routes: Iterable[RouteNode | Mapping[str, Any]] | None,
        defaults: RoutesConfig | Mapping[str, Any] | None = None,
        *,
        scheduler: Scheduler = next_tick,
    ) -> None:
        if host is None:
            msg = "A routing host is required."
            raise ConfigurationError(msg)
        nodes = coerce_routes(routes or ())
        if not nodes:
            msg = "At least one route is required."
            raise ConfigurationError(msg)

        self.host = host
        self.routes: tuple[RouteNode, ...] = nodes
        self.config = defaults if isinstance(defaults, RoutesConfig) else RoutesConfig.from_mapping(defaults)
        self.scheduler = scheduler
        self.path_words = PathWordIndex()

        registered = self._load(ROOT, self.routes, MiddlewareSet.empty())
        logger.debug("compiled %d route(s) into %d registration(s)", len(self.routes), registered)

    def _load(
        self,
        parent_path: RoutePath,
        nodes: tuple[RouteNode, ...],
        middlewares: MiddlewareSet,
    ) -> int:
        """Depth-first, pre-order walk. Returns the number of registrations."""
        registered = 0
        for node in nodes:
            path = compose_path(parent_path, node.path)
            self.path_words.add(path)
            branch = derive(middlewares, node)

            if node.routes:
                registered += self._load(path, node.routes, branch)

            if node.registrable:
                self._register(node, path, branch)
                registered += 1

        return registered

    def _register(self, node: RouteNode, path: RoutePath, branch: MiddlewareSet) -> None:
        action = build_post_action(node.action, branch.post, self.scheduler)
        # Ancestors' methods never apply here
        method = node.method or self.config.method

        logger.debug(
            "registering %s %r (%d pre, %d post)",
            method,
            path.value,
            len(branch.pre),
            len(branch.post),
        )
        # An unknown verb is the host's to reject
        getattr(self.host, method)(path.value, *branch.pre, action)


def compile_routes(
    host: object,
    routes: Iterable[RouteNode | Mapping[str, Any]] | None,
    defaults: RoutesConfig | Mapping[str, Any] | None = None,
    *,
    scheduler: Scheduler = next_tick,
) -> WireRoutes:
    """Functional spelling of ``WireRoutes(host, routes, defaults)``."""
    return WireRoutes(host, routes, defaults, scheduler=scheduler)
