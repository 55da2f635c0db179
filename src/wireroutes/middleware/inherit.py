"""Middleware inheritance down the route tree.

Every level of the tree gets its own :class:`MiddlewareSet`, copied from the
parent and extended with the node's own middleware. Sets are immutable, so
sibling subtrees can never see each other's additions.
"""

from __future__ import annotations

from dataclasses import dataclass

from wireroutes._internal.types import Middleware, PostMiddleware
from wireroutes.routing.node import RouteNode


@dataclass(frozen=True, slots=True)
class MiddlewareSet:
    """Inherited middleware for one branch, in root-to-leaf order."""

    pre: tuple[Middleware, ...] = ()
    post: tuple[PostMiddleware, ...] = ()

    @classmethod
    def empty(cls) -> MiddlewareSet:
        return cls()


def derive(parent: MiddlewareSet, node: RouteNode) -> MiddlewareSet:
    """Return *parent* extended with *node*'s own pre and post middleware.

    Ancestors come first: an ancestor's post middleware runs before a
    descendant's in the post chain, just like pre middleware.
    """
    return MiddlewareSet(
        pre=(*parent.pre, *node.pre),
        post=(*parent.post, *node.post),
    )
