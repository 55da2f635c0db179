"""wireroutes: declarative route trees for express-style routing hosts.

Compiles a nested route specification into flat registrations, inheriting
paths and middleware down the tree and wrapping every action with an
asynchronous post-middleware chain.

Basic usage::

    from wireroutes import WireRoutes

    WireRoutes(
        app,
        [{"path": "/api", "routes": [{"path": "users", "action": list_users}]}],
        {"method": "get"},
    )
"""

__version__ = "0.1.0-dev"
__all__ = [
    "ChainState",
    "ConfigurationError",
    "LiteralPath",
    "MiddlewareSet",
    "PathWordIndex",
    "PatternPath",
    "PostAction",
    "PostChain",
    "RouteNode",
    "RoutesConfig",
    "WireRoutes",
    "WireRoutesError",
    "compile_routes",
    "compose_path",
    "next_tick",
    "route",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import wireroutes`` fast while providing a clean top-level API.
    """
    if name in ("WireRoutes", "compile_routes"):
        from wireroutes.routing import compiler as _compiler

        return getattr(_compiler, name)

    if name in ("RouteNode", "route"):
        from wireroutes.routing import node as _node

        return getattr(_node, name)

    if name in ("LiteralPath", "PatternPath", "compose_path"):
        from wireroutes.routing import path as _path

        return getattr(_path, name)

    if name == "PathWordIndex":
        from wireroutes.routing.words import PathWordIndex

        return PathWordIndex

    if name == "RoutesConfig":
        from wireroutes.config import RoutesConfig

        return RoutesConfig

    if name in ("ChainState", "MiddlewareSet", "PostAction", "PostChain", "next_tick"):
        from wireroutes import middleware as _mw

        return getattr(_mw, name)

    if name in ("ConfigurationError", "WireRoutesError"):
        from wireroutes import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
