"""wireroutes exception hierarchy.

Shared across the compiler, route nodes and configuration so every module
raises and catches the same types.
"""


class WireRoutesError(Exception):
    """Base for all wireroutes-specific errors."""


class ConfigurationError(WireRoutesError):
    """Raised when the route tree or its host is unusable.

    Always raised from ``WireRoutes.__init__`` before anything has been
    registered with the host.
    """
