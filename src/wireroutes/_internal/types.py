"""Shared type aliases used across wireroutes modules."""

from collections.abc import Callable
from typing import Any, TypeAlias

# Route action: (request, response, next, post_action) for express-style hosts
Handler: TypeAlias = Callable[..., Any]

# Pre middleware, handed to the host untouched
Middleware: TypeAlias = Callable[..., Any]

# Post middleware: receives the arguments given to its continuation plus ``next``
PostMiddleware: TypeAlias = Callable[..., Any]
