"""Compilation configuration.

RoutesConfig is a frozen dataclass. Immutable after creation, no string-key
dict lookups once the tree compiler has it.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class RoutesConfig:
    """Defaults applied to every route that does not override them.

    Only the HTTP method is configurable. It is *not* inherited from
    ancestor nodes; a node without ``method`` always falls back here::

        config = RoutesConfig(method="get")
    """

    method: str | None = None

    @classmethod
    def from_mapping(cls, options: Mapping[str, Any] | None) -> RoutesConfig:
        """Build a config from a flat option mapping. Unknown keys are ignored."""
        if not options:
            return cls()
        return cls(method=options.get("method"))
