"""Route paths: literal text or an opaque pattern.

Literal paths concatenate down the route tree. Pattern paths (usually a
compiled ``re.Pattern``) cannot be prefixed, so a pattern replaces whatever
path its parent had and is inherited by its descendants as a unit.
"""

from dataclasses import dataclass
from typing import TypeAlias

SEPARATOR = "/"


@dataclass(frozen=True, slots=True)
class LiteralPath:
    """A plain path string, e.g. ``/users`` or ``users/:id``."""

    text: str

    @property
    def value(self) -> str:
        return self.text


@dataclass(frozen=True, slots=True)
class PatternPath:
    """A host-specific path pattern, passed to the host untouched."""

    pattern: object

    @property
    def value(self) -> object:
        return self.pattern


RoutePath: TypeAlias = LiteralPath | PatternPath

ROOT = LiteralPath("")


def as_path(value: object) -> RoutePath | None:
    """Normalize a user-supplied path.

    ``None`` and ``""`` mean "no path of my own" and return ``None``;
    strings become :class:`LiteralPath`; anything else is a pattern.
    """
    match value:
        case None | "":
            return None
        case LiteralPath() | PatternPath():
            return value
        case str():
            return LiteralPath(value)
        case _:
            return PatternPath(value)


def compose_path(parent: RoutePath, child: RoutePath | None) -> RoutePath:
    """Return the effective path of *child* mounted under *parent*.

    Examples::

        compose_path(LiteralPath("/a"), LiteralPath("b"))   -> LiteralPath("/a/b")
        compose_path(LiteralPath("/a"), LiteralPath("/b"))  -> LiteralPath("/a/b")
        compose_path(LiteralPath("/a"), None)               -> LiteralPath("/a")
        compose_path(LiteralPath("/a"), PatternPath(rx))    -> PatternPath(rx)
    """
    match (parent, child):
        case (_, None):
            return parent
        case (LiteralPath(text=prefix), LiteralPath(text=fragment)):
            if fragment.startswith(SEPARATOR):
                return LiteralPath(prefix + fragment)
            return LiteralPath(prefix + SEPARATOR + fragment)
        case _:
            # A pattern on either side: the child's own value wins as-is
            return child
