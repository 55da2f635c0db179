"""Path word index: which literal segment appears at which depth.

Fed with every effective path the compiler produces. Routing never reads
it; it exists for tooling (docs generators, conflict checks) that wants to
know the shape of the whole tree.
"""

from collections.abc import Iterator

from wireroutes.routing.path import SEPARATOR, LiteralPath, RoutePath


class PathWordIndex:
    """Mapping of path word -> set of depths (1-based) it was seen at.

    Usage::

        index = PathWordIndex()
        index.add(LiteralPath("/users/:id/posts"))
        index.depths("users")  # {1}
        index.depths("posts")  # {3}
    """

    __slots__ = ("_words", "param_marker")

    def __init__(self, param_marker: str = ":") -> None:
        self.param_marker = param_marker
        self._words: dict[str, set[int]] = {}

    def add(self, path: RoutePath) -> None:
        """Record the literal words of *path*. Pattern paths are ignored."""
        if not isinstance(path, LiteralPath):
            return

        depth = 1
        for word in path.text.split(SEPARATOR):
            if not word:
                continue
            # Parameters still occupy a level
            if not word.startswith(self.param_marker):
                self._words.setdefault(word, set()).add(depth)
            depth += 1

    def depths(self, word: str) -> frozenset[int]:
        """Depths *word* was seen at; empty if never seen."""
        return frozenset(self._words.get(word, ()))

    def as_dict(self) -> dict[str, frozenset[int]]:
        return {word: frozenset(levels) for word, levels in self._words.items()}

    def __contains__(self, word: object) -> bool:
        return word in self._words

    def __iter__(self) -> Iterator[str]:
        return iter(self._words)

    def __len__(self) -> int:
        return len(self._words)

    def __repr__(self) -> str:
        return f"PathWordIndex({self.as_dict()!r})"
