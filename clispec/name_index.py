from collections.abc import Iterable, Iterator
from enum import Enum, auto

from clispec.argument import ArgSpec, FlagGroupSpec, FlagSpec, OptionSpec
from clispec.utils import cli_name, frozen

__all__ = ["Match", "MatchKind", "NameIndex"]


class MatchKind(Enum):
    FLAG = auto()
    OPTION = auto()
    FLAG_GROUP = auto()


@frozen
class Match:
    arg_index: int
    kind: MatchKind
    entry_index: int = 0


class NameIndex:
    """Lookup from canonical CLI spelling (``-x`` / ``--xxx``) to the argument it names.

    Built per command level; positionals are never indexed.
    """

    def __init__(self):
        self._entries: dict[str, Match] = {}

    @classmethod
    def build(cls, args: Iterable[ArgSpec]) -> "NameIndex":
        index = cls()
        for i, spec in enumerate(args):
            if isinstance(spec, FlagSpec):
                for name in spec.names:
                    index.insert(cli_name(name), Match(i, MatchKind.FLAG))
            elif isinstance(spec, OptionSpec):
                for name in spec.names:
                    index.insert(cli_name(name), Match(i, MatchKind.OPTION))
            elif isinstance(spec, FlagGroupSpec):
                for e, entry in enumerate(spec.entries):
                    for name in entry.names:
                        index.insert(cli_name(name), Match(i, MatchKind.FLAG_GROUP, e))
        return index

    def insert(self, name: str, match: Match) -> None:
        # First registration wins.
        self._entries.setdefault(name, match)

    def lookup(self, name: str) -> Match | None:
        return self._entries.get(name)

    def __contains__(self, name: str) -> bool:
        return name in self._entries

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)
