from typing import Any, Union

from attrs import field

from clispec.utils import frozen, to_tuple_converter

__all__ = ["HelpRequest", "ManpageRequest", "ParseOk", "ParseResult", "VersionRequest"]


@frozen
class ParseOk:
    """Successful parse.

    ``config`` maps each destination key to its value;
    ``command_path`` lists the subcommands that were dispatched, outermost first.
    """

    config: dict[str, Any] = field(factory=dict, hash=False)
    command_path: tuple[str, ...] = field(default=(), converter=to_tuple_converter)


@frozen
class HelpRequest:
    """``--help`` was given; ``command_path`` is the level it was given at."""

    command_path: tuple[str, ...] = field(default=(), converter=to_tuple_converter)


@frozen
class VersionRequest:
    """``--version`` was given at the root."""


@frozen
class ManpageRequest:
    """``--help-man`` was given; ``command_path`` is the level it was given at."""

    command_path: tuple[str, ...] = field(default=(), converter=to_tuple_converter)


ParseResult = Union[ParseOk, HelpRequest, VersionRequest, ManpageRequest]
