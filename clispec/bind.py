"""Parse command-line tokens against a compiled :class:`~clispec.command.RootSpec`."""

import logging
import shlex
import sys
from collections.abc import Iterable, Sequence
from copy import deepcopy
from typing import Any

from attrs import define, field

from clispec._env_var import EnvLookup, env_var_bool, os_env_lookup
from clispec.argument import ArgSpec, FlagGroupSpec, FlagSpec, OptionSpec, PositionalSpec
from clispec.command import CommandSpec, RootSpec
from clispec.exceptions import (
    CoercionError,
    CombinedShortOptionError,
    EnvVarError,
    MissingValueError,
    UnexpectedPositionalError,
    UnknownCommandError,
    UnknownOptionError,
    VersionUnavailableError,
)
from clispec.name_index import Match, MatchKind, NameIndex
from clispec.result import HelpRequest, ManpageRequest, ParseOk, ParseResult, VersionRequest
from clispec.token import HELP_FLAG, MANPAGE_FLAG, VERSION_FLAG, TokenKind, classify_token, split_long_option
from clispec.utils import UNSET, cli_name

__all__ = ["normalize_tokens", "parse", "parse_level", "post_process"]

logger = logging.getLogger(__name__)


def normalize_tokens(tokens: None | str | Iterable[str]) -> list[str]:
    if tokens is None:
        tokens = sys.argv[1:]  # Remove the executable
    elif isinstance(tokens, str):
        tokens = shlex.split(tokens)
    else:
        tokens = list(tokens)
    return tokens


@define
class LevelOk:
    """Raw result of parsing one level and everything below it."""

    config: dict[str, Any]
    command_path: list[str] = field(factory=list)
    next_pos: int = 0


def _store(config: dict[str, Any], dest: str, value: Any, repeated: bool) -> None:
    if repeated:
        config.setdefault(dest, []).append(value)
    else:
        config[dest] = value


def _apply_flag(
    config: dict[str, Any],
    args: Sequence[ArgSpec],
    counts: list[int],
    match: Match,
    token: str,
) -> None:
    counts[match.arg_index] += 1
    spec = args[match.arg_index]
    if match.kind is MatchKind.FLAG:
        assert isinstance(spec, FlagSpec)
        if spec.deprecated:
            logger.warning("%s is deprecated: %s", token, spec.deprecated)
        config[spec.dest] = counts[match.arg_index] if spec.repeated else True
    else:
        assert isinstance(spec, FlagGroupSpec)
        _store(config, spec.dest, deepcopy(spec.entries[match.entry_index].value), spec.repeated)


def _apply_option(
    config: dict[str, Any],
    spec: OptionSpec,
    token: str,
    raw: str,
    command_path: Sequence[str],
) -> None:
    try:
        value = spec.converter.parse(raw)
    except CoercionError as e:
        raise CoercionError(msg=e.msg, option=token, command_chain=command_path) from e
    _store(config, spec.dest, value, spec.repeated)


def parse_level(
    args: Sequence[ArgSpec],
    commands: Sequence[CommandSpec],
    tokens: Sequence[str],
    start: int = 0,
    is_root: bool = True,
    version: str | None = None,
) -> LevelOk | HelpRequest | VersionRequest | ManpageRequest:
    """Parse ``tokens[start:]`` against one command level, descending into subcommands.

    Parameters
    ----------
    args: Sequence[ArgSpec]
        This level's compiled arguments.
    commands: Sequence[CommandSpec]
        This level's subcommands.
    tokens: Sequence[str]
        Complete token list.
    start: int
        Index of the first token belonging to this level.
    is_root: bool
        ``--version`` is only recognized at the root.
    version: str | None
        Root version string.

    Returns
    -------
    LevelOk | HelpRequest | VersionRequest | ManpageRequest
        Un-post-processed config, or a short-circuit request.
    """
    index = NameIndex.build(args)
    config: dict[str, Any] = {}
    command_path: list[str] = []
    counts = [0] * len(args)
    positional_indices = [i for i, spec in enumerate(args) if isinstance(spec, PositionalSpec)]
    pos_cursor = 0
    terminated = False

    i = start
    while i < len(tokens):
        token = tokens[i]

        if not terminated:
            kind = classify_token(token)

            if kind is TokenKind.DOUBLE_DASH:
                terminated = True
                i += 1
                continue

            if token == HELP_FLAG:
                return HelpRequest(command_path)
            if token == MANPAGE_FLAG:
                return ManpageRequest(command_path)
            if is_root and token == VERSION_FLAG:
                if version is None:
                    raise VersionUnavailableError()
                return VersionRequest()

            if kind is TokenKind.LONG_OPTION:
                name, inline_value = split_long_option(token)
                option_token = "--" + name
                match = index.lookup(option_token)
                if match is None:
                    raise UnknownOptionError(token=option_token, candidates=list(index), command_chain=command_path)

                if match.kind is MatchKind.OPTION:
                    if inline_value is None:
                        i += 1
                        if i >= len(tokens):
                            raise MissingValueError(token=option_token, command_chain=command_path)
                        inline_value = tokens[i]
                    spec = args[match.arg_index]
                    assert isinstance(spec, OptionSpec)
                    _apply_option(config, spec, option_token, inline_value, command_path)
                else:
                    _apply_flag(config, args, counts, match, option_token)
                i += 1
                continue

            if kind is TokenKind.SHORT_GROUP:
                for c, char in enumerate(token[1:], start=1):
                    short_token = cli_name(char)
                    match = index.lookup(short_token)
                    if match is None:
                        raise UnknownOptionError(token=short_token, candidates=list(index), command_chain=command_path)

                    if match.kind is MatchKind.OPTION:
                        if c != len(token) - 1:
                            raise CombinedShortOptionError(token=short_token, command_chain=command_path)
                        i += 1
                        if i >= len(tokens):
                            raise MissingValueError(token=short_token, command_chain=command_path)
                        spec = args[match.arg_index]
                        assert isinstance(spec, OptionSpec)
                        _apply_option(config, spec, short_token, tokens[i], command_path)
                    else:
                        _apply_flag(config, args, counts, match, short_token)
                i += 1
                continue

            # Not an option; maybe a subcommand.
            command = next((x for x in commands if x.name == token), None)
            if command is not None:
                logger.debug("Dispatching into subcommand %r at token %d.", command.name, i)
                sub_result = parse_level(command.args, command.commands, tokens, i + 1, False, None)
                if isinstance(sub_result, HelpRequest):
                    return HelpRequest([*command_path, command.name, *sub_result.command_path])
                elif isinstance(sub_result, ManpageRequest):
                    return ManpageRequest([*command_path, command.name, *sub_result.command_path])
                elif isinstance(sub_result, VersionRequest):  # pragma: no cover
                    return sub_result

                # Inner levels overwrite colliding keys.
                config.update(sub_result.config)
                command_path.append(command.name)
                command_path.extend(sub_result.command_path)
                i = sub_result.next_pos
                continue

        # Positional.
        if pos_cursor >= len(positional_indices):
            if commands and not terminated:
                raise UnknownCommandError(
                    token=token,
                    candidates=[x.name for x in commands],
                    command_chain=command_path,
                )
            raise UnexpectedPositionalError(token=token, command_chain=command_path)

        spec = args[positional_indices[pos_cursor]]
        assert isinstance(spec, PositionalSpec)
        try:
            value = spec.converter.parse(token)
        except CoercionError as e:
            raise CoercionError(msg=e.msg, positional=spec.name, command_chain=command_path) from e
        _store(config, spec.dest, value, spec.repeated)
        if not spec.repeated:
            pos_cursor += 1
        i += 1

    return LevelOk(config, command_path, i)


def apply_env(config: dict[str, Any], args: Iterable[ArgSpec], env: EnvLookup) -> None:
    """Fill still-absent values from bound environment variables."""
    for spec in args:
        if isinstance(spec, FlagSpec):
            current = config.get(spec.dest, UNSET)
            if current is not UNSET and (spec.repeated or current is not False):
                continue  # Set by CLI
            if spec.env is None:
                continue
            val = env(spec.env.var)
            if val is None:
                continue
            try:
                value = env_var_bool(val)
            except ValueError as e:
                raise EnvVarError(msg=str(e), var=spec.env.var) from None
            logger.debug("%s set from environment variable %s.", spec.dest, spec.env.var)
            config[spec.dest] = int(value) if spec.repeated else value
        elif isinstance(spec, OptionSpec):
            if spec.dest in config or spec.env is None:
                continue
            val = env(spec.env.var)
            if val is None:
                continue
            try:
                value = spec.converter.parse(val)
            except CoercionError as e:
                raise EnvVarError(msg=e.msg, var=spec.env.var) from e
            logger.debug("%s set from environment variable %s.", spec.dest, spec.env.var)
            config[spec.dest] = [value] if spec.repeated else value


def apply_defaults(config: dict[str, Any], args: Iterable[ArgSpec]) -> None:
    """Fill still-absent values from declared defaults.

    Options and positionals without a declared default stay absent.
    """
    for spec in args:
        if spec.dest in config:
            continue
        if isinstance(spec, FlagSpec):
            config[spec.dest] = 0 if spec.repeated else False
        elif isinstance(spec, FlagGroupSpec):
            config[spec.dest] = deepcopy(spec.default)
        elif spec.default is not UNSET:
            config[spec.dest] = deepcopy(spec.default)


def run_validators(config: dict[str, Any], args: Iterable[ArgSpec]) -> None:
    for spec in args:
        if isinstance(spec, OptionSpec | PositionalSpec):
            spec.validator.check(spec.dest, config.get(spec.dest, UNSET))


def post_process(
    config: dict[str, Any],
    root: CommandSpec,
    command_path: Sequence[str],
    env: EnvLookup,
) -> None:
    """Apply env fallback, defaults and validation to every level on ``command_path``.

    Levels are processed outermost first; each level runs all three steps before the next.
    """
    for level in root.resolve(command_path):
        apply_env(config, level.args, env)
        apply_defaults(config, level.args)
        run_validators(config, level.args)


def parse(
    spec: RootSpec,
    args: None | str | Iterable[str] = None,
    env: EnvLookup | None = None,
) -> ParseResult:
    """Parse command-line tokens into a configuration.

    Safe to call any number of times, from any number of threads, on the same ``spec``.

    Parameters
    ----------
    spec: RootSpec
        Compiled schema, see :func:`clispec.compile`.
    args: None | str | Iterable[str]
        Tokens to parse. A string is split with :func:`shlex.split`.
        Defaults to ``sys.argv[1:]``.
    env: EnvLookup | None
        Environment variable lookup. Defaults to the process environment.

    Raises
    ------
    ClispecError
        The tokens are not a valid invocation.

    Returns
    -------
    ParseResult
        :class:`ParseOk`, or a :class:`HelpRequest` / :class:`VersionRequest` / :class:`ManpageRequest`.
    """
    tokens = normalize_tokens(args)
    if env is None:
        env = os_env_lookup

    result = parse_level(spec.args, spec.commands, tokens, 0, True, spec.version)
    if not isinstance(result, LevelOk):
        return result

    post_process(result.config, spec, result.command_path, env)
    return ParseOk(result.config, result.command_path)
