__version__ = "0.1.0"

__all__ = [
    "App",
    "ArgSpec",
    "ClispecError",
    "CoercionError",
    "CombinedShortOptionError",
    "Command",
    "CommandSpec",
    "EnvBinding",
    "EnvVarError",
    "ErrorPanel",
    "Flag",
    "FlagGroup",
    "FlagGroupEntry",
    "HelpRequest",
    "ListType",
    "ManpageRequest",
    "MissingValueError",
    "Option",
    "PairType",
    "ParseOk",
    "ParseResult",
    "Positional",
    "Root",
    "RootSpec",
    "ScalarType",
    "SchemaError",
    "TripleType",
    "UNSET",
    "UnexpectedPositionalError",
    "UnknownCommandError",
    "UnknownOptionError",
    "ValidationError",
    "VersionRequest",
    "VersionUnavailableError",
    "compile",
    "load_schema",
    "mapping_env",
    "no_env",
    "os_env_lookup",
    "parse",
    "validators",
]

from clispec import validators
from clispec._env_var import mapping_env, no_env, os_env_lookup
from clispec.argument import ArgSpec
from clispec.bind import parse
from clispec.command import CommandSpec, RootSpec, compile
from clispec.core import App
from clispec.exceptions import (
    ClispecError,
    CoercionError,
    CombinedShortOptionError,
    EnvVarError,
    MissingValueError,
    SchemaError,
    UnexpectedPositionalError,
    UnknownCommandError,
    UnknownOptionError,
    ValidationError,
    VersionUnavailableError,
)
from clispec.loader import load_schema
from clispec.panel import ErrorPanel
from clispec.result import HelpRequest, ManpageRequest, ParseOk, ParseResult, VersionRequest
from clispec.types import (
    Command,
    EnvBinding,
    Flag,
    FlagGroup,
    FlagGroupEntry,
    ListType,
    Option,
    PairType,
    Positional,
    Root,
    ScalarType,
    TripleType,
)
from clispec.utils import UNSET
