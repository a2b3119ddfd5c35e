"""Declarative schema types.

These classes describe a command line; they hold no behavior of their own.
:func:`clispec.compile` turns them into executable specs.
"""

from collections.abc import Sequence
from enum import Enum
from typing import Any, Union

from attrs import field

from clispec.exceptions import SchemaError
from clispec.utils import UNSET, doc_converter, frozen, optional_to_tuple_converter, to_tuple_converter

__all__ = [
    "Argument",
    "Command",
    "ConfigFile",
    "ConfigPaths",
    "EnvBinding",
    "Flag",
    "FlagGroup",
    "FlagGroupEntry",
    "ListType",
    "Option",
    "PairType",
    "Positional",
    "Root",
    "ScalarType",
    "TripleType",
    "TypeSpec",
]


class ScalarType(Enum):
    STRING = "string"
    INT = "int"
    FLOAT = "float"
    BOOL = "bool"
    ENUM = "enum"
    FILE = "file"
    DIR = "dir"
    PATH = "path"

    @property
    def is_filesystem(self) -> bool:
        return self in (ScalarType.FILE, ScalarType.DIR, ScalarType.PATH)


def to_scalar_type(value: Any) -> ScalarType:
    if isinstance(value, ScalarType):
        return value
    if isinstance(value, str):
        try:
            return ScalarType(value)
        except ValueError:
            raise SchemaError(f"unknown scalar type: {value!r}") from None
    raise SchemaError(f"compound types may only contain scalar elements, got {value!r}")


def _names_converter(value: str | Sequence[str]) -> tuple[str, ...]:
    names = to_tuple_converter(value)
    if not names:
        raise SchemaError("argument names must not be empty")
    for name in names:
        if not isinstance(name, str) or not name:
            raise SchemaError(f"invalid argument name: {name!r}")
    return names


@frozen
class ListType:
    element: ScalarType = field(converter=to_scalar_type)
    separator: str | None = None


@frozen
class PairType:
    first: ScalarType = field(converter=to_scalar_type)
    second: ScalarType = field(converter=to_scalar_type)
    separator: str | None = None


@frozen
class TripleType:
    first: ScalarType = field(converter=to_scalar_type)
    second: ScalarType = field(converter=to_scalar_type)
    third: ScalarType = field(converter=to_scalar_type)
    separator: str | None = None


TypeSpec = Union[ScalarType, ListType, PairType, TripleType]


def _type_spec_converter(value: Any) -> TypeSpec:
    if isinstance(value, ListType | PairType | TripleType):
        return value
    return to_scalar_type(value)


@frozen
class EnvBinding:
    """Environment variable that may supply an argument's value."""

    var: str
    doc: tuple[str, ...] | None = field(default=None, converter=optional_to_tuple_converter)


def _env_converter(value: None | str | EnvBinding) -> EnvBinding | None:
    if value is None or isinstance(value, EnvBinding):
        return value
    return EnvBinding(value)


@frozen(kw_only=True)
class Flag:
    """Boolean switch; counted when ``repeated``."""

    names: tuple[str, ...] = field(converter=_names_converter)
    doc: tuple[str, ...] = field(default=(), converter=doc_converter)
    dest: str | None = None
    env: EnvBinding | None = field(default=None, converter=_env_converter)
    repeated: bool = False
    deprecated: str | None = None


@frozen(kw_only=True)
class FlagGroupEntry:
    names: tuple[str, ...] = field(converter=_names_converter)
    value: Any
    doc: tuple[str, ...] = field(default=(), converter=doc_converter)


@frozen(kw_only=True)
class FlagGroup:
    """Mutually exclusive flags that each write a fixed value into ``dest``."""

    dest: str
    flags: tuple[FlagGroupEntry, ...] = field(converter=to_tuple_converter)
    default: Any = None
    doc: tuple[str, ...] = field(default=(), converter=doc_converter)
    repeated: bool = False


@frozen(kw_only=True)
class Option:
    """Named argument that takes a value.

    ``default`` is :obj:`~clispec.UNSET` when no default is declared;
    a default of :obj:`None` is a declared value.
    """

    names: tuple[str, ...] = field(converter=_names_converter)
    type: TypeSpec = field(default=ScalarType.STRING, converter=_type_spec_converter)
    doc: tuple[str, ...] = field(default=(), converter=doc_converter)
    docv: str | None = None
    default: Any = UNSET
    required: bool = False
    repeated: bool = False
    must_exist: bool = False
    choices: tuple[str, ...] | None = field(default=None, converter=optional_to_tuple_converter)
    dest: str | None = None
    env: EnvBinding | None = field(default=None, converter=_env_converter)


@frozen(kw_only=True)
class Positional:
    name: str
    type: TypeSpec = field(default=ScalarType.STRING, converter=_type_spec_converter)
    doc: tuple[str, ...] = field(default=(), converter=doc_converter)
    docv: str | None = None
    default: Any = UNSET
    required: bool = False
    repeated: bool = False
    must_exist: bool = False


Argument = Union[Flag, FlagGroup, Option, Positional]


@frozen(kw_only=True)
class Command:
    name: str
    doc: tuple[str, ...] = field(default=(), converter=doc_converter)
    args: tuple[Argument, ...] = field(default=(), converter=to_tuple_converter)
    commands: tuple["Command", ...] = field(default=(), converter=to_tuple_converter)


@frozen(kw_only=True)
class ConfigPaths:
    system: str | None = None
    user: str | None = None
    local: str | None = None


@frozen(kw_only=True)
class ConfigFile:
    """Runtime configuration file accepted by the described program."""

    format: str
    paths: ConfigPaths | None = None


@frozen(kw_only=True)
class Root(Command):
    version: str | None = None
    config: ConfigFile | None = None
