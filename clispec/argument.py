"""Compiled argument specs.

A spec is the executable form of a :mod:`clispec.types` argument: the
destination key is resolved and the converter/validator are bound.
Specs are never mutated by parsing.
"""

from collections.abc import Iterable, Sequence
from typing import Any, Union

from attrs import field

from clispec._convert import Converter, make_converter
from clispec.types import Argument, EnvBinding, Flag, FlagGroup, Option, Positional
from clispec.utils import UNSET, frozen
from clispec.validators import from_option, from_positional

__all__ = [
    "ArgSpec",
    "EnvSpec",
    "FlagGroupEntrySpec",
    "FlagGroupSpec",
    "FlagSpec",
    "OptionSpec",
    "PositionalSpec",
    "compile_argument",
    "compile_arguments",
    "resolve_dest",
    "resolve_env",
]


@frozen
class EnvSpec:
    var: str
    doc: tuple[str, ...] | None = None


@frozen(kw_only=True)
class FlagSpec:
    names: tuple[str, ...]
    dest: str
    repeated: bool = False
    env: EnvSpec | None = None
    deprecated: str | None = None
    doc: tuple[str, ...] = ()


@frozen(kw_only=True)
class FlagGroupEntrySpec:
    names: tuple[str, ...]
    value: Any
    doc: tuple[str, ...] = ()


@frozen(kw_only=True)
class FlagGroupSpec:
    dest: str
    default: Any
    entries: tuple[FlagGroupEntrySpec, ...]
    repeated: bool = False
    doc: tuple[str, ...] = ()


@frozen(kw_only=True)
class OptionSpec:
    names: tuple[str, ...]
    dest: str
    converter: Converter
    validator: Any
    default: Any = UNSET
    repeated: bool = False
    env: EnvSpec | None = None
    docv: str | None = None
    doc: tuple[str, ...] = ()

    @property
    def display_docv(self) -> str:
        return self.docv or self.converter.docv


@frozen(kw_only=True)
class PositionalSpec:
    name: str
    dest: str
    converter: Converter
    validator: Any
    default: Any = UNSET
    repeated: bool = False
    docv: str | None = None
    doc: tuple[str, ...] = ()

    @property
    def display_docv(self) -> str:
        return self.docv or self.name.upper()


ArgSpec = Union[FlagSpec, FlagGroupSpec, OptionSpec, PositionalSpec]


def resolve_dest(names: Sequence[str]) -> str:
    """First long (multi-character) name, falling back to the first name."""
    for name in names:
        if len(name) > 1:
            return name
    return names[0]


def resolve_env(binding: EnvBinding | str | None) -> EnvSpec | None:
    if binding is None:
        return None
    if isinstance(binding, str):
        return EnvSpec(binding)
    return EnvSpec(binding.var, binding.doc)


def compile_argument(argument: Argument) -> ArgSpec:
    if isinstance(argument, Flag):
        return FlagSpec(
            names=argument.names,
            dest=argument.dest or resolve_dest(argument.names),
            repeated=argument.repeated,
            env=resolve_env(argument.env),
            deprecated=argument.deprecated,
            doc=argument.doc,
        )
    elif isinstance(argument, FlagGroup):
        return FlagGroupSpec(
            dest=argument.dest,
            default=argument.default,
            entries=tuple(FlagGroupEntrySpec(names=x.names, value=x.value, doc=x.doc) for x in argument.flags),
            repeated=argument.repeated,
            doc=argument.doc,
        )
    elif isinstance(argument, Option):
        return OptionSpec(
            names=argument.names,
            dest=argument.dest or resolve_dest(argument.names),
            converter=make_converter(argument.type, argument.choices),
            validator=from_option(argument),
            default=argument.default,
            repeated=argument.repeated,
            env=resolve_env(argument.env),
            docv=argument.docv,
            doc=argument.doc,
        )
    elif isinstance(argument, Positional):
        return PositionalSpec(
            name=argument.name,
            dest=argument.name,
            converter=make_converter(argument.type),
            validator=from_positional(argument),
            default=argument.default,
            repeated=argument.repeated,
            docv=argument.docv,
            doc=argument.doc,
        )
    raise TypeError(f"Cannot compile {argument!r} into an argument spec.")


def compile_arguments(arguments: Iterable[Argument]) -> tuple[ArgSpec, ...]:
    return tuple(compile_argument(x) for x in arguments)
