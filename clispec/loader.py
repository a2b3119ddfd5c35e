"""Build the :mod:`clispec.types` data model from schema documents.

A schema document is the JSON-like mapping described in the README, e.g.:

.. code-block:: json

    {
      "name": "greet",
      "doc": ["Print a greeting."],
      "version": "1.0.0",
      "args": [
        {"kind": "flag", "names": ["verbose", "v"], "doc": ["Be chatty."]},
        {"kind": "option", "names": ["name", "n"], "doc": ["Who."], "type": "string", "default": "World"}
      ]
    }

Only the structure needed to build the model is checked here.
"""

import json
import logging
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from clispec.exceptions import SchemaError
from clispec.types import (
    Argument,
    Command,
    ConfigFile,
    ConfigPaths,
    EnvBinding,
    Flag,
    FlagGroup,
    FlagGroupEntry,
    ListType,
    Option,
    PairType,
    Positional,
    Root,
    TripleType,
    TypeSpec,
    to_scalar_type,
)
from clispec.utils import UNSET

__all__ = [
    "argument_from_dict",
    "command_from_dict",
    "load_schema",
    "load_schema_file",
    "root_from_dict",
    "type_spec_from_dict",
]

logger = logging.getLogger(__name__)

_ARGUMENT_KINDS = ("flag", "flag_group", "option", "positional")


def _require(data: Mapping[str, Any], key: str, where: str) -> Any:
    try:
        return data[key]
    except KeyError:
        raise SchemaError(f"{where}: missing required key {key!r}") from None


def _expect_mapping(data: Any, where: str) -> Mapping[str, Any]:
    if not isinstance(data, Mapping):
        raise SchemaError(f"{where}: expected an object, got {type(data).__name__}")
    return data


def _expect_list(data: Any, where: str) -> list[Any]:
    if not isinstance(data, list | tuple):
        raise SchemaError(f"{where}: expected an array, got {type(data).__name__}")
    return list(data)


def _optional(data: Mapping[str, Any], key: str, default: Any = None) -> Any:
    return data.get(key, default)


def _build(cls, where: str, **kwargs):
    try:
        return cls(**kwargs)
    except SchemaError as e:
        raise SchemaError(f"{where}: {e}") from None


def type_spec_from_dict(data: Any, where: str = "type") -> TypeSpec:
    """``"int"`` or ``{"list": {"element": "int", "separator": ":"}}`` (also ``pair`` / ``triple``)."""
    if isinstance(data, str):
        return _build(to_scalar_type, where, value=data)

    data = _expect_mapping(data, where)
    if "list" in data:
        where = f"{where}.list"
        inner = _expect_mapping(data["list"], where)
        return _build(
            ListType,
            where,
            element=_require(inner, "element", where),
            separator=inner.get("separator"),
        )
    elif "pair" in data:
        where = f"{where}.pair"
        inner = _expect_mapping(data["pair"], where)
        return _build(
            PairType,
            where,
            first=_require(inner, "first", where),
            second=_require(inner, "second", where),
            separator=inner.get("separator"),
        )
    elif "triple" in data:
        where = f"{where}.triple"
        inner = _expect_mapping(data["triple"], where)
        return _build(
            TripleType,
            where,
            first=_require(inner, "first", where),
            second=_require(inner, "second", where),
            third=_require(inner, "third", where),
            separator=inner.get("separator"),
        )
    raise SchemaError(f"{where}: unknown type specification {dict(data)!r}")


def _env_from_dict(data: Any, where: str) -> EnvBinding | None:
    if data is None:
        return None
    if isinstance(data, str):
        return EnvBinding(data)
    data = _expect_mapping(data, where)
    return EnvBinding(_require(data, "var", where), data.get("doc"))


def argument_from_dict(data: Any, where: str = "argument") -> Argument:
    """Build one argument; the ``kind`` key selects the variant."""
    data = _expect_mapping(data, where)
    kind = _require(data, "kind", where)

    if kind == "flag":
        return _build(
            Flag,
            where,
            names=_require(data, "names", where),
            doc=_optional(data, "doc"),
            dest=_optional(data, "dest"),
            env=_env_from_dict(_optional(data, "env"), f"{where}.env"),
            repeated=_optional(data, "repeated", False),
            deprecated=_optional(data, "deprecated"),
        )
    elif kind == "flag_group":
        entries = []
        for i, entry in enumerate(_expect_list(_require(data, "flags", where), f"{where}.flags")):
            entry_where = f"{where}.flags[{i}]"
            entry = _expect_mapping(entry, entry_where)
            entries.append(
                _build(
                    FlagGroupEntry,
                    entry_where,
                    names=_require(entry, "names", entry_where),
                    value=_require(entry, "value", entry_where),
                    doc=_optional(entry, "doc"),
                )
            )
        return _build(
            FlagGroup,
            where,
            dest=_require(data, "dest", where),
            default=_require(data, "default", where),
            flags=entries,
            doc=_optional(data, "doc"),
            repeated=_optional(data, "repeated", False),
        )
    elif kind == "option":
        return _build(
            Option,
            where,
            names=_require(data, "names", where),
            type=type_spec_from_dict(_require(data, "type", where), f"{where}.type"),
            doc=_optional(data, "doc"),
            docv=_optional(data, "docv"),
            # Key presence, not truthiness: ``"default": null`` is a declared default.
            default=data.get("default", UNSET),
            required=_optional(data, "required", False),
            repeated=_optional(data, "repeated", False),
            must_exist=_optional(data, "must_exist", False),
            choices=_optional(data, "choices"),
            dest=_optional(data, "dest"),
            env=_env_from_dict(_optional(data, "env"), f"{where}.env"),
        )
    elif kind == "positional":
        return _build(
            Positional,
            where,
            name=_require(data, "name", where),
            type=type_spec_from_dict(_require(data, "type", where), f"{where}.type"),
            doc=_optional(data, "doc"),
            docv=_optional(data, "docv"),
            default=data.get("default", UNSET),
            required=_optional(data, "required", False),
            repeated=_optional(data, "repeated", False),
            must_exist=_optional(data, "must_exist", False),
        )
    raise SchemaError(f"{where}: unknown argument kind {kind!r}, expected one of {', '.join(_ARGUMENT_KINDS)}")


def _command_fields(data: Mapping[str, Any], where: str) -> dict[str, Any]:
    args = [
        argument_from_dict(x, f"{where}.args[{i}]")
        for i, x in enumerate(_expect_list(data.get("args", []), f"{where}.args"))
    ]
    commands = [
        command_from_dict(x, f"{where}.commands[{i}]")
        for i, x in enumerate(_expect_list(data.get("commands", []), f"{where}.commands"))
    ]
    return {
        "name": _require(data, "name", where),
        "doc": data.get("doc"),
        "args": args,
        "commands": commands,
    }


def command_from_dict(data: Any, where: str = "command") -> Command:
    data = _expect_mapping(data, where)
    return _build(Command, where, **_command_fields(data, where))


def _config_from_dict(data: Any, where: str) -> ConfigFile | None:
    if data is None:
        return None
    data = _expect_mapping(data, where)
    paths = data.get("paths")
    if paths is not None:
        paths = _expect_mapping(paths, f"{where}.paths")
        paths = ConfigPaths(system=paths.get("system"), user=paths.get("user"), local=paths.get("local"))
    return ConfigFile(format=_require(data, "format", where), paths=paths)


def root_from_dict(data: Any) -> Root:
    where = "root"
    data = _expect_mapping(data, where)
    return _build(
        Root,
        where,
        **_command_fields(data, where),
        version=data.get("version"),
        config=_config_from_dict(data.get("config"), f"{where}.config"),
    )


def _read_json(path: Path) -> Any:
    with path.open() as f:
        try:
            return json.load(f)
        except json.JSONDecodeError as e:
            raise SchemaError(f"failed to parse JSON: {path}: {e}") from e


def _read_toml(path: Path) -> Any:
    try:
        # Attempt to use builtin >=python3.11
        import tomllib  # pyright: ignore[reportMissingImports]
    except ImportError:
        # Fallback to most popular pypi toml package.
        import tomli as tomllib  # pyright: ignore[reportMissingImports]

    with path.open("rb") as f:
        try:
            return tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise SchemaError(f"failed to parse TOML: {path}: {e}") from e


def _read_yaml(path: Path) -> Any:
    from yaml import YAMLError, safe_load  # pyright: ignore[reportMissingImports]

    with path.open() as f:
        try:
            return safe_load(f)
        except YAMLError as e:
            raise SchemaError(f"failed to parse YAML: {path}: {e}") from e


_READERS = {
    ".json": _read_json,
    ".toml": _read_toml,
    ".yaml": _read_yaml,
    ".yml": _read_yaml,
}


def load_schema_file(path: str | Path) -> Root:
    """Load a schema file; the format is picked from the file suffix."""
    path = Path(path)
    try:
        reader = _READERS[path.suffix.lower()]
    except KeyError:
        raise SchemaError(f"unsupported schema file format: {path}") from None
    if not path.is_file():
        raise SchemaError(f"failed to open file: {path}")
    logger.debug("Loading %s schema from %s.", path.suffix.lstrip(".").upper(), path)
    return root_from_dict(reader(path))


def load_schema(source: Mapping[str, Any] | str | Path) -> Root:
    """Load a schema from a mapping, a JSON document string, or a file path.

    A string that starts with ``{`` is treated as a JSON document, any other string as a path.
    Anything that is neither a string nor a path is handed to :func:`root_from_dict`.
    """
    if isinstance(source, str) and source.lstrip().startswith("{"):
        try:
            data = json.loads(source)
        except json.JSONDecodeError as e:
            raise SchemaError(f"failed to parse JSON: {e}") from e
        return root_from_dict(data)
    if isinstance(source, str | os.PathLike):
        return load_schema_file(source)
    return root_from_dict(source)
