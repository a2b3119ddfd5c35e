import pathlib
from typing import Any

from clispec.exceptions import ValidationError
from clispec.types import ListType, PairType, ScalarType, TripleType, TypeSpec
from clispec.utils import UNSET, frozen
from clispec.validators._core import Validator


def _must_exist_file(name: str, value: Any) -> None:
    if value is UNSET or value is None:
        return
    if not pathlib.Path(value).is_file():
        raise ValidationError(msg=f"{name}: {value} is not a regular file", name=name)


def _must_exist_dir(name: str, value: Any) -> None:
    if value is UNSET or value is None:
        return
    if not pathlib.Path(value).is_dir():
        raise ValidationError(msg=f"{name}: {value} is not a directory", name=name)


def _must_exist_path(name: str, value: Any) -> None:
    if value is UNSET or value is None:
        return
    if not pathlib.Path(value).exists():
        raise ValidationError(msg=f"{name}: {value} does not exist", name=name)


def must_exist_file() -> Validator:
    return Validator("must_exist(file)", _must_exist_file)


def must_exist_dir() -> Validator:
    return Validator("must_exist(dir)", _must_exist_dir)


def must_exist_path() -> Validator:
    return Validator("must_exist(path)", _must_exist_path)


_scalar_factories = {
    ScalarType.FILE: must_exist_file,
    ScalarType.DIR: must_exist_dir,
    ScalarType.PATH: must_exist_path,
}


def must_exist_for_scalar(type_: ScalarType) -> Validator | None:
    """Existence check for a filesystem scalar; :obj:`None` for every other type."""
    try:
        factory = _scalar_factories[type_]
    except KeyError:
        return None
    return factory()


@frozen
class EachElement:
    """Applies ``inner`` to every element of a list value, tagging names with the index."""

    inner: "Validator | EachElement | Components"

    @property
    def description(self) -> str:
        return self.inner.description

    def check(self, name: str, value: Any = UNSET) -> None:
        if value is UNSET or value is None:
            return
        for i, element in enumerate(value):
            self.inner.check(f"{name}[{i}]", element)


@frozen
class Components:
    """Per-position existence checks for a pair or triple value.

    ``components`` is aligned with the value; ``None`` entries are skipped.
    """

    components: tuple[Validator | None, ...]
    description: str

    def check(self, name: str, value: Any = UNSET) -> None:
        if value is UNSET or value is None:
            return
        for i, validator in enumerate(self.components):
            if validator is not None:
                validator.check(f"{name}[{i}]", value[i])


def must_exist_for_type(type_spec: TypeSpec) -> Validator | EachElement | Components | None:
    """Type-aware existence check.

    Returns :obj:`None` (no validator at all) when the type holds no filesystem scalar.
    """
    if isinstance(type_spec, ScalarType):
        return must_exist_for_scalar(type_spec)
    elif isinstance(type_spec, ListType):
        inner = must_exist_for_scalar(type_spec.element)
        if inner is None:
            return None
        return EachElement(inner)
    elif isinstance(type_spec, PairType):
        components = (type_spec.first, type_spec.second)
        description = "must_exist(pair)"
    elif isinstance(type_spec, TripleType):
        components = (type_spec.first, type_spec.second, type_spec.third)
        description = "must_exist(triple)"
    else:
        raise TypeError(f"Unsupported type specification: {type_spec!r}")

    if not any(x.is_filesystem for x in components):
        return None
    return Components(tuple(must_exist_for_scalar(x) for x in components), description)
