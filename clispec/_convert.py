"""Bidirectional string <-> value converters built from a :data:`~clispec.types.TypeSpec`."""

import math
import re
from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import Any

from attrs import field

from clispec.exceptions import CoercionError
from clispec.types import ListType, PairType, ScalarType, TripleType, TypeSpec
from clispec.utils import frozen, to_tuple_converter

__all__ = [
    "BoolConverter",
    "Converter",
    "EnumConverter",
    "FloatConverter",
    "IntConverter",
    "ListConverter",
    "PairConverter",
    "StringConverter",
    "TripleConverter",
    "make_converter",
]

DEFAULT_SEPARATOR = ","

_INT_PATTERN = re.compile(r"[+-]?[0-9]+")
_FLOAT_PATTERN = re.compile(
    r"[+-]?(?:(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?|inf(?:inity)?|nan)",
    re.IGNORECASE,
)


class Converter(ABC):
    docv: str

    @abstractmethod
    def parse(self, raw: str) -> Any:
        """Convert a raw command-line string.

        Raises
        ------
        CoercionError
            ``raw`` is not a valid spelling of this type.
        """
        raise NotImplementedError

    @abstractmethod
    def format(self, value: Any) -> str:
        """Inverse of :meth:`parse` for values this converter produced."""
        raise NotImplementedError


@frozen
class StringConverter(Converter):
    docv: str = "STRING"

    def parse(self, raw: str) -> str:
        return raw

    def format(self, value: Any) -> str:
        return value


@frozen
class IntConverter(Converter):
    docv: str = "INT"

    def parse(self, raw: str) -> int:
        if not raw:
            raise CoercionError(msg="expected integer, got empty string")
        if not _INT_PATTERN.fullmatch(raw):
            raise CoercionError(msg=f"expected integer, got '{raw}'")
        return int(raw)

    def format(self, value: Any) -> str:
        return str(value)


@frozen
class FloatConverter(Converter):
    docv: str = "FLOAT"

    def parse(self, raw: str) -> float:
        if not raw:
            raise CoercionError(msg="expected float, got empty string")
        if not _FLOAT_PATTERN.fullmatch(raw):
            raise CoercionError(msg=f"expected float, got '{raw}'")
        return float(raw)

    def format(self, value: Any) -> str:
        value = float(value)
        if math.isfinite(value):
            return repr(value)
        return str(value)


@frozen
class BoolConverter(Converter):
    docv: str = "BOOL"

    def parse(self, raw: str) -> bool:
        lower = raw.lower()
        if lower == "true":
            return True
        elif lower == "false":
            return False
        raise CoercionError(msg=f"expected 'true' or 'false', got '{raw}'")

    def format(self, value: Any) -> str:
        return "true" if value else "false"


@frozen
class EnumConverter(Converter):
    choices: tuple[str, ...] = field(converter=to_tuple_converter)
    docv: str = "ENUM"

    def parse(self, raw: str) -> str:
        if raw in self.choices:
            return raw
        raise CoercionError(msg=f"invalid choice '{raw}', expected one of: {' '.join(self.choices)}")

    def format(self, value: Any) -> str:
        return value


@frozen
class ListConverter(Converter):
    element: Converter
    separator: str = DEFAULT_SEPARATOR

    @property
    def docv(self) -> str:
        return f"{self.element.docv}{self.separator}..."

    def parse(self, raw: str) -> list[Any]:
        if not raw:
            return []
        return [self.element.parse(part) for part in raw.split(self.separator)]

    def format(self, value: Any) -> str:
        return self.separator.join(self.element.format(x) for x in value)


@frozen
class PairConverter(Converter):
    first: Converter
    second: Converter
    separator: str = DEFAULT_SEPARATOR

    @property
    def docv(self) -> str:
        return f"{self.first.docv}{self.separator}{self.second.docv}"

    def parse(self, raw: str) -> list[Any]:
        a, sep, b = raw.partition(self.separator)
        if not sep:
            raise CoercionError(msg=f"expected pair separated by '{self.separator}', got '{raw}'")
        return [self.first.parse(a), self.second.parse(b)]

    def format(self, value: Any) -> str:
        return self.first.format(value[0]) + self.separator + self.second.format(value[1])


@frozen
class TripleConverter(Converter):
    first: Converter
    second: Converter
    third: Converter
    separator: str = DEFAULT_SEPARATOR

    @property
    def docv(self) -> str:
        return f"{self.first.docv}{self.separator}{self.second.docv}{self.separator}{self.third.docv}"

    def parse(self, raw: str) -> list[Any]:
        a, sep1, rest = raw.partition(self.separator)
        b, sep2, c = rest.partition(self.separator)
        if not sep1 or not sep2:
            raise CoercionError(msg=f"expected triple separated by '{self.separator}', got '{raw}'")
        return [self.first.parse(a), self.second.parse(b), self.third.parse(c)]

    def format(self, value: Any) -> str:
        return self.separator.join(
            (
                self.first.format(value[0]),
                self.second.format(value[1]),
                self.third.format(value[2]),
            )
        )


_scalar_converters: dict[ScalarType, Converter] = {
    ScalarType.STRING: StringConverter(),
    ScalarType.INT: IntConverter(),
    ScalarType.FLOAT: FloatConverter(),
    ScalarType.BOOL: BoolConverter(),
    # Without a choice list an enum accepts any string.
    ScalarType.ENUM: StringConverter(),
    ScalarType.FILE: StringConverter("FILE"),
    ScalarType.DIR: StringConverter("DIR"),
    ScalarType.PATH: StringConverter("PATH"),
}


def make_converter(type_spec: TypeSpec, choices: Sequence[str] | None = None) -> Converter:
    """Build the :class:`Converter` for a type specification.

    Parameters
    ----------
    type_spec: TypeSpec
        Scalar or compound type.
    choices: Sequence[str] | None
        Closed set of accepted strings; only honored for a scalar ``enum``.

    Returns
    -------
    Converter
    """
    if isinstance(type_spec, ScalarType):
        if type_spec is ScalarType.ENUM and choices is not None:
            return EnumConverter(choices)
        return _scalar_converters[type_spec]
    elif isinstance(type_spec, ListType):
        return ListConverter(
            _scalar_converters[type_spec.element],
            type_spec.separator or DEFAULT_SEPARATOR,
        )
    elif isinstance(type_spec, PairType):
        return PairConverter(
            _scalar_converters[type_spec.first],
            _scalar_converters[type_spec.second],
            type_spec.separator or DEFAULT_SEPARATOR,
        )
    elif isinstance(type_spec, TripleType):
        return TripleConverter(
            _scalar_converters[type_spec.first],
            _scalar_converters[type_spec.second],
            _scalar_converters[type_spec.third],
            type_spec.separator or DEFAULT_SEPARATOR,
        )
    raise TypeError(f"Unsupported type specification: {type_spec!r}")
