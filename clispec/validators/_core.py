from collections.abc import Callable, Iterable
from typing import Any

from attrs import field

from clispec.exceptions import ValidationError
from clispec.utils import UNSET, frozen, to_tuple_converter

CheckFunction = Callable[[str, Any], None]


@frozen
class Validator:
    """A named check run against an argument's final value.

    ``value`` passed to :meth:`check` is :obj:`~clispec.UNSET` when the
    argument received no value from any source.
    """

    description: str
    _check: CheckFunction = field(alias="check")

    def check(self, name: str, value: Any = UNSET) -> None:
        """Raise :class:`~clispec.ValidationError` if ``value`` is not acceptable."""
        self._check(name, value)


def _required(name: str, value: Any) -> None:
    # An explicit None is still a value.
    if value is UNSET:
        raise ValidationError(msg=f"{name} is required", name=name)


def required() -> Validator:
    return Validator("required", _required)


def _noop(name: str, value: Any) -> None:
    pass


@frozen
class AllOf:
    """Runs each validator in order, stopping at the first failure."""

    validators: tuple[Validator, ...] = field(converter=to_tuple_converter)

    @property
    def description(self) -> str:
        return " + ".join(v.description for v in self.validators)

    def check(self, name: str, value: Any = UNSET) -> None:
        for validator in self.validators:
            validator.check(name, value)


def all_of(validators: Iterable[Validator]) -> Validator | AllOf:
    validators = tuple(validators)
    if not validators:
        return Validator("none", _noop)
    return AllOf(validators)
