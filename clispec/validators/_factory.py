from clispec.types import Option, Positional
from clispec.validators._core import all_of, required
from clispec.validators._path import EachElement, must_exist_for_type


def _from_constraints(required_: bool, must_exist: bool, repeated: bool, type_spec):
    parts = []
    if required_:
        parts.append(required())
    if must_exist:
        existence = must_exist_for_type(type_spec)
        if existence is not None:
            # A repeated argument holds one value per occurrence.
            parts.append(EachElement(existence) if repeated else existence)
    return all_of(parts)


def from_option(option: Option):
    """Compose the constraints declared on an :class:`~clispec.types.Option`."""
    return _from_constraints(option.required, option.must_exist, option.repeated, option.type)


def from_positional(positional: Positional):
    """Compose the constraints declared on a :class:`~clispec.types.Positional`."""
    return _from_constraints(positional.required, positional.must_exist, positional.repeated, positional.type)
