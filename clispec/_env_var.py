import os
from collections.abc import Callable, Mapping

EnvLookup = Callable[[str], str | None]
"""Returns the value of an environment variable, or :obj:`None` if it is unset."""


def os_env_lookup(var: str) -> str | None:
    """Look ``var`` up in the process environment at call time."""
    return os.environ.get(var)


def no_env(var: str) -> str | None:
    """Environment in which no variable is set."""
    return None


def mapping_env(mapping: Mapping[str, str]) -> EnvLookup:
    """Environment backed by an in-memory mapping.

    Example
    -------
    .. code-block:: python

        parse(spec, [], env=mapping_env({"APP_VERBOSE": "1"}))
    """
    return mapping.get


_BOOL_STRINGS = {
    "true": True,
    "1": True,
    "false": False,
    "0": False,
}


def env_var_bool(val: str) -> bool:
    """Interpret an environment variable bound to a flag.

    Raises
    ------
    ValueError
        ``val`` is not one of ``true``, ``1``, ``false``, ``0`` (case-insensitive).
    """
    try:
        return _BOOL_STRINGS[val.lower()]
    except KeyError:
        raise ValueError(f"expected boolean value, got '{val}'") from None
