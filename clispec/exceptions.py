from collections.abc import Sequence

from attrs import define, field

__all__ = [
    "ClispecError",
    "CoercionError",
    "CombinedShortOptionError",
    "EnvVarError",
    "MissingValueError",
    "SchemaError",
    "UnexpectedPositionalError",
    "UnknownCommandError",
    "UnknownOptionError",
    "ValidationError",
    "VersionUnavailableError",
]


def _did_you_mean(word: str, candidates: Sequence[str]) -> str:
    import difflib

    close_matches = difflib.get_close_matches(word, candidates, n=1, cutoff=0.6)
    if close_matches:
        return f' Did you mean "{close_matches[0]}"?'
    return ""


class SchemaError(Exception):
    """The schema document or data model is malformed.

    This doesn't derive from ClispecError since this is a developer error
    rather than a runtime error.
    """


@define
class ClispecError(Exception):
    """Root exception for runtime errors.

    Every failure while parsing a command line is a ``ClispecError``;
    subclasses only exist to make the cause easy to test for.
    """

    msg: str | None = None
    """
    If set, override automatic message generation.
    """

    command_chain: Sequence[str] | None = field(default=None, kw_only=True)
    """
    Subcommands resolved before the error occurred.
    """

    def __str__(self):
        if self.msg is not None:
            return self.msg
        return ""


@define(kw_only=True)
class UnknownOptionError(ClispecError):
    """Unknown/unregistered option provided by the cli.

    A nearest-neighbor option suggestion may be appended.
    """

    token: str
    """Option spelling without a matching argument, e.g. ``--colour``."""

    candidates: Sequence[str] = ()
    """Option spellings registered at the level being parsed."""

    def __str__(self):
        if self.msg is not None:
            return self.msg
        return f"unknown option: {self.token}" + _did_you_mean(self.token, self.candidates)


@define(kw_only=True)
class MissingValueError(ClispecError):
    """An option was the last token but requires a value."""

    token: str

    def __str__(self):
        if self.msg is not None:
            return self.msg
        return f"option {self.token} requires a value"


@define(kw_only=True)
class CombinedShortOptionError(ClispecError):
    """Cannot combine a short, value-consuming option with trailing short flags."""

    token: str

    def __str__(self):
        if self.msg is not None:
            return self.msg
        return f"option {self.token} requires a value and must be last in a short group"


@define(kw_only=True)
class CoercionError(ClispecError):
    """A raw string could not be converted into the declared type.

    Converters raise this with just ``msg``; the parser re-raises it with
    either ``option`` or ``positional`` filled in.
    """

    option: str | None = None
    """CLI spelling of the option that received the value."""

    positional: str | None = None
    """Name of the positional that received the value."""

    def __str__(self):
        msg = self.msg or ""
        if self.option is not None:
            return f"option {self.option}: {msg}"
        elif self.positional is not None:
            return f"positional {self.positional}: {msg}"
        return msg


@define(kw_only=True)
class UnexpectedPositionalError(ClispecError):
    """A bare token arrived but every positional slot is already filled."""

    token: str

    def __str__(self):
        if self.msg is not None:
            return self.msg
        return f"unexpected positional argument: {self.token}"


@define(kw_only=True)
class UnknownCommandError(ClispecError):
    """CLI token did not name a subcommand of the current level."""

    token: str

    candidates: Sequence[str] = ()
    """Subcommand names available at the level being parsed."""

    def __str__(self):
        if self.msg is not None:
            return self.msg
        response = f"unknown subcommand: {self.token}" + _did_you_mean(self.token, self.candidates)

        # Maximally helpful to someone who forgot the command name.
        max_commands = 8
        if self.candidates:
            if len(self.candidates) > max_commands:
                response += f" Available commands: {', '.join(self.candidates[:max_commands])}, ..."
            else:
                response += f" Available commands: {', '.join(self.candidates)}."
        return response


@define(kw_only=True)
class VersionUnavailableError(ClispecError):
    """``--version`` was requested but the root declares no version."""

    def __str__(self):
        if self.msg is not None:
            return self.msg
        return "--version: no version defined"


@define(kw_only=True)
class EnvVarError(ClispecError):
    """An environment variable bound to an argument holds an invalid value."""

    var: str

    def __str__(self):
        return f"env {self.var}: {self.msg or ''}"


@define(kw_only=True)
class ValidationError(ClispecError):
    """A validator rejected a value (``required`` / ``must_exist``)."""

    name: str = ""
    """Destination name of the argument that failed validation."""
