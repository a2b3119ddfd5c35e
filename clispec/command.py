from collections.abc import Iterable, Sequence

from clispec.argument import ArgSpec, compile_argument, compile_arguments
from clispec.types import Command, ConfigFile, Flag, FlagGroup, Option, Positional, Root
from clispec.utils import frozen

__all__ = [
    "CommandSpec",
    "RootSpec",
    "compile",
    "compile_command",
    "compile_commands",
    "compile_root",
]


@frozen(kw_only=True)
class CommandSpec:
    name: str
    doc: tuple[str, ...] = ()
    args: tuple[ArgSpec, ...] = ()
    commands: tuple["CommandSpec", ...] = ()

    def find_command(self, name: str) -> "CommandSpec | None":
        for command in self.commands:
            if command.name == name:
                return command
        return None

    def resolve(self, command_path: Sequence[str]) -> list["CommandSpec"]:
        """Levels visited by ``command_path``, starting with ``self``.

        Raises
        ------
        KeyError
            A path segment doesn't name a subcommand.
        """
        levels = [self]
        for segment in command_path:
            command = levels[-1].find_command(segment)
            if command is None:
                raise KeyError(segment)
            levels.append(command)
        return levels


@frozen(kw_only=True)
class RootSpec(CommandSpec):
    version: str | None = None
    config: ConfigFile | None = None


def compile_command(command: Command) -> CommandSpec:
    return CommandSpec(
        name=command.name,
        doc=command.doc,
        args=compile_arguments(command.args),
        commands=compile_commands(command.commands),
    )


def compile_commands(commands: Iterable[Command]) -> tuple[CommandSpec, ...]:
    return tuple(compile_command(x) for x in commands)


def compile_root(root: Root) -> RootSpec:
    return RootSpec(
        name=root.name,
        doc=root.doc,
        args=compile_arguments(root.args),
        commands=compile_commands(root.commands),
        version=root.version,
        config=root.config,
    )


def compile(obj):  # noqa: A001
    """Compile a schema object into its executable spec.

    Parameters
    ----------
    obj: Root | Command | Argument | Sequence[Argument] | Sequence[Command]
        A :class:`~clispec.types.Root`, a :class:`~clispec.types.Command`,
        any argument type, or a list of arguments or commands.

    Returns
    -------
    RootSpec | CommandSpec | ArgSpec | tuple
        Spec of the same shape as ``obj``.
    """
    if isinstance(obj, Root):
        return compile_root(obj)
    elif isinstance(obj, Command):
        return compile_command(obj)
    elif isinstance(obj, Flag | FlagGroup | Option | Positional):
        return compile_argument(obj)
    elif isinstance(obj, list | tuple):
        if obj and all(isinstance(x, Command) for x in obj):
            return compile_commands(obj)
        return compile_arguments(obj)
    raise TypeError(f"Cannot compile object of type {type(obj).__name__}.")
