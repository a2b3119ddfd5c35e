"""Compact rich-rendered help pages for compiled specs."""

from collections.abc import Iterable, Sequence
from typing import TYPE_CHECKING, Any

from clispec._convert import EnumConverter
from clispec.argument import ArgSpec, FlagGroupSpec, FlagSpec, OptionSpec, PositionalSpec
from clispec.command import CommandSpec, RootSpec
from clispec.utils import UNSET, cli_name

if TYPE_CHECKING:
    from rich.console import Console, RenderableType
    from rich.panel import Panel
    from rich.text import Text

__all__ = ["create_help_panels", "format_doc", "format_usage", "help_print"]


def _resolve(root: RootSpec, command_path: Sequence[str]) -> CommandSpec:
    return root.resolve(command_path)[-1]


def _names(names: Iterable[str]) -> str:
    # Long names first, matching how dest is resolved.
    ordered = sorted(names, key=lambda x: len(x) == 1)
    return ", ".join(cli_name(x) for x in ordered)


def format_usage(root: RootSpec, command_path: Sequence[str]) -> "Text":
    from rich.text import Text

    command = _resolve(root, command_path)

    usage = ["Usage:", root.name, *command_path]
    if command.commands:
        usage.append("COMMAND")

    if any(not isinstance(x, PositionalSpec) for x in command.args):
        usage.append("[OPTIONS]")

    for spec in command.args:
        if not isinstance(spec, PositionalSpec):
            continue
        arg_name = spec.display_docv
        if spec.repeated:
            arg_name += "..."
        if spec.default is not UNSET:
            arg_name = f"[{arg_name}]"
        usage.append(arg_name)

    return Text(" ".join(usage) + "\n", style="bold")


def format_doc(command: CommandSpec) -> "Text":
    from rich.text import Text

    if not command.doc:
        return Text()
    return Text("\n".join(command.doc) + "\n")


def _format_default(spec: OptionSpec | PositionalSpec) -> str:
    default = spec.default
    if default is None:
        return "null"
    if spec.repeated and isinstance(default, list):
        return " ".join(spec.converter.format(x) for x in default)
    return spec.converter.format(default)


def _describe(spec: ArgSpec) -> "Text":
    from rich.text import Text

    description = Text(" ".join(spec.doc))
    metadata_items = []

    if isinstance(spec, FlagSpec):
        if spec.deprecated:
            metadata_items.append(Text(rf"[deprecated: {spec.deprecated}]", "dim yellow"))
        if spec.env:
            metadata_items.append(Text(rf"[env var: {spec.env.var}]", "dim"))
    elif isinstance(spec, OptionSpec | PositionalSpec):
        if isinstance(spec.converter, EnumConverter):
            metadata_items.append(Text(rf"[choices: {', '.join(spec.converter.choices)}]", "dim"))
        if isinstance(spec, OptionSpec) and spec.env:
            metadata_items.append(Text(rf"[env var: {spec.env.var}]", "dim"))
        if spec.default is not UNSET:
            metadata_items.append(Text(rf"[default: {_format_default(spec)}]", "dim"))
        if "required" in spec.validator.description.split(" + "):
            metadata_items.append(Text(r"[required]", "dim red"))

    for item in metadata_items:
        if description:
            description.append(" ")
        description.append(item)
    return description


def _table(rows: list[tuple[str, "str | Text"]]):
    from rich.table import Table
    from rich.text import Text

    table = Table.grid(padding=(0, 2))
    table.add_column(style="cyan", no_wrap=True)
    table.add_column()
    for name, description in rows:
        table.add_row(Text(name), Text(description) if isinstance(description, str) else description)
    return table


def _panel(title: str, body: Any) -> "Panel":
    from rich import box
    from rich.panel import Panel

    return Panel(body, title=title, box=box.ROUNDED, expand=True, title_align="left")


def create_help_panels(command: CommandSpec, *, is_root: bool = False) -> list["Panel"]:
    """Commands, Options and Arguments panels for one command level."""
    panels = []

    if command.commands:
        rows = [(x.name, x.doc[0] if x.doc else "") for x in command.commands]
        panels.append(_panel("Commands", _table(rows)))

    option_rows = []
    for spec in command.args:
        if isinstance(spec, FlagSpec):
            option_rows.append((_names(spec.names), _describe(spec)))
        elif isinstance(spec, OptionSpec):
            option_rows.append((f"{_names(spec.names)} {spec.display_docv}", _describe(spec)))
        elif isinstance(spec, FlagGroupSpec):
            for entry in spec.entries:
                option_rows.append((_names(entry.names), " ".join(entry.doc)))
    option_rows.append(("--help", "Display this message and exit."))
    if is_root and isinstance(command, RootSpec) and command.version is not None:
        option_rows.append(("--version", "Display application version."))
    panels.append(_panel("Options", _table(option_rows)))

    argument_rows = [
        (spec.display_docv, _describe(spec)) for spec in command.args if isinstance(spec, PositionalSpec)
    ]
    if argument_rows:
        panels.append(_panel("Arguments", _table(argument_rows)))

    return panels


def help_print(root: RootSpec, command_path: Sequence[str] = (), *, console: "Console | None" = None) -> None:
    """Print the help page for the level named by ``command_path``."""
    if console is None:
        from rich.console import Console

        console = Console()

    command = _resolve(root, command_path)
    renderables: list[RenderableType] = [format_usage(root, command_path)]
    if command.doc:
        renderables.append(format_doc(command))
    renderables.extend(create_help_panels(command, is_root=not command_path))

    for renderable in renderables:
        console.print(renderable)
