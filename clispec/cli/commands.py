import json
from typing import Any

from clispec.bind import parse
from clispec.cli import app
from clispec.core import App
from clispec.exceptions import ClispecError, SchemaError
from clispec.loader import load_schema_file
from clispec.panel import ErrorPanel
from clispec.result import HelpRequest, ManpageRequest, ParseOk, VersionRequest


def _load(path: str) -> App | None:
    try:
        return App(load_schema_file(path), console=app.console, error_console=app.error_console)
    except SchemaError as e:
        app._error_console().print(ErrorPanel(e, title="Schema Error"))
        return None


@app.command("validate")
def validate(config: dict[str, Any]) -> int:
    target = _load(config["schema-file"])
    if target is None:
        return 1
    app._console().print("ok")
    return 0


@app.command("parse")
def parse_command(config: dict[str, Any]) -> int:
    target = _load(config["schema-file"])
    if target is None:
        return 1

    try:
        result = parse(target.spec, config["schema-args"], target.env)
    except ClispecError as e:
        app._error_console().print(ErrorPanel(e))
        return 1

    match result:
        case ParseOk(config=parsed, command_path=command_path):
            output = {"command_path": list(command_path), "config": parsed}
            app._console().print(json.dumps(output, indent=2), markup=False, highlight=False)
        case HelpRequest(command_path=command_path) | ManpageRequest(command_path=command_path):
            target.help_print(command_path)
        case VersionRequest():
            target.version_print()
    return 0


@app.command("help")
def help_command(config: dict[str, Any]) -> int:
    target = _load(config["schema-file"])
    if target is None:
        return 1
    try:
        target.help_print(config["subcommand"])
    except KeyError as e:
        app._error_console().print(ErrorPanel(f"unknown subcommand: {e.args[0]}"))
        return 1
    return 0
