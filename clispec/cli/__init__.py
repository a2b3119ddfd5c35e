"""clispec CLI implementation.

The tool's own command line is described with a clispec schema.
"""

from clispec import __version__
from clispec.core import App

SCHEMA = {
    "name": "clispec",
    "doc": ["Work with declarative command-line schemas."],
    "version": __version__,
    "commands": [
        {
            "name": "validate",
            "doc": ["Check that a schema file loads and compiles."],
            "args": [
                {
                    "kind": "positional",
                    "name": "schema-file",
                    "doc": ["Schema file (.json, .toml, .yaml)."],
                    "type": "file",
                    "required": True,
                    "must_exist": True,
                },
            ],
        },
        {
            "name": "parse",
            "doc": ["Parse arguments against a schema and print the command path and configuration as JSON."],
            "args": [
                {
                    "kind": "positional",
                    "name": "schema-file",
                    "doc": ["Schema file (.json, .toml, .yaml)."],
                    "type": "file",
                    "required": True,
                    "must_exist": True,
                },
                {
                    "kind": "positional",
                    "name": "schema-args",
                    "doc": ["Arguments to parse. Separate them with -- if any start with a dash."],
                    "type": "string",
                    "repeated": True,
                    "default": [],
                },
            ],
        },
        {
            "name": "help",
            "doc": ["Print the help page described by a schema."],
            "args": [
                {
                    "kind": "positional",
                    "name": "schema-file",
                    "doc": ["Schema file (.json, .toml, .yaml)."],
                    "type": "file",
                    "required": True,
                    "must_exist": True,
                },
                {
                    "kind": "positional",
                    "name": "subcommand",
                    "doc": ["Subcommand path to show help for."],
                    "type": "string",
                    "repeated": True,
                    "default": [],
                },
            ],
        },
    ],
}

app = App(SCHEMA)

# Explicitly import command modules
from clispec.cli import commands  # noqa: E402, F401

__all__ = ["app"]
