import pytest
from rich.console import Console

from clispec import Command, Flag, Option, ParseOk, Positional, Root, compile, mapping_env, parse


@pytest.fixture
def console():
    return Console(width=70, force_terminal=True, highlight=False, color_system=None, legacy_windows=False)


@pytest.fixture
def git_root():
    return Root(
        name="git",
        doc="A fake version control system.",
        version="2.0.0",
        args=[Flag(names=["verbose", "v"], doc="Be verbose.")],
        commands=[
            Command(
                name="commit",
                doc="Record changes.",
                args=[
                    Option(names=["message", "m"], type="string", doc="Commit message."),
                    Flag(names=["all", "a"], doc="Stage everything."),
                ],
            ),
            Command(
                name="config",
                doc="Get and set options.",
                commands=[
                    Command(name="set", args=[Positional(name="key"), Positional(name="value")]),
                    Command(name="get", args=[Positional(name="key")]),
                ],
            ),
        ],
    )


@pytest.fixture
def git_spec(git_root):
    return compile(git_root)


@pytest.fixture
def assert_parse():
    """Parse ``cmd`` against ``spec`` and compare with the expected config/command path.

    ``env`` is an in-memory environment; the process environment is never consulted.
    """

    def inner(spec, cmd, expected_config, command_path=(), env=None):
        actual = parse(spec, cmd, mapping_env(env or {}))
        assert actual == ParseOk(expected_config, command_path)

    return inner


@pytest.fixture
def make_spec():
    """Compile a root-level-only schema from a list of arguments."""

    def inner(*args, version=None, commands=()):
        return compile(Root(name="app", args=args, version=version, commands=commands))

    return inner
