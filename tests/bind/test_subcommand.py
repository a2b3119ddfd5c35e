import pytest

from clispec import (
    CoercionError,
    Command,
    Flag,
    HelpRequest,
    ManpageRequest,
    Option,
    Positional,
    UnexpectedPositionalError,
    UnknownCommandError,
    UnknownOptionError,
    VersionRequest,
    VersionUnavailableError,
    no_env,
    parse,
)


def test_root_only(git_spec, assert_parse):
    assert_parse(git_spec, "-v", {"verbose": True})


def test_commit(git_spec, assert_parse):
    assert_parse(
        git_spec,
        ["commit", "-m", "initial", "-a"],
        {"message": "initial", "all": True, "verbose": False},
        ("commit",),
    )


def test_nested_command_path(git_spec, assert_parse):
    assert_parse(
        git_spec,
        ["config", "set", "user.name", "Alice"],
        {"key": "user.name", "value": "Alice", "verbose": False},
        ("config", "set"),
    )


def test_parent_option_before_subcommand(git_spec, assert_parse):
    assert_parse(
        git_spec,
        "--verbose config get core.editor",
        {"key": "core.editor", "verbose": True},
        ("config", "get"),
    )


def test_parent_option_after_subcommand_is_unknown(git_spec):
    with pytest.raises(UnknownOptionError):
        parse(git_spec, "commit --verbose", no_env)


def test_intermediate_level_without_leaf(git_spec, assert_parse):
    assert_parse(git_spec, "config", {"verbose": False}, ("config",))


def test_unknown_subcommand_at_root(git_spec):
    with pytest.raises(UnknownCommandError) as e:
        parse(git_spec, "comit", no_env)
    assert str(e.value) == 'unknown subcommand: comit Did you mean "commit"? Available commands: commit, config.'


def test_unknown_subcommand_nested(git_spec):
    with pytest.raises(UnknownCommandError) as e:
        parse(git_spec, "config delete key", no_env)
    assert e.value.token == "delete"
    assert list(e.value.candidates) == ["set", "get"]
    assert list(e.value.command_chain) == []


def test_unknown_subcommand_error_message_truncated():
    from clispec import Root, compile

    spec = compile(Root(name="app", commands=[Command(name=f"cmd{i}") for i in range(10)]))
    with pytest.raises(UnknownCommandError) as e:
        parse(spec, "zzz", no_env)
    assert str(e.value).endswith("cmd7, ...")


def test_extra_positional_at_leaf(git_spec):
    with pytest.raises(UnexpectedPositionalError):
        parse(git_spec, "config get a b", no_env)


def test_terminator_disables_subcommand_dispatch(make_spec, assert_parse):
    spec = make_spec(Positional(name="word"), commands=[Command(name="run")])
    assert_parse(spec, "-- run", {"word": "run"})


def test_positional_slot_takes_priority_over_unknown_command(make_spec, assert_parse):
    spec = make_spec(Positional(name="word"), commands=[Command(name="run")])
    assert_parse(spec, "walk", {"word": "walk"})


def test_subcommand_name_wins_over_positional(make_spec, assert_parse):
    spec = make_spec(Positional(name="word", default=None), commands=[Command(name="run")])
    assert_parse(spec, "run", {"word": None}, ("run",))


def test_inner_level_overwrites_colliding_dest(make_spec, assert_parse):
    spec = make_spec(
        Option(names=["name"]),
        commands=[Command(name="sub", args=[Option(names=["name"])])],
    )
    assert_parse(spec, "--name outer sub --name inner", {"name": "inner"}, ("sub",))


def test_subcommand_named_help_dispatches(make_spec, assert_parse):
    spec = make_spec(commands=[Command(name="help", args=[Positional(name="topic", default="all")])])
    assert_parse(spec, "help", {"topic": "all"}, ("help",))
    assert parse(spec, "--help", no_env) == HelpRequest()


@pytest.mark.parametrize(
    "cmd, expected",
    [
        ("--help", HelpRequest()),
        ("-v --help", HelpRequest()),
        ("commit --help", HelpRequest(["commit"])),
        ("config set --help", HelpRequest(["config", "set"])),
        ("config set a --help", HelpRequest(["config", "set"])),
        ("--help-man", ManpageRequest()),
        ("config --help-man", ManpageRequest(["config"])),
        ("--version", VersionRequest()),
    ],
)
def test_short_circuit_requests(git_spec, cmd, expected):
    assert parse(git_spec, cmd, no_env) == expected


def test_help_skips_validation(make_spec):
    spec = make_spec(Option(names=["input"], required=True))
    assert parse(spec, "--help", no_env) == HelpRequest()


def test_help_stops_before_later_errors(make_spec):
    spec = make_spec(Flag(names=["v"]))
    assert parse(spec, "--help --bogus", no_env) == HelpRequest()


def test_help_after_terminator_is_positional(make_spec, assert_parse):
    spec = make_spec(Positional(name="arg"))
    assert_parse(spec, "-- --help", {"arg": "--help"})


def test_version_only_at_root(git_spec):
    with pytest.raises(UnknownOptionError):
        parse(git_spec, "commit --version", no_env)


def test_version_unavailable(make_spec):
    spec = make_spec(Flag(names=["v"]))
    with pytest.raises(VersionUnavailableError) as e:
        parse(spec, "--version", no_env)
    assert str(e.value) == "--version: no version defined"


def test_subcommand_scoped_name_space(make_spec, assert_parse):
    spec = make_spec(
        Flag(names=["f"]),
        commands=[Command(name="sub", args=[Option(names=["f"], type="int")])],
    )
    assert_parse(spec, "-f sub -f 3", {"f": 3}, ("sub",))
    assert_parse(spec, "-f", {"f": True})


def test_subcommand_defaults_only_along_path(make_spec, assert_parse):
    spec = make_spec(
        commands=[
            Command(name="a", args=[Option(names=["x"], default="ax")]),
            Command(name="b", args=[Option(names=["y"], default="by")]),
        ]
    )
    assert_parse(spec, "a", {"x": "ax"}, ("a",))
    assert_parse(spec, "b", {"y": "by"}, ("b",))


def test_option_conversion_error_carries_command_chain(make_spec):
    spec = make_spec(commands=[Command(name="serve", args=[Option(names=["port"], type="int")])])
    with pytest.raises(CoercionError) as e:
        parse(spec, "serve --port http", no_env)
    assert str(e.value) == "option --port: expected integer, got 'http'"
    assert list(e.value.command_chain) == []
