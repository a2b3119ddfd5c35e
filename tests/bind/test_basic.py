import pytest

from clispec import (
    CoercionError,
    CombinedShortOptionError,
    Flag,
    FlagGroup,
    FlagGroupEntry,
    ListType,
    MissingValueError,
    Option,
    ParseOk,
    Positional,
    UnexpectedPositionalError,
    UnknownOptionError,
    no_env,
    parse,
)
from clispec.bind import normalize_tokens


def test_normalize_tokens_string():
    assert normalize_tokens("--name 'John Doe' -v") == ["--name", "John Doe", "-v"]


def test_normalize_tokens_default(monkeypatch):
    monkeypatch.setattr("sys.argv", ["prog", "--verbose", "x"])
    assert normalize_tokens(None) == ["--verbose", "x"]


def test_empty_args(make_spec, assert_parse):
    spec = make_spec(Flag(names=["verbose"]))
    assert_parse(spec, [], {"verbose": False})


@pytest.mark.parametrize("cmd", ["--verbose", "-v"])
def test_flag(make_spec, assert_parse, cmd):
    spec = make_spec(Flag(names=["verbose", "v"]))
    assert_parse(spec, cmd, {"verbose": True})


def test_flag_given_twice_is_still_true(make_spec, assert_parse):
    spec = make_spec(Flag(names=["verbose", "v"]))
    assert_parse(spec, "-v --verbose", {"verbose": True})


@pytest.mark.parametrize(
    "cmd, expected",
    [
        ("", 0),
        ("-v", 1),
        ("-vvv", 3),
        ("-v --verbose -vv", 4),
    ],
)
def test_repeated_flag_counts(make_spec, assert_parse, cmd, expected):
    spec = make_spec(Flag(names=["verbose", "v"], repeated=True))
    assert_parse(spec, cmd, {"verbose": expected})


def test_short_group_of_flags(make_spec, assert_parse):
    spec = make_spec(Flag(names=["a"]), Flag(names=["b"]), Flag(names=["c"]))
    assert_parse(spec, "-ac", {"a": True, "b": False, "c": True})


@pytest.mark.parametrize(
    "cmd",
    [
        "--output out.txt",
        "--output=out.txt",
        "-o out.txt",
    ],
)
def test_option_value_forms(make_spec, assert_parse, cmd):
    spec = make_spec(Option(names=["output", "o"]))
    assert_parse(spec, cmd, {"output": "out.txt"})


def test_option_inline_value_splits_on_first_equals(make_spec, assert_parse):
    spec = make_spec(Option(names=["define", "D"]))
    assert_parse(spec, "--define=a=b", {"define": "a=b"})


def test_option_inline_empty_value(make_spec, assert_parse):
    spec = make_spec(Option(names=["name"]))
    assert_parse(spec, "--name=", {"name": ""})


def test_option_value_may_look_like_an_option(make_spec, assert_parse):
    spec = make_spec(Option(names=["pattern"]), Flag(names=["verbose"]))
    assert_parse(spec, ["--pattern", "--verbose"], {"pattern": "--verbose", "verbose": False})


def test_option_last_occurrence_wins(make_spec, assert_parse):
    spec = make_spec(Option(names=["output", "o"]))
    assert_parse(spec, "-o a -o b --output c", {"output": "c"})


def test_option_absent_without_default_is_missing(make_spec, assert_parse):
    spec = make_spec(Option(names=["output"]))
    assert_parse(spec, [], {})


def test_option_typed(make_spec, assert_parse):
    spec = make_spec(Option(names=["count"], type="int"))
    assert_parse(spec, "--count 5", {"count": 5})


def test_option_conversion_error(make_spec):
    spec = make_spec(Option(names=["count"], type="int"))
    with pytest.raises(CoercionError) as e:
        parse(spec, ["--count", "abc"], no_env)
    assert str(e.value) == "option --count: expected integer, got 'abc'"


def test_option_conversion_error_reports_short_spelling(make_spec):
    spec = make_spec(Option(names=["count", "n"], type="int"))
    with pytest.raises(CoercionError) as e:
        parse(spec, ["-n", "abc"], no_env)
    assert str(e.value) == "option -n: expected integer, got 'abc'"


def test_repeated_option_accumulates(make_spec, assert_parse):
    spec = make_spec(Option(names=["include", "I"], repeated=True))
    assert_parse(spec, "-I a --include b --include=c", {"include": ["a", "b", "c"]})


def test_list_option(make_spec, assert_parse):
    spec = make_spec(Option(names=["ports"], type=ListType("int")))
    assert_parse(spec, "--ports 80,443", {"ports": [80, 443]})


@pytest.mark.parametrize("cmd", ["--output", "-o", "-vo"])
def test_option_missing_value(make_spec, cmd):
    spec = make_spec(Flag(names=["v"]), Option(names=["output", "o"]))
    with pytest.raises(MissingValueError) as e:
        parse(spec, cmd, no_env)
    assert str(e.value).endswith("requires a value")


def test_short_group_option_last(make_spec, assert_parse):
    spec = make_spec(Flag(names=["v"]), Option(names=["o"]))
    assert_parse(spec, "-vo value", {"v": True, "o": "value"})


def test_short_group_option_not_last(make_spec):
    spec = make_spec(Flag(names=["v"]), Option(names=["o"]))
    with pytest.raises(CombinedShortOptionError) as e:
        parse(spec, "-ov value", no_env)
    assert str(e.value) == "option -o requires a value and must be last in a short group"


def test_short_group_has_no_attached_value(make_spec):
    spec = make_spec(Option(names=["o"]), Flag(names=["f"]))
    with pytest.raises(CombinedShortOptionError):
        parse(spec, "-ofile", no_env)


def test_unknown_long_option(make_spec):
    spec = make_spec(Flag(names=["verbose"]))
    with pytest.raises(UnknownOptionError) as e:
        parse(spec, "--verbos", no_env)
    assert str(e.value) == 'unknown option: --verbos Did you mean "--verbose"?'


def test_unknown_long_option_with_inline_value(make_spec):
    spec = make_spec(Option(names=["output"]))
    with pytest.raises(UnknownOptionError) as e:
        parse(spec, "--color=red", no_env)
    assert e.value.token == "--color"


def test_unknown_short_option(make_spec):
    spec = make_spec(Flag(names=["a"]))
    with pytest.raises(UnknownOptionError) as e:
        parse(spec, "-ab", no_env)
    assert e.value.token == "-b"


def test_long_spelling_of_short_name_is_unknown(make_spec):
    spec = make_spec(Flag(names=["v"]))
    with pytest.raises(UnknownOptionError):
        parse(spec, "--v", no_env)


def test_flag_ignores_inline_value(make_spec, assert_parse):
    spec = make_spec(Flag(names=["verbose"]))
    assert_parse(spec, "--verbose=false", {"verbose": True})


def test_flag_group(make_spec, assert_parse):
    spec = make_spec(
        FlagGroup(
            dest="level",
            default="normal",
            flags=[
                FlagGroupEntry(names=["quiet", "q"], value="quiet"),
                FlagGroupEntry(names=["loud", "l"], value="loud"),
            ],
        )
    )
    assert_parse(spec, [], {"level": "normal"})
    assert_parse(spec, "--quiet", {"level": "quiet"})
    assert_parse(spec, "-q --loud", {"level": "loud"})


def test_flag_group_null_default_is_present(make_spec, assert_parse):
    spec = make_spec(FlagGroup(dest="mode", flags=[FlagGroupEntry(names=["fast"], value="fast")]))
    assert_parse(spec, [], {"mode": None})


def test_flag_group_repeated(make_spec, assert_parse):
    spec = make_spec(
        FlagGroup(
            dest="steps",
            default=[],
            repeated=True,
            flags=[
                FlagGroupEntry(names=["a"], value="alpha"),
                FlagGroupEntry(names=["b"], value="beta"),
            ],
        )
    )
    assert_parse(spec, "-aba", {"steps": ["alpha", "beta", "alpha"]})
    assert_parse(spec, [], {"steps": []})


def test_flag_group_structured_value_is_copied(make_spec):
    value = {"level": 1}
    spec = make_spec(FlagGroup(dest="cfg", flags=[FlagGroupEntry(names=["one"], value=value)]))
    result = parse(spec, "--one", no_env)
    result.config["cfg"]["level"] = 2
    assert parse(spec, "--one", no_env).config["cfg"] == {"level": 1}


def test_positionals_in_order(make_spec, assert_parse):
    spec = make_spec(Positional(name="src"), Positional(name="dst"))
    assert_parse(spec, "a b", {"src": "a", "dst": "b"})


def test_positional_typed(make_spec, assert_parse):
    spec = make_spec(Positional(name="n", type="int"))
    assert_parse(spec, "42", {"n": 42})


def test_positional_conversion_error(make_spec):
    spec = make_spec(Positional(name="n", type="int"))
    with pytest.raises(CoercionError) as e:
        parse(spec, "x", no_env)
    assert str(e.value) == "positional n: expected integer, got 'x'"


def test_unexpected_positional(make_spec):
    spec = make_spec(Positional(name="src"))
    with pytest.raises(UnexpectedPositionalError) as e:
        parse(spec, "a b", no_env)
    assert str(e.value) == "unexpected positional argument: b"


def test_repeated_positional_absorbs_remaining(make_spec, assert_parse):
    spec = make_spec(Positional(name="files", repeated=True))
    assert_parse(spec, "a.txt b.txt c.txt", {"files": ["a.txt", "b.txt", "c.txt"]})


def test_repeated_positional_after_single(make_spec, assert_parse):
    spec = make_spec(Positional(name="cmd"), Positional(name="rest", repeated=True))
    assert_parse(spec, "run a b", {"cmd": "run", "rest": ["a", "b"]})


def test_repeated_positional_still_processes_options(make_spec, assert_parse):
    spec = make_spec(Flag(names=["v"]), Positional(name="files", repeated=True))
    assert_parse(spec, "a -v b", {"v": True, "files": ["a", "b"]})


def test_mixed_options_and_positionals(make_spec, assert_parse):
    spec = make_spec(Flag(names=["verbose", "v"]), Option(names=["output", "o"]), Positional(name="file"))
    assert_parse(
        spec,
        "--verbose input.txt -o out.txt",
        {"verbose": True, "output": "out.txt", "file": "input.txt"},
    )


@pytest.mark.parametrize("token", ["-", ""])
def test_dash_and_empty_are_positionals(make_spec, assert_parse, token):
    spec = make_spec(Positional(name="file"))
    assert_parse(spec, [token], {"file": token})


def test_terminator(make_spec, assert_parse):
    spec = make_spec(Flag(names=["verbose", "v"]), Positional(name="file"))
    assert_parse(spec, "-- --verbose", {"verbose": False, "file": "--verbose"})


def test_terminator_dash_prefixed(make_spec, assert_parse):
    spec = make_spec(Positional(name="file"))
    assert_parse(spec, "-- -file", {"file": "-file"})


def test_terminator_is_consumed_once(make_spec, assert_parse):
    spec = make_spec(Positional(name="args", repeated=True))
    assert_parse(spec, "a -- -- --help", {"args": ["a", "--", "--help"]})


def test_terminator_alone(make_spec, assert_parse):
    spec = make_spec(Flag(names=["v"]))
    assert_parse(spec, "--", {"v": False})


def test_idempotent(make_spec):
    spec = make_spec(
        Flag(names=["v"], repeated=True),
        Option(names=["tag"], repeated=True, default=["x"]),
        Positional(name="files", repeated=True),
    )
    first = parse(spec, "-vv a --tag y b", no_env)
    second = parse(spec, "-vv a --tag y b", no_env)
    assert first == second
    assert first == ParseOk({"v": 2, "tag": ["y"], "files": ["a", "b"]})


def test_default_not_mutated(make_spec):
    default = ["x"]
    spec = make_spec(Option(names=["tag"], repeated=True, default=default))
    result = parse(spec, [], no_env)
    result.config["tag"].append("y")
    assert parse(spec, [], no_env).config["tag"] == ["x"]
    assert default == ["x"]
