import logging
import sys
from collections.abc import Callable, Iterable, Mapping
from pathlib import Path
from typing import TYPE_CHECKING, Any, Optional, TypeVar

from attrs import define, field

from clispec._env_var import EnvLookup
from clispec.bind import normalize_tokens, parse
from clispec.command import RootSpec, compile_root
from clispec.exceptions import ClispecError
from clispec.loader import load_schema
from clispec.panel import ErrorPanel
from clispec.result import HelpRequest, ManpageRequest, ParseOk, ParseResult, VersionRequest
from clispec.types import Root

if TYPE_CHECKING:
    from rich.console import Console

__all__ = ["App"]

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=Callable[..., Any])


def _root_converter(value: Root | Mapping[str, Any] | str | Path) -> Root:
    if isinstance(value, Root):
        return value
    return load_schema(value)


def _command_path_converter(value: None | str | Iterable[str]) -> tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        return tuple(value.split())
    return tuple(value)


@define
class App:
    """Compiled command line plus the callbacks that handle it.

    The schema is compiled once, when the ``App`` is created; every call
    then parses against the same immutable spec.

    .. code-block:: python

        app = App({"name": "greet", "args": [{"kind": "flag", "names": ["loud"], "doc": "Shout."}]})


        @app.default
        def main(config):
            print("HELLO" if config["loud"] else "hello")


        app()
    """

    root: Root = field(converter=_root_converter)
    """Schema describing the command line. A mapping, JSON string or schema file path is loaded first."""

    env: EnvLookup | None = field(default=None, kw_only=True)
    """Environment variable lookup. Defaults to the process environment."""

    console: Optional["Console"] = field(default=None, kw_only=True)
    """:class:`~rich.console.Console` for help and version output."""

    error_console: Optional["Console"] = field(default=None, kw_only=True)
    """:class:`~rich.console.Console` for runtime errors. Defaults to ``stderr``."""

    print_error: bool = field(default=True, kw_only=True)
    """Print a rich-formatted error on error."""

    exit_on_error: bool = field(default=True, kw_only=True)
    """If there is an error parsing the CLI tokens invoke ``sys.exit(1)``; otherwise re-raise."""

    help_on_error: bool = field(default=False, kw_only=True)
    """Print the root help page before printing an error."""

    spec: RootSpec = field(init=False)

    _commands: dict[tuple[str, ...], Callable[..., Any]] = field(init=False, factory=dict)

    def __attrs_post_init__(self):
        self.spec = compile_root(self.root)

    @property
    def name(self) -> str:
        return self.spec.name

    def _console(self) -> "Console":
        if self.console is not None:
            return self.console
        from rich.console import Console

        return Console()

    def _error_console(self) -> "Console":
        if self.error_console is not None:
            return self.error_console
        from rich.console import Console

        return Console(stderr=True)

    def command(self, path: None | str | Iterable[str] = None) -> Callable[[T], T]:
        """Register a callback for the subcommand path ``path``.

        ``path`` is either a space separated string (``"config set"``) or a sequence of names.
        The callback receives the parsed configuration dictionary.
        """
        command_path = _command_path_converter(path)
        try:
            self.spec.resolve(command_path)
        except KeyError as e:
            raise ValueError(f"{' '.join(command_path)!r} is not a command of {self.name!r}: unknown {e}.") from None

        def decorator(fn: T) -> T:
            self._commands[command_path] = fn
            return fn

        return decorator

    def default(self, fn: T) -> T:
        """Register the callback used when no subcommand is given."""
        return self.command()(fn)

    def parse_args(
        self,
        tokens: None | str | Iterable[str] = None,
        *,
        print_error: bool | None = None,
        exit_on_error: bool | None = None,
        help_on_error: bool | None = None,
    ) -> ParseResult:
        """Parse ``tokens`` without dispatching.

        Parameters
        ----------
        tokens: None | str | Iterable[str]
            Either a string, or a list of strings. Defaults to ``sys.argv[1:]``.
        print_error: bool | None
            Overrides :attr:`App.print_error` for this call.
        exit_on_error: bool | None
            Overrides :attr:`App.exit_on_error` for this call.
        help_on_error: bool | None
            Overrides :attr:`App.help_on_error` for this call.

        Returns
        -------
        ParseResult
        """
        tokens = normalize_tokens(tokens)
        try:
            return parse(self.spec, tokens, self.env)
        except ClispecError as e:
            print_error = self.print_error if print_error is None else print_error
            exit_on_error = self.exit_on_error if exit_on_error is None else exit_on_error
            help_on_error = self.help_on_error if help_on_error is None else help_on_error

            error_console = self._error_console()
            if help_on_error:
                self.help_print(console=error_console)
            if print_error:
                error_console.print(ErrorPanel(e))
            if exit_on_error:
                sys.exit(1)
            raise

    def __call__(
        self,
        tokens: None | str | Iterable[str] = None,
        *,
        print_error: bool | None = None,
        exit_on_error: bool | None = None,
        help_on_error: bool | None = None,
    ) -> Any:
        """Parse ``tokens`` and act on the result.

        Help, manpage and version requests are printed; a successful parse
        invokes the callback registered for the resolved command path.

        Returns
        -------
        Any
            Return value of the invoked callback, otherwise :obj:`None`.
        """
        result = self.parse_args(
            tokens,
            print_error=print_error,
            exit_on_error=exit_on_error,
            help_on_error=help_on_error,
        )

        match result:
            case ParseOk(config=config, command_path=command_path):
                try:
                    callback = self._commands[command_path]
                except KeyError:
                    logger.debug("No callback registered for %r.", command_path)
                    self.help_print(command_path)
                    return None
                return callback(config)
            case HelpRequest(command_path=command_path) | ManpageRequest(command_path=command_path):
                self.help_print(command_path)
            case VersionRequest():
                self.version_print()
        return None

    def help_print(self, command_path: Iterable[str] = (), *, console: Optional["Console"] = None) -> None:
        from clispec.help import help_print

        help_print(self.spec, tuple(command_path), console=console or self._console())

    def version_print(self, *, console: Optional["Console"] = None) -> None:
        console = console or self._console()
        if self.spec.version is None:
            console.print(f"{self.name} version")
        else:
            console.print(f"{self.name} version {self.spec.version}")
