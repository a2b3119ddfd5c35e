from enum import Enum, auto

__all__ = [
    "END_OF_OPTIONS",
    "HELP_FLAG",
    "MANPAGE_FLAG",
    "TokenKind",
    "VERSION_FLAG",
    "classify_token",
    "split_long_option",
]

END_OF_OPTIONS = "--"
HELP_FLAG = "--help"
MANPAGE_FLAG = "--help-man"
VERSION_FLAG = "--version"


class TokenKind(Enum):
    DOUBLE_DASH = auto()
    LONG_OPTION = auto()
    SHORT_GROUP = auto()
    POSITIONAL = auto()


def classify_token(token: str) -> TokenKind:
    """Lexical category of a single CLI token.

    A lone ``-`` and the empty string are positionals.
    """
    if token == END_OF_OPTIONS:
        return TokenKind.DOUBLE_DASH
    if len(token) >= 3 and token.startswith("--"):
        return TokenKind.LONG_OPTION
    if len(token) >= 2 and token[0] == "-" and token[1] != "-":
        return TokenKind.SHORT_GROUP
    return TokenKind.POSITIONAL


def split_long_option(token: str) -> tuple[str, str | None]:
    """Split ``--name=value`` on the first ``=``.

    Returns
    -------
    name: str
        Option name without the leading ``--``.
    value: str | None
        Inline value, or :obj:`None` if the token has no ``=``.
    """
    name, sep, value = token[2:].partition("=")
    if not sep:
        return name, None
    return name, value
