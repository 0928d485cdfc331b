"""
Theseus parsing context.

Overview
- Context: the immutable configuration of a parse, plus the root Command.
    • name prefixes (default "--") introduce option names: `--times`.
    • alias prefixes (default "-") introduce option aliases: `-t`.
    • assign operators (default "=") join an option to its values: `--times=2`.
    • delimiter (default ",") separates assigned values: `--range=1,2`.
    • help / version recognizers, both optional.
- Help / HelpKind: recognizer for a built-in help command (`app help get`),
  option (`app get --help`) or both.
- Version: recognizer for a built-in, no-value version option (`--version`, `-v`).

Build-time contract
- Prefixes, operators and the delimiter must be non-empty and contain no
  whitespace or alphanumerics; violations raise ValueError when the Context
  is constructed.
- A declared option (anywhere in the tree) whose name or alias collides with
  the help/version recognizer, or a root child command named like a
  command-capable help, is rejected with ValueError as well.

Prefix resolution
- The LONGEST known prefix a token starts with wins, so with "--" and "-"
  `--times` is the name `times` and `-t` is the alias `t`.
"""
from collections.abc import Iterable
from enum import Enum
from typing import final

from .arguments import Argument
from .commands import Command
from .options import CommandOption
from .utils import Unset, coalesce


class HelpKind(Enum):
    """
    where the help recognizer answers.
    """
    COMMAND = "command"
    OPTION = "option"
    ANY = "any"


@final
class Help:
    """
    built-in help recognizer.

    - as a command, the executing command is a synthesized `help` command whose
      single argument receives every remaining raw token.
    - as an option, a synthesized `help` option is returned; its argument holds
      the tokens preceding it, or every following token when it comes first.
    """

    __slots__ = ("_name", "_alias", "_descr", "_kind", "_command", "_option")

    def __init__(self, name="help", /, *, alias=Unset, descr=Unset, kind=HelpKind.ANY):
        if not isinstance(kind, HelpKind):
            raise TypeError("help 'kind' must be a help-kind")
        self._name = name
        self._alias = coalesce(alias)
        self._descr = coalesce(descr, "print help information")
        self._kind = kind
        self._command = Command(
            name, self._descr, arguments=[Argument.zero_or_more("command")], hidden=True,
        )
        self._option = CommandOption(
            name, self._descr, aliases=() if self._alias is None else self._alias,
            arguments=[Argument.zero_or_more("command")],
        )

    @property
    def name(self):
        return self._name

    @property
    def alias(self):
        return self._alias

    @property
    def descr(self):
        return self._descr

    @property
    def kind(self):
        return self._kind

    @property
    def is_command(self):
        return self._kind in (HelpKind.COMMAND, HelpKind.ANY)

    @property
    def is_option(self):
        return self._kind in (HelpKind.OPTION, HelpKind.ANY)

    @property
    def command(self):
        """
        the synthesized help command (shared, never bound).
        """
        return self._command

    @property
    def option(self):
        return self._option

    def matches(self, name, /):
        return name == self._name or (self._alias is not None and name == self._alias)

    def __repr__(self):
        return f"Help({self._name!r}, alias={self._alias!r}, kind={self._kind})"


@final
class Version:
    """
    built-in version recognizer (a no-value option).

    `version` is the version string itself, carried for the orchestration
    layer which prints it.
    """

    __slots__ = ("_name", "_alias", "_descr", "_version", "_option")

    def __init__(self, name="version", /, *, alias="v", descr=Unset, version=Unset):
        self._name = name
        self._alias = coalesce(alias)
        self._descr = coalesce(descr, "print version information")
        self._version = coalesce(version)
        self._option = CommandOption(
            name, self._descr, aliases=() if self._alias is None else self._alias,
        )

    @property
    def name(self):
        return self._name

    @property
    def alias(self):
        return self._alias

    @property
    def descr(self):
        return self._descr

    @property
    def version(self):
        return self._version

    @property
    def option(self):
        return self._option

    def matches(self, name, /):
        return name == self._name or (self._alias is not None and name == self._alias)

    def __repr__(self):
        return f"Version({self._name!r}, alias={self._alias!r})"


def _sanitize_symbols(field, symbols, /, *, single=False):
    if isinstance(symbols, str):
        symbols = (symbols,)
    elif not isinstance(symbols, Iterable):
        raise TypeError(f"context {field!r} must be a string or an iterable of strings")
    sanitized = []
    for symbol in symbols:
        if not isinstance(symbol, str):
            raise TypeError(f"context {field!r} must be strings")
        if not symbol:
            raise ValueError(f"context {field!r} cannot be empty")
        if any(char.isspace() for char in symbol):
            raise ValueError(f"context {field!r} cannot contain whitespaces: {symbol!r}")
        if any(char.isalnum() for char in symbol):
            raise ValueError(f"context {field!r} cannot contain alphanumerics: {symbol!r}")
        if single and len(symbol) != 1:
            raise ValueError(f"context {field!r} must be single characters: {symbol!r}")
        if symbol not in sanitized:
            sanitized.append(symbol)
    if not sanitized:
        raise ValueError(f"context {field!r} cannot be empty")
    return tuple(sanitized)


@final
class Context:
    """
    Parsing configuration bound to a root command.

    Parameters
    - root: Command (positional-only).
    - name_prefixes / alias_prefixes: str or iterable of str.
    - assign_operators: str or iterable of single characters.
    - delimiter: single character.
    - help: Help, True (default Help()), or None/False.
    - version: Version, True (default Version()), or None/False.
    """

    __slots__ = (
        "_root",
        "_name_prefixes",
        "_alias_prefixes",
        "_assign_operators",
        "_delimiter",
        "_help",
        "_version",
    )

    def __init__(
            self,
            root,
            /,
            *,
            name_prefixes=("--",),
            alias_prefixes=("-",),
            assign_operators=("=",),
            delimiter=",",
            help=Unset,
            version=Unset,
    ):
        if not isinstance(root, Command):
            raise TypeError("context 'root' must be a command")
        self._root = root
        self._name_prefixes = _sanitize_symbols("name_prefixes", name_prefixes)
        self._alias_prefixes = _sanitize_symbols("alias_prefixes", alias_prefixes)
        self._assign_operators = _sanitize_symbols("assign_operators", assign_operators, single=True)
        self._delimiter, = _sanitize_symbols("delimiter", delimiter, single=True)

        prefixes = self._name_prefixes + self._alias_prefixes
        for operator in self._assign_operators:
            if operator == self._delimiter:
                raise ValueError(f"context assign operator {operator!r} is also the delimiter")
            if any(operator in prefix for prefix in prefixes):
                raise ValueError(f"context assign operator {operator!r} is part of an option prefix")
        if any(self._delimiter == prefix for prefix in prefixes):
            raise ValueError(f"context delimiter {self._delimiter!r} is also an option prefix")

        if isinstance(help, Help):
            self._help = help
        elif help is True:
            self._help = Help()
        elif help is Unset or help is None or help is False:
            self._help = None
        else:
            raise TypeError("context 'help' must be a help, a boolean or None")

        if isinstance(version, Version):
            self._version = version
        elif version is True:
            self._version = Version()
        elif version is Unset or version is None or version is False:
            self._version = None
        else:
            raise TypeError("context 'version' must be a version, a boolean or None")

        self._check_collisions()

    def _check_collisions(self):
        recognizers = []
        if self._help is not None and self._help.is_option:
            recognizers.append(("help", self._help))
        if self._version is not None:
            recognizers.append(("version", self._version))

        for command in self._root.walk():
            for option in command.options:
                for label, recognizer in recognizers:
                    for key in option.keys:
                        if recognizer.matches(key):
                            raise ValueError(
                                f"option {option.name!r} of command {command.name!r} collides with the {label} option {key!r}"
                            )

        if self._help is not None and self._help.is_command and self._help.name in self._root:
            raise ValueError(f"command {self._help.name!r} collides with the help command")

    @property
    def root(self):
        return self._root

    @property
    def name_prefixes(self):
        return self._name_prefixes

    @property
    def alias_prefixes(self):
        return self._alias_prefixes

    @property
    def assign_operators(self):
        return self._assign_operators

    @property
    def delimiter(self):
        return self._delimiter

    @property
    def help(self):
        return self._help

    @property
    def version(self):
        return self._version

    def is_name_prefix(self, prefix, /):
        return prefix in self._name_prefixes

    def is_alias_prefix(self, prefix, /):
        return prefix in self._alias_prefixes

    def prefix_of(self, value, /):
        """
        longest known prefix `value` starts with, or None.
        """
        matches = [prefix for prefix in self._name_prefixes + self._alias_prefixes if value.startswith(prefix)]
        return max(matches, key=len) if matches else None

    def is_prefixed(self, value, /):
        return self.prefix_of(value) is not None

    def trim_prefix(self, value, /):
        """
        strip the longest known prefix, or return `value` unchanged.
        """
        if (prefix := self.prefix_of(value)) is None:
            return value
        return value[len(prefix):]

    def is_help(self, name, /):
        return self._help is not None and self._help.matches(name)

    def is_version(self, name, /):
        return self._version is not None and self._version.matches(name)

    def is_help_command(self, name, /):
        return self._help is not None and self._help.is_command and name == self._help.name

    def is_help_option(self, name, /):
        return self._help is not None and self._help.is_option and self._help.matches(name)

    def find_option(self, command, name, /):
        """
        resolve an unprefixed option name or alias for `command`.

        the help and version recognizers answer first; None when nothing matches.
        """
        if self.is_help_option(name):
            return self._help.option
        if self.is_version(name):
            return self._version.option
        return command.options.get(name)

    def __repr__(self):
        return (
            f"Context({self._root.name!r}, name_prefixes={self._name_prefixes!r}, "
            f"alias_prefixes={self._alias_prefixes!r}, assign_operators={self._assign_operators!r}, "
            f"delimiter={self._delimiter!r}, help={self._help!r}, version={self._version!r})"
        )

    def __rich_repr__(self):
        yield "root", self._root.name
        yield "name_prefixes", self._name_prefixes
        yield "alias_prefixes", self._alias_prefixes
        yield "assign_operators", self._assign_operators
        yield "delimiter", self._delimiter
        yield "help", self._help, None
        yield "version", self._version, None


__all__ = (
    "HelpKind",
    "Help",
    "Version",
    "Context",
)
