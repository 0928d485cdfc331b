"""
Parse results.

ParseResult is the immutable outcome of one parse: the executing Command,
the resolved OptionList and the resolved ArgumentList. Its lists are
read-only and hold bound copies, never the declarations themselves, so a
result can be kept around while the same tree is parsed again.

A ParseError carries a ParseResult too (error.result), built from whatever
was resolved before the failure.
"""
from typing import final

from .arguments import ArgumentList
from .commands import Command
from .options import OptionList


@final
class ParseResult:
    __slots__ = ("_command", "_options", "_arguments")

    def __init__(self, command, /, options=(), arguments=()):
        if not isinstance(command, Command):
            raise TypeError("parse-result 'command' must be a command")
        self._command = command
        self._options = OptionList(options).freeze()
        self._arguments = ArgumentList(arguments).freeze()

    @property
    def command(self):
        """
        the executing command (a declaration, never modified by parsing).
        """
        return self._command

    @property
    def options(self):
        return self._options

    @property
    def arguments(self):
        return self._arguments

    def contains(self, name, /):
        """
        True when the option `name` (or alias) was resolved.
        """
        return name in self._options

    def get_option(self, name, /):
        return self._options.get(name)

    def get_argument(self, name, /):
        return self._arguments.get(name)

    def value_of(self, name, /):
        return self._arguments.value_of(name)

    def values_of(self, name, /):
        return self._arguments.values_of(name)

    def value_of_option(self, name, /):
        if (option := self._options.get(name)) is None:
            return None
        return option.value

    def values_of_option(self, name, /):
        if (option := self._options.get(name)) is None:
            return None
        return option.values

    def __contains__(self, name):
        return name in self._options

    def __eq__(self, other):
        if not isinstance(other, ParseResult):
            return NotImplemented
        return (
            self._command is other._command
            and self._options == other._options
            and self._arguments == other._arguments
        )

    __hash__ = None

    def __repr__(self):
        return f"ParseResult({self._command.name!r}, options={self._options!r}, arguments={self._arguments!r})"

    def __rich_repr__(self):
        yield "command", self._command.name
        yield "options", self._options
        yield "arguments", self._arguments


__all__ = (
    "ParseResult",
)
