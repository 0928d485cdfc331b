"""
Tokens produced by the tokenizer.

- TokenKind: COMMAND, OPTION, ARGUMENT, END_OF_OPTIONS, ASSIGN_OPERATOR.
- Token: (kind, value, prefix, assigned)
    • value: the command name, the option name (prefix stripped), the raw
      argument, the assign operator, or "--".
    • prefix: the option prefix ("--", "-", ...), "" for other kinds.
    • assigned: True for argument values written as `--opt=v1,v2`.
"""
from enum import Enum
from typing import NamedTuple

END_OF_OPTIONS = "--"


class TokenKind(Enum):
    COMMAND = "command"
    OPTION = "option"
    ARGUMENT = "argument"
    END_OF_OPTIONS = "end-of-options"
    ASSIGN_OPERATOR = "assign-operator"


class Token(NamedTuple):
    kind: TokenKind
    value: str
    prefix: str = ""
    assigned: bool = False

    @classmethod
    def command(cls, name, /):
        return cls(TokenKind.COMMAND, name)

    @classmethod
    def option(cls, prefix, name, /):
        return cls(TokenKind.OPTION, name, prefix)

    @classmethod
    def argument(cls, value, /, assigned=False):
        return cls(TokenKind.ARGUMENT, value, assigned=assigned)

    @classmethod
    def end_of_options(cls):
        return cls(TokenKind.END_OF_OPTIONS, END_OF_OPTIONS)

    @classmethod
    def assign_operator(cls, operator, /):
        return cls(TokenKind.ASSIGN_OPERATOR, operator)

    @property
    def is_command(self):
        return self.kind is TokenKind.COMMAND

    @property
    def is_option(self):
        return self.kind is TokenKind.OPTION

    @property
    def is_argument(self):
        return self.kind is TokenKind.ARGUMENT

    @property
    def is_end_of_options(self):
        return self.kind is TokenKind.END_OF_OPTIONS

    @property
    def is_assign_operator(self):
        return self.kind is TokenKind.ASSIGN_OPERATOR

    def __str__(self):
        """
        the raw form of the token, as typed by the user.
        """
        return self.prefix + self.value


__all__ = (
    "END_OF_OPTIONS",
    "TokenKind",
    "Token",
)
