"""
Theseus parser: Token sequence → ParseResult.

Resolution steps
1. Leading COMMAND tokens select the executing command; a token naming no
   child raises UnrecognizedCommandError.
2. OPTION tokens are resolved against the executing command (help and version
   recognizers answer first) and their values are bound:
    • assigned values (`--opt=a,b`) go to that option only;
    • spaced values are taken greedily, argument by argument, up to each
      maximum count; the last argument also absorbs the bare values found
      before a following `--`;
    • default-rescue: when an argument list holds a defaulted argument and
      fewer values are available than the sum of the maximum counts, the
      defaulted argument keeps its defaults and the values go to its siblings.
3. One `--` right after the options is skipped; bare values before it that no
   option received raise InvalidArgumentError.
4. The command's positional arguments are bound the same way; the last one
   receives everything left.
5. Required options are checked, then every un-invoked option carrying
   defaults is added, bound to its defaults.

The first failure aborts the parse; the raised ParseError carries the
partial ParseResult resolved so far (error.result). A help invocation or the
version option short-circuits steps 3 to 5.
"""
import copy
import logging
import warnings
from collections import deque

from .context import Context
from .faults import (
    ParseError,
    InvalidArgumentError,
    InvalidArgumentCountError,
    UnrecognizedOptionError,
    UnrecognizedCommandError,
    MissingOptionError,
    DeprecatedArgumentWarning,
)
from .results import ParseResult
from .tokenizer import Tokenizer, split

logger = logging.getLogger(__name__)


def _rescues(arguments, available, /):
    """
    True when the defaulted argument of `arguments` must keep its defaults.

    a lone argument never rescues: there is no sibling to free values for.
    """
    if arguments.defaulted is None or len(arguments) < 2:
        return False
    return (capacity := arguments.capacity) is None or available < capacity


class _Resolution:
    """
    per-call parsing state (cursor, executing command, bound options/arguments).
    """

    def __init__(self, context, tokens, /):
        self.context = context
        self.tokens = tokens
        self.index = 0
        self.command = context.root
        self.options = {}
        self.arguments = []
        self.finished = False

    def peek(self):
        return self.tokens[self.index] if self.index < len(self.tokens) else None

    def remaining(self):
        return self.tokens[self.index:]

    def snapshot(self):
        return ParseResult(self.command, self.options.values(), self.arguments)

    def run(self):
        try:
            self.resolve_command()
            if not self.finished:
                self.resolve_options()
            if not self.finished:
                self.skip_end_of_options()
                self.resolve_arguments()
                self.check_required()
                self.synthesize_defaults()
        except ParseError as error:
            if error.result is not None:
                raise
            raise copy.replace(error, result=self.snapshot()) from None
        return self.snapshot()

    def resolve_command(self):
        token = self.peek()
        if token is not None and token.is_command and self.context.is_help_command(token.value):
            help = self.context.help.command
            values = [str(token) for token in self.tokens[1:]]
            self.command = help
            self.arguments = [argument.bind(values) for argument in help.arguments]
            self.index = len(self.tokens)
            self.finished = True
            logger.debug("help command invoked for %r", values)
            return

        while (token := self.peek()) is not None and token.is_command:
            if (child := self.command.find(token.value)) is None:
                raise UnrecognizedCommandError(token.value)
            self.command = child
            self.index += 1
            if child.deprecated:
                warnings.warn(DeprecatedArgumentWarning("command %r is deprecated" % child.name, name=child.name))
        logger.debug("executing command: %r", self.command.name)

    def resolve_options(self):
        while (token := self.peek()) is not None and token.is_option:
            if self.context.is_help_option(token.value):
                self.resolve_help_option()
                return

            if (option := self.context.find_option(self.command, token.value)) is None:
                raise UnrecognizedOptionError(token.prefix, token.value)
            self.index += 1
            if option.deprecated:
                warnings.warn(DeprecatedArgumentWarning(
                    "option %r is deprecated" % (token.prefix + option.name), name=option.name,
                ))

            if (operator := self.peek()) is not None and operator.is_assign_operator:
                self.index += 1
                values = []
                while (value := self.peek()) is not None and value.is_argument and value.assigned:
                    values.append(value.value)
                    self.index += 1
                if not option.takes_args:
                    raise InvalidArgumentCountError(
                        "option %r takes no arguments" % (token.prefix + option.name), name=option.name,
                    )
                arguments = self.bind_assigned(option.arguments, values)
            elif option.takes_args:
                if option.assign and (value := self.peek()) is not None and value.is_argument:
                    raise InvalidArgumentError(
                        value.value,
                        "option %r requires an assign operator like %r for its arguments" % (
                            token.prefix + option.name, self.context.assign_operators[0]
                        ),
                    )
                arguments = self.bind_spaced(option.arguments)
            else:
                arguments = []

            self.add_option(option, arguments)
            logger.debug("option %r bound to %r", option.name, [argument.values for argument in arguments])

            if self.context.version is not None and option is self.context.version.option:
                self.finished = True
                return

    def resolve_help_option(self):
        option = self.context.help.option
        if self.index == 0:
            values = [str(token) for token in self.tokens[1:]]
        else:
            values = [str(token) for token in self.tokens[:self.index]]
        self.options[option.name] = option.bind(argument.bind(values) for argument in option.arguments)
        self.index = len(self.tokens)
        self.finished = True
        logger.debug("help option invoked for %r", values)

    def add_option(self, option, arguments, /):
        if (previous := self.options.get(option.name)) is None:
            self.options[option.name] = option.bind(arguments)
            return
        if not option.multiple:
            raise InvalidArgumentCountError("option %r was given more than once" % option.name, name=option.name)
        self.options[option.name] = option.bind(
            old.merge(new) for old, new in zip(previous.arguments, arguments)
        )

    @staticmethod
    def is_value(token, /, *, literal=False):
        if token is None:
            return False
        return token.is_argument or (literal and token.is_end_of_options)

    def take(self, limit, /, *, literal=False):
        """
        consume consecutive bare values, at most `limit` (None: all of them).

        with `literal`, a later `--` counts as the value "--".
        """
        values = []
        while (limit is None or len(values) < limit) and self.is_value(self.peek(), literal=literal):
            token = self.peek()
            values.append(token.value)
            self.index += 1
        return values

    def available(self, *, literal=False):
        count = 0
        for token in self.remaining():
            if not self.is_value(token, literal=literal):
                break
            count += 1
        return count

    def absorb(self):
        """
        consume the bare values preceding the next `--`, if nothing else comes first.
        """
        for offset, token in enumerate(self.remaining()):
            if token.is_end_of_options:
                values = [token.value for token in self.tokens[self.index:self.index + offset]]
                self.index += offset
                return values
            if not token.is_argument:
                break
        return []

    def bind(self, argument, values, /):
        if not values and argument.has_defaults:
            return argument.bind(argument.defaults)
        return argument.bind(values)

    def bind_spaced(self, arguments, /):
        rescue = _rescues(arguments, self.available())
        last = len(arguments) - 1
        bound = []
        for position, argument in enumerate(arguments):
            if rescue and argument.has_defaults:
                logger.debug("argument %r keeps its defaults %r", argument.name, argument.defaults)
                bound.append(argument.bind(argument.defaults))
                continue
            values = self.take(argument.count.max)
            if position == last:
                values.extend(self.absorb())
            bound.append(self.bind(argument, values))
        return bound

    def bind_assigned(self, arguments, values, /):
        values = deque(values)
        rescue = _rescues(arguments, len(values))
        last = len(arguments) - 1
        bound = []
        for position, argument in enumerate(arguments):
            if rescue and argument.has_defaults:
                logger.debug("argument %r keeps its defaults %r", argument.name, argument.defaults)
                bound.append(argument.bind(argument.defaults))
                continue
            if position == last:
                chunk = list(values)
                values.clear()
            else:
                chunk = [values.popleft() for _ in range(argument.count.limit(len(values)))]
            bound.append(self.bind(argument, chunk))
        return bound

    def skip_end_of_options(self):
        for offset, token in enumerate(remaining := self.remaining()):
            if token.is_end_of_options:
                if offset:
                    raise InvalidArgumentError(remaining[0].value, "there are no options expecting arguments")
                self.index += 1
                return

    def resolve_arguments(self):
        arguments = self.command.arguments
        if not arguments:
            if (token := self.peek()) is not None:
                raise InvalidArgumentCountError(
                    "%r takes no arguments" % self.command.name, value=token.value,
                )
            return

        rescue = _rescues(arguments, self.available(literal=True))
        last = len(arguments) - 1
        for position, argument in enumerate(arguments):
            if rescue and argument.has_defaults:
                logger.debug("argument %r keeps its defaults %r", argument.name, argument.defaults)
                self.arguments.append(argument.bind(argument.defaults))
                continue
            if position == last:
                values = [token.value for token in self.remaining()]
                self.index = len(self.tokens)
            else:
                values = self.take(argument.count.max, literal=True)
            self.arguments.append(self.bind(argument, values))
            logger.debug("argument %r bound to %r", argument.name, self.arguments[-1].values)

        if (token := self.peek()) is not None:
            raise InvalidArgumentCountError(
                "too many values for %r: %r is left over" % (self.command.name, token.value), value=token.value,
            )

    def check_required(self):
        for option in self.command.options:
            if option.required and option.name not in self.options:
                raise MissingOptionError(option.name)

    def synthesize_defaults(self):
        for option in self.command.options:
            if option.has_defaults and option.name not in self.options:
                self.options[option.name] = option.bind(
                    argument.bind(argument.defaults) if argument.has_defaults else argument
                    for argument in option.arguments
                )
                logger.debug("option %r added with its defaults", option.name)


class Parser:
    """
    resolves raw strings against a Context.

    parse() accepts an iterable of strings, or a single string split the way a
    shell would. The Parser keeps no state between calls.
    """

    __slots__ = ("_context", "_tokenizer")

    def __init__(self, context, /):
        if not isinstance(context, Context):
            raise TypeError("parser 'context' must be a context")
        self._context = context
        self._tokenizer = Tokenizer(context)

    @property
    def context(self):
        return self._context

    def parse(self, args, /):
        if isinstance(args, str):
            args = split(args)
        tokens = self._tokenizer.tokenize(args)
        return _Resolution(self._context, tokens).run()


def parse(context, args, /):
    """
    shortcut for Parser(context).parse(args).
    """
    return Parser(context).parse(args)


__all__ = (
    "Parser",
    "parse",
)
