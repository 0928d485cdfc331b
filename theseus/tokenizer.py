"""
Theseus tokenizer: raw strings → Token sequence.

Algorithm
1. Empty strings are dropped; an empty input yields no tokens.
2. A first token naming the command-capable help recognizer becomes a single
   COMMAND token; everything after it is kept verbatim as ARGUMENT tokens.
3. Otherwise the command tree is descended while the next raw string names a
   child of the current node. When the current node takes no arguments, has
   children, and the next string is not option-prefixed, that string is still
   emitted as a COMMAND (unrecognized, reported by the parser).
4. Option tokens are consumed while the next string is prefixed:
    • `--opt v1 v2` : for a known option, trailing bare strings are taken up
      to the sum of its arguments' maximum counts.
    • `--opt=v1,v2` : one operator, a non-empty name, a delimiter-separated
      list of non-empty values (`"a,b"` keeps the delimiter, `\\"` escapes a
      quote). Malformations are InvalidExpressionError, whether the option is
      declared or not.
5. `--` ends the options and is emitted as END_OF_OPTIONS.
6. Everything left becomes ARGUMENT tokens, except `--`, which is emitted as
   END_OF_OPTIONS again (never collapsed).
"""
import logging
import shlex
from collections import deque

from .context import Context
from .faults import InvalidExpressionError
from .tokens import END_OF_OPTIONS, Token

logger = logging.getLogger(__name__)


class Tokenizer:
    """
    stateless converter bound to a Context.
    """

    __slots__ = ("_context",)

    def __init__(self, context, /):
        if not isinstance(context, Context):
            raise TypeError("tokenizer 'context' must be a context")
        self._context = context

    @property
    def context(self):
        return self._context

    def tokenize(self, args, /):
        if isinstance(args, str):
            raise TypeError("tokenize() expects an iterable of strings, use split() for a prompt")
        stream = deque()
        for arg in args:
            if not isinstance(arg, str):
                raise TypeError("tokenize() arguments must be strings")
            if arg:
                stream.append(arg)

        tokens = []
        if not stream:
            return tokens

        context = self._context
        command = context.root

        if context.is_help_command(stream[0]):
            tokens.append(Token.command(stream.popleft()))
            tokens.extend(Token.argument(value) for value in stream)
            logger.debug("tokenized help invocation: %r", tokens)
            return tokens

        while stream:
            if (child := command.find(stream[0])) is not None:
                command = child
                tokens.append(Token.command(stream.popleft()))
                continue
            if not command.takes_args and command.has_children and not context.is_prefixed(stream[0]):
                tokens.append(Token.command(stream.popleft()))
            break

        while stream:
            if stream[0] == END_OF_OPTIONS:
                stream.popleft()
                tokens.append(Token.end_of_options())
                break
            if (prefix := context.prefix_of(stream[0])) is None:
                break
            value = stream.popleft()
            if (operator := self._find_operator(value, prefix)) is not None:
                tokens.extend(self._assigned(value, prefix, operator))
                continue

            if not (name := value[len(prefix):]):
                raise InvalidExpressionError("no option specified", value=value)
            tokens.append(Token.option(prefix, name))

            if (option := context.find_option(command, name)) is None:
                continue
            for argument in option.arguments:
                taken = 0
                while stream and (argument.count.max is None or taken < argument.count.max):
                    if stream[0] == END_OF_OPTIONS or context.is_prefixed(stream[0]):
                        break
                    tokens.append(Token.argument(stream.popleft()))
                    taken += 1

        for value in stream:
            if value == END_OF_OPTIONS:
                tokens.append(Token.end_of_options())
            else:
                tokens.append(Token.argument(value))

        logger.debug("tokenized %d strings into %r", len(tokens), tokens)
        return tokens

    def _find_operator(self, value, prefix, /):
        """
        the earliest assign operator after the prefix, or None.
        """
        found = None
        for operator in self._context.assign_operators:
            if (index := value.find(operator, len(prefix))) >= 0 and (found is None or index < found[0]):
                found = index, operator
        return None if found is None else found[1]

    def _assigned(self, value, prefix, operator, /):
        head, _, tail = value.partition(operator)
        if not (name := head[len(prefix):]):
            raise InvalidExpressionError("no option specified", value=value)
        if not tail:
            raise InvalidExpressionError("no values specified: %r" % value, value=value)

        values = self._split(tail, value)
        return [
            Token.option(prefix, name),
            Token.assign_operator(operator),
            *(Token.argument(item, assigned=True) for item in values),
        ]

    def _split(self, text, source, /):
        """
        split assigned values on the delimiter, honouring double quotes.
        """
        delimiter = self._context.delimiter
        operators = self._context.assign_operators
        values = []
        current = []
        quoted = False
        index = 0
        while index < len(text):
            char = text[index]
            if char == "\\" and text[index + 1:index + 2] == '"':
                current.append('"')
                index += 2
                continue
            if char == '"':
                quoted = not quoted
            elif quoted:
                current.append(char)
            elif char == delimiter:
                values.append("".join(current))
                current = []
            elif char in operators:
                raise InvalidExpressionError("unexpected assign operator in %r" % source, value=source)
            else:
                current.append(char)
            index += 1

        if quoted:
            raise InvalidExpressionError("unterminated quote in %r" % source, value=source)
        values.append("".join(current))
        if not all(values):
            raise InvalidExpressionError("empty value in %r" % source, value=source)
        return values


def tokenize(context, args, /):
    """
    shortcut for Tokenizer(context).tokenize(args).
    """
    return Tokenizer(context).tokenize(args)


def split(prompt, /):
    """
    split a command line the way a POSIX shell would.
    """
    if not isinstance(prompt, str):
        raise TypeError("split() argument must be a string")
    return shlex.split(prompt)


__all__ = (
    "Tokenizer",
    "tokenize",
    "split",
)
