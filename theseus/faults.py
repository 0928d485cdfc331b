"""
Theseus faults (parse errors and warnings) and rendering.

Scope
- ErrorKind: the closed taxonomy of parse failures, with stable numeric codes
  grouped by domain so logs/searches stay predictable.
- ParseError and one subclass per ErrorKind: carry the message, the kind
  payload (value / prefix / name) and the partially resolved ParseResult.
- CommandWarning / DeprecatedArgumentWarning: advisories emitted through the
  warnings module while parsing (they never abort a parse).
- getdoc(): optional description lookup for a kind from the host application.

Failure model
- The first failure short-circuits the whole parse. The raised error carries
  whatever ParseResult state had resolved so far (error.result), so usage and
  suggestion collaborators can report precisely.
- Build-time contract violations (bad declarations) are NOT faults: they raise
  TypeError/ValueError at construction time.

Rendering
- Errors and warnings render themselves through rich (__rich__): a header
  “[ prog | code | title ]”, the message, and a single hint. For unrecognized
  commands/options the hint is computed with the suggestion engine against the
  partial result. Host styling follows the __main__ convention
  (__prog__, __styles__, __codes__, __docs__).
"""
from abc import ABC
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Group
from rich.panel import Panel
from rich.text import Text

from .suggestions import Suggester
from .utils import Unset, coalesce


class ErrorKind(IntEnum):
    """
    canonical parse-failure kinds (stable identifiers).

    grouping (by high-level domain)
    - binding (2110x)
      • INVALID_ARGUMENT, INVALID_ARGUMENT_COUNT
    - syntax (2111x)
      • INVALID_EXPRESSION
    - routing (2112x)
      • UNRECOGNIZED_OPTION, UNRECOGNIZED_COMMAND
    - requirements (2113x)
      • MISSING_OPTION
    - delegated (2114x)
      • OTHER (caller-supplied validation messages)
    """
    # --- binding errors (2110x) ---
    INVALID_ARGUMENT            = 21101
    INVALID_ARGUMENT_COUNT      = 21102

    # --- syntax errors (2111x) ---
    INVALID_EXPRESSION          = 21111

    # --- routing errors (2112x) ---
    UNRECOGNIZED_OPTION         = 21121
    UNRECOGNIZED_COMMAND        = 21122

    # --- requirement errors (2113x) ---
    MISSING_OPTION              = 21131

    # --- delegated errors (2114x) ---
    OTHER                       = 21141

    @property
    def title(self):
        """
        short, lowercase label used in headers and str().
        """
        return self.name.lower().replace("_", " ")

    def normalize(self):
        """
        return a host-normalized string for this kind.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


_styles = {
    # header parts
    "prog-name": "bold #E6E6F0",
    "code": "bold #00E5FF",
    "error-title": "bold #FF4DA6",
    "warning-title": "bold #FFC2E0",

    # body
    "error-message": "#C8C8D0",
    "warning-message": "#D6D6DE",
    "hint-arrow": "#9CE19C dim",
    "hint": "italic #9CE19C",
}


def _render(fault, title, code, message, hint):
    main = __import__("__main__")
    colorful = fault.options.get("colorful", True)
    styles = defaultdict(str, _styles | getattr(main, "__styles__", {}))

    def text(fragment, style=""):
        if not fragment:
            return Text("")
        if not colorful:
            return Text(str(fragment))
        return Text(str(fragment), styles[style])

    severity = "error" if isinstance(fault, Exception) else "warning"
    prog = getattr(main, "__prog__", fault.options.get("prog", Unset))
    header = Text.assemble(
        "[ ",
        text(coalesce(prog, "theseus"), "prog-name"),
        " — ",
        *((text(code, "code"), " | ") if code else ()),
        text(title.title(), f"{severity}-title"),
        " ]",
    )
    body = [text(message, f"{severity}-message")]
    if hint:
        body.append(Text.assemble(text(" → ", "hint-arrow"), text(hint, "hint")))

    if fault.options.get("fancy", False):
        return Panel(Group(*body), title=header, title_align="left")
    return Group(header, *body)


class ParseError(Exception):
    """
    base class of every parse failure.

    attributes
    - kind: ErrorKind of the failure (class-level for subclasses).
    - message: human readable, lowercase sentence.
    - result: partially resolved ParseResult (or None when tokenizing failed).
    - options: read-only mapping of extra details (value, prefix, name, hint, ...).
    """
    kind = Unset

    def __init__(self, message=Unset, /, *, result=None, **options):
        if type(self).kind is Unset:
            raise TypeError("ParseError cannot be raised directly, raise one of its subclasses")
        if not isinstance(message, str | Unset):
            raise TypeError("fault message must be a string")
        super().__init__(coalesce(message, ""))
        self.message = coalesce(message, self.kind.title if self.kind else "")
        self.result = result
        self.options = MappingProxyType(options)

    @property
    def value(self):
        return self.options.get("value")

    @property
    def prefix(self):
        return self.options.get("prefix")

    @property
    def name(self):
        return self.options.get("name")

    def suggestions(self, suggester=Unset, /):
        """
        near matches for the unrecognized literal (empty for other kinds).
        """
        return []

    def hint(self, suggester=Unset, /):
        """
        the hint shown under the message: an explicit 'hint' option, else a
        suggestion message, else None.
        """
        if hint := self.options.get("hint"):
            return hint
        suggester = coalesce(suggester, Suggester())
        return suggester.message(self.suggestions(suggester))

    def __str__(self):
        if self.message and self.message != self.kind.title:
            return f"{self.kind.title}: {self.message}"
        return self.kind.title

    def __rich__(self):
        return _render(self, self.kind.title, self.kind.normalize(), self.message, self.hint())

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return _rebuild(type(self), self.message, dict(self.options, result=self.result) | overrides)

    def __reduce__(self):
        return _rebuild, (type(self), self.message, dict(self.options, result=self.result))


def _rebuild(cls, message, options):
    clone = cls.__new__(cls)
    ParseError.__init__(clone, message, **options)
    return clone


class InvalidArgumentError(ParseError):
    """
    a bound value failed a validator or is outside the declared valid values.
    """
    kind = ErrorKind.INVALID_ARGUMENT

    def __init__(self, value, message=Unset, /, **options):
        super().__init__(message, value=value, **options)

    def __str__(self):
        if self.message and self.message != self.kind.title:
            return f"invalid argument {self.value!r}: {self.message}"
        return f"invalid argument {self.value!r}"


class InvalidArgumentCountError(ParseError):
    """
    too few/many values for an argument, option or command, or leftover values.
    """
    kind = ErrorKind.INVALID_ARGUMENT_COUNT


class InvalidExpressionError(ParseError):
    """
    token-level malformation (assign-operator misuse, empty name/value segments).
    """
    kind = ErrorKind.INVALID_EXPRESSION


class UnrecognizedOptionError(ParseError):
    """
    no declared (or synthesized help/version) option matches.
    """
    kind = ErrorKind.UNRECOGNIZED_OPTION

    def __init__(self, prefix, name, message=Unset, /, **options):
        super().__init__(coalesce(message, "unrecognized option %r" % (prefix + name)), prefix=prefix, name=name, **options)

    def suggestions(self, suggester=Unset, /):
        if self.result is None:
            return []
        candidates = {}
        for option in self.result.command.options:
            if option.hidden:
                continue
            for key in (option.name, *option.aliases):
                candidates[key] = option
        suggestions = coalesce(suggester, Suggester()).suggest(self.name, candidates)
        return [
            suggestion._replace(name=self.prefix + suggestion.name)
            for suggestion in suggestions
        ]


class UnrecognizedCommandError(ParseError):
    """
    no child command of the current node matches.
    """
    kind = ErrorKind.UNRECOGNIZED_COMMAND

    def __init__(self, name, message=Unset, /, **options):
        super().__init__(coalesce(message, "unrecognized command %r" % name), name=name, **options)

    def suggestions(self, suggester=Unset, /):
        if self.result is None:
            return []
        return coalesce(suggester, Suggester()).suggest(
            self.name, [child.name for child in self.result.command.children if not child.hidden]
        )


class MissingOptionError(ParseError):
    """
    a required option was not present after parsing.
    """
    kind = ErrorKind.MISSING_OPTION

    def __init__(self, name, message=Unset, /, **options):
        super().__init__(coalesce(message, "option %r is required" % name), name=name, **options)


class OtherError(ParseError):
    """
    caller-supplied validation message (escape hatch).
    """
    kind = ErrorKind.OTHER


_errors = MappingProxyType({
    error.kind: error for error in (
        InvalidArgumentError,
        InvalidArgumentCountError,
        InvalidExpressionError,
        UnrecognizedOptionError,
        UnrecognizedCommandError,
        MissingOptionError,
        OtherError,
    )
})


def errortype(kind, /):
    """
    return the ParseError subclass raised for `kind`.
    """
    if not isinstance(kind, ErrorKind):
        raise TypeError("errortype() argument must be an error-kind")
    return _errors[kind]


class CommandWarning(ABC, Warning):
    def __init__(self, message=Unset, /, **options):
        if not isinstance(message, str | Unset):
            raise TypeError("warning message must be a string")
        super().__init__(coalesce(message, ""))
        self.message = coalesce(message, "")
        self.options = MappingProxyType(options)

    def __rich__(self):
        return _render(self, self.options.get("title", "warning"), None, self.message, self.options.get("hint"))

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class DeprecatedArgumentWarning(CommandWarning, DeprecationWarning): ...


def getdoc(kind, /):
    """
    optional documentation fetch for an error kind.

    the host application may expose a __docs__ mapping in __main__ where keys
    are ErrorKind members and values are short documentation strings; when
    not found, returns None.
    """
    if not isinstance(kind, ErrorKind):
        raise TypeError("getdoc() argument must be an error-kind")
    try:
        return getattr(__import__("__main__"), "__docs__", {})[kind]
    except KeyError:
        return None


__all__ = (
    "ErrorKind",
    "ParseError",
    "InvalidArgumentError",
    "InvalidArgumentCountError",
    "InvalidExpressionError",
    "UnrecognizedOptionError",
    "UnrecognizedCommandError",
    "MissingOptionError",
    "OtherError",
    "errortype",
    "CommandWarning",
    "DeprecatedArgumentWarning",
    "getdoc",
)
