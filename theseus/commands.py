"""
Theseus command tree.

Overview
- Command: a node of the CLI tree. Holds a name, an optional description, an
  optional opaque handler (owned by the orchestration layer, never called
  here), an OptionList, an ArgumentList of positional parameters and an
  ordered set of child commands.

Tree shape
- Children are owned by their parent; sibling names are unique.
- A child keeps its parent's NAME only (lookup, never ownership), so the tree
  holds no reference cycles. A command can be attached to one parent only.

Quick start
    from theseus import Command, CommandOption, Argument

    app = Command("app", options=[
        CommandOption("times", aliases="t", required=True, arguments=Argument(validator=int)),
    ], arguments=[Argument.one_or_more("values")])

    result = app.parse(["--times", "2", "--", "one", "two"])
    result.value_of_option("times")  # "2"
    result.values_of("values")       # ["one", "two"]
"""
from .arguments import SpecType, ArgumentList, _sanitize_name, _sanitize_descr
from .options import OptionList
from .utils import Unset


class Command(metaclass=SpecType):
    """
    Command declaration.

    Parameters
    - name: str (positional-only).
    - descr: str, short help text.
    - handler: any callable, stored as-is for the orchestration layer.
    - options: iterable of CommandOption.
    - arguments: iterable of Argument (positional binding order).
    - children: iterable of Command.
    - hidden / deprecated: bool flags.
    """

    __introspectable__ = (
        "name",
        "descr",
        "handler",
        "hidden",
        "deprecated",
        "options",
        "arguments",
        "children",
        "parent",
    )

    __displayable__ = (
        "name",
        "options",
        "arguments",
        "children",
    )

    def __init__(
            self,
            name,
            /,
            descr=Unset,
            *,
            handler=Unset,
            options=(),
            arguments=(),
            children=(),
            hidden=False,
            deprecated=False,
    ):
        cls = type(self)
        self._name = _sanitize_name(cls, name)
        self._descr = _sanitize_descr(cls, descr)

        if handler is not Unset and not callable(handler):
            raise TypeError(f"{cls.__typename__} 'handler' must be callable")
        self._handler = None if handler is Unset else handler

        for flag, value in (("hidden", hidden), ("deprecated", deprecated)):
            if not isinstance(value, bool):
                raise TypeError(f"{cls.__typename__} {flag!r} must be a boolean")
            setattr(self, "_" + flag, value)

        self._options = OptionList()
        self._arguments = ArgumentList()
        self._children = {}
        self._parent = None

        for option in options:
            self.add_option(option)
        for argument in arguments:
            self.add_argument(argument)
        for child in children:
            self.add_command(child)

    def add_option(self, option, /):
        return self._options.add(option)

    def add_argument(self, argument, /):
        return self._arguments.add(argument)

    def add_command(self, command, /):
        """
        attach `command` as a child; sibling names must be unique.
        """
        if not isinstance(command, Command):
            raise TypeError(f"{self.__typename__} children must be commands")
        if command is self:
            raise ValueError(f"{self.__typename__} {self._name!r} cannot be its own child")
        if command._parent is not None:
            raise ValueError(f"{self.__typename__} {command.name!r} already belongs to {command._parent!r}")
        if command.name in self._children:
            raise ValueError(f"duplicated command {command.name!r} in {self._name!r}")
        command._parent = self._name
        self._children[command.name] = command
        return command

    @property
    def options(self):
        return self._options

    @property
    def arguments(self):
        return self._arguments

    @property
    def children(self):
        return tuple(self._children.values())

    @property
    def parent(self):
        """
        name of the parent command, None for a root.
        """
        return self._parent

    @property
    def root(self):
        return self._parent is None

    @property
    def takes_args(self):
        return len(self._arguments) > 0

    @property
    def has_children(self):
        return bool(self._children)

    def find(self, name, /):
        """
        direct child named `name`, or None.
        """
        return self._children.get(name)

    def walk(self):
        """
        yield this command and every descendant, depth-first.
        """
        yield self
        for child in self._children.values():
            yield from child.walk()

    def parse(self, args, /, **options):
        """
        parse `args` against this command used as the root.

        keyword options are forwarded to Context (prefixes, help, version, ...).
        """
        from .context import Context
        from .parser import Parser

        return Parser(Context(self, **options)).parse(args)

    def __contains__(self, name):
        return name in self._children


__all__ = (
    "Command",
)
