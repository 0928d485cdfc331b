"""
Theseus option declarations.

Overview
- CommandOption: a named switch of a command (`--name`, `-alias`) carrying an
  ArgumentList of 0, 1 or many value slots.
    • required: the option must be present after parsing.
    • multiple: repeated occurrences merge their values.
    • assign: values are only accepted in the `--name=v1,v2` form.
    • hidden / deprecated: read by help renderers; deprecated use warns.
- OptionList: insertion-ordered collection unique by name AND by alias. An
  alias colliding with another option's name or alias is rejected at
  insertion, and a rejected insertion leaves the list untouched.

Unnamed arguments attached to an option are renamed after the option, so
`CommandOption("times", arguments=[Argument(validator=int)])` binds its value
under "times".
"""
import copy
from collections.abc import Iterable

from .arguments import SpecType, Argument, ArgumentList, _sanitize_name, _sanitize_descr
from .utils import Unset


class CommandOption(metaclass=SpecType):
    """
    Option declaration.

    Parameters
    - name: str (positional-only), without prefix.
    - descr: str, short help text.
    - aliases: str or iterable of str, without prefix.
    - required / multiple / assign / hidden / deprecated: bool flags.
    - arguments: iterable of Argument (or a single Argument).
    """

    __introspectable__ = (
        "name",
        "descr",
        "aliases",
        "required",
        "multiple",
        "assign",
        "hidden",
        "deprecated",
        "arguments",
    )

    __displayable__ = (
        "name",
        "aliases",
        "required",
        "arguments",
    )

    def __init__(
            self,
            name,
            /,
            descr=Unset,
            *,
            aliases=(),
            arguments=(),
            required=False,
            multiple=False,
            assign=False,
            hidden=False,
            deprecated=False,
    ):
        cls = type(self)
        self._name = _sanitize_name(cls, name)
        self._descr = _sanitize_descr(cls, descr)

        if isinstance(aliases, str):
            aliases = (aliases,)
        elif not isinstance(aliases, Iterable):
            raise TypeError(f"{cls.__typename__} 'aliases' must be a string or an iterable of strings")
        self._aliases = []
        for alias in aliases:
            alias = _sanitize_name(cls, alias)
            if alias == self._name or alias in self._aliases:
                raise ValueError(f"{cls.__typename__} {name!r} has a duplicated alias {alias!r}")
            self._aliases.append(alias)
        self._aliases = tuple(self._aliases)

        for flag, value in (
            ("required", required),
            ("multiple", multiple),
            ("assign", assign),
            ("hidden", hidden),
            ("deprecated", deprecated),
        ):
            if not isinstance(value, bool):
                raise TypeError(f"{cls.__typename__} {flag!r} must be a boolean")
            setattr(self, "_" + flag, value)

        self._arguments = ArgumentList()
        if isinstance(arguments, Argument):
            arguments = (arguments,)
        for argument in arguments:
            self.add_argument(argument)

    def add_argument(self, argument, /):
        """
        attach a value slot; an unnamed argument takes this option's name.
        """
        if not isinstance(argument, Argument):
            raise TypeError(f"{self.__typename__} only accepts arguments")
        if not argument.named:
            argument = argument.rename(self._name, self._descr)
        return self._arguments.add(argument)

    @property
    def arguments(self):
        return self._arguments

    @property
    def keys(self):
        """
        every name this option answers to (name first, then aliases).
        """
        return (self._name, *self._aliases)

    @property
    def takes_args(self):
        return len(self._arguments) > 0

    @property
    def has_defaults(self):
        return any(argument.has_defaults for argument in self._arguments)

    @property
    def values(self):
        """
        every value of every argument, flattened.
        """
        return self._arguments.raw()

    @property
    def value(self):
        match self.values:
            case []:
                return None
            case [value]:
                return value
            case values:
                raise ValueError(f"{self.__typename__} {self._name!r} holds {len(values)} values, not one")

    def matches(self, key, /):
        return key == self._name or key in self._aliases

    def convert(self, type=str, /):
        return self._arguments[0].convert(type)

    def convert_all(self, type=str, /):
        return [type(value) for value in self.values]

    def bind(self, arguments, /):
        """
        return a copy of this declaration holding the given bound arguments.
        """
        clone = copy.copy(self)
        clone._arguments = ArgumentList(arguments).freeze()
        return clone

    def __eq__(self, other):
        if not isinstance(other, CommandOption):
            return NotImplemented
        return (
            self._name == other._name
            and self._descr == other._descr
            and self._aliases == other._aliases
            and self._required == other._required
            and self._multiple == other._multiple
            and self._assign == other._assign
            and self._hidden == other._hidden
            and self._deprecated == other._deprecated
            and self._arguments == other._arguments
        )

    __hash__ = None


class OptionList:
    """
    Insertion-ordered collection of CommandOption, unique by name and alias.

    - lookups (get, [], in) accept a name or an alias.
    - freeze() makes the list read-only (used for parse results).
    """

    __slots__ = ("_options", "_keys", "_frozen")

    def __init__(self, options=(), /):
        self._options = []
        self._keys = {}
        self._frozen = False
        for option in options:
            self.add(option)

    def add(self, option, /):
        if self._frozen:
            raise TypeError("option-list is read-only")
        if not isinstance(option, CommandOption):
            raise TypeError("option-list only accepts command-options")
        for key in option.keys:
            if (other := self._keys.get(key)) is not None:
                if key == other.name:
                    raise ValueError(f"duplicated option {key!r}")
                raise ValueError(f"option {option.name!r} collides with alias {key!r} of option {other.name!r}")

        self._options.append(option)
        for key in option.keys:
            self._keys[key] = option
        return option

    def freeze(self):
        self._frozen = True
        return self

    @property
    def frozen(self):
        return self._frozen

    @property
    def names(self):
        return tuple(option.name for option in self._options)

    @property
    def keys(self):
        return tuple(self._keys)

    def get(self, key, default=None, /):
        return self._keys.get(key, default)

    def get_by_name(self, name, /):
        if (option := self._keys.get(name)) is not None and option.name == name:
            return option
        return None

    def get_by_alias(self, alias, /):
        if (option := self._keys.get(alias)) is not None and alias in option.aliases:
            return option
        return None

    def __getitem__(self, key):
        if isinstance(key, int) and not isinstance(key, bool):
            return self._options[key]
        try:
            return self._keys[key]
        except KeyError:
            raise KeyError(f"no option named {key!r}") from None

    def __contains__(self, key):
        return key in self._keys

    def __iter__(self):
        return iter(self._options)

    def __len__(self):
        return len(self._options)

    def __eq__(self, other):
        if not isinstance(other, OptionList):
            return NotImplemented
        return self._options == other._options

    __hash__ = None

    def __copy__(self):
        clone = OptionList()
        clone._options = list(self._options)
        clone._keys = dict(self._keys)
        return clone

    def __repr__(self):
        return f"option-list({", ".join(map(repr, self))})"

    def __rich_repr__(self):
        yield from self


__all__ = (
    "CommandOption",
    "OptionList",
)
