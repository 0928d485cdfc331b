"""
Theseus argument declarations.

Overview
- Argument: one value slot (positional parameter of a command, or a value of
  an option). Declares a name, an optional description, an accepted value
  count (ValueCount), an optional validator, an optional closed set of valid
  values (choices), optional default value(s) and, once parsed, the bound value(s).
- ArgumentList: insertion-ordered, name-unique collection of Argument. Order
  is significant: it is the positional binding order.

- Introspection & representation
  • SpecType metaclass provides stable __repr__/__rich_repr__ and exposes the
    fields listed in __introspectable__ as read-only, frozen properties
    (mirror()).

Lifecycle
- An Argument is declared once and never mutated afterwards. Parsing calls
  bind(values), which validates and returns a NEW bound copy; the declaration
  keeps no trace of the parse, so a tree can be parsed any number of times.
- A bound copy cannot be bound again.

Declaration rules (sanitized on construction / insertion)
- name: non-empty, no whitespace. Unnamed arguments are called "arg", or take
  the name of the option they are attached to.
- count: int | (min, max) | range | ValueCount; exactly-zero is rejected.
- choices: iterable of strings, duplicates rejected; each choice must pass the
  validator when both are given.
- default/defaults: must fit the count, belong to choices, and pass the validator.
- ArgumentList:
  • names are unique;
  • at most one member may carry defaults (the default-rescue rule has no
    tie-break for two candidates);
  • when a member carries defaults, every other member takes an exact count;
  • at most one member takes a variable count.
"""
import copy
import functools
import operator
import re
from collections.abc import Iterable

from .counts import ValueCount
from .faults import InvalidArgumentError, InvalidArgumentCountError, OtherError
from .utils import Unset, coalesce, mirror, rename
from .validators import as_validator

DEFAULT_NAME = "arg"


class SpecType(type):
    """
    Metaclass for declaration types (arguments, options, commands).

    Responsibilities
    - Expose each name in __introspectable__ as a read-only property over the
      private "_<field>" attribute (unless the class body already defines it).
    - Provide stable __repr__/__rich_repr__ driven by __displayable__
      (falling back to __introspectable__).
    - Derive __typename__ from the class name ("CommandOption" → "command-option"),
      used in declaration error messages.
    """
    __introspectable__ = ()
    __displayable__ = Unset

    def __new__(cls, name, bases, namespace, **options):
        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": re.sub(r"(?<!^)(?=[A-Z])", r"-", name).lower(),
            } | {
                field: mirror(field)
                for field in namespace.get("__introspectable__", ())
                if field not in namespace
            },
        )

        @rename("__repr__")
        def __repr__(self):
            return f"{type(self).__typename__}({
                ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__()))
            })"
        if "__repr__" not in namespace:
            self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            for field in coalesce(type(self).__displayable__, type(self).__introspectable__):
                yield field, getattr(self, field)
        if "__rich_repr__" not in namespace:
            self.__rich_repr__ = __rich_repr__

        return self


def _sanitize_name(cls, name, /, *, optional=False):
    """
    Internal: validate a declaration name (non-empty, no whitespace).
    """
    if optional and name is Unset:
        return name
    if not isinstance(name, str):
        raise TypeError(f"{cls.__typename__} 'name' must be a string")
    elif not name.strip():
        raise ValueError(f"{cls.__typename__} 'name' cannot be empty")
    elif any(char.isspace() for char in name):
        raise ValueError(f"{cls.__typename__} 'name' cannot contain whitespaces")
    return name


def _sanitize_descr(cls, descr, /):
    """
    Internal: optional description, non-empty after trimming when provided.
    """
    if not isinstance(descr, str | Unset):
        raise TypeError(f"{cls.__typename__} 'descr' must be a string")
    elif isinstance(descr, str) and not (descr := descr.strip()):
        raise ValueError(f"{cls.__typename__} 'descr' cannot be empty")
    return coalesce(descr)


class Argument(metaclass=SpecType):
    """
    Value slot declaration (positional parameter or option value).

    Parameters
    - name: str (positional-only, optional)
    - descr: str, short help text.
    - count: accepted number of values (default: exactly one).
    - validator: Validator or callable(str) raising ValueError on bad values.
    - error: str replacing the validator reason; reported as ErrorKind.OTHER.
    - choices: closed set of valid string values.
    - default / defaults: value(s) used when nothing is bound.

    Properties
    - values: the bound values, or the defaults while unbound.
    - bound: True once produced by bind().
    """

    __introspectable__ = (
        "name",
        "descr",
        "count",
        "validator",
        "error",
        "choices",
        "defaults",
        "values",
        "bound",
    )

    __displayable__ = (
        "name",
        "count",
        "defaults",
        "values",
    )

    def __init__(
            self,
            name=Unset,
            /,
            descr=Unset,
            *,
            count=Unset,
            validator=Unset,
            error=Unset,
            choices=Unset,
            default=Unset,
            defaults=Unset,
    ):
        cls = type(self)
        self._name = _sanitize_name(cls, name, optional=True)
        self._descr = _sanitize_descr(cls, descr)

        try:
            self._count = ValueCount.one() if count is Unset else ValueCount.of(count)
        except (TypeError, ValueError) as exception:
            raise type(exception)(f"{cls.__typename__} 'count' is invalid: {exception}") from None
        if self._count.takes_exactly(0):
            raise ValueError(f"{cls.__typename__} {self.name!r} cannot take exactly 0 values")

        self._validator = None if validator is Unset else as_validator(validator)

        if not isinstance(error, str | Unset):
            raise TypeError(f"{cls.__typename__} 'error' must be a string")
        elif isinstance(error, str) and not error.strip():
            raise ValueError(f"{cls.__typename__} 'error' cannot be empty")
        self._error = coalesce(error)

        self._choices = self._sanitize_choices(choices)
        self._defaults = self._sanitize_defaults(default, defaults)
        self._values = Unset

    def _sanitize_choices(self, choices, /):
        cls = type(self)
        if choices is Unset:
            return ()
        if isinstance(choices, str) or not isinstance(choices, Iterable):
            raise TypeError(f"{cls.__typename__} 'choices' must be an iterable of strings")
        sanitized = []
        for choice in choices:
            if not isinstance(choice, str):
                raise TypeError(f"{cls.__typename__} 'choices' must be strings")
            if choice in sanitized:
                raise ValueError(f"{cls.__typename__} 'choices' cannot contain duplicates")
            if self._validator is not None:
                try:
                    self._validator.validate(choice)
                except ValueError as exception:
                    raise ValueError(f"{cls.__typename__} choice {choice!r} is rejected by its validator: {exception}") from None
            sanitized.append(choice)
        return tuple(sanitized)

    def _sanitize_defaults(self, default, defaults, /):
        cls = type(self)
        if default is not Unset and defaults is not Unset:
            raise TypeError(f"{cls.__typename__} accepts either 'default' or 'defaults', not both")
        if default is not Unset:
            defaults = (default,)
        elif defaults is Unset:
            return ()
        elif isinstance(defaults, str) or not isinstance(defaults, Iterable):
            raise TypeError(f"{cls.__typename__} 'defaults' must be an iterable of strings")

        defaults = tuple(defaults)
        for value in defaults:
            if not isinstance(value, str):
                raise TypeError(f"{cls.__typename__} default values must be strings")
        if not defaults:
            raise ValueError(f"{cls.__typename__} 'defaults' cannot be empty")
        if not self._count.takes(len(defaults)):
            raise ValueError(
                f"{cls.__typename__} {self.name!r} expects {self._count} but {len(defaults)} defaults were given"
            )
        for value in defaults:
            if self._choices and value not in self._choices:
                raise ValueError(
                    f"{cls.__typename__} default {value!r} is not a valid value: {', '.join(self._choices)}"
                )
            if self._validator is not None:
                try:
                    self._validator.validate(value)
                except ValueError as exception:
                    raise ValueError(f"{cls.__typename__} default {value!r} is rejected by its validator: {exception}") from None
        return defaults

    @classmethod
    def zero_or_one(cls, name=Unset, /, descr=Unset, **options):
        return cls(name, descr, count=(0, 1), **options)

    @classmethod
    def zero_or_more(cls, name=Unset, /, descr=Unset, **options):
        return cls(name, descr, count=(0, None), **options)

    @classmethod
    def one_or_more(cls, name=Unset, /, descr=Unset, **options):
        return cls(name, descr, count=(1, None), **options)

    @property
    def name(self):
        return coalesce(self._name, DEFAULT_NAME)

    @property
    def named(self):
        return self._name is not Unset

    @property
    def values(self):
        """
        bound values, or the declared defaults while unbound.
        """
        return coalesce(self._values, self._defaults)

    @property
    def bound(self):
        return self._values is not Unset

    @property
    def has_defaults(self):
        return bool(self._defaults)

    @property
    def value(self):
        """
        the single value, None when there is none; ValueError when several.
        """
        match self.values:
            case ():
                return None
            case (value,):
                return value
            case values:
                raise ValueError(f"{type(self).__typename__} {self.name!r} holds {len(values)} values, not one")

    def validate(self, value, /):
        """
        check one raw value against the validator and the choices.

        raises InvalidArgumentError (validator/choices) or OtherError (when a
        custom 'error' message was declared).
        """
        if self._validator is not None:
            try:
                self._validator.validate(value)
            except ValueError as exception:
                if self._error is not None:
                    raise OtherError(self._error, value=value, argument=self.name) from None
                raise InvalidArgumentError(value, str(exception) or Unset, argument=self.name) from None
        if self._choices and value not in self._choices:
            raise InvalidArgumentError(value, "valid values: %s" % ", ".join(self._choices), argument=self.name)

    def is_valid(self, value, /):
        try:
            self.validate(value)
        except (InvalidArgumentError, OtherError):
            return False
        return True

    def bind(self, values, /):
        """
        validate `values` and return a bound copy of this declaration.

        raises
        - TypeError when this argument is already bound.
        - InvalidArgumentCountError when the count does not fit.
        - InvalidArgumentError / OtherError when a value is rejected.
        """
        if self.bound:
            raise TypeError(f"{type(self).__typename__} {self.name!r} is already bound")
        if isinstance(values, str) or not isinstance(values, Iterable):
            raise TypeError(f"{type(self).__typename__} values must be an iterable of strings")
        values = tuple(values)
        if not self._count.takes(len(values)):
            raise InvalidArgumentCountError(
                "argument %r expects %s but %d %s given" % (
                    self.name, self._count, len(values), "was" if len(values) == 1 else "were"
                ),
                argument=self.name,
                count=len(values),
            )
        for value in values:
            self.validate(value)

        bound = copy.copy(self)
        bound._values = values
        return bound

    def merge(self, other, /):
        """
        return a bound copy holding the values of both bound arguments, in order.

        each occurrence was checked against the count on its own.
        """
        if not (self.bound and other.bound):
            raise TypeError(f"only bound {self.__typename__}s can be merged")
        merged = copy.copy(self)
        merged._values = self._values + other._values
        return merged

    def rename(self, name, /, descr=Unset):
        """
        return a copy named `name` (used when an unnamed argument joins an option).
        """
        clone = copy.copy(self)
        clone._name = _sanitize_name(type(self), name)
        if clone._descr is None and descr:
            clone._descr = _sanitize_descr(type(self), descr)
        return clone

    def convert(self, type=str, /):
        """
        convert the single value with `type`.
        """
        if len(values := self.values) != 1:
            raise ValueError(f"{self.__typename__} {self.name!r} holds {len(values)} values, not one")
        return type(values[0])

    def convert_all(self, type=str, /):
        return [type(value) for value in self.values]

    def __getitem__(self, index):
        return self.values[index]

    def __iter__(self):
        return iter(self.values)

    def __contains__(self, value):
        return value in self.values

    def __eq__(self, other):
        if not isinstance(other, Argument):
            return NotImplemented
        return (
            self.name == other.name
            and self._descr == other._descr
            and self._count == other._count
            and self._validator is other._validator
            and self._error == other._error
            and self._choices == other._choices
            and self._defaults == other._defaults
            and self._values == other._values
        )

    __hash__ = None


class ArgumentList:
    """
    Insertion-ordered, name-unique collection of Argument.

    - add(argument) rejects duplicates and ambiguous combinations BEFORE
      inserting, so a rejected insertion leaves the list untouched.
    - lookups accept a name (str) or a position (int).
    - freeze() makes the list read-only (used for parse results).
    """

    __slots__ = ("_arguments", "_frozen")

    def __init__(self, arguments=(), /):
        self._arguments = {}
        self._frozen = False
        for argument in arguments:
            self.add(argument)

    def add(self, argument, /):
        if self._frozen:
            raise TypeError("argument-list is read-only")
        if not isinstance(argument, Argument):
            raise TypeError("argument-list only accepts arguments")
        if argument.name in self._arguments:
            raise ValueError(f"duplicated argument {argument.name!r}")

        members = [*self._arguments.values(), argument]
        defaulted = [member for member in members if member.has_defaults]
        if len(defaulted) > 1:
            raise ValueError(
                f"multiple arguments with default values are not allowed: {defaulted[1].name!r} contains default values"
            )
        if defaulted:
            for member in members:
                if not member.has_defaults and not member.count.is_exact:
                    raise ValueError(
                        f"arguments taking a variable count are not allowed next to default values: "
                        f"{member.name!r} takes {member.count}"
                    )
        variable = [member for member in members if not member.count.is_exact]
        if len(variable) > 1:
            raise ValueError(
                f"multiple arguments taking a variable count are not allowed: {variable[1].name!r} takes {variable[1].count}"
            )

        self._arguments[argument.name] = argument
        return argument

    def freeze(self):
        self._frozen = True
        return self

    @property
    def frozen(self):
        return self._frozen

    @property
    def names(self):
        return tuple(self._arguments)

    @property
    def defaulted(self):
        """
        the single member carrying defaults, or None.
        """
        for argument in self._arguments.values():
            if argument.has_defaults:
                return argument
        return None

    @property
    def capacity(self):
        """
        sum of the members' maximum counts, None when any is unbounded.
        """
        total = 0
        for argument in self._arguments.values():
            if argument.count.max is None:
                return None
            total += argument.count.max
        return total

    def get(self, name, default=None, /):
        return self._arguments.get(name, default)

    def raw(self):
        """
        every value of every member, flattened in order.
        """
        return [value for argument in self._arguments.values() for value in argument.values]

    def value_of(self, name, /):
        if (argument := self._arguments.get(name)) is None:
            return None
        return argument.value

    def values_of(self, name, /):
        if (argument := self._arguments.get(name)) is None:
            return None
        return list(argument.values)

    def convert(self, name, type=str, /):
        return self[name].convert(type)

    def convert_all(self, name, type=str, /):
        return self[name].convert_all(type)

    def __getitem__(self, key):
        if isinstance(key, int) and not isinstance(key, bool):
            return list(self._arguments.values())[key]
        try:
            return self._arguments[key]
        except KeyError:
            raise KeyError(f"no argument named {key!r}") from None

    def __contains__(self, name):
        return name in self._arguments

    def __iter__(self):
        return iter(self._arguments.values())

    def __len__(self):
        return len(self._arguments)

    def __eq__(self, other):
        if not isinstance(other, ArgumentList):
            return NotImplemented
        return list(self) == list(other)

    __hash__ = None

    def __copy__(self):
        clone = ArgumentList()
        clone._arguments = dict(self._arguments)
        return clone

    def __repr__(self):
        return f"argument-list({", ".join(map(repr, self))})"

    def __rich_repr__(self):
        yield from self


__all__ = (
    "SpecType",
    "Argument",
    "ArgumentList",
)
