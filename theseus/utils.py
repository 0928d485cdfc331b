"""
Theseus internals shared by the declaration model, the tokenizer and the parser.

Overview
- Unset: the "not given" sentinel. None is a meaningful value for several
  declaration fields (descr, handler, parent), so omitted keyword arguments
  default to Unset instead.
- coalesce(value, default): Unset → default, anything else passes through.
- freeze(value): snapshot of a container handed out by read-only properties.
- mirror("field"): property reading self._field through freeze().
- @rename("name"): stable __name__/__qualname__ for generated methods.
"""
import functools
from collections.abc import Mapping, Sequence, Set
from types import MappingProxyType
from typing import final


@final
class UnsetType:
    """
    type of the Unset sentinel (one instance per process, falsy).

    `str | Unset` is accepted by isinstance() so declaration checks can read
    like the type they allow.
    """
    __slots__ = ()

    @functools.cache
    def __new__(cls):
        return super().__new__(cls)

    def __init_subclass__(cls, **options):
        raise TypeError("unset-type cannot be subclassed")

    def __or__(self, other, /):
        try:
            return UnsetType | other
        except TypeError:
            return NotImplemented

    def __ror__(self, other, /):
        try:
            return other | UnsetType
        except TypeError:
            return NotImplemented

    def __bool__(self):
        return False

    def __repr__(self):
        return "Unset"

    def __copy__(self):
        return self

    def __deepcopy__(self, memo, /):
        return self

    def __reduce__(self):
        return "Unset"


Unset = UnsetType()


def coalesce(value, default=None, /):
    """
    return `default` when `value` is Unset, otherwise `value` (even if falsy).
    """
    if value is Unset:
        return default
    return value


def freeze(value, /):
    # lists → tuple, dicts → read-only view over a copy, sets → frozenset
    if isinstance(value, str | bytes | bytearray):
        return value
    if isinstance(value, Sequence):
        return tuple(value)
    if isinstance(value, Mapping):
        return MappingProxyType(dict(value))
    if isinstance(value, Set):
        return frozenset(value)
    return value


def rename(name, /):
    """
    decorator giving the wrapped function the public name `name`.

    used on methods generated by metaclasses so tracebacks and help() show
    `__repr__` rather than a closure name.
    """
    if not isinstance(name, str):
        raise TypeError("@rename() argument must be a string")

    def decorator(function):
        if not callable(function):
            raise TypeError("@rename() must decorate a callable")
        function.__name__ = function.__qualname__ = name
        return function

    return decorator


def mirror(field, /):
    """
    read-only property exposing a frozen snapshot of `self._<field>`.
    """
    if not isinstance(field, str):
        raise TypeError("mirror() argument must be a string")

    @rename(field)
    def getter(self):
        return freeze(getattr(self, f"_{field}"))

    return property(getter)


__all__ = (
    "Unset",
    "UnsetType",
    "coalesce",
    "freeze",
    "rename",
    "mirror",
)
