"""
Value validators.

A validator is a capability with a single method, validate(value), which
returns normally when the raw string is acceptable and raises ValueError
(the reason) when it is not. Plain callables are accepted wherever a
validator is: any callable taking one string is adapted by as_validator(),
so converters like int or float work out of the box (int("abc") raising
ValueError is a failed validation).

Provided validators
- TypeValidator(type): value must be convertible by `type`.
- RangeValidator(min, max, type=int): value must convert and fall in [min, max].
- ChoiceValidator(choices): value must be one of a closed set of strings.

Validators are shared, immutable handles: they must not keep per-parse state,
since a declared tree may be parsed many times.
"""
from collections.abc import Iterable
from typing import Protocol, runtime_checkable, final


@runtime_checkable
class Validator(Protocol):
    def validate(self, value: str, /) -> None: ...


@final
class TypeValidator:
    """
    accept any value the converter can build.
    """

    __slots__ = ("_type",)

    def __init__(self, type, /):
        if not callable(type):
            raise TypeError("type-validator 'type' must be callable")
        self._type = type

    @property
    def type(self):
        return self._type

    def validate(self, value, /):
        try:
            self._type(value)
        except (TypeError, ValueError, ArithmeticError):
            raise ValueError("%r is not a valid %s" % (value, getattr(self._type, "__name__", "value"))) from None

    def __repr__(self):
        return f"TypeValidator({getattr(self._type, '__name__', self._type)})"


@final
class RangeValidator:
    """
    accept values that convert through `type` and fall within [min, max].
    """

    __slots__ = ("_min", "_max", "_type")

    def __init__(self, min, max, /, type=int):
        if not callable(type):
            raise TypeError("range-validator 'type' must be callable")
        if not min < max:
            raise ValueError("range-validator 'min' must be lower than 'max'")
        self._min = min
        self._max = max
        self._type = type

    @property
    def min(self):
        return self._min

    @property
    def max(self):
        return self._max

    def validate(self, value, /):
        try:
            number = self._type(value)
        except (TypeError, ValueError, ArithmeticError):
            raise ValueError("%r is not a valid %s" % (value, getattr(self._type, "__name__", "value"))) from None
        if not self._min <= number <= self._max:
            raise ValueError("%s is out of range: %s..%s" % (number, self._min, self._max))

    def __repr__(self):
        return f"RangeValidator({self._min!r}, {self._max!r})"


@final
class ChoiceValidator:
    """
    accept only members of a closed set of strings.
    """

    __slots__ = ("_choices",)

    def __init__(self, choices, /):
        if isinstance(choices, str) or not isinstance(choices, Iterable):
            raise TypeError("choice-validator 'choices' must be an iterable of strings")
        sanitized = []
        for choice in choices:
            if not isinstance(choice, str):
                raise TypeError("choice-validator 'choices' must be strings")
            if choice not in sanitized:
                sanitized.append(choice)
        if not sanitized:
            raise ValueError("choice-validator 'choices' cannot be empty")
        self._choices = tuple(sanitized)

    @property
    def choices(self):
        return self._choices

    def validate(self, value, /):
        if value not in self._choices:
            raise ValueError("valid values: %s" % ", ".join(self._choices))

    def __repr__(self):
        return f"ChoiceValidator({self._choices!r})"


@final
class _CallableValidator:
    __slots__ = ("_function",)

    def __init__(self, function, /):
        self._function = function

    def validate(self, value, /):
        try:
            self._function(value)
        except (TypeError, ArithmeticError) as exception:
            raise ValueError(str(exception) or "%r is not valid" % value) from None

    def __repr__(self):
        return f"validator({getattr(self._function, '__name__', self._function)})"


def as_validator(object, /):
    """
    adapt `object` to the Validator capability.

    - objects with a callable validate() are returned unchanged.
    - plain callables are wrapped: ValueError propagates as the failure reason,
      TypeError and ArithmeticError are converted to ValueError.
    """
    if isinstance(object, Validator):
        return object
    if callable(object):
        return _CallableValidator(object)
    raise TypeError("validator must be callable or provide a validate() method")


def validate_type(type, /):
    return TypeValidator(type)


def validate_range(min, max, /, type=int):
    return RangeValidator(min, max, type)


__all__ = (
    "Validator",
    "TypeValidator",
    "RangeValidator",
    "ChoiceValidator",
    "as_validator",
    "validate_type",
    "validate_range",
)
