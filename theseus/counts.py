"""
Value-count ranges.

ValueCount describes how many values an Argument accepts: an inclusive
[min, max] range where max may be unbounded (None). It is immutable, hashable
and comparable, and knows how to describe itself for messages
("1 value", "2 to 3 values", "1 or more values").

Accepted shorthands (see ValueCount.of)
- int n            → exactly n
- (min, max)       → between min and max (max may be None for “unbounded”)
- range(a, b)      → between a and b - 1
- ValueCount       → returned unchanged
"""
from typing import final


@final
class ValueCount:
    """
    inclusive range of accepted value counts.

    invariants
    - 0 <= min
    - max is None (unbounded) or min <= max
    """

    __slots__ = ("_min", "_max")

    def __init__(self, min=0, max=None, /):
        if not isinstance(min, int) or isinstance(min, bool):
            raise TypeError("value-count 'min' must be an integer")
        if max is not None and (not isinstance(max, int) or isinstance(max, bool)):
            raise TypeError("value-count 'max' must be an integer or None")
        if min < 0:
            raise ValueError("value-count 'min' cannot be negative")
        if max is not None and min > max:
            raise ValueError("value-count 'min' cannot be greater than 'max'")
        self._min = min
        self._max = max

    @classmethod
    def of(cls, source, /):
        """
        build a ValueCount from any accepted shorthand.
        """
        match source:
            case ValueCount():
                return source
            case bool():
                raise TypeError("value-count cannot be built from a boolean")
            case int():
                return cls.exactly(source)
            case range(step=1):
                if len(source) == 0:
                    raise ValueError("value-count range cannot be empty")
                return cls(source.start, source.stop - 1)
            case (min, max):
                return cls(min, max)
            case _:
                raise TypeError(f"cannot build a value-count from {source!r}")

    @classmethod
    def zero(cls):
        return cls(0, 0)

    @classmethod
    def one(cls):
        return cls(1, 1)

    @classmethod
    def any(cls):
        return cls(0, None)

    @classmethod
    def exactly(cls, count, /):
        return cls(count, count)

    @classmethod
    def at_least(cls, min, /):
        return cls(min, None)

    @classmethod
    def at_most(cls, max, /):
        return cls(0, max)

    @classmethod
    def between(cls, min, max, /):
        return cls(min, max)

    @property
    def min(self):
        return self._min

    @property
    def max(self):
        """
        upper bound, or None when unbounded.
        """
        return self._max

    @property
    def bounded(self):
        return self._max is not None

    @property
    def takes_values(self):
        return self._max != 0

    @property
    def is_exact(self):
        return self._min == self._max

    def takes(self, count, /):
        """
        return True when `count` values fit this range.
        """
        return count >= self._min and (self._max is None or count <= self._max)

    def takes_exactly(self, count, /):
        return self._min == count and self._max == count

    def limit(self, available, /):
        """
        clamp the number of values that could be consumed from `available` tokens.
        """
        return available if self._max is None else min(available, self._max)

    def __contains__(self, count):
        return isinstance(count, int) and self.takes(count)

    def __eq__(self, other):
        if not isinstance(other, ValueCount):
            return NotImplemented
        return (self._min, self._max) == (other._min, other._max)

    def __hash__(self):
        return hash((type(self), self._min, self._max))

    def __repr__(self):
        return f"ValueCount({self._min!r}, {self._max!r})"

    def __rich_repr__(self):
        yield self._min
        yield self._max

    def _describe(self):
        if self.is_exact:
            match self._min:
                case 0:
                    return "no values"
                case 1:
                    return "1 value"
                case n:
                    return f"{n} values"
        match self._min, self._max:
            case 0, None:
                return "any number of values"
            case min, None:
                return f"{min} or more values"
            case 0, max:
                return f"{max} or less values"
            case min, max:
                return f"{min} to {max} values"

    def __str__(self):
        return self._describe()


__all__ = (
    "ValueCount",
)
