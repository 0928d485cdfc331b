"""
Near-match suggestions for unrecognized names.

Scope
- levenshtein(a, b): edit distance computed with a single-row dynamic program.
- similarity(a, b): 1 - distance / max(len(a), len(b)), in [0, 1].
- Suggester: ranks candidates by similarity, drops the ones under a minimum,
  caps the count, and formats a “did you mean …?” message.

Ordering contract
- suggest() returns Suggestion tuples sorted ASCENDING by similarity, so the
  best match is the last element (callers wanting “best” take from the tail).
- message() lists the matches best-first.

This module is a collaborator of error reporting only; the parser never calls
it while resolving tokens.
"""
from collections.abc import Iterable
from typing import NamedTuple, final


def levenshtein(first, second, /, *, ignore_case=True):
    """
    edit distance between two strings (insertions, deletions, substitutions).

    a single row of the classic matrix is kept; `previous` holds the diagonal.
    """
    if ignore_case:
        first, second = first.casefold(), second.casefold()
    if first == second:
        return 0
    if not first:
        return len(second)
    if not second:
        return len(first)

    row = list(range(len(second) + 1))
    for i, x in enumerate(first, 1):
        previous, row[0] = row[0], i
        for j, y in enumerate(second, 1):
            current = row[j]
            row[j] = min(
                row[j] + 1,
                row[j - 1] + 1,
                previous + (x != y),
            )
            previous = current
    return row[-1]


def similarity(first, second, /, *, ignore_case=True):
    """
    normalized similarity in [0, 1]; two empty strings are identical (1.0).
    """
    if not (longest := max(len(first), len(second))):
        return 1.0
    return 1 - levenshtein(first, second, ignore_case=ignore_case) / longest


class Suggestion(NamedTuple):
    name: str
    similarity: float


@final
class Suggester:
    """
    configurable suggestion engine.

    parameters
    - min_similarity: float in [0, 1]; candidates scoring below are discarded.
    - max_count: int >= 1; at most this many suggestions are returned.
    - ignore_case: compare case-insensitively (default).
    """

    __slots__ = ("_min_similarity", "_max_count", "_ignore_case")

    def __init__(self, *, min_similarity=0.5, max_count=5, ignore_case=True):
        if not isinstance(min_similarity, int | float) or isinstance(min_similarity, bool):
            raise TypeError("suggester 'min_similarity' must be a number")
        if not 0 <= min_similarity <= 1:
            raise ValueError("suggester 'min_similarity' must be between 0 and 1")
        if not isinstance(max_count, int) or isinstance(max_count, bool):
            raise TypeError("suggester 'max_count' must be an integer")
        if max_count < 1:
            raise ValueError("suggester 'max_count' must be a positive integer")
        self._min_similarity = float(min_similarity)
        self._max_count = max_count
        self._ignore_case = bool(ignore_case)

    @property
    def min_similarity(self):
        return self._min_similarity

    @property
    def max_count(self):
        return self._max_count

    @property
    def ignore_case(self):
        return self._ignore_case

    def suggest(self, value, candidates, /):
        """
        return up to max_count Suggestions for `value`, ascending by similarity.

        duplicate candidates are considered once, in first-seen order; among
        equal scores the earlier candidate ranks better (closer to the tail).
        """
        if not isinstance(value, str):
            raise TypeError("suggest() value must be a string")
        if isinstance(candidates, str) or not isinstance(candidates, Iterable):
            raise TypeError("suggest() candidates must be an iterable of strings")

        scored = []
        for name in dict.fromkeys(candidates):
            score = similarity(value, name, ignore_case=self._ignore_case)
            if score >= self._min_similarity:
                scored.append(Suggestion(name, score))

        scored.sort(key=lambda suggestion: suggestion.similarity, reverse=True)
        return list(reversed(scored[:self._max_count]))

    def message(self, suggestions, /):
        """
        format suggestions (as returned by suggest()) into a hint, or None.
        """
        names = ["`%s`" % suggestion.name for suggestion in reversed(suggestions)]
        match names:
            case []:
                return None
            case [name]:
                return "did you mean %s?" % name
            case [*head, last]:
                return "did you mean any of %s or %s?" % (", ".join(head), last)

    def __repr__(self):
        return (
            f"Suggester(min_similarity={self._min_similarity!r}, "
            f"max_count={self._max_count!r}, ignore_case={self._ignore_case!r})"
        )


def suggest(value, candidates, /, **options):
    """
    shortcut for Suggester(**options).suggest(value, candidates).
    """
    return Suggester(**options).suggest(value, candidates)


def suggestion_message(value, candidates, /, **options):
    """
    shortcut returning the formatted hint (or None) for `value`.
    """
    suggester = Suggester(**options)
    return suggester.message(suggester.suggest(value, candidates))


__all__ = (
    "levenshtein",
    "similarity",
    "Suggestion",
    "Suggester",
    "suggest",
    "suggestion_message",
)
