"""Comparator variants used to decide whether text invokes a command.

A command's raw comparator may be a string, a compiled pattern, a
predicate, or a list of those. ``build_comparator`` resolves the raw value
once into one of the variants below, each exposing ``matches``.
"""

import re
from dataclasses import dataclass
from typing import Any, Callable, Tuple, Union

from .exceptions import InvalidArgumentError

RawComparator = Union[str, "re.Pattern[str]", Callable[[Any], bool], list]


@dataclass(frozen=True)
class TextComparator:
    """Exact string match, case-folded when not case sensitive."""
    text: str
    case_sensitive: bool = True

    def matches(self, token: str, message: Any = None) -> bool:
        if self.case_sensitive:
            return token == self.text
        return token.lower() == self.text.lower()


@dataclass(frozen=True)
class PatternComparator:
    """Regular expression searched in the token."""
    pattern: "re.Pattern[str]"

    def matches(self, token: str, message: Any = None) -> bool:
        return self.pattern.search(token) is not None


@dataclass(frozen=True)
class PredicateComparator:
    """User predicate called with the message (or the token if no message).

    Attributes:
        predicate: Sync callable returning a bool.
    """
    predicate: Callable[[Any], bool]

    def matches(self, token: str, message: Any = None) -> bool:
        result = self.predicate(message if message is not None else token)
        if not isinstance(result, bool):
            raise InvalidArgumentError(
                "Comparator predicate must return a boolean",
                argument="comparator",
                returned=type(result).__name__,
            )
        return result


@dataclass(frozen=True)
class SequenceComparator:
    """Matches when any member comparator matches."""
    members: Tuple[Any, ...]

    def matches(self, token: str, message: Any = None) -> bool:
        return any(member.matches(token, message) for member in self.members)


Comparator = Union[
    TextComparator, PatternComparator, PredicateComparator, SequenceComparator
]


def build_comparator(raw: RawComparator, case_sensitive: bool = True) -> Comparator:
    """Resolve a raw comparator value into its matching variant.

    Args:
        raw: String, compiled pattern, predicate, or list of those.
        case_sensitive: Applied to string comparators.

    Raises:
        InvalidArgumentError: If ``raw`` is none of the supported shapes.
    """
    if isinstance(raw, str):
        return TextComparator(raw, case_sensitive)
    if isinstance(raw, re.Pattern):
        return PatternComparator(raw)
    if isinstance(raw, (list, tuple)):
        return SequenceComparator(
            tuple(build_comparator(item, case_sensitive) for item in raw)
        )
    if callable(raw):
        return PredicateComparator(raw)
    raise InvalidArgumentError(
        "Comparator must be a string, pattern, predicate or list",
        argument="comparator",
        received=type(raw).__name__,
    )
