"""
Combination of already serialized policies under AND, OR and THRESHOLD.
"""

from enum import Enum
from typing import Optional, Sequence, Union

from ..errors import CompositionError
from .serializer import and_, or_, thresh


class CompositionKind(Enum):
    AND = "and"
    OR = "or"
    THRESHOLD = "threshold"

    def __str__(self) -> str:
        return self.name

    @classmethod
    def parse(cls, kind: Union["CompositionKind", str]) -> "CompositionKind":
        """Accept a CompositionKind, its value ("and") or its name ("AND")."""
        if isinstance(kind, cls):
            return kind
        for member in cls:
            if isinstance(kind, str) and kind.lower() == member.value:
                return member
        raise CompositionError(f"cannot compose: unknown composition kind {kind!r}")


def check_arity(kind: CompositionKind, count: int, threshold: Optional[int] = None) -> None:
    """Raise CompositionError if `count` constituents cannot be composed with `kind`."""
    if kind in (CompositionKind.AND, CompositionKind.OR):
        if count != 2:
            raise CompositionError(
                f"cannot compose: {kind} composition requires exactly 2 constituents, got {count}"
            )
    elif kind == CompositionKind.THRESHOLD:
        if count < 2:
            raise CompositionError(
                f"cannot compose: THRESHOLD composition requires at least 2 constituents, got {count}"
            )
        if threshold is None or not (1 <= threshold <= count):
            raise CompositionError(
                f"cannot compose: threshold must be between 1 and {count}, got {threshold}"
            )
    else:
        raise CompositionError(f"cannot compose: unknown composition kind {kind!r}")


def compose(kind: CompositionKind, expressions: Sequence[Optional[str]], threshold: Optional[int] = None) -> str:
    """Combine the constituents' policy expressions, in order.

    :param threshold: the number of constituents to satisfy, only used by THRESHOLD.
    """
    for i, expression in enumerate(expressions, start=1):
        if not expression:
            raise CompositionError(f"cannot compose: constituent {i} has no generated expression")

    check_arity(kind, len(expressions), threshold)

    if kind == CompositionKind.AND:
        return and_(*expressions)
    if kind == CompositionKind.OR:
        return or_(*expressions)
    return thresh(threshold, expressions)
