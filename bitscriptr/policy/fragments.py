"""
Policy AST elements.

Each element corresponds to one function of the policy grammar. The string
representation of an element is its canonical policy text.
"""

from typing import Iterator, Tuple

from ..common import LOCKTIME_MAX
from ..config import HashAlgorithm


class Fragment:
    """A policy fragment."""

    subs: Tuple["Fragment", ...] = ()

    @property
    def keys(self) -> Iterator[str]:
        """All the keys of this fragment, in order of apparition (with repetitions)."""
        for sub in self.subs:
            yield from sub.keys

    def __eq__(self, other) -> bool:
        return type(self) is type(other) and str(self) == str(other)

    def __hash__(self) -> int:
        return hash((type(self).__name__, str(self)))


class Key(Fragment):
    def __init__(self, name: str):
        if not name:
            raise ValueError("pk() needs a key")
        self.name = name

    @property
    def keys(self) -> Iterator[str]:
        yield self.name

    def __repr__(self):
        return f"pk({self.name})"


class Timelock(Fragment):
    """A virtual class for after() and older()."""

    tag = ""

    def __init__(self, value: int):
        if not 0 < value <= LOCKTIME_MAX:
            raise ValueError(f"{self.tag}() value must be between 1 and {LOCKTIME_MAX}, got {value}")
        self.value = value

    def __repr__(self):
        return f"{self.tag}({self.value})"


class After(Timelock):
    tag = "after"


class Older(Timelock):
    tag = "older"


class Hash(Fragment):
    def __init__(self, algorithm: HashAlgorithm, digest: bytes):
        if len(digest) != algorithm.digest_size:
            raise ValueError(
                f"{algorithm.value}() expects a {algorithm.digest_size}-byte digest, got {len(digest)} bytes"
            )
        self.algorithm = algorithm
        self.digest = digest

    def __repr__(self):
        return f"{self.algorithm.value}({self.digest.hex()})"


class And(Fragment):
    def __init__(self, sub_x: Fragment, sub_y: Fragment):
        self.subs = (sub_x, sub_y)

    def __repr__(self):
        return f"and({','.join(map(str, self.subs))})"


class Or(Fragment):
    def __init__(self, sub_x: Fragment, sub_y: Fragment):
        self.subs = (sub_x, sub_y)

    def __repr__(self):
        return f"or({','.join(map(str, self.subs))})"


class Thresh(Fragment):
    def __init__(self, k: int, subs: Tuple[Fragment, ...]):
        if not 1 <= k <= len(subs):
            raise ValueError(f"thresh() needs 1 <= k <= {len(subs)}, got k={k}")
        self.k = k
        self.subs = tuple(subs)

    def __repr__(self):
        return f"thresh({self.k},{','.join(map(str, self.subs))})"
