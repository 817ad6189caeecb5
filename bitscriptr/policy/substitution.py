"""
Two-way codec between policies carrying raw key material and policies
carrying opaque placeholders (key1, key2, ...).

The policy compiler only ever sees placeholders, so it never has to
understand WIF, extended keys or key origins.
"""

import re

from typing import Dict, Iterator, Mapping, Tuple


PLACEHOLDER_PREFIX = "key"

_PK_RE = re.compile(r"\bpk\(([^()]*)\)")


def _longest_first(names) -> Tuple[str, ...]:
    return tuple(sorted(names, key=lambda p: (-len(p), p)))


class KeyMap(Mapping[str, str]):
    """An ordered, immutable mapping from placeholder to original key content.

    Placeholders are numbered from 1 in order of first occurrence; a key
    occurring several times is given a single placeholder.
    """

    def __init__(self, keys: Mapping[str, str] = None):
        self._keys: Dict[str, str] = dict(keys or {})

    def __getitem__(self, placeholder: str) -> str:
        return self._keys[placeholder]

    def __iter__(self) -> Iterator[str]:
        return iter(self._keys)

    def __len__(self) -> int:
        return len(self._keys)

    def __repr__(self) -> str:
        return f"KeyMap({self._keys!r})"

    def __eq__(self, other) -> bool:
        if isinstance(other, KeyMap):
            return list(self._keys.items()) == list(other._keys.items())
        return NotImplemented

    def __hash__(self) -> int:
        return hash(tuple(self._keys.items()))

    @property
    def placeholders_by_length(self) -> Tuple[str, ...]:
        """Placeholders longest first, so that key1 never matches the start of key10."""
        return _longest_first(self._keys)


def extract(expr: str) -> Tuple[str, KeyMap]:
    """Replace the content of every pk(...) in `expr` with a placeholder.

    Returns the rewritten expression and the placeholder to key mapping.
    """
    placeholders: Dict[str, str] = {}
    keys: Dict[str, str] = {}

    def substitute(match: re.Match) -> str:
        key = match.group(1)
        if key not in placeholders:
            placeholder = f"{PLACEHOLDER_PREFIX}{len(placeholders) + 1}"
            placeholders[key] = placeholder
            keys[placeholder] = key
        return f"pk({placeholders[key]})"

    rewritten = _PK_RE.sub(substitute, expr)
    return rewritten, KeyMap(keys)


def reinsert(expr: str, key_map: Mapping[str, str]) -> str:
    """Put the original keys back in place of their placeholders.

    All placeholders are substituted in a single pass, trying the longest
    names first; key content that is inserted is never scanned again.
    """
    if len(key_map) == 0:
        return expr

    pattern = re.compile("|".join(re.escape(name) for name in _longest_first(key_map)))
    return pattern.sub(lambda m: key_map[m.group(0)], expr)
