"""
Utilities to parse policy expressions from their string representation.
"""

from typing import List, Tuple

from ..config import HashAlgorithm
from ..errors import PolicyMalformedError
from . import fragments


HASH_TAGS = {algorithm.value: algorithm for algorithm in HashAlgorithm}


def _excerpt(string: str) -> str:
    return string if len(string) <= 24 else string[:24] + "..."


def split_params(string: str) -> Tuple[List[str], str]:
    """Read a list of terminal values before the next ')'. Split the result by comma."""
    i = string.find(")")
    if i < 0:
        raise PolicyMalformedError(f"Missing ')' after '{_excerpt(string)}'")

    params, remaining = string[:i], string[i + 1:]
    if "(" in params:
        raise PolicyMalformedError(f"Unexpected '(' in '{_excerpt(params)}'")
    return [p.strip() for p in params.split(",")], remaining


def parse_many(string: str) -> Tuple[List[fragments.Fragment], str]:
    """Read a list of fragments before the next ')'."""
    subs = []
    remaining = string
    while True:
        sub, remaining = parse_one(remaining)
        subs.append(sub)
        remaining = remaining.lstrip()
        if remaining[:1] == ")":
            return subs, remaining[1:]
        if remaining[:1] != ",":
            raise PolicyMalformedError(f"Expected ',' or ')' at '{_excerpt(remaining)}'")
        remaining = remaining[1:]


def parse_one_num(string: str) -> Tuple[int, str]:
    """Read an integer before the next comma."""
    i = string.find(",")
    if i < 0:
        raise PolicyMalformedError(f"Expected a number followed by ',' at '{_excerpt(string)}'")
    try:
        return int(string[:i].strip()), string[i + 1:]
    except ValueError:
        raise PolicyMalformedError(f"Invalid number '{string[:i].strip()}'")


def _parse_terminal(tag: str, remaining: str) -> Tuple[fragments.Fragment, str]:
    params, remaining = split_params(remaining)
    if len(params) != 1 or not params[0]:
        raise PolicyMalformedError(f"{tag}() takes exactly one argument, got '{','.join(params)}'")
    param = params[0]

    if tag == "pk":
        return fragments.Key(param), remaining

    if tag in ("after", "older"):
        try:
            value = int(param)
        except ValueError:
            raise PolicyMalformedError(f"Invalid {tag}() value '{param}'")
        frag_cls = fragments.After if tag == "after" else fragments.Older
        return frag_cls(value), remaining

    try:
        digest = bytes.fromhex(param)
    except ValueError:
        raise PolicyMalformedError(f"Invalid {tag}() digest '{param}'")
    return fragments.Hash(HASH_TAGS[tag], digest), remaining


def parse_one(string: str) -> Tuple[fragments.Fragment, str]:
    """Read a fragment and its subs recursively from a string.
    Returns the fragment and the part of the string not consumed.
    """
    string = string.lstrip()
    i = string.find("(")
    if i <= 0:
        raise PolicyMalformedError(f"Expected a policy fragment at '{_excerpt(string)}'")
    tag, remaining = string[:i].strip(), string[i + 1:]

    try:
        if tag == "pk" or tag in ("after", "older") or tag in HASH_TAGS:
            return _parse_terminal(tag, remaining)

        if tag in ("and", "or"):
            subs, remaining = parse_many(remaining)
            if len(subs) != 2:
                raise PolicyMalformedError(f"{tag}() takes exactly two arguments, got {len(subs)}")
            frag_cls = fragments.And if tag == "and" else fragments.Or
            return frag_cls(*subs), remaining

        if tag == "thresh":
            k, remaining = parse_one_num(remaining)
            subs, remaining = parse_many(remaining)
            return fragments.Thresh(k, subs), remaining
    except PolicyMalformedError:
        raise
    except ValueError as e:
        raise PolicyMalformedError(str(e))

    raise PolicyMalformedError(f"Unknown policy fragment '{tag}'")


def policy_from_str(policy_str: str) -> fragments.Fragment:
    """Construct a policy fragment from its string representation"""
    if not policy_str or not policy_str.strip():
        raise PolicyMalformedError("Policy string is empty.")
    node, remaining = parse_one(policy_str)
    if remaining.strip():
        raise PolicyMalformedError(f"Unexpected trailing characters '{_excerpt(remaining.strip())}'")
    return node
