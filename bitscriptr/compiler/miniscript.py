"""
A policy compiler targeting P2WSH miniscript.

Policies are lowered with a fixed, non-optimizing set of rules and every
candidate is type-checked with the bip380 miniscript engine. Placeholders
are swapped for stand-in public keys while type-checking only; the canonical
form that is returned keeps the placeholders.
"""

import logging
import re

from dataclasses import dataclass
from typing import Callable, Dict, List, Mapping, Sequence

import coincurve

from bip380.key import DescriptorKeyError
from bip380.miniscript import Node
from bip380.miniscript import fragments as ms_fragments

from ..errors import UnsoundPolicyError
from ..policy import fragments
from ..policy.parsing import policy_from_str
from . import Compilation


_PK_RE = re.compile(r"\bpk\(([^()]*)\)")
_WRAPPERS_RE = re.compile(r"^[asctdvjnlu]+:")

# Errors raised by bip380 when a fragment does not type-check
BUILD_ERRORS = (AssertionError, ValueError, IndexError, DescriptorKeyError)


def stand_in_key(index: int) -> str:
    """The compressed public key index*G, hex encoded. Index starts at 1."""
    return coincurve.PrivateKey.from_int(index).public_key.format(compressed=True).hex()


def wrap(wrappers: str, ms: str) -> str:
    """Apply miniscript wrappers to a fragment, merging them with existing ones ("s" + "ln:X" -> "sln:X")."""
    if _WRAPPERS_RE.match(ms):
        return wrappers + ms
    return f"{wrappers}:{ms}"


@dataclass(frozen=True)
class SpendingProperties:
    """Signature and malleability properties of a miniscript node.

    Recomputed from the leaves rather than read from the bip380 nodes, whose
    thresh() does not count the signatures required by wrapped items in every
    release.
    """
    needs_sig: bool
    forced: bool
    expressive: bool
    nonmalleable: bool


def analyze(node: Node) -> SpendingProperties:
    subs = [analyze(sub) for sub in node.subs]

    if isinstance(node, ms_fragments.Thresh):
        n, k = len(subs), node.k
        s_count = sum(1 for sub in subs if sub.needs_sig)
        all_e = all(sub.expressive for sub in subs)
        all_m = all(sub.nonmalleable for sub in subs)
        return SpendingProperties(
            needs_sig=s_count > n - k,
            forced=False,
            expressive=all_e and s_count == n,
            nonmalleable=all_e and all_m and s_count >= n - k,
        )

    if isinstance(node, ms_fragments.AndV):
        x, y = subs
        needs_sig = x.needs_sig or y.needs_sig
        return SpendingProperties(needs_sig, needs_sig, False, x.nonmalleable and y.nonmalleable)

    if isinstance(node, ms_fragments.OrD):
        x, z = subs
        return SpendingProperties(
            needs_sig=x.needs_sig and z.needs_sig,
            forced=x.forced and z.forced,
            expressive=x.expressive and z.expressive,
            nonmalleable=x.nonmalleable and z.nonmalleable and (x.needs_sig or z.needs_sig) and x.expressive,
        )

    # Also covers the l: and u: wrappers
    if isinstance(node, ms_fragments.OrI):
        x, z = subs
        return SpendingProperties(
            needs_sig=x.needs_sig and z.needs_sig,
            forced=x.forced and z.forced,
            expressive=x.expressive and z.forced or x.forced and z.expressive,
            nonmalleable=x.nonmalleable and z.nonmalleable,
        )

    if isinstance(node, ms_fragments.WrapV):
        sub, = subs
        return SpendingProperties(sub.needs_sig, True, False, sub.nonmalleable)

    if isinstance(node, (ms_fragments.WrapA, ms_fragments.WrapS, ms_fragments.WrapC, ms_fragments.WrapN)):
        return subs[0]

    # Leaves, and fragments the lowering never produces
    return SpendingProperties(node.needs_sig, node.is_forced, node.is_expressive, node.is_nonmalleable)


class _Lowering:
    def __init__(self, stand_ins: Mapping[str, str]):
        self.stand_ins = stand_ins
        self._built: Dict[str, Node] = {}

    def instantiate(self, ms: str) -> str:
        return _PK_RE.sub(lambda m: f"pk({self.stand_ins[m.group(1)]})", ms)

    def build(self, ms: str) -> Node:
        if ms not in self._built:
            self._built[ms] = Node.from_str(self.instantiate(ms))
        return self._built[ms]

    def pick(self, candidates: Sequence[str], predicate: Callable[[Node], bool]) -> str:
        """First candidate that type-checks and matches the predicate, else the first that type-checks."""
        valid: List[str] = []
        for ms in candidates:
            try:
                node = self.build(ms)
            except BUILD_ERRORS as e:
                logging.debug("miniscript candidate %s rejected: %r", ms, e)
                continue
            if predicate(node):
                return ms
            valid.append(ms)

        if not valid:
            raise UnsoundPolicyError(f"No type-correct miniscript among: {', '.join(candidates)}")
        return valid[0]

    def lower(self, frag: fragments.Fragment) -> str:
        if isinstance(frag, fragments.Key):
            return f"pk({frag.name})"

        if isinstance(frag, (fragments.Timelock, fragments.Hash)):
            return str(frag)

        if isinstance(frag, fragments.And):
            x, y = map(self.lower, frag.subs)
            return f"and_v({wrap('v', x)},{y})"

        if isinstance(frag, fragments.Or):
            x, y = map(self.lower, frag.subs)
            return self.pick(
                [f"or_d({x},{y})", f"or_d({y},{x})", f"or_i({x},{y})"],
                lambda node: analyze(node).nonmalleable,
            )

        if isinstance(frag, fragments.Thresh):
            items = [self.lower(sub) for sub in frag.subs]
            first = self.pick(
                [items[0], wrap("ln", items[0])],
                lambda node: node.p.has_all("Bdu"),
            )
            rest = [
                self.pick(
                    [wrap("s", x), wrap("a", x), wrap("sln", x), wrap("aln", x)],
                    lambda node: node.p.has_all("Wdu"),
                )
                for x in items[1:]
            ]
            return f"thresh({frag.k},{','.join([first] + rest)})"

        raise UnsoundPolicyError(f"Cannot lower policy fragment {frag}")


def insanity_reason(node: Node) -> str:
    """Why a miniscript is not sane for P2WSH, or an empty string if it is."""
    if not node.p.B:
        return f"top-level fragment is of type {node.p.type()}, not B"
    properties = analyze(node)
    if not properties.needs_sig:
        return "a spending path does not require any signature"
    if not properties.nonmalleable:
        return "the script admits malleable satisfactions"
    if not node.no_timelock_mix:
        return "the script mixes height-based and time-based timelocks"
    return ""


class MiniscriptCompiler:
    """Compile policies to P2WSH miniscript and check they are sane."""

    def compile(self, policy: str) -> Compilation:
        policy_frag = policy_from_str(policy)

        all_keys = list(policy_frag.keys)
        names = list(dict.fromkeys(all_keys))
        if len(names) != len(all_keys):
            return Compilation(False, "", "the same key is used more than once")

        lowering = _Lowering({name: stand_in_key(i) for i, name in enumerate(names, start=1)})
        try:
            ms = lowering.lower(policy_frag)
            node = lowering.build(ms)
        except UnsoundPolicyError as e:
            return Compilation(False, "", e.message)
        except BUILD_ERRORS as e:
            return Compilation(False, "", f"miniscript construction failed: {e!r}")

        reason = insanity_reason(node)
        logging.debug("compiled %s to %s (%s)", policy, ms, reason or "sane")
        if reason:
            return Compilation(False, ms, reason)
        return Compilation(True, ms)
