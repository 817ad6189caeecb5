"""
Validation of full policy expressions.

Every embedded key is classified first; only when all keys are acceptable is
the placeholder-rewritten expression handed to the policy compiler.
"""

import logging

from dataclasses import dataclass
from typing import Optional

from .common import Network
from .compiler import MiniscriptCompiler, PolicyCompiler
from .key import classify_key
from .policy.substitution import KeyMap, extract
from .settings import Settings


EMPTY_POLICY_MESSAGE = "Policy string is empty."
UNSOUND_POLICY_MESSAGE = (
    "Policy is not a valid miniscript policy: it violates consensus or standardness script rules."
)


@dataclass(frozen=True)
class Verdict:
    """The outcome of validating a policy expression.

    For a valid policy, `compiled` is the compiler's canonical form (keys
    still as placeholders) and `key_map` maps the placeholders back to keys.
    """
    valid: bool
    error: Optional[str] = None
    compiled: Optional[str] = None
    key_map: Optional[KeyMap] = None

    def __bool__(self) -> bool:
        return self.valid


def _network_mismatch(key: str, network: Network, expected: Optional[Network]) -> Optional[str]:
    if expected is None or network in (Network.UNSPECIFIED, expected):
        return None
    return f"Key '{key}' belongs to the {network} network, but policies are restricted to the {expected} network."


def validate(expr: Optional[str], compiler: Optional[PolicyCompiler] = None, settings: Optional[Settings] = None) -> Verdict:
    """Decide whether a policy expression is sound.

    Never raises: key rejections and compiler failures are reported in the
    returned Verdict.
    """
    compiler = compiler or MiniscriptCompiler()
    settings = settings or Settings()

    if not expr or not expr.strip():
        return Verdict(False, EMPTY_POLICY_MESSAGE)

    rewritten, key_map = extract(expr)

    for placeholder, key in key_map.items():
        classification = classify_key(key)
        if not classification.accepted:
            return Verdict(False, classification.reason)
        mismatch = _network_mismatch(key, classification.network, settings.network)
        if mismatch is not None:
            logging.debug("key %s rejected: %s", placeholder, mismatch)
            return Verdict(False, mismatch)

    # Whatever the compiler raises, the policy is not sound
    try:
        compilation = compiler.compile(rewritten)
    except Exception as e:
        logging.debug("policy compiler failed on %s: %r", rewritten, e)
        return Verdict(False, UNSOUND_POLICY_MESSAGE)

    if not compilation.sound:
        logging.debug("policy %s is not sound: %s", rewritten, compilation.reason)
        return Verdict(False, UNSOUND_POLICY_MESSAGE)

    return Verdict(True, compiled=compilation.canonical_form, key_map=key_map)
