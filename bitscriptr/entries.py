"""
Policy entries: the immutable values kept in a policy list.

An entry is a configured policy (a condition or pattern configuration), a
composed policy, or a policy typed in as text. Entries are never modified in
place; the with_*() methods return a new entry.
"""

import random
import string
import time

from dataclasses import dataclass, field, replace
from typing import Optional, Tuple

from .compiler import PolicyCompiler
from .config import PolicyConfig
from .errors import BitscriptrError
from .policy.composition import CompositionKind, compose
from .policy.serializer import serialize
from .settings import Settings
from .validation import validate


def generate_unique_id(prefix: str = "policy") -> str:
    suffix = "".join(random.choices(string.ascii_lowercase + string.digits, k=9))
    return f"{prefix}-{int(time.time() * 1000)}-{suffix}"


# should not be instantiated directly
class PolicyEntry:
    id: str
    name: str
    policy_string: Optional[str]
    is_valid: Optional[bool]
    validation_error: Optional[str]
    selected: bool

    def with_selection(self, selected: bool) -> "PolicyEntry":
        return replace(self, selected=selected)

    def with_policy_string(self, policy_string: Optional[str]) -> "PolicyEntry":
        return replace(self, policy_string=policy_string)

    def with_validation(self, is_valid: bool, validation_error: Optional[str] = None) -> "PolicyEntry":
        return replace(self, is_valid=is_valid, validation_error=validation_error)


@dataclass(frozen=True)
class ConfiguredPolicy(PolicyEntry):
    """A policy built from a condition or pattern configuration."""
    id: str
    name: str
    config: PolicyConfig
    policy_string: Optional[str] = None
    is_valid: Optional[bool] = None
    validation_error: Optional[str] = None
    selected: bool = False


@dataclass(frozen=True)
class TextPolicy(PolicyEntry):
    """A policy expression entered as text."""
    id: str
    name: str
    policy_string: str
    is_valid: Optional[bool] = None
    validation_error: Optional[str] = None
    selected: bool = False


@dataclass(frozen=True)
class ComposedPolicy(PolicyEntry):
    """
    A combination of other entries.

    The constituents are the entries as they were when the composition was
    made; later changes to those entries are not reflected here.
    """
    id: str
    name: str
    kind: CompositionKind
    constituents: Tuple[PolicyEntry, ...] = field(default_factory=tuple)
    threshold: Optional[int] = None
    policy_string: Optional[str] = None
    is_valid: Optional[bool] = None
    validation_error: Optional[str] = None
    selected: bool = False

    def __post_init__(self):
        object.__setattr__(self, "constituents", tuple(self.constituents))


def generate_policy_string(entry: PolicyEntry) -> str:
    """The expression of an entry, (re)generated from its configuration or constituents.

    Raises a BitscriptrError if it cannot be generated.
    """
    if isinstance(entry, ConfiguredPolicy):
        return serialize(entry.config)
    if isinstance(entry, ComposedPolicy):
        return compose(entry.kind, [c.policy_string for c in entry.constituents], entry.threshold)
    if isinstance(entry, TextPolicy):
        return entry.policy_string
    raise BitscriptrError(f"Unknown policy entry type: {type(entry).__name__}")


def update_validation(entry: PolicyEntry, compiler: Optional[PolicyCompiler] = None,
                      settings: Optional[Settings] = None) -> PolicyEntry:
    """Return a copy of `entry` with its expression and validation status refreshed."""
    try:
        policy_string = generate_policy_string(entry)
    except BitscriptrError as e:
        return entry.with_validation(False, e.message)

    verdict = validate(policy_string, compiler, settings)
    return entry.with_policy_string(policy_string).with_validation(verdict.valid, verdict.error)
