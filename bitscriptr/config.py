"""
Structured configurations for spending conditions and higher-level patterns.

Each configuration is an immutable value; check() raises ConfigurationError
when it is incomplete or out of range.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Tuple, Union

from .common import LOCKTIME_MAX, is_hex
from .errors import ConfigurationError


class ConditionType(Enum):
    SINGLE_SIG = "single-sig"
    MULTI_SIG = "multisig"
    THRESHOLD = "threshold"
    ABSOLUTE_TIMELOCK = "absolute-timelock"
    RELATIVE_TIMELOCK = "relative-timelock"
    HASHLOCK = "hashlock"


class PatternType(Enum):
    VAULT = "vault"
    INHERITANCE = "inheritance"
    SIMPLE_ESCROW = "simple-escrow"


class HashAlgorithm(Enum):
    SHA256 = "sha256"
    HASH256 = "hash256"
    RIPEMD160 = "ripemd160"
    HASH160 = "hash160"

    @property
    def digest_size(self) -> int:
        """Length of the digest, in bytes"""
        if self in (HashAlgorithm.SHA256, HashAlgorithm.HASH256):
            return 32
        return 20


def _require(condition: bool, message: str) -> None:
    if not condition:
        raise ConfigurationError(message)


def _check_m_of_n(m: int, n: int, items: Tuple[str, ...], what: str) -> None:
    _require(
        1 <= m <= n and len(items) == n and all(items),
        f"M, N, and all {what} are required. Ensure 1 <= M <= N (got M={m}, N={n}, {len(items)} {what.lower()}).",
    )


def _check_timelock(value: int, what: str = "Timelock") -> None:
    _require(0 < value <= LOCKTIME_MAX, f"{what} must be greater than 0 and at most {LOCKTIME_MAX} (got {value}).")


# Core conditions

@dataclass(frozen=True)
class SingleSig:
    key: str
    type = ConditionType.SINGLE_SIG

    def check(self) -> None:
        _require(bool(self.key), "Public Key is required.")


@dataclass(frozen=True)
class MultiSig:
    m: int
    n: int
    keys: Tuple[str, ...] = field(default_factory=tuple)
    type = ConditionType.MULTI_SIG

    def __post_init__(self):
        object.__setattr__(self, "keys", tuple(self.keys))

    def check(self) -> None:
        _check_m_of_n(self.m, self.n, self.keys, "Keys")


@dataclass(frozen=True)
class Threshold:
    """M of N items; each item is either a key or a policy fragment."""
    m: int
    n: int
    items: Tuple[str, ...] = field(default_factory=tuple)
    type = ConditionType.THRESHOLD

    def __post_init__(self):
        object.__setattr__(self, "items", tuple(self.items))

    def check(self) -> None:
        _check_m_of_n(self.m, self.n, self.items, "Items")


@dataclass(frozen=True)
class AbsoluteTimelock:
    value: int
    type = ConditionType.ABSOLUTE_TIMELOCK

    def check(self) -> None:
        _check_timelock(self.value)


@dataclass(frozen=True)
class RelativeTimelock:
    value: int
    type = ConditionType.RELATIVE_TIMELOCK

    def check(self) -> None:
        _check_timelock(self.value)


@dataclass(frozen=True)
class Hashlock:
    algorithm: HashAlgorithm
    hash: str
    type = ConditionType.HASHLOCK

    def check(self) -> None:
        _require(bool(self.hash), "Hash is required.")
        _require(isinstance(self.algorithm, HashAlgorithm), f"Unknown hashing algorithm: {self.algorithm}")
        expected = 2 * self.algorithm.digest_size
        _require(
            is_hex(self.hash) and len(self.hash) == expected,
            f"Hash must be a {expected}-character hex string for {self.algorithm.value}.",
        )


# Common patterns

@dataclass(frozen=True)
class Vault:
    """M of N keys may spend after a delay; the cancel key may spend at any time."""
    m: int
    n: int
    keys: Tuple[str, ...]
    delay: int
    cancel_key: str
    type = PatternType.VAULT

    def __post_init__(self):
        object.__setattr__(self, "keys", tuple(self.keys))

    def check(self) -> None:
        _check_m_of_n(self.m, self.n, self.keys, "Keys")
        _check_timelock(self.delay, "Delay")
        _require(bool(self.cancel_key), "Cancel Key is required.")


@dataclass(frozen=True)
class Inheritance:
    """
    The owner may spend at any time, M of the heirs after timelock1 and the
    third party after timelock2.
    """
    owner_key: str
    heirs_keys: Tuple[str, ...]
    heirs_threshold: int
    timelock1: int
    third_party_key: str
    timelock2: int
    type = PatternType.INHERITANCE

    def __post_init__(self):
        object.__setattr__(self, "heirs_keys", tuple(self.heirs_keys))

    def check(self) -> None:
        _require(bool(self.owner_key), "Owner Key is required.")
        _require(len(self.heirs_keys) > 0 and all(self.heirs_keys), "All Heirs Keys are required.")
        _require(
            1 <= self.heirs_threshold <= len(self.heirs_keys),
            f"Heirs Threshold must be between 1 and {len(self.heirs_keys)} (got {self.heirs_threshold}).",
        )
        _check_timelock(self.timelock1, "Timelock 1")
        _require(bool(self.third_party_key), "Third Party Key is required.")
        _check_timelock(self.timelock2, "Timelock 2")
        _require(
            self.timelock2 > self.timelock1,
            f"Timelock 2 ({self.timelock2}) must be greater than Timelock 1 ({self.timelock1}).",
        )


@dataclass(frozen=True)
class SimpleEscrow:
    """Both parties together, or the arbiter after a timeout."""
    party_a_key: str
    party_b_key: str
    arbiter_key: str
    timeout: int
    type = PatternType.SIMPLE_ESCROW

    def check(self) -> None:
        _require(bool(self.party_a_key), "Party A Key is required.")
        _require(bool(self.party_b_key), "Party B Key is required.")
        _require(bool(self.arbiter_key), "Arbiter Key is required.")
        _check_timelock(self.timeout, "Timeout")


ConditionConfig = Union[SingleSig, MultiSig, Threshold, AbsoluteTimelock, RelativeTimelock, Hashlock]
PatternConfig = Union[Vault, Inheritance, SimpleEscrow]
PolicyConfig = Union[ConditionConfig, PatternConfig]

CONDITION_TYPES = (SingleSig, MultiSig, Threshold, AbsoluteTimelock, RelativeTimelock, Hashlock)
PATTERN_TYPES = (Vault, Inheritance, SimpleEscrow)


def default_name(config: PolicyConfig) -> str:
    """Display name for a configuration, e.g. "Single Sig" or "Simple Escrow"."""
    return " ".join(word.capitalize() for word in config.type.value.split("-"))
