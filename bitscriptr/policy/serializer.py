"""
Translation of condition and pattern configurations into policy expressions.

The grammar is function-call style with comma separated arguments and no
whitespace: pk(KEY), thresh(M,X,...), after(N), older(N), ALG(HASH),
and(X,Y), or(X,Y).
"""

import logging

from typing import Iterable, Optional

from ..config import (
    CONDITION_TYPES,
    PATTERN_TYPES,
    AbsoluteTimelock,
    Hashlock,
    Inheritance,
    MultiSig,
    PolicyConfig,
    RelativeTimelock,
    SimpleEscrow,
    SingleSig,
    Threshold,
    Vault,
)
from ..errors import ConfigurationError
from ..key import is_key


def pk(key: str) -> str:
    return f"pk({key})"


def thresh(k: int, items: Iterable[str]) -> str:
    return f"thresh({k},{','.join(items)})"


def and_(x: str, y: str) -> str:
    return f"and({x},{y})"


def or_(x: str, y: str) -> str:
    return f"or({x},{y})"


def after(value: int) -> str:
    return f"after({value})"


def older(value: int) -> str:
    return f"older({value})"


def threshold_item(item: str) -> str:
    """Items that classify as keys are wrapped in pk(), anything else is a fragment used as-is."""
    return pk(item) if is_key(item) else item


def serialize(config: PolicyConfig) -> str:
    """Serialize a configuration into a policy expression fragment.

    Raises ConfigurationError if the configuration is incomplete.
    """
    if not isinstance(config, CONDITION_TYPES + PATTERN_TYPES):
        raise ConfigurationError(f"Unknown configuration type: {type(config).__name__}")
    config.check()

    # Conditions
    if isinstance(config, SingleSig):
        return pk(config.key)

    if isinstance(config, MultiSig):
        return thresh(config.m, map(pk, config.keys))

    if isinstance(config, Threshold):
        return thresh(config.m, map(threshold_item, config.items))

    if isinstance(config, AbsoluteTimelock):
        return after(config.value)

    if isinstance(config, RelativeTimelock):
        return older(config.value)

    if isinstance(config, Hashlock):
        return f"{config.algorithm.value}({config.hash})"

    # Patterns
    if isinstance(config, Vault):
        return or_(
            and_(thresh(config.m, map(pk, config.keys)), after(config.delay)),
            pk(config.cancel_key),
        )

    if isinstance(config, Inheritance):
        return or_(
            or_(
                pk(config.owner_key),
                and_(thresh(config.heirs_threshold, map(pk, config.heirs_keys)), after(config.timelock1)),
            ),
            and_(pk(config.third_party_key), after(config.timelock2)),
        )

    if isinstance(config, SimpleEscrow):
        return or_(
            and_(pk(config.party_a_key), pk(config.party_b_key)),
            and_(pk(config.arbiter_key), after(config.timeout)),
        )

    raise ConfigurationError(f"Unknown configuration type: {type(config).__name__}")


def try_serialize(config: PolicyConfig) -> Optional[str]:
    """Like serialize(), but returns None for an incomplete configuration."""
    try:
        return serialize(config)
    except ConfigurationError as e:
        logging.debug("cannot serialize %s: %s", type(config).__name__, e.message)
        return None
