"""
Classification of the key material that may appear inside a policy expression.

Accepted encodings are compressed hex public keys, WIF private keys and
BIP32 extended keys (xpub/xprv on mainnet, tpub/tprv on testnet). Extended
keys may carry a key origin and a derivation suffix, which are only checked
for their format.
"""

import logging
import re

from dataclasses import dataclass
from typing import Optional, Tuple

from bip32 import BIP32

from .base58 import b58decode_check
from .common import Network, is_hex
from .errors import KeyRejectedError


WIF_VERSIONS = {
    0x80: Network.MAIN,
    0xef: Network.TEST,
}

# Extended key prefixes that can be decoded, with the network they belong to
EXTENDED_PRIVATE_PREFIXES = {"xprv": Network.MAIN, "tprv": Network.TEST}
EXTENDED_PUBLIC_PREFIXES = {"xpub": Network.MAIN, "tpub": Network.TEST}

# BIP49/BIP84-style prefixes: they only differ from xprv/xpub by their version bytes
ALTERNATE_PRIVATE_PREFIXES = ("yprv", "zprv", "vprv")
ALTERNATE_PUBLIC_PREFIXES = ("ypub", "zpub", "vpub")

_ORIGIN_RE = re.compile(r"^\[[0-9a-fA-F]{8}(/[0-9]+['hH]?)*\]$")
_DERIVATION_RE = re.compile(r"^(/([0-9]+['hH]?|<[0-9]+;[0-9]+>))*(/\*['hH]?|/\*\*)?$")


@dataclass(frozen=True)
class KeyClassification:
    """The outcome of classifying a single key-material string."""
    accepted: bool
    network: Network
    reason: str

    def __bool__(self) -> bool:
        return self.accepted


def _accept(network: Network, reason: str) -> KeyClassification:
    return KeyClassification(True, network, reason)


def _reject(reason: str) -> KeyClassification:
    logging.debug("key rejected: %s", reason)
    return KeyClassification(False, Network.UNSPECIFIED, reason)


def split_key_expression(key: str) -> Tuple[Optional[str], str, Optional[str]]:
    """Split "[origin]key/derivation" into its three parts.

    Only the presence of the separators is used here; the format of the
    origin and derivation parts is checked by the caller.
    """
    origin = None
    splitted_key = key.split("]", maxsplit=1)
    if len(splitted_key) == 2:
        origin, key = splitted_key
        origin += "]"

    path = None
    splitted_key = key.split("/", maxsplit=1)
    if len(splitted_key) == 2:
        key, path = splitted_key
        path = "/" + path

    return origin, key, path


def _classify_wif(key: str) -> Optional[KeyClassification]:
    try:
        payload = b58decode_check(key)
    except ValueError:
        return None

    network = WIF_VERSIONS.get(payload[0]) if len(payload) > 0 else None
    if network is None:
        return None

    # 32-byte secret, followed by 0x01 when the matching public key is compressed
    if len(payload) == 33 or (len(payload) == 34 and payload[-1] == 0x01):
        return _accept(network, f"WIF private key ({network})")
    return None


def _classify_extended(key: str) -> Optional[KeyClassification]:
    origin, bare_key, path = split_key_expression(key)
    prefix = bare_key[:4]

    if prefix in ALTERNATE_PRIVATE_PREFIXES:
        return _reject(
            f"Extended private key '{key}' uses the unsupported '{prefix}' prefix. "
            "Use a WIF or xprv/tprv key instead."
        )
    if prefix in ALTERNATE_PUBLIC_PREFIXES:
        return _reject(
            f"Extended public key '{key}' uses the unsupported '{prefix}' prefix. "
            "Use an xpub/tpub key instead."
        )

    if prefix in EXTENDED_PRIVATE_PREFIXES:
        network = EXTENDED_PRIVATE_PREFIXES[prefix]
        decode = BIP32.from_xpriv
        kind = "private"
    elif prefix in EXTENDED_PUBLIC_PREFIXES:
        network = EXTENDED_PUBLIC_PREFIXES[prefix]
        decode = BIP32.from_xpub
        kind = "public"
    else:
        return None

    if origin is not None and not _ORIGIN_RE.match(origin):
        return _reject(f"Insane key origin '{origin}' in extended key '{key}'")
    if path is not None and not _DERIVATION_RE.match(path):
        return _reject(f"Insane derivation path '{path}' in extended key '{key}'")

    try:
        decode(bare_key)
    except Exception as e:
        return _reject(f"Extended {kind} key '{key}' could not be decoded: {e}")

    return _accept(network, f"Extended {kind} key ({network})")


def classify_key(key: str) -> KeyClassification:
    """Classify a single key-material string.

    Never raises: every input ends up either accepted or rejected with a
    human-readable reason.
    """
    if not isinstance(key, str):
        return _reject(f"'{key}' is not a valid key")

    if is_hex(key):
        if len(key) == 66:
            if key[:2] in ("02", "03"):
                return _accept(Network.UNSPECIFIED, "Compressed public key")
        elif len(key) == 130:
            if key[:2] == "04":
                return _reject(
                    f"Uncompressed public key '{key}' is not supported in segwit scripts. "
                    "Use a compressed public key (02 or 03 prefix) instead."
                )

    if len(key) in (51, 52):
        result = _classify_wif(key)
        if result is not None:
            return result

    result = _classify_extended(key)
    if result is not None:
        return result

    return _reject(f"'{key}' is not a valid key")


def is_key(key: str) -> bool:
    return classify_key(key).accepted


def require_valid_key(key: str) -> KeyClassification:
    """Classify a key, raising KeyRejectedError if it is not acceptable."""
    result = classify_key(key)
    if not result.accepted:
        raise KeyRejectedError(result.reason)
    return result
