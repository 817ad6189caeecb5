from enum import Enum
from typing import Optional

import hashlib


# Largest value accepted by after() and older(): both are 4-byte script numbers.
LOCKTIME_MAX: int = 2 ** 31 - 1

HEX_DIGITS: str = "0123456789abcdefABCDEF"


class Network(Enum):
    """
    The network a piece of key material belongs to
    """
    MAIN = "main"  #: Bitcoin Main network
    TEST = "test"  #: Bitcoin Test network (also used by regtest and signet)
    UNSPECIFIED = "unspecified"  #: The encoding does not carry network information

    def __str__(self) -> str:
        return self.value

    def __repr__(self) -> str:
        return str(self)

    @classmethod
    def from_name(cls, name: Optional[str]) -> Optional["Network"]:
        """Map a configuration value ("main", "test" or "any") to a network; "any" maps to None."""
        if name is None or name.lower() in ("", "any"):
            return None
        for network in (cls.MAIN, cls.TEST):
            if network.value == name.lower():
                return network
        raise ValueError(f"Invalid network: '{name}'")


def is_hex(s: str) -> bool:
    return len(s) > 0 and all(c in HEX_DIGITS for c in s)


def sha256(s: bytes) -> bytes:
    return hashlib.new('sha256', s).digest()


def hash256(s: bytes) -> bytes:
    return sha256(sha256(s))
