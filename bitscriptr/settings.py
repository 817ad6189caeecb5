import logging
import os

from dataclasses import dataclass
from typing import Optional

from .common import Network


DEFAULT_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


@dataclass(frozen=True)
class Settings:
    """Runtime options for the policy pipeline.

    - network: when set, keys that belong to another network are rejected.
    - descriptor_checksum: append the BIP-380 checksum to generated descriptors.
    """
    network: Optional[Network] = None
    descriptor_checksum: bool = False

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            network=Network.from_name(os.getenv("BITSCRIPTR_NETWORK", "any")),
            descriptor_checksum=os.getenv("BITSCRIPTR_DESCRIPTOR_CHECKSUM", "0") == "1",
        )


def configure_logging(level: Optional[str] = None) -> None:
    """Set up the root logger, by default at the level named by BITSCRIPTR_LOG_LEVEL."""
    level_name = (level or os.getenv("BITSCRIPTR_LOG_LEVEL", "WARNING")).upper()
    logging.basicConfig(level=getattr(logging, level_name, logging.WARNING), format=DEFAULT_LOG_FORMAT)
