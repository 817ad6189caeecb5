import random

from typing import List, Tuple

import coincurve
import pytest

from bip32 import BIP32

from bitscriptr import MiniscriptCompiler, PolicyRegistry, Settings
from bitscriptr.base58 import b58decode_check, b58encode_check


random.seed(0)  # make sure tests are repeatable


# BIP32 test vector 1, master key
MAINNET_XPUB = "xpub661MyMwAqRbcFtXgS5sYJABqqG9YLmC4Q1Rdap9gSE8NqtwybGhePY2gZ29ESFjqJoCu1Rupje8YtGqsefD265TMg7usUDFdp6W1EGMcet8"
MAINNET_XPRV = "xprv9s21ZrQH143K3QTDL4LXw2F7HEK3wJUD2nW2nRk4stbPy6cq3jPPqjiChkVvvNKmPGJxWUtg6LnF5kejMRNNU3TGtRBeJgk33yuGBxrMPHi"

TESTNET_TPUB = "tpubDE7NQymr4AFtcJXi9TaWZtrhAdy8QyKmT4U6b9qYByAxCzoyMJ8zw5d8xVLVpbTRAEqP8pVUxjLE2vDt1rSFjaiS8DSz1QcNZ8D1qxUMx1g"
TESTNET_TPRV = "tprv8ZgxMBicQKsPfDTA8ufnUdCDy8qXUDnxd8PYWprimNdtVSk4mBMdkAPF6X1cemMjf6LyznfhwbPCsxfiof4BM4DkE8TQtV3HBw2krSqFqHA"


def compressed_pubkey(secret: int) -> str:
    return coincurve.PrivateKey.from_int(secret).public_key.format(compressed=True).hex()


def uncompressed_pubkey(secret: int) -> str:
    return coincurve.PrivateKey.from_int(secret).public_key.format(compressed=False).hex()


def make_wif(secret: int, version: int = 0x80, compressed: bool = True) -> str:
    payload = bytes([version]) + secret.to_bytes(32, byteorder="big")
    if compressed:
        payload += b'\x01'
    return b58encode_check(payload)


def with_version(extended_key: str, version: bytes) -> str:
    """Re-encode an extended key with different version bytes (e.g. to get a zpub)"""
    return b58encode_check(version + b58decode_check(extended_key)[4:])


def get_pseudorandom_keypair(wallet_name: str, network: str = "test") -> Tuple[str, str]:
    """
    Generates an extended public and private key deterministically from the wallet name.
    """

    bip32 = BIP32.from_seed(wallet_name.encode(), network=network)

    xpub = bip32.get_xpub_from_path("m")
    xpriv = bip32.get_xpriv_from_path("m")

    return xpub, xpriv


@pytest.fixture
def pubkeys() -> List[str]:
    """Distinct compressed public keys"""
    return [compressed_pubkey(i) for i in range(1, 11)]


@pytest.fixture
def compiler() -> MiniscriptCompiler:
    return MiniscriptCompiler()


@pytest.fixture
def settings() -> Settings:
    return Settings()


@pytest.fixture
def registry(compiler: MiniscriptCompiler, settings: Settings) -> PolicyRegistry:
    return PolicyRegistry(compiler, settings)
