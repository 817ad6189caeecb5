import pytest

from bitscriptr import Network, classify_key, is_key
from bitscriptr.errors import KeyRejectedError
from bitscriptr.key import require_valid_key, split_key_expression

from conftest import (
    MAINNET_XPRV,
    MAINNET_XPUB,
    TESTNET_TPRV,
    TESTNET_TPUB,
    compressed_pubkey,
    get_pseudorandom_keypair,
    make_wif,
    uncompressed_pubkey,
    with_version,
)


ZPUB_VERSION = bytes.fromhex("04b24746")
ZPRV_VERSION = bytes.fromhex("04b2430c")


def test_compressed_pubkey():
    for secret in [1, 2, 1234567]:
        result = classify_key(compressed_pubkey(secret))
        assert result.accepted
        assert result.network == Network.UNSPECIFIED


def test_compressed_pubkey_uppercase_hex():
    assert classify_key(compressed_pubkey(3).upper()).accepted


def test_uncompressed_pubkey_rejected():
    key = uncompressed_pubkey(1)
    result = classify_key(key)
    assert not result.accepted
    assert result.reason.startswith(f"Uncompressed public key '{key}'")
    assert "compressed public key (02 or 03 prefix)" in result.reason


def test_hex_with_wrong_prefix_rejected():
    assert not classify_key("05" + compressed_pubkey(1)[2:]).accepted
    assert not classify_key("02" + "00" * 31).accepted  # 64 characters


def test_wif_network_follows_version_byte():
    assert classify_key(make_wif(1, 0x80)).network == Network.MAIN
    assert classify_key(make_wif(1, 0xef)).network == Network.TEST

    # uncompressed WIF keys are encoded with 51 characters
    uncompressed_wif = make_wif(7, 0x80, compressed=False)
    assert len(uncompressed_wif) == 51
    assert classify_key(uncompressed_wif).network == Network.MAIN


def test_wif_unknown_version_rejected():
    assert not classify_key(make_wif(1, 0x00)).accepted


def test_wif_bad_checksum_rejected():
    wif = make_wif(5)
    tampered = wif[:-1] + ("1" if wif[-1] != "1" else "2")
    result = classify_key(tampered)
    assert not result.accepted
    assert result.reason == f"'{tampered}' is not a valid key"


def test_extended_keys():
    assert classify_key(MAINNET_XPUB).network == Network.MAIN
    assert classify_key(MAINNET_XPRV).network == Network.MAIN
    assert classify_key(TESTNET_TPUB).network == Network.TEST
    assert classify_key(TESTNET_TPRV).network == Network.TEST

    xpub, xpriv = get_pseudorandom_keypair("bitscriptr-wallet", network="main")
    assert xpub.startswith("xpub") and classify_key(xpub).accepted
    assert xpriv.startswith("xprv") and classify_key(xpriv).accepted


def test_extended_key_with_origin_and_derivation():
    for key in [
        f"[f5acc2fd/48'/1'/0'/2']{TESTNET_TPUB}/**",
        f"[f5acc2fd]{TESTNET_TPUB}/0/*",
        f"{TESTNET_TPUB}/<0;1>/*",
        f"[deadbeef/84h/0h/0h]{MAINNET_XPUB}/1/2",
    ]:
        assert classify_key(key).accepted, key


def test_extended_key_with_insane_origin_or_derivation():
    result = classify_key(f"[f5acc2f/48'/1']{TESTNET_TPUB}")
    assert not result.accepted
    assert "key origin" in result.reason

    result = classify_key(f"{TESTNET_TPUB}/0/x")
    assert not result.accepted
    assert "derivation path" in result.reason


def test_extended_key_bad_checksum():
    key = TESTNET_TPUB[:-1] + ("h" if TESTNET_TPUB[-1] != "h" else "j")
    result = classify_key(key)
    assert not result.accepted
    assert "could not be decoded" in result.reason


def test_alternate_prefixes_rejected():
    zpub = with_version(MAINNET_XPUB, ZPUB_VERSION)
    assert zpub.startswith("zpub")
    result = classify_key(zpub)
    assert not result.accepted
    assert "'zpub'" in result.reason
    assert result.reason.endswith("Use an xpub/tpub key instead.")

    zprv = with_version(MAINNET_XPRV, ZPRV_VERSION)
    assert zprv.startswith("zprv")
    result = classify_key(zprv)
    assert not result.accepted
    assert result.reason.endswith("Use a WIF or xprv/tprv key instead.")


@pytest.mark.parametrize("key", ["", "key1", "hello world", "02", "0279be", "ypsilon"])
def test_garbage_rejected(key: str):
    result = classify_key(key)
    assert not result.accepted
    assert result.reason == f"'{key}' is not a valid key"


def test_classify_never_raises():
    for key in [None, 42, "[", "]", "/", "[]/", "xpub/" * 10, "\x00" * 52]:
        assert not classify_key(key).accepted


def test_is_key_and_require_valid_key(pubkeys):
    assert is_key(pubkeys[0])
    assert not is_key("after(10)")

    assert require_valid_key(TESTNET_TPUB).network == Network.TEST
    with pytest.raises(KeyRejectedError) as e:
        require_valid_key("nope")
    assert e.value.message == "'nope' is not a valid key"


def test_split_key_expression():
    assert split_key_expression(f"[abcdef01/1']{TESTNET_TPUB}/0/*") == ("[abcdef01/1']", TESTNET_TPUB, "/0/*")
    assert split_key_expression(TESTNET_TPUB) == (None, TESTNET_TPUB, None)
