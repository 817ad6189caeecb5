import pytest

from bitscriptr.config import (
    AbsoluteTimelock,
    HashAlgorithm,
    Hashlock,
    Inheritance,
    MultiSig,
    RelativeTimelock,
    SimpleEscrow,
    SingleSig,
    Threshold,
    Vault,
)
from bitscriptr.errors import ConfigurationError
from bitscriptr.policy import policy_from_str, serialize, try_serialize


K = "02" + "a" * 64


def test_single_sig():
    assert serialize(SingleSig(K)) == f"pk({K})"


def test_multisig(pubkeys):
    k1, k2, k3 = pubkeys[:3]
    assert serialize(MultiSig(2, 3, [k1, k2, k3])) == f"thresh(2,pk({k1}),pk({k2}),pk({k3}))"


def test_threshold_mixes_keys_and_fragments(pubkeys):
    k1, k2 = pubkeys[:2]
    config = Threshold(2, 3, [k1, k2, "after(1000)"])
    assert serialize(config) == f"thresh(2,pk({k1}),pk({k2}),after(1000))"


def test_timelocks():
    assert serialize(AbsoluteTimelock(840000)) == "after(840000)"
    assert serialize(RelativeTimelock(144)) == "older(144)"


def test_hashlock():
    policy = serialize(Hashlock(HashAlgorithm.SHA256, "0" * 64))
    assert policy == "sha256(" + "0" * 64 + ")"
    # well-formed according to the policy grammar
    assert str(policy_from_str(policy)) == policy

    assert serialize(Hashlock(HashAlgorithm.HASH160, "ff" * 20)) == "hash160(" + "ff" * 20 + ")"


def test_vault(pubkeys):
    k1, cancel = pubkeys[:2]
    assert serialize(Vault(1, 1, [k1], 500, cancel)) == f"or(and(thresh(1,pk({k1})),after(500)),pk({cancel}))"


def test_inheritance(pubkeys):
    owner, heir1, heir2, third = pubkeys[:4]
    config = Inheritance(owner, [heir1, heir2], 1, 52560, third, 105120)
    assert serialize(config) == (
        f"or(or(pk({owner}),and(thresh(1,pk({heir1}),pk({heir2})),after(52560))),"
        f"and(pk({third}),after(105120)))"
    )


def test_simple_escrow(pubkeys):
    a, b, arbiter = pubkeys[:3]
    assert serialize(SimpleEscrow(a, b, arbiter, 4320)) == (
        f"or(and(pk({a}),pk({b})),and(pk({arbiter}),after(4320)))"
    )


def test_incomplete_configuration(pubkeys):
    config = MultiSig(2, 3, pubkeys[:2])
    with pytest.raises(ConfigurationError):
        serialize(config)
    assert try_serialize(config) is None
    assert try_serialize(SingleSig("")) is None


def test_unknown_configuration():
    with pytest.raises(ConfigurationError):
        serialize("pk(abc)")
