import pytest

from bitscriptr.errors import PolicyMalformedError
from bitscriptr.policy import fragments
from bitscriptr.policy.parsing import policy_from_str


def test_parse_roundtrip():
    for policy in [
        "pk(key1)",
        "after(500)",
        "older(144)",
        "ripemd160(" + "11" * 20 + ")",
        "and(pk(key1),or(pk(key2),older(10)))",
        "thresh(2,pk(key1),pk(key2),and(pk(key3),after(100)))",
    ]:
        assert str(policy_from_str(policy)) == policy


def test_parse_structure():
    node = policy_from_str("thresh(1,pk(a),or(pk(b),after(7)))")
    assert isinstance(node, fragments.Thresh)
    assert node.k == 1
    assert isinstance(node.subs[1], fragments.Or)
    assert isinstance(node.subs[1].subs[1], fragments.After)
    assert list(node.keys) == ["a", "b"]


def test_parse_tolerates_whitespace():
    assert str(policy_from_str(" and( pk(a) , after(5) ) ")) == "and(pk(a),after(5))"


@pytest.mark.parametrize("policy", [
    "",
    "   ",
    "pk()",
    "pk(a",
    "pk(a,b)",
    "and(pk(a))",
    "or(pk(a),pk(b),pk(c))",
    "thresh(3,pk(a),pk(b))",
    "thresh(x,pk(a),pk(b))",
    "after(0)",
    "after(2147483648)",
    "older(ten)",
    "sha256(abcd)",
    "hash160(zz)",
    "multi(1,a,b)",
    "pk(a)pk(b)",
    "(pk(a))",
])
def test_malformed(policy):
    with pytest.raises(PolicyMalformedError):
        policy_from_str(policy)


def test_fragment_equality():
    assert policy_from_str("or(pk(a),pk(b))") == policy_from_str("or(pk(a), pk(b))")
    assert policy_from_str("after(5)") != policy_from_str("older(5)")


def test_key_needs_a_name():
    with pytest.raises(ValueError):
        fragments.Key("")
    with pytest.raises(PolicyMalformedError):
        policy_from_str("pk()")
