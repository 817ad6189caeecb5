"""base58 module.

Base58 and Base58Check codecs, as used by WIF private keys and BIP32 extended keys.

Adapted from git://github.com/joric/brutus.git
which was forked from git://github.com/samrushing/caesure.git

Distributed under the MIT/X11 software license, see the accompanying
file COPYING or http://www.opensource.org/licenses/mit-license.php.

"""

from typing import List

from .common import hash256


b58_digits: str = '123456789ABCDEFGHJKLMNPQRSTUVWXYZabcdefghijkmnopqrstuvwxyz'


def b58encode(b: bytes) -> str:
    """Encode bytes to a base58-encoded string"""

    n: int = int.from_bytes(b, byteorder="big")

    temp: List[str] = []
    while n > 0:
        n, r = divmod(n, 58)
        temp.append(b58_digits[r])
    res: str = ''.join(temp[::-1])

    # Leading zero bytes are encoded as leading '1' digits
    pad: int = len(b) - len(b.lstrip(b'\x00'))
    return b58_digits[0] * pad + res


def b58decode(s: str) -> bytes:
    """Decode a base58-encoded string, returning bytes"""
    if not s:
        return b''

    n: int = 0
    for c in s:
        if c not in b58_digits:
            raise ValueError('Character %r is not a valid base58 character' % c)
        n = n * 58 + b58_digits.index(c)

    res: bytes = n.to_bytes((n.bit_length() + 7) // 8, byteorder="big")

    pad: int = len(s) - len(s.lstrip(b58_digits[0]))
    return b'\x00' * pad + res


def b58encode_check(b: bytes) -> str:
    """Encode bytes to a base58-encoded string with a 4-byte checksum"""

    checksum = hash256(b)[0:4]
    return b58encode(b + checksum)


def b58decode_check(s: str) -> bytes:
    """Decode a base58check string and verify its checksum, returning the payload"""
    result_check = b58decode(s)
    if len(result_check) < 4:
        raise ValueError("base58 string is too short to have a checksum")

    result, checksum = result_check[:-4], result_check[-4:]

    if hash256(result)[0:4] != checksum:
        raise ValueError("Checksum failed")

    return result
