#!/usr/bin/env python3

# Copyright (C) 2017-2022 The ecladder developers
#
# This file is part of ecladder. It is subject to the license terms in the
# LICENSE file found in the top-level directory of this distribution.
#
# No part of ecladder including this file, may be copied, modified, propagated,
# or distributed except according to the terms contained in the LICENSE file.

"""Elliptic Curve Digital Signature Algorithm (ECDSA).

Implementation according to SEC 1 v.2:

http://www.secg.org/sec1-v2.pdf

Steps numbering follows SEC 1 v.2 sections 4.1.3 (sign)
and 4.1.4 (verify).
The nonce is sampled at random, unless provided by the caller
(e.g. an RFC6979 deterministic one, see rfc6979_nonce_).
"""

import logging
import secrets
from dataclasses import InitVar, dataclass, field
from hashlib import sha256
from typing import Optional, Tuple, Type, TypeVar

from dataclasses_json import DataClassJsonMixin, config

from ecladder.alias import HashF, Octets, Point, RandBits
from ecladder.ecc.curve import CURVES, Curve, double_mult, mult, secp256k1
from ecladder.ecc.dh import KeyPair, gen_keys
from ecladder.ecc.number_theory import mod_inv
from ecladder.ecc.rfc6979_nonce import challenge_
from ecladder.ecc.sampling import random_scalar, rejection_sample
from ecladder.exceptions import (
    ECLadderRuntimeError,
    NoInverseError,
    OutOfRangeScalarError,
    SignatureInvalidError,
)
from ecladder.hashes import reduce_to_hlen
from ecladder.to_prv_key import PrvKey, int_from_prv_key
from ecladder.to_pub_key import Key, point_from_key
from ecladder.utils import bytes_from_int, bytes_from_octets, int_repr

logger = logging.getLogger(__name__)

__all__ = [
    "KeyPair",
    "Sig",
    "gen_keys",
    "sign_",
    "sign",
    "assert_as_valid_",
    "assert_as_valid",
    "verify_",
    "verify",
]

_Sig = TypeVar("_Sig", bound="Sig")


# JSON representation of scalars as hex-strings
_HEX_INT = config(encoder=lambda v: f"{v:x}", decoder=lambda v: int(v, 16))


@dataclass(frozen=True)
class Sig(DataClassJsonMixin):
    """ECDSA signature (r, s) with fixed-size serialization.

    The serialization is the concatenation r || s,
    both big-endian scalars of ec.n_size bytes.
    The JSON representation uses hex-strings for r and s,
    and the curve name for ec.
    """

    # scalar, 0 < r < ec.n (ec.n is the curve order)
    r: int = field(metadata=_HEX_INT)
    # scalar, 0 < s < ec.n (ec.n is the curve order)
    s: int = field(metadata=_HEX_INT)
    ec: Curve = field(
        default=secp256k1,
        metadata=config(encoder=lambda ec: ec.name, decoder=lambda name: CURVES[name]),
    )
    check_validity: InitVar[bool] = True

    def __post_init__(self, check_validity: bool) -> None:
        if check_validity:
            self.assert_valid()

    def assert_valid(self) -> None:
        # r is a scalar, fail if r is not in [1, n-1]
        if not 0 < self.r < self.ec.n:
            raise OutOfRangeScalarError(f"scalar r not in 1..n-1: {int_repr(self.r)}")

        # s is a scalar, fail if s is not in [1, n-1]
        if not 0 < self.s < self.ec.n:
            raise OutOfRangeScalarError(f"scalar s not in 1..n-1: {int_repr(self.s)}")

    def serialize(self, check_validity: bool = True) -> bytes:
        "Serialize an ECDSA signature to the fixed-size r || s representation."
        if check_validity:
            self.assert_valid()

        return bytes_from_int(self.r, self.ec.n_size) + bytes_from_int(
            self.s, self.ec.n_size
        )

    @classmethod
    def parse(
        cls: Type[_Sig],
        data: Octets,
        ec: Curve = secp256k1,
        check_validity: bool = True,
    ) -> _Sig:
        "Return a Sig by parsing the fixed-size r || s representation."
        data = bytes_from_octets(data, 2 * ec.n_size)
        r = int.from_bytes(data[: ec.n_size], byteorder="big", signed=False)
        s = int.from_bytes(data[ec.n_size :], byteorder="big", signed=False)
        return cls(r, s, ec, check_validity)


def _sign_values(c: int, q: int, nonce: int, ec: Curve) -> Tuple[int, int]:
    # Private function for testing purposes: it allows to explore all
    # possible value of the challenge c (for low-cardinality curves).
    # It assume that c is in [0, n-1], while q and nonce are in [1, n-1]
    K = mult(nonce, ec.G, ec)  # 1

    # mod n makes the affine x_K-coordinate of K a scalar
    r = K[0] % ec.n  # 2, 3
    if r == 0:  # r≠0 required as it multiplies the public key
        return 0, 0

    s = mod_inv(nonce, ec.n) * (c + r * q) % ec.n  # 6
    return r, s


def _sign_(c: int, q: int, nonce: int, ec: Curve) -> Sig:
    # Private function for testing purposes: the provided nonce
    # is used as is, without any resampling
    r, s = _sign_values(c, q, nonce, ec)
    if r == 0:
        raise ECLadderRuntimeError("failed to sign: r = 0")
    if s == 0:  # s≠0 required as verify will need the inverse of s
        raise ECLadderRuntimeError("failed to sign: s = 0")
    return Sig(r, s, ec)


def sign_(
    msg_hash: Octets,
    prv_key: PrvKey,
    nonce: Optional[PrvKey] = None,
    ec: Curve = secp256k1,
    hf: HashF = sha256,
    randbits: RandBits = secrets.randbits,
) -> Sig:
    """Sign a hf_len bytes message according to ECDSA signature algorithm.

    If the nonce is not provided, it is sampled in [1, n-1]
    and resampled until both r and s are nonzero;
    a provided nonce leading to r = 0 or s = 0 raises an Error instead.
    """

    # the secret key q: an integer in the range 1..n-1.
    # SEC 1 v.2 section 3.2.1
    q = int_from_prv_key(prv_key, ec)

    # the challenge
    c = challenge_(msg_hash, ec, hf)  # 4, 5

    if nonce is not None:
        return _sign_(c, q, int_from_prv_key(nonce, ec), ec)

    r, s = rejection_sample(
        lambda: _sign_values(c, q, random_scalar(1, ec.n - 1, randbits), ec),
        lambda rs: rs[0] != 0 and rs[1] != 0,
    )
    return Sig(r, s, ec)


def sign(
    msg: Octets,
    prv_key: PrvKey,
    nonce: Optional[PrvKey] = None,
    ec: Curve = secp256k1,
    hf: HashF = sha256,
    randbits: RandBits = secrets.randbits,
) -> Sig:
    """ECDSA signature.

    Implemented according to SEC 1 v.2
    The message msg is first processed by hf, yielding the value

        msg_hash = hf(msg),

    a sequence of bits of length *hf_len*.

    Normally, hf is chosen such that its output length *hf_len* is
    roughly equal to *nlen*, the bit-length of the group order *n*,
    since the overall security of the signature scheme will depend on
    the smallest of *hf_len* and *nlen*; however, the ECDSA standard
    supports all combinations of *hf_len* and *nlen*.
    """
    msg_hash = reduce_to_hlen(msg, hf)
    return sign_(msg_hash, prv_key, nonce, ec, hf, randbits)


def _assert_as_valid_(c: int, Q: Point, r: int, s: int, ec: Curve) -> None:
    # Private function for test/dev purposes

    w = mod_inv(s, ec.n)
    u = c * w % ec.n
    v = r * w % ec.n  # 4
    # Let K = u*G + v*Q.
    K = double_mult(v, Q, u, ec.G, ec)  # 5

    # Fail if infinite(K).
    if K[1] == 0:  # 5
        raise SignatureInvalidError("invalid (INF) key")

    # Fail if r ≠ x_K %n.
    if r != K[0] % ec.n:  # 6, 7, 8
        raise SignatureInvalidError("signature verification failed")


def assert_as_valid_(
    msg_hash: Octets,
    key: Key,
    sig: Sig,
    hf: HashF = sha256,
) -> None:
    # Private function for test/dev purposes
    # It raises Errors, while verify should always return True or False

    # public key: not INF, on curve, in the subgroup
    Q = point_from_key(key, sig.ec)
    # r and s in [1, n-1]
    sig.assert_valid()
    c = challenge_(msg_hash, sig.ec, hf)  # 2, 3
    # second part delegated to helper function
    _assert_as_valid_(c, Q, sig.r, sig.s, sig.ec)


def assert_as_valid(
    msg: Octets,
    key: Key,
    sig: Sig,
    hf: HashF = sha256,
) -> None:
    # Private function for test/dev purposes
    # It raises Errors, while verify should always return True or False
    msg_hash = reduce_to_hlen(msg, hf)
    assert_as_valid_(msg_hash, key, sig, hf)


def verify_(
    msg_hash: Octets,
    key: Key,
    sig: Sig,
    hf: HashF = sha256,
) -> bool:
    """ECDSA signature verification (SEC 1 v.2 section 4.1.4).

    Validation failures return False;
    NoInverseError is the only Error propagated to the caller.
    """
    try:
        assert_as_valid_(msg_hash, key, sig, hf)
    except NoInverseError:
        raise
    # malformed keys may raise plain ValueError or TypeError
    except (ValueError, TypeError, RuntimeError) as e:
        logger.debug(f"Signature verification failed: {e}")
        return False

    return True


def verify(
    msg: Octets,
    key: Key,
    sig: Sig,
    hf: HashF = sha256,
) -> bool:
    "ECDSA signature verification (SEC 1 v.2 section 4.1.4)."
    msg_hash = reduce_to_hlen(msg, hf)
    return verify_(msg_hash, key, sig, hf)
