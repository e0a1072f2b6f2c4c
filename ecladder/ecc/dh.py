#!/usr/bin/env python3

# Copyright (C) 2017-2022 The ecladder developers
#
# This file is part of ecladder. It is subject to the license terms in the
# LICENSE file found in the top-level directory of this distribution.
#
# No part of ecladder including this file, may be copied, modified, propagated,
# or distributed except according to the terms contained in the LICENSE file.

"""Diffie-Hellman elliptic curve key agreement scheme.

Implementation of the Diffie-Hellman key agreement scheme using
elliptic curve cryptography. A key agreement scheme is used
by two entities to establish shared keying data, which will be
later utilized e.g. in symmetric cryptographic scheme.

The two entities must agree on the elliptic curve to use:
both compute the same shared point d_a*Q_b = d_b*Q_a.
Deriving symmetric keys from the shared point is left to the caller
(see ecladder.ecc.ies for an example).
"""

import secrets
from typing import NamedTuple, Optional

from ecladder.alias import Point, RandBits
from ecladder.ecc.curve import Curve, mult, secp256k1
from ecladder.ecc.sampling import random_scalar
from ecladder.exceptions import ECLadderRuntimeError
from ecladder.to_prv_key import PrvKey, int_from_prv_key
from ecladder.to_pub_key import PubKey, point_from_pub_key


class KeyPair(NamedTuple):
    prv_key: int
    pub_key: Point


def gen_keys(
    prv_key: Optional[PrvKey] = None,
    ec: Curve = secp256k1,
    randbits: RandBits = secrets.randbits,
) -> KeyPair:
    """Return a private/public (int, Point) key-pair.

    If the private key is not provided,
    it is uniformly sampled in [1, n-1].
    """
    if prv_key is None:
        q = random_scalar(1, ec.n - 1, randbits)
    else:
        q = int_from_prv_key(prv_key, ec)

    return KeyPair(q, mult(q, ec.G, ec))


def shared_secret(prv_key: PrvKey, pub_key: PubKey, ec: Curve = secp256k1) -> Point:
    """Return the shared point prv_key * pub_key.

    The other party public key is validated
    (not INF, on curve, in the subgroup generated by G).
    """
    q = int_from_prv_key(prv_key, ec)
    Q = point_from_pub_key(pub_key, ec)

    S = mult(q, Q, ec)
    # edge case that cannot be reproduced in the test suite
    if S[1] == 0:
        err_msg = "invalid (INF) shared secret"  # pragma: no cover
        raise ECLadderRuntimeError(err_msg)  # pragma: no cover
    return S
