#!/usr/bin/env python3

# Copyright (C) 2017-2022 The ecladder developers
#
# This file is part of ecladder. It is subject to the license terms in the
# LICENSE file found in the top-level directory of this distribution.
#
# No part of ecladder including this file, may be copied, modified, propagated,
# or distributed except according to the terms contained in the LICENSE file.

"""Functions for conversions between different public key formats.

Every public key crossing the library boundary is validated:
it must not be INF, it must be on the curve,
and it must belong to the subgroup of order n generated by G.
"""

from typing import Union

from ecladder.alias import Point
from ecladder.ecc.curve import Curve, mult, secp256k1
from ecladder.ecc.curve_group import mult_mont_ladder
from ecladder.ecc.sec_point import point_from_octets
from ecladder.exceptions import (
    ECLadderTypeError,
    IdentityRejectedError,
    InvalidSubgroupError,
    PointNotOnCurveError,
)
from ecladder.to_prv_key import int_from_prv_key

# public key inputs:
# native tuple as Point
# SEC 1 Octets (bytes or hex-string, with 02, 03, or 04 prefix)
PubKey = Union[bytes, str, Point]

# public or private key input,
# usable wherever a public one is needed
Key = Union[int, bytes, str, Point]


def assert_valid_pub_key(Q: Point, ec: Curve = secp256k1) -> None:
    """Raise an Error if the point is not a valid public key.

    The checks are performed in order:

    - IdentityRejectedError if Q is INF
    - PointNotOnCurveError if Q is not on the curve
    - InvalidSubgroupError if n*Q is not INF

    The subgroup check uses the ladder on the unreduced order n,
    as mult would reduce n to zero.
    """

    if len(Q) != 2:
        raise ECLadderTypeError("not a point")
    if Q[1] == 0:  # Infinity point in affine coordinates
        raise IdentityRejectedError("INF is not a valid public key")
    if not ec.is_on_curve(Q):
        raise PointNotOnCurveError(f"point not on curve: {Q}")
    # with h=1 every curve point belongs to the subgroup
    if ec.h > 1 and mult_mont_ladder(ec.n, Q, ec.group)[1] != 0:
        raise InvalidSubgroupError("point not in the subgroup generated by G")


def point_from_pub_key(pub_key: PubKey, ec: Curve = secp256k1) -> Point:
    "Return a validated elliptic curve point tuple from a public key."

    if isinstance(pub_key, tuple):
        Q = pub_key
    else:
        Q = point_from_octets(pub_key, ec)
    assert_valid_pub_key(Q, ec)
    return Q


def point_from_key(key: Key, ec: Curve = secp256k1) -> Point:
    """Return a point tuple from any possible key representation.

    It supports:

    - SEC Octets (bytes or hex-string, with 02, 03, or 04 prefix)
    - native tuple
    - private key as native int
    """

    if isinstance(key, int):
        q = int_from_prv_key(key, ec)
        return mult(q, ec.G, ec)
    return point_from_pub_key(key, ec)