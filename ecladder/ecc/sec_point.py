#!/usr/bin/env python3

# Copyright (C) 2017-2022 The ecladder developers
#
# This file is part of ecladder. It is subject to the license terms in the
# LICENSE file found in the top-level directory of this distribution.
#
# No part of ecladder including this file, may be copied, modified, propagated,
# or distributed except according to the terms contained in the LICENSE file.

"""SEC compressed/uncompressed point representation.

The same big-endian encoding is used for both curve families:
coordinates are always ec.p_size bytes.
"""

from ecladder.alias import Octets, Point
from ecladder.ecc.curve import Curve, secp256k1
from ecladder.exceptions import (
    ECLadderValueError,
    IdentityRejectedError,
    PointNotOnCurveError,
)
from ecladder.utils import bytes_from_int, bytes_from_octets, hex_string


def bytes_from_point(Q: Point, ec: Curve = secp256k1, compressed: bool = True) -> bytes:
    """Return a point as compressed/uncompressed octet sequence.

    Return a point as compressed (0x02, 0x03) or uncompressed (0x04)
    octet sequence, according to SEC 1 v.2, section 2.3.3.
    """

    # check that Q is a point and that is on curve
    ec.require_on_curve(Q)

    if Q[1] == 0:  # infinity point in affine coordinates
        raise IdentityRejectedError("no bytes representation for infinity point")

    bytes_ = bytes_from_int(Q[0], ec.p_size)
    if compressed:
        return (b"\x03" if (Q[1] & 1) else b"\x02") + bytes_

    return b"\x04" + bytes_ + bytes_from_int(Q[1], ec.p_size)


def point_from_octets(pub_key: Octets, ec: Curve = secp256k1) -> Point:
    """Return a tuple (x_Q, y_Q) that belongs to the curve.

    Return a tuple (x_Q, y_Q) that belongs to the curve according to
    SEC 1 v.2, section 2.3.4.
    """

    pub_key = bytes_from_octets(pub_key, (ec.p_size + 1, 2 * ec.p_size + 1))

    bsize = len(pub_key)  # bytes
    if pub_key[0] in (0x02, 0x03):  # compressed point
        if bsize != ec.p_size + 1:
            err_msg = "invalid size for compressed point: "
            err_msg += f"{bsize} instead of {ec.p_size + 1}"
            raise ECLadderValueError(err_msg)
        x_Q = int.from_bytes(pub_key[1:], byteorder="big", signed=False)
        try:
            y_Q = ec.y_even(x_Q)  # also check x_Q validity
        except ECLadderValueError as e:
            msg = f"invalid x-coordinate: '{hex_string(x_Q)}'"
            raise PointNotOnCurveError(msg) from e
        if y_Q == 0:
            raise IdentityRejectedError("no bytes representation for infinity point")
        return x_Q, y_Q if pub_key[0] == 0x02 else ec.p - y_Q
    if pub_key[0] == 0x04:  # uncompressed point
        if bsize != 2 * ec.p_size + 1:
            err_msg = "invalid size for uncompressed point: "
            err_msg += f"{bsize} instead of {2 * ec.p_size + 1}"
            raise ECLadderValueError(err_msg)
        x_Q = int.from_bytes(pub_key[1 : ec.p_size + 1], byteorder="big", signed=False)
        Q = x_Q, int.from_bytes(pub_key[ec.p_size + 1 :], byteorder="big", signed=False)
        if Q[1] == 0:  # infinity point in affine coordinates
            raise IdentityRejectedError("no bytes representation for infinity point")
        if ec.is_on_curve(Q):
            return Q
        raise PointNotOnCurveError(f"point not on curve: {Q}")
    raise ECLadderValueError(f"not a point: {pub_key!r}")
