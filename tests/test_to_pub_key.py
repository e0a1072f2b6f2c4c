#!/usr/bin/env python3

# Copyright (C) 2017-2022 The ecladder developers
#
# This file is part of ecladder. It is subject to the license terms in the
# LICENSE file found in the top-level directory of this distribution.
#
# No part of ecladder including this file, may be copied, modified, propagated,
# or distributed except according to the terms contained in the LICENSE file.
"Tests for the `ecladder.to_pub_key` module."

import pytest

from ecladder.alias import INF
from ecladder.ecc.curve import mult, secp256k1, secp256r1
from ecladder.ecc.curve_group import mult_mont_ladder
from ecladder.ecc.curve_group_f import find_all_points
from ecladder.exceptions import (
    ECLadderTypeError,
    ECLadderValueError,
    IdentityRejectedError,
    InvalidSubgroupError,
    OutOfRangeScalarError,
    PointNotOnCurveError,
)
from ecladder.to_pub_key import (
    assert_valid_pub_key,
    point_from_key,
    point_from_pub_key,
)
from tests.ecc.test_curve import low_card_curves
from tests.test_to_key import (
    INF_uncompressed,
    Q,
    Q_uncompressed,
    invalid_x_compressed,
    not_a_pub_keys,
    off_curve_uncompressed,
    plain_prv_keys,
    plain_pub_keys,
    q,
    zero_y_uncompressed,
)

ec13_5m = low_card_curves["ec13_5m"]


def test_from_pub_key() -> None:

    for pub_key in [Q, *plain_pub_keys]:
        assert Q == point_from_pub_key(pub_key)
        assert Q == point_from_key(pub_key)

    assert Q == point_from_key(q)
    with pytest.raises(OutOfRangeScalarError):
        point_from_key(0)
    with pytest.raises(OutOfRangeScalarError):
        point_from_key(secp256k1.n)

    # private keys in octets format are not public keys
    for prv_key in plain_prv_keys:
        with pytest.raises(ECLadderValueError):
            point_from_key(prv_key)


def test_invalid_pub_keys() -> None:

    with pytest.raises(IdentityRejectedError):
        point_from_pub_key(INF)
    with pytest.raises(IdentityRejectedError):
        point_from_pub_key(INF_uncompressed)
    with pytest.raises(IdentityRejectedError):
        point_from_pub_key(zero_y_uncompressed)

    with pytest.raises(PointNotOnCurveError, match="invalid x-coordinate: "):
        point_from_pub_key(invalid_x_compressed)
    with pytest.raises(PointNotOnCurveError, match="point not on curve: "):
        point_from_pub_key(off_curve_uncompressed)
    with pytest.raises(PointNotOnCurveError):
        point_from_pub_key((Q[0], Q[1] ^ 1))
    with pytest.raises(PointNotOnCurveError):
        point_from_pub_key((Q[0], secp256k1.p))

    with pytest.raises(ECLadderTypeError, match="not a point"):
        point_from_pub_key((Q[0], Q[1], 1))  # type: ignore

    for not_a_pub_key in not_a_pub_keys:
        with pytest.raises(ValueError):
            point_from_pub_key(not_a_pub_key)

    # not a secp256r1 point
    with pytest.raises(PointNotOnCurveError):
        point_from_pub_key(Q_uncompressed, secp256r1)


def test_subgroup_check() -> None:
    ec = ec13_5m

    for q_ in range(1, ec.n):
        Q_ = mult(q_, ec.G, ec)
        assert_valid_pub_key(Q_, ec)
        assert point_from_pub_key(Q_, ec) == Q_

    # points whose n-multiple is not (0, 0) nor INF
    outsiders = [
        P for P in find_all_points(ec) if mult_mont_ladder(ec.n, P, ec.group)[1] != 0
    ]
    assert outsiders
    for P in outsiders:
        with pytest.raises(InvalidSubgroupError):
            assert_valid_pub_key(P, ec)
        with pytest.raises(InvalidSubgroupError):
            point_from_pub_key(P, ec)

    # (0, 0) has y=0: it is INF
    with pytest.raises(IdentityRejectedError):
        assert_valid_pub_key((0, 0), ec)
