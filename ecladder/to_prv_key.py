#!/usr/bin/env python3

# Copyright (C) 2017-2022 The ecladder developers
#
# This file is part of ecladder. It is subject to the license terms in the
# LICENSE file found in the top-level directory of this distribution.
#
# No part of ecladder including this file, may be copied, modified, propagated,
# or distributed except according to the terms contained in the LICENSE file.

"Functions for conversions between different private key formats."

from typing import Union

from ecladder.ecc.curve import Curve, secp256k1
from ecladder.exceptions import ECLadderValueError, OutOfRangeScalarError
from ecladder.utils import bytes_from_octets, int_repr

# private key inputs:
# integer as int
# big-endian ec.n_size Octets (bytes or hex-string)
PrvKey = Union[int, bytes, str]


def int_from_prv_key(prv_key: PrvKey, ec: Curve = secp256k1) -> int:
    """Return a verified-as-valid private key integer.

    It supports:

    - integer (native int)
    - Octets (bytes or hex-string) of ec.n_size bytes

    OutOfRangeScalarError is raised if the key is not in [1, n-1]:
    caller-supplied keys are never clamped or reduced.
    """

    if isinstance(prv_key, int):
        q = prv_key
    else:
        try:
            prv_key = bytes_from_octets(prv_key, ec.n_size)
        except ValueError as e:
            raise ECLadderValueError(f"not a private key: {prv_key!r}") from e
        q = int.from_bytes(prv_key, "big")

    if not 0 < q < ec.n:
        raise OutOfRangeScalarError(f"private key not in 1..n-1: {int_repr(q)}")

    return q
