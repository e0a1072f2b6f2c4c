#!/usr/bin/env python3

# Copyright (C) 2017-2022 The ecladder developers
#
# This file is part of ecladder. It is subject to the license terms in the
# LICENSE file found in the top-level directory of this distribution.
#
# No part of ecladder including this file, may be copied, modified, propagated,
# or distributed except according to the terms contained in the LICENSE file.

"""Elliptic Curve Blum-Blum-Shub (ECBBS) pseudorandom bit generator.

The state is a curve point A and a small step scalar n_i
in [2, n_i_max - 1], where n_i_max = nlen - 2.
Each step:

* A = n_i * A (Montgomery ladder)
* output bit = lsb(x_A) XOR lsb(y_A)
* n_i = n_i^2 mod n_i_max

n_i_max must be square-free, otherwise squaring could bring n_i to 0.

Warning: this is a didactical construction with no security proof,
it is not a validated CSPRNG and must not be used to generate keys.
"""

import logging
import secrets
from typing import Optional, Tuple

from ecladder.alias import Point, RandBits
from ecladder.ecc.curve import Curve, mult, secp256r1
from ecladder.ecc.curve_group import mult_mont_ladder
from ecladder.ecc.number_theory import mod_pow
from ecladder.ecc.sampling import random_scalar
from ecladder.exceptions import ECLadderValueError, OutOfRangeScalarError
from ecladder.to_prv_key import PrvKey, int_from_prv_key
from ecladder.to_pub_key import assert_valid_pub_key

logger = logging.getLogger(__name__)


def is_square_free(m: int) -> bool:
    "Return True if no square greater than 1 divides m."
    d = 2
    while d * d <= m:
        if m % (d * d) == 0:
            return False
        d += 1
    return True


class ECBBS:
    """ECBBS generator state, owned by a single caller.

    If the seed (the private scalar d of the starting point A = d*G)
    or the step scalar are not provided, they are randomly sampled.
    """

    def __init__(
        self,
        ec: Curve = secp256r1,
        seed: Optional[PrvKey] = None,
        step: Optional[int] = None,
        randbits: RandBits = secrets.randbits,
    ) -> None:

        self.ec = ec
        self.n_i_max = ec.nlen - 2
        if self.n_i_max < 3:
            raise ECLadderValueError(f"curve order too small: {ec.n}")
        if not is_square_free(self.n_i_max):
            # n_i would eventually be squared to 0
            err_msg = f"n_i_max is not square-free: {self.n_i_max}"
            raise ECLadderValueError(err_msg)

        if seed is None:
            d = random_scalar(1, ec.n - 1, randbits)
        else:
            d = int_from_prv_key(seed, ec)
        self.A: Point = mult(d, ec.G, ec)

        if step is None:
            step = random_scalar(2, self.n_i_max - 1, randbits)
        elif not 2 <= step < self.n_i_max:
            err_msg = f"step not in 2..{self.n_i_max - 1}: {step}"
            raise OutOfRangeScalarError(err_msg)
        self.n_i = step
        logger.debug(f"ECBBS generator on {ec.name or 'custom curve'}")

    @classmethod
    def from_state(cls, A: Point, n_i: int, ec: Curve = secp256r1) -> "ECBBS":
        "Return a generator resuming from a (A, n_i) state snapshot."
        assert_valid_pub_key(A, ec)
        # squaring may have brought n_i below 2, but never to 0
        if not 0 < n_i < ec.nlen - 2:
            raise OutOfRangeScalarError(f"n_i not in 1..{ec.nlen - 3}: {n_i}")
        generator = cls(ec, seed=1, step=2)
        generator.A = A
        generator.n_i = n_i
        return generator

    @property
    def state(self) -> Tuple[Point, int]:
        return self.A, self.n_i

    def next_bit(self) -> int:
        "Advance the state and return the next pseudorandom bit."
        self.A = mult_mont_ladder(self.n_i, self.A, self.ec.group)
        bit = (self.A[0] ^ self.A[1]) & 1
        self.n_i = mod_pow(self.n_i, 2, self.n_i_max)
        return bit

    def gen_bits(self, count: int) -> int:
        """Return count pseudorandom bits packed in an int.

        The first produced bit is the most significant one.
        """
        if count < 0:
            raise ECLadderValueError(f"negative count: {count}")

        result = 0
        for _ in range(count):
            result = (result << 1) | self.next_bit()
        return result


def new_generator(
    ec: Curve = secp256r1, randbits: RandBits = secrets.randbits
) -> ECBBS:
    "Return a randomly seeded ECBBS generator."
    return ECBBS(ec, randbits=randbits)
