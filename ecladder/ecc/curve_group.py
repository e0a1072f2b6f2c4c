#!/usr/bin/env python3

# Copyright (C) 2017-2022 The ecladder developers
#
# This file is part of ecladder. It is subject to the license terms in the
# LICENSE file found in the top-level directory of this distribution.
#
# No part of ecladder including this file, may be copied, modified, propagated,
# or distributed except according to the terms contained in the LICENSE file.

"""Elliptic CurveGroup classes and the Montgomery ladder.

A CurveGroup is the finite group of the points of an elliptic curve
over Fp, together with the point at infinity INF.
Two curve families are available, selected by name in CURVE_FAMILIES:

* "ShortWeierstrass": y^2 = x^3 + a*x + b
* "Montgomery": b*y^2 = x^3 + a*x^2 + x

Both share the same affine point representation
and the same branch structure of the group law,
while the slope and coordinate formulas are family specific.

Note that CurveGroup does not have to be a cyclic subgroup.
For the cyclic subgroup of prime order, see the ecladder.ecc.curve module.
"""

from math import ceil
from typing import Dict, Type

from ecladder.alias import INF, Integer, Point
from ecladder.ecc.number_theory import mod_inv, mod_mul, mod_sqrt, mod_sub
from ecladder.exceptions import (
    ECLadderTypeError,
    ECLadderValueError,
    PointNotOnCurveError,
)
from ecladder.utils import hex_string, int_from_integer, int_repr

HEX_THRESHOLD = 0xFFFFFFFF


class CurveGroup:
    """Finite group of the points of an elliptic curve over Fp.

    This base class checks the field prime p and the coefficient range,
    and provides the family-independent services;
    subclasses supply the curve equation and the group law.
    """

    family = ""

    def __init__(self, p: Integer, a: Integer, b: Integer) -> None:
        # Parameters are checked according to SEC 1 v.2 3.1.1.2.1

        p = int_from_integer(p)
        a = int_from_integer(a)
        b = int_from_integer(b)

        # 1) check that p is a prime
        # Fermat test will do as _probabilistic_ primality test...
        if p < 2 or p % 2 == 0 or pow(2, p - 1, p) != 1:
            raise ECLadderValueError(f"p is not prime: {int_repr(p)}")

        plen = p.bit_length()
        # byte-length
        self.p_size = ceil(plen / 8)
        self.p = p

        # 2. check that a and b are integers in the interval [0, p−1]
        if a < 0:
            raise ECLadderValueError(f"negative a: {a}")
        if p <= a:
            raise ECLadderValueError(f"p <= a: {int_repr(p)} <= {int_repr(a)}")
        if b < 0:
            raise ECLadderValueError(f"negative b: {b}")
        if p <= b:
            raise ECLadderValueError(f"p <= b: {int_repr(p)} <= {int_repr(b)}")

        self._a = a
        self._b = b

    def __str__(self) -> str:
        result = f"{self.family} curve"
        if self.p > HEX_THRESHOLD:
            result += f"\n p   = {hex_string(self.p)}"
        else:
            result += f"\n p   = {self.p}"

        if self._a > HEX_THRESHOLD or self._b > HEX_THRESHOLD:
            result += f"\n a   = {hex_string(self._a)}"
            result += f"\n b   = {hex_string(self._b)}"
        else:
            result += f"\n a   = {self._a}"
            result += f"\n b   = {self._b}"

        return result

    def __repr__(self) -> str:
        result = f"{type(self).__name__}("
        result += f"'{hex_string(self.p)}'" if self.p > HEX_THRESHOLD else f"{self.p}"
        if self._a > HEX_THRESHOLD or self._b > HEX_THRESHOLD:
            result += f", '{hex_string(self._a)}', '{hex_string(self._b)}'"
        else:
            result += f", {self._a}, {self._b}"

        result += ")"
        return result

    @property
    def a(self) -> int:
        return self._a

    @property
    def b(self) -> int:
        return self._b

    # methods using p: they could become functions

    def negate(self, Q: Point) -> Point:
        """Return the opposite point.

        The input point is not checked to be on the curve.
        """
        # % self.p is required to account for INF (i.e. Q[1]==0)
        # so that negate(INF) = INF
        if len(Q) == 2:
            return Q[0], (self.p - Q[1]) % self.p
        raise ECLadderTypeError("not a point")

    # methods using _a, _b, p

    def add(self, Q1: Point, Q2: Point) -> Point:
        """Return the sum of two points.

        The input points must be on the curve.
        """

        self.require_on_curve(Q1)
        self.require_on_curve(Q2)
        return self.add_aff(Q1, Q2)

    def add_aff(self, Q: Point, R: Point) -> Point:
        # points are assumed to be on curve

        # any y=0 point is the identity: INF is its only returned form
        if R[1] == 0:  # Infinity point in affine coordinates
            return INF if Q[1] == 0 else Q
        if Q[1] == 0:  # Infinity point in affine coordinates
            return R

        if R[0] == Q[0]:
            if R[1] == Q[1]:  # point doubling
                return self.double_aff(R)
            # opposite points
            return INF

        lam = (R[1] - Q[1]) * mod_inv(R[0] - Q[0], self.p)
        return self._chord(lam, Q, R)

    def double_aff(self, Q: Point) -> Point:
        # point is assumed to be on curve

        if Q[1] == 0:  # Infinity point in affine coordinates
            return INF

        return self._chord(self._tangent_slope(Q), Q, Q)

    def _tangent_slope(self, Q: Point) -> int:
        raise NotImplementedError

    def _chord(self, lam: int, Q: Point, R: Point) -> Point:
        # third intersection of the line of slope lam through Q and R,
        # reflected across the x axis
        raise NotImplementedError

    def _y2(self, x: int) -> int:
        # skipping a crucial check here:
        # if sqrt(y*y) does not exist, then x is not valid.
        # This is a good reason to keep this method private
        raise NotImplementedError

    def y(self, x: int) -> int:
        """Return the y coordinate from x, as in (x, y)."""
        if not 0 <= x < self.p:
            raise ECLadderValueError(f"x-coordinate not in 0..p-1: {int_repr(x)}")
        y2 = self._y2(x)
        try:
            return mod_sqrt(y2, self.p)
        except ECLadderValueError as e:
            raise ECLadderValueError(f"invalid x-coordinate: {int_repr(x)}") from e

    def require_on_curve(self, Q: Point) -> None:
        """Require the input curve Point to be on the curve.

        A PointNotOnCurveError is raised if not.
        """
        if not self.is_on_curve(Q):
            raise PointNotOnCurveError("point not on curve")

    def is_on_curve(self, Q: Point) -> bool:
        """Return True if the point is on the curve."""
        if len(Q) != 2:
            raise ECLadderValueError("point must be a tuple[int, int]")
        if Q[1] == 0:  # Infinity point in affine coordinates
            return True
        if not 0 < Q[1] < self.p:  # y cannot be zero
            raise PointNotOnCurveError(f"y-coordinate not in 1..p-1: {int_repr(Q[1])}")
        if not 0 <= Q[0] < self.p:
            raise PointNotOnCurveError(f"x-coordinate not in 0..p-1: {int_repr(Q[0])}")
        return self._y2(Q[0]) == (Q[1] * Q[1] % self.p)

    def y_even(self, x: int) -> int:
        """Return the even affine y-coordinate associated to x."""
        root = self.y(x)
        # switch even/odd root as needed
        return self.p - root if root % 2 else root


class WeierstrassGroup(CurveGroup):
    """Points of a short Weierstrass curve over Fp.

    The elliptic curve is the set of points (x, y)
    that are solutions to a Weierstrass equation y^2 = x^3 + a*x + b,
    with x, y, a, and b in Fp (p being a prime),
    together with a point at infinity INF.
    The constants a, b must satisfy the relationship
    4 a^3 + 27 b^2 ≠ 0.
    """

    family = "ShortWeierstrass"

    def __init__(self, p: Integer, a: Integer, b: Integer) -> None:
        super().__init__(p, a, b)

        # 3. Check that 4*a^3 + 27*b^2 ≠ 0 (mod p)
        d = 4 * self._a * self._a * self._a + 27 * self._b * self._b
        if d % self.p == 0:
            raise ECLadderValueError("zero discriminant")

    def _tangent_slope(self, Q: Point) -> int:
        return (3 * Q[0] * Q[0] + self._a) * mod_inv(2 * Q[1], self.p)

    def _chord(self, lam: int, Q: Point, R: Point) -> Point:
        x = lam * lam - Q[0] - R[0]
        y = lam * (Q[0] - x) - Q[1]
        return x % self.p, y % self.p

    def _y2(self, x: int) -> int:
        return ((x * x + self._a) * x + self._b) % self.p


class MontgomeryGroup(CurveGroup):
    """Points of a Montgomery curve over Fp.

    The elliptic curve is the set of points (x, y)
    that are solutions to the equation b*y^2 = x^3 + a*x^2 + x,
    with x, y, a, and b in Fp (p being a prime),
    together with a point at infinity INF.
    The constants a, b must satisfy b ≠ 0 and a^2 ≠ 4.

    The (0, 0) point, having y=0, is treated as INF.
    All arithmetic is performed modulo the field prime p.
    """

    family = "Montgomery"

    def __init__(self, p: Integer, a: Integer, b: Integer) -> None:
        super().__init__(p, a, b)

        if self._b == 0:
            raise ECLadderValueError("zero b coefficient")
        if (self._a * self._a - 4) % self.p == 0:
            raise ECLadderValueError("singular curve: a^2 = 4")
        # b^-1 is needed for the y^2 of the curve equation
        self._b_inv = mod_inv(self._b, self.p)

    def _tangent_slope(self, Q: Point) -> int:
        num = 3 * Q[0] * Q[0] + 2 * self._a * Q[0] + 1
        return mod_mul(num, mod_inv(2 * self._b * Q[1], self.p), self.p)

    def _chord(self, lam: int, Q: Point, R: Point) -> Point:
        x = mod_sub(self._b * lam * lam - self._a, Q[0] + R[0], self.p)
        y = mod_sub(lam * (Q[0] - x), Q[1], self.p)
        return x, y

    def _y2(self, x: int) -> int:
        return ((x + self._a) * x + 1) * x * self._b_inv % self.p


CURVE_FAMILIES: Dict[str, Type[CurveGroup]] = {
    WeierstrassGroup.family: WeierstrassGroup,
    MontgomeryGroup.family: MontgomeryGroup,
}


def curve_group(family: str, p: Integer, a: Integer, b: Integer) -> CurveGroup:
    "Return the CurveGroup of the named family."
    try:
        cls = CURVE_FAMILIES[family]
    except KeyError:
        raise ECLadderValueError(f"unknown curve family: {family!r}") from None
    return cls(p, a, b)


def mult_aff(m: int, Q: Point, ec: CurveGroup) -> Point:
    """Scalar multiplication of a curve point in affine coordinates.

    This implementation uses
    'double & add' algorithm,
    'right-to-left' binary decomposition of the m coefficient,
    affine coordinates.
    It is not constant-time: it is only used as test reference
    for the Montgomery ladder.

    The input point is assumed to be on curve and
    the m coefficient is assumed to have been reduced mod n
    if appropriate (e.g. cyclic groups of order n).
    """

    if m < 0:
        raise ECLadderValueError(f"negative m: {hex(m)}")

    R = INF  # initialize as infinity point
    while m > 0:  # use binary representation of m
        if m & 1:  # if least significant bit is 1
            R = ec.add_aff(R, Q)  # then add current Q
        m >>= 1  # remove the bit just accounted for
        Q = ec.double_aff(Q)  # double Q for next step
    return R


def mult_mont_ladder(m: int, Q: Point, ec: CurveGroup) -> Point:
    """Scalar multiplication using 'Montgomery ladder' algorithm.

    This implementation uses
    'Montgomery ladder' algorithm,
    'left-to-right' binary decomposition of the m coefficient,
    affine coordinates.

    The same 'add' and 'double' sequence is executed for every bit:
    the bit value only selects which register is updated by which
    operation, with no branch on the bit (R[1] - R[0] = Q always holds).
    It is resistant to the FLUSH+RELOAD attack
    (see https://eprint.iacr.org/2014/140.pdf).

    The input point is assumed to be on curve and
    the m coefficient is assumed to have been reduced mod n
    if appropriate (e.g. cyclic groups of order n).
    """

    if m < 0:
        raise ECLadderValueError(f"negative m: {hex(m)}")

    # R[0] is the running result, R[1] = R[0] + Q is an ancillary variable
    R = [INF, Q]
    for i in [int(i) for i in bin(m)[2:]]:
        R[not i] = ec.add_aff(R[i], R[not i])
        R[i] = ec.double_aff(R[i])
    return R[0]
