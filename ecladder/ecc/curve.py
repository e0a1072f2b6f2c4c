#!/usr/bin/env python3

# Copyright (C) 2017-2022 The ecladder developers
#
# This file is part of ecladder. It is subject to the license terms in the
# LICENSE file found in the top-level directory of this distribution.
#
# No part of ecladder including this file, may be copied, modified, propagated,
# or distributed except according to the terms contained in the LICENSE file.

"""Elliptic curve class and the configured curves.

A Curve is the cyclic subgroup of prime order n
generated by G in the points of an elliptic curve over Fp.
It is an immutable record of the curve parameters,
delegating the group law to the CurveGroup of its family.

The configured curves are loaded from data/curves.json:

* secp256k1 and secp256r1 (short Weierstrass), see SEC 2 v.2
  http://www.secg.org/sec2-v2.pdf
* curve25519 (Montgomery), see RFC 7748
  https://tools.ietf.org/html/rfc7748
"""

import json
from math import isqrt
from os import path
from typing import Any, Dict, Optional

from ecladder.alias import Integer, Point
from ecladder.ecc.curve_group import (
    HEX_THRESHOLD,
    CurveGroup,
    WeierstrassGroup,
    curve_group,
    mult_mont_ladder,
)
from ecladder.exceptions import ECLadderValueError
from ecladder.utils import hex_string, int_from_integer, int_repr


class Curve:
    "Prime order subgroup of the points of an elliptic curve over Fp."

    def __init__(
        self,
        p: Integer,
        a: Integer,
        b: Integer,
        G: Point,
        n: Integer,
        h: int,
        weakness_check: bool = True,
        family: str = WeierstrassGroup.family,
        name: Optional[str] = None,
    ) -> None:

        group = curve_group(family, p, a, b)

        # 2. check that xG and yG are integers in the interval [0, p−1]
        # 4. Check that yG^2 = xG^3 + a*xG + b (mod p)
        if len(G) != 2:
            raise ECLadderValueError("Generator must a be a sequence[int, int]")
        G = (int_from_integer(G[0]), int_from_integer(G[1]))
        if not group.is_on_curve(G):
            raise ECLadderValueError("Generator is not on the curve")

        n = int_from_integer(n)
        p = group.p

        # 5. Check that n is prime.
        if n < 2 or n % 2 == 0 or pow(2, n - 1, n) != 1:
            raise ECLadderValueError(f"n is not prime: {int_repr(n)}")
        # also check n*h (the curve order) with Hasse Theorem
        delta = isqrt(4 * p)
        if not p + 1 - delta <= n * h <= p + 1 + delta:
            raise ECLadderValueError(f"n*h not in p+1-delta..p+1+delta: {int_repr(n)}")

        # 7. Check that G ≠ INF, nG = INF
        if G[1] == 0:
            raise ECLadderValueError("INF point cannot be a generator")
        Inf = mult_mont_ladder(n, G, group)
        if Inf[1] != 0:
            raise ECLadderValueError(f"n is not the group order: {int_repr(n)}")

        # 6. Check cofactor
        exp_h = (p + 1 + delta) // n
        if h != exp_h:
            raise ECLadderValueError(f"invalid cofactor: {h}, expected {exp_h}")

        # 8. Check that n ≠ p
        if n == p:
            raise UserWarning(f"n=p weak curve: {hex_string(n)}")

        if weakness_check:
            # 8. Check that p^i % n ≠ 1 for all 1≤i<100
            for i in range(1, 100):
                if pow(p, i, n) == 1:
                    raise UserWarning("weak curve")

        self._group: CurveGroup = group
        self.family = group.family
        self.name = name
        self.p = p
        self.p_size = group.p_size
        self.G = G
        self.n = n
        self.nlen = n.bit_length()
        self.n_size = (self.nlen + 7) // 8
        self.h = h
        self._frozen = True

    def __setattr__(self, attr: str, value: Any) -> None:
        if getattr(self, "_frozen", False):
            raise AttributeError(f"cannot assign to field '{attr}': Curve is frozen")
        super().__setattr__(attr, value)

    def __str__(self) -> str:
        result = str(self._group)
        if self.p > HEX_THRESHOLD:
            result += f"\n x_G = {hex_string(self.G[0])}"
            result += f"\n y_G = {hex_string(self.G[1])}"
        else:
            result += f"\n x_G = {self.G[0]}"
            result += f"\n y_G = {self.G[1]}"
        if self.n > HEX_THRESHOLD:
            result += f"\n n   = {hex_string(self.n)}"
        else:
            result += f"\n n   = {self.n}"
        result += f"\n h   = {self.h}"
        return result

    def __repr__(self) -> str:
        result = "Curve("
        result += ", ".join(int_repr(i) for i in (self.p, self.a, self.b))
        result += f", ({int_repr(self.G[0])}, {int_repr(self.G[1])})"
        result += f", {int_repr(self.n)}, {self.h}"
        if self.family != WeierstrassGroup.family:
            result += f", family='{self.family}'"
        result += ")"
        return result

    # group law and point services of the curve family

    @property
    def group(self) -> CurveGroup:
        return self._group

    @property
    def a(self) -> int:
        return self._group.a

    @property
    def b(self) -> int:
        return self._group.b

    def negate(self, Q: Point) -> Point:
        return self._group.negate(Q)

    def add(self, Q1: Point, Q2: Point) -> Point:
        return self._group.add(Q1, Q2)

    def add_aff(self, Q: Point, R: Point) -> Point:
        return self._group.add_aff(Q, R)

    def double_aff(self, Q: Point) -> Point:
        return self._group.double_aff(Q)

    def y(self, x: int) -> int:
        return self._group.y(x)

    def y_even(self, x: int) -> int:
        return self._group.y_even(x)

    def is_on_curve(self, Q: Point) -> bool:
        return self._group.is_on_curve(Q)

    def require_on_curve(self, Q: Point) -> None:
        self._group.require_on_curve(Q)


def _curves_from_json(filename: str) -> Dict[str, Curve]:
    with open(filename, "r", encoding="ascii") as file_:
        curve_params = json.load(file_)
    curves: Dict[str, Curve] = {}
    for ec_name, params in curve_params.items():
        curves[ec_name] = Curve(
            params["p"],
            params["a"],
            params["b"],
            tuple(params["G"]),  # type: ignore
            params["n"],
            params["h"],
            family=params["family"],
            name=ec_name,
        )
    return curves


datadir = path.join(path.dirname(path.dirname(__file__)), "data")

CURVES = _curves_from_json(path.join(datadir, "curves.json"))

secp256k1 = CURVES["secp256k1"]
secp256r1 = CURVES["secp256r1"]
curve25519 = CURVES["curve25519"]


def mult(m: Integer, Q: Optional[Point] = None, ec: Curve = secp256k1) -> Point:
    """Elliptic curve scalar multiplication.

    Q defaults to the generator G, m is reduced mod n.
    The Montgomery ladder is used.
    """
    if Q is None:
        Q = ec.G
    else:
        ec.require_on_curve(Q)
    m = int_from_integer(m) % ec.n
    return mult_mont_ladder(m, Q, ec.group)


def double_mult(
    u: Integer, H: Point, v: Integer, Q: Point, ec: Curve = secp256k1
) -> Point:
    """Double scalar multiplication (u*H + v*Q).

    Each product is computed by its own Montgomery ladder.
    """
    return ec.add_aff(mult(u, H, ec), mult(v, Q, ec))
