#!/usr/bin/env python3

# Copyright (C) 2017-2022 The ecladder developers
#
# This file is part of ecladder. It is subject to the license terms in the
# LICENSE file found in the top-level directory of this distribution.
#
# No part of ecladder including this file, may be copied, modified, propagated,
# or distributed except according to the terms contained in the LICENSE file.

"""CurveGroup explorer functions.

These functions are meant to explore low-cardinality curves
of both families, e.g. to cross-check group order and cofactor.
"""

from typing import List, Union

from ecladder.alias import INF, Point
from ecladder.ecc.curve import Curve
from ecladder.ecc.curve_group import CurveGroup
from ecladder.exceptions import ECLadderValueError

MAX_P = 10000


def find_all_points(ec: Union[Curve, CurveGroup]) -> List[Point]:
    """Attempt to find all group points, if p is low.

    The count includes INF and the y=0 points,
    so that it equals n*h for a Curve.
    """
    if ec.p > MAX_P:
        raise ECLadderValueError(f"p is too big to count all group points: {ec.p}")

    points: List[Point] = [INF]
    for x in range(ec.p):
        try:
            y = ec.y(x)
        except ECLadderValueError:
            continue

        points.append((x, y))
        if y != 0:
            points.append((x, ec.p - y))

    return points


def find_subgroup_points(ec: Union[Curve, CurveGroup], G: Point) -> List[Point]:
    "Attempt to list all G-generated subgroup points, INF last, if p is low."
    if ec.p > MAX_P:
        raise ECLadderValueError(f"p is too big to count all subgroup points: {ec.p}")

    points: List[Point] = [G]
    while points[-1][1] != 0:
        points.append(ec.add(points[-1], G))

    return points
