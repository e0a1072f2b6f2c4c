#!/usr/bin/env python3

# Copyright (C) 2017-2022 The ecladder developers
#
# This file is part of ecladder. It is subject to the license terms in the
# LICENSE file found in the top-level directory of this distribution.
#
# No part of ecladder including this file, may be copied, modified, propagated,
# or distributed except according to the terms contained in the LICENSE file.

"""Rejection sampling of random values.

Random scalars are drawn with as many bits as the upper bound
and resampled until they fall in the required range:
they are never clamped, nor reduced modulo the bound,
as that would bias the distribution.

The same helper drives every retry loop of the protocols,
e.g. the ECDSA signing loop resampling the nonce
until both r and s are nonzero.
"""

import logging
import secrets
from typing import Callable, TypeVar

from ecladder.alias import RandBits
from ecladder.exceptions import ECLadderRuntimeError, ECLadderValueError

logger = logging.getLogger(__name__)

_T = TypeVar("_T")

# for a valid curve the probability of needing more attempts is negligible
MAX_ATTEMPTS = 256


def rejection_sample(
    draw: Callable[[], _T],
    accept: Callable[[_T], bool],
    max_attempts: int = MAX_ATTEMPTS,
) -> _T:
    """Return the first drawn candidate that is accepted.

    ECLadderRuntimeError is raised after max_attempts rejections.
    """

    if max_attempts < 1:
        raise ECLadderValueError(f"invalid max_attempts: {max_attempts}")

    for attempt in range(1, max_attempts + 1):
        candidate = draw()
        if accept(candidate):
            return candidate
        logger.debug(f"Rejected candidate at attempt {attempt}/{max_attempts}")

    raise ECLadderRuntimeError(f"no acceptable candidate in {max_attempts} attempts")


def random_scalar(
    low: int,
    high: int,
    randbits: RandBits = secrets.randbits,
    max_attempts: int = MAX_ATTEMPTS,
) -> int:
    """Return a uniformly random integer in [low, high].

    Candidates have the bit-length of high.
    """

    if not 0 <= low <= high:
        raise ECLadderValueError(f"invalid range: {low}..{high}")

    nbits = high.bit_length()
    return rejection_sample(
        lambda: randbits(nbits), lambda k: low <= k <= high, max_attempts
    )
