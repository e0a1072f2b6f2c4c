#!/usr/bin/env python3

# Copyright (C) 2017-2022 The ecladder developers
#
# This file is part of ecladder. It is subject to the license terms in the
# LICENSE file found in the top-level directory of this distribution.
#
# No part of ecladder including this file, may be copied, modified, propagated,
# or distributed except according to the terms contained in the LICENSE file.

"""Aliases

mypy aliases, documenting also coding input conventions.
"""

from typing import Any, Callable, Tuple, Union

# Octets are a sequence of eight-bit bytes or a hex-string (not text string)
#
# hex-strings are strings that can be converted to bytes using bytes.fromhex,
# e.g.:
# "deadbeef"
# "dead beef"
# "04 79be667ef9dcbbac55a06295ce870b07029bfcdb2dce28d959f2815b16f81798 483ada7726a3c4655da4fbfc0e1108a8fd17b448a68554199c47d08ffb10d4b8"
# "02 79be667ef9dcbbac55a06295ce870b07029bfcdb2dce28d959f2815b16f81798"
#
# use ecladder.utils.bytes_from_octets to convert Octets to bytes
#
# Octets are used for messages to be signed or encrypted,
# SEC 1 encoded points, serialized signatures and ciphertexts.
Octets = Union[bytes, str]

# hex-string or bytes representation of an int
Integer = Union[bytes, str, int]

# Hash digest constructor: it may be any name suitable to hashlib.new()
HashF = Callable[[], Any]

# Random source: return a non-negative int with the given number of random bits
# (secrets.randbits is the default everywhere)
RandBits = Callable[[int], int]

# Elliptic curve point in affine coordinates.
# Warning: to make Point a NamedTuple would slow down the code
Point = Tuple[int, int]

# Note that the infinity point in affine coordinates is INF = (int, 0):
# any affine pair with y=0 is treated as the identity element,
# including the (0, 0) pair of the Montgomery curves.
# It can be checked with 'INF[1] == 0'
# The x-coordinate is arbitrary: 5 is preferred
# because it is not a valid x-coordinate in secp256k1
# (and even 5 + secp256k1.n is not a valid x-coordinate)
INF = 5, 0
