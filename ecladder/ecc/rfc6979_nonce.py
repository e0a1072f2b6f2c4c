#!/usr/bin/env python3

# Copyright (C) 2017-2022 The ecladder developers
#
# This file is part of ecladder. It is subject to the license terms in the
# LICENSE file found in the top-level directory of this distribution.
#
# No part of ecladder including this file, may be copied, modified, propagated,
# or distributed except according to the terms contained in the LICENSE file.

"""Deterministic generation of the ephemeral key following RFC6979.

https://tools.ietf.org/html/rfc6979

ECDSA needs to produce, for each signature generation,
a fresh random value (ephemeral key, hereafter designated as nonce).
Reusing the same nonce for a different message
signed with the same private key reveals the private key.

By default ecladder samples the nonce from secrets.randbits;
RFC6979 turns ECDSA into a deterministic scheme,
which is useful for reproducible signatures and test vectors.
"""

import hashlib
import hmac

from ecladder.alias import HashF, Octets
from ecladder.ecc.curve import Curve, secp256k1
from ecladder.to_prv_key import PrvKey, int_from_prv_key
from ecladder.utils import bytes_from_octets, int_from_bits


def challenge_(
    msg_hash: Octets, ec: Curve = secp256k1, hf: HashF = hashlib.sha256
) -> int:
    # the message msg_hash: a hf_len array
    hf_len = hf().digest_size
    msg_hash = bytes_from_octets(msg_hash, hf_len)

    # leftmost ec.nlen bits %= ec.n
    return int_from_bits(msg_hash, ec.nlen) % ec.n


def _rfc6979_nonce_(c: int, q: int, ec: Curve, hf: HashF) -> int:
    # https://tools.ietf.org/html/rfc6979 section 3.2

    # convert the private key q to an octet sequence of size n_size
    q_bytes = q.to_bytes(ec.n_size, byteorder="big", signed=False)
    # truncate and/or expand c: encoding size is driven by n_size
    c_bytes = c.to_bytes(ec.n_size, byteorder="big", signed=False)
    bprvbm = q_bytes + c_bytes

    hf_size = hf().digest_size
    v = b"\x01" * hf_size  # 3.2.b
    k = b"\x00" * hf_size  # 3.2.c

    k = hmac.new(k, v + b"\x00" + bprvbm, hf).digest()  # 3.2.d
    v = hmac.new(k, v, hf).digest()  # 3.2.e
    k = hmac.new(k, v + b"\x01" + bprvbm, hf).digest()  # 3.2.f
    v = hmac.new(k, v, hf).digest()  # 3.2.g

    while True:  # 3.2.h
        t = b""  # 3.2.h.1
        while len(t) < ec.n_size:  # 3.2.h.2
            v = hmac.new(k, v, hf).digest()
            t += v
        # candidates out of range are discarded, never reduced mod n
        nonce = int_from_bits(t, ec.nlen)  # 3.2.h.3
        if 0 < nonce < ec.n:
            return nonce
        k = hmac.new(k, v + b"\x00", hf).digest()
        v = hmac.new(k, v, hf).digest()


def rfc6979_nonce_(
    msg_hash: Octets,
    prv_key: PrvKey,
    ec: Curve = secp256k1,
    hf: HashF = hashlib.sha256,
) -> int:
    """Return an RFC6979 deterministic ephemeral key (nonce).

    see https://tools.ietf.org/html/rfc6979 section 3.2
    """
    c = challenge_(msg_hash, ec, hf)
    q = int_from_prv_key(prv_key, ec)

    return _rfc6979_nonce_(c, q, ec, hf)
