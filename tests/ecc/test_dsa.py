#!/usr/bin/env python3

# Copyright (C) 2017-2022 The ecladder developers
#
# This file is part of ecladder. It is subject to the license terms in the
# LICENSE file found in the top-level directory of this distribution.
#
# No part of ecladder including this file, may be copied, modified, propagated,
# or distributed except according to the terms contained in the LICENSE file.
"Tests for the `ecladder.dsa` module."

import json
import logging
import secrets
from hashlib import sha1, sha256

import pytest
from coincurve import PrivateKey  # type: ignore
from coincurve.ecdsa import der_to_cdata, serialize_compact  # type: ignore
from Crypto.Hash import SHA256
from Crypto.PublicKey import ECC
from Crypto.Signature import DSS

from ecladder.alias import INF
from ecladder.ecc import dsa
from ecladder.ecc.curve import CURVES, double_mult, mult, secp256k1, secp256r1
from ecladder.ecc.number_theory import mod_inv
from ecladder.ecc.rfc6979_nonce import rfc6979_nonce_
from ecladder.ecc.sec_point import bytes_from_point, point_from_octets
from ecladder.exceptions import (
    ECLadderRuntimeError,
    ECLadderTypeError,
    ECLadderValueError,
    IdentityRejectedError,
    OutOfRangeScalarError,
    SignatureInvalidError,
)
from ecladder.hashes import reduce_to_hlen
from tests.ecc.test_curve import low_card_curves


def test_libsecp256k1() -> None:
    msg = "Satoshi Nakamoto".encode()
    msg_hash = reduce_to_hlen(msg)

    q, Q = dsa.gen_keys(0x1)
    secret = q.to_bytes(32, "big")
    prv_key = PrivateKey(secret)
    assert prv_key.public_key.format(compressed=False) == bytes_from_point(
        Q, compressed=False
    )

    # libsecp256k1 uses RFC6979 nonces and the canonical 'low-s' encoding
    nonce = rfc6979_nonce_(msg_hash, q)
    sig = dsa.sign_(msg_hash, q, nonce)
    c_sig_bytes = serialize_compact(der_to_cdata(prv_key.sign(msg_hash, hasher=None)))
    c_sig = dsa.Sig.parse(c_sig_bytes)
    assert c_sig.r == sig.r
    assert c_sig.s in (sig.s, sig.ec.n - sig.s)

    # libsecp256k1 signatures are valid ECDSA signatures
    assert dsa.verify(msg, Q, c_sig)


def test_pycryptodome() -> None:
    msg = "Satoshi Nakamoto".encode()
    ec = secp256r1

    q = 1 + secrets.randbelow(ec.n - 1)
    key = ECC.construct(curve="P-256", d=q)
    q, Q = dsa.gen_keys(q, ec)
    assert Q == (int(key.pointQ.x), int(key.pointQ.y))

    # deterministic signatures must be identical
    signer = DSS.new(key, "deterministic-rfc6979")
    c_sig = dsa.Sig.parse(signer.sign(SHA256.new(msg)), ec)
    msg_hash = reduce_to_hlen(msg)
    sig = dsa.sign_(msg_hash, q, rfc6979_nonce_(msg_hash, q, ec), ec)
    assert sig == c_sig

    # random nonce signatures verify with pycryptodome
    sig = dsa.sign(msg, q, ec=ec)
    verifier = DSS.new(key.public_key(), "fips-186-3")
    verifier.verify(SHA256.new(msg), sig.serialize())


def test_signature() -> None:
    msg = "Satoshi Nakamoto".encode()

    q, Q = dsa.gen_keys(0x1)
    sig = dsa.sign(msg, q)
    dsa.assert_as_valid(msg, Q, sig)
    assert dsa.verify(msg, Q, sig)
    assert dsa.verify(msg, q, sig)
    assert sig == dsa.Sig.parse(sig.serialize())
    assert sig == dsa.Sig.parse(sig.serialize().hex())

    # https://bitcointalk.org/index.php?topic=285142.40
    # Deterministic Usage of DSA and ECDSA (RFC 6979)
    nonce = rfc6979_nonce_(reduce_to_hlen(msg), q)
    sig = dsa.sign(msg, q, nonce)
    r = 0x934B1EA10A4B3C1757E2B0C017D0B6143CE3C9A7E6A4A49860D7A6AB210EE3D8
    s = 0x2442CE9D2B916064108014783E923EC36B49743E2FFA1C4496F01A512AAFD9E5
    assert sig.r == r
    assert sig.s in (s, sig.ec.n - s)

    # malleability: no 'low-s' requirement
    malleated_sig = dsa.Sig(sig.r, sig.ec.n - sig.s)
    assert dsa.verify(msg, Q, malleated_sig)

    msg_fake = "Craig Wright".encode()
    assert not dsa.verify(msg_fake, Q, sig)
    err_msg = "signature verification failed"
    with pytest.raises(SignatureInvalidError, match=err_msg):
        dsa.assert_as_valid(msg_fake, Q, sig)

    _, Q_fake = dsa.gen_keys()
    assert not dsa.verify(msg, Q_fake, sig)
    with pytest.raises(SignatureInvalidError, match=err_msg):
        dsa.assert_as_valid(msg, Q_fake, sig)

    assert not dsa.verify(msg, INF, sig)
    with pytest.raises(IdentityRejectedError):
        dsa.assert_as_valid(msg, INF, sig)

    # malformed public keys
    not_a_hex_key = "02" + "zz" * 32
    assert not dsa.verify(msg, not_a_hex_key, sig)
    with pytest.raises(ValueError):
        dsa.assert_as_valid(msg, not_a_hex_key, sig)
    assert not dsa.verify(msg, (1, 2, 3), sig)  # type: ignore
    with pytest.raises(ECLadderTypeError, match="not a point"):
        dsa.assert_as_valid(msg, (1, 2, 3), sig)  # type: ignore

    # flipping a bit of r or s invalidates the signature
    for i in range(0, sig.ec.nlen, 7):
        r_flipped = sig.r ^ (1 << i)
        if 0 < r_flipped < sig.ec.n:
            assert not dsa.verify(msg, Q, dsa.Sig(r_flipped, sig.s))
        s_flipped = sig.s ^ (1 << i)
        if 0 < s_flipped < sig.ec.n:
            assert not dsa.verify(msg, Q, dsa.Sig(sig.r, s_flipped))

    sig_invalid = dsa.Sig(sig.ec.p, sig.s, check_validity=False)
    assert not dsa.verify(msg, Q, sig_invalid)
    err_msg = "scalar r not in 1..n-1: "
    with pytest.raises(OutOfRangeScalarError, match=err_msg):
        dsa.assert_as_valid(msg, Q, sig_invalid)

    sig_invalid = dsa.Sig(sig.r, sig.ec.p, check_validity=False)
    assert not dsa.verify(msg, Q, sig_invalid)
    err_msg = "scalar s not in 1..n-1: "
    with pytest.raises(OutOfRangeScalarError, match=err_msg):
        dsa.assert_as_valid(msg, Q, sig_invalid)

    sig_invalid = dsa.Sig(0, sig.s, check_validity=False)
    assert not dsa.verify(msg, Q, sig_invalid)
    with pytest.raises(OutOfRangeScalarError, match="scalar r not in 1..n-1: "):
        dsa.Sig(0, sig.s)
    with pytest.raises(OutOfRangeScalarError, match="scalar s not in 1..n-1: "):
        dsa.Sig(sig.r, 0)
    with pytest.raises(OutOfRangeScalarError, match="scalar s not in 1..n-1: "):
        dsa.Sig(sig.r, sig.ec.n)

    err_msg = "private key not in 1..n-1: "
    with pytest.raises(OutOfRangeScalarError, match=err_msg):
        dsa.sign(msg, 0)

    # ephemeral key not in 1..n-1
    err_msg = "private key not in 1..n-1: "
    with pytest.raises(OutOfRangeScalarError, match=err_msg):
        dsa.sign_(reduce_to_hlen(msg), q, 0)
    with pytest.raises(OutOfRangeScalarError, match=err_msg):
        dsa.sign_(reduce_to_hlen(msg), q, sig.ec.n)

    # wrong size message hash
    with pytest.raises(ECLadderValueError, match="invalid size: "):
        dsa.sign_(msg, q)


def test_verify_logging(caplog: pytest.LogCaptureFixture) -> None:
    msg = "Satoshi Nakamoto".encode()
    q, Q = dsa.gen_keys()
    sig = dsa.sign(msg, q)
    with caplog.at_level(logging.DEBUG, logger="ecladder.ecc.dsa"):
        assert not dsa.verify("Craig Wright".encode(), Q, sig)
    assert "signature verification failed" in caplog.text


def test_serialization() -> None:
    msg = "Satoshi Nakamoto".encode()
    for ec in CURVES.values():
        q, Q = dsa.gen_keys(ec=ec)
        sig = dsa.sign(msg, q, ec=ec)
        assert sig.ec == ec

        sig_bytes = sig.serialize()
        assert len(sig_bytes) == 2 * ec.n_size
        assert sig_bytes[: ec.n_size] == sig.r.to_bytes(ec.n_size, "big")
        assert sig == dsa.Sig.parse(sig_bytes, ec)
        assert dsa.verify(msg, Q, dsa.Sig.parse(sig_bytes.hex(), ec))

        sig_dict = sig.to_dict()
        assert sig_dict["r"] == f"{sig.r:x}"
        assert sig_dict["s"] == f"{sig.s:x}"
        assert sig_dict["ec"] == ec.name
        assert sig == dsa.Sig.from_dict(sig_dict)

        sig_json = sig.to_json()
        assert json.loads(sig_json)["ec"] == ec.name
        assert sig == dsa.Sig.from_json(sig_json)

    with pytest.raises(ECLadderValueError, match="invalid size: "):
        dsa.Sig.parse(b"\x01" * 63)

    # r = 0
    sig_bytes = b"\x00" * 32 + b"\x01" * 32
    with pytest.raises(OutOfRangeScalarError):
        dsa.Sig.parse(sig_bytes)
    sig = dsa.Sig.parse(sig_bytes, check_validity=False)
    assert sig.r == 0
    with pytest.raises(OutOfRangeScalarError):
        sig.serialize()


def test_gec() -> None:
    "Signing with an alternative hash function."
    ec = secp256k1
    hf = sha1

    msg = b"abc"
    q, Q = dsa.gen_keys(ec=ec)
    sig = dsa.sign(msg, q, ec=ec, hf=hf)
    dsa.assert_as_valid(msg, Q, sig, hf)
    assert dsa.verify(msg, Q, sig, hf)
    assert not dsa.verify(msg, Q, sig, sha256)

    # the nonce is sampled at random
    assert sig != dsa.sign(msg, q, ec=ec, hf=hf)


def test_randbits() -> None:
    "The random source can be injected."
    msg = "Satoshi Nakamoto".encode()
    q, Q = dsa.gen_keys(0x1)

    # the first candidate nonce is 0: it must be resampled
    values = iter([0, 0x2])

    def randbits(nbits: int) -> int:
        return next(values)

    sig = dsa.sign(msg, q, randbits=randbits)
    assert sig == dsa.sign(msg, q, 0x2)
    assert dsa.verify(msg, Q, sig)

    with pytest.raises(ECLadderRuntimeError, match="no acceptable candidate"):
        dsa.sign(msg, q, randbits=lambda nbits: 0)


def test_low_cardinality() -> None:
    """test low-cardinality curves for all msg/key pairs."""
    # pylint: disable=protected-access

    # only low cardinality test curves or it would take forever
    for ec in low_card_curves.values():
        for q in range(1, ec.n):  # all possible private keys
            Q = mult(q, ec.G, ec)  # public key
            for k in range(1, ec.n):  # all possible ephemeral keys
                K = mult(k, ec.G, ec)
                r = K[0] % ec.n
                k_inv = mod_inv(k, ec.n)
                for e in range(ec.n):  # all possible challenges
                    s = k_inv * (e + q * r) % ec.n
                    if r == 0 or s == 0:
                        err_msg = "failed to sign: "
                        with pytest.raises(ECLadderRuntimeError, match=err_msg):
                            dsa._sign_(e, q, k, ec)
                    else:
                        sig = dsa._sign_(e, q, k, ec)
                        assert r == sig.r
                        assert s == sig.s
                        assert ec == sig.ec
                        # valid signature must pass verification
                        dsa._assert_as_valid_(e, Q, r, s, ec)


def test_forge_hash_sig() -> None:
    """forging valid hash signatures"""
    # pylint: disable=protected-access

    ec = secp256k1

    # see https://twitter.com/pwuille/status/1063582706288586752
    # Satoshi's key
    key = "03 11db93e1dcdb8a016b49840f8c53bc1eb68a382e97b1482ecad7b148a6909a5c"
    Q = point_from_octets(key, ec)

    for u1, u2 in ((1, 2), (1234567890, 987654321)):
        # pick u1 and u2 at will
        R = double_mult(u2, Q, u1, ec.G, ec)
        r = R[0] % ec.n
        u2inv = mod_inv(u2, ec.n)
        s = r * u2inv % ec.n
        e = s * u1 % ec.n
        dsa._assert_as_valid_(e, Q, r, s, ec)
