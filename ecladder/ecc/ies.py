#!/usr/bin/env python3

# Copyright (C) 2017-2022 The ecladder developers
#
# This file is part of ecladder. It is subject to the license terms in the
# LICENSE file found in the top-level directory of this distribution.
#
# No part of ecladder including this file, may be copied, modified, propagated,
# or distributed except according to the terms contained in the LICENSE file.

"""Elliptic Curve Integrated Encryption Scheme (ECIES).

Hybrid encryption: an ephemeral Diffie-Hellman key agreement
with the recipient public key yields the shared point S,
from which symmetric keys are derived:

    enc_key || mac_key = SHA-512(x_S || y_S)

both coordinates being big-endian ec.p_size bytes.
The message is encrypted with AES-256-CBC (PKCS#7 padding)
under a random 16 bytes IV,
then authenticated with HMAC-SHA256 over IV || ciphertext
(encrypt-then-MAC).

Decryption verifies the tag before any decryption is attempted.
"""

import hashlib
import hmac
import logging
import secrets
from dataclasses import InitVar, dataclass, field
from typing import Tuple, Type, TypeVar, Union

from Crypto.Cipher import AES
from Crypto.Util.Padding import pad, unpad
from dataclasses_json import DataClassJsonMixin, config

from ecladder.alias import Octets, Point, RandBits
from ecladder.ecc.curve import CURVES, Curve, mult, secp256k1
from ecladder.ecc.dh import gen_keys
from ecladder.ecc.sec_point import bytes_from_point, point_from_octets
from ecladder.exceptions import AuthenticationFailedError, ECLadderValueError
from ecladder.hashes import split_digest
from ecladder.to_prv_key import PrvKey, int_from_prv_key
from ecladder.to_pub_key import PubKey, assert_valid_pub_key, point_from_pub_key
from ecladder.utils import bytes_from_int, bytes_from_octets

logger = logging.getLogger(__name__)

IV_SIZE = AES.block_size
TAG_SIZE = hashlib.sha256().digest_size

_Ciphertext = TypeVar("_Ciphertext", bound="Ciphertext")

# JSON representation of binary fields as hex-strings
_HEX_BYTES = config(encoder=lambda v: v.hex(), decoder=bytes.fromhex)


def _point_encoder(Q: Point) -> Tuple[str, str]:
    return f"{Q[0]:x}", f"{Q[1]:x}"


def _point_decoder(v: Tuple[str, str]) -> Point:
    return int(v[0], 16), int(v[1], 16)


@dataclass(frozen=True)
class Ciphertext(DataClassJsonMixin):
    """ECIES ciphertext.

    The serialization is the concatenation
    SEC-uncompressed(ephemeral_pub_key) || iv || ciphertext || tag.
    """

    ephemeral_pub_key: Point = field(
        metadata=config(encoder=_point_encoder, decoder=_point_decoder)
    )
    iv: bytes = field(metadata=_HEX_BYTES)
    ciphertext: bytes = field(metadata=_HEX_BYTES)
    tag: bytes = field(metadata=_HEX_BYTES)
    ec: Curve = field(
        default=secp256k1,
        metadata=config(encoder=lambda ec: ec.name, decoder=lambda name: CURVES[name]),
    )
    check_validity: InitVar[bool] = True

    def __post_init__(self, check_validity: bool) -> None:
        if check_validity:
            self.assert_valid()

    def assert_valid(self) -> None:
        assert_valid_pub_key(self.ephemeral_pub_key, self.ec)

        if len(self.iv) != IV_SIZE:
            raise ECLadderValueError(f"invalid iv size: {len(self.iv)}")
        size = len(self.ciphertext)
        if size == 0 or size % AES.block_size:
            raise ECLadderValueError(f"invalid ciphertext size: {size}")
        if len(self.tag) != TAG_SIZE:
            raise ECLadderValueError(f"invalid tag size: {len(self.tag)}")

    def serialize(self, check_validity: bool = True) -> bytes:
        if check_validity:
            self.assert_valid()

        out = bytes_from_point(self.ephemeral_pub_key, self.ec, compressed=False)
        return out + self.iv + self.ciphertext + self.tag

    @classmethod
    def parse(
        cls: Type[_Ciphertext],
        data: Octets,
        ec: Curve = secp256k1,
        check_validity: bool = True,
    ) -> _Ciphertext:
        "Return a Ciphertext by parsing binary data."
        data = bytes_from_octets(data)

        key_size = 2 * ec.p_size + 1
        if len(data) < key_size + IV_SIZE + AES.block_size + TAG_SIZE:
            raise ECLadderValueError(f"ciphertext too short: {len(data)} bytes")

        Q = point_from_octets(data[:key_size], ec)
        iv = data[key_size : key_size + IV_SIZE]
        ciphertext = data[key_size + IV_SIZE : -TAG_SIZE]
        tag = data[-TAG_SIZE:]
        return cls(Q, iv, ciphertext, tag, ec, check_validity)


def kdf(S: Point, ec: Curve = secp256k1) -> Tuple[bytes, bytes]:
    "Return the (enc_key, mac_key) pair derived from the shared point."
    z = bytes_from_int(S[0], ec.p_size) + bytes_from_int(S[1], ec.p_size)
    return split_digest(z, hashlib.sha512)


def _tag(mac_key: bytes, iv: bytes, ciphertext: bytes) -> bytes:
    return hmac.new(mac_key, iv + ciphertext, hashlib.sha256).digest()


def encrypt(
    pub_key: PubKey,
    msg: Octets,
    ec: Curve = secp256k1,
    randbits: RandBits = secrets.randbits,
) -> Ciphertext:
    "Encrypt msg for the owner of the (validated) public key."

    Q_b = point_from_pub_key(pub_key, ec)
    msg = bytes_from_octets(msg)

    d_a, Q_a = gen_keys(ec=ec, randbits=randbits)
    enc_key, mac_key = kdf(mult(d_a, Q_b, ec), ec)

    iv = bytes_from_int(randbits(8 * IV_SIZE), IV_SIZE)
    cipher = AES.new(enc_key, AES.MODE_CBC, iv=iv)
    ciphertext = cipher.encrypt(pad(msg, AES.block_size))

    return Ciphertext(Q_a, iv, ciphertext, _tag(mac_key, iv, ciphertext), ec)


def decrypt(
    prv_key: PrvKey,
    ciphertext: Union[Ciphertext, Octets],
    ec: Curve = secp256k1,
) -> bytes:
    """Return the plaintext of a ciphertext addressed to prv_key.

    If the ciphertext is provided as Octets, it is parsed on ec;
    otherwise its own curve is used.
    AuthenticationFailedError is raised if the tag does not match,
    before any decryption.
    """

    if not isinstance(ciphertext, Ciphertext):
        ciphertext = Ciphertext.parse(ciphertext, ec)
    else:
        ciphertext.assert_valid()
    ec = ciphertext.ec

    d_b = int_from_prv_key(prv_key, ec)
    enc_key, mac_key = kdf(mult(d_b, ciphertext.ephemeral_pub_key, ec), ec)

    tag = _tag(mac_key, ciphertext.iv, ciphertext.ciphertext)
    if not hmac.compare_digest(tag, ciphertext.tag):
        logger.debug("ECIES authentication failed: tag mismatch")
        raise AuthenticationFailedError("authentication failed")

    cipher = AES.new(enc_key, AES.MODE_CBC, iv=ciphertext.iv)
    try:
        return unpad(cipher.decrypt(ciphertext.ciphertext), AES.block_size)
    except ValueError as e:
        raise ECLadderValueError("invalid padding") from e
