#!/usr/bin/env python3

# Copyright (C) 2017-2022 The ecladder developers
#
# This file is part of ecladder. It is subject to the license terms in the
# LICENSE file found in the top-level directory of this distribution.
#
# No part of ecladder including this file, may be copied, modified, propagated,
# or distributed except according to the terms contained in the LICENSE file.

"""Exception classes.

These are only meant to discriminate between Exceptions being raised
by ecladder from those raised by other codebase.

Users are usually better off just dealing with the regular
ValueError, TypeError, and RuntimeError
from which the ecladder versions are derived.

The more specific classes name the failure kinds
of key validation, signature verification, and decryption.
"""


class ECLadderValueError(ValueError):
    pass


class ECLadderTypeError(TypeError):
    pass


class ECLadderRuntimeError(RuntimeError):
    pass


class OutOfRangeScalarError(ECLadderValueError):
    "A caller-supplied scalar is outside its allowed range."


class PointNotOnCurveError(ECLadderValueError):
    "A coordinate pair does not satisfy the curve equation."


class IdentityRejectedError(ECLadderValueError):
    "The identity point was supplied where a public key was expected."


class InvalidSubgroupError(ECLadderValueError):
    "A point is on the curve but not in the subgroup generated by G."


class NoInverseError(ECLadderValueError):
    "Modular inverse of a value that is not coprime with the modulus."


class SignatureInvalidError(ECLadderRuntimeError):
    "ECDSA signature verification failed."


class AuthenticationFailedError(ECLadderRuntimeError):
    "ECIES tag verification failed: the ciphertext was not decrypted."
