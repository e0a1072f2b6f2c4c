#!/usr/bin/env python3

# Copyright (C) 2017-2022 The ecladder developers
#
# This file is part of ecladder. It is subject to the license terms in the
# LICENSE file found in the top-level directory of this distribution.
#
# No part of ecladder including this file, may be copied, modified, propagated,
# or distributed except according to the terms contained in the LICENSE file.
"Tests for the `ecladder.hashes` module."

import hashlib

from ecladder.hashes import reduce_to_hlen, split_digest


def test_reduce_to_hlen() -> None:
    msg = b"Satoshi Nakamoto"
    assert reduce_to_hlen(msg) == hashlib.sha256(msg).digest()
    assert reduce_to_hlen(msg.hex()) == hashlib.sha256(msg).digest()
    assert reduce_to_hlen(msg, hashlib.sha512) == hashlib.sha512(msg).digest()
    assert len(reduce_to_hlen(b"", hashlib.sha1)) == 20


def test_split_digest() -> None:
    data = b"\x00" * 64
    digest = hashlib.sha512(data).digest()

    first, second = split_digest(data)
    assert len(first) == len(second) == 32
    assert first + second == digest
    assert first != second

    first, second = split_digest(data, hashlib.sha256)
    assert first + second == hashlib.sha256(data).digest()
    assert len(first) == 16
