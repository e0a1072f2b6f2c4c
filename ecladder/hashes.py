#!/usr/bin/env python3

# Copyright (C) 2017-2022 The ecladder developers
#
# This file is part of ecladder. It is subject to the license terms in the
# LICENSE file found in the top-level directory of this distribution.
#
# No part of ecladder including this file, may be copied, modified, propagated,
# or distributed except according to the terms contained in the LICENSE file.

"""Hash based helper functions."""

import hashlib
from typing import Tuple

from ecladder.alias import HashF, Octets
from ecladder.utils import bytes_from_octets


def reduce_to_hlen(msg: Octets, hf: HashF = hashlib.sha256) -> bytes:
    msg = bytes_from_octets(msg)
    # Step 4 of SEC 1 v.2 section 4.1.3
    h = hf()
    h.update(msg)
    return bytes(h.digest())


def split_digest(data: bytes, hf: HashF = hashlib.sha512) -> Tuple[bytes, bytes]:
    """Return the two halves of the hf digest of data.

    With SHA-512 (the default) the halves are two independent 32 bytes keys.
    """
    digest = reduce_to_hlen(data, hf)
    half = len(digest) // 2
    return digest[:half], digest[half:]
