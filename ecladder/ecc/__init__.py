#!/usr/bin/env python3

# Copyright (C) 2017-2022 The ecladder developers
#
# This file is part of ecladder. It is subject to the license terms in the
# LICENSE file found in the top-level directory of this distribution.
#
# No part of ecladder including this file, may be copied, modified, propagated,
# or distributed except according to the terms contained in the LICENSE file.

"__init__ module for the ecladder.ecc subpackage."
