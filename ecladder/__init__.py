#!/usr/bin/env python3

# Copyright (C) 2017-2022 The ecladder developers
#
# This file is part of ecladder. It is subject to the license terms in the
# LICENSE file found in the top-level directory of this distribution.
#
# No part of ecladder including this file, may be copied, modified, propagated,
# or distributed except according to the terms contained in the LICENSE file.

"__init__ module for the ecladder package."

import logging

name = "ecladder"
__version__ = "2022.5.3"
__author__ = "The ecladder developers"
__author_email__ = "devs@ecladder.org"
__copyright__ = "Copyright (C) 2017-2022 The ecladder developers"
__license__ = "MIT License"

logging.getLogger(__name__).addHandler(logging.NullHandler())
