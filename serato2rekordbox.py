#!/usr/bin/env python3

import sys

from serato2rb.cli import main

sys.exit(main())
