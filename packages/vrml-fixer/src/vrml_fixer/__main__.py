# SPDX-License-Identifier: MIT
"""Allow ``python -m vrml_fixer``."""

import sys

from vrml_fixer.cli import main

sys.exit(main())
