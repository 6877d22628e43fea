#!/usr/bin/env python3
#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Entry point for running blockmark as a module.

This allows the package to be executed as:
    python -m blockmark [arguments]
"""

import sys

from blockmark.cli import main

if __name__ == "__main__":
    sys.exit(main())
