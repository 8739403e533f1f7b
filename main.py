#!/usr/bin/env python3
"""
PodSync Entry Point Script

This script initializes the CLI handler and runs the requested command.
"""

import sys
from podsync.cli import CLIHandler

if __name__ == "__main__":
    if sys.version_info < (3, 8):
        sys.stderr.write("PodSync requires Python 3.8 or later.\n")
        sys.exit(1)

    sys.exit(CLIHandler().run())
