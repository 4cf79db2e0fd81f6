#!/usr/bin/env python3
"""
pokerlog - Command Line Startup Script

Usage:
    python run.py record [--hero POS] [--stack BB]
    python run.py history list
"""

import sys

from pokerlog.cli import main


if __name__ == "__main__":
    sys.exit(main())
