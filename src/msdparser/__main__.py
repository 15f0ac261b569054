#!/usr/bin/env python3
"""
Entry point for running the CLI as a module.

Usage:
    python -m msdparser [arguments]
"""

from msdparser.cli import main

if __name__ == "__main__":
    main()
