#!/usr/bin/env python3
"""
mineore CLI - Entry point for the mining layout planner.

This module allows running the planner as:
    python -m mineore scenario.json
    mineore scenario.json  (when installed via pip)
"""

from mineore.cli import main

if __name__ == "__main__":
    main()
