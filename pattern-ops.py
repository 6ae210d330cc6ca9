#!/usr/bin/env -S uv run --quiet --script
# /// script
# dependencies = [
#   "pyyaml",
#   "click>=8.0",
# ]
# ///
"""
pattern-ops - Install, validate and test validated patterns.
Run from a pattern checkout, e.g. ./common/pattern-ops.py operator-deploy
"""

from pattern_ops import cli

if __name__ == "__main__":
    cli()
