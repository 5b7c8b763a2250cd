#!/usr/bin/env python3
"""
Launcher for the bookprep tools when the package isn't installed.

Usage:
    python scripts/build.py parse lesson.md --html
    python scripts/build.py preprocess < manuscript.md > print.md
    python scripts/build.py links build/epub

Requires: PyYAML
"""

import os
import sys

# Ensure bookprep is importable from the scripts/ directory
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from bookprep.cli import main


if __name__ == "__main__":
    main()
