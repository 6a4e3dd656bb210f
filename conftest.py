"""
Pytest configuration shared by the unit tests.

The instrumenter ships flat modules under src/ (arns, functions, clients, ...);
src/ is put on sys.path so tests import them the same way the console script
does after installation.
"""

import os
import sys

SRC_DIR = os.path.join(os.path.dirname(__file__), "src")

if SRC_DIR not in sys.path:
    sys.path.insert(0, SRC_DIR)
