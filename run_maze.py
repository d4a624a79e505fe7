#!/usr/bin/env python3
"""
Launch script for the Q-learning maze with Qt scaling pinned.
The environment variables must be set before PySide6 is imported.
"""

import os
import sys

os.environ.setdefault('QT_AUTO_SCREEN_SCALE_FACTOR', '0')
os.environ.setdefault('QT_SCALE_FACTOR', '1')
os.environ.setdefault('QT_LOGGING_RULES', 'qt.qpa.backingstore=false')

from qmaze.__main__ import main

if __name__ == "__main__":
    sys.exit(main())
