#!/usr/bin/env python3
"""Lineview - A terminal text viewer.

Usage:
    python main.py [filename]

Controls:
    Arrow keys: Move cursor (wraps at line ends)
    Home/End: Beginning/end of line
    Page Up/Page Down: Move a screenful
    Ctrl-Q: Quit
"""

import sys
from lineview.__main__ import main


if __name__ == "__main__":
    sys.exit(main())
