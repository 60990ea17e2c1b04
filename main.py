#!/usr/bin/env python3
"""
CellForth - Interactive threaded-code Forth

Usage:
1. Interactive REPL:      python main.py
2. Run a Forth file:      python main.py file.fth
3. Evaluate an expression: python main.py -e ": sq dup * ; 7 sq ."

Add -v to log definitions and error resets.
"""

import sys

from cellforth.repl import main

if __name__ == "__main__":
    sys.exit(main())
