#!/usr/bin/env python3
"""culprit - find the unit that causes a problem."""

from culprit.cli import main

if __name__ == "__main__":
    main()
