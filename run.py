#!/usr/bin/env python3
"""
thumbnail entry point.

Resize the JPEGs of a folder with:

    python run.py --dst out --ratio 0.3

or keep sub-folders and use a fixed bounding box:

    python run.py --src photos --dst out --width 800 --height 600 --recursive

See `python run.py --help` for all flags.
"""

import sys

from thumbnail.cli import main


if __name__ == "__main__":
    sys.exit(main())
