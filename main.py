"""
Runs vrotate from a source checkout: ``python main.py -i <path> [options]``.
"""
import sys

from vrotate.main import main

if __name__ == "__main__":
    sys.exit(main())
