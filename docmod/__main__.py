"""Allow ``python -m docmod``."""

import sys

from .cli import main

main(sys.argv[1:])
