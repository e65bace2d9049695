"""Allow ``python -m mccore``."""

import sys

from .cli import main

sys.exit(main())
