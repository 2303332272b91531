"""Entry point for ``python -m drawturn``."""

import sys

from .cli import main

sys.exit(main())
