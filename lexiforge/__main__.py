"""Allow ``python -m lexiforge``."""

import sys

from .cli import main

sys.exit(main())
