"""Allow ``python -m ndvi_change``."""

import sys

from ndvi_change.cli import main

sys.exit(main())
