"""Allow ``python -m noiselab``."""

import sys

from noiselab.cli import main

sys.exit(main())
