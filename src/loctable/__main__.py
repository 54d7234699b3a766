"""Allow ``python -m loctable``."""

import sys

from loctable.cli import main

sys.exit(main())
