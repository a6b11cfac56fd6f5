"""Allow ``python -m src.cli`` execution (runs the profile command)."""

import sys

from src.cli.profile import main

sys.exit(main())
