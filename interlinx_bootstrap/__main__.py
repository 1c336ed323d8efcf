"""Allow `python -m interlinx_bootstrap`."""

import sys

from .main import main

sys.exit(main())
