"""Run the scan overlay: ``python -m goop``."""
import sys

from goop.app import main

sys.exit(main())
