import sys

from skyvoice.cli import main

sys.exit(main())
